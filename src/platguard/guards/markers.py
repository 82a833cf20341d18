"""Attribute markers carried by guarded and exempt members."""

from typing import Any, Optional

from platguard.platform import Platform

# Set on guard wrappers and guarded descriptors; holds the declared platform
GUARDED_ATTR = "__platguard_platform__"
# Set on members explicitly exempted from platform checks
CROSS_PLATFORM_ATTR = "__platguard_cross_platform__"


def unwrap_method_type(obj: Any) -> Any:
    """The function behind a staticmethod or classmethod, else ``obj``."""
    if isinstance(obj, (staticmethod, classmethod)):
        return obj.__func__
    return obj


def guarded_platform(obj: Any) -> Optional[Platform]:
    """The platform ``obj`` is already guarded for, if any."""
    return getattr(unwrap_method_type(obj), GUARDED_ATTR, None)


def is_guarded(obj: Any) -> bool:
    return guarded_platform(obj) is not None


def is_cross_platform_member(obj: Any) -> bool:
    return bool(getattr(unwrap_method_type(obj), CROSS_PLATFORM_ATTR, False))


def owner_name(fn: Any) -> Optional[str]:
    """
    Name of the class a function was defined in, from its qualified name.

    ``None`` for module-level and nested functions.
    """
    qualname = getattr(fn, "__qualname__", "")
    parts = qualname.split(".")
    if len(parts) < 2 or parts[-2] == "<locals>":
        return None
    return parts[-2]


def is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")
