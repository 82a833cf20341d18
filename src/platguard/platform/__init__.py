"""
Platform identifiers and real environment detection.

Two target platforms exist: ``web`` (a browser-hosted interpreter such as
Pyodide) and ``node`` (a server-side native interpreter). ``unknown`` is
reported when neither can be recognised.
"""

import builtins
import enum
import platform as _platform
import sys
from typing import Optional, Union

from platguard.errors import GuardUsageError


class Platform(str, enum.Enum):
    """An execution environment."""

    WEB = "web"
    NODE = "node"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


# Platforms a member may be restricted to
TARGET_PLATFORMS = frozenset({Platform.WEB, Platform.NODE})

# Interpreter platforms that run inside a browser or another sandboxed host
BROWSER_SYS_PLATFORMS = frozenset({"emscripten"})
SANDBOX_SYS_PLATFORMS = frozenset({"emscripten", "wasi"})

PlatformLike = Union[Platform, str]


def to_platform(value: PlatformLike) -> Platform:
    """Coerce a platform name or member to :class:`Platform`."""
    if isinstance(value, Platform):
        return value
    try:
        return Platform(str(value).lower())
    except ValueError:
        raise GuardUsageError(f"Unknown platform: {value!r}") from None


def to_target(value: PlatformLike) -> Platform:
    """Coerce ``value`` to a platform a member can be restricted to."""
    platform = to_platform(value)
    if platform not in TARGET_PLATFORMS:
        raise GuardUsageError(
            f"Cannot restrict code to platform {platform.value!r}",
            "expected one of: node, web",
        )
    return platform


def has_browser_context() -> bool:
    """Check for a browser-like global context."""
    if sys.platform in BROWSER_SYS_PLATFORMS:
        return True
    return hasattr(builtins, "window")


def runtime_version() -> Optional[str]:
    """
    Return the server-side runtime version marker.

    Sandboxed interpreters (browser, WASI) have no such marker.
    """
    if sys.platform in SANDBOX_SYS_PLATFORMS:
        return None
    return _platform.python_version() or None


def detect_platform() -> Platform:
    """Detect the real platform, ignoring any simulation override."""
    if has_browser_context():
        return Platform.WEB
    if runtime_version() is not None:
        return Platform.NODE
    return Platform.UNKNOWN
