"""
Method and function guards.

A guarded callable asserts the declared platform on every call and then
delegates to the original with the same receiver and arguments.
"""

import functools
from typing import Any, Callable, Optional, TypeVar

from platguard.context import GuardContext, resolve_context
from platguard.errors import GuardUsageError
from platguard.guards.markers import (
    CROSS_PLATFORM_ATTR,
    GUARDED_ATTR,
    is_cross_platform_member,
    is_guarded,
    owner_name,
    unwrap_method_type,
)
from platguard.platform import PlatformLike, to_target

F = TypeVar("F", bound=Callable[..., Any])


def guard_method(
    platform: PlatformLike,
    fn: F,
    *,
    type_name: Optional[str] = None,
    name: Optional[str] = None,
    message_setting: str = "method_message",
    context: Optional[GuardContext] = None,
) -> F:
    """
    Wrap ``fn`` so that every call asserts ``platform`` first.

    Functions marked cross-platform and functions that are already guarded
    are returned unchanged. staticmethod and classmethod objects are
    wrapped inside and re-wrapped.

    Args:
        platform: Platform the callable is restricted to
        fn: Function, bound method, staticmethod or classmethod
        type_name: Registry scope; derived from ``fn.__qualname__`` if omitted
        name: Member name used in the failure message
        message_setting: Config attribute holding the failure message template
        context: Guard context (process default if omitted)
    """
    target = to_target(platform)

    if isinstance(fn, (staticmethod, classmethod)):
        inner = guard_method(
            target, fn.__func__,
            type_name=type_name, name=name,
            message_setting=message_setting, context=context,
        )
        return fn if inner is fn.__func__ else type(fn)(inner)  # type: ignore[return-value]

    if not callable(fn):
        raise GuardUsageError("platform_specific_method decorator should be applied on methods only.")

    if is_cross_platform_member(fn) or is_guarded(fn):
        return fn

    member = name or getattr(fn, "__name__", repr(fn))
    scope = type_name if type_name is not None else owner_name(fn)

    @functools.wraps(fn)
    def guarded(*args: Any, **kwargs: Any) -> Any:
        ctx = resolve_context(context)
        if not scope or not ctx.registry.is_cross_platform(scope, member):
            ctx.check(target, getattr(ctx.config, message_setting), name=member)
        return fn(*args, **kwargs)

    setattr(guarded, GUARDED_ATTR, target)
    return guarded  # type: ignore[return-value]


def platform_specific_method(platform: PlatformLike) -> Callable[[F], F]:
    """
    Decorator restricting a method to ``platform``.

    Usage:
        class Storage:
            @platform_specific_method("node")
            def flush(self): ...
    """
    target = to_target(platform)

    def decorator(fn: F) -> F:
        return guard_method(target, fn)

    return decorator


def make_platform_specific(platform: PlatformLike, func: F) -> F:
    """Restrict a free function to ``platform``."""
    return guard_method(platform, func, type_name="", message_setting="function_message")


def cross_platform_method(context: Optional[GuardContext] = None) -> Callable[[F], F]:
    """
    Decorator exempting a method from every platform check.

    Takes precedence over platform_specific_method whichever is applied
    first, and stops platform_specific_class from wrapping the method.
    """

    def decorator(fn: F) -> F:
        method_type = type(fn) if isinstance(fn, (staticmethod, classmethod)) else None
        original = unwrap_method_type(fn)
        while is_guarded(original) and hasattr(original, "__wrapped__"):
            original = original.__wrapped__
        try:
            setattr(original, CROSS_PLATFORM_ATTR, True)
        except AttributeError:
            raise GuardUsageError(
                f"cross_platform_method cannot mark {original!r}"
            ) from None

        scope = owner_name(original)
        if scope is not None:
            resolve_context(context).registry.mark_cross_platform(scope, original.__name__)
        return method_type(original) if method_type else original  # type: ignore[return-value]

    return decorator
