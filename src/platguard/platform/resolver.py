"""
Current-platform resolution and the helpers built on it.

Every function accepts an optional ``context``; the process-wide context is
used when it is omitted.
"""

import builtins
import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, Mapping, Optional, TypeVar

from platguard.context import GuardContext, resolve_context
from platguard.errors import NoHandlerForPlatform
from platguard.messages import render_message
from platguard.platform import Platform, PlatformLike, to_platform, to_target

logger = logging.getLogger(__name__)

R = TypeVar("R")


def get_current_platform(context: Optional[GuardContext] = None) -> Platform:
    """
    Determine the platform the code is running on.

    Resolution order: simulated platform, browser-like global context
    (``web``), server runtime version marker (``node``), else ``unknown``.
    """
    return resolve_context(context).current_platform()


def set_current_platform(
    platform: Optional[PlatformLike],
    context: Optional[GuardContext] = None,
) -> bool:
    """Simulate ``platform``, or clear the simulation with ``None``."""
    return resolve_context(context).simulate(platform)


@contextmanager
def simulate_platform(
    platform: Optional[PlatformLike],
    context: Optional[GuardContext] = None,
) -> Iterator[Platform]:
    """Simulate ``platform`` inside a ``with`` block, then restore."""
    ctx = resolve_context(context)
    with ctx.simulating(platform):
        yield ctx.current_platform()


def assert_platform(
    target: PlatformLike,
    message: Optional[str] = None,
    context: Optional[GuardContext] = None,
) -> None:
    """
    Assert the current platform is ``target``.

    Raises:
        PlatformMismatch: with ``message``, or
            "This code should only run in a {target} environment."
    """
    resolve_context(context).assert_platform(target, message)


def is_web(context: Optional[GuardContext] = None) -> bool:
    return get_current_platform(context) == Platform.WEB


def is_node(context: Optional[GuardContext] = None) -> bool:
    return get_current_platform(context) == Platform.NODE


def platform_specific_code(
    target: PlatformLike,
    code: Callable[[], R],
    context: Optional[GuardContext] = None,
) -> Optional[R]:
    """Run ``code`` only on ``target``; return its result, else None."""
    ctx = resolve_context(context)
    if not ctx.config.enabled or ctx.current_platform() == to_target(target):
        return code()
    return None


def switch_platform(
    mapping: Mapping[PlatformLike, Callable[[], Any]],
    context: Optional[GuardContext] = None,
) -> Any:
    """
    Call the zero-argument function registered for the current platform.

    Keys may be :class:`Platform` members or their names, ``unknown``
    included.

    Raises:
        NoHandlerForPlatform: If no function is registered for the platform.
    """
    ctx = resolve_context(context)
    current = ctx.current_platform()
    handlers = {to_platform(key): fn for key, fn in mapping.items()}
    fn = handlers.get(current)
    if fn is None:
        raise NoHandlerForPlatform(
            current.value,
            render_message(ctx.config.switch_message, current=current),
        )
    return fn()


class HTMLElement:
    """Placeholder for the browser-only ``HTMLElement`` global."""


def install_compat_shims(
    namespace: Any = builtins,
    context: Optional[GuardContext] = None,
) -> bool:
    """
    Install placeholders for browser-only globals on the ``node`` platform.

    Code that introspects for ``HTMLElement`` can then run outside a
    browser. Call once during application start-up; this never runs on
    import. Returns True if a placeholder was installed.
    """
    if get_current_platform(context) != Platform.NODE:
        return False
    if hasattr(namespace, "HTMLElement"):
        return False
    setattr(namespace, "HTMLElement", HTMLElement)
    logger.debug("Installed HTMLElement placeholder on %r", namespace)
    return True
