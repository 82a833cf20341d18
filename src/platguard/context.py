"""
Guard context.

Holds the state every guard consults: configuration, the tag registry and
the simulated-platform override. A process-wide default context is used
unless a guard is handed its own.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from platguard.config import GuardConfig
from platguard.errors import PlatformMismatch
from platguard.messages import render_message
from platguard.platform import Platform, PlatformLike, detect_platform, to_platform, to_target
from platguard.registry import TagRegistry

logger = logging.getLogger(__name__)


class GuardContext:
    """
    Configuration, tag registry and simulated platform for a set of guards.

    The simulated platform is a single value, not a stack: the last write
    wins and callers reset it explicitly.
    """

    def __init__(
        self,
        config: Optional[GuardConfig] = None,
        registry: Optional[TagRegistry] = None,
    ):
        self.config = config or GuardConfig()
        self.registry = registry or TagRegistry()
        self._simulated: Optional[Platform] = self.config.simulated_platform
        self._lock = threading.RLock()

    @property
    def simulated_platform(self) -> Optional[Platform]:
        with self._lock:
            return self._simulated

    def current_platform(self) -> Platform:
        """Simulated platform if set, else the detected one."""
        with self._lock:
            simulated = self._simulated
        if simulated is not None:
            return simulated
        return detect_platform()

    def simulate(self, platform: Optional[PlatformLike]) -> bool:
        """
        Set or clear (``None``) the simulated platform.

        Returns True if a simulation is active afterwards.
        """
        value = to_platform(platform) if platform is not None else None
        with self._lock:
            self._simulated = value
        logger.debug("Simulated platform set to %s", value)
        return value is not None

    @contextmanager
    def simulating(self, platform: Optional[PlatformLike]) -> Iterator["GuardContext"]:
        """Simulate ``platform`` for the duration of a ``with`` block."""
        with self._lock:
            previous = self._simulated
        self.simulate(platform)
        try:
            yield self
        finally:
            with self._lock:
                self._simulated = previous

    def check(self, target: PlatformLike, template: str, **variables: Any) -> None:
        """
        Raise PlatformMismatch unless the current platform is ``target``.

        ``template`` is rendered with ``platform`` and ``current`` plus any
        extra variables. Nothing happens while guards are disabled.
        """
        if not self.config.enabled:
            return
        target = to_target(target)
        current = self.current_platform()
        if current != target:
            message = render_message(template, platform=target, current=current, **variables)
            raise PlatformMismatch(message, target=target.value, current=current.value)

    def assert_platform(self, target: PlatformLike, message: Optional[str] = None) -> None:
        """Raise PlatformMismatch with ``message`` (or the default) on a mismatch."""
        if not self.config.enabled:
            return
        target = to_target(target)
        current = self.current_platform()
        if current != target:
            if not message:
                message = render_message(self.config.assert_message, platform=target, current=current)
            raise PlatformMismatch(message, target=target.value, current=current.value)

    def reset(self) -> None:
        """Clear the simulated platform and every registry entry."""
        with self._lock:
            self._simulated = self.config.simulated_platform
            self.registry.clear()

    def __repr__(self) -> str:
        return f"GuardContext(simulated={self._simulated}, config={self.config!r})"


_context_lock = threading.Lock()
_context: Optional[GuardContext] = None


def get_context() -> GuardContext:
    """
    Get the process-wide guard context.

    Built on first use from the PLATGUARD_* environment variables.
    """
    global _context
    if _context is None:
        with _context_lock:
            if _context is None:
                _context = GuardContext(GuardConfig.from_env())
                logger.debug("Created default guard context %r", _context)
    return _context


def set_context(context: GuardContext) -> Optional[GuardContext]:
    """Replace the process-wide guard context, returning the previous one."""
    global _context
    with _context_lock:
        previous, _context = _context, context
    return previous


def reset_context(config: Optional[GuardConfig] = None) -> GuardContext:
    """Install and return a fresh process-wide context."""
    context = GuardContext(config)
    set_context(context)
    return context


def resolve_context(context: Optional[GuardContext]) -> GuardContext:
    return context if context is not None else get_context()


def get_config() -> GuardConfig:
    """Get the configuration of the process-wide context."""
    return get_context().config


def set_config(config: GuardConfig) -> None:
    """
    Set the configuration of the process-wide context.

    A changed ``simulated_platform`` is applied to the context.
    """
    context = get_context()
    previous, context.config = context.config, config
    if config.simulated_platform != previous.simulated_platform:
        context.simulate(config.simulated_platform)


def configure(**kwargs: Any) -> GuardConfig:
    """Update settings of the process-wide context."""
    context = get_context()
    context.config = context.config.merged(kwargs)
    if "simulated_platform" in kwargs:
        context.simulate(context.config.simulated_platform)
    return context.config


def mark_cross_platform(type_name: Any, member_name: str) -> None:
    """Exempt ``type_name.member_name`` from platform checks."""
    get_context().registry.mark_cross_platform(type_name, member_name)


def mark_platform_specific(type_name: Any, member_name: str) -> None:
    get_context().registry.mark_platform_specific(type_name, member_name)


def is_cross_platform(type_name: Any, member_name: str) -> bool:
    return get_context().registry.is_cross_platform(type_name, member_name)


def is_platform_specific(type_name: Any, member_name: str) -> bool:
    return get_context().registry.is_platform_specific(type_name, member_name)
