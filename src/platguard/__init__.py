# Copyright (c) 2024 Platguard Contributors
# MIT License

"""
Platguard: runtime platform guards.

Declare, member by member, which execution environment ("platform") code is
meant for and have violations fail loudly at call time:

    - ``web``: browser-hosted interpreters (Pyodide)
    - ``node``: server-side native interpreters

Features:
    - Method, property and class guards with cross-platform exemptions
    - Platform simulation for deterministic tests
    - YAML / environment configuration and rewordable failure messages

Guards only gate access; they never provide alternate implementations.
"""

from __future__ import annotations

from platguard.release import __version__, __author__, __codename__
from platguard.config import GuardConfig, load_config
from platguard.context import (
    GuardContext,
    configure,
    get_config,
    get_context,
    is_cross_platform,
    is_platform_specific,
    mark_cross_platform,
    mark_platform_specific,
    reset_context,
    set_config,
    set_context,
)
from platguard.errors import (
    ConfigError,
    GuardUsageError,
    NoHandlerForPlatform,
    PlatformMismatch,
    PlatguardError,
)
from platguard.guards import (
    cross_platform_method,
    cross_platform_property,
    guard_class,
    guard_method,
    guard_property,
    make_platform_specific,
    platform_specific_class,
    platform_specific_method,
    platform_specific_property,
)
from platguard.platform import Platform, TARGET_PLATFORMS
from platguard.platform.resolver import (
    assert_platform,
    get_current_platform,
    install_compat_shims,
    is_node,
    is_web,
    platform_specific_code,
    set_current_platform,
    simulate_platform,
    switch_platform,
)
from platguard.registry import TagRegistry
from platguard.types import NodeSpecificType, PlatformSpecificType, WebSpecificType

__all__ = [
    "__version__",
    "__author__",
    "__codename__",
    "ConfigError",
    "GuardConfig",
    "GuardContext",
    "GuardUsageError",
    "NoHandlerForPlatform",
    "NodeSpecificType",
    "Platform",
    "PlatformMismatch",
    "PlatformSpecificType",
    "PlatguardError",
    "TARGET_PLATFORMS",
    "TagRegistry",
    "WebSpecificType",
    "assert_platform",
    "configure",
    "cross_platform_method",
    "cross_platform_property",
    "get_config",
    "get_context",
    "get_current_platform",
    "guard_class",
    "guard_method",
    "guard_property",
    "install_compat_shims",
    "is_cross_platform",
    "is_node",
    "is_platform_specific",
    "is_web",
    "load_config",
    "make_platform_specific",
    "mark_cross_platform",
    "mark_platform_specific",
    "platform_specific_class",
    "platform_specific_code",
    "platform_specific_method",
    "platform_specific_property",
    "reset_context",
    "set_config",
    "set_context",
    "set_current_platform",
    "simulate_platform",
    "switch_platform",
]
