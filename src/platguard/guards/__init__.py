"""
Platform guards for methods, properties and classes.

Each guard checks the current platform at use time and raises
:class:`platguard.errors.PlatformMismatch` on a mismatch.
"""

from platguard.guards.klass import (
    MemberGuard,
    guard_class,
    platform_of,
    platform_specific_class,
    retrofit,
)
from platguard.guards.markers import is_cross_platform_member, is_guarded
from platguard.guards.method import (
    cross_platform_method,
    guard_method,
    make_platform_specific,
    platform_specific_method,
)
from platguard.guards.property import (
    MISSING,
    CrossPlatformProperty,
    PlatformProperty,
    cross_platform_property,
    guard_property,
    platform_specific_property,
)

__all__ = [
    "MISSING",
    "CrossPlatformProperty",
    "MemberGuard",
    "PlatformProperty",
    "cross_platform_method",
    "cross_platform_property",
    "guard_class",
    "guard_method",
    "guard_property",
    "is_cross_platform_member",
    "is_guarded",
    "make_platform_specific",
    "platform_of",
    "platform_specific_class",
    "platform_specific_method",
    "platform_specific_property",
    "retrofit",
]
