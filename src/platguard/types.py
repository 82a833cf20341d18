"""
Base types whose construction is refused off their platform.

Unlike platform_specific_class, which lets an instance exist anywhere and
fails on first use of a member, these assert the platform in ``__init__``.
"""

from typing import Optional

from platguard.context import GuardContext, resolve_context
from platguard.platform import Platform, PlatformLike, to_target


class PlatformSpecificType:
    """
    Base class for objects that may only be created on one platform.

    Raises:
        PlatformMismatch: From ``__init__`` when the current platform is not
            ``target_platform``.
    """

    def __init__(self, target_platform: PlatformLike, context: Optional[GuardContext] = None):
        self.target_platform: Platform = to_target(target_platform)
        resolve_context(context).assert_platform(self.target_platform)


class NodeSpecificType(PlatformSpecificType):
    """Can only be instantiated on the ``node`` platform."""

    def __init__(self, context: Optional[GuardContext] = None):
        super().__init__(Platform.NODE, context)


class WebSpecificType(PlatformSpecificType):
    """Can only be instantiated on the ``web`` platform."""

    def __init__(self, context: Optional[GuardContext] = None):
        super().__init__(Platform.WEB, context)
