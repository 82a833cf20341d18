"""
Tag registry.

Records, per type name and member name, whether a member is explicitly
cross-platform (exempt from checks) or platform-specific. Pure bookkeeping:
nothing here enforces anything.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, Set, Union

logger = logging.getLogger(__name__)

TypeKey = Union[str, type]


def type_name_of(owner: TypeKey) -> str:
    """Registry key for a class or an already resolved type name."""
    if isinstance(owner, type):
        return owner.__name__
    return str(owner)


class TagRegistry:
    """
    Process-wide record of member tags.

    Entries are created lazily on first query or mark and are never pruned,
    except by :meth:`clear` for test isolation.
    """

    def __init__(self) -> None:
        self._cross_platform: Dict[str, Set[str]] = {}
        self._platform_specific: Dict[str, Set[str]] = {}
        self._lock = threading.RLock()

    def _members(self, table: Dict[str, Set[str]], owner: TypeKey) -> Set[str]:
        name = type_name_of(owner)
        members = table.get(name)
        if members is None:
            members = table[name] = set()
        return members

    def mark_cross_platform(self, owner: TypeKey, member: str) -> None:
        with self._lock:
            members = self._members(self._cross_platform, owner)
            if member not in members:
                members.add(member)
                logger.debug("Marked %s.%s as cross-platform", type_name_of(owner), member)

    def mark_platform_specific(self, owner: TypeKey, member: str) -> None:
        with self._lock:
            members = self._members(self._platform_specific, owner)
            if member not in members:
                members.add(member)
                logger.debug("Marked %s.%s as platform-specific", type_name_of(owner), member)

    def is_cross_platform(self, owner: TypeKey, member: str) -> bool:
        with self._lock:
            return member in self._members(self._cross_platform, owner)

    def is_platform_specific(self, owner: TypeKey, member: str) -> bool:
        with self._lock:
            return member in self._members(self._platform_specific, owner)

    def is_tagged(self, owner: TypeKey, member: str) -> bool:
        """True if the member carries either tag."""
        with self._lock:
            return self.is_cross_platform(owner, member) or self.is_platform_specific(owner, member)

    def known_types(self) -> Set[str]:
        """Type names that have an entry in either table."""
        with self._lock:
            return set(self._cross_platform) | set(self._platform_specific)

    def clear(self) -> None:
        """Forget every tag."""
        with self._lock:
            self._cross_platform.clear()
            self._platform_specific.clear()

    def __repr__(self) -> str:
        return (
            f"TagRegistry(cross_platform={sum(map(len, self._cross_platform.values()))}, "
            f"platform_specific={sum(map(len, self._platform_specific.values()))})"
        )
