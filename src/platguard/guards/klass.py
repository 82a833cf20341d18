"""
Class guards.

A guarded class is restricted to one platform, member by member. The class
object itself is kept so ``isinstance`` keeps working; instead its
``__init__`` is wrapped, and once the outermost ``__init__`` returns every
member of the new instance that carries no tag of its own is retrofitted:

- callables are checked with the method message when looked up, before
  the normal binding to the instance;
- plain values, properties and other data descriptors are checked with the
  property message when read.

Both gates live in a per-instance table consulted by the class's
``__getattribute__``, so copies keep calling methods on themselves.

Construction itself is never refused; the failure surfaces the first time a
guarded member is used on the wrong platform. Use
:class:`platguard.types.PlatformSpecificType` to refuse construction.
"""

import functools
import inspect
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Type, TypeVar

from platguard.context import GuardContext, resolve_context
from platguard.errors import GuardUsageError
from platguard.guards.markers import (
    GUARDED_ATTR,
    is_cross_platform_member,
    is_dunder,
    is_guarded,
    unwrap_method_type,
)
from platguard.platform import Platform, PlatformLike, to_target

logger = logging.getLogger(__name__)

C = TypeVar("C", bound=type)

# Instance __dict__ key holding the gates of retrofitted members
MEMBERS_KEY = "__platguard_members__"
EXEMPT_ATTR = "__platguard_exempt__"
HOOKS_ATTR = "__platguard_hooks__"
INIT_ATTR = "__platguard_init__"

_MISSING = object()

# Ids of instances whose outermost __init__ is still running
_building = threading.local()


@dataclass(frozen=True)
class MemberGuard:
    """Read (and optionally write) gate for one retrofitted member."""

    platform: Platform
    name: str
    class_name: str
    context: Optional[GuardContext] = None
    message_setting: str = "property_message"

    def __copy__(self) -> "MemberGuard":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "MemberGuard":
        return self

    def _check(self, ctx: GuardContext) -> None:
        if ctx.registry.is_cross_platform(self.class_name, self.name):
            return
        ctx.check(
            self.platform,
            getattr(ctx.config, self.message_setting),
            name=self.name,
            className=self.class_name,
        )

    def check_read(self) -> None:
        self._check(resolve_context(self.context))

    def check_write(self) -> None:
        ctx = resolve_context(self.context)
        if ctx.config.guard_writes:
            self._check(ctx)


def _building_ids() -> Set[int]:
    ids = getattr(_building, "ids", None)
    if ids is None:
        ids = _building.ids = set()
    return ids


def _scanned_classes(cls: type) -> List[type]:
    """Classes whose members are retrofitted: the MRO minus builtins."""
    return [klass for klass in cls.__mro__ if klass.__module__ != "builtins"]


def _is_data_descriptor(value: Any) -> bool:
    kind = type(value)
    return hasattr(kind, "__get__") and (hasattr(kind, "__set__") or hasattr(kind, "__delete__"))


def _member_names(instance: Any, classes: Iterable[type]) -> List[str]:
    names: Dict[str, None] = dict.fromkeys(vars(instance))
    for klass in classes:
        names.update(dict.fromkeys(vars(klass)))
    return [name for name in names if not is_dunder(name)]


def retrofit(instance: Any, context: Optional[GuardContext] = None) -> int:
    """
    Guard every untagged member of ``instance`` for its class's platform.

    A member is left alone when any class in the instance's MRO tags it as
    cross-platform or platform-specific, when the class guard lists it as
    exempt, or when its raw value is already guarded or exempt. The first
    guard applied to a member wins.

    Returns the number of members guarded.
    """
    cls = type(instance)
    platform: Optional[Platform] = getattr(cls, GUARDED_ATTR, None)
    if platform is None:
        raise GuardUsageError(f"{cls.__name__} is not a platform-specific class")

    ctx = resolve_context(context)
    classes = _scanned_classes(cls)
    exempt: Set[str] = set()
    for klass in classes:
        exempt.update(vars(klass).get(EXEMPT_ATTR, ()))

    state = vars(instance)
    members: Dict[str, MemberGuard] = state.setdefault(MEMBERS_KEY, {})
    guarded = 0

    for name in _member_names(instance, classes):
        if name in exempt or name in members:
            continue
        if any(ctx.registry.is_tagged(klass, name) for klass in classes):
            continue

        raw = inspect.getattr_static(instance, name, _MISSING)
        if raw is _MISSING or is_guarded(raw) or is_cross_platform_member(raw):
            continue

        if not _is_data_descriptor(raw) and callable(unwrap_method_type(raw)):
            message_setting = "method_message"
        else:
            message_setting = "property_message"
        members[name] = MemberGuard(platform, name, cls.__name__, context, message_setting)
        guarded += 1

    logger.debug("Retrofitted %d member(s) of %s for %s", guarded, cls.__name__, platform)
    return guarded


def _guarded_init(init: Callable[..., None], context: Optional[GuardContext]) -> Callable[..., None]:
    @functools.wraps(init)
    def __init__(self: Any, *args: Any, **kwargs: Any) -> None:
        building = _building_ids()
        key = id(self)
        outermost = key not in building
        if outermost:
            building.add(key)
        try:
            init(self, *args, **kwargs)
        finally:
            if outermost:
                building.discard(key)
        if outermost:
            retrofit(self, context)

    setattr(__init__, INIT_ATTR, True)
    return __init__


def _install_access_hooks(cls: type) -> None:
    if getattr(cls, HOOKS_ATTR, False):
        return

    original_getattribute = cls.__getattribute__
    original_setattr = cls.__setattr__

    def __getattribute__(self: Any, name: str) -> Any:
        if name[:2] != "__":
            members = object.__getattribute__(self, "__dict__").get(MEMBERS_KEY)
            if members:
                guard = members.get(name)
                if guard is not None:
                    guard.check_read()
        return original_getattribute(self, name)

    def __setattr__(self: Any, name: str, value: Any) -> None:
        if name[:2] != "__":
            members = object.__getattribute__(self, "__dict__").get(MEMBERS_KEY)
            if members:
                guard = members.get(name)
                if guard is not None:
                    guard.check_write()
        original_setattr(self, name, value)

    cls.__getattribute__ = __getattribute__  # type: ignore[assignment]
    cls.__setattr__ = __setattr__  # type: ignore[assignment]
    setattr(cls, HOOKS_ATTR, True)


def _install_subclass_hook(cls: type, context: Optional[GuardContext]) -> None:
    previous = vars(cls).get("__init_subclass__")

    def __init_subclass__(sub: type, **kwargs: Any) -> None:
        if previous is not None:
            previous.__get__(None, sub)(**kwargs)
        else:
            super(cls, sub).__init_subclass__(**kwargs)  # type: ignore[misc]
        own_init = vars(sub).get("__init__")
        if own_init is not None and not getattr(own_init, INIT_ATTR, False):
            sub.__init__ = _guarded_init(own_init, context)  # type: ignore[misc]

    cls.__init_subclass__ = classmethod(__init_subclass__)  # type: ignore[assignment]


def guard_class(
    platform: PlatformLike,
    cls: C,
    *,
    exempt: Iterable[str] = (),
    context: Optional[GuardContext] = None,
) -> C:
    """
    Restrict every untagged member of ``cls`` instances to ``platform``.

    Args:
        platform: Platform the class is restricted to
        cls: Class to guard; returned after modification
        exempt: Member names registered as cross-platform for ``cls``
        context: Guard context (process default if omitted)

    Raises:
        GuardUsageError: If ``cls`` is not a class or its instances have no
            ``__dict__``.
    """
    target = to_target(platform)
    if not isinstance(cls, type):
        raise GuardUsageError("platform_specific_class decorator should be applied on classes only.")
    if cls.__dictoffset__ == 0:
        raise GuardUsageError(
            f"Cannot guard {cls.__name__}: its instances have no __dict__",
            "remove __slots__ or add '__dict__' to them",
        )
    if GUARDED_ATTR in vars(cls):
        return cls

    exempt_names = frozenset(exempt)
    registry = resolve_context(context).registry
    for name in exempt_names:
        registry.mark_cross_platform(cls, name)

    setattr(cls, GUARDED_ATTR, target)
    setattr(cls, EXEMPT_ATTR, exempt_names)
    cls.__init__ = _guarded_init(cls.__init__, context)  # type: ignore[misc]
    _install_access_hooks(cls)
    _install_subclass_hook(cls, context)

    logger.debug("Guarded class %s for %s", cls.__name__, target)
    return cls


def platform_specific_class(
    platform: PlatformLike,
    exempt: Iterable[str] = (),
) -> Callable[[C], C]:
    """
    Class decorator restricting instances to ``platform``.

    Usage:
        @platform_specific_class("node", exempt=("name",))
        class FileCache:
            def __init__(self, name):
                self.name = name
                self.root = "/var/cache"
    """
    target = to_target(platform)
    exempt_names = tuple(exempt)

    def decorator(cls: C) -> C:
        return guard_class(target, cls, exempt=exempt_names)

    return decorator


def platform_of(cls: Type[Any]) -> Optional[Platform]:
    """Platform a guarded class is restricted to, or None."""
    return getattr(cls, GUARDED_ATTR, None)
