"""
Property guards.

Guarded properties are data descriptors. Reads assert the declared platform;
writes always succeed unless the ``guard_writes`` setting is on.
"""

from typing import Any, Optional, Type

from platguard.context import GuardContext, resolve_context
from platguard.errors import GuardUsageError
from platguard.platform import Platform, PlatformLike, to_target


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class _StoredAttribute:
    """Per-instance value storage shared by the property descriptors."""

    def __init__(self, default: Any = MISSING, context: Optional[GuardContext] = None):
        self.default = default
        self.name: Optional[str] = None
        self.owner_name: Optional[str] = None
        self._context = context

    @property
    def context(self) -> GuardContext:
        return resolve_context(self._context)

    def __set_name__(self, owner: Type[Any], name: str) -> None:
        self.name = name
        self.owner_name = owner.__name__

    def attach(self, owner: Type[Any], name: str) -> "_StoredAttribute":
        """Install on ``owner`` after class creation."""
        setattr(owner, name, self)
        self.__set_name__(owner, name)
        return self

    def _require_name(self) -> str:
        if self.name is None:
            raise GuardUsageError(
                f"{type(self).__name__} must be assigned in a class body or attached with attach()"
            )
        return self.name

    def _load(self, instance: Any) -> Any:
        name = self._require_name()
        try:
            return instance.__dict__[name]
        except KeyError:
            if self.default is MISSING:
                raise AttributeError(
                    f"{type(instance).__name__!r} object has no attribute {name!r}"
                ) from None
            return self.default

    def _store(self, instance: Any, value: Any) -> None:
        instance.__dict__[self._require_name()] = value

    def __delete__(self, instance: Any) -> None:
        name = self._require_name()
        try:
            del instance.__dict__[name]
        except KeyError:
            raise AttributeError(name) from None


class PlatformProperty(_StoredAttribute):
    """
    A property readable only on one platform.

    The (owner, name) pair is registered as platform-specific when the
    descriptor is bound to its class, unless it is already cross-platform.
    A cross-platform tag is honoured on every access, so it wins even when
    declared later.
    """

    def __init__(
        self,
        platform: PlatformLike,
        default: Any = MISSING,
        context: Optional[GuardContext] = None,
    ):
        super().__init__(default, context)
        self.platform: Platform = to_target(platform)

    @property
    def __platguard_platform__(self) -> Platform:
        return self.platform

    def __set_name__(self, owner: Type[Any], name: str) -> None:
        super().__set_name__(owner, name)
        registry = self.context.registry
        if not registry.is_cross_platform(owner, name):
            registry.mark_platform_specific(owner, name)

    def _exempt(self, ctx: GuardContext) -> bool:
        return ctx.registry.is_cross_platform(self.owner_name or "", self._require_name())

    def _check(self, ctx: GuardContext) -> None:
        ctx.check(
            self.platform,
            ctx.config.property_message,
            name=self.name,
            className=self.owner_name,
        )

    def __get__(self, instance: Any, owner: Optional[Type[Any]] = None) -> Any:
        if instance is None:
            return self
        ctx = self.context
        if not self._exempt(ctx):
            self._check(ctx)
        return self._load(instance)

    def __set__(self, instance: Any, value: Any) -> None:
        ctx = self.context
        if ctx.config.guard_writes and not self._exempt(ctx):
            self._check(ctx)
        self._store(instance, value)

    def get(self, instance: Any) -> Any:
        return self.__get__(instance, type(instance))

    def set(self, instance: Any, value: Any) -> None:
        self.__set__(instance, value)

    def __repr__(self) -> str:
        return f"PlatformProperty({self.platform.value!r}, name={self.name!r})"


class CrossPlatformProperty(_StoredAttribute):
    """An ordinary attribute explicitly exempt from platform checks."""

    __platguard_cross_platform__ = True

    def __set_name__(self, owner: Type[Any], name: str) -> None:
        super().__set_name__(owner, name)
        self.context.registry.mark_cross_platform(owner, name)

    def __get__(self, instance: Any, owner: Optional[Type[Any]] = None) -> Any:
        if instance is None:
            return self
        return self._load(instance)

    def __set__(self, instance: Any, value: Any) -> None:
        self._store(instance, value)

    def __repr__(self) -> str:
        return f"CrossPlatformProperty(name={self.name!r})"


def guard_property(
    platform: PlatformLike,
    initial: Any = MISSING,
    *,
    context: Optional[GuardContext] = None,
) -> PlatformProperty:
    """Create a property readable only on ``platform``, starting at ``initial``."""
    return PlatformProperty(platform, initial, context)


def platform_specific_property(platform: PlatformLike, default: Any = MISSING) -> PlatformProperty:
    """
    Declare a property readable only on ``platform``.

    Usage:
        class Session:
            cookie_jar = platform_specific_property("web", default=None)
    """
    return PlatformProperty(platform, default)


def cross_platform_property(default: Any = MISSING) -> CrossPlatformProperty:
    """Declare a property exempt from platform checks."""
    return CrossPlatformProperty(default)
