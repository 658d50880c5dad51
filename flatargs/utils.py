"""
Flatargs utilities (internal helpers).

Overview
- UnsetType / Unset
  • Singleton sentinel for “argument not provided”, distinct from None and from
    legitimate falsey values such as "" or 0 (both are valid accessor defaults).

- coalesce(value, default=None)
  • Materialize Unset into a concrete default, preserving every other value.

- rename(callable, name) / @rename("name")
  • Give generated callables stable __name__/__qualname__ for readable tracebacks.

- view("attr")
  • Read-only property over a private backing field (self._attr); containers are
    handed out as immutable views so registry state cannot be mutated through
    the public surface.

Names outside __all__ are internal.
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Sentinel type for values that were not provided.

    - bool(Unset) is False, repr(Unset) is "Unset".
    - UnsetType() always returns the same instance.
    - The type cannot be subclassed.
    """

    def __or__(self, other, /):
        """
        Allow `str | Unset` in isinstance checks and annotations.
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return `default` when `object` is Unset, otherwise `object` unchanged.

    None, 0, "" and other falsey values are preserved:
    - coalesce(Unset, "x") -> "x"
    - coalesce("", "x")    -> ""
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set __name__/__qualname__ on a callable, or build a decorator that does it.

    - rename(callable, name) -> callable
    - rename(name)           -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            callable.__qualname__ = name
            callable.__name__ = name
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def freeze(object, /):
    """
    Return a shallow read-only view of a container.

    - Sequence (non-str) → tuple
    - Mapping            → MappingProxyType
    - Set                → frozenset
    - anything else      → unchanged
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    if isinstance(object, Mapping):
        return MappingProxyType(object)
    if isinstance(object, Set):
        return frozenset(object)
    return object


def view(name, /):
    """
    Build a read-only property mirroring the backing field "_{name}".
    """
    if not isinstance(name, str):
        raise TypeError("view() argument must be a string")

    @rename(name)
    def getter(self):
        return freeze(getattr(self, "_" + name))

    return property(getter)


Unset = UnsetType()
"""
Singleton “not provided” marker; see UnsetType.
"""


__all__ = (
    "UnsetType",
    "Unset",
    "coalesce",
    "rename",
    "freeze",
    "view",
)
