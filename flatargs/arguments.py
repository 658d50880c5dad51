"""
Flatargs argument specifications.

Overview
- Positional: value bound by registration order (name, help, value).
- Optional: value introduced by a long name and an optional one-letter flag
  (name, flag, kind, help, values).
- OptionalType: FLAG (presence only), SINGLE (one value, repeating it is an
  error), APPEND (zero or more values in command-line order).

Introspection & representation
- ArgumentType gives every spec a __typename__, read-only properties for the
  names listed in __introspectable__, and stable __repr__/__rich_repr__.

Lifecycle
- Specs are created by the registry at setup time, written by Parser.parse
  (positional values in place, optional values through a working copy made
  with copy.copy) and read any number of times afterwards.
"""
import copy
import functools
import operator
import re
from enum import Enum

from .utils import *


class OptionalType(Enum):
    """
    kind of an optional argument.
    """
    FLAG = "flag"
    SINGLE = "single"
    APPEND = "append"


FLAG = OptionalType.FLAG
SINGLE = OptionalType.SINGLE
APPEND = OptionalType.APPEND


class ArgumentType(type):
    """
    Metaclass wiring introspection into argument specs.

    - __typename__ is the hyphenated lower-case class name ("positional").
    - every name in __introspectable__ becomes a read-only property over the
      backing field "_{name}" (containers are exposed as immutable views).
    - __repr__/__rich_repr__ list the introspectable fields in order.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: view(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Positional(metaclass=ArgumentType):
    """
    A positional argument.

    The name doubles as the display label in usage lines; `value` stays Unset
    until a parse binds it.
    """
    __introspectable__ = ("name", "help", "value")

    def __init__(self, name, /, help=""):
        if not isinstance(name, str):
            raise TypeError("positional name must be a string")
        if not isinstance(help, str):
            raise TypeError("positional help must be a string")
        self._name = name
        self._help = help
        self._value = Unset

    def bind(self, value, /):
        self._value = value


class Optional(metaclass=ArgumentType):
    """
    An optional argument, addressed by its reference name.

    `flag` is the one-letter alias (Unset when none was registered) and
    `values` the ordered, read-only tuple of recorded text values. A FLAG records
    the synthetic marker "true" when present.
    """
    __introspectable__ = ("name", "flag", "kind", "help", "values")

    def __init__(self, name, /, kind=SINGLE, help="", *, flag=Unset):
        if not isinstance(name, str):
            raise TypeError("optional name must be a string")
        if not isinstance(kind, OptionalType):
            raise TypeError("optional kind must be an OptionalType")
        if not isinstance(help, str):
            raise TypeError("optional help must be a string")
        if not isinstance(flag, str | Unset):
            raise TypeError("optional flag must be a string")
        self._name = name
        self._flag = flag
        self._kind = kind
        self._help = help
        self._values = []

    def alias(self, flag, /):
        if not isinstance(flag, str | Unset):
            raise TypeError("optional flag must be a string")
        self._flag = flag

    def record(self, value, /):
        self._values.append(value)

    def __copy__(self):
        # values are the only mutable part; the copy starts with its own list
        clone = type(self).__new__(type(self))
        clone.__dict__.update(self.__dict__)
        clone._values = copy.copy(self._values)
        return clone

    def blank(self):
        """
        Return a copy of this spec with no recorded values.
        """
        clone = copy.copy(self)
        clone._values.clear()
        return clone


__all__ = (
    "OptionalType",
    "FLAG",
    "SINGLE",
    "APPEND",
    "Positional",
    "Optional",
)
