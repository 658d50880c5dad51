"""
Argument registries.

A Registry owns three identifier spaces that must stay pairwise disjoint:
positional names, optional reference names and flag characters. Every
registration is validated against all three before anything is stored, so a
rejected call leaves the registry exactly as it was.

State
- positionals: name → Positional, in registration (binding) order.
- optionals:   reference name → Optional, in registration (help) order.
- flags:       flag character → reference name.

The built-in help switch (-h/--help) is registered by the Parser, not here.
"""
from .arguments import Positional, Optional, OptionalType, SINGLE
from .faults import InvalidNameError, DuplicateNameError, FlagConflictError
from .names import valid_positional_name, format_long_name, format_flag_name
from .utils import *


class Registry:
    positionals = view("positionals")
    optionals = view("optionals")
    flags = view("flags")

    def __init__(self):
        self._positionals = {}
        self._optionals = {}
        self._flags = {}

    def _taken(self, name):
        return name in self._positionals or name in self._optionals or name in self._flags

    def register_positional(self, name, /, help=""):
        """
        Append a positional argument.

        Raises InvalidNameError when `name` is not a valid positional name and
        DuplicateNameError when it is already used by any argument.
        """
        if not valid_positional_name(name):
            raise InvalidNameError(
                "invalid positional argument name %r" % (name,),
                name=name,
                hint="start with a letter, digit or '_' and continue with letters, digits, '_' or '-'",
            )
        if name in self._positionals:
            raise DuplicateNameError(
                "duplicate positional argument name %r" % name,
                name=name,
                hint="pick a name that is not registered yet",
            )
        if self._taken(name):
            raise DuplicateNameError(
                "positional argument name conflicts with optional argument name %r" % name,
                name=name,
                hint="pick a name that no option or flag uses",
            )
        self._positionals[name] = Positional(name, help)

    def register_optional(self, *names, kind=SINGLE, help=""):
        """
        Register an optional argument and return its reference name.

        Forms
        - register_optional("--name", kind=..., help=...)
        - register_optional("-n", "--name", kind=..., help=...)

        The flag is validated before the long name, and bound only once the long
        name has been stored.
        """
        if not isinstance(kind, OptionalType):
            raise TypeError("register_optional() 'kind' must be an OptionalType")

        match names:
            case (long_name,):
                return self._register_long(long_name, kind, help)
            case (flag, long_name):
                if not (character := format_flag_name(flag)):
                    raise InvalidNameError(
                        "invalid flag name %r" % (flag,),
                        name=flag,
                        hint="flags are a '-' followed by one letter or '_' (for example: -v)",
                    )
                if character in self._flags or character in self._positionals:
                    raise FlagConflictError(
                        "duplicate flag name %r" % flag,
                        name=flag,
                        hint="pick another letter for this flag",
                    )
                reference = self._register_long(long_name, kind, help)
                self._flags[character] = reference
                self._optionals[reference].alias(character)
                return reference
            case _:
                raise TypeError("register_optional() takes 1 to 2 names but %d were given" % len(names))

    def _register_long(self, long_name, kind, help):
        if not (reference := format_long_name(long_name)):
            raise InvalidNameError(
                "invalid optional argument name %r" % (long_name,),
                name=long_name,
                hint="long names are '-' or '--' followed by two or more characters, not starting with a digit",
            )
        if reference in self._optionals:
            raise DuplicateNameError(
                "duplicate optional argument name %r" % reference,
                name=reference,
                hint="pick a long name that is not registered yet",
            )
        if self._taken(reference):
            raise DuplicateNameError(
                "optional argument name conflicts with positional argument name %r" % reference,
                name=reference,
                hint="pick a long name that no positional uses",
            )
        self._optionals[reference] = Optional(reference, kind, help)
        return reference

    def blank(self):
        """
        Return a working copy of the optional state with no recorded values.
        """
        return {name: optional.blank() for name, optional in self._optionals.items()}

    def commit(self, optionals, /):
        """
        Replace the optional state with a working copy produced by blank().
        """
        if optionals.keys() != self._optionals.keys():
            raise ValueError("working copy does not match the registered optionals")
        self._optionals = optionals

    def lookup(self, token, /):
        """
        Map an option-shaped token to a reference name.

        Returns the flag's reference name for "-x" tokens (None when the flag is
        not bound) and the stripped long name otherwise.
        """
        if character := format_flag_name(token):
            return self._flags.get(character)
        return format_long_name(token)


__all__ = (
    "Registry",
)
