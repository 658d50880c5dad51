"""
Flatargs faults (errors and warnings) and rendering.

Scope
- FaultTier: the three error tiers plus warnings. Callers can branch on
  `fault.tier` instead of on exception classes.
- FaultCode: stable numeric identifiers; the thousands group is the tier
  (21xxx configuration, 22xxx input, 23xxx conversion, 24xxx warnings).
- ParserFault / ParserWarning: base types carrying a message plus read-only
  options; they render themselves with rich and know how to surface
  themselves (raise, print, or warn) through __trigger__.
- trigger(): merge runtime options into a fault and surface it.

Tiers
- configuration: raised while registering arguments or when an accessor names an
  argument that was never registered. Always a programmer mistake.
- input: raised by Parser.parse for malformed end-user input.
- conversion: raised lazily by the typed accessors; never by parse itself.

Integration
- Parser.trigger() merges prog/shell/colorful/fancy into the fault via
  copy.replace() and triggers it. Outside shell mode faults are raised; in shell
  mode they are printed to stderr and the process exits with status 1.
- The host application may define __codes__ (code → label) and __styles__
  (palette overrides) in __main__.
"""
import copy
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultTier(IntEnum):
    """
    error tiers, numbered after the thousands group of their fault codes.
    """
    CONFIGURATION = 21
    INPUT         = 22
    CONVERSION    = 23
    WARNING       = 24


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - configuration (211xx)
      • INVALID_NAME, DUPLICATE_NAME, FLAG_CONFLICT, UNKNOWN_ARGUMENT
    - input (221xx)
      • UNKNOWN_OPTION, MISSING_VALUE, REPEATED_OPTION, REPEATED_FLAG,
        MISSING_POSITIONAL
    - conversion (231xx)
      • FORMAT, RANGE, INDEX_RANGE, UNRESOLVED_VALUE
    - warnings (241xx)
      • EMPTY_VALUE
    """
    # --- configuration errors (21xxx) ---
    INVALID_NAME       = 21101
    DUPLICATE_NAME     = 21102
    FLAG_CONFLICT      = 21103
    UNKNOWN_ARGUMENT   = 21104

    # --- input errors (22xxx) ---
    UNKNOWN_OPTION     = 22101
    MISSING_VALUE      = 22102
    REPEATED_OPTION    = 22103
    REPEATED_FLAG      = 22104
    MISSING_POSITIONAL = 22105

    # --- conversion errors (23xxx) ---
    FORMAT             = 23101
    RANGE              = 23102
    INDEX_RANGE        = 23103
    UNRESOLVED_VALUE   = 23104

    # --- warnings (24xxx) ---
    EMPTY_VALUE        = 24101

    @property
    def tier(self):
        return FaultTier(self.value // 1000)

    def normalize(self):
        """
        return a host-normalized label for this code.

        __main__.__codes__ may remap codes to friendlier labels; otherwise the
        numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _prefix(fault):
    # configuration faults speak for the library, the rest for the program
    if fault.tier is FaultTier.CONFIGURATION:
        return __package__
    return fault.options.get("prog") or getattr(__import__("__main__"), "__prog__", __package__)


def _render(fault, palette):
    """
    build the rich renderable shared by errors and warnings.
    """
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))
    colorful = fault.options.get("colorful", False)
    fancy = fault.options.get("fancy", False)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        return Text(str(fragment), styles[style] if colorful else "")

    header = Text.assemble(
        "[ ",
        text(_prefix(fault), "prog-name"),
        " — ",
        text(fault.code.normalize() if isinstance(fault.code, FaultCode) else "", "code"),
        " | ",
        text(fault.title.title(), "title"),
        " ]"
    )
    body = [text(fault.message, "message")]
    if fault.hint:
        body.append(Text.assemble(text(" → ", "hint-arrow"), text(fault.hint, "hint")))

    if fancy:
        return Panel(Group(*body), title=header, title_align="left")
    return Group(header, *body)


class ParserFault(Exception):
    """
    base class of every flatargs error.

    subclasses declare `_code` and `_title`; instances may override both (and
    add any context such as `name`, `token` or `prog`) through keyword options.
    """
    _code = Unset
    _title = "parser fault"
    _tier = Unset

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("fault message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({"code": self._code, "title": self._title, "hint": ""} | options)

    @property
    def code(self):
        return self.options["code"]

    @property
    def tier(self):
        return self.code.tier if isinstance(self.code, FaultCode) else self._tier

    @property
    def title(self):
        return self.options["title"]

    @property
    def hint(self):
        return self.options["hint"]

    def __str__(self):
        return "%s: %s" % (_prefix(self), self.message)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ConfigurationError(ParserFault):
    """registration-time mistakes; fix the calling code."""
    _tier = FaultTier.CONFIGURATION


class InputError(ParserFault):
    """malformed command line, raised by Parser.parse."""
    _tier = FaultTier.INPUT


class ConversionError(ParserFault):
    """raised lazily when a stored value cannot be read as requested."""
    _tier = FaultTier.CONVERSION


class InvalidNameError(ConfigurationError):
    _code = FaultCode.INVALID_NAME
    _title = "invalid name"


class DuplicateNameError(ConfigurationError):
    _code = FaultCode.DUPLICATE_NAME
    _title = "duplicate name"


class FlagConflictError(ConfigurationError):
    _code = FaultCode.FLAG_CONFLICT
    _title = "flag conflict"


class UnknownArgumentError(ConfigurationError):
    _code = FaultCode.UNKNOWN_ARGUMENT
    _title = "unknown argument"


class UnknownOptionError(InputError):
    _code = FaultCode.UNKNOWN_OPTION
    _title = "unknown option"


class MissingValueError(InputError):
    _code = FaultCode.MISSING_VALUE
    _title = "missing value"


class RepeatedOptionError(InputError):
    _code = FaultCode.REPEATED_OPTION
    _title = "repeated option"


class RepeatedFlagError(InputError):
    _code = FaultCode.REPEATED_FLAG
    _title = "repeated flag"


class MissingPositionalError(InputError):
    _code = FaultCode.MISSING_POSITIONAL
    _title = "missing positional"


class FormatError(ConversionError):
    _code = FaultCode.FORMAT
    _title = "bad format"


class RangeError(ConversionError):
    _code = FaultCode.RANGE
    _title = "out of range"


class IndexRangeError(ConversionError):
    _code = FaultCode.INDEX_RANGE
    _title = "index out of range"


class UnresolvedValueError(MissingValueError, ConversionError):
    """
    an accessor found no value and no default.

    it is a MissingValueError for callers catching by class, but its code places
    it in the conversion tier because it is raised on read, never by parse.
    """
    _code = FaultCode.UNRESOLVED_VALUE
    _title = "no value"


class ParserWarning(UserWarning):
    """
    base class of flatargs warnings; mirrors ParserFault's options and rendering.
    """
    _code = Unset
    _title = "parser warning"
    _tier = FaultTier.WARNING

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError("warning message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({"code": self._code, "title": self._title, "hint": ""} | options)

    code = ParserFault.code
    tier = ParserFault.tier
    title = ParserFault.title
    hint = ParserFault.hint
    __str__ = ParserFault.__str__

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=5)
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyValueWarning(ParserWarning):
    _code = FaultCode.EMPTY_VALUE
    _title = "empty value"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ (see the base classes).
    - options are merged into a copy of the fault before triggering.
    - errors are raised unless shell=True; warnings are warned unless shell=True.
    """
    if (
        not callable(getattr(fault, "__trigger__", None)) or
        not callable(getattr(fault, "__replace__", None))
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultTier",
    "FaultCode",
    "ParserFault",
    "ConfigurationError",
    "InputError",
    "ConversionError",
    "InvalidNameError",
    "DuplicateNameError",
    "FlagConflictError",
    "UnknownArgumentError",
    "UnknownOptionError",
    "MissingValueError",
    "RepeatedOptionError",
    "RepeatedFlagError",
    "MissingPositionalError",
    "FormatError",
    "RangeError",
    "IndexRangeError",
    "UnresolvedValueError",
    "ParserWarning",
    "EmptyValueWarning",
    "trigger",
)
