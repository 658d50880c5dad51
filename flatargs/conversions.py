"""
Typed conversion layer.

Values are stored as text until an accessor asks for them; `convert` turns the
text into the requested type or raises a ConversionError.

Value types (tagged, dispatched with a single match statement)
- Boolean()          → bool   exactly "true" or "false"
- Character()        → str    exactly one character
- Signed(width)      → int    decimal, parsed as 64-bit, checked against width
- Unsigned(width)    → int    decimal, any "-" rejected before parsing
- Floating(width)    → float  decimal parsed at extended precision
- Textual()          → str    passthrough

Ready-made instances: BOOLEAN, CHARACTER, INT8..INT64, UINT8..UINT64, FLOAT32,
FLOAT64, TEXT. resolve() also accepts the builtins bool, int, float and str.
coerce() applies the same rules to declared defaults.
"""
import decimal
import re
import sys
from dataclasses import dataclass

from .faults import FormatError, RangeError

_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOATING = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)",
    re.IGNORECASE
)

# overflowing exponents become infinities and fail the range check
_CONTEXT = decimal.Context(prec=64, Emax=decimal.MAX_EMAX, Emin=decimal.MIN_EMIN, traps=[])


@dataclass(frozen=True, repr=False)
class Boolean:
    def __repr__(self):
        return "BOOLEAN"


@dataclass(frozen=True, repr=False)
class Character:
    def __repr__(self):
        return "CHARACTER"


@dataclass(frozen=True, repr=False)
class Textual:
    def __repr__(self):
        return "TEXT"


@dataclass(frozen=True, repr=False)
class Signed:
    width: int

    @property
    def bounds(self):
        return -(1 << (self.width - 1)), (1 << (self.width - 1)) - 1

    def __repr__(self):
        return "INT%d" % self.width


@dataclass(frozen=True, repr=False)
class Unsigned:
    width: int

    @property
    def bounds(self):
        return 0, (1 << self.width) - 1

    def __repr__(self):
        return "UINT%d" % self.width


@dataclass(frozen=True, repr=False)
class Floating:
    width: int

    @property
    def bounds(self):
        maximum = _FLOAT_MAX[self.width]
        return -maximum, maximum

    def __repr__(self):
        return "FLOAT%d" % self.width


_FLOAT_MAX = {
    32: (2 - 2 ** -23) * 2 ** 127,
    64: sys.float_info.max,
}

BOOLEAN = Boolean()
CHARACTER = Character()
TEXT = Textual()

INT8 = Signed(8)
INT16 = Signed(16)
INT32 = Signed(32)
INT64 = Signed(64)

UINT8 = Unsigned(8)
UINT16 = Unsigned(16)
UINT32 = Unsigned(32)
UINT64 = Unsigned(64)

FLOAT32 = Floating(32)
FLOAT64 = Floating(64)

_BUILTINS = {
    bool: BOOLEAN,
    int: INT64,
    float: FLOAT64,
    str: TEXT,
}


def resolve(type, /):
    """
    Normalize a requested type into one of the value types.

    Accepts a value type instance or one of the builtins bool, int, float, str.
    """
    match type:
        case Boolean() | Character() | Textual():
            return type
        case Signed(width=8 | 16 | 32 | 64) | Unsigned(width=8 | 16 | 32 | 64):
            return type
        case Floating(width=32 | 64):
            return type
        case Signed() | Unsigned() | Floating():
            raise ValueError("unsupported width for %r" % (type,))
    try:
        return _BUILTINS[type]
    except (KeyError, TypeError):
        raise TypeError("cannot convert arguments to %r" % (type,)) from None


def infer(default, fallback=TEXT, /):
    """
    Pick the value type matching a default value, or `fallback` when the default
    is not a bool, int, float or str (bool is checked before int).
    """
    for builtin in (bool, int, float, str):
        if isinstance(default, builtin):
            return _BUILTINS[builtin]
    return fallback


def _bounded(name, target, number):
    lowest, highest = target.bounds
    if not lowest <= number <= highest:
        raise _range_error(name, target)
    return number


def _range_error(name, target):
    lowest, highest = target.bounds
    if isinstance(target, Floating):
        lowest, highest = repr(lowest), repr(highest)
    return RangeError(
        "'%s' must be in range [%s,%s]" % (name, lowest, highest),
        name=name,
        bounds=target.bounds,
        hint="pass a value between %s and %s" % (lowest, highest),
    )


def convert(target, name, value, /):
    """
    Convert the stored text `value` of argument `name` to `target`.

    Raises FormatError when the text does not have the requested shape and
    RangeError when a number does not fit the requested width.
    """
    match resolve(target):
        case Boolean():
            if value == "true":
                return True
            if value == "false":
                return False
            raise FormatError(
                "'%s' must be either 'true' or 'false'" % name,
                name=name,
                value=value,
                hint="pass 'true' or 'false'",
            )
        case Character():
            if len(value) != 1:
                raise FormatError(
                    "'%s' must be a single character" % name,
                    name=name,
                    value=value,
                    hint="pass exactly one character",
                )
            return value
        case Textual():
            return value
        case Unsigned() as target:
            # no wrap-around: "-1" must never read as the maximum of the width
            if "-" in value:
                raise _range_error(name, target)
            return _integer(name, target, value)
        case Signed() as target:
            return _integer(name, target, value)
        case Floating() as target:
            if not _FLOATING.fullmatch(value):
                raise FormatError(
                    "'%s' must be of floating-point type" % name,
                    name=name,
                    value=value,
                    hint="pass a decimal number such as 1.5 or 2e-3",
                )
            number = _CONTEXT.create_decimal(value)
            if number.is_nan():
                return float(number)
            lowest, highest = target.bounds
            if not decimal.Decimal(lowest) <= number <= decimal.Decimal(highest):
                raise _range_error(name, target)
            return float(number)


def coerce(target, name, value, /):
    """
    Read `value` (stored text or a declared default) as `target`.

    - text goes through convert().
    - a bool, int or float default of the matching kind is range-checked the
      same way and returned (floats widen ints).
    - TEXT passes any default through; every other mismatch is a FormatError.
    """
    if isinstance(value, str):
        return convert(target, name, value)
    match resolve(target), value:
        case (Boolean(), bool()) | (Textual(), _):
            return value
        case ((Signed() | Unsigned()) as target, int()) if not isinstance(value, bool):
            return _bounded(name, target, value)
        case (Floating() as target, int() | float()) if not isinstance(value, bool):
            number = decimal.Decimal(value)
            if not number.is_nan():
                lowest, highest = target.bounds
                if not decimal.Decimal(lowest) <= number <= decimal.Decimal(highest):
                    raise _range_error(name, target)
            return float(value)
    raise FormatError(
        "'%s' default %r cannot be read as %r" % (name, value, resolve(target)),
        name=name,
        value=value,
        hint="pass a default of the requested type, or its text form",
    )


def _integer(name, target, value):
    if not _INTEGER.fullmatch(value):
        raise FormatError(
            "'%s' must be of integral type" % name,
            name=name,
            value=value,
            hint="pass a whole decimal number",
        )
    # anything past 20 significant digits overflows 64 bits
    if len(value.lstrip("+-").lstrip("0")) > 20:
        raise _range_error(name, target)
    return _bounded(name, target, int(value))


__all__ = (
    "Boolean",
    "Character",
    "Textual",
    "Signed",
    "Unsigned",
    "Floating",
    "BOOLEAN",
    "CHARACTER",
    "TEXT",
    "INT8",
    "INT16",
    "INT32",
    "INT64",
    "UINT8",
    "UINT16",
    "UINT32",
    "UINT64",
    "FLOAT32",
    "FLOAT64",
    "resolve",
    "infer",
    "convert",
    "coerce",
)
