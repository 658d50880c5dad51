r"""
Name validation predicates.

Every pattern is matched in full and restricted to ASCII:

- positional name ........ \w[a-zA-Z0-9_-]*
- option-shaped token .... -([a-zA-Z_]|-?[a-zA-Z_][a-zA-Z0-9_-]+)
- long name .............. --?([a-zA-Z_][a-zA-Z0-9_-]+)
- flag name .............. -([a-zA-Z_])

The option grammar is used both at registration and while scanning tokens, so a
token such as "-5" (leading digit) or "--x" (one-character long form) is never
treated as an option and reaches the positional buffer or an option value.
"""
import re

_POSITIONAL = re.compile(r"\w[a-zA-Z0-9_-]*", re.ASCII)
_OPTION = re.compile(r"-([a-zA-Z_]|-?[a-zA-Z_][a-zA-Z0-9_-]+)")
_LONG = re.compile(r"--?([a-zA-Z_][a-zA-Z0-9_-]+)")
_FLAG = re.compile(r"-([a-zA-Z_])")


def valid_positional_name(name, /):
    """
    Return True if `name` can identify a positional argument.
    """
    return isinstance(name, str) and _POSITIONAL.fullmatch(name) is not None


def valid_option_syntax(token, /):
    """
    Return True if `token` is shaped like an option ("-x", "-name", "--name").
    """
    return isinstance(token, str) and _OPTION.fullmatch(token) is not None


def format_long_name(name, /):
    """
    Strip the leading dashes from a long option name.

    Returns the reference name, or "" when `name` is not a valid long form.
    """
    if not isinstance(name, str) or not (match := _LONG.fullmatch(name)):
        return ""
    return match[1]


def format_flag_name(name, /):
    """
    Strip the leading dash from a single-character flag.

    Returns the flag character, or "" when `name` is not of the form "-x".
    """
    if not isinstance(name, str) or not (match := _FLAG.fullmatch(name)):
        return ""
    return match[1]


__all__ = (
    "valid_positional_name",
    "valid_option_syntax",
    "format_long_name",
    "format_flag_name",
)
