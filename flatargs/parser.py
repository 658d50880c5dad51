"""
Flatargs parser: registration, matching and typed access.

Lifecycle
1. Setup: register_positional() / register_optional(); mistakes raise
   configuration faults immediately.
2. Parse: parse(program, tokens) scans the tokens once, left to right, and
   returns an outcome:
   • Completed(residual): every positional was bound; `residual` holds the
     extra non-option tokens in their original order.
   • HelpExit(renderable, status): -h/--help was seen. Nothing is committed and
     the caller decides how to terminate (invoke() prints and exits 0).
   Malformed input raises an input fault; the committed state is untouched.
3. Access: value(), value_at(), count(), present(); conversion faults are raised
   here, lazily, never during parse.

Matching rules
- a token is an option if it passes valid_option_syntax(); "-x" resolves through
  the flag map, anything else through its stripped long name.
- FLAG records "true" once; a second occurrence is a RepeatedFlagError.
- SINGLE/APPEND consume the next token unconditionally. It must exist and must
  not be option-shaped. SINGLE accepts one occurrence, APPEND any number.
- every other token is a positional candidate; the first N bind the N registered
  positionals in declared order, the rest become the residual.
"""
import sys
from collections.abc import Iterable
from typing import NamedTuple

from rich.console import Console

from .arguments import FLAG, SINGLE, APPEND
from .conversions import BOOLEAN, TEXT, coerce, infer, resolve
from .faults import *
from .faults import trigger as _surface
from .helper import plain, render_help, render_usage
from .names import valid_option_syntax
from .registry import Registry
from .utils import *


class Completed(NamedTuple):
    """
    successful parse; `residual` are the unmatched trailing tokens.
    """
    residual: tuple


class HelpExit(NamedTuple):
    """
    help was requested; render `renderable` and terminate with `status`.
    """
    renderable: object
    status: int = 0

    @property
    def text(self):
        return plain(self.renderable)


class Parser:
    """
    Declarative parser for one flat argument vector.

    Runtime flags
    - shell: surface faults by printing them to stderr and exiting with status 1
      instead of raising them.
    - colorful: style help and fault output.
    - fancy: wrap help and fault output in rich panels.
    """
    positionals = property(lambda self: self._registry.positionals)
    optionals = property(lambda self: self._registry.optionals)
    flags = property(lambda self: self._registry.flags)
    program = view("program")
    shell = view("shell")
    colorful = view("colorful")
    fancy = view("fancy")

    def __init__(self, *, shell=False, colorful=True, fancy=False):
        self._registry = Registry()
        self._program = Unset
        self._shell = bool(shell)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._registry.register_optional("-h", "--help", kind=FLAG, help="show this help message and exit")

    # ── Setup ───────────────────────────────────────────────────────────────

    def register_positional(self, name, /, help=""):
        """
        Append a positional argument; see Registry.register_positional.
        """
        self._registry.register_positional(name, help=help)

    def register_optional(self, *names, kind=SINGLE, help=""):
        """
        Register "--name" or "-n", "--name"; returns the reference name.
        """
        return self._registry.register_optional(*names, kind=kind, help=help)

    # ── Faults ──────────────────────────────────────────────────────────────

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime options merged in.
        """
        _surface(
            fault,
            **options,
            prog=coalesce(self._program, ""),
            shell=self._shell,
            colorful=self._colorful,
            fancy=self._fancy,
        )

    # ── Parse ───────────────────────────────────────────────────────────────

    def parse(self, program, tokens, /):
        """
        Match `tokens` (the argument vector without the program name).

        Returns Completed(residual) or HelpExit(renderable); raises an InputError
        on malformed input, in which case nothing is committed.
        """
        if not isinstance(program, str):
            raise TypeError("parse() program must be a string")
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("parse() tokens must be an iterable of strings")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() tokens must be an iterable of strings")

        self._program = program

        optionals = self._registry.blank()
        candidates = []

        index = 0
        while index < len(tokens):
            token = tokens[index]
            index += 1

            if not valid_option_syntax(token):
                candidates.append(token)
                continue

            reference = self._registry.lookup(token)
            if reference == "help":
                return HelpExit(render_help(self))

            try:
                optional = optionals[reference]
            except KeyError:
                self.trigger(UnknownOptionError(
                    "invalid %s %r, pass --help to display possible options" % (
                        "flag" if reference is None else "option", token
                    ),
                    token=token,
                    hint="run '%s --help' to see all available options" % program,
                ))

            if optional.kind is FLAG:
                if optional.values:
                    self.trigger(RepeatedFlagError(
                        "%r should only be specified once" % token,
                        token=token,
                        name=reference,
                        hint="remove the repeated %r" % token,
                    ))
                optional.record("true")
                continue

            if index == len(tokens) or valid_option_syntax(tokens[index]):
                self.trigger(MissingValueError(
                    "%r requires a value" % token,
                    token=token,
                    name=reference,
                    hint="pass a value right after %r (for example: %s <%s>)" % (token, token, reference.upper()),
                ))
            value = tokens[index]
            index += 1

            if optional.kind is SINGLE and optional.values:
                self.trigger(RepeatedOptionError(
                    "%r should only be specified once" % token,
                    token=token,
                    name=reference,
                    hint="keep a single %r" % token,
                ))
            if not value:
                self.trigger(EmptyValueWarning(
                    "empty value for %r" % token,
                    token=token,
                    name=reference,
                    hint="an empty value reads as unset; pass a value or drop %r" % token,
                ))
            optional.record(value)

        if len(candidates) < len(self._registry.positionals):
            missing = list(self._registry.positionals)[len(candidates)]
            self.trigger(MissingPositionalError(
                "requires positional argument %r" % missing,
                name=missing,
                hint="run '%s --help' to see the expected order" % program,
            ))

        self._registry.commit(optionals)
        for positional, candidate in zip(self._registry.positionals.values(), candidates):
            positional.bind(candidate)
        return Completed(tuple(candidates[len(self._registry.positionals):]))

    # ── Access ──────────────────────────────────────────────────────────────

    def _optional(self, name):
        try:
            return self._registry.optionals[name]
        except KeyError:
            raise UnknownArgumentError(
                "no optional argument by the name %r" % (name,),
                name=name,
                hint="use the reference name returned by register_optional()",
            ) from None

    def _raw(self, name, index):
        """
        Return (stored text or Unset, kind) for `name` at `index`.
        """
        if name in self._registry.optionals:
            optional = self._registry.optionals[name]
            if index < len(optional.values):
                return optional.values[index], optional.kind
            if not optional.values:
                # nothing recorded: a flag reads as false, the others as unset
                return "false" if optional.kind is FLAG else Unset, optional.kind
            self.trigger(IndexRangeError(
                "index %d is out of range for %r" % (index, name),
                name=name,
                index=index,
                hint="%r holds %d value(s); check count() first" % (name, len(optional.values)),
            ))
        if name in self._registry.positionals:
            if index != 0:
                self.trigger(IndexRangeError(
                    "index %d is out of range for %r" % (index, name),
                    name=name,
                    index=index,
                    hint="positional arguments hold a single value at index 0",
                ))
            return self._registry.positionals[name].value, Unset
        raise UnknownArgumentError(
            "no argument by the name %r" % (name,),
            name=name,
            hint="register the argument before reading it",
        )

    def value_at(self, name, index, default=Unset, /, *, type=Unset):
        """
        Return the value recorded for `name` at `index`, converted to `type`.

        - no value recorded: returns `default` read as `type` (same format and
          range rules as recorded text), or raises UnresolvedValueError when no
          default was given (an unset FLAG reads as False instead).
        - values recorded but `index` past them: IndexRangeError.
        - positionals hold one value at index 0; any other index is an
          IndexRangeError rather than being ignored.
        - `type` defaults to the type of `default`, then to BOOLEAN for flags and
          TEXT for everything else.
        """
        if not isinstance(index, int) or isinstance(index, bool) or index < 0:
            raise TypeError("value_at() index must be a non-negative integer")

        raw, kind = self._raw(name, index)

        if type is not Unset:
            target = resolve(type)
        else:
            target = infer(default, BOOLEAN if kind is FLAG else TEXT)

        # an empty optional value counts as unset, an empty positional does not
        if raw is Unset or (not raw and kind in (SINGLE, APPEND)):
            if default is Unset:
                self.trigger(UnresolvedValueError(
                    "no value given for %r and no default specified" % name,
                    name=name,
                    hint="pass a default to value() or check present() first",
                ))
            raw = default

        try:
            return coerce(target, name, raw)
        except ConversionError as fault:
            self.trigger(fault)

    def value(self, name, default=Unset, /, *, type=Unset):
        """
        Return the first value of `name`; see value_at().
        """
        return self.value_at(name, 0, default, type=type)

    def count(self, name, /):
        """
        Number of values recorded for optional `name` (0 when absent).
        """
        return len(self._optional(name).values)

    def present(self, name, /):
        """
        True when optional `name` was given at least once.
        """
        return self.count(name) > 0

    # ── Rendering ───────────────────────────────────────────────────────────

    def usage(self):
        return render_usage(self)

    def help(self):
        return render_help(self)


def invoke(parser, argv=Unset, /):
    """
    Run a parser against a process argument vector and own the process exit.

    Parameters
    - parser: Parser
    - argv: Unset (read sys.argv) or a sequence whose first item is the program.

    Behavior
    - HelpExit: prints the help to stdout and exits with its status.
    - input faults: raised, or printed and exit(1) when parser.shell is set.
    - Completed: returns the residual tokens.
    """
    if not isinstance(parser, Parser):
        raise TypeError("invoke() first argument must be a Parser")
    argv = list(sys.argv if argv is Unset else argv)
    if not argv:
        raise ValueError("invoke() argument vector must include the program name")

    match parser.parse(argv[0], argv[1:]):
        case HelpExit(renderable=renderable, status=status):
            Console().print(renderable)
            sys.exit(status)
        case Completed(residual=residual):
            return residual


__all__ = (
    "Parser",
    "Completed",
    "HelpExit",
    "invoke",
)
