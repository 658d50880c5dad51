"""
Matching tests.

Scope
- Parser.parse: option resolution, value consumption, positional binding,
  residual tokens and the help outcome.
- Input faults and the guarantee that a failed parse commits nothing.
- invoke(): process-level behavior (help exit, shell mode, sys.argv).

Conventions
- Test method names follow CamelCase per project convention.
- Shell-mode output is silenced by patching the stderr console.
"""

from __future__ import annotations

import io
import sys
import unittest
from contextlib import redirect_stdout
from unittest import TestCase, mock

from flatargs import (
    Parser, Completed, HelpExit, invoke, FLAG, APPEND, INT32,
    ParserFault, InputError, UnknownOptionError, MissingValueError,
    RepeatedOptionError, RepeatedFlagError, MissingPositionalError,
    FaultTier, FaultCode,
)
from flatargs import faults


def build(**flags):
    parser = Parser(**flags)
    parser.register_positional("x", help="first")
    parser.register_positional("y", help="second")
    parser.register_optional("--flag", kind=FLAG, help="a switch")
    parser.register_optional("-n", "--num", help="a number")
    parser.register_optional("-t", "--tag", kind=APPEND, help="repeatable")
    return parser


class TestMatching(TestCase):
    """Successful parses."""

    def testRoundTrip(self):
        parser = build()
        outcome = parser.parse("prog", ["a", "b", "--flag", "-n", "5"])
        self.assertEqual(outcome, Completed(residual=()))
        self.assertEqual(parser.value("x"), "a")
        self.assertEqual(parser.value("y"), "b")
        self.assertTrue(parser.present("flag"))
        self.assertEqual(parser.value("num", type=INT32), 5)

    def testOptionsInterleaveWithPositionals(self):
        parser = build()
        parser.parse("prog", ["-n", "5", "a", "--flag", "b"])
        self.assertEqual((parser.value("x"), parser.value("y")), ("a", "b"))
        self.assertEqual(parser.value("num"), "5")
        self.assertIs(parser.value("flag"), True)

    def testLongAndShortFormsShareState(self):
        parser = build()
        parser.parse("prog", ["a", "b", "--tag", "one", "-t", "two", "-tag", "three"])
        self.assertEqual(parser.count("tag"), 3)
        self.assertEqual([parser.value_at("tag", i) for i in range(3)], ["one", "two", "three"])

    def testResidualKeepsOrder(self):
        parser = build()
        outcome = parser.parse("prog", ["a", "b", "c", "--flag", "d"])
        self.assertEqual(outcome.residual, ("c", "d"))

    def testNegativeNumbersAreValues(self):
        parser = build()
        parser.parse("prog", ["-1", "b", "-n", "-5"])
        self.assertEqual(parser.value("x"), "-1")
        self.assertEqual(parser.value("num", type=int), -5)

    def testOneLetterLongFormIsAPositional(self):
        parser = build()
        parser.parse("prog", ["--x", "b"])
        self.assertEqual(parser.value("x"), "--x")

    def testProgramIsRecorded(self):
        parser = build()
        parser.parse("tool", ["a", "b"])
        self.assertEqual(parser.program, "tool")

    def testNoPositionals(self):
        parser = Parser()
        parser.register_optional("--name")
        self.assertEqual(parser.parse("prog", []), Completed(()))
        self.assertFalse(parser.present("name"))


class TestHelp(TestCase):
    """The help switch short-circuits the scan."""

    def testHelpOutcome(self):
        parser = build()
        outcome = parser.parse("prog", ["a", "--help"])
        self.assertIsInstance(outcome, HelpExit)
        self.assertEqual(outcome.status, 0)
        self.assertIn("Usage: prog [options] <x> <y>", outcome.text)

    def testHelpWinsOverMissingPositionals(self):
        parser = build()
        self.assertIsInstance(parser.parse("prog", ["-h"]), HelpExit)

    def testHelpCommitsNothing(self):
        parser = build()
        parser.parse("prog", ["a", "b", "-n", "5"])
        parser.parse("prog", ["c", "d", "-n", "9", "--flag", "-h"])
        self.assertEqual(parser.value("num"), "5")
        self.assertEqual(parser.value("x"), "a")
        self.assertFalse(parser.present("flag"))

    def testFaultsBeforeHelpStillRaise(self):
        parser = build()
        with self.assertRaises(UnknownOptionError):
            parser.parse("prog", ["--nope", "-h"])


class TestInputFaults(TestCase):
    """Malformed command lines."""

    def testUnknownOption(self):
        parser = build()
        with self.assertRaises(UnknownOptionError) as context:
            parser.parse("prog", ["a", "b", "--nope"])
        self.assertEqual(
            str(context.exception),
            "prog: invalid option '--nope', pass --help to display possible options"
        )

    def testUnknownFlag(self):
        parser = build()
        with self.assertRaises(UnknownOptionError) as context:
            parser.parse("prog", ["a", "b", "-z"])
        self.assertIn("invalid flag '-z'", context.exception.message)

    def testMissingValueAtEnd(self):
        parser = build()
        with self.assertRaises(MissingValueError) as context:
            parser.parse("prog", ["a", "b", "-n"])
        self.assertEqual(str(context.exception), "prog: '-n' requires a value")
        self.assertEqual(context.exception.options["name"], "num")

    def testOptionShapedValueIsRejected(self):
        parser = build()
        with self.assertRaises(MissingValueError):
            parser.parse("prog", ["a", "b", "-n", "--flag"])

    def testRepeatedSingle(self):
        parser = build()
        with self.assertRaises(RepeatedOptionError) as context:
            parser.parse("prog", ["a", "b", "-n", "1", "--num", "2"])
        self.assertEqual(context.exception.message, "'--num' should only be specified once")

    def testRepeatedFlag(self):
        parser = build()
        with self.assertRaises(RepeatedFlagError):
            parser.parse("prog", ["a", "b", "--flag", "--flag"])

    def testMissingPositional(self):
        parser = build()
        with self.assertRaises(MissingPositionalError) as context:
            parser.parse("prog", ["a"])
        self.assertEqual(str(context.exception), "prog: requires positional argument 'y'")
        self.assertEqual(context.exception.options["name"], "y")

    def testFaultsAreInputTier(self):
        parser = build()
        try:
            parser.parse("prog", ["a"])
        except ParserFault as fault:
            code = fault.code
            match fault.tier:
                case FaultTier.INPUT:
                    tier = "input"
                case _:
                    tier = "other"
        self.assertEqual(tier, "input")
        self.assertIs(code, FaultCode.MISSING_POSITIONAL)

    def testTokenTypes(self):
        parser = build()
        with self.assertRaises(TypeError):
            parser.parse(1, [])
        with self.assertRaises(TypeError):
            parser.parse("prog", "a b")
        with self.assertRaises(TypeError):
            parser.parse("prog", ["a", 1])

    def testShellModeExits(self):
        parser = build(shell=True)
        with mock.patch.object(faults.console, "print") as printer:
            with self.assertRaises(SystemExit) as context:
                parser.parse("prog", ["a", "b", "--nope"])
        self.assertEqual(context.exception.code, 1)
        printer.assert_called_once()


class TestCommit(TestCase):
    """Each parse starts clean and commits only on success."""

    def testFailedParseKeepsPreviousState(self):
        parser = build()
        parser.parse("prog", ["a", "b", "-n", "5", "-t", "x"])
        with self.assertRaises(RepeatedOptionError):
            parser.parse("prog", ["c", "d", "-n", "6", "-t", "y", "-n", "7"])
        self.assertEqual(parser.value("num"), "5")
        self.assertEqual(parser.count("tag"), 1)
        self.assertEqual(parser.value("x"), "a")

    def testMissingPositionalKeepsPreviousState(self):
        parser = build()
        parser.parse("prog", ["a", "b"])
        with self.assertRaises(MissingPositionalError):
            parser.parse("prog", ["c", "--flag"])
        self.assertFalse(parser.present("flag"))
        self.assertEqual(parser.value("x"), "a")

    def testRepeatedParsesDoNotAccumulate(self):
        parser = build()
        parser.parse("prog", ["a", "b", "--flag", "-n", "1", "-t", "x"])
        parser.parse("prog", ["c", "d", "-n", "2"])
        self.assertFalse(parser.present("flag"))
        self.assertEqual(parser.value("num"), "2")
        self.assertEqual(parser.count("tag"), 0)
        self.assertEqual(parser.value("x"), "c")


class TestInvoke(TestCase):
    """invoke() owns the process exit."""

    def testReturnsResidual(self):
        self.assertEqual(invoke(build(), ["prog", "a", "b", "c"]), ("c",))

    def testReadsSysArgv(self):
        parser = build()
        with mock.patch.object(sys, "argv", ["prog", "a", "b"]):
            self.assertEqual(invoke(parser), ())
        self.assertEqual(parser.value("y"), "b")

    def testHelpPrintsAndExitsZero(self):
        output = io.StringIO()
        with redirect_stdout(output):
            with self.assertRaises(SystemExit) as context:
                invoke(build(), ["prog", "-h"])
        self.assertEqual(context.exception.code, 0)
        self.assertIn("Usage", output.getvalue())
        self.assertIn("Positional arguments", output.getvalue())

    def testShellFaultExitsOne(self):
        with mock.patch.object(faults.console, "print"):
            with self.assertRaises(SystemExit) as context:
                invoke(build(shell=True), ["prog", "a"])
        self.assertEqual(context.exception.code, 1)

    def testFaultsRaiseOutsideShell(self):
        with self.assertRaises(InputError):
            invoke(build(), ["prog", "a", "b", "--nope"])

    def testArguments(self):
        with self.assertRaises(TypeError):
            invoke(object(), ["prog"])
        with self.assertRaises(ValueError):
            invoke(build(), [])


if __name__ == "__main__":
    unittest.main()
