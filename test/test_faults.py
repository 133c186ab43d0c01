# python
"""
Faults module behavioral tests (options, replacement and triggering).

Scope
- Validate immutable options and __replace__ merging for errors, warnings and
  exception groups.
- Validate trigger(): raise/warn outside shell mode, print (and exit) in shell
  mode.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

import helmsman.faults
from helmsman.faults import (
    CommandException,
    CommandExit,
    DeprecatedCommandWarning,
    FaultCode,
    MissingArgumentError,
    UnknownCommandError,
    trigger,
)


def recording():
    return Console(file=io.StringIO(), width=200, color_system=None)


class TestCommandException(TestCase):
    """Behavioral tests for CommandException options."""

    def testOptionsAreImmutable(self):
        fault = UnknownCommandError("unknown command 'x'", code=FaultCode.UNKNOWN_COMMAND)
        with self.assertRaises(TypeError):
            fault.options["code"] = None  # type: ignore[index]

    def testCodeAndHint(self):
        fault = UnknownCommandError("unknown", code=FaultCode.UNKNOWN_COMMAND, hint="try help")
        self.assertEqual(fault.code, FaultCode.UNKNOWN_COMMAND)
        self.assertEqual(fault.hint, "try help")
        self.assertIsNone(CommandException("bare").code)

    def testReplaceMergesOptions(self):
        fault = MissingArgumentError("missing argument: --count", code=FaultCode.MISSING_ARGUMENT)
        replaced = copy.replace(fault, shell=True)
        self.assertIsInstance(replaced, MissingArgumentError)
        self.assertEqual(replaced.message, fault.message)
        self.assertTrue(replaced.options["shell"])
        self.assertEqual(replaced.code, FaultCode.MISSING_ARGUMENT)
        self.assertNotIn("shell", fault.options)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNKNOWN_COMMAND.normalize(), "11101")


class TestTrigger(TestCase):
    """Behavioral tests for trigger()."""

    def testRaisesOutsideShell(self):
        with self.assertRaises(UnknownCommandError) as context:
            trigger(UnknownCommandError("unknown"), colorful=True)
        self.assertTrue(context.exception.options["colorful"])

    def testPrintsAndExitsInShell(self):
        console = recording()
        with mock.patch.object(helmsman.faults, "console", console), self.assertRaises(SystemExit) as context:
            trigger(UnknownCommandError("unknown command 'x'", title="unknown command", hint="try help"), shell=True)
        self.assertEqual(context.exception.code, 1)
        output = console.file.getvalue()
        self.assertIn("unknown command 'x'", output)
        self.assertIn("Unknown Command", output)
        self.assertIn("try help", output)

    def testDeferredDoesNotExit(self):
        console = recording()
        with mock.patch.object(helmsman.faults, "console", console):
            trigger(UnknownCommandError("unknown"), shell=True, deferred=True)
        self.assertIn("unknown", console.file.getvalue())

    def testWarningWarnsOutsideShell(self):
        with self.assertWarns(DeprecatedCommandWarning):
            trigger(DeprecatedCommandWarning("command 'old' is deprecated"))

    def testWarningPrintsInShell(self):
        console = recording()
        with mock.patch.object(helmsman.faults, "console", console):
            trigger(DeprecatedCommandWarning("command 'old' is deprecated"), shell=True)
        self.assertIn("command 'old' is deprecated", console.file.getvalue())

    def testFancyRendering(self):
        console = recording()
        with mock.patch.object(helmsman.faults, "console", console):
            trigger(UnknownCommandError("unknown"), shell=True, fancy=True, deferred=True)
        self.assertIn("unknown", console.file.getvalue())

    def testRejectsPlainExceptions(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


class TestCommandExit(TestCase):
    """Behavioral tests for the CommandExit exception group."""

    def setUp(self):
        self.errors = [
            MissingArgumentError("missing argument: --count"),
            MissingArgumentError("missing argument: FILE"),
        ]

    def testGroupsExceptions(self):
        group = CommandExit(self.errors)
        self.assertIsInstance(group, ExceptionGroup)
        self.assertEqual(list(group.exceptions), self.errors)

    def testReplaceKeepsExceptions(self):
        group = copy.replace(CommandExit(self.errors), shell=True)
        self.assertEqual(len(group.exceptions), 2)
        self.assertTrue(group.options["shell"])

    def testDeriveKeepsOptions(self):
        group = CommandExit(self.errors, colorful=True).derive(self.errors[:1])
        self.assertIsInstance(group, CommandExit)
        self.assertEqual(len(group.exceptions), 1)
        self.assertTrue(group.options["colorful"])

    def testShellPrintsEveryError(self):
        console = recording()
        with mock.patch.object(helmsman.faults, "console", console), self.assertRaises(SystemExit):
            trigger(CommandExit(self.errors), shell=True)
        output = console.file.getvalue()
        self.assertIn("missing argument: --count", output)
        self.assertIn("missing argument: FILE", output)

    def testRaisesOutsideShell(self):
        with self.assertRaises(CommandExit):
            trigger(CommandExit(self.errors))


if __name__ == "__main__":
    unittest.main()
