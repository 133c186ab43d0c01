# python
"""
Commands module behavioral tests (Command construction and validation).

Scope
- Validate name/description defaults derived from the entry callable.
- Validate declaration checks (key collisions, Arity.ALL placement).
- Validate the built-in help option and key resolution helpers.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (command, Command, Option, Positional).
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from helmsman import Arity, Command, Option, Positional, ValueType, command, option


def noop():
    pass


class TestCommandMetadata(TestCase):
    """Behavioral tests for Command identity and visibility metadata."""

    def testNameDerivedFromEntry(self):
        def dry_run():
            pass

        self.assertEqual(Command(dry_run).name, "dry-run")

    def testDescrFromDocstringFirstLine(self):
        def build():
            """Build the project.

            Compiles every module.
            """

        c = Command(build)
        self.assertEqual(c.descr, "Build the project.")
        self.assertIsNone(c.doc)

    def testExplicitMetadataWins(self):
        c = Command(noop, "run", "Tools", "run things", "long doc", experimental=True, hidden=True)
        self.assertEqual(c.name, "run")
        self.assertEqual(c.category, "Tools")
        self.assertEqual(c.descr, "run things")
        self.assertEqual(c.doc, "long doc")
        self.assertTrue(c.experimental)
        self.assertTrue(c.hidden)
        self.assertFalse(c.deprecated)

    def testCategoryDefaultsToNone(self):
        self.assertIsNone(Command(noop).category)

    def testLambdaNeedsName(self):
        with self.assertRaises(TypeError):
            Command(lambda: None)
        self.assertEqual(Command(lambda: None, name="quick").name, "quick")

    def testInvalidNamesRejected(self):
        with self.assertRaises(ValueError):
            Command(noop, name="-run")
        with self.assertRaises(ValueError):
            Command(noop, name="two words")
        with self.assertRaises(ValueError):
            Command(noop, name="   ")

    def testEntryMustBeCallable(self):
        with self.assertRaises(TypeError):
            Command("run")  # type: ignore[arg-type]

    def testCallRunsEntry(self):
        c = Command(lambda: 7, name="seven")
        self.assertEqual(c(), 7)

    def testDecoratorBuildsCommand(self):
        @command(name="greet", category="Demo")
        def greet():
            """Say hello."""
            return "hello"

        self.assertIsInstance(greet, Command)
        self.assertEqual(greet.descr, "Say hello.")
        self.assertEqual(greet(), "hello")

    def testDirectCommandCall(self):
        self.assertEqual(command(noop, name="x").name, "x")


class TestCommandSurface(TestCase):
    """Behavioral tests for option and positional declarations."""

    def testHelperAddedByDefault(self):
        c = Command(noop, options=[Option("--count", type=ValueType.INTEGER)])
        self.assertIsNotNone(c.helper)
        self.assertEqual(c.helper.names, ("-h", "--help"))
        self.assertTrue(c.boolean("h"))
        self.assertTrue(c.boolean("help"))
        self.assertEqual(len(c.options), 2)

    def testHelperAvoidsTakenNames(self):
        c = Command(noop, options=[Option("-h", "--host")])
        self.assertEqual(c.helper.names, ("--help",))
        self.assertEqual(c.resolve("h").long, "host")

    def testDeclaredHelperKept(self):
        c = Command(noop, options=[Option("--usage", helper=True)])
        self.assertEqual(c.helper.long, "usage")
        self.assertIsNone(c.resolve("help"))

    def testResolveByEveryKey(self):
        @option("-j", type=ValueType.INTEGER)
        def set_jobs(jobs):
            pass

        c = Command(noop, options=[set_jobs])
        self.assertIs(c.resolve("j"), c.resolve("jobs"))
        self.assertIsNone(c.resolve("missing"))
        self.assertFalse(c.boolean("j"))
        self.assertFalse(c.boolean("missing"))

    def testKeyCollisionRejected(self):
        with self.assertRaises(ValueError):
            Command(noop, options=[Option("--count", "-c"), Option("-c")])

    def testFallbackCollisionRejected(self):
        @option(type=ValueType.INTEGER)
        def set_count(count):
            pass

        with self.assertRaises(ValueError):
            Command(noop, options=[Option("--count"), set_count])

    def testOptionsMustBeOptions(self):
        with self.assertRaises(TypeError):
            Command(noop, options=["--count"])

    def testAllPositionalMustBeLast(self):
        with self.assertRaises(TypeError):
            Command(noop, positionals=[Positional("FILES", arity=Arity.ALL), Positional("OUT")])

    def testPositionalNamesUnique(self):
        with self.assertRaises(ValueError):
            Command(noop, positionals=[Positional("FILE"), Positional("FILE")])

    def testPositionalOrderKept(self):
        c = Command(noop, positionals=[Positional("SRC"), Positional("DST")])
        self.assertEqual([p.name for p in c.positionals], ["SRC", "DST"])

    def testReprShowsName(self):
        self.assertIn("name='noop'", repr(Command(noop)))


if __name__ == "__main__":
    unittest.main()
