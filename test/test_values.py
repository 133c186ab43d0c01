# python
"""
Value type behavioral tests (coercion of raw command-line strings).

Scope
- Validate the accepted grammar and range of every ValueType member.
- Validate the TypeCoercionError contract (code, hint, context options).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import math
import unittest
from unittest import TestCase

from helmsman import ValueType, FaultCode, TypeCoercionError


class TestIntegral(TestCase):
    """Behavioral tests for INTEGER and LONG."""

    def testIntegerAcceptsSignedDigits(self):
        self.assertEqual(ValueType.INTEGER.coerce("42"), 42)
        self.assertEqual(ValueType.INTEGER.coerce("+7"), 7)
        self.assertEqual(ValueType.INTEGER.coerce("-13"), -13)

    def testIntegerKeepsLeadingZeros(self):
        self.assertEqual(ValueType.INTEGER.coerce("007"), 7)

    def testIntegerRangeIsThirtyTwoBits(self):
        self.assertEqual(ValueType.INTEGER.coerce("2147483647"), 2147483647)
        self.assertEqual(ValueType.INTEGER.coerce("-2147483648"), -2147483648)
        with self.assertRaises(TypeCoercionError):
            ValueType.INTEGER.coerce("2147483648")

    def testIntegerRejectsFractions(self):
        with self.assertRaises(TypeCoercionError):
            ValueType.INTEGER.coerce("1.5")

    def testIntegerRejectsWhitespaceAndUnderscores(self):
        for raw in (" 1", "1 ", "1_000", ""):
            with self.subTest(raw=raw), self.assertRaises(TypeCoercionError):
                ValueType.INTEGER.coerce(raw)

    def testLongRangeIsSixtyFourBits(self):
        self.assertEqual(ValueType.LONG.coerce("9223372036854775807"), 2 ** 63 - 1)
        with self.assertRaises(TypeCoercionError):
            ValueType.LONG.coerce("9223372036854775808")


class TestFloating(TestCase):
    """Behavioral tests for FLOAT and DOUBLE."""

    def testDoubleAcceptsLiterals(self):
        self.assertEqual(ValueType.DOUBLE.coerce("2.5"), 2.5)
        self.assertEqual(ValueType.DOUBLE.coerce("1e3"), 1000.0)
        self.assertTrue(math.isinf(ValueType.DOUBLE.coerce("inf")))
        self.assertTrue(math.isnan(ValueType.DOUBLE.coerce("nan")))

    def testDoubleRejectsGarbage(self):
        for raw in ("abc", " 1.0", "1_0.0", ""):
            with self.subTest(raw=raw), self.assertRaises(TypeCoercionError):
                ValueType.DOUBLE.coerce(raw)

    def testFloatRoundsToSinglePrecision(self):
        value = ValueType.FLOAT.coerce("0.1")
        self.assertNotEqual(value, 0.1)
        self.assertAlmostEqual(value, 0.1, places=7)

    def testFloatOverflowIsACoercionError(self):
        with self.assertRaises(TypeCoercionError):
            ValueType.FLOAT.coerce("1e39")


class TestOthers(TestCase):
    """Behavioral tests for BOOLEAN, STRING and the shared contract."""

    def testBooleanIsCaseInsensitive(self):
        self.assertIs(ValueType.BOOLEAN.coerce("TRUE"), True)
        self.assertIs(ValueType.BOOLEAN.coerce("false"), False)

    def testBooleanRejectsOtherWords(self):
        with self.assertRaises(TypeCoercionError):
            ValueType.BOOLEAN.coerce("yes")

    def testStringIsIdentity(self):
        self.assertEqual(ValueType.STRING.coerce(" spaced -value "), " spaced -value ")

    def testNonStringInputRejected(self):
        with self.assertRaises(TypeError):
            ValueType.INTEGER.coerce(5)  # type: ignore[arg-type]

    def testCoercionErrorCarriesContext(self):
        with self.assertRaises(TypeCoercionError) as context:
            ValueType.INTEGER.coerce("five", name="--count")
        fault = context.exception
        self.assertEqual(fault.code, FaultCode.TYPE_COERCION)
        self.assertEqual(fault.options["value"], "five")
        self.assertEqual(fault.options["input"], "--count")
        self.assertIs(fault.options["type"], ValueType.INTEGER)
        self.assertIn("--count", fault.message)
        self.assertIn("integer", fault.hint)

    def testLabels(self):
        self.assertEqual(
            [member.label for member in ValueType],
            ["string", "integer", "long", "float", "double", "boolean"],
        )


if __name__ == "__main__":
    unittest.main()
