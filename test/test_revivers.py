"""
Revivability registry behavioral tests.

Scope
- Validate built-in revivers (scalars, booleans, ISO dates, paths, enums).
- Validate generic forms (optional, list, tuple, set) and the __revive__ hook.
- Validate registry lookups (exact, base class) and RevivalError contents.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use a private Registry where they register rules.
"""

from __future__ import annotations

import datetime
import decimal
import enum
import pathlib
import unittest
from unittest import TestCase

from argwright import Argument, Registry, can_revive, enum_collisions, is_boolean_literal, revive, shortcuts
from argwright.faults import FaultCode, RevivalError


class Level(enum.IntEnum):
    __shortcuts__ = {"HIGH": "hi"}

    LOW = 1
    HIGH = 2


class Point:
    def __init__(self, x, y):
        self.x, self.y = x, y

    @classmethod
    def __revive__(cls, token):
        return cls(*map(int, token.split(":")))


class Celsius(float):
    pass


class Opaque:
    pass


class TestBuiltins(TestCase):
    """Behavioral tests for the default registry."""

    def testScalars(self):
        self.assertEqual(revive("42", int), 42)
        self.assertEqual(revive("2.5", float), 2.5)
        self.assertEqual(revive("text", str), "text")
        self.assertEqual(revive("1.10", decimal.Decimal), decimal.Decimal("1.10"))
        self.assertEqual(revive("a/b", pathlib.Path), pathlib.Path("a/b"))

    def testBooleanLiterals(self):
        for token in ("true", "T", "yes", "On", "1"):
            with self.subTest(token=token):
                self.assertIs(revive(token, bool), True)
        for token in ("false", "F", "no", "off", "0"):
            with self.subTest(token=token):
                self.assertIs(revive(token, bool), False)
        self.assertTrue(is_boolean_literal("YES"))
        self.assertFalse(is_boolean_literal("maybe"))

    def testIsoDates(self):
        self.assertEqual(revive("2024-02-29", datetime.date), datetime.date(2024, 2, 29))
        self.assertEqual(revive("12:30", datetime.time), datetime.time(12, 30))

    def testEnumByNameShortcutAndValue(self):
        self.assertIs(revive("LOW", Level), Level.LOW)
        self.assertIs(revive("high", Level), Level.HIGH)
        self.assertIs(revive("hi", Level), Level.HIGH)
        self.assertIs(revive("2", Level), Level.HIGH)

    def testEnumLabels(self):
        self.assertEqual(shortcuts(Level), [("LOW", Level.LOW), ("HIGH", Level.HIGH), ("hi", Level.HIGH)])
        self.assertEqual(enum_collisions(Level), [])

    def testGenericForms(self):
        self.assertEqual(revive("1, 2,3", list[int]), [1, 2, 3])
        self.assertEqual(revive("a,b", tuple[str, ...]), ("a", "b"))
        self.assertEqual(revive("1,1,2", frozenset[int]), frozenset({1, 2}))
        self.assertEqual(revive("", list[int]), [])
        self.assertEqual(revive("7", int | None), 7)

    def testReviveHook(self):
        point = revive("3:4", Point)
        self.assertEqual((point.x, point.y), (3, 4))

    def testBaseClassLookup(self):
        value = revive("21.5", Celsius)
        self.assertIsInstance(value, Celsius)
        self.assertEqual(value, 21.5)

    def testCanRevive(self):
        self.assertTrue(can_revive(list[Level]))
        self.assertFalse(can_revive(Opaque))
        self.assertFalse(can_revive(list[Opaque]))
        self.assertFalse(can_revive(int | str))


class TestFailures(TestCase):
    """Behavioral tests for revival failures."""

    def testMalformedTokenRaises(self):
        with self.assertRaises(RevivalError) as caught:
            revive("seven", int)
        self.assertEqual(caught.exception.code, FaultCode.REVIVAL_FAILED)
        self.assertEqual(caught.exception.options["token"], "seven")
        self.assertIsInstance(caught.exception.__cause__, ValueError)

    def testMessageNamesArgument(self):
        argument = Argument("count", "c", type=int)
        with self.assertRaises(RevivalError) as caught:
            argument.revive("many")
        self.assertIn("'count'", caught.exception.message)
        self.assertIs(caught.exception.options["argument"], argument)

    def testUnknownEnumLabel(self):
        with self.assertRaises(RevivalError):
            revive("MEDIUM", Level)

    def testUnrevivableType(self):
        with self.assertRaises(RevivalError) as caught:
            revive("x", Opaque)
        self.assertEqual(caught.exception.code, FaultCode.UNREVIVABLE_TYPE)

    def testTokenMustBeString(self):
        with self.assertRaises(TypeError):
            revive(1, int)


class TestRegistry(TestCase):
    """Behavioral tests for a private registry."""

    def setUp(self):
        self.registry = Registry()

    def testEmptyRegistry(self):
        self.assertFalse(self.registry.can_revive(int))
        self.assertTrue(self.registry.can_revive(Level))

    def testRegisterDecorator(self):
        @self.registry.register(Opaque)
        def revive_opaque(token, type):
            return type()

        self.assertIs(self.registry.resolve(Opaque), revive_opaque)
        self.assertIsInstance(self.registry.revive("x", Opaque), Opaque)

    def testUnregister(self):
        self.registry.register(int, lambda token, type: int(token) * 2)
        self.assertEqual(self.registry.revive("2", int), 4)
        self.registry.unregister(int)
        self.assertFalse(self.registry.can_revive(int))

    def testRegisterRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            self.registry.register(int, "int")

    def testExplicitReviverBypassesLookup(self):
        self.assertEqual(self.registry.revive("abc", Opaque, reviver=lambda token, type: token.upper()), "ABC")


if __name__ == "__main__":
    unittest.main()
