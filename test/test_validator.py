"""
Validator behavioral tests (cross-cutting definition invariants).

Scope
- Validate alias uniqueness across globals, action arguments and actions.
- Validate missing aliases and handlers on actions.
- Validate revivable types and enum label collisions.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argwright import Action, Argument, Definition, parse, reflect, validate
from argwright.faults import DefinitionError, FaultCode

from scaffolds import (
    CaseSensitiveScaffold,
    ClashScaffold,
    ColorScaffold,
    DuplicateScaffold,
    HandlerlessScaffold,
    Opaque,
    OpaqueScaffold,
    ShadeScaffold,
)


class TestAliases(TestCase):
    """Behavioral tests for alias uniqueness."""

    def testDuplicateAliasUnderIgnoreCase(self):
        with self.assertRaises(DefinitionError) as caught:
            validate(reflect(DuplicateScaffold))
        self.assertEqual(caught.exception.code, FaultCode.DUPLICATE_ALIAS)
        self.assertEqual(caught.exception.options["alias"], "X")

    def testDistinctAliasesWhenCaseSensitive(self):
        definition = validate(reflect(CaseSensitiveScaffold))
        self.assertEqual(definition.find_argument("x").default_alias, "alpha")
        self.assertEqual(definition.find_argument("X").default_alias, "beta")

    def testActionArgumentClashesWithGlobal(self):
        with self.assertRaises(DefinitionError) as caught:
            validate(reflect(ClashScaffold))
        self.assertEqual(caught.exception.options["alias"], "z")

    def testDuplicateActionAliases(self):
        definition = Definition(actions=[
            Action("run", handler=print),
            Action("RUN", handler=print),
        ])
        with self.assertRaises(DefinitionError) as caught:
            validate(definition)
        self.assertEqual(caught.exception.code, FaultCode.DUPLICATE_ALIAS)

    def testDuplicateCheckedOnEveryParse(self):
        definition = Definition(arguments=[Argument("name", "n")])
        parse(definition, "-n a")
        definition.add_argument(Argument("number", "N"))
        with self.assertRaises(DefinitionError):
            parse(definition, "-n a")


class TestActions(TestCase):
    """Behavioral tests for action aliases and handlers."""

    def testActionWithoutAlias(self):
        with self.assertRaises(DefinitionError) as caught:
            validate(Definition(actions=[Action(handler=print)]))
        self.assertEqual(caught.exception.code, FaultCode.MISSING_ALIAS)

    def testActionWithoutHandler(self):
        with self.assertRaises(DefinitionError) as caught:
            validate(reflect(HandlerlessScaffold))
        self.assertEqual(caught.exception.code, FaultCode.MISSING_DELEGATE)
        self.assertEqual(caught.exception.options["alias"], "report")


class TestTypes(TestCase):
    """Behavioral tests for revivable argument types."""

    def testUnrevivableType(self):
        with self.assertRaises(DefinitionError) as caught:
            validate(reflect(OpaqueScaffold))
        self.assertEqual(caught.exception.code, FaultCode.UNREVIVABLE_TYPE)
        self.assertIs(caught.exception.options["type"], Opaque)

    def testExplicitReviverMakesTypeRevivable(self):
        definition = Definition(arguments=[Argument("thing", type=Opaque, reviver=lambda token, type: type())])
        self.assertIs(validate(definition), definition)

    def testEnumLabelsCollideIgnoringCase(self):
        with self.assertRaises(DefinitionError) as caught:
            validate(reflect(ShadeScaffold))
        self.assertEqual(caught.exception.code, FaultCode.ENUM_SHORTCUT_COLLISION)

    def testEnumWithShortcutsValidates(self):
        validate(reflect(ColorScaffold))

    def testEnumCollisionDependsOnCaseMode(self):
        shade = reflect(ShadeScaffold).arguments[0]
        definition = Definition(arguments=[Argument("shade", type=shade.type, ignore_case=False)])
        validate(definition)

    def testValidateRejectsNonDefinitions(self):
        with self.assertRaises(TypeError):
            validate(OpaqueScaffold)


if __name__ == "__main__":
    unittest.main()
