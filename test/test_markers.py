"""
Markers behavioral tests (declaration-time sanitizing and descriptors).

Scope
- Validate Arg construction, normalization and its descriptor behavior.
- Validate ignore(), @action and @scaffold, including misuse.
- Validate Example and Behavior metadata.

Conventions
- Test method names follow CamelCase per project convention.
- Never pass explicit None for any parameter; omit instead.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argwright import Arg, Behavior, Example, Hook, Ignored, action, describe, ignore, scaffold


class Settings:
    level: int = Arg("-l", default=5)
    quiet: bool = ignore(False)


class TestArg(TestCase):
    """Behavioral tests for the Arg marker."""

    def testShortcutsAreStripped(self):
        self.assertEqual(Arg("--src", "-s", "/S", "x").shortcuts, ("src", "s", "S", "x"))

    def testDefaults(self):
        marker = Arg()
        self.assertEqual(marker.shortcuts, ())
        self.assertIsNone(marker.default)
        self.assertFalse(marker.required)
        self.assertIsNone(marker.position)
        self.assertIsNone(marker.descr)
        self.assertIsNone(marker.reviver)
        self.assertTrue(marker.shortcut)
        self.assertFalse(marker.selector)

    def testDescrIsTrimmed(self):
        self.assertEqual(Arg(descr="  first name ").descr, "first name")

    def testInvalidShortcuts(self):
        for shortcut, error in (("", ValueError), ("--", ValueError), ("1x", ValueError), ("a b", ValueError), (1, TypeError)):
            with self.subTest(shortcut=shortcut):
                with self.assertRaises(error):
                    Arg(shortcut)

    def testDuplicateShortcutsRejected(self):
        with self.assertRaises(ValueError):
            Arg("-s", "--s")

    def testInvalidPosition(self):
        with self.assertRaises(ValueError):
            Arg(position=-1)
        with self.assertRaises(TypeError):
            Arg(position=True)

    def testInvalidMetadata(self):
        with self.assertRaises(ValueError):
            Arg(descr="   ")
        with self.assertRaises(TypeError):
            Arg(reviver="int")
        with self.assertRaises(TypeError):
            Arg(ignore_case="yes")

    def testDescriptorReadsDefaultAndStoresValues(self):
        first, second = Settings(), Settings()
        self.assertEqual(first.level, 5)
        first.level = 7
        self.assertEqual(first.level, 7)
        self.assertEqual(second.level, 5)
        del first.level
        self.assertEqual(first.level, 5)

    def testClassAccessReturnsMarker(self):
        self.assertIsInstance(Settings.level, Arg)
        self.assertEqual(Settings.level.name, "level")
        self.assertEqual(Settings.level.shortcuts, ("l",))


class TestIgnore(TestCase):
    """Behavioral tests for ignore()."""

    def testIgnoredMemberIsSettable(self):
        settings = Settings()
        self.assertIs(settings.quiet, False)
        settings.quiet = True
        self.assertIs(settings.quiet, True)
        self.assertIsInstance(Settings.quiet, Ignored)


class TestAction(TestCase):
    """Behavioral tests for the @action decorator."""

    def testBareDecorator(self):
        @action
        def run(self):
            pass

        self.assertEqual(run.__action__.shortcuts, ())
        self.assertIsNone(run.__action__.bundle)

    def testFactoryWithShortcuts(self):
        @action("r", "--go", descr="run it", bundle=Settings, ignore_case=False)
        def run(self):
            pass

        self.assertEqual(run.__action__.shortcuts, ("r", "go"))
        self.assertEqual(run.__action__.descr, "run it")
        self.assertIs(run.__action__.bundle, Settings)
        self.assertIs(run.__action__.ignore_case, False)

    def testStaticMethodMarkerLandsOnFunction(self):
        marked = action(staticmethod(lambda: None))
        self.assertIsInstance(marked, staticmethod)
        self.assertTrue(hasattr(marked.__func__, "__action__"))

    def testAppliedOnlyOnce(self):
        def run(self):
            pass

        action(run)
        with self.assertRaises(TypeError):
            action(run)

    def testBundleMustBeClass(self):
        with self.assertRaises(TypeError):
            action(bundle=Settings())

    def testRequiresCallable(self):
        with self.assertRaises(TypeError):
            action()(42)


class TestScaffold(TestCase):
    """Behavioral tests for @scaffold and describe()."""

    def testUndecoratedClass(self):
        options = describe(Settings)
        self.assertIsNone(options["actions"])
        self.assertTrue(options["ignore_case"])
        self.assertEqual(len(options["metadata"]), 1)
        self.assertIsInstance(options["metadata"][0], Behavior)

    def testMetadataOrder(self):
        hook = Hook()

        @scaffold(actions=Settings, hooks=[hook], examples=["tool -l 1"], behavior=Behavior("report"), metadata=["extra"])
        class Tool:
            pass

        options = describe(Tool)
        self.assertIs(options["actions"], Settings)
        self.assertIs(options["metadata"][0], hook)
        self.assertIsInstance(options["metadata"][1], Example)
        self.assertTrue(options["metadata"][2].reports)
        self.assertEqual(options["metadata"][3], "extra")

    def testBareDecorator(self):
        @scaffold
        class Tool:
            pass

        self.assertTrue(describe(Tool)["ignore_case"])

    def testRejectsBadMetadata(self):
        with self.assertRaises(TypeError):
            scaffold(hooks=[object()])
        with self.assertRaises(TypeError):
            scaffold(examples=[42])
        with self.assertRaises(TypeError):
            scaffold(actions=Settings())
        with self.assertRaises(TypeError):
            scaffold(ignore_case="no")

    def testRequiresClass(self):
        with self.assertRaises(TypeError):
            scaffold()(lambda: None)


class TestMetadataObjects(TestCase):
    """Behavioral tests for Example and Behavior."""

    def testExample(self):
        example = Example("  tool run  ", descr="runs")
        self.assertEqual(example.example, "tool run")
        self.assertEqual(example.descr, "runs")
        with self.assertRaises(ValueError):
            Example(" ")

    def testBehavior(self):
        self.assertFalse(Behavior().reports)
        self.assertTrue(Behavior("report", fancy=True).fancy)
        with self.assertRaises(ValueError):
            Behavior("ignore")


if __name__ == "__main__":
    unittest.main()
