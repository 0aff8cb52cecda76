"""
Ambient context behavioral tests.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argwright import ambient, parse, publish, withdraw
from argwright.faults import UnknownArgumentError


class Tool:
    verbose: bool


class Other:
    pass


class TestAmbient(TestCase):
    """Behavioral tests for publish/ambient/withdraw."""

    def tearDown(self):
        withdraw(Tool)

    def testUnpublishedIsNone(self):
        self.assertIsNone(ambient(Other))

    def testPublishAndWithdraw(self):
        tool = Tool()
        publish(Tool, tool)
        self.assertIs(ambient(Tool), tool)
        self.assertIs(withdraw(Tool), tool)
        self.assertIsNone(ambient(Tool))
        self.assertIsNone(withdraw(Tool))

    def testPublishRequiresInstance(self):
        with self.assertRaises(TypeError):
            publish(Tool, Other())
        with self.assertRaises(TypeError):
            ambient(Tool())

    def testParsePublishesFreshInstance(self):
        stale = Tool()
        publish(Tool, stale)
        outcome = parse(Tool, "-verbose")
        self.assertIsNot(ambient(Tool), stale)
        self.assertIs(ambient(Tool), outcome.args)
        self.assertTrue(outcome.args.verbose)

    def testFailedParseLeavesNothingPublished(self):
        publish(Tool, Tool())
        with self.assertRaises(UnknownArgumentError):
            parse(Tool, "-unknown")
        self.assertIsNone(ambient(Tool))


if __name__ == "__main__":
    unittest.main()
