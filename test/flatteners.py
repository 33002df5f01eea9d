"""
Flatteners module behavioral tests (basic, gnu, posix strategies).

Scope
- Validate that each strategy produces atomic tokens the resolver can consume.
- Validate stop-mode behavior per strategy.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argosy import Options, Option, Flag, resolve
from argosy.flatteners import basic, gnu, posix


def _options():
    return Options(
        Flag("-a"),
        Flag("-b"),
        Option("-f", "--file"),
        Option("-D", nargs="+"),
        Option("-name"),
    )


class TestBasic(TestCase):
    """Behavioral tests for the identity strategy."""

    def testTokensPassThrough(self):
        tokens = ["-ab", "--file=x", "a"]
        self.assertEqual(basic(_options(), tokens, False), tokens)

    def testReturnsACopy(self):
        tokens = ["a"]
        self.assertIsNot(basic(_options(), tokens, False), tokens)


class TestGnu(TestCase):
    """Behavioral tests for gnu-style flattening."""

    def testRegisteredTokensPassThrough(self):
        self.assertEqual(gnu(_options(), ["-a", "-name", "x"], False), ["-a", "-name", "x"])

    def testAssignmentIsSplit(self):
        self.assertEqual(gnu(_options(), ["--file=x.txt", "-name=n"], False), ["--file", "x.txt", "-name", "n"])

    def testEmptyAssignment(self):
        self.assertEqual(gnu(_options(), ["--file="], False), ["--file", ""])

    def testAttachedValueIsSplit(self):
        self.assertEqual(gnu(_options(), ["-Dkey=value"], False), ["-D", "key=value"])

    def testFlagsAreNotSplit(self):
        self.assertEqual(gnu(_options(), ["-ab"], False), ["-ab"])

    def testTerminatorStopsFlattening(self):
        self.assertEqual(gnu(_options(), ["--", "--file=x"], False), ["--", "--file=x"])

    def testStopPassesRestUnchanged(self):
        self.assertEqual(gnu(_options(), ["-a", "-zz", "--file=x"], True), ["-a", "-zz", "--file=x"])

    def testStopKeepsOptionValue(self):
        self.assertEqual(gnu(_options(), ["-f", "val", "pos", "-a"], True), ["-f", "val", "pos", "-a"])
        line = resolve(_options(), ["-f", "val", "pos", "-a"], stop=True, flatten=gnu)
        self.assertEqual(line.value("file"), "val")
        self.assertEqual(line.arguments, ("pos",))
        self.assertEqual(line.unconsumed, ("-a",))

    def testResolvesThroughResolver(self):
        line = resolve(_options(), ["-Dx=1", "--file=f"], flatten=gnu)
        self.assertEqual(line.values("D"), ("x=1",))
        self.assertEqual(line.value("file"), "f")


class TestPosix(TestCase):
    """Behavioral tests for posix-style flattening."""

    def testClusterIsBurst(self):
        self.assertEqual(posix(_options(), ["-ab"], False), ["-a", "-b"])

    def testClusterEndsWithValue(self):
        self.assertEqual(posix(_options(), ["-afout.txt"], False), ["-a", "-f", "out.txt"])

    def testAttachedValue(self):
        self.assertEqual(posix(_options(), ["-fout.txt"], False), ["-f", "out.txt"])

    def testRegisteredLongSingleDash(self):
        self.assertEqual(posix(_options(), ["-name", "n"], False), ["-name", "n"])

    def testAssignmentIsSplit(self):
        self.assertEqual(posix(_options(), ["--file=x"], False), ["--file", "x"])

    def testUnknownClusterPassesThrough(self):
        self.assertEqual(posix(_options(), ["-az"], False), ["-az"])

    def testUnknownLongPassesThrough(self):
        self.assertEqual(posix(_options(), ["--zzz"], False), ["--zzz"])

    def testStdinDash(self):
        self.assertEqual(posix(_options(), ["-", "-a"], False), ["-", "-a"])

    def testStopInsertsTerminator(self):
        self.assertEqual(posix(_options(), ["-a", "pos", "-b"], True), ["-a", "--", "pos", "-b"])

    def testStopAtUnknownOption(self):
        self.assertEqual(posix(_options(), ["-a", "--zzz", "x"], True), ["-a", "--", "--zzz", "x"])

    def testStopKeepsOptionValue(self):
        self.assertEqual(posix(_options(), ["-f", "val", "pos", "-a"], True), ["-f", "val", "--", "pos", "-a"])

    def testStopKeepsLongOptionValue(self):
        self.assertEqual(posix(_options(), ["--file", "val", "pos"], True), ["--file", "val", "--", "pos"])

    def testStopKeepsClusterValue(self):
        self.assertEqual(posix(_options(), ["-af", "val", "pos"], True), ["-a", "-f", "val", "--", "pos"])

    def testStopAfterAttachedValue(self):
        self.assertEqual(posix(_options(), ["-fval", "pos"], True), ["-f", "val", "--", "pos"])

    def testStopKeepsUnboundedValues(self):
        self.assertEqual(posix(_options(), ["-D", "a", "b", "-a"], True), ["-D", "a", "b", "-a"])

    def testStopKeepsUnknownDashedValue(self):
        self.assertEqual(posix(_options(), ["-f", "-x", "pos"], True), ["-f", "-x", "--", "pos"])

    def testStopBindsValueThroughResolver(self):
        line = resolve(_options(), ["-f", "val", "pos", "-a"], stop=True, flatten=posix)
        self.assertEqual(line.values("file"), ("val",))
        self.assertFalse(line.has("a"))
        self.assertEqual(line.arguments, ("pos", "-a"))

    def testStopBindsClusterValueThroughResolver(self):
        line = resolve(_options(), ["-af", "val", "pos"], stop=True, flatten=posix)
        self.assertTrue(line.has("a"))
        self.assertEqual(line.value("file"), "val")
        self.assertEqual(line.arguments, ("pos",))

    def testStopModeMakesEverythingPositional(self):
        line = resolve(_options(), ["-ab", "pos", "-a"], stop=True, flatten=posix)
        self.assertTrue(line.has("a") and line.has("b"))
        self.assertEqual(line.arguments, ("pos", "-a"))
        self.assertEqual(line.unconsumed, ())


if __name__ == "__main__":
    unittest.main()
