"""
Faults module behavioral tests (codes, surfacing, rendering).

Scope
- Validate FaultCode normalization.
- Validate trigger(): raising outside shell mode, printing + exiting in shell mode.
- Validate copy.replace support and rich rendering of faults.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import copy
import io
import unittest
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console, Group
from rich.panel import Panel

from argosy import Options, Option, resolve
from argosy.faults import (
    FaultCode,
    ResolutionError,
    UnrecognizedOptionError,
    MissingArgumentValueError,
    trigger,
)


class TestFaultCode(TestCase):
    """Behavioral tests for fault codes."""

    def testNormalizeDefaultsToNumericValue(self):
        self.assertEqual(FaultCode.UNRECOGNIZED_OPTION.normalize(), "11112")

    def testCodesAreUnique(self):
        self.assertEqual(len({code.value for code in FaultCode}), len(FaultCode))


class TestTrigger(TestCase):
    """Behavioral tests for surfacing faults."""

    def testRaisesOutsideShell(self):
        with self.assertRaises(UnrecognizedOptionError) as context:
            trigger(UnrecognizedOptionError("unrecognized option '-x'", token="-x"), shell=False)
        self.assertEqual(context.exception.options["token"], "-x")
        self.assertFalse(context.exception.options["shell"])

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))

    def testAllFaultsAreResolutionErrors(self):
        self.assertTrue(issubclass(UnrecognizedOptionError, ResolutionError))
        self.assertTrue(issubclass(MissingArgumentValueError, ResolutionError))

    def testReplaceMergesOptions(self):
        fault = UnrecognizedOptionError("message", token="-x", title="t")
        replaced = copy.replace(fault, title="other")
        self.assertIsInstance(replaced, UnrecognizedOptionError)
        self.assertEqual(replaced.message, "message")
        self.assertEqual(replaced.options["token"], "-x")
        self.assertEqual(replaced.options["title"], "other")
        self.assertEqual(fault.options["title"], "t")

    def testOptionsAreReadOnly(self):
        fault = ResolutionError("message", token="-x")
        with self.assertRaises(TypeError):
            fault.options["token"] = "-y"

    def testShellPrintsAndExits(self):
        buffer = io.StringIO()
        with patch("argosy.faults.console", Console(file=buffer, width=120, color_system=None)):
            with self.assertRaises(SystemExit) as context:
                resolve(Options(Option("--a")), ["--b"], shell=True, colorful=False)
        self.assertEqual(context.exception.code, 1)
        output = buffer.getvalue()
        self.assertIn("unrecognized option '--b'", output)
        self.assertIn(FaultCode.UNRECOGNIZED_OPTION.normalize(), output)


class TestRendering(TestCase):
    """Behavioral tests for rich rendering of faults."""

    def testPlainRenderIsAGroup(self):
        fault = UnrecognizedOptionError(
            "unrecognized option '-x'",
            title="unrecognized option",
            code=FaultCode.UNRECOGNIZED_OPTION,
            hint="check the spelling",
            prog="tool",
        )
        self.assertIsInstance(fault.__rich__(), Group)

    def testFancyRenderIsAPanel(self):
        fault = UnrecognizedOptionError("unrecognized option '-x'", fancy=True, colorful=True)
        self.assertIsInstance(fault.__rich__(), Panel)

    def testRenderContainsMessageAndHint(self):
        fault = MissingArgumentValueError(
            "missing argument for option '--a'",
            title="missing argument",
            code=FaultCode.MISSING_ARGUMENT_VALUE,
            hint="pass a value after --a",
            prog="tool",
        )
        buffer = io.StringIO()
        Console(file=buffer, width=120, color_system=None).print(fault)
        output = buffer.getvalue()
        self.assertIn("missing argument for option '--a'", output)
        self.assertIn("pass a value after --a", output)
        self.assertIn("Missing Argument", output)


if __name__ == "__main__":
    unittest.main()
