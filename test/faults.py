"""
Fault tests (errors, warnings and how they surface).

Scope
- Validate trigger(): raising, warning, option merging and its contract.
- Validate fault codes, getdoc() and host overrides from __main__.
- Validate shell-mode rendering through rich.

Conventions
- Test method names follow CamelCase per project convention.
- Shell-mode output is captured by swapping the module console for one
  writing to a StringIO.
"""

from __future__ import annotations

import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from gcli import (
    CommandException,
    FaultCode,
    MissingSubtypeWarning,
    System,
    UnknownTypeError,
    Unset,
    getdoc,
    trigger,
)
from gcli import faults


class TestTrigger(TestCase):
    """Outside shell mode."""

    def testErrorsRaise(self):
        with self.assertRaises(UnknownTypeError) as context:
            trigger(UnknownTypeError("no such type", code=FaultCode.UNKNOWN_TYPE))
        self.assertEqual(str(context.exception), "no such type")
        self.assertIs(context.exception.options["code"], FaultCode.UNKNOWN_TYPE)

    def testOptionsAreMerged(self):
        fault = UnknownTypeError("no such type", hint="first")
        with self.assertRaises(UnknownTypeError) as context:
            trigger(fault, hint="second", prog="demo")
        self.assertEqual(context.exception.options["hint"], "second")
        self.assertEqual(context.exception.options["prog"], "demo")
        self.assertEqual(fault.options["hint"], "first")

    def testWarningsWarn(self):
        with self.assertWarns(MissingSubtypeWarning) as context:
            trigger(MissingSubtypeWarning("no subtype"))
        self.assertEqual(str(context.warning), "no subtype")

    def testContract(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))

    def testOptionsAreReadOnly(self):
        fault = CommandException("x", hint="h")
        with self.assertRaises(TypeError):
            fault.options["hint"] = "other"

    def testReplace(self):
        fault = MissingSubtypeWarning("w", code=FaultCode.MISSING_SUBTYPE)
        replaced = fault.__replace__(hint="h")
        self.assertIsInstance(replaced, MissingSubtypeWarning)
        self.assertEqual(replaced.message, "w")
        self.assertEqual(dict(replaced.options), {"code": FaultCode.MISSING_SUBTYPE, "hint": "h"})

    def testNoMessage(self):
        self.assertEqual(str(CommandException()), "")
        self.assertEqual(str(MissingSubtypeWarning()), "")
        self.assertIs(UnknownTypeError().message, Unset)


class TestFaultCodes(TestCase):
    """Codes and documentation lookups."""

    def testNormalize(self):
        self.assertEqual(FaultCode.UNKNOWN_TYPE.normalize(), "21101")

    def testHostLabels(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__codes__", {FaultCode.UNKNOWN_TYPE: "E-TYPE"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_TYPE.normalize(), "E-TYPE")
            self.assertEqual(FaultCode.UNKNOWN_COMMAND.normalize(), "22104")

    def testGetdoc(self):
        main = sys.modules["__main__"]
        self.assertIsNone(getdoc(FaultCode.MISSING_COMMAND))
        with mock.patch.object(main, "__docs__", {FaultCode.MISSING_COMMAND: "type something"}, create=True):
            self.assertEqual(getdoc(FaultCode.MISSING_COMMAND), "type something")
        with self.assertRaises(TypeError):
            getdoc(23101)


class TestShellMode(TestCase):
    """Faults rendered on the console."""

    def setUp(self):
        self.buffer = io.StringIO()
        patcher = mock.patch.object(faults, "console", Console(file=self.buffer, width=100, color_system=None))
        patcher.start()
        self.addCleanup(patcher.stop)

    def testWarningsArePrinted(self):
        system = System(shell=True, colorful=False, prog="demo")
        system.trigger(MissingSubtypeWarning(
            "array needs a subtype",
            title="missing subtype",
            code=FaultCode.MISSING_SUBTYPE,
            hint="give the array a subtype",
        ))
        printed = self.buffer.getvalue()
        self.assertIn("[ demo | 29101 | Missing Subtype ]", printed)
        self.assertIn("array needs a subtype", printed)
        self.assertIn("give the array a subtype", printed)

    def testErrorsExit(self):
        system = System(shell=True, colorful=False)
        with self.assertRaises(SystemExit) as context:
            system.trigger(UnknownTypeError("no such type", code=FaultCode.UNKNOWN_TYPE))
        self.assertEqual(context.exception.code, 1)
        self.assertIn("no such type", self.buffer.getvalue())

    def testFancyPanels(self):
        system = System(shell=True, fancy=True)
        system.trigger(MissingSubtypeWarning("boxed", title="boxed", code=FaultCode.MISSING_SUBTYPE))
        printed = self.buffer.getvalue()
        self.assertIn("boxed", printed)
        self.assertIn("╭", printed)


if __name__ == "__main__":
    unittest.main()
