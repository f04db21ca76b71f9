"""
Fault tests (codes, options, triggering and rendering).

Scope
- Validate stable fault codes and host code remapping.
- Validate class-level defaults and per-instance option overrides.
- Validate trigger() in raising, warning, shell and deferred modes.
- Validate rich rendering of single faults and fault groups.
"""
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from jackfruit import (
    DuplicateParameterNameError,
    FaultCode,
    InvalidSchemaInputError,
    MissingHandlerIdentityError,
    SchemaException,
    SchemaExit,
    UnrecognizedMarkerWarning,
    trigger,
)
from jackfruit import faults


def _render(renderable):
    console = Console(file=io.StringIO(), width=100, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


class TestFaultCodes(TestCase):
    """Tests for FaultCode."""

    def testStableValues(self):
        self.assertEqual(FaultCode.INVALID_SCHEMA_INPUT, 21101)
        self.assertEqual(FaultCode.DUPLICATE_PARAMETER_NAME, 21102)
        self.assertEqual(FaultCode.MISSING_HANDLER_IDENTITY, 21103)
        self.assertEqual(FaultCode.UNRECOGNIZED_MARKER, 22101)

    def testNormalize(self):
        self.assertEqual(FaultCode.INVALID_SCHEMA_INPUT.normalize(), "21101")

    def testNormalizeWithHostCodes(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__codes__", {FaultCode.INVALID_SCHEMA_INPUT: "JF-1"}, create=True):
            self.assertEqual(FaultCode.INVALID_SCHEMA_INPUT.normalize(), "JF-1")


class TestFaults(TestCase):
    """Tests for fault options and trigger()."""

    def testDefaults(self):
        fault = DuplicateParameterNameError("parameters clash")
        self.assertIsInstance(fault, SchemaException)
        self.assertEqual(str(fault), "parameters clash")
        self.assertIs(fault.options["code"], FaultCode.DUPLICATE_PARAMETER_NAME)
        self.assertEqual(fault.options["title"], "duplicate parameter name")
        self.assertFalse(fault.options["shell"])

    def testOptionsOverrideDefaults(self):
        fault = InvalidSchemaInputError("bad name", hint="rename it")
        self.assertEqual(fault.options["hint"], "rename it")
        with self.assertRaises(TypeError):
            fault.options["hint"] = "other"  # type: ignore[index]

    def testReplaceKeepsMessage(self):
        fault = MissingHandlerIdentityError("no identity").__replace__(handler="tools.build")
        self.assertEqual(str(fault), "no identity")
        self.assertEqual(fault.options["handler"], "tools.build")

    def testTriggerRaises(self):
        with self.assertRaises(MissingHandlerIdentityError):
            trigger(MissingHandlerIdentityError("no identity"))

    def testTriggerWarns(self):
        with self.assertWarns(UnrecognizedMarkerWarning):
            trigger(UnrecognizedMarkerWarning("marker 'Hidden' is not recognized"))

    def testShellModeExits(self):
        with mock.patch.object(faults.console, "print") as printer:
            with self.assertRaises(SystemExit):
                trigger(InvalidSchemaInputError("bad name"), shell=True)
        printer.assert_called_once()

    def testShellModeDeferred(self):
        with mock.patch.object(faults.console, "print") as printer:
            trigger(InvalidSchemaInputError("bad name"), shell=True, deferred=True)
        printer.assert_called_once()

    def testShellModeWarningPrints(self):
        with mock.patch.object(faults.console, "print") as printer:
            trigger(UnrecognizedMarkerWarning("marker 'Hidden' is not recognized"), shell=True)
        printer.assert_called_once()

    def testTriggerRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


class TestRendering(TestCase):
    """Tests for rich rendering."""

    def testPlainRendering(self):
        output = _render(InvalidSchemaInputError("parameter name cannot be empty", colorful=False))
        self.assertIn("21101", output)
        self.assertIn("Invalid Schema Input", output)
        self.assertIn("parameter name cannot be empty", output)
        self.assertIn("give every handler parameter a non-empty name", output)

    def testFancyRendering(self):
        output = _render(InvalidSchemaInputError("parameter name cannot be empty", fancy=True))
        self.assertIn("parameter name cannot be empty", output)

    def testGroupRendering(self):
        group = SchemaExit([
            InvalidSchemaInputError("first problem"),
            MissingHandlerIdentityError("second problem"),
        ], colorful=False)
        output = _render(group)
        self.assertIn("Bad Schema", output)
        self.assertIn("first problem", output)
        self.assertIn("second problem", output)

    def testGroupTriggerRaises(self):
        with self.assertRaises(SchemaExit) as context:
            trigger(SchemaExit([InvalidSchemaInputError("first problem")]))
        self.assertEqual(len(context.exception.exceptions), 1)


if __name__ == '__main__':
    unittest.main()
