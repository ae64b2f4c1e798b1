"""
Fault taxonomy tests.

- option access (code/status/hint) and copying with overrides
- trigger(): raise vs. shell mode
- rich rendering of errors and of help text
"""
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from cliogram import faults
from cliogram.faults import *


def _capture():
    return Console(file=io.StringIO(), width=120, color_system=None)


class GrammarExceptionTest(TestCase):
    def testMessageAndOptions(self):
        fault = UnknownSwitchError("unknown option", code=FaultCode.UNKNOWN_SWITCH, hint="try --help")
        self.assertEqual(str(fault), "unknown option")
        self.assertIs(fault.code, FaultCode.UNKNOWN_SWITCH)
        self.assertEqual(fault.hint, "try --help")
        self.assertIsNone(fault.status)

    def testOptionsAreReadOnly(self):
        fault = GrammarMismatchError("bad", code=FaultCode.MALFORMED_TOKEN)
        with self.assertRaises(TypeError):
            fault.options["code"] = None

    def testHierarchy(self):
        self.assertTrue(issubclass(DuplicateElementNameError, ValueError))
        for cls in (
            MalformedTokenError,
            UnknownSwitchError,
            FlagAssignmentError,
            DuplicatedSwitchError,
            OptionValueRequiredError,
            UnexpectedArgumentError,
            MissingElementError,
        ):
            with self.subTest(cls=cls.__name__):
                self.assertTrue(issubclass(cls, GrammarMismatchError))
        self.assertTrue(issubclass(VersionRequested, HelpRequested))
        self.assertFalse(issubclass(HelpRequested, GrammarMismatchError))

    def testEmptyMessage(self):
        self.assertEqual(str(GrammarMismatchError()), "")

    def testNormalizeUsesHostCodes(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__codes__", {FaultCode.UNKNOWN_SWITCH: "E-SWITCH"}, create=True):
            self.assertEqual(FaultCode.UNKNOWN_SWITCH.normalize(), "E-SWITCH")
            self.assertEqual(FaultCode.MALFORMED_TOKEN.normalize(), "11111")


class TriggerTest(TestCase):
    def testMergesOptionsIntoCopy(self):
        fault = MissingElementError("missing <source>", code=FaultCode.MISSING_ELEMENTS)
        with self.assertRaises(MissingElementError) as context:
            trigger(fault, status=700)
        self.assertIsNot(context.exception, fault)
        self.assertEqual(context.exception.status, 700)
        self.assertIs(context.exception.code, FaultCode.MISSING_ELEMENTS)
        self.assertEqual(str(context.exception), "missing <source>")
        self.assertIsNone(fault.status)

    def testRejectsUntriggerable(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))

    def testShellModePrintsAndExits(self):
        console = _capture()
        with mock.patch.object(faults, "console", console):
            with self.assertRaises(SystemExit) as context:
                trigger(UnknownSwitchError("unknown option '--x'", code=FaultCode.UNKNOWN_SWITCH, hint="did you mean '--y'?"), shell=True)
        self.assertEqual(context.exception.code, 1)
        output = console.file.getvalue()
        self.assertIn("unknown option '--x'", output)
        self.assertIn("did you mean '--y'?", output)
        self.assertIn(str(FaultCode.UNKNOWN_SWITCH.value), output)

    def testShellModeHelpExitsSuccessfully(self):
        console = _capture()
        with mock.patch.object(faults, "console", console):
            with self.assertRaises(SystemExit) as context:
                trigger(HelpRequested("Usage: prog [options]\n"), shell=True)
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(console.file.getvalue().strip(), "Usage: prog [options]")

    def testFancyRendering(self):
        console = _capture()
        console.print(GrammarMismatchError("bad token", code=FaultCode.MALFORMED_TOKEN, title="malformed option", fancy=True))
        output = console.file.getvalue()
        self.assertIn("Malformed Option", output)
        self.assertIn("bad token", output)


if __name__ == "__main__":
    unittest.main()
