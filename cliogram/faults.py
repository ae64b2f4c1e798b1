"""
Cliogram faults (errors and requests) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault the engine
  can surface, grouped by phase (compile, matching, requests).
- GrammarException: base type carrying a message plus read-only options
  (code, title, hint, status, ...) that knows how to render itself with rich.
- DuplicateElementNameError: fatal, raised while compiling a descriptor set.
- GrammarMismatchError (and its specific subclasses): the supplied arguments
  do not satisfy the compiled grammar.
- HelpRequested / VersionRequested: not errors, but propagated through the same
  channel so a boundary can print raw text instead of structured output.
- trigger(): central entry point to surface any fault with merged options.

Status marker
- Parsing-time faults are re-triggered at the parser boundary with a
  caller-supplied "status" option. Consumers branch on fault.status instead of
  inspecting message text.

Shell mode
- With shell=True a fault prints itself through the rich console (stderr) and
  exits; otherwise it is raised.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - compile (101xx): DUPLICATE_ELEMENT
    - matching (111xx): MALFORMED_TOKEN, UNKNOWN_SWITCH, FLAG_ASSIGNMENT,
      DUPLICATED_SWITCH, OPTION_VALUE_REQUIRED, UNEXPECTED_ARGUMENT,
      MISSING_ELEMENTS
    - requests (131xx): HELP_REQUESTED, VERSION_REQUESTED
    """
    # --- compile errors (10xxx) ---
    DUPLICATE_ELEMENT           = 10101

    # --- matching errors (11xxx) ---
    MALFORMED_TOKEN             = 11111
    UNKNOWN_SWITCH              = 11112
    FLAG_ASSIGNMENT             = 11113
    DUPLICATED_SWITCH           = 11115
    OPTION_VALUE_REQUIRED       = 11117
    UNEXPECTED_ARGUMENT         = 11121
    MISSING_ELEMENTS            = 11125

    # --- requests (13xxx) ---
    HELP_REQUESTED              = 13101
    VERSION_REQUESTED           = 13102

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class GrammarException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    @property
    def status(self):
        """
        caller-supplied status marker (None until the parser boundary sets it).
        """
        return self.options.get("status")

    @property
    def code(self):
        return self.options.get("code")

    @property
    def hint(self):
        return self.options.get("hint")

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), styles[style] if colorful else "")

        prog = text(getattr(main, "__prog__", self.options.get("prog", "cliogram")), "prog-name")
        code = self.code.normalize() if isinstance(self.code, FaultCode) else "-"
        title = self.options.get("title", "grammar mismatch")

        header = Text.assemble("[ ", prog, " — ", text(code, "code"), " | ", text(title.title(), "error-title"), " ]")
        message = text(str(self), "error-message")
        renders = [message]
        if self.hint:
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DuplicateElementNameError(GrammarException, ValueError): ...


class GrammarMismatchError(GrammarException): ...
class MalformedTokenError(GrammarMismatchError): ...
class UnknownSwitchError(GrammarMismatchError): ...
class FlagAssignmentError(GrammarMismatchError): ...
class DuplicatedSwitchError(GrammarMismatchError): ...
class OptionValueRequiredError(GrammarMismatchError): ...
class UnexpectedArgumentError(GrammarMismatchError): ...
class MissingElementError(GrammarMismatchError): ...


class HelpRequested(GrammarException):
    """
    raised when the user asks for help; the message is the full grammar text.

    renders as the raw text (no header, no styling) and exits successfully in
    shell mode.
    """

    def __rich__(self):
        return Text(str(self), end="")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.out(str(self), highlight=False)
        sys.exit(0)


class VersionRequested(HelpRequested):
    """
    raised when the user asks for the version; the message is the version string.
    """


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see GrammarException).
    - options are merged into a copy of the fault via __replace__(**options)
      before triggering; the original fault is left untouched.
    - in shell mode the fault is rendered via the rich console; otherwise raised.

    typical options
    - status, shell, fancy, colorful, title, code, hint, and any other context
      the renderer may want to show (e.g., token/index/suggestions).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "GrammarException",
    "DuplicateElementNameError",
    "GrammarMismatchError",
    "MalformedTokenError",
    "UnknownSwitchError",
    "FlagAssignmentError",
    "DuplicatedSwitchError",
    "OptionValueRequiredError",
    "UnexpectedArgumentError",
    "MissingElementError",
    "HelpRequested",
    "VersionRequested",
    "trigger",
)
