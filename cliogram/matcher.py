"""
Cliogram bundled matcher: a docopt-style subset that reads grammar text.

Supported grammar
- usage section: "Usage: prog ..." up to the first blank line; every later
  line starting with the program name is one more alternative.
- usage tokens: [options], --name, --name=<value>, <name>; each optionally
  bracketed and/or followed by "...".
- options section: rows under "Options:" whose display part lists the
  comma-separated aliases of one switch ("-t=<value>..., --tags=<value>...").

Supported argument vectors
- "--" ends option parsing.
- long options: --name, --name=value, --name value.
- short options: -x, -xVALUE, -x=VALUE, -x VALUE and (smart) clusters -abc.
- a repeatable value option given in spaced form also takes the following
  tokens that do not start with "-".

Output
- raw map keyed by the long form and the short form of every switch present
  (True for flags, a string or a list of strings for value options) and by
  "<name>" for every positional present. Absent elements are not emitted and
  "[default: ...]" annotations are not applied.
"""
import difflib
import logging
import re
from typing import NamedTuple

from .faults import *

logger = logging.getLogger(__name__)

_ALIAS = re.compile(r"(?P<name>--?\w[\w-]*)(?P<valued>=<[^>]*>)?(?P<repeat>\.\.\.)?")
_TOKEN = re.compile(
    r"(?P<open>\[)?"
    r"(?P<body>--\w[\w-]*(?P<valued>=<[^>]*>)?|<[^>]+>)"
    r"(?P<inner>\.\.\.)?"
    r"(?P<close>\])?"
    r"(?P<outer>\.\.\.)?"
)
_LONG = re.compile(r"--(?P<name>\w[\w-]*)(?:=(?P<value>.*))?", re.DOTALL)


class Switch(NamedTuple):
    """
    one option of the grammar, under all its spellings.
    """
    long: str | None
    short: str | None
    valued: bool
    repeatable: bool

    @property
    def name(self):
        return self.long or self.short

    def keys(self):
        return tuple(key for key in (self.long, self.short) if key)


class Slot(NamedTuple):
    name: str
    optional: bool
    repeat: bool


class Pattern(NamedTuple):
    """
    one usage alternative.

    - shortcut: the line carries "[options]" (any declared switch is allowed).
    - switches: long name -> (optional, repeat) for switches named on the line.
    - slots: positional slots in line order.
    """
    line: str
    shortcut: bool
    switches: dict
    slots: tuple


def _ordinal(number):
    """
    "first" ... "tenth", then 11th, 12th, 21st, 102nd and so on.
    """
    words = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")
    if 1 <= number <= len(words):
        return words[number - 1]
    if 10 < number % 100 < 20:
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


class Grammar:
    """
    Parsed view of a grammar document.

    attributes
    - program: the program name (first word after "Usage:").
    - patterns: usage alternatives in document order.
    - switches: long and short spellings -> Switch.
    """

    def __init__(self, text, /):
        if not isinstance(text, str):
            raise TypeError("grammar must be a string")
        self.text = text
        self.program = None
        self.patterns = []
        self.switches = {}

        lines = text.splitlines()
        self._read_options(lines)
        self._read_usage(lines)

        if not self.patterns:
            raise ValueError("grammar has no 'Usage:' section")

    def _declare(self, switch, /):
        for key in switch.keys():
            known = self.switches.get(key)
            if known is not None:
                switch = switch._replace(
                    long=switch.long or known.long,
                    short=switch.short or known.short,
                    valued=switch.valued or known.valued,
                    repeatable=switch.repeatable or known.repeatable,
                )
        for key in switch.keys():
            self.switches[key] = switch

    def _read_options(self, lines, /):
        section = False
        for line in lines:
            if line and not line[0].isspace() and line.rstrip().endswith(":"):
                section = line.strip().lower() == "options:"
                continue
            if not section or not (row := line.strip()).startswith("-"):
                continue

            display = re.split(r"\s{2,}", row, maxsplit=1)[0]
            long = short = None
            valued = repeatable = False
            for alias in display.split(","):
                if not (match := _ALIAS.fullmatch(alias.strip())):
                    raise ValueError("unsupported option display %r" % display)
                if match["name"].startswith("--"):
                    long = match["name"]
                else:
                    short = match["name"]
                valued |= bool(match["valued"])
                repeatable |= bool(match["repeat"])
            self._declare(Switch(long, short, valued, repeatable))

    def _read_usage(self, lines, /):
        usage = []
        for line in lines:
            if usage and not line.strip():
                break
            if usage:
                usage.append(line.strip())
            elif line.lower().startswith("usage:"):
                usage.append(line[len("usage:"):].strip())

        if not usage or not usage[0]:
            return

        self.program = usage[0].split()[0]
        alternatives = []
        for line in usage:
            words = line.split()
            if words and words[0] == self.program:
                alternatives.append(words[1:])
            elif alternatives:
                alternatives[-1].extend(words)

        for words in alternatives:
            self.patterns.append(self._pattern(words))

    def _pattern(self, words, /):
        shortcut = False
        switches = {}
        slots = []
        for word in words:
            if word == "[options]":
                shortcut = True
                continue
            if not (match := _TOKEN.fullmatch(word)) or bool(match["open"]) != bool(match["close"]):
                raise ValueError("unsupported usage token %r" % word)

            optional = bool(match["open"])
            repeat = bool(match["inner"] or match["outer"])
            body = match["body"]
            if body.startswith("<"):
                slots.append(Slot(body, optional, repeat))
            else:
                long = body.split("=")[0]
                self._declare(Switch(long, None, bool(match["valued"]), repeat))
                switches[long] = (optional, repeat)

        return Pattern(" ".join([self.program, *words]), shortcut, switches, tuple(slots))


class _Occurrence(NamedTuple):
    switch: Switch
    value: object
    position: int


def _unknown(input, position, grammar, /):
    suggestions = difflib.get_close_matches(input, grammar.switches.keys(), 5)
    try:
        hint = "did you mean %r? you can also run '%s --help' to see all options" % (suggestions[0], grammar.program)
    except IndexError:
        hint = "try '%s --help' to see all available options" % grammar.program
    return UnknownSwitchError(
        "unknown option or flag %r at %s position" % (input, _ordinal(position)),
        title="unknown option or flag",
        code=FaultCode.UNKNOWN_SWITCH,
        input=input,
        suggestions=suggestions,
        hint=hint,
    )


def _flag_assignment(input, position, /):
    return FlagAssignmentError(
        "flag %r at %s position cannot have an inline value" % (input, _ordinal(position)),
        title="flag cannot take a value",
        code=FaultCode.FLAG_ASSIGNMENT,
        input=input,
        hint="remove everything from '=' (for example: %s)" % input,
    )


def _value_required(input, position, /):
    return OptionValueRequiredError(
        "option %r at %s position requires a value" % (input, _ordinal(position)),
        title="missing option value",
        code=FaultCode.OPTION_VALUE_REQUIRED,
        input=input,
        hint="provide a value (e.g., %s=value)" % input,
    )


def _tokenize(grammar, argv, /, *, smart, repeatable):
    """
    Split argv into switch occurrences and positional values.

    raises MalformedTokenError, UnknownSwitchError, FlagAssignmentError or
    OptionValueRequiredError for the first offending token.
    """
    occurrences = []
    positionals = []
    index = 0

    def take(input, position):
        nonlocal index
        if index < len(argv) and not (argv[index].startswith("-") and argv[index] != "-"):
            index += 1
            return argv[index - 1]
        raise _value_required(input, position)

    while index < len(argv):
        token = argv[index]
        index += 1
        position = index

        if token == "--":
            positionals.extend(argv[index:])
            break

        if token.startswith("--"):
            if not (match := _LONG.fullmatch(token)):
                raise MalformedTokenError(
                    "bad form of option or flag %r at %s position" % (token, _ordinal(position)),
                    title="malformed option or flag",
                    code=FaultCode.MALFORMED_TOKEN,
                    token=token,
                    hint="try '%s --help' to see valid spellings and forms (e.g., --name=value)" % grammar.program,
                )

            input = "--" + match["name"]
            if (switch := grammar.switches.get(input)) is None:
                raise _unknown(input, position, grammar)

            value = match["value"]
            if not switch.valued:
                if value is not None:
                    raise _flag_assignment(input, position)
                occurrences.append(_Occurrence(switch, True, position))
            elif value is not None:
                occurrences.append(_Occurrence(switch, value, position))
            else:
                occurrences.append(_Occurrence(switch, take(input, position), position))
                # spaced form of a repeatable option keeps taking plain values
                while repeatable and switch.repeatable and index < len(argv) and not argv[index].startswith("-"):
                    occurrences.append(_Occurrence(switch, argv[index], index + 1))
                    index += 1
            continue

        if token.startswith("-") and token != "-":
            letters = token[1:]
            switch = grammar.switches.get(token[:2])
            if not smart and switch is not None and not switch.valued and len(letters) > 1 and letters[1] != "=":
                raise MalformedTokenError(
                    "grouped short flags %r at %s position are not supported" % (token, _ordinal(position)),
                    title="malformed option or flag",
                    code=FaultCode.MALFORMED_TOKEN,
                    token=token,
                    hint="pass each short flag separately (for example: -%s)" % letters[0],
                )

            for offset, letter in enumerate(letters):
                input = "-" + letter
                if (switch := grammar.switches.get(input)) is None:
                    raise _unknown(input, position, grammar)

                rest = letters[offset + 1:]
                if switch.valued:
                    value = (rest[1:] if rest.startswith("=") else rest) if rest else take(input, position)
                    occurrences.append(_Occurrence(switch, value, position))
                    break
                if rest.startswith("="):
                    raise _flag_assignment(input, position)
                occurrences.append(_Occurrence(switch, True, position))
            continue

        positionals.append(token)

    return occurrences, positionals


def _allocate(slots, values, /):
    """
    Distribute positional values over slots, left to right.

    every required slot gets one value; optional slots take one more while
    values remain and the first repeating slot absorbs the rest.
    returns a list of value lists (one per slot) or None when impossible.
    """
    minimum = sum(not slot.optional for slot in slots)
    if len(values) < minimum:
        return None
    if len(values) > minimum + sum(slot.optional for slot in slots) and not any(slot.repeat for slot in slots):
        return None

    surplus = len(values) - minimum
    allocation = []
    for slot in slots:
        count = 0 if slot.optional else 1
        if slot.repeat:
            count, surplus = count + surplus, 0
        elif slot.optional and surplus:
            count, surplus = 1, surplus - 1
        allocation.append(count)

    result, start = [], 0
    for count in allocation:
        result.append(values[start:start + count])
        start += count
    return result


def _fit(pattern, grammar, occurrences, positionals, /, *, repeatable):
    """
    Try one usage alternative; return the raw map or raise its mismatch fault.
    """
    counts = {}
    for occurrence in occurrences:
        counts.setdefault(occurrence.switch.name, []).append(occurrence)

    for long, (optional, _) in pattern.switches.items():
        if not optional and grammar.switches[long].name not in counts:
            raise MissingElementError(
                "missing required option %r" % long,
                title="missing required element",
                code=FaultCode.MISSING_ELEMENTS,
                input=long,
                hint="usage: %s" % pattern.line,
            )

    for name, found in counts.items():
        switch = found[0].switch
        listed = switch.long in pattern.switches
        if not listed and not pattern.shortcut:
            raise UnexpectedArgumentError(
                "option %r at %s position is not allowed here" % (name, _ordinal(found[0].position)),
                title="unexpected argument",
                code=FaultCode.UNEXPECTED_ARGUMENT,
                input=name,
                hint="usage: %s" % pattern.line,
            )
        marked = switch.repeatable or (listed and pattern.switches[switch.long][1])
        if len(found) > 1 and not repeatable and not marked:
            raise DuplicatedSwitchError(
                "option %r repeated at %s position" % (name, _ordinal(found[1].position)),
                title="duplicated option or flag",
                code=FaultCode.DUPLICATED_SWITCH,
                input=name,
                hint="pass %s only once" % name,
            )

    allocation = _allocate(pattern.slots, positionals)
    if allocation is None:
        minimum = sum(not slot.optional for slot in pattern.slots)
        if len(positionals) < minimum:
            missing = [slot.name for slot in pattern.slots if not slot.optional][len(positionals):]
            raise MissingElementError(
                "missing required argument%s %s" % ("s" * (len(missing) > 1), ", ".join(missing)),
                title="missing required element",
                code=FaultCode.MISSING_ELEMENTS,
                input=missing[0],
                hint="usage: %s" % pattern.line,
            )
        raise UnexpectedArgumentError(
            "unexpected argument %r" % positionals[-1],
            title="unexpected argument",
            code=FaultCode.UNEXPECTED_ARGUMENT,
            input=positionals[-1],
            hint="usage: %s" % pattern.line,
        )

    raw = {}
    for name, found in counts.items():
        switch = found[0].switch
        if not switch.valued:
            value = True
        elif len(found) > 1 or switch.repeatable:
            value = [occurrence.value for occurrence in found]
        else:
            value = found[0].value
        for key in switch.keys():
            raw[key] = value

    for slot, values in zip(pattern.slots, allocation):
        if values:
            raw[slot.name] = list(values) if slot.repeat else values[0]

    return raw


def _asks_help(token, grammar, /, *, smart):
    """
    whether token requests help: "-h"/"--help" when undeclared, or an
    undeclared "h" inside a smart short cluster before any value starts.
    """
    if token in ("-h", "--help"):
        return token not in grammar.switches
    if not smart or "-h" in grammar.switches or not token.startswith("-") or token.startswith("--"):
        return False
    for letter in token[1:]:
        if letter == "h":
            return True
        switch = grammar.switches.get("-" + letter)
        if switch is None or switch.valued:
            return False
    return False


def _match(grammar, argv, /, *, smart, repeatable, version):
    grammar = Grammar(grammar)

    for token in argv:
        if token == "--":
            break
        if _asks_help(token, grammar, smart=smart):
            raise HelpRequested(grammar.text, title="help", code=FaultCode.HELP_REQUESTED)
        if token == "--version" and version and token not in grammar.switches:
            raise VersionRequested(version, title="version", code=FaultCode.VERSION_REQUESTED)

    occurrences, positionals = _tokenize(grammar, argv, smart=smart, repeatable=repeatable)

    fault = None
    for pattern in grammar.patterns:
        try:
            raw = _fit(pattern, grammar, occurrences, positionals, repeatable=repeatable)
        except GrammarMismatchError as exception:
            fault = fault or exception
            continue
        logger.debug("matched %r against %r", argv, pattern.line)
        return raw

    raise fault


def match(grammar, argv, /, *, smart=True, repeatable=True, exiting=False, version=None):
    """
    Match an argument vector against grammar text.

    parameters
    - grammar: the grammar document (usage lines plus option table).
    - argv: argument tokens, without interpreter and script path.
    - smart: allow grouped short flags (-abc) and glued values (-bVALUE).
    - repeatable: any option may be repeated; values accumulate into lists.
    - exiting: print help/version/faults through the rich console and exit
      instead of raising.
    - version: version string answered to --version (disabled when falsy).

    returns
    - dict: raw map (see module documentation).

    raises
    - HelpRequested / VersionRequested for help and version requests.
    - GrammarMismatchError subclasses when argv does not fit the grammar.
    - ValueError when the grammar text itself is not understood.
    """
    try:
        return _match(grammar, list(argv), smart=smart, repeatable=repeatable, version=version)
    except GrammarException as fault:
        if not exiting:
            raise
        trigger(fault, shell=True)


__all__ = (
    "Grammar",
    "match",
)
