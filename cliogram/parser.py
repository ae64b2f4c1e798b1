"""
Cliogram argument parsing: grammar text + argv to raw values, and the engine
that runs the whole pipeline for a descriptor set.

Pipeline (one call of CommandLineArgs.values)

    descriptors -> grammar.compile -> usage.build -> parse -> resolver.resolve

Nothing is cached between calls: elements and grammar text are rebuilt from
the current descriptor values on every run.
"""
import logging
import os

from . import grammar, resolver, settings, usage
from .faults import GrammarException, trigger
from .matcher import match
from .utils import Unset, coalesce

logger = logging.getLogger(__name__)


def parse(grammar, argv, version=None, /, *, status=None, matcher=match):
    """
    Match argv (interpreter and script path excluded) against grammar text.

    The matcher runs with grouped short options and repeatable options on,
    never exits, and answers --version with the given version.

    returns
    - the raw map produced by the matcher.

    raises
    - HelpRequested / VersionRequested carrying the text and the status marker.
    - GrammarMismatchError (or a subclass) carrying the status marker.
    """
    try:
        return matcher(grammar, list(argv), smart=True, repeatable=True, exiting=False, version=version)
    except GrammarException as fault:
        logger.debug("parse stopped by %s: %s", type(fault).__name__, fault)
        trigger(fault, status=status)


class CommandLineArgs:
    """
    Command line engine bound to one process argument vector.

    args holds the full vector: interpreter path, script path, then the user
    supplied tokens. The executable shown in usage lines is the basename of
    the script path.
    """

    def __init__(self, args, /, *, description=Unset, status=Unset, matcher=match):
        if not isinstance(args, list | tuple) or not all(isinstance(arg, str) for arg in args):
            raise TypeError("command-line-args 'args' must be a list of strings")
        if len(args) < 2:
            raise ValueError("command-line-args 'args' must hold at least the interpreter and the script path")
        if not os.path.basename(args[1]):
            raise ValueError("command-line-args script path %r does not name an executable" % args[1])
        if not isinstance(description, str | Unset):
            raise TypeError("command-line-args 'description' must be a string")
        if not callable(matcher):
            raise TypeError("command-line-args 'matcher' must be callable")

        self._args = list(args)
        self._description = coalesce(description)
        self._status = coalesce(status, settings.get("parsing-error-status"))
        self._matcher = matcher

    @property
    def args(self):
        return list(self._args)

    @property
    def executable(self):
        return os.path.basename(self._args[1])

    @property
    def description(self):
        return self._description

    @property
    def status(self):
        return self._status

    def values(self, descriptors, /):
        """
        Run compile, build, parse and resolve for the visible descriptors.

        returns dict[name, str | list[str]] for every descriptor present on
        the command line. Help, version and mismatch faults propagate tagged
        with this engine's status.
        """
        descriptors = [descriptor for descriptor in descriptors if not descriptor.hidden]

        elements = grammar.compile(descriptors)
        text = usage.build(elements, self.executable, self._description)
        raw = parse(text, self._args[2:], settings.get("api-version"), status=self._status, matcher=self._matcher)

        return resolver.resolve(raw, elements, descriptors)

    def __repr__(self):
        return "command-line-args(%r)" % self._args


__all__ = (
    "parse",
    "CommandLineArgs",
)
