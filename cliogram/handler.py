"""
Cliogram command line boundary.

CommandLine couples the engine with the process streams: parse() resolves
descriptor values from the argument vector and output() writes a result (or
a fault) and returns the exit code.

Output contract
- success: {"data": value} as JSON (indent 1) on stdout, exit code 0.
- faults tagged with the parsing status (help, version, mismatch): their raw
  message on stderr, exit code 1.
- any other exception: {"error": {"code": status or 500, "message": ...}}
  as JSON on stderr, exit code 1.
"""
import json
import logging
import sys

from rich.console import Console

from .parser import CommandLineArgs
from .utils import Unset, coalesce

logger = logging.getLogger(__name__)


class CommandLine:
    def __init__(self, args=Unset, /, *, stdout=Unset, stderr=Unset, description=Unset, status=Unset):
        self._args = list(coalesce(args, [sys.executable, *sys.argv]))
        self._stdout = coalesce(stdout, sys.stdout)
        self._stderr = coalesce(stderr, sys.stderr)
        self._engine = CommandLineArgs(self._args, description=description, status=status)

    @property
    def args(self):
        return list(self._args)

    @property
    def stdout(self):
        return self._stdout

    @property
    def stderr(self):
        return self._stderr

    @property
    def status(self):
        return self._engine.status

    def parse(self, descriptors, /):
        """
        Resolve descriptor values from the argument vector (see CommandLineArgs.values).
        """
        return self._engine.values(descriptors)

    def _write(self, stream, text, /):
        Console(file=stream, highlight=False, soft_wrap=True).out(text, highlight=False)

    def output(self, value, /):
        """
        Write a parse outcome to the matching stream and return the exit code.
        """
        if isinstance(value, BaseException):
            status = getattr(value, "status", None)
            if status is not None and status == self.status:
                self._write(self._stderr, str(value))
            else:
                logger.debug("reporting %s as a structured error", type(value).__name__)
                self._write(self._stderr, json.dumps({
                    "error": {
                        "code": status or 500,
                        "message": str(value),
                    },
                }, indent=1))
            return 1

        self._write(self._stdout, json.dumps({"data": value}, indent=1))
        return 0


__all__ = (
    "CommandLine",
)
