"""
Cliogram utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the grammar compiler, the usage builder and
  the descriptor layer.

Overview
- UnsetType / Unset
  • Singleton sentinel for “value not provided”, distinct from None.
- coalesce(value, default=None)
  • Replace Unset with a concrete default, preserving other falsey values.
- rename(callable, name) / @rename("name")
  • Stable __name__/__qualname__ for generated callables.
- mirror("attr")
  • Read-only property exposing a private backing field (self._attr).
- dasherize(text)
  • camelCase identifiers to the dash convention used on command lines.
- isnumeric(text)
  • Whether a serialized value reads as a number (quoted otherwise in help).
- quote(text)
  • Double-quote a value, escaping inner quotes.
- pmap(function, iterable)
  • Order-preserving parallel map used for per-descriptor fan-out.

Quick examples
    >>> dasherize("outputPath")
    'output-path'
    >>> isnumeric("0x1F"), isnumeric("abc")
    (True, False)
    >>> quote('say "hi"')
    '"say \\\\"hi\\\\""'
"""
import builtins
import copy
import functools
import re
from concurrent.futures import ThreadPoolExecutor
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset".
    - Non-subclassable and a singleton per process.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations (e.g., str | UnsetType).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is
    replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name)           -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" from the instance. Mutable
    containers are handed out as shallow copies so callers cannot alter the
    owner's state through the public API.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        object = getattr(self, "_" + name)
        if isinstance(object, list | dict | set):
            return copy.copy(object)
        return object

    return property(getter)


@functools.cache
def dasherize(text, /):
    """
    Convert a camelCase identifier to the dash convention of command lines.

    Only lower-to-upper transitions start a new word, so acronyms stay
    glued together ("parseURL" -> "parse-url", "HTTPServer" -> "httpserver").
    """
    if not isinstance(text, str):
        raise TypeError("dasherize() argument must be a string")
    return re.sub(r"([a-z])([A-Z])", r"\1-\2", text).lower()


# Whatever a JavaScript-style Number() coercion accepts.
_NUMERIC = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
    r"|[+-]?Infinity"
    r"|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+"
    r"|"
)


def isnumeric(text, /):
    """
    Whether a serialized value reads as a number.

    Surrounding whitespace is ignored and the empty string counts as numeric
    (it coerces to zero), which keeps such defaults unquoted in help output.
    """
    if not isinstance(text, str):
        raise TypeError("isnumeric() argument must be a string")
    return _NUMERIC.fullmatch(text.strip()) is not None


def quote(text, /):
    """
    Wrap a value in double quotes, escaping the quotes it already contains.
    """
    return '"%s"' % text.replace('"', '\\"')


def pmap(function, iterable, /, *, workers=8):
    """
    Order-preserving parallel map.

    Every item is scheduled as its own task on a short-lived thread pool; the
    results come back in input order regardless of completion order. The
    first exception raised by a task propagates to the caller.
    """
    items = list(iterable)
    if len(items) < 2:
        return list(map(function, items))
    with ThreadPoolExecutor(max_workers=min(workers, len(items)), thread_name_prefix="cliogram") as executor:
        return list(executor.map(function, items))


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid value but “no input” must still
be told apart; materialize with coalesce().
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "dasherize",
    "isnumeric",
    "quote",
    "pmap",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
