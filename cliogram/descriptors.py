r"""
Cliogram parameter descriptors.

Overview
- Category: the closed set of grammar element categories (argument, option).
- Parameter: the bundled, concrete descriptor. Any object exposing the same
  read-only surface (see descriptors.pyi, Descriptor protocol) can be fed to
  the compiler instead.

Descriptor surface
- name: unique identifier (camelCase names become dash names on the command line).
- type: semantic type tag ("text", "numeric", "bool", ...).
- vector: repeatable value (list).
- required / empty: the grammar requires an element only when both hold.
- toggle: non-vector boolean; decided once at construction.
- element: Category.ARGUMENT or Category.OPTION (default).
- short: optional single-letter alias for options.
- descr: optional description shown in help.
- hidden: excluded from the grammar entirely.
- value: current/default value (mutable between parses).
- serialize(): display serialization of the value (JSON array for vectors).

Validation highlights
- Names must be identifiers; type tags non-empty strings.
- Short aliases are a single letter or digit and only apply to options.
- Vector values must be lists or tuples (stored as lists).
"""
import builtins
import functools
import json
import operator
import re
from enum import StrEnum

from .utils import *


class Category(StrEnum):
    """
    grammar element categories, iterated in this fixed order everywhere.
    """
    ARGUMENT = "argument"
    OPTION = "option"


class DescriptorType(type):
    """
    Metaclass that exposes sanitized fields as read-only properties.

    - __typename__ is derived from the class name (camel-case split with
      hyphens) and used in messages.
    - every name listed in __introspectable__ becomes a mirror() property over
      the "_<name>" backing field, unless the class defines it itself.
    - __repr__/__rich_repr__ list the introspectable fields.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            {
                name: mirror(name) for name in namespace.get("__introspectable__", ()) if name not in namespace
            } | namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _encode(value, /):
    """
    Default per-item encoder: booleans as '1'/'0', everything else via str().
    """
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize Parameter metadata in place.

    Raises
    - TypeError: wrong types (non-string name/type/descr, non-callable
      serializer, non-list vector value, short alias on an argument).
    - ValueError: empty strings, invalid identifiers or aliases.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not re.fullmatch(r"[^\W\d]\w*", name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' must be a valid identifier")
    metadata["name"] = name

    if not isinstance(type := metadata["type"], str):
        raise TypeError(f"{cls.__typename__} 'type' must be a string")
    elif not (type := type.strip()):
        raise ValueError(f"{cls.__typename__} 'type' cannot be empty")
    metadata["type"] = type

    try:
        metadata["element"] = Category(metadata["element"])
    except ValueError:
        raise ValueError(f"{cls.__typename__} 'element' must be one of %s" % ", ".join(map(repr, map(str, Category)))) from None

    if not isinstance(short := metadata["short"], str | UnsetType):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    elif isinstance(short, str) and not re.fullmatch(r"[^\W_]", short):
        raise ValueError(f"{cls.__typename__} 'short' must be a single letter or digit")
    elif short and metadata["element"] is Category.ARGUMENT:
        raise TypeError(f"argument {cls.__typename__} cannot specify a 'short' option")
    metadata["short"] = coalesce(short)

    if not isinstance(descr := metadata["descr"], str | UnsetType):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)

    if not callable(metadata["serializer"]):
        raise TypeError(f"{cls.__typename__} 'serializer' must be callable")


class Parameter(metaclass=DescriptorType):
    """
    Concrete, typed command-line parameter descriptor.

    Highlights
    - Required by default, like a declared input with no fallback.
    - Boolean-typed scalars ("bool"/"boolean") behave as toggles: the grammar
      names the state that overrides the current value.
    - The value may be reassigned between parses; every parse regenerates the
      grammar from it.
    """

    __introspectable__ = (
        "name",
        "type",
        "vector",
        "required",
        "element",
        "short",
        "descr",
        "hidden",
        "value",
    )

    def __init__(
            self,
            name,
            type="text",
            /,
            *,
            vector=False,
            required=True,
            value=None,
            element=Category.OPTION,
            short=Unset,
            descr=Unset,
            hidden=False,
            serializer=_encode,
    ):
        """
        Construct a Parameter.

        Parameters
        - name: str, identifier such as "outputPath".
        - type: str, semantic tag; "bool"/"boolean" scalars become toggles.
        - vector: bool, the parameter accepts several values.
        - required: bool, required unless a value is present.
        - value: current/default value (None means empty).
        - element: Category or "argument"/"option".
        - short: single letter alias (options only).
        - descr: help description.
        - hidden: hide from the command line grammar.
        - serializer: per-item encoder used by serialize().
        """
        metadata = {
            "name": name,
            "type": type,
            "element": element,
            "short": short,
            "descr": descr,
            "serializer": serializer,
        }
        _sanitize_metadata(builtins.type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._vector = builtins.bool(vector)
        self._required = builtins.bool(required)
        self._hidden = builtins.bool(hidden)
        self.value = value

    @property
    def value(self):
        if self._vector and self._value is not None:
            return list(self._value)
        return self._value

    @value.setter
    def value(self, value):
        if self._vector and value is not None:
            if not isinstance(value, list | tuple):
                raise TypeError(f"vector {builtins.type(self).__typename__} 'value' must be a list")
            value = list(value)
        self._value = value

    @property
    def toggle(self):
        """
        True only for non-vector boolean-typed parameters.
        """
        return self._type in ("bool", "boolean") and not self._vector

    @property
    def empty(self):
        return self._value is None or (self._vector and not self._value)

    def serialize(self):
        """
        Serialize the current value for display.

        Scalars become a single string; vectors become a JSON array of
        encoded items. Returns None when the parameter is empty.
        """
        if self.empty:
            return None
        if self._vector:
            return json.dumps(list(map(self._serializer, self._value)))
        return self._serializer(self._value)


__all__ = (
    "Category",
    "Parameter",
)
