"""
Cliogram grammar compiler: descriptors to grammar elements.

What this module provides
- Element: one compiled record per descriptor (display token for the help
  table, usage token for usage lines, short alias, flags, rendered description).
- Elements: the two order-preserving element tables (arguments, options),
  keyed by descriptor name and iterated in the fixed Category order.
- compile(descriptors): build Elements from an ordered descriptor sequence.

Naming rules
- Dash names come from camelCase identifiers ("outputPath" -> "output-path").
- Toggles (non-vector booleans) whose current value is truthy are named after
  the state that overrides it: "force" defaulting to true becomes "no-force".
- Two descriptors deriving the same name abort compilation with
  DuplicateElementNameError; so do two options sharing a short alias. Both
  are declaration bugs, never user errors.

Token shapes
- argument usage:  <name>
- option usage:    --name=<value>    (toggles: --name)
- option display:  -x=<value>, --name=<value>   (vectors add "..." to both)
- argument display: name
"""
import json
import logging
from typing import NamedTuple

from .descriptors import Category
from .faults import DuplicateElementNameError, FaultCode
from .utils import dasherize, isnumeric, quote, pmap

logger = logging.getLogger(__name__)


class Element(NamedTuple):
    """
    Compiled grammar element (immutable).

    Fields
    - category: Category of the element.
    - display: token listed in the reference table.
    - usage: token used inside usage lines.
    - short: "-x" alias or None (options only).
    - short_display: alias as listed in the table, or None.
    - required: whether the grammar requires the element.
    - vector: whether the element repeats.
    - descr: rendered description (defaults and type annotation included).
    """
    category: Category
    display: str
    usage: str
    short: str | None
    short_display: str | None
    required: bool
    vector: bool
    descr: str

    @property
    def key(self):
        """
        the name portion of the usage token (what a matcher reports it under).
        """
        return self.usage.split("=")[0]


class Elements:
    """
    Argument and option element tables of one compile pass.

    Indexing by Category returns the matching table; iteration over items()
    always yields arguments first, then options.
    """

    def __init__(self):
        self._tables = {category: {} for category in Category}

    @property
    def arguments(self):
        return self._tables[Category.ARGUMENT]

    @property
    def options(self):
        return self._tables[Category.OPTION]

    def __getitem__(self, category, /):
        return self._tables[Category(category)]

    def items(self):
        return self._tables.items()

    def __len__(self):
        return sum(map(len, self._tables.values()))

    def __repr__(self):
        return "elements(arguments=%r, options=%r)" % (list(self.arguments), list(self.options))


def _describe(descriptor, /):
    """
    Render the help description of a descriptor.

    "<descr> [default: <v1> <v2>] (<type> type)." where the default block is
    omitted for toggles and empty descriptors, string items that do not read
    as numbers are quoted, and vectors are annotated as "<type>[]".
    """
    description = descriptor.descr or ""

    if not descriptor.toggle and not descriptor.empty:
        serialized = descriptor.serialize()
        values = json.loads(serialized) if descriptor.vector else [serialized]
        defaults = []
        for value in values:
            if isinstance(value, str) and not isnumeric(value):
                defaults.append(quote(value))
            else:
                defaults.append(value if isinstance(value, str) else json.dumps(value))

        if description:
            description += " "
        description += "[default: %s]" % " ".join(defaults)

    if description:
        description += " "
    description += "(%s%s type)." % (descriptor.type, "[]" * descriptor.vector)

    return description


def compile(descriptors, /):
    """
    Compile an ordered descriptor sequence into Elements.

    behavior
    - descriptions (which serialize defaults) are computed concurrently, one
      task per descriptor, and joined back in declaration order.
    - dash names are derived in declaration order; the first collision raises
      DuplicateElementNameError before anything else is built.
    - an element is required iff the descriptor is required, has no value,
      and is not a toggle (a toggle's absence is meaningful on its own).

    returns
    - Elements with both tables in declaration order.
    """
    descriptors = tuple(descriptors)
    descriptions = pmap(_describe, descriptors)

    elements = Elements()
    names = {}
    shorts = {}

    for descriptor, description in zip(descriptors, descriptions):
        name = dasherize(descriptor.name)

        if descriptor.toggle and descriptor.value:
            name = "no-" + name

        if name in names:
            raise DuplicateElementNameError(
                "ambiguous element name %r derived from both %r and %r" % (name, names[name], descriptor.name),
                title="duplicate element name",
                code=FaultCode.DUPLICATE_ELEMENT,
                hint="rename one of the parameters so their command line names differ",
                name=name,
            )
        names[name] = descriptor.name

        category = Category(descriptor.element or Category.OPTION)

        if category is Category.ARGUMENT:
            usage = "<%s>" % name
            display = name
            short = short_display = None
        else:
            usage = "--%s" % name
            short = "-%s" % descriptor.short if descriptor.short else None
            if short in shorts:
                raise DuplicateElementNameError(
                    "ambiguous short option %r declared by both %r and %r" % (short, shorts[short], descriptor.name),
                    title="duplicate element name",
                    code=FaultCode.DUPLICATE_ELEMENT,
                    hint="give one of the parameters a different short code, or none",
                    name=short,
                )
            if short:
                shorts[short] = descriptor.name
            short_display = short
            if not descriptor.toggle:
                usage += "=<value>"
                if short:
                    short_display += "=<value>"

            display = usage + "..." * descriptor.vector
            if short:
                display = "%s%s, %s" % (short_display, "..." * descriptor.vector, display)

        elements[category][descriptor.name] = Element(
            category,
            display,
            usage,
            short,
            short_display,
            bool(descriptor.required and descriptor.empty and not descriptor.toggle),
            bool(descriptor.vector),
            description,
        )

    logger.debug("compiled %d argument(s) and %d option(s)", len(elements.arguments), len(elements.options))
    return elements


__all__ = (
    "Element",
    "Elements",
    "compile",
)
