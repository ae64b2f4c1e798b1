"""
Cliogram result resolver: raw matcher output back onto descriptor names.
"""
import logging

from .descriptors import Category

logger = logging.getLogger(__name__)


def _owner(key, elements, /):
    for category in Category:
        for name, element in elements[category].items():
            if element.key == key or element.short == key:
                return name
    return None


def resolve(raw, elements, descriptors, /):
    """
    Map a raw matcher result onto descriptor names.

    rules
    - a key belongs to the first element (arguments, then options, in
      declaration order) whose usage token before "=" or whose short alias
      equals it; keys owned by nobody are ignored.
    - once a descriptor is resolved, its alternate spellings are skipped.
    - toggles report the overriding state: "true" when the current value is
      falsy, "false" otherwise.
    - vector descriptors always resolve to lists.

    descriptors absent from raw are absent from the result.
    """
    descriptors = {descriptor.name: descriptor for descriptor in descriptors}
    values = {}

    for key, value in raw.items():
        name = _owner(key, elements)
        if name is None or name in values or (descriptor := descriptors.get(name)) is None:
            continue

        if descriptor.toggle and isinstance(value, bool):
            value = "false" if descriptor.value else "true"
        elif descriptor.vector and not isinstance(value, list):
            value = [value]

        values[name] = value

    logger.debug("resolved %s", ", ".join(values) or "nothing")
    return values


__all__ = (
    "resolve",
)
