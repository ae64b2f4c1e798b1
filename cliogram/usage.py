"""
Cliogram usage builder: elements to the full grammar document.

Document layout (byte for byte)

    <description>.
    <blank line>
    Usage: <executable> <required options> [options] <arguments>
           <executable> <required arguments> [options] ... [--vector=<value>...]
    <blank line>
    Arguments:
      <display>  <descr>
    <blank line>
    Options:
      <display>  <descr>

Primary line ordering
- required options (declaration order), then the "[options]" shortcut;
- required arguments, non-vector first, then vector;
- optional arguments wrapped in brackets, non-vector first, then vector;
- "..." only on the last required vector argument, and only when no optional
  argument exists. With optional arguments present the primary line carries no
  repetition marker at all; this under-documents repeatable positionals but
  matches the convention consumers of this text already parse.

Secondary lines
- one per vector option, isolating its repetition on a dedicated line.
"""
import logging

from .descriptors import Category

logger = logging.getLogger(__name__)

_headers = {
    Category.ARGUMENT: "Arguments:",
    Category.OPTION: "Options:",
}


def _ordered(names, table, /):
    """
    non-vector names first, then vector ones, each group in declaration order.
    """
    return [name for name in names if not table[name].vector] + [name for name in names if table[name].vector]


def _description(description, /):
    if not description:
        return ""
    if not description.endswith("."):
        description += "."
    return description + "\n\n"


def _usage(elements, executable, /):
    arguments = elements.arguments
    options = elements.options

    # required options
    output = "Usage: %s " % executable
    required_options = [name for name, element in options.items() if element.required]
    if required_options:
        output += " ".join(options[name].usage for name in required_options)
        output += " "
    output += "[options]"

    # arguments
    required = _ordered([name for name, element in arguments.items() if element.required], arguments)
    optional = _ordered([name for name, element in arguments.items() if not element.required], arguments)

    for name in required:
        output += " " + arguments[name].usage
        if arguments[name].vector and not optional and name == required[-1]:
            output += "..."

    for name in optional:
        output += " [%s]" % arguments[name].usage

    # one dedicated line per vector option
    for name, element in options.items():
        if not element.vector:
            continue

        output += "\n       %s " % executable
        for argument in required:
            output += arguments[argument].usage + " "

        output += "[options] "
        if required_options:
            output += " ".join(options[other].usage for other in required_options if other != name)
            output += " "

        token = element.usage + "..."
        output += token if element.required else "[%s]" % token

    return output


def _columns(elements, /):
    columns = "\n"

    for category, table in elements.items():
        if not table:
            continue

        width = max(len(element.display) for element in table.values())
        columns += "\n%s\n" % _headers[category]
        for element in table.values():
            columns += "  %s  %s\n" % (element.display.ljust(width), element.descr)

    return columns


def build(elements, executable, /, description=None):
    """
    Assemble the grammar document for compiled elements.

    parameters
    - elements: Elements produced by grammar.compile().
    - executable: program name shown on every usage line.
    - description: optional leading paragraph (a final period is added when missing).

    returns
    - str: description block + usage lines + reference table.

    notes
    - the text is rebuilt on every call; descriptor defaults may have changed.
    """
    if not isinstance(executable, str) or not executable:
        raise TypeError("build() executable must be a non-empty string")
    if description is not None and not isinstance(description, str):
        raise TypeError("build() description must be a string")

    text = _description(description) + _usage(elements, executable) + _columns(elements)
    logger.debug("built grammar for %r (%d line(s))", executable, text.count("\n"))
    return text


__all__ = (
    "build",
)
