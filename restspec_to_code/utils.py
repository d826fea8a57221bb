"""
Identifier normalization for generated client code.

Turns schema identifiers (resource, method, finder, action and parameter
names) into member and type identifiers.
"""

import re

# Word splitter used for module file names
_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z]|[0-9]|$)|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def normalize_underscores(name: str) -> str:
    """Drop underscores and upper-case the character following each one.

    Examples:
        "batch_get" -> "batchGet"
        "partial_update" -> "partialUpdate"
        "widget_" -> "widget"
    """
    output = []
    capitalize_next = False
    for c in name:
        if c == "_":
            capitalize_next = True
            continue
        if capitalize_next:
            output.append(c.upper())
            capitalize_next = False
        else:
            output.append(c)
    return "".join(output)


def normalize_caps(name: str) -> str:
    """Collapse runs of capitals so that only word starts stay upper-case.

    The first character always starts a word. An upper-case letter starts a
    word when one of its neighbours is lower-case, unless it is the last
    character. Every other character is lower-cased.

    Examples:
        "getWidgetByID" -> "GetWidgetById"
        "IOError" -> "IoError"
        "URL" -> "Url"
    """
    output = []
    boundary = True
    last = len(name) - 1
    for i, c in enumerate(name):
        if c.isupper():
            if i == 0:
                boundary = True
            elif i == last:
                boundary = False
            elif name[i - 1].islower() or name[i + 1].islower():
                boundary = True

        output.append(c.upper() if boundary else c.lower())
        boundary = False
    return "".join(output)


def name_caps_case(name: str) -> str:
    """Type-name form of a schema identifier, e.g. "batch_get" -> "BatchGet"."""
    return normalize_caps(normalize_underscores(name))


def name_camel_case(name: str) -> str:
    """Member-name form of a schema identifier, e.g. "batch_get" -> "batchGet"."""
    normalized = name_caps_case(name)
    if not normalized:
        return ""
    return normalized[0].lower() + normalized[1:]


def capitalize(name: str) -> str:
    """Upper-case the first character and leave the rest untouched."""
    if not name:
        return ""
    return name[0].upper() + name[1:]


def to_code_identifiers(name: str) -> tuple[str, str]:
    """Return the (camelCase, PascalCase) identifiers for a schema name."""
    return name_camel_case(name), name_caps_case(name)


def to_snake_case(text: str) -> str:
    """Convert a PascalCase or camelCase type name to a snake_case module name.

    Examples:
        "WidgetsBuilders" -> "widgets_builders"
        "HTTPStatusBuilders" -> "http_status_builders"
    """
    if not text:
        return ""
    return "_".join(word.lower() for word in _WORD_PATTERN.findall(text.replace("-", "_")))
