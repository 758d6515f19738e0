"""Name helpers for component classes.

Component classes map to template file names, collection parameters and
preview names through their snake-cased class name.
"""

from __future__ import annotations

import re

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_IDENTIFIER_UNSAFE = re.compile(r"\W")

# Irregular plurals that show up as slot names
_IRREGULAR = {
    "child": "children",
    "person": "people",
    "man": "men",
    "woman": "women",
}
_UNCOUNTABLE = frozenset({"info", "information", "media", "metadata", "news", "series"})


def underscore(name: str) -> str:
    """Convert a CamelCase class name to snake_case.

    Example:
        >>> underscore("HTMLButtonComponent")
        'html_button_component'
    """
    return _CAMEL_BOUNDARY.sub("_", name).replace("-", "_").lower()


def remove_suffix(name: str, suffix: str) -> str:
    """Strip ``suffix`` from ``name`` when present (``str.chomp``)."""
    if suffix and name.endswith(suffix) and name != suffix:
        return name[: -len(suffix)]
    return name


def pluralize(word: str) -> str:
    """Return the English plural of a slot name.

    Covers regular suffix rules plus a short irregular table; compound
    snake_case names pluralize their last segment.

    Example:
        >>> pluralize("tab"), pluralize("entry"), pluralize("box")
        ('tabs', 'entries', 'boxes')
    """
    head, sep, last = word.rpartition("_")
    if last in _UNCOUNTABLE:
        return word
    if last in _IRREGULAR:
        plural = _IRREGULAR[last]
    elif re.search(r"[^aeiou]y$", last):
        plural = last[:-1] + "ies"
    elif re.search(r"(s|x|z|ch|sh)$", last):
        plural = last + "es"
    else:
        plural = last + "s"
    return f"{head}{sep}{plural}"


def identifier(name: str) -> str:
    """Turn an arbitrary variant name into a valid Python identifier fragment.

    Example:
        >>> identifier("mini-phone")
        'mini_phone'
    """
    return _IDENTIFIER_UNSAFE.sub("_", name)
