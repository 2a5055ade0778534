from __future__ import annotations

import re

from ..value import Value

_INT_RE = re.compile(r"[+-]?\d+")


def infer_value(raw: str) -> Value:
    """Infer a typed value from the text of an "add field" entry.

    Precedence is boolean (``true``/``false`` in any case), integer, float
    and finally the text itself as a string.
    """
    text = raw.strip()
    lower = text.lower()
    if lower == "true":
        return True
    if lower == "false":
        return False
    if _INT_RE.fullmatch(text):
        return int(text)
    if "_" in text:
        # float() accepts digit separators; keep such text as a string.
        return raw
    try:
        return float(text)
    except ValueError:
        return raw


def coerce_number(original: int | float, new: int | float) -> int | float:
    """Apply an edited number to a node, keeping its numeric subtype.

    Integers stay integers unless the new value has a fractional part;
    floats stay floats. An integer too large for a float leaves a float
    node unchanged.
    """
    if isinstance(original, bool):
        raise TypeError("booleans are not numbers")
    if isinstance(original, int):
        if isinstance(new, float) and not new.is_integer():
            return new
        return int(new)
    try:
        return float(new)
    except OverflowError:
        return original
