"""The format independent value tree.

Documents are held as plain Python objects: ``None``, ``bool``, ``int``,
``float``, ``str``, ``dict`` (string keys, insertion ordered) and ``list``.
:func:`kind_of` gives the variant of a node and :func:`values_equal`
compares two trees variant by variant, so ``1``, ``1.0`` and ``True`` are
three different values even though Python considers them equal.
"""

from __future__ import annotations

import datetime as _dt
from collections.abc import Mapping
from enum import Enum
from typing import Any, Union

Value = Any
KeyPath = tuple[Union[str, int], ...]


class ValueKind(Enum):
    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    MAPPING = "mapping"
    SEQUENCE = "sequence"


def kind_of(value: Value) -> ValueKind:
    """Return the :class:`ValueKind` of *value*.

    ``bool`` is checked before ``int`` because it is a subclass of it.
    """
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INT
    if isinstance(value, float):
        return ValueKind.FLOAT
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, dict):
        return ValueKind.MAPPING
    if isinstance(value, list):
        return ValueKind.SEQUENCE
    raise TypeError(f"unsupported value type: {type(value).__name__}")


def is_container(value: Value) -> bool:
    return isinstance(value, (dict, list))


def values_equal(a: Value, b: Value) -> bool:
    """Structural equality: same variant, same children, same key order."""
    kind = kind_of(a)
    if kind is not kind_of(b):
        return False
    if kind is ValueKind.MAPPING:
        if list(a) != list(b):
            return False
        return all(values_equal(a[k], b[k]) for k in a)
    if kind is ValueKind.SEQUENCE:
        if len(a) != len(b):
            return False
        return all(values_equal(x, y) for x, y in zip(a, b))
    if kind is ValueKind.FLOAT and a != a and b != b:
        # NaN compares unequal to itself but is the same value here.
        return True
    return a == b


def normalize(obj: object) -> Value:
    """Convert parser output into the value model.

    Mapping keys are stringified, tuples become lists and date/time objects
    become ISO-8601 strings.  Anything else that is not part of the model
    raises :class:`TypeError`.
    """
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, Mapping):
        out: dict[str, Value] = {}
        for k, v in obj.items():
            out[_key_text(k)] = normalize(v)
        return out
    if isinstance(obj, (list, tuple)):
        return [normalize(v) for v in obj]
    if isinstance(obj, (_dt.datetime, _dt.date, _dt.time)):
        return obj.isoformat()
    raise TypeError(f"unsupported value type: {type(obj).__name__}")


def _key_text(key: object) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def format_path(path: KeyPath) -> str:
    """Render *path* as ``a.b[0].c`` for labels and log messages."""
    out = ""
    for seg in path:
        if isinstance(seg, int):
            out += f"[{seg}]"
        elif out:
            out += f".{seg}"
        else:
            out = seg
    return out


__all__ = [
    "KeyPath",
    "Value",
    "ValueKind",
    "format_path",
    "is_container",
    "kind_of",
    "normalize",
    "values_equal",
]
