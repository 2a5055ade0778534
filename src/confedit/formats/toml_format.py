from __future__ import annotations

import tomllib

import tomlkit

from ..errors import ParseError, SerializeError
from ..value import Value, normalize
from . import register_adapter
from .base import FormatAdapter


def _strip_nulls(value: Value, where: str = "document") -> Value:
    """Drop ``None`` table entries; TOML has no null."""
    if isinstance(value, dict):
        return {
            k: _strip_nulls(v, k) for k, v in value.items() if v is not None
        }
    if isinstance(value, list):
        if any(v is None for v in value):
            raise SerializeError(f"TOML arrays cannot hold null values ({where})")
        return [_strip_nulls(v, where) for v in value]
    return value


@register_adapter
class TomlAdapter(FormatAdapter):
    """TOML documents; read with :mod:`tomllib`, written with :mod:`tomlkit`.

    Dates and times are read as ISO strings and written back as strings.
    """

    name = "TOML"
    suffixes = (".toml",)
    null_adds_fields = True

    def parse(self, text: str) -> Value:
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise ParseError(str(exc)) from exc
        except RecursionError as exc:
            raise ParseError("document is nested too deeply") from exc
        try:
            return normalize(data)
        except TypeError as exc:
            raise ParseError(str(exc)) from exc
        except RecursionError as exc:
            raise ParseError("document is nested too deeply") from exc

    def serialize(self, value: Value) -> str:
        if not isinstance(value, dict):
            raise SerializeError("Root of a TOML document must be a table")
        data = _strip_nulls(value)
        try:
            return tomlkit.dumps(data)
        except (TypeError, ValueError) as exc:
            raise SerializeError(str(exc)) from exc
