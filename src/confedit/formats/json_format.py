from __future__ import annotations

import json

import pyjson5

from ..errors import ParseError, SerializeError
from ..value import Value, normalize
from . import register_adapter
from .base import FormatAdapter


def _reject_constant(name: str) -> float:
    raise ValueError(f"{name} is not valid JSON")


@register_adapter
class JsonAdapter(FormatAdapter):
    """JSON documents written with a two space indent."""

    name = "JSON"
    suffixes = (".json",)

    def _decode(self, text: str) -> object:
        return json.loads(text, parse_constant=_reject_constant)

    def parse(self, text: str) -> Value:
        try:
            data = self._decode(text)
        except (ValueError, pyjson5.Json5Exception) as exc:
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
        # NaN and infinities have no JSON spelling
        try:
            text = json.dumps(value, indent=2, ensure_ascii=False, allow_nan=False)
        except (TypeError, ValueError, RecursionError) as exc:
            raise SerializeError(str(exc)) from exc
        return text + "\n"


@register_adapter
class Json5Adapter(JsonAdapter):
    """JSON5 documents.

    Comments and trailing commas are accepted on read; the file is written
    back as plain JSON, so ``NaN`` and ``Infinity`` read from a JSON5 file
    cannot be saved.
    """

    name = "JSON5"
    suffixes = (".json5",)

    def _decode(self, text: str) -> object:
        return pyjson5.decode(text)
