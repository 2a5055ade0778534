from __future__ import annotations

import yaml

from ..errors import ParseError, SerializeError
from ..value import Value, normalize
from . import register_adapter
from .base import FormatAdapter


@register_adapter
class YamlAdapter(FormatAdapter):
    """YAML documents via PyYAML's safe loader and dumper."""

    name = "YAML"
    suffixes = (".yaml", ".yml")
    null_adds_fields = True

    def parse(self, text: str) -> Value:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ParseError(str(exc)) from exc
        except RecursionError as exc:
            raise ParseError("document is nested too deeply") from exc
        try:
            return normalize(data)
        except TypeError as exc:
            raise ParseError(str(exc)) from exc
        except RecursionError as exc:
            # a self-referencing alias never bottoms out
            raise ParseError("document refers to itself or is nested too deeply") from exc

    def serialize(self, value: Value) -> str:
        try:
            return yaml.safe_dump(value, sort_keys=False, allow_unicode=True)
        except yaml.YAMLError as exc:
            raise SerializeError(str(exc)) from exc
