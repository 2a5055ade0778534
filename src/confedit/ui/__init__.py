"""Toolkit independent UI helpers for :mod:`confedit`."""

from .core import FieldDraft, InteractionRenderer, Renderer
from .value_parser import coerce_number, infer_value

__all__ = [
    "FieldDraft",
    "InteractionRenderer",
    "Renderer",
    "coerce_number",
    "infer_value",
]
