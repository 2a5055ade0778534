"""Format adapter registry and factory."""
from __future__ import annotations

from pathlib import Path

from .base import FormatAdapter

_REGISTRY: dict[str, type[FormatAdapter]] = {}


def register_adapter(adapter: type[FormatAdapter]) -> type[FormatAdapter]:
    """Register an adapter class and return it for decorator use."""
    for suf in adapter.suffixes:
        _REGISTRY[suf] = adapter
    return adapter


def adapter_for_path(path: str | Path) -> FormatAdapter | None:
    """Return the adapter for *path*'s suffix, or ``None`` if unknown."""
    adapter_cls = _REGISTRY.get(Path(path).suffix.lower())
    if adapter_cls is None:
        return None
    return adapter_cls()


def known_suffixes() -> list[str]:
    return sorted(_REGISTRY)


# register default adapters
from . import json_format, toml_format, yaml_format  # noqa: F401,E402

__all__ = ["FormatAdapter", "adapter_for_path", "known_suffixes", "register_adapter"]
