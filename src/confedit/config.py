"""Editor settings read from ``settings.ini`` in the user config directory.

Only the ``[editor]`` section is used::

    [editor]
    poll_interval = 0.25
    queue_size = 100
    row_height = 14
    indent = 24
"""

from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass, fields
from pathlib import Path

from .paths import settings_file
from .watch import DEFAULT_POLL_INTERVAL, DEFAULT_QUEUE_SIZE

logger = logging.getLogger(__name__)

SECTION = "editor"


@dataclass(frozen=True)
class Settings:
    poll_interval: float = DEFAULT_POLL_INTERVAL
    queue_size: int = DEFAULT_QUEUE_SIZE
    row_height: float = 14.0
    indent: int = 24


def read_sections(path: Path) -> dict[str, dict[str, str]]:
    parser = configparser.ConfigParser(strict=False)
    data: dict[str, dict[str, str]] = {}
    if path.exists():
        try:
            parser.read(path, encoding="utf-8")
        except configparser.Error as exc:
            logger.warning("Failed to read config %s: %s", path, exc)
            return {}
        for section in parser.sections():
            data[section] = dict(parser.items(section))
    return data


def load_settings(path: Path | None = None) -> Settings:
    """Return :class:`Settings`, falling back to defaults per bad value."""
    path = path or settings_file()
    raw = read_sections(path).get(SECTION, {})
    values: dict[str, object] = {}
    for f in fields(Settings):
        if f.name not in raw:
            continue
        conv = int if f.type in ("int", int) else float
        try:
            value = conv(raw[f.name])
        except ValueError:
            logger.warning("Ignoring invalid %s=%r in %s", f.name, raw[f.name], path)
            continue
        if value <= 0:
            logger.warning("Ignoring non-positive %s=%r in %s", f.name, raw[f.name], path)
            continue
        values[f.name] = value
    return Settings(**values)


__all__ = ["Settings", "load_settings", "read_sections"]
