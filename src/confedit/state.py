from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .paths import state_file

logger = logging.getLogger("confedit.state")


def _load_state(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.debug("ignoring unreadable state file %s: %s", path, exc)
        return {}
    if isinstance(data, dict):
        return data
    return {}


def load_last_file(path: Path | None = None) -> Path | None:
    """Return the last opened document if it still exists."""

    state = _load_state(path or state_file())
    value = state.get("last_file")
    if isinstance(value, str) and value.strip():
        candidate = Path(value.strip())
        if candidate.is_file():
            return candidate
    return None


def save_last_file(document: Path, path: Path | None = None) -> None:
    """Remember *document* as the last opened file."""

    path = path or state_file()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        state = _load_state(path)
        state["last_file"] = str(Path(document).resolve())
        path.write_text(json.dumps(state), encoding="utf-8")
    except OSError as exc:
        # Persistence failures are non-fatal for the editor.
        logger.warning("could not remember %s: %s", document, exc)


__all__ = ["load_last_file", "save_last_file"]
