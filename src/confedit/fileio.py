from __future__ import annotations

import os
from pathlib import Path

from .errors import IOFailureError


def read_document(path: Path) -> str:
    """Return the text of *path* with its line endings untouched."""
    try:
        with Path(path).open(encoding="utf-8", newline="") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise IOFailureError(f"cannot read {path}: {exc}") from exc


def write_document(path: Path, text: str) -> None:
    """Replace *path* with *text* through a temporary sibling file.

    Readers never observe a half written document.
    """
    path = Path(path)
    tmp = path.with_suffix(path.suffix + ".tmp")
    try:
        with tmp.open("w", encoding="utf-8", newline="") as fh:
            fh.write(text)
        os.replace(tmp, path)
    except OSError as exc:
        tmp.unlink(missing_ok=True)
        raise IOFailureError(f"cannot write {path}: {exc}") from exc


__all__ = ["read_document", "write_document"]
