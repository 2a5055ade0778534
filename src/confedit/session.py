"""Editing session for a single document.

A :class:`Session` owns the shared text buffer of one file and keeps three
views of it in step: the raw text, the parsed tree and the file on disk.
The host shell calls :meth:`Session.render_and_sync` once per frame; tree
edits are serialized and written back, raw edits are written verbatim and
external changes arrive through :mod:`confedit.watch`.
"""

from __future__ import annotations

import logging
import queue
from dataclasses import dataclass
from pathlib import Path

from .errors import IOFailureError, ParseError, SerializeError, WatchError
from .fileio import read_document, write_document
from .formats import FormatAdapter, adapter_for_path
from .search import Search
from .ui.core import Renderer
from .value import KeyPath, Value
from .walker import TreeEditor
from .watch import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_QUEUE_SIZE,
    ContentBuffer,
    FileEvent,
    FileWatcher,
    Reconciler,
)

logger = logging.getLogger("confedit.session")


class Document:
    """Session state of one open file.

    ``raw_text`` is the source of truth; ``parsed`` is derived from it and
    rebuilt whenever the text differs from the text it was parsed from.
    A failed parse leaves ``parsed`` as ``None`` with ``parse_error`` set.
    """

    def __init__(
        self,
        path: Path,
        adapter: FormatAdapter | None,
        buffer: ContentBuffer,
    ) -> None:
        self.path = Path(path)
        self.adapter = adapter
        self.buffer = buffer
        self.parsed: Value = None
        self.parse_error: ParseError | None = None
        self.dirty_marker: KeyPath | None = None
        self._parsed_from: str | None = None

    @property
    def raw_text(self) -> str:
        return self.buffer.get()

    @raw_text.setter
    def raw_text(self, text: str) -> None:
        self.buffer.set(text)

    @property
    def format_name(self) -> str:
        return self.adapter.name if self.adapter is not None else ""

    def refresh(self) -> bool:
        """Re-parse ``raw_text`` if it changed; return ``True`` if a tree is available."""
        if self.adapter is None:
            return False
        text = self.raw_text
        if text != self._parsed_from:
            try:
                self.parsed = self.adapter.parse(text)
                self.parse_error = None
            except ParseError as exc:
                self.parsed = None
                self.parse_error = exc
                logger.debug("parse failed for %s: %s", self.path, exc)
            self._parsed_from = text
        return self.parse_error is None

    def invalidate(self) -> None:
        self._parsed_from = None


@dataclass
class SyncResult:
    modified: bool = False
    error: str | None = None
    highlighted: KeyPath | None = None


def open(path: str | Path) -> Document:  # noqa: A001
    """Load *path* into a new :class:`Document` and attempt a first parse."""
    path = Path(path)
    doc = Document(path, adapter_for_path(path), ContentBuffer(read_document(path)))
    doc.refresh()
    return doc


class Session:
    """Drive a :class:`Document` for the lifetime of an editor window."""

    def __init__(
        self,
        document: Document,
        *,
        watch: bool = True,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        queue_size: int = DEFAULT_QUEUE_SIZE,
    ) -> None:
        self.document = document
        adapter = document.adapter
        self.editor = TreeEditor(
            null_adds_fields=adapter.null_adds_fields if adapter is not None else False
        )
        self.search = Search()
        self.events: queue.Queue[FileEvent | None] = queue.Queue(maxsize=queue_size)
        self.watcher = FileWatcher(document.path, self.events, interval=poll_interval)
        self.reconciler = Reconciler(document.path, document.buffer, self.events)
        self.watch_error: WatchError | None = None
        self.save_error: str | None = None
        if watch:
            self.start_watching()

    @classmethod
    def open(cls, path: str | Path, **kwargs) -> Session:
        return cls(open(path), **kwargs)

    # -- live reload ---------------------------------------------------
    def start_watching(self) -> None:
        try:
            self.watcher.start()
        except WatchError as exc:
            self.watch_error = exc
            logger.warning("live reload disabled: %s", exc)
            return
        self.reconciler.start()

    def close(self) -> None:
        self.watcher.stop()
        self.reconciler.stop()

    # -- edits ---------------------------------------------------------
    def edit_raw(self, text: str) -> str | None:
        """Replace the buffer with *text* and write it to disk as is.

        Returns an error message when the write failed.
        """
        self.document.raw_text = text
        try:
            write_document(self.document.path, text)
        except IOFailureError as exc:
            logger.error("%s", exc)
            self.save_error = str(exc)
            return self.save_error
        self.save_error = None
        return None

    def render_and_sync(self, renderer: Renderer | None = None) -> SyncResult:
        """Run one frame: parse, walk, and persist the tree if it changed."""
        doc = self.document
        renderer = renderer or Renderer()
        if doc.adapter is None:
            return SyncResult(error=f"Unknown file type: {doc.path.suffix or doc.path.name}")
        if not doc.refresh():
            return SyncResult(error=f"Invalid {doc.format_name}: {doc.parse_error}")

        walk = self.editor.walk(doc.parsed, renderer)
        doc.parsed = walk.value
        if not walk.modified:
            return SyncResult(error=self.save_error)

        doc.dirty_marker = walk.highlighted
        self.search.follow(walk.highlighted)
        result = SyncResult(modified=True, highlighted=walk.highlighted)
        try:
            text = doc.adapter.serialize(doc.parsed)
        except SerializeError as exc:
            logger.error("cannot encode %s: %s", doc.path, exc)
            self.save_error = result.error = f"Cannot save {doc.format_name}: {exc}"
            return result

        self.save_error = None
        # Disk first: a concurrent re-read sees either the old or the new text.
        try:
            write_document(doc.path, text)
        except IOFailureError as exc:
            logger.error("%s", exc)
            self.save_error = result.error = str(exc)
        doc.raw_text = text
        doc.invalidate()
        return result


__all__ = ["Document", "Session", "SyncResult", "open"]
