"""Live reload of the open document.

Two daemon threads cooperate through a bounded :class:`queue.Queue`:

* :class:`FileWatcher` polls the file's ``(inode, mtime_ns, ctime_ns, size)``
  signature and posts a :class:`FileEvent` whenever it changes.  It never
  touches the document; when the queue is full the event is dropped, the next
  re-read picks the change up anyway.
* :class:`Reconciler` re-reads the file for every event and replaces the
  shared :class:`ContentBuffer` only when the text actually differs.  The
  application's own writes therefore come back as identical text and cause
  no further change.

Polling stat data is not an OS change notification.  A file rewritten in
place with the same size, within the filesystem's timestamp resolution and
between two polls, keeps its signature and the change goes unseen until the
next write.  Writes made through :func:`confedit.fileio.write_document`
replace the file and always change the inode.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path

from .errors import IOFailureError, WatchError
from .fileio import read_document

logger = logging.getLogger("confedit.watch")

DEFAULT_POLL_INTERVAL = 0.25
DEFAULT_QUEUE_SIZE = 100


class ContentBuffer:
    """The document text shared between the UI and the reconciler.

    Every method holds the lock only for the duration of a read, compare
    or assignment.
    """

    def __init__(self, text: str = "") -> None:
        self._text = text
        self._revision = 0
        self._lock = threading.Lock()

    def get(self) -> str:
        with self._lock:
            return self._text

    def set(self, text: str) -> None:
        with self._lock:
            if text != self._text:
                self._text = text
                self._revision += 1

    def replace_if_different(self, text: str) -> bool:
        with self._lock:
            if text == self._text:
                return False
            self._text = text
            self._revision += 1
            return True

    @property
    def revision(self) -> int:
        """Counter bumped on every effective change of the text."""
        with self._lock:
            return self._revision


@dataclass(frozen=True)
class FileEvent:
    path: Path
    at: float = field(default_factory=time.monotonic)


def _signature(path: Path) -> tuple[int, int, int, int] | None:
    try:
        st = path.stat()
    except OSError:
        return None
    return (st.st_ino, st.st_mtime_ns, st.st_ctime_ns, st.st_size)


class FileWatcher:
    """Post a :class:`FileEvent` to *events* whenever *path* changes."""

    def __init__(
        self,
        path: Path,
        events: queue.Queue[FileEvent | None],
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.path = Path(path)
        self.events = events
        self.interval = interval
        self.dropped = 0
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._last: tuple[int, int, int, int] | None = None

    def start(self) -> None:
        sig = _signature(self.path)
        if sig is None:
            raise WatchError(f"cannot watch {self.path}: file is not accessible")
        self._last = sig
        self._thread = threading.Thread(
            target=self._run, name="confedit-watch", daemon=True
        )
        self._thread.start()
        logger.debug("watching %s every %.2fs", self.path, self.interval)

    def poll(self) -> bool:
        """Check the file once; return ``True`` if an event was posted."""
        sig = _signature(self.path)
        if sig is None or sig == self._last:
            return False
        self._last = sig
        try:
            self.events.put_nowait(FileEvent(self.path))
        except queue.Full:
            self.dropped += 1
            logger.debug("event queue full; dropped change of %s", self.path)
            return False
        return True

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.poll()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None


class Reconciler:
    """Fold external file changes into a :class:`ContentBuffer`."""

    def __init__(
        self,
        path: Path,
        buffer: ContentBuffer,
        events: queue.Queue[FileEvent | None],
    ) -> None:
        self.path = Path(path)
        self.buffer = buffer
        self.events = events
        self._thread: threading.Thread | None = None

    def reconcile(self) -> bool:
        """Re-read the file; return ``True`` if the buffer was replaced."""
        try:
            text = read_document(self.path)
        except IOFailureError as exc:
            logger.warning("re-read failed: %s", exc)
            return False
        replaced = self.buffer.replace_if_different(text)
        if replaced:
            logger.info("reloaded %s after external change", self.path)
        return replaced

    def start(self) -> None:
        self._thread = threading.Thread(
            target=self._run, name="confedit-reconcile", daemon=True
        )
        self._thread.start()

    def _run(self) -> None:
        while True:
            event = self.events.get()
            try:
                if event is None:
                    return
                self.reconcile()
            finally:
                self.events.task_done()

    def stop(self) -> None:
        if self._thread is None:
            return
        self.events.put(None)
        self._thread.join()
        self._thread = None


__all__ = [
    "ContentBuffer",
    "DEFAULT_POLL_INTERVAL",
    "DEFAULT_QUEUE_SIZE",
    "FileEvent",
    "FileWatcher",
    "Reconciler",
]
