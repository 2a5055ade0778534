from __future__ import annotations

from .value import KeyPath


def find_line(text: str, query: str) -> int | None:
    """Return the 0-based line of the first case-insensitive match."""
    if not query:
        return None
    lowered = text.lower()
    pos = lowered.find(query.lower())
    if pos < 0:
        return None
    return lowered.count("\n", 0, pos)


def find_scroll_offset(text: str, query: str, row_height: float) -> float | None:
    """Return the vertical offset that brings *query*'s line into view."""
    line = find_line(text, query)
    if line is None:
        return None
    return line * row_height


class Search:
    """One-shot search over the raw buffer.

    :meth:`submit` arms the search; the next :meth:`take_offset` computes
    the scroll offset once and disarms it.  The query is kept so a search
    without a match can simply be submitted again.
    """

    def __init__(self) -> None:
        self.query = ""
        self._armed = False

    @property
    def armed(self) -> bool:
        return self._armed

    def submit(self, query: str) -> None:
        self.query = query
        self._armed = True

    def follow(self, path: KeyPath | None) -> None:
        """Arm the search with the last segment of an edited *path*."""
        if path:
            self.submit(str(path[-1]))

    def take_offset(self, text: str, row_height: float) -> float | None:
        if not self._armed:
            return None
        self._armed = False
        return find_scroll_offset(text, self.query, row_height)


__all__ = ["Search", "find_line", "find_scroll_offset"]
