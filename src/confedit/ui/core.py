"""Framework agnostic drawing interface for the tree editor.

The walker in :mod:`confedit.walker` is immediate mode: every frame it
visits the whole tree and asks a :class:`Renderer` to draw one control per
node.  Each control method returns the interaction the user performed on
that control since the previous frame (``None``/``False`` when nothing
happened).  This module knows nothing about any widget toolkit; the tkinter
front-end in :mod:`confedit.ui.tk` subclasses :class:`InteractionRenderer`
and only adds widget creation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from ..value import KeyPath

Number = Union[int, float]


@dataclass(slots=True)
class FieldDraft:
    """Pending key/value text of an "add field" affordance."""

    key: str = ""
    value: str = ""


class Renderer:
    """Drawing interface used by :class:`~confedit.walker.TreeEditor`.

    The default implementation draws nothing and reports no interaction,
    which makes it usable for headless passes.
    """

    def begin_group(self, path: KeyPath, label: str) -> bool:
        """Start a collapsible group; return ``True`` when it is open."""
        return False

    def end_group(self, path: KeyPath) -> None:
        pass

    def text_field(self, path: KeyPath, label: str, value: str) -> str | None:
        return None

    def number_field(self, path: KeyPath, label: str, value: Number) -> Number | None:
        return None

    def toggle(self, path: KeyPath, label: str, value: bool) -> bool | None:
        return None

    def placeholder(self, path: KeyPath, label: str) -> None:
        pass

    def add_field(self, path: KeyPath, label: str, draft: FieldDraft) -> bool:
        """Draw key/value inputs bound to *draft*; return ``True`` on commit."""
        return False

    def remove_button(self, path: KeyPath) -> bool:
        return False

    def add_element_button(self, path: KeyPath) -> bool:
        return False


@dataclass
class InteractionRenderer(Renderer):
    """Renderer that replays interactions posted between frames.

    Views (or tests) call :meth:`post` when the user acts on a control and
    the next walk picks the interaction up when it reaches the control's
    path.  Interactions for controls that are not drawn in that walk are
    discarded by :meth:`finish_frame`.  Group open state is kept in
    :attr:`open_groups`; groups start closed.
    """

    open_groups: set[KeyPath] = field(default_factory=set)
    drawn: list[tuple[str, KeyPath]] = field(default_factory=list)
    _pending: dict[tuple[str, KeyPath], Any] = field(default_factory=dict)

    # -- view side -----------------------------------------------------
    def post(self, kind: str, path: KeyPath, payload: Any = True) -> None:
        self._pending[(kind, tuple(path))] = payload

    def set_open(self, path: KeyPath, is_open: bool = True) -> None:
        if is_open:
            self.open_groups.add(tuple(path))
        else:
            self.open_groups.discard(tuple(path))

    def has_pending(self) -> bool:
        return bool(self._pending)

    def start_frame(self) -> None:
        self.drawn.clear()

    def finish_frame(self) -> None:
        self._pending.clear()

    def _take(self, kind: str, path: KeyPath) -> Any:
        self.drawn.append((kind, path))
        return self._pending.pop((kind, path), None)

    # -- Renderer ------------------------------------------------------
    def begin_group(self, path: KeyPath, label: str) -> bool:
        self.drawn.append(("group", path))
        return path in self.open_groups

    def text_field(self, path: KeyPath, label: str, value: str) -> str | None:
        return self._take("text", path)

    def number_field(self, path: KeyPath, label: str, value: Number) -> Number | None:
        return self._take("number", path)

    def toggle(self, path: KeyPath, label: str, value: bool) -> bool | None:
        if self._take("toggle", path) is None:
            return None
        return not value

    def placeholder(self, path: KeyPath, label: str) -> None:
        self.drawn.append(("null", path))

    def add_field(self, path: KeyPath, label: str, draft: FieldDraft) -> bool:
        payload = self._take("add_field", path)
        if payload is None:
            return False
        draft.key = payload.get("key", draft.key)
        draft.value = payload.get("value", draft.value)
        return bool(payload.get("commit", True))

    def remove_button(self, path: KeyPath) -> bool:
        return bool(self._take("remove", path))

    def add_element_button(self, path: KeyPath) -> bool:
        return bool(self._take("append", path))


__all__ = ["FieldDraft", "InteractionRenderer", "Number", "Renderer"]
