"""Tk based front-end for :mod:`confedit`.

The window shows the raw text on the left and the field tree on the
right.  The tree pane is rebuilt from scratch on every frame by
:class:`TkRenderer`; widget callbacks only post interactions to the
renderer and schedule the next frame, where the walker applies them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

try:  # pragma: no cover - tkinter availability depends on the env
    import tkinter as tk
    import tkinter.font as tkfont
    from tkinter import ttk
except Exception:  # pragma: no cover - fallback when tkinter missing
    tk = None  # type: ignore
    tkfont = None  # type: ignore
    ttk = None  # type: ignore

from ..config import Settings, load_settings
from ..session import Session
from ..state import save_last_file
from ..value import KeyPath
from .core import FieldDraft, InteractionRenderer, Number

logger = logging.getLogger("confedit.ui.tk")

_POLL_MS = 200


class TkRenderer(InteractionRenderer):  # pragma: no cover - needs a display
    """Draw the walker's controls into a tkinter frame."""

    def __init__(
        self,
        container: tk.Widget,
        schedule: Callable[[], None],
        *,
        indent: int = 24,
    ) -> None:
        super().__init__()
        self.container = container
        self.schedule = schedule
        self.indent = indent
        self._stack: list[tk.Widget] = [container]
        self._groups: list[KeyPath] = []

    @property
    def _parent(self) -> tk.Widget:
        return self._stack[-1]

    def start_frame(self) -> None:
        super().start_frame()
        for child in self.container.winfo_children():
            child.destroy()
        self._stack = [self.container]
        self._groups = []

    def _act(self, kind: str, path: KeyPath, payload: object = True) -> None:
        self.post(kind, path, payload)
        self.schedule()

    def _row(self, label: str) -> ttk.Frame:
        row = ttk.Frame(self._parent)
        row.pack(fill="x", anchor="w", padx=(self.indent, 0), pady=1)
        if label:
            ttk.Label(row, text=f"{label}:").pack(side="left")
        return row

    def begin_group(self, path: KeyPath, label: str) -> bool:
        is_open = super().begin_group(path, label)
        frame = ttk.Frame(self._parent)
        frame.pack(fill="x", anchor="w", padx=(self.indent, 0))
        header = ttk.Label(frame, text=("▾ " if is_open else "▸ ") + label)
        header.pack(anchor="w")

        def _toggle(_event: tk.Event) -> None:
            self.set_open(path, not is_open)
            self.schedule()

        header.bind("<Button-1>", _toggle)
        if is_open:
            body = ttk.Frame(frame)
            body.pack(fill="x", anchor="w")
            self._stack.append(body)
            self._groups.append(path)
        return is_open

    def end_group(self, path: KeyPath) -> None:
        if self._groups and self._groups[-1] == path:
            self._groups.pop()
            self._stack.pop()

    def text_field(self, path: KeyPath, label: str, value: str) -> str | None:
        row = self._row(label)
        var = tk.StringVar(row, value=value)
        entry = ttk.Entry(row, textvariable=var)
        entry.pack(side="left", fill="x", expand=True)

        def _commit(_event: tk.Event) -> None:
            if var.get() != value:
                self._act("text", path, var.get())

        entry.bind("<Return>", _commit)
        entry.bind("<FocusOut>", _commit)
        return super().text_field(path, label, value)

    def number_field(self, path: KeyPath, label: str, value: Number) -> Number | None:
        row = self._row(label)
        var = tk.StringVar(row, value=repr(value))
        step = 1 if isinstance(value, int) else 0.1
        spin = ttk.Spinbox(row, textvariable=var, from_=-1e18, to=1e18, increment=step)
        spin.pack(side="left")

        def _commit(*_args: object) -> None:
            text = var.get().strip()
            try:
                number: Number = int(text)
            except ValueError:
                try:
                    number = float(text)
                except ValueError:
                    return
            self._act("number", path, number)

        spin.configure(command=_commit)
        spin.bind("<Return>", _commit)
        spin.bind("<FocusOut>", _commit)
        return super().number_field(path, label, value)

    def toggle(self, path: KeyPath, label: str, value: bool) -> bool | None:
        row = self._row(label)
        var = tk.BooleanVar(row, value=value)
        ttk.Checkbutton(
            row, variable=var, command=lambda: self._act("toggle", path)
        ).pack(side="left")
        return super().toggle(path, label, value)

    def placeholder(self, path: KeyPath, label: str) -> None:
        row = self._row(label)
        ttk.Label(row, text="null", foreground="gray").pack(side="left")
        super().placeholder(path, label)

    def add_field(self, path: KeyPath, label: str, draft: FieldDraft) -> bool:
        row = self._row(label)
        key_var = tk.StringVar(row, value=draft.key)
        val_var = tk.StringVar(row, value=draft.value)
        ttk.Label(row, text="new key").pack(side="left", padx=(4, 0))
        key_entry = ttk.Entry(row, textvariable=key_var, width=14)
        key_entry.pack(side="left")
        ttk.Label(row, text="value").pack(side="left", padx=(4, 0))
        val_entry = ttk.Entry(row, textvariable=val_var, width=18)
        val_entry.pack(side="left")

        def _sync(*_args: object) -> None:
            draft.key = key_var.get()
            draft.value = val_var.get()

        def _commit(_event: tk.Event) -> None:
            _sync()
            if draft.key.strip():
                self._act("add_field", path, {"key": draft.key, "value": draft.value})

        key_var.trace_add("write", _sync)
        val_var.trace_add("write", _sync)
        for entry in (key_entry, val_entry):
            entry.bind("<Return>", _commit)
        val_entry.bind("<FocusOut>", _commit)
        return super().add_field(path, label, draft)

    def remove_button(self, path: KeyPath) -> bool:
        ttk.Button(
            self._parent, text="✕ Remove", command=lambda: self._act("remove", path)
        ).pack(anchor="w", padx=(self.indent * 2, 0))
        return super().remove_button(path)

    def add_element_button(self, path: KeyPath) -> bool:
        ttk.Button(
            self._parent, text="+ Add element", command=lambda: self._act("append", path)
        ).pack(anchor="w", padx=(self.indent, 0), pady=(2, 0))
        return super().add_element_button(path)


class App:  # pragma: no cover - needs a display
    """Editor window bound to one :class:`~confedit.session.Session`."""

    def __init__(
        self,
        session: Session,
        master: tk.Misc | None = None,
        *,
        settings: Settings | None = None,
        show_raw: bool = True,
    ) -> None:
        if tk is None:
            raise RuntimeError("tkinter is required for the editor window")
        self.session = session
        self.settings = settings or load_settings()
        self.root = master if master is not None else tk.Tk()
        self.root.title(f"confedit – {session.document.path.name}")
        self.root.geometry("1000x700")
        self._frame_pending = False
        self._loading = False
        self._revision = -1

        self._build_toolbar(show_raw)
        self._build_panes()
        self.renderer = TkRenderer(
            self.tree_frame, self.schedule_frame, indent=self.settings.indent
        )
        font = tkfont.nametofont("TkFixedFont")
        self.row_height = float(font.metrics("linespace") or self.settings.row_height)
        if session.watch_error is not None:
            self._set_status(f"Live reload disabled: {session.watch_error}")
        self._load_raw()
        self.schedule_frame()
        self.root.after(_POLL_MS, self._poll)

    # -- layout --------------------------------------------------------
    def _build_toolbar(self, show_raw: bool) -> None:
        bar = ttk.Frame(self.root, padding=4)
        bar.pack(fill="x")
        self.show_raw = tk.BooleanVar(bar, value=show_raw)
        ttk.Checkbutton(
            bar, text="Show raw editor", variable=self.show_raw, command=self._apply_layout
        ).pack(side="left")
        ttk.Label(bar, text="Search:").pack(side="left", padx=(12, 2))
        self.search_var = tk.StringVar(bar)
        search = ttk.Entry(bar, textvariable=self.search_var, width=24)
        search.pack(side="left")
        search.bind("<Return>", self._on_search)
        ttk.Label(bar, text=str(self.session.document.path), font="TkFixedFont").pack(
            side="left", padx=(12, 0)
        )
        self.status = ttk.Label(self.root, foreground="red", padding=(4, 0))
        self.status.pack(fill="x")

    def _build_panes(self) -> None:
        self.panes = ttk.PanedWindow(self.root, orient="horizontal")
        self.panes.pack(fill="both", expand=True)

        self.raw_frame = ttk.Frame(self.panes)
        self.text = tk.Text(self.raw_frame, wrap="none", undo=False, font="TkFixedFont")
        yscroll = ttk.Scrollbar(self.raw_frame, orient="vertical", command=self.text.yview)
        self.text.configure(yscrollcommand=yscroll.set)
        yscroll.pack(side="right", fill="y")
        self.text.pack(fill="both", expand=True)
        self.text.bind("<<Modified>>", self._on_raw_modified)

        tree_outer = ttk.Frame(self.panes)
        canvas = tk.Canvas(tree_outer, highlightthickness=0)
        tscroll = ttk.Scrollbar(tree_outer, orient="vertical", command=canvas.yview)
        canvas.configure(yscrollcommand=tscroll.set)
        tscroll.pack(side="right", fill="y")
        canvas.pack(fill="both", expand=True)
        self.tree_frame = ttk.Frame(canvas)
        canvas.create_window((0, 0), window=self.tree_frame, anchor="nw")
        self.tree_frame.bind(
            "<Configure>", lambda _e: canvas.configure(scrollregion=canvas.bbox("all"))
        )
        self.tree_outer = tree_outer
        self._apply_layout()

    def _apply_layout(self) -> None:
        for pane in self.panes.panes():
            self.panes.forget(pane)
        if self.show_raw.get():
            self.panes.add(self.raw_frame, weight=1)
        self.panes.add(self.tree_outer, weight=1)

    def _set_status(self, text: str | None) -> None:
        self.status.configure(text=text or "")

    # -- raw text ------------------------------------------------------
    def _load_raw(self) -> None:
        self._loading = True
        try:
            self.text.delete("1.0", "end")
            self.text.insert("1.0", self.session.document.raw_text)
            self.text.edit_modified(False)
        finally:
            self._loading = False
        self._revision = self.session.document.buffer.revision

    def _on_raw_modified(self, _event: tk.Event) -> None:
        if self._loading or not self.text.edit_modified():
            return
        self.text.edit_modified(False)
        text = self.text.get("1.0", "end-1c")
        if text == self.session.document.raw_text:
            return
        error = self.session.edit_raw(text)
        self._revision = self.session.document.buffer.revision
        if error:
            self._set_status(error)
        self.schedule_frame()

    def _on_search(self, _event: tk.Event) -> None:
        self.session.search.submit(self.search_var.get())
        self.schedule_frame()

    def _scroll_raw(self) -> None:
        raw = self.session.document.raw_text
        offset = self.session.search.take_offset(raw, self.row_height)
        if offset is None:
            return
        total = max((raw.count("\n") + 1) * self.row_height, 1.0)
        self.text.yview_moveto(offset / total)

    # -- frames --------------------------------------------------------
    def _poll(self) -> None:
        if self.session.document.buffer.revision != self._revision:
            logger.debug("buffer changed outside the window; refreshing")
            self._load_raw()
            self.schedule_frame()
        self.root.after(_POLL_MS, self._poll)

    def schedule_frame(self) -> None:
        if self._frame_pending:
            return
        self._frame_pending = True
        self.root.after_idle(self.frame)

    def frame(self) -> None:
        self._frame_pending = False
        self.renderer.start_frame()
        result = self.session.render_and_sync(self.renderer)
        self.renderer.finish_frame()
        if result.modified:
            self._load_raw()
        self._set_status(result.error)
        self._scroll_raw()

    def close(self) -> None:
        self.session.close()
        self.root.destroy()


def launch(
    path: Path,
    *,
    remember: bool = True,
    run_mainloop: bool = True,
    settings: Settings | None = None,
) -> App:  # pragma: no cover - needs a display
    """Open *path* in a new editor window."""
    settings = settings or load_settings()
    session = Session.open(
        path, poll_interval=settings.poll_interval, queue_size=settings.queue_size
    )
    if remember:
        save_last_file(path)
    app = App(session, settings=settings)
    app.root.protocol("WM_DELETE_WINDOW", app.close)
    if run_mainloop:
        app.root.mainloop()
    return app


__all__ = ["App", "TkRenderer", "launch"]
