"""Render-and-mutate pass over a value tree.

:class:`TreeEditor` visits every node of a document once per frame, asks
the :class:`~confedit.ui.core.Renderer` for the control matching the
node's kind and applies whatever the user changed directly to the live
tree.  The pass reports whether anything changed and the path of the last
changed node so the caller can persist the tree and point the raw view at
the edited field.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .ui.core import FieldDraft, Renderer
from .ui.value_parser import coerce_number, infer_value
from .value import KeyPath, Value, ValueKind, format_path, kind_of, values_equal

logger = logging.getLogger("confedit.walker")


@dataclass
class WalkResult:
    value: Value
    modified: bool = False
    highlighted: KeyPath | None = None


class TreeEditor:
    """Walk a tree through a renderer and apply the user's edits.

    When *null_adds_fields* is set, nulls are drawn as an "add field"
    affordance whose key/value drafts live here, keyed by the null's path,
    for as long as that path keeps being rendered.
    """

    def __init__(self, *, null_adds_fields: bool = False) -> None:
        self.null_adds_fields = null_adds_fields
        self.drafts: dict[KeyPath, FieldDraft] = {}
        self._renderer: Renderer = Renderer()
        self._result = WalkResult(None)
        self._seen: set[KeyPath] = set()

    def walk(self, root: Value, renderer: Renderer) -> WalkResult:
        self._renderer = renderer
        self._result = WalkResult(root)
        self._seen = set()
        try:
            if isinstance(root, dict):
                self._visit_mapping(root, ())
            elif isinstance(root, list):
                self._visit_sequence(root, ())
            elif root is None and self.null_adds_fields:
                field = self._add_field((), "")
                if field is not None:
                    key, value = field
                    self._result.value = {key: value}
                    self._mark((key,))
            else:
                self._result.value = self._edit_scalar(root, (), "")
        finally:
            for path in [p for p in self.drafts if p not in self._seen]:
                del self.drafts[path]
        return self._result

    # -- containers ----------------------------------------------------
    def _visit(self, value: Value, path: KeyPath, label: str) -> Value:
        if isinstance(value, (dict, list)):
            if self._renderer.begin_group(path, label):
                if isinstance(value, dict):
                    self._visit_mapping(value, path)
                else:
                    self._visit_sequence(value, path)
            self._renderer.end_group(path)
            return value
        return self._edit_scalar(value, path, label)

    def _visit_mapping(self, mapping: dict[str, Value], path: KeyPath) -> None:
        inserts: list[tuple[str, Value]] = []
        for key, child in list(mapping.items()):
            child_path = path + (key,)
            if child is None and self.null_adds_fields:
                field = self._add_field(child_path, key)
                if field is not None:
                    inserts.append(field)
                continue
            mapping[key] = self._visit(child, child_path, key)
        for key, value in inserts:
            mapping[key] = value
            self._mark(path + (key,))

    def _visit_sequence(self, seq: list[Value], path: KeyPath) -> None:
        remove: int | None = None
        for idx, child in enumerate(seq):
            child_path = path + (idx,)
            if child is None and self.null_adds_fields:
                field = self._add_field(child_path, str(idx))
                if field is not None:
                    key, value = field
                    seq[idx] = {key: value}
                    self._mark(child_path + (key,))
            else:
                seq[idx] = self._visit(child, child_path, str(idx))
            if self._renderer.remove_button(child_path):
                remove = idx
        if remove is not None:
            del seq[remove]
            self._mark(path)
        if self._renderer.add_element_button(path):
            seq.append(None)
            self._mark(path + (len(seq) - 1,))

    # -- leaves --------------------------------------------------------
    def _edit_scalar(self, value: Value, path: KeyPath, label: str) -> Value:
        kind = kind_of(value)
        r = self._renderer
        new: Value = None
        if kind is ValueKind.STRING:
            new = r.text_field(path, label, value)
        elif kind is ValueKind.INT or kind is ValueKind.FLOAT:
            number = r.number_field(path, label, value)
            if number is not None:
                new = coerce_number(value, number)
        elif kind is ValueKind.BOOL:
            new = r.toggle(path, label, value)
        else:
            r.placeholder(path, label)
        if new is None or values_equal(new, value):
            return value
        self._mark(path)
        return new

    def _add_field(self, path: KeyPath, label: str) -> tuple[str, Value] | None:
        self._seen.add(path)
        draft = self.drafts.setdefault(path, FieldDraft())
        if not self._renderer.add_field(path, label, draft):
            return None
        key = draft.key.strip()
        if not key:
            return None
        del self.drafts[path]
        return key, infer_value(draft.value)

    def _mark(self, path: KeyPath) -> None:
        logger.debug("edited %s", format_path(path) or "<root>")
        self._result.modified = True
        self._result.highlighted = path


__all__ = ["TreeEditor", "WalkResult"]
