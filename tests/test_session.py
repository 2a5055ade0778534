from __future__ import annotations

from pathlib import Path

import pytest

from confedit import session as session_mod
from confedit.errors import IOFailureError
from confedit.formats.json_format import JsonAdapter
from confedit.formats.toml_format import TomlAdapter
from confedit.formats.yaml_format import YamlAdapter
from confedit.session import Session
from confedit.ui.core import InteractionRenderer
from confedit.value import values_equal


def make_session(tmp_path: Path, name: str, text: str) -> Session:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return Session.open(path, watch=False)


def test_open_parses_document(tmp_path: Path):
    path = tmp_path / "c.yaml"
    path.write_text("a: 1\n", encoding="utf-8")
    doc = session_mod.open(path)
    assert values_equal(doc.parsed, {"a": 1})
    assert doc.parse_error is None
    assert doc.format_name == "YAML"


def test_open_missing_file(tmp_path: Path):
    with pytest.raises(IOFailureError):
        session_mod.open(tmp_path / "missing.json")


def test_structural_edit_example(tmp_path: Path):
    s = make_session(tmp_path, "c.json", '{"a": {"b": 1}}')
    r = InteractionRenderer()
    r.set_open(("a",))
    r.post("number", ("a", "b"), 2)
    result = s.render_and_sync(r)
    assert result.modified is True
    assert result.highlighted == ("a", "b")
    assert result.error is None
    on_disk = (tmp_path / "c.json").read_text(encoding="utf-8")
    assert values_equal(JsonAdapter().parse(on_disk), {"a": {"b": 2}})
    assert s.document.raw_text == on_disk
    assert s.document.dirty_marker == ("a", "b")
    assert s.search.query == "b"


def test_render_and_sync_is_idempotent(tmp_path: Path, monkeypatch):
    s = make_session(tmp_path, "c.json", '{"a": {"b": 1}}')
    r = InteractionRenderer()
    r.set_open(("a",))
    r.post("number", ("a", "b"), 2)
    s.render_and_sync(r)

    writes: list[str] = []
    monkeypatch.setattr(session_mod, "write_document", lambda p, t: writes.append(t))
    first = s.render_and_sync(r)
    second = s.render_and_sync(r)
    assert not first.modified and not second.modified
    assert writes == []


def test_malformed_input(tmp_path: Path):
    s = make_session(tmp_path, "c.json", '{"a": 1}')
    assert s.edit_raw("{ invalid") is None
    result = s.render_and_sync(InteractionRenderer())
    assert s.document.parsed is None
    assert s.document.parse_error is not None
    assert result.error.startswith("Invalid JSON")
    assert (tmp_path / "c.json").read_text(encoding="utf-8") == "{ invalid"

    s.edit_raw('{"a": 3}')
    result = s.render_and_sync(InteractionRenderer())
    assert result.error is None
    assert values_equal(s.document.parsed, {"a": 3})


def test_unknown_format_still_allows_raw_edits(tmp_path: Path):
    s = make_session(tmp_path, "notes.txt", "hello")
    result = s.render_and_sync(InteractionRenderer())
    assert result.error == "Unknown file type: .txt"
    assert s.edit_raw("bye") is None
    assert (tmp_path / "notes.txt").read_text(encoding="utf-8") == "bye"


def test_self_write_is_not_an_external_change(tmp_path: Path):
    s = make_session(tmp_path, "c.yaml", "a: 1\n")
    s.edit_raw("a: 2\n")
    revision = s.document.buffer.revision
    assert s.reconciler.reconcile() is False
    assert s.document.raw_text == "a: 2\n"
    assert s.document.buffer.revision == revision


def test_external_change_propagates(tmp_path: Path):
    s = make_session(tmp_path, "c.yaml", "a: 1\n")
    (tmp_path / "c.yaml").write_text("a: 5\nb: x\n", encoding="utf-8")
    assert s.reconciler.reconcile() is True
    assert s.document.raw_text == "a: 5\nb: x\n"
    s.render_and_sync(InteractionRenderer())
    assert values_equal(s.document.parsed, {"a": 5, "b": "x"})


def test_add_field_in_yaml_document(tmp_path: Path):
    s = make_session(tmp_path, "c.yaml", "name: demo\nextra:\n")
    r = InteractionRenderer()
    r.post("add_field", ("extra",), {"key": "count", "value": "42"})
    result = s.render_and_sync(r)
    assert result.highlighted == ("count",)
    expected = {"name": "demo", "extra": None, "count": 42}
    assert values_equal(s.document.parsed, expected)
    on_disk = (tmp_path / "c.yaml").read_text(encoding="utf-8")
    assert values_equal(YamlAdapter().parse(on_disk), expected)


def test_serialize_error_keeps_tree_and_skips_write(tmp_path: Path):
    s = make_session(tmp_path, "c.toml", "items = [1, 2]\n")
    r = InteractionRenderer()
    r.set_open(("items",))
    r.post("append", ("items",))
    result = s.render_and_sync(r)
    assert result.modified
    assert result.error.startswith("Cannot save TOML")
    assert (tmp_path / "c.toml").read_text(encoding="utf-8") == "items = [1, 2]\n"
    assert values_equal(s.document.parsed, {"items": [1, 2, None]})

    # The pending element becomes a table once a field is added to it.
    r.post("add_field", ("items", 2), {"key": "id", "value": "3"})
    result = s.render_and_sync(r)
    assert result.error is None
    assert values_equal(s.document.parsed, {"items": [1, 2, {"id": 3}]})
    on_disk = (tmp_path / "c.toml").read_text(encoding="utf-8")
    assert values_equal(TomlAdapter().parse(on_disk), {"items": [1, 2, {"id": 3}]})


def test_save_error_is_reported_until_next_save(tmp_path: Path):
    s = make_session(tmp_path, "c.toml", "items = [1]\n")
    r = InteractionRenderer()
    r.set_open(("items",))
    r.post("append", ("items",))
    s.render_and_sync(r)
    assert s.render_and_sync(r).error is not None
    r.post("remove", ("items", 1))
    assert s.render_and_sync(r).error is None
    assert values_equal(s.document.parsed, {"items": [1]})


def test_write_failure_is_reported(tmp_path: Path, monkeypatch):
    s = make_session(tmp_path, "c.json", '{"a": "x"}')

    def _fail(path, text):
        raise IOFailureError("disk full")

    monkeypatch.setattr(session_mod, "write_document", _fail)
    r = InteractionRenderer()
    r.post("text", ("a",), "y")
    result = s.render_and_sync(r)
    assert result.error == "disk full"
    assert values_equal(JsonAdapter().parse(s.document.raw_text), {"a": "y"})
    assert s.edit_raw("{}") == "disk full"


def test_watch_error_is_recorded(tmp_path: Path):
    path = tmp_path / "c.json"
    path.write_text("{}", encoding="utf-8")
    doc = session_mod.open(path)
    path.unlink()
    s = Session(doc)
    assert s.watch_error is not None
    s.close()


def test_live_reload_end_to_end(tmp_path: Path):
    path = tmp_path / "c.json"
    path.write_text('{"a": 1}', encoding="utf-8")
    s = Session.open(path, poll_interval=3600)
    try:
        path.write_text('{"a": 2}', encoding="utf-8")
        s.events.put(session_mod.FileEvent(path))
        s.events.join()
        assert s.document.raw_text == '{"a": 2}'
    finally:
        s.close()


def test_non_finite_number_is_not_written_to_json(tmp_path: Path):
    s = make_session(tmp_path, "c.json", '{"a": 1.5}')
    r = InteractionRenderer()
    r.post("number", ("a",), float("inf"))
    result = s.render_and_sync(r)
    assert result.error.startswith("Cannot save JSON")
    assert (tmp_path / "c.json").read_text(encoding="utf-8") == '{"a": 1.5}'


def test_open_self_referencing_yaml_reports_parse_error(tmp_path: Path):
    s = make_session(tmp_path, "c.yaml", "a: &x [*x]\n")
    assert s.document.parse_error is not None
    result = s.render_and_sync(InteractionRenderer())
    assert result.error.startswith("Invalid YAML")


def test_open_deeply_nested_json_reports_parse_error(tmp_path: Path):
    depth = 100_000
    s = make_session(tmp_path, "c.json", "[" * depth + "]" * depth)
    assert s.document.parsed is None
    assert s.render_and_sync(InteractionRenderer()).error.startswith("Invalid JSON")


def test_crlf_text_is_kept_through_raw_edits(tmp_path: Path):
    path = tmp_path / "c.yaml"
    path.write_bytes(b"a: 1\r\nb: 2\r\n")
    s = Session.open(path, watch=False)
    assert s.document.raw_text == "a: 1\r\nb: 2\r\n"
    s.edit_raw("a: 3\r\nb: 2\r\n")
    assert path.read_bytes() == b"a: 3\r\nb: 2\r\n"


def test_line_ending_change_is_an_external_change(tmp_path: Path):
    s = make_session(tmp_path, "c.yaml", "a: 1\n")
    (tmp_path / "c.yaml").write_bytes(b"a: 1\r\n")
    assert s.reconciler.reconcile() is True
    assert s.document.raw_text == "a: 1\r\n"
