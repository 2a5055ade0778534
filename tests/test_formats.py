from __future__ import annotations

from pathlib import Path

import pytest

from confedit.errors import ParseError, SerializeError
from confedit.formats import adapter_for_path, known_suffixes
from confedit.formats.json_format import Json5Adapter, JsonAdapter
from confedit.formats.toml_format import TomlAdapter
from confedit.formats.yaml_format import YamlAdapter
from confedit.value import values_equal

TREE = {
    "name": "demo",
    "port": 8080,
    "ratio": 0.25,
    "debug": False,
    "tags": ["a", "b"],
    "server": {"host": "localhost", "limits": {"cpu": 2, "mem": 1.5}},
}


@pytest.mark.parametrize("adapter", [YamlAdapter(), JsonAdapter(), TomlAdapter()])
def test_round_trip_preserves_content(adapter):
    text = adapter.serialize(TREE)
    assert values_equal(adapter.parse(text), TREE)


@pytest.mark.parametrize("adapter", [YamlAdapter(), JsonAdapter()])
def test_round_trip_with_nulls_and_nested_sequences(adapter):
    tree = {"empty": None, "matrix": [[1, 2], [3.5]], "items": [{"id": 1}, {"id": 2}]}
    assert values_equal(adapter.parse(adapter.serialize(tree)), tree)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("a.yaml", YamlAdapter),
        ("a.YML", YamlAdapter),
        ("a.json", JsonAdapter),
        ("a.json5", Json5Adapter),
        ("a.toml", TomlAdapter),
    ],
)
def test_adapter_for_path(name, expected):
    assert type(adapter_for_path(Path(name))) is expected


def test_unknown_suffix_has_no_adapter():
    assert adapter_for_path("notes.txt") is None
    assert ".txt" not in known_suffixes()


def test_invalid_json():
    with pytest.raises(ParseError):
        JsonAdapter().parse("{ invalid")


def test_invalid_yaml():
    with pytest.raises(ParseError):
        YamlAdapter().parse("[invalid")


def test_invalid_toml():
    with pytest.raises(ParseError):
        TomlAdapter().parse("a = ")


@pytest.mark.parametrize("text", ['{"a": NaN}', "[Infinity]", '{"a": -Infinity}'])
def test_json_rejects_non_finite_numbers(text):
    with pytest.raises(ParseError):
        JsonAdapter().parse(text)


@pytest.mark.parametrize("number", [float("nan"), float("inf"), float("-inf")])
def test_json_cannot_write_non_finite_numbers(number):
    with pytest.raises(SerializeError):
        JsonAdapter().serialize({"a": [1, number]})


def test_deeply_nested_json_is_a_parse_error():
    depth = 100_000
    with pytest.raises(ParseError):
        JsonAdapter().parse("[" * depth + "]" * depth)


def test_self_referencing_yaml_alias_is_a_parse_error():
    with pytest.raises(ParseError):
        YamlAdapter().parse("a: &x [*x]\n")


def test_yaml_multiple_documents_rejected():
    with pytest.raises(ParseError):
        YamlAdapter().parse("a: 1\n---\nb: 2\n")


def test_yaml_keeps_key_order():
    text = YamlAdapter().serialize({"z": 1, "a": 2})
    assert text.index("z:") < text.index("a:")


def test_yaml_empty_document_is_null():
    assert YamlAdapter().parse("") is None


def test_yaml_binary_is_a_parse_error():
    with pytest.raises(ParseError):
        YamlAdapter().parse("blob: !!binary aGVsbG8=\n")


def test_json5_relaxed_syntax():
    assert Json5Adapter().parse("//c\n{a:1,}\n") == {"a": 1}


def test_json5_writes_plain_json():
    assert JsonAdapter().parse(Json5Adapter().serialize({"a": 1})) == {"a": 1}


def test_json_serialize_ends_with_newline():
    assert JsonAdapter().serialize({"a": 1}) == '{\n  "a": 1\n}\n'


def test_toml_dates_become_strings():
    assert TomlAdapter().parse("day = 2024-01-02\n") == {"day": "2024-01-02"}


def test_toml_drops_null_entries():
    text = TomlAdapter().serialize({"a": 1, "b": None, "t": {"c": None}})
    assert TomlAdapter().parse(text) == {"a": 1, "t": {}}


def test_toml_rejects_null_in_arrays():
    with pytest.raises(SerializeError):
        TomlAdapter().serialize({"a": [1, None]})


def test_toml_root_must_be_a_table():
    with pytest.raises(SerializeError):
        TomlAdapter().serialize([1, 2])


def test_null_affordance_flags():
    assert YamlAdapter.null_adds_fields
    assert TomlAdapter.null_adds_fields
    assert not JsonAdapter.null_adds_fields
