"""Tests for the JSON document accessor."""

from __future__ import annotations

import pytest

from pywurk.jsondoc import JsonDocument, parse_json


class TestJsonDocument:
    """Tests for JsonDocument and JsonNode."""

    def test_read_nested_values(self) -> None:
        doc = JsonDocument({"name": "a", "scripts": {"build": "tsc"}, "tags": ["x", "y"]})

        assert doc.at("name").as_(str) == "a"
        assert doc.at("scripts", "build").as_(str) == "tsc"
        assert doc.at("tags", 1).as_(str) == "y"
        assert doc.at("scripts").keys() == ["build"]

    def test_missing_and_mistyped_values_use_default(self) -> None:
        doc = JsonDocument({"version": 1, "private": True})

        assert doc.at("version").as_(str) is None
        assert doc.at("missing").as_(str, "fallback") == "fallback"
        assert doc.at("missing", "deep").exists is False
        assert doc.at("private").as_(bool) is True

    def test_bool_is_not_a_number(self) -> None:
        doc = JsonDocument({"flag": True, "count": 2})

        assert doc.at("flag").is_(int) is False
        assert doc.at("count").is_(int) is True

    def test_set_marks_modified_only_on_change(self) -> None:
        doc = JsonDocument({"version": "1.0.0"})

        doc.at("version").set("1.0.0")
        assert doc.is_modified is False
        assert doc.revision == 0

        doc.at("version").set("1.1.0")
        assert doc.is_modified is True
        assert doc.revision == 1
        assert doc.at("version").as_(str) == "1.1.0"

    def test_set_creates_intermediate_objects(self) -> None:
        doc = JsonDocument({})

        doc.at("dependencies", "a").set("^1.0.0")

        assert doc.unwrap() == {"dependencies": {"a": "^1.0.0"}}

    def test_set_does_not_mutate_source(self) -> None:
        source = {"dependencies": {"a": "^1.0.0"}}
        doc = JsonDocument(source)
        snapshot = doc.at("dependencies").unwrap()

        doc.at("dependencies", "a").set("^2.0.0")

        assert source == {"dependencies": {"a": "^1.0.0"}}
        assert snapshot == {"a": "^1.0.0"}

    def test_items_and_iteration(self) -> None:
        doc = JsonDocument({"deps": {"a": "1", "b": "2"}, "list": [1, 2, 3]})

        assert [(k, n.as_(str)) for k, n in doc.at("deps").items()] == [("a", "1"), ("b", "2")]
        assert [n.as_(int) for n in doc.at("list")] == [1, 2, 3]

    def test_dumps_ends_with_newline(self) -> None:
        doc = JsonDocument({"name": "a"})
        assert doc.dumps() == '{\n  "name": "a"\n}\n'


def test_parse_json_is_read_only() -> None:
    node = parse_json('{"a": 1}')

    assert node.at("a").as_(int) == 1
    with pytest.raises(TypeError):
        node.at("a").set(2)


def test_parse_empty_text_is_null() -> None:
    assert JsonDocument.parse("  ").root.unwrap() is None
