"""Tests for argument normalization and spawn results."""

from __future__ import annotations

from pywurk.execution.args import get_args, quote
from pywurk.execution.results import SpawnResult


def test_get_args_drops_none_and_false():
    assert get_args(["run", None, False, "build"]) == ["run", "build"]


def test_get_args_flattens_and_stringifies():
    assert get_args(["a", ["b", ["c", None]], 1, 2.5, True]) == ["a", "b", "c", "1", "2.5", "True"]


def test_quote_escapes_spaces():
    assert quote("npm", "run", "my script") == "npm run 'my script'"


class TestSpawnResult:
    """Tests for SpawnResult accessors."""

    def test_streams_are_split_and_combined_in_order(self) -> None:
        result = SpawnResult(
            "node",
            chunks=(("stdout", b"one\n"), ("stderr", b"two\n"), ("stdout", b"three\n")),
        )

        assert result.stdout == b"one\nthree\n"
        assert result.stderr_text == "two"
        assert result.combined_text == "one\ntwo\nthree"

    def test_json_view(self) -> None:
        result = SpawnResult("npm", chunks=(("stdout", b'[{"path": "/a"}]\n'),))

        assert [node.at("path").as_(str) for node in result.stdout_json] == ["/a"]

    def test_ok_reflects_exit_code(self) -> None:
        assert SpawnResult("x").ok is True
        assert SpawnResult("x", exit_code=2).ok is False
