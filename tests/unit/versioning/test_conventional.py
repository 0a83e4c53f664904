"""Tests for conventional commit parsing."""

from __future__ import annotations

from pywurk.git.commits import Commit
from pywurk.versioning.change import ChangeType
from pywurk.versioning.conventional import determine_release, parse_commit, parse_commit_message
from pywurk.versioning.semver import ReleaseType


class TestParseCommitMessage:
    """Tests for parse_commit_message."""

    def test_simple(self) -> None:
        parsed = parse_commit_message("feat: add feature")

        assert parsed is not None
        assert parsed.type == "feat"
        assert parsed.scope is None
        assert parsed.description == "add feature"
        assert not parsed.breaking

    def test_scope(self) -> None:
        parsed = parse_commit_message("fix(core): handle null")

        assert parsed is not None
        assert parsed.scope == "core"
        assert parsed.release_type is ReleaseType.PATCH

    def test_bang_is_breaking(self) -> None:
        parsed = parse_commit_message("refactor(api)!: drop v1")

        assert parsed is not None
        assert parsed.breaking
        assert parsed.release_type is ReleaseType.MAJOR

    def test_breaking_footer(self) -> None:
        parsed = parse_commit_message("feat: new api\n\nBREAKING CHANGE: old api removed")

        assert parsed is not None
        assert parsed.breaking
        assert parsed.body == "BREAKING CHANGE: old api removed"

    def test_hyphenated_breaking_footer(self) -> None:
        parsed = parse_commit_message("fix: patch\n\nDetails.\nBREAKING-CHANGE: config renamed")

        assert parsed is not None
        assert parsed.breaking

    def test_breaking_mention_mid_line_is_not_a_footer(self) -> None:
        parsed = parse_commit_message("fix: patch\n\nno BREAKING CHANGE: here")

        assert parsed is not None
        assert not parsed.breaking
        assert parsed.release_type is ReleaseType.PATCH

    def test_uppercase_type(self) -> None:
        parsed = parse_commit_message("FEAT: shout")

        assert parsed is not None
        assert parsed.type == "feat"

    def test_not_conventional(self) -> None:
        assert parse_commit_message("Update readme") is None
        assert parse_commit_message("feat:missing space") is None


def test_change_rendering():
    parsed = parse_commit(Commit("0123456789abcdef", "feat(cli): add flag"))

    assert parsed is not None
    assert parsed.change.type is ChangeType.FEAT
    assert parsed.change.message == "**cli:** add flag (0123456)"


def test_breaking_change_section():
    parsed = parse_commit(Commit("0123456789abcdef", "fix!: remove option"))

    assert parsed is not None
    assert parsed.change.type is ChangeType.BREAKING


class TestDetermineRelease:
    """Tests for determine_release."""

    def parse(self, *messages: str):
        return [parse_commit_message(m, "abc") for m in messages]

    def test_highest_wins(self) -> None:
        commits = self.parse("fix: a", "feat: b", "chore: c")
        assert determine_release(commits) is ReleaseType.MINOR

    def test_breaking(self) -> None:
        commits = self.parse("fix: a", "feat!: b")
        assert determine_release(commits) is ReleaseType.MAJOR

    def test_no_release(self) -> None:
        commits = self.parse("chore: a", "docs: b")
        assert determine_release(commits) is None

    def test_initial_shifts_down(self) -> None:
        assert determine_release(self.parse("feat!: a"), initial=True) is ReleaseType.MINOR
        assert determine_release(self.parse("feat: a"), initial=True) is ReleaseType.PATCH
        assert determine_release(self.parse("fix: a"), initial=True) is ReleaseType.PATCH

    def test_empty(self) -> None:
        assert determine_release([]) is None
