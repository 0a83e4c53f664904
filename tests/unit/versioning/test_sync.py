"""Tests for local dependency range synchronization."""

from __future__ import annotations

import pytest

from pywurk.versioning.change import ChangeType
from pywurk.versioning.sync import get_range_update, is_range_managed, sync


class TestGetRangeUpdate:
    """Tests for get_range_update."""

    @pytest.mark.parametrize(
        ("version_range", "version", "expected"),
        [
            ("^1.2.3", "1.5.0", "^1.5.0"),
            ("~1.2.3", "1.5.0", "~1.5.0"),
            (">=1.2.3", "1.5.0", ">=1.5.0"),
            ("1.0.0", "2.0.0", "^2.0.0"),
            ("workspace:^1.0.0", "2.0.0", "workspace:^2.0.0"),
        ],
    )
    def test_keeps_prefix(self, version_range: str, version: str, expected: str) -> None:
        assert get_range_update(version_range, version) == expected

    def test_suppresses_covered_patch(self) -> None:
        assert get_range_update("^1.2.0", "1.2.5") is None

    def test_strict_updates_covered_patch(self) -> None:
        assert get_range_update("^1.2.0", "1.2.5", strict=True) == "^1.2.5"

    def test_force_updates_covered_patch(self) -> None:
        assert get_range_update("^1.2.0", "1.2.5", force=True) == "^1.2.5"

    def test_unchanged_range(self) -> None:
        assert get_range_update("^1.2.3", "1.2.3", strict=True) is None

    @pytest.mark.parametrize(
        "version_range",
        ["*", "x", "", "file:../a", "link:../a", "workspace:*", "workspace:^", "latest"],
    )
    def test_unmanaged_ranges(self, version_range: str) -> None:
        assert is_range_managed(version_range) is False
        assert get_range_update(version_range, "2.0.0", strict=True) is None


class TestSync:
    """Tests for sync on workspaces."""

    def test_updates_changed_dependency(self, make_workspaces) -> None:
        workspaces = make_workspaces(
            {
                "a": {"version": "1.0.0"},
                "b": {"version": "1.0.0", "dependencies": {"a": "^1.0.0"}},
            }
        )
        a, b = workspaces.get("a"), workspaces.get("b")
        a.config.at("version").set("1.1.0")

        changes = sync(b)

        assert b.config.at("dependencies", "a").as_(str) == "^1.1.0"
        assert [(c.type, c.message) for c in changes] == [
            (ChangeType.DEPENDENCY, "update a to ^1.1.0")
        ]

    def test_ignores_covered_patch(self, make_workspaces) -> None:
        workspaces = make_workspaces(
            {
                "a": {"version": "1.0.0"},
                "b": {"version": "1.0.0", "dependencies": {"a": "^1.0.0"}},
            }
        )
        workspaces.get("a").config.at("version").set("1.0.1")
        b = workspaces.get("b")

        assert sync(b) == []
        assert b.config.at("dependencies", "a").as_(str) == "^1.0.0"

    def test_strict_updates_covered_patch(self, make_workspaces) -> None:
        workspaces = make_workspaces(
            {
                "a": {"version": "1.0.0"},
                "b": {"version": "1.0.0", "dependencies": {"a": "^1.0.0"}},
            }
        )
        workspaces.get("a").config.at("version").set("1.0.1")
        b = workspaces.get("b")

        sync(b, strict=True)

        assert b.config.at("dependencies", "a").as_(str) == "^1.0.1"

    def test_changing_dependent_always_updates(self, make_workspaces) -> None:
        workspaces = make_workspaces(
            {
                "a": {"version": "1.0.0"},
                "b": {"version": "1.0.0", "dependencies": {"a": "^1.0.0"}},
            }
        )
        workspaces.get("a").config.at("version").set("1.0.1")
        b = workspaces.get("b")
        b.config.at("version").set("1.0.1")

        sync(b)

        assert b.config.at("dependencies", "a").as_(str) == "^1.0.1"

    def test_private_dependency_always_updates(self, make_workspaces) -> None:
        workspaces = make_workspaces(
            {
                "a": {"version": "1.0.0", "private": True},
                "b": {"version": "1.0.0", "dependencies": {"a": "^1.0.0"}},
            }
        )
        workspaces.get("a").config.at("version").set("1.0.1")
        b = workspaces.get("b")

        sync(b)

        assert b.config.at("dependencies", "a").as_(str) == "^1.0.1"

    def test_repairs_stale_range(self, make_workspaces) -> None:
        workspaces = make_workspaces(
            {
                "a": {"version": "2.0.0"},
                "b": {"version": "1.0.0", "devDependencies": {"a": "^1.0.0"}},
            }
        )
        b = workspaces.get("b")

        sync(b)

        assert b.config.at("devDependencies", "a").as_(str) == "^2.0.0"

    def test_leaves_satisfied_unchanged_dependency(self, make_workspaces) -> None:
        workspaces = make_workspaces(
            {
                "a": {"version": "1.0.0"},
                "b": {"version": "1.0.0", "dependencies": {"a": "^1.0.0"}},
            }
        )
        b = workspaces.get("b")

        assert sync(b, strict=True) == []
        assert not b.config.is_modified

    def test_preserves_alias(self, make_workspaces) -> None:
        workspaces = make_workspaces(
            {
                "a": {"version": "1.0.0"},
                "b": {"version": "1.0.0", "dependencies": {"alias-a": "npm:a@^1.0.0"}},
            }
        )
        workspaces.get("a").config.at("version").set("1.1.0")
        b = workspaces.get("b")

        sync(b)

        assert b.config.at("dependencies", "alias-a").as_(str) == "npm:a@^1.1.0"

    def test_leaves_wildcard(self, make_workspaces) -> None:
        workspaces = make_workspaces(
            {
                "a": {"version": "1.0.0"},
                "b": {"version": "1.0.0", "dependencies": {"a": "workspace:*"}},
            }
        )
        workspaces.get("a").config.at("version").set("2.0.0")
        b = workspaces.get("b")

        assert sync(b) == []
        assert b.config.at("dependencies", "a").as_(str) == "workspace:*"
