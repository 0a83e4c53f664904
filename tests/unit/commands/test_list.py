"""Tests for the list command."""

from __future__ import annotations

import io
import json
from unittest.mock import AsyncMock, MagicMock

from rich.console import Console

from pywurk.commands import list_workspaces
from pywurk.commands.list import ListCommand
from pywurk.errors import GitError
from pywurk.log import Log
from pywurk.pm.base import PackageMetadata


def mock_git(*, is_repo: bool = True, changed: set | None = None, changed_error: bool = False):
    git = MagicMock()
    git.is_repo = AsyncMock(return_value=is_repo)
    git.get_head = AsyncMock(return_value="0123abc")
    git.is_dirty = AsyncMock(return_value=False)
    if changed_error:
        git.get_changed_files = AsyncMock(side_effect=GitError("bad revision"))
    else:
        git.get_changed_files = AsyncMock(return_value=changed or set())
    return git


def mock_pm(published: PackageMetadata | None):
    pm = MagicMock()
    pm.get_published = AsyncMock(return_value=published)
    return pm


class TestDescribe:
    """Tests for ListCommand.describe."""

    async def test_full_description(self, make_workspaces, make_context, temp_dir) -> None:
        pm = mock_pm(PackageMetadata("1.0.0", "feedbee"))
        workspaces = make_workspaces(
            {
                "a": {"version": "1.0.0"},
                "b": {"version": "1.0.0", "dependencies": {"a": "^1.0.0"}},
            },
            pm=pm,
        )
        a = workspaces.get("a")
        a.git = mock_git(changed={temp_dir / "packages" / "a" / "index.js"})

        info = await ListCommand(make_context(workspaces, pm=pm)).describe(a)

        assert info["name"] == "a"
        assert info["version"] == "1.0.0"
        assert info["dir"] == str(temp_dir / "packages" / "a")
        assert info["config"] == {"name": "a", "version": "1.0.0"}
        assert info["dependencyLinks"] == []
        assert info["dependentLinks"] == [
            {
                "name": "b",
                "dir": str(temp_dir / "packages" / "b"),
                "type": "dependency",
                "id": "a",
                "versionRange": "^1.0.0",
            }
        ]
        assert info["npm"] == {"version": "1.0.0", "gitHead": "feedbee", "isPublished": True}
        assert info["git"] == {"head": "0123abc", "isRepo": True, "isDirty": False}
        assert info["isModified"] is True
        assert info["isPrivate"] is False
        assert info["isRoot"] is False
        a.git.get_changed_files.assert_awaited_once_with("feedbee")

    async def test_not_a_repository(self, make_workspaces, make_context) -> None:
        workspaces = make_workspaces({"a": {"version": "1.0.0"}}, pm=mock_pm(None))
        a = workspaces.get("a")
        a.git = mock_git(is_repo=False)

        info = await ListCommand(make_context(workspaces)).describe(a)

        assert info["git"] == {"head": None, "isRepo": False, "isDirty": None}
        assert info["npm"] == {"version": None, "gitHead": None, "isPublished": False}
        assert info["isModified"] is None

    async def test_unknown_git_head(self, make_workspaces, make_context) -> None:
        pm = mock_pm(PackageMetadata("0.9.0", "gone"))
        workspaces = make_workspaces({"a": {"version": "1.0.0"}}, pm=pm)
        a = workspaces.get("a")
        a.git = mock_git(changed_error=True)

        info = await ListCommand(make_context(workspaces, pm=pm)).describe(a)

        assert info["isModified"] is None
        assert info["npm"]["isPublished"] is False


async def test_list_prints_json_array(make_workspaces, make_context):
    out = io.StringIO()
    log = Log(
        level="silent",
        console=Console(file=out, highlight=False, color_system=None),
        error_console=Console(file=io.StringIO(), highlight=False, color_system=None),
    )
    workspaces = make_workspaces({"a": {"version": "1.0.0"}, "b": {"private": True}})
    for workspace in workspaces.all:
        workspace.git = mock_git(is_repo=False)

    data = await list_workspaces(make_context(workspaces, log=log))

    assert [item["name"] for item in data] == ["a", "b"]
    assert json.loads(out.getvalue()) == data
    assert data[1]["isPrivate"] is True
