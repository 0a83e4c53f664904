"""Tests for the commit-derived version strategy."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from pywurk.git.commits import Commit
from pywurk.pm.base import PackageMetadata
from pywurk.versioning.auto import auto, infer_release
from pywurk.versioning.change import ChangeType
from pywurk.versioning.semver import ReleaseType
from pywurk.workspace import Workspace


def make_workspace(
    version: str,
    published: PackageMetadata | None,
    messages: list[str],
    *,
    private: bool = False,
) -> Workspace:
    pm = MagicMock()
    pm.get_published = AsyncMock(return_value=published)
    workspace = Workspace(
        Path("/repo/packages/pkg"),
        {"name": "pkg", "version": version, "private": private},
        pm=pm,
    )
    workspace.git = MagicMock()
    workspace.git.get_commits = AsyncMock(
        return_value=[Commit(f"{i:040x}", message) for i, message in enumerate(messages)]
    )
    return workspace


@pytest.mark.asyncio
async def test_feature_bumps_minor():
    workspace = make_workspace(
        "1.0.0", PackageMetadata("1.0.0", "abc123"), ["feat: add thing", "chore: tidy"]
    )

    changes = await auto(workspace)

    assert workspace.config.at("version").as_(str) == "1.1.0"
    assert [c.type for c in changes] == [ChangeType.FEAT, ChangeType.CHORE]
    workspace.git.get_commits.assert_awaited_once_with("abc123")
    workspace.pm.get_published.assert_awaited_once_with("pkg", "1.0.0")


@pytest.mark.asyncio
async def test_breaking_change_before_1_0_bumps_minor():
    workspace = make_workspace("0.3.0", PackageMetadata("0.3.0", "abc123"), ["feat!: drop api"])

    await auto(workspace)

    assert workspace.config.at("version").as_(str) == "0.4.0"


@pytest.mark.asyncio
async def test_already_ahead_of_inferred_version():
    workspace = make_workspace("2.0.0", PackageMetadata("1.0.0", "abc123"), ["fix: bug"])

    assert await auto(workspace) == []
    assert not workspace.config.is_modified


@pytest.mark.asyncio
async def test_no_releasable_commits():
    workspace = make_workspace("1.0.0", PackageMetadata("1.0.0", "abc123"), ["chore: deps"])

    decision = await infer_release(workspace)

    assert decision.release_type is None
    assert await auto(workspace) == []
    assert not workspace.config.is_modified


@pytest.mark.asyncio
async def test_unpublished_workspace():
    workspace = make_workspace("1.0.0", None, ["feat: a"])

    assert await auto(workspace) == []
    workspace.git.get_commits.assert_not_awaited()


@pytest.mark.asyncio
async def test_private_workspace_not_looked_up():
    workspace = make_workspace("1.0.0", PackageMetadata("1.0.0", "abc"), ["feat: a"], private=True)

    assert await auto(workspace) == []
    workspace.pm.get_published.assert_not_awaited()


@pytest.mark.asyncio
async def test_missing_git_head():
    workspace = make_workspace("1.0.0", PackageMetadata("1.0.0", None), ["feat: a"])

    assert await auto(workspace) == []
    workspace.git.get_commits.assert_not_awaited()


@pytest.mark.asyncio
async def test_prerelease_unsupported():
    workspace = make_workspace("1.0.0-beta.0", PackageMetadata("0.9.0", "abc"), ["feat: a"])

    decision = await infer_release(workspace)

    assert decision.base is None
    workspace.pm.get_published.assert_not_awaited()


@pytest.mark.asyncio
async def test_decision_base_is_published_version():
    workspace = make_workspace("1.2.0", PackageMetadata("1.1.0", "abc"), ["fix: a"])

    decision = await infer_release(workspace)

    assert str(decision.base) == "1.1.0"
    assert decision.release_type is ReleaseType.PATCH
