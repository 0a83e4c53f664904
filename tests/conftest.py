"""Shared test fixtures for pywurk tests."""

from __future__ import annotations

import json
import shutil
import subprocess
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest
from dotenv import load_dotenv

from pywurk.commands.base import CommandContext
from pywurk.config import WurkConfig
from pywurk.execution.spawn import SpawnCoordinator
from pywurk.jsondoc import JsonDocument
from pywurk.log import Log
from pywurk.pm import Npm
from pywurk.workspace import RawManifest, Workspaces

# Load .env from project root (doesn't override existing env vars)
load_dotenv(Path(__file__).parent.parent / ".env")

WorkspacesFactory = Callable[..., Workspaces]


def write_manifest(directory: Path, data: dict[str, Any]) -> Path:
    """Write a package.json file, creating the directory."""
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def quiet_log() -> Log:
    """A log that only prints unconditional output."""
    return Log(level="silent")


@pytest.fixture
def make_workspaces(temp_dir: Path, quiet_log: Log) -> WorkspacesFactory:
    """Build a Workspaces collection from name -> manifest mappings.

    Each workspace lives in ``packages/<name>``; manifests get their name
    filled in automatically.
    """

    def factory(
        manifests: dict[str, dict[str, Any]],
        *,
        root: dict[str, Any] | None = None,
        pm: Any = None,
        include_root: bool = False,
        write: bool = False,
    ) -> Workspaces:
        root_manifest = {"name": "root", "private": True, "workspaces": ["packages/*"], **(root or {})}
        raw = []
        for name, manifest in manifests.items():
            directory = temp_dir / "packages" / name
            data = {"name": name, **manifest}
            if write:
                write_manifest(directory, data)
            raw.append(RawManifest(directory, data))

        if write:
            write_manifest(temp_dir, root_manifest)

        return Workspaces.build(
            RawManifest(temp_dir, root_manifest),
            raw,
            log=quiet_log,
            pm=pm,
            include_root=include_root,
        )

    return factory


@pytest.fixture
def workspace_dir(temp_dir: Path) -> Path:
    """Create a sample npm workspace tree.

    root -> packages/a, packages/b (depends on a), packages/c (depends on b).
    """
    write_manifest(temp_dir, {"name": "root", "private": True, "workspaces": ["packages/*"]})
    write_manifest(temp_dir / "packages" / "a", {"name": "a", "version": "1.0.0"})
    write_manifest(
        temp_dir / "packages" / "b",
        {
            "name": "b",
            "version": "1.0.0",
            "dependencies": {"a": "^1.0.0"},
            "scripts": {"build": "tsc"},
        },
    )
    write_manifest(
        temp_dir / "packages" / "c",
        {
            "name": "c",
            "version": "2.0.0",
            "devDependencies": {"b": "~1.0.0"},
            "scripts": {"build": "tsc"},
        },
    )
    return temp_dir


@pytest.fixture
def make_context(temp_dir: Path, quiet_log: Log) -> Callable[..., CommandContext]:
    """Build a CommandContext around a Workspaces collection.

    The default package manager is a real npm adapter whose ``update`` is
    replaced with an AsyncMock.
    """

    def factory(
        workspaces: Workspaces,
        *,
        pm: Any = None,
        config: WurkConfig | None = None,
        log: Log | None = None,
    ) -> CommandContext:
        log = log or quiet_log
        spawner = SpawnCoordinator(log)
        if pm is None:
            pm = Npm(temp_dir, JsonDocument({}, readonly=True).root, spawner, log)
            pm.update = AsyncMock()
        return CommandContext(
            log=log,
            root=temp_dir,
            workspaces=workspaces,
            pm=pm,
            spawner=spawner,
            config=config or WurkConfig(),
        )

    return factory


def run_git(args: list[str], cwd: Path) -> None:
    subprocess.run(["git", *args], cwd=cwd, check=True, capture_output=True)


@pytest.fixture
def git_workspace(workspace_dir: Path) -> Path:
    """The sample workspace tree with git initialized and one commit."""
    if not shutil.which("git"):
        pytest.skip("git not found")

    run_git(["init", "-q"], workspace_dir)
    run_git(["config", "user.email", "test@example.com"], workspace_dir)
    run_git(["config", "user.name", "Test User"], workspace_dir)
    run_git(["config", "commit.gpgsign", "false"], workspace_dir)
    run_git(["add", "-A"], workspace_dir)
    run_git(["commit", "-q", "-m", "chore: initial commit"], workspace_dir)
    return workspace_dir
