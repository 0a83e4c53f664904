"""Repository root discovery and ``wurk`` configuration."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pywurk.errors import ConfigurationError, WorkspaceNotFoundError

MANIFEST_FILE = "package.json"
CONFIG_KEY = "wurk"


class VersionConfig(BaseModel):
    """Defaults for the version command."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    strict: bool = False
    changelog: bool | None = None
    commit_message: str = Field("release: {packages}", alias="commitMessage")


class WurkConfig(BaseModel):
    """The ``wurk`` section of the root manifest."""

    model_config = ConfigDict(extra="forbid")

    commands: list[str] = Field(default_factory=list)
    version: VersionConfig = Field(default_factory=VersionConfig)
    concurrency: int | None = Field(None, ge=1)


def read_manifest(path: Path) -> dict[str, Any]:
    """Read a ``package.json`` file.

    Raises:
        ConfigurationError: If the file is not a JSON object.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"invalid JSON ({e.msg})", field=str(path)) from e

    if not isinstance(data, dict):
        raise ConfigurationError("expected a JSON object", field=str(path))
    return data


def load_config(root_manifest: dict[str, Any]) -> WurkConfig:
    """Validate the ``wurk`` section of a root manifest.

    Raises:
        ConfigurationError: If the section is invalid.
    """
    raw = root_manifest.get(CONFIG_KEY) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError("expected an object", field=CONFIG_KEY)

    try:
        return WurkConfig.model_validate(raw)
    except ValidationError as e:
        error = e.errors()[0]
        location = ".".join(str(part) for part in (CONFIG_KEY, *error["loc"]))
        raise ConfigurationError(error["msg"], field=location) from e


def _declares_workspaces(directory: Path) -> bool:
    if (directory / "pnpm-workspace.yaml").is_file():
        return True
    try:
        return "workspaces" in read_manifest(directory / MANIFEST_FILE)
    except ConfigurationError:
        return False


def find_root(start: Path) -> Path:
    """Find the repository root from a starting directory.

    The first ancestor whose manifest declares workspaces wins, otherwise the
    nearest directory with a manifest.

    Raises:
        WorkspaceNotFoundError: If no manifest exists in any ancestor.
    """
    start = start.resolve()
    nearest: Path | None = None

    for directory in (start, *start.parents):
        if not (directory / MANIFEST_FILE).is_file():
            continue
        if nearest is None:
            nearest = directory
        if _declares_workspaces(directory):
            return directory

    if nearest is None:
        raise WorkspaceNotFoundError(str(start))
    return nearest
