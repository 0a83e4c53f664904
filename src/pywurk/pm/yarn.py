"""Yarn adapters (Berry and Classic)."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pywurk.execution.results import SpawnResult
from pywurk.pm.base import PackageManager


class Yarn(PackageManager):
    """Yarn 2+ (Berry) workspaces."""

    id = "yarn"
    command = "yarn"

    async def list_workspaces(self) -> list[Path] | None:
        result = await self.spawn(
            "yarn",
            ["workspaces", "list", "--json"],
            allow_non_zero_exit_code=True,
        )
        if not result.ok:
            return None

        # One JSON object per line.
        paths: list[Path] = []
        for line in result.stdout_text.splitlines():
            entry = json.loads(line) if line.strip() else None
            if isinstance(entry, dict) and isinstance(entry.get("location"), str):
                paths.append(Path(entry["location"]))
        return paths

    def info_args(self, name: str, version: str) -> list[str]:
        return ["npm", "info", f"{name}@<={version}", "--fields", "version,gitHead", "--json"]

    def parse_info(self, result: SpawnResult) -> list[Any]:
        return [json.loads(line) for line in result.stdout_text.splitlines() if line.strip()]


class YarnClassic(PackageManager):
    """Yarn 1.x workspaces."""

    id = "yarn-classic"
    command = "yarn"

    async def list_workspaces(self) -> list[Path] | None:
        result = await self.spawn(
            "yarn",
            ["--silent", "workspaces", "info"],
            allow_non_zero_exit_code=True,
        )
        if not result.ok:
            return None

        return [
            Path(location)
            for _, entry in result.stdout_json.items()
            if (location := entry.at("location").as_(str))
        ]

    def info_args(self, name: str, version: str) -> list[str]:
        return ["--silent", "info", "--json", f"{name}@<={version}"]

    def parse_info(self, result: SpawnResult) -> list[Any]:
        data = result.stdout_json.at("data").unwrap()
        return data if isinstance(data, list) else [data]

    async def update(self, names: Sequence[str]) -> None:
        await self.spawn("yarn", ["upgrade", *names], output="ignore")
