"""npm adapter."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from pywurk.pm.base import PackageManager


class Npm(PackageManager):
    """npm (v7+) workspaces."""

    id = "npm"
    command = "npm"

    async def list_workspaces(self) -> list[Path] | None:
        result = await self.spawn(
            "npm",
            ["query", ".workspace", "--json"],
            allow_non_zero_exit_code=True,
        )
        if not result.ok:
            return None

        return [
            Path(path)
            for entry in result.stdout_json
            if (path := entry.at("path").as_(str))
        ]

    def run_script_args(self, script: str, args: Sequence[str]) -> list[str]:
        # npm forwards arguments to the script only after "--".
        return ["run", script, "--", *args] if args else ["run", script]
