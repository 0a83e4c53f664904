"""pnpm adapter."""

from __future__ import annotations

from pathlib import Path

import yaml

from pywurk.pm.base import PackageManager

PNPM_WORKSPACE_FILE = "pnpm-workspace.yaml"


class Pnpm(PackageManager):
    """pnpm workspaces."""

    id = "pnpm"
    command = "pnpm"

    async def list_workspaces(self) -> list[Path] | None:
        result = await self.spawn(
            "pnpm",
            ["recursive", "list", "--json", "--depth=1"],
            allow_non_zero_exit_code=True,
        )
        if not result.ok:
            return None

        return [
            Path(path)
            for entry in result.stdout_json
            if (path := entry.at("path").as_(str))
        ]

    def workspace_patterns(self) -> list[str]:
        config_file = self.root_dir / PNPM_WORKSPACE_FILE
        if not config_file.is_file():
            return super().workspace_patterns()

        with open(config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        packages = data.get("packages", []) if isinstance(data, dict) else []
        return [p for p in packages if isinstance(p, str)]

    def info_args(self, name: str, version: str) -> list[str]:
        return ["info", "--quiet", "--json", f"{name}@<={version}", "version", "gitHead"]
