"""A single workspace (package) of the repository."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

from pywurk.execution.spawn import SpawnCoordinator
from pywurk.git.repo import GitRepo
from pywurk.jsondoc import JsonDocument
from pywurk.log import Log
from pywurk.workspace.status import Status

if TYPE_CHECKING:
    from pywurk.pm.base import PackageManager, PackageMetadata
    from pywurk.workspace.link import Link
    from pywurk.workspace.workspaces import Workspaces

MANIFEST_FILE = "package.json"


class Workspace:
    """One package of the repository.

    ``name`` and ``version`` are read once when the workspace is created.
    Later edits go through ``config`` and are only persisted by
    :meth:`write_config`.

    Attributes:
        dir: Absolute workspace directory.
        config: Manifest document.
        name: Package name (directory name when the manifest has none).
        version: Version at load time, or None.
        is_private: Whether the manifest is marked private.
        is_root: Whether this is the repository root.
        selected: Whether the workspace is part of the current selection.
        status: Outcome within the current traversal.
        log: Log prefixed with the workspace name.
    """

    def __init__(
        self,
        dir: Path,
        config: JsonDocument | dict[str, Any],
        *,
        is_root: bool = False,
        log: Log | None = None,
        spawner: SpawnCoordinator | None = None,
        pm: PackageManager | None = None,
    ) -> None:
        self.dir = dir
        self.config = config if isinstance(config, JsonDocument) else JsonDocument(config)
        self.name: str = self.config.at("name").as_(str) or dir.name
        self.version: str | None = self.config.at("version").as_(str)
        self.is_private = self.config.at("private").as_(bool, False)
        self.is_root = is_root
        self.selected = True
        self.status = Status()

        base_log = log or Log()
        self.log = base_log.child(f"{self.name}: ")
        self.spawner = spawner or SpawnCoordinator(base_log)
        self.spawn = self.spawner.bind(cwd=dir, log=self.log)
        self.git = GitRepo(dir, self.spawn)
        self.pm = pm
        self.workspaces: Workspaces | None = None

    def __repr__(self) -> str:
        return f"Workspace({self.name!r}, {self.version!r})"

    @property
    def relative_dir(self) -> Path:
        """Directory relative to the repository root."""
        if self.workspaces is None:
            return Path(".")
        try:
            return self.dir.relative_to(self.workspaces.root.dir)
        except ValueError:
            return self.dir

    def get_dependency_links(self) -> list[Link]:
        """Links to workspaces this workspace depends on."""
        if self.workspaces is None:
            return []
        return self.workspaces.get_dependency_links(self)

    def get_dependent_links(self) -> list[Link]:
        """Links from workspaces that depend on this workspace."""
        if self.workspaces is None:
            return []
        return self.workspaces.get_dependent_links(self)

    async def get_published(self) -> PackageMetadata | None:
        """Get the closest published version not greater than the current one."""
        if self.pm is None or self.version is None or self.is_private:
            return None
        return await self.pm.get_published(self.name, self.version)

    def write_config(self) -> None:
        """Persist the manifest document to ``package.json``."""
        path = self.dir / MANIFEST_FILE
        self.log.debug(f"writing {path}")
        with open(path, "w", encoding="utf-8") as f:
            f.write(self.config.dumps())
