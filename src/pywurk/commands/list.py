"""List command implementation."""

from __future__ import annotations

import asyncio
import json
from typing import Any

from pywurk.commands.base import Command, CommandContext
from pywurk.errors import GitError
from pywurk.workspace import Link, Workspace


def _link_info(link: Link, other: Workspace) -> dict[str, Any]:
    return {
        "name": other.name,
        "dir": str(other.dir),
        "type": link.type.value,
        "id": link.id,
        "versionRange": link.version_range,
    }


class ListCommand(Command[list[dict[str, Any]]]):
    """Describe every selected workspace as JSON-compatible data."""

    async def describe(self, workspace: Workspace) -> dict[str, Any]:
        """Collect links, publish and git information for one workspace."""
        git = workspace.git
        is_repo = await git.is_repo()

        meta = await workspace.get_published()
        head: str | None = None
        is_dirty: bool | None = None
        is_modified: bool | None = None

        if is_repo:
            head = await git.get_head()
            is_dirty = await git.is_dirty()
            if meta is not None and meta.git_head:
                try:
                    is_modified = bool(await git.get_changed_files(meta.git_head))
                except GitError:
                    workspace.log.debug(f"published gitHead {meta.git_head} is unknown")

        return {
            "name": workspace.name,
            "version": workspace.version,
            "dir": str(workspace.dir),
            "config": workspace.config.unwrap(),
            "dependencyLinks": [
                _link_info(link, link.dependency) for link in workspace.get_dependency_links()
            ],
            "dependentLinks": [
                _link_info(link, link.dependent) for link in workspace.get_dependent_links()
            ],
            "npm": {
                "version": meta.version if meta else None,
                "gitHead": meta.git_head if meta else None,
                "isPublished": bool(meta and meta.version == workspace.version),
            },
            "git": {
                "head": head,
                "isRepo": is_repo,
                "isDirty": is_dirty,
            },
            "isModified": is_modified,
            "isPrivate": workspace.is_private,
            "isRoot": workspace.is_root,
        }

    async def execute(self) -> list[dict[str, Any]]:
        """Execute the list command."""
        return list(await asyncio.gather(*(self.describe(w) for w in self.workspaces)))


async def list_workspaces(context: CommandContext) -> list[dict[str, Any]]:
    """List selected workspaces and print them as a JSON array."""
    data = await ListCommand(context).execute()
    context.log.print(json.dumps(data, indent=2), prefix=False)
    return data
