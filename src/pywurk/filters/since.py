"""Git-based workspace selection (--since)."""

from __future__ import annotations

from pathlib import Path

from pywurk.workspace.workspace import Workspace
from pywurk.workspace.workspaces import Workspaces


def owner_of(path: Path, workspaces: list[Workspace]) -> Workspace | None:
    """Find the most specific workspace directory containing a path."""
    owner: Workspace | None = None

    for workspace in workspaces:
        if not path.is_relative_to(workspace.dir):
            continue
        if owner is None or len(workspace.dir.parts) > len(owner.dir.parts):
            owner = workspace

    return owner


async def get_changed_workspaces(workspaces: Workspaces, since: str) -> set[Workspace]:
    """Get workspaces with files changed since a git reference.

    Each changed file is attributed to the workspace nested deepest around it,
    so changes inside a package do not mark the root as changed.

    Args:
        workspaces: Workspace collection.
        since: Git reference (branch, tag, commit).

    Returns:
        Set of changed workspaces.
    """
    changed_files = await workspaces.root.git.get_changed_files(since)
    candidates = workspaces.all

    changed: set[Workspace] = set()
    for changed_file in changed_files:
        owner = owner_of(changed_file, candidates)
        if owner is not None:
            changed.add(owner)

    return changed
