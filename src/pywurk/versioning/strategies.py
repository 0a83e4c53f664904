"""Per-workspace version strategies.

Each strategy writes the next version into the workspace config document.
Nothing is persisted until the write phase of the version command.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pywurk.versioning.change import Change
from pywurk.versioning.semver import ReleaseType, Version, parse_version

if TYPE_CHECKING:
    from pywurk.workspace.workspace import Workspace


def _current(workspace: Workspace) -> Version | None:
    version = parse_version(workspace.version)
    if version is None:
        workspace.log.debug("skipping workspace (no version)")
    return version


def bump(
    workspace: Workspace,
    release_type: ReleaseType,
    preid: str | None = None,
) -> list[Change]:
    """Increment the version by a release type."""
    version = _current(workspace)
    if version is None:
        return []

    if not release_type.is_pre:
        preid = None

    workspace.config.at("version").set(str(version.bump(release_type, preid)))
    return []


def promote(workspace: Workspace) -> list[Change]:
    """Convert a prerelease version to its release equivalent."""
    version = _current(workspace)
    if version is None:
        return []

    if not version.is_prerelease:
        workspace.log.debug("skipping workspace (not a prerelease)")
        return []

    workspace.config.at("version").set(str(version.promote()))
    return []


def literal(workspace: Workspace, version: Version) -> list[Change]:
    """Set an explicit version."""
    if _current(workspace) is None:
        return []

    workspace.config.at("version").set(str(version))
    return []
