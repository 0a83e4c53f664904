"""Commit-derived ("auto") version strategy."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pywurk.versioning.change import Change
from pywurk.versioning.conventional import determine_release, parse_commit
from pywurk.versioning.semver import ReleaseType, Version, parse_version

if TYPE_CHECKING:
    from pywurk.workspace.workspace import Workspace


@dataclass
class AutoDecision:
    """Outcome of commit-based release inference.

    Attributes:
        base: Version the release type applies to (last published version).
        release_type: Required release, or None when nothing is releasable.
        changes: Change descriptions derived from the commits.
    """

    base: Version | None = None
    release_type: ReleaseType | None = None
    changes: list[Change] = field(default_factory=list)


async def infer_release(workspace: Workspace) -> AutoDecision:
    """Inspect commits since the closest published version of a workspace.

    The closest published version is the highest registry version not greater
    than the current version. Its ``gitHead`` bounds the commit range.
    """
    version = parse_version(workspace.version)
    if version is None:
        workspace.log.debug("skipping workspace (no version)")
        return AutoDecision()

    if version.is_prerelease:
        workspace.log.warn("auto versioning does not support prerelease versions")
        return AutoDecision()

    published = await workspace.get_published()
    if published is None:
        workspace.log.debug("skipping workspace (no published version)")
        return AutoDecision()

    if not published.git_head:
        workspace.log.warn(f"published version {published.version} has no gitHead")
        return AutoDecision()

    base = Version.parse(published.version)
    commits = await workspace.git.get_commits(published.git_head)
    parsed = [p for commit in commits if (p := parse_commit(commit)) is not None]

    return AutoDecision(
        base=base,
        release_type=determine_release(parsed, initial=base.major == 0),
        changes=[p.change for p in parsed],
    )


async def auto(workspace: Workspace) -> list[Change]:
    """Apply the inferred release to the workspace config."""
    decision = await infer_release(workspace)

    if decision.base is None or decision.release_type is None:
        if decision.base is not None:
            workspace.log.debug("skipping workspace (no releasable changes)")
        return []

    current = Version.parse(workspace.version or "")
    next_version = decision.base.bump(decision.release_type)

    if next_version <= current:
        workspace.log.debug(f"skipping workspace (already at {current})")
        return []

    workspace.config.at("version").set(str(next_version))
    return decision.changes
