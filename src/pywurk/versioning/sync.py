"""Local dependency range synchronization."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pywurk.versioning.change import Change, ChangeType
from pywurk.versioning.ranges import WILDCARDS, min_version, parse_range, satisfies
from pywurk.versioning.semver import parse_version
from pywurk.workspace.link import format_dependency_spec

if TYPE_CHECKING:
    from pywurk.workspace.workspace import Workspace

# Optional prefix followed by a bare or partial version.
UPDATABLE_RANGE = re.compile(
    r"^(?P<prefix>[=^~]|>=?)?\d+(?:\.\d+(?:\.\d+(?:-[^\s|=<>^~]*)?)?)?$"
)

LOCAL_PREFIXES = ("file:", "link:", "portal:")
WORKSPACE_PROTOCOL = "workspace:"


def is_range_managed(version_range: str) -> bool:
    """Whether a recorded range is ever rewritten by sync."""
    if version_range.startswith(WORKSPACE_PROTOCOL):
        version_range = version_range[len(WORKSPACE_PROTOCOL) :]
        if version_range in ("^", "~"):
            return False
    if version_range in WILDCARDS or version_range.startswith(LOCAL_PREFIXES):
        return False
    return parse_range(version_range) is not None


def get_range_update(
    version_range: str,
    version: str,
    *,
    strict: bool = False,
    force: bool = False,
) -> str | None:
    """Compute the replacement for a recorded dependency range.

    The prefix of the existing range is kept (``^`` when it has none). Unless
    ``strict`` or ``force`` is set, updates that the existing range already
    covers within the same minor baseline are suppressed.

    Args:
        version_range: Range currently recorded in the dependent's manifest.
        version: New version of the dependency.
        strict: Never suppress updates.
        force: Never suppress updates (dependent also changing, or a private
            dependency).

    Returns:
        The replacement range, or None when no rewrite is needed.
    """
    if not is_range_managed(version_range):
        return None

    protocol = ""
    if version_range.startswith(WORKSPACE_PROTOCOL):
        protocol = WORKSPACE_PROTOCOL
        version_range = version_range[len(WORKSPACE_PROTOCOL) :]

    match = UPDATABLE_RANGE.match(version_range)
    prefix = (match.group("prefix") if match else None) or "^"
    replacement = f"{prefix}{version}"

    if replacement == version_range:
        return None

    if not strict and not force and satisfies(version, version_range):
        minimum = min_version(version_range)
        if minimum is not None and satisfies(version, f"~{minimum}"):
            return None

    return protocol + replacement


def sync(workspace: Workspace, *, strict: bool = False) -> list[Change]:
    """Rewrite the workspace's local dependency ranges to track new versions.

    Only links whose dependency version changed this run, or whose recorded
    range no longer covers the dependency version, are considered.

    Returns:
        Change entries for every rewritten range.
    """
    changes: list[Change] = []
    own_version = workspace.config.at("version").as_(str)
    is_changing = own_version != workspace.version

    for link in workspace.get_dependency_links():
        dependency = link.dependency
        version = dependency.config.at("version").as_(str)

        if version is None or parse_version(version) is None:
            continue

        range_ = link.version_range.removeprefix(WORKSPACE_PROTOCOL)
        if version == dependency.version and satisfies(version, range_):
            continue

        new_range = get_range_update(
            link.version_range,
            version,
            strict=strict,
            force=is_changing or dependency.is_private,
        )

        if new_range is None:
            workspace.log.debug(
                f'ignoring inconsequential dependency "{link.id}" update '
                f"({link.version_range} -> {version})"
            )
            continue

        workspace.log.debug(f'updating dependency "{link.id}" ({link.version_range} -> {new_range})')
        workspace.config.at(link.type.field, link.id).set(format_dependency_spec(link.spec, new_range))
        changes.append(Change(ChangeType.DEPENDENCY, f"update {link.id} to {new_range}"))

    return changes
