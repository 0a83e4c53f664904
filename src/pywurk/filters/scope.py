"""Scope-based workspace selection."""

from __future__ import annotations

import fnmatch

from pywurk.workspace.workspace import Workspace


def parse_scope(scope: str) -> list[str]:
    """Split a ``--scope`` value such as ``"core,@acme/*,packages/*"`` into patterns."""
    return [pattern for pattern in (p.strip() for p in scope.split(",")) if pattern]


def match_scope(workspace: Workspace, patterns: list[str]) -> bool:
    """Check a workspace against scope patterns.

    A pattern matches the package name exactly (ignoring case) or as a glob,
    or the workspace directory relative to the repository root as a glob.
    An empty pattern list matches every workspace.
    """
    if not patterns:
        return True

    name = workspace.name
    folded = name.lower()
    relative = workspace.relative_dir.as_posix()

    return any(
        folded == pattern.lower()
        or fnmatch.fnmatchcase(name, pattern)
        or fnmatch.fnmatchcase(relative, pattern.rstrip("/"))
        for pattern in patterns
    )
