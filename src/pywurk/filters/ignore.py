"""Ignore-based workspace exclusion."""

from __future__ import annotations

import fnmatch

from pywurk.workspace.workspace import Workspace


def should_ignore(workspace: Workspace, patterns: list[str]) -> bool:
    """Check if a workspace matches any ignore pattern.

    Args:
        workspace: Workspace to check.
        patterns: List of ignore patterns.

    Returns:
        True if workspace should be ignored.
    """
    if not patterns:
        return False

    name = workspace.name
    path_str = workspace.relative_dir.as_posix()

    for pattern in patterns:
        # Match by name
        if fnmatch.fnmatchcase(name, pattern):
            return True

        # Match by path
        if fnmatch.fnmatchcase(path_str, pattern.rstrip("/")):
            return True

    return False
