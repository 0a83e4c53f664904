"""Filter chain composition."""

from __future__ import annotations

from pywurk.filters.ignore import should_ignore
from pywurk.filters.scope import match_scope, parse_scope
from pywurk.filters.since import get_changed_workspaces
from pywurk.workspace.workspaces import Workspaces


async def apply_filters(
    workspaces: Workspaces,
    *,
    scope: str | None = None,
    ignore: list[str] | None = None,
    since: str | None = None,
) -> None:
    """Narrow the workspace selection.

    Filters are applied in order:
    1. Scope pattern matching
    2. Ignore pattern exclusion
    3. Git changes since a reference

    Args:
        workspaces: Workspace collection to narrow.
        scope: Comma-separated names, paths or glob patterns.
        ignore: Patterns to exclude.
        since: Git reference for change detection.
    """
    patterns = parse_scope(scope or "")
    if patterns:
        workspaces.select(lambda w: match_scope(w, patterns))

    if ignore:
        workspaces.select(lambda w: not should_ignore(w, ignore))

    if since:
        changed = await get_changed_workspaces(workspaces, since)
        workspaces.select(lambda w: w in changed)
