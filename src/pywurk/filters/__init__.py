"""Workspace selection filters."""

from pywurk.filters.chain import apply_filters
from pywurk.filters.ignore import should_ignore
from pywurk.filters.scope import match_scope, parse_scope
from pywurk.filters.since import get_changed_workspaces

__all__ = [
    "apply_filters",
    "get_changed_workspaces",
    "match_scope",
    "parse_scope",
    "should_ignore",
]
