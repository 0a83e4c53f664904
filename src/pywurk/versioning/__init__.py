"""Versioning: semantic versions, ranges, strategies and dependency sync."""

from pywurk.versioning.auto import AutoDecision, auto, infer_release
from pywurk.versioning.change import Change, ChangeType
from pywurk.versioning.changelog import generate_changelog_entry, prepend_to_changelog
from pywurk.versioning.conventional import (
    ParsedCommit,
    determine_release,
    parse_commit,
    parse_commit_message,
)
from pywurk.versioning.ranges import Range, min_version, parse_range, satisfies
from pywurk.versioning.semver import ReleaseType, Version, parse_version
from pywurk.versioning.strategies import bump, literal, promote
from pywurk.versioning.sync import get_range_update, is_range_managed, sync

__all__ = [
    "AutoDecision",
    "Change",
    "ChangeType",
    "ParsedCommit",
    "Range",
    "ReleaseType",
    "Version",
    "auto",
    "bump",
    "determine_release",
    "generate_changelog_entry",
    "get_range_update",
    "infer_release",
    "is_range_managed",
    "literal",
    "min_version",
    "parse_commit",
    "parse_commit_message",
    "parse_range",
    "parse_version",
    "prepend_to_changelog",
    "promote",
    "satisfies",
    "sync",
]
