"""Change entries accumulated per workspace during versioning."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ChangeType(str, Enum):
    """Changelog section a change belongs to, in display order."""

    BREAKING = "breaking"
    FEAT = "feat"
    FIX = "fix"
    PERF = "perf"
    REFACTOR = "refactor"
    DOCS = "docs"
    STYLE = "style"
    TEST = "test"
    BUILD = "build"
    CI = "ci"
    CHORE = "chore"
    REVERT = "revert"
    DEPENDENCY = "dependency"
    NOTE = "note"

    @property
    def heading(self) -> str:
        return CHANGE_HEADINGS[self]


CHANGE_HEADINGS: dict[ChangeType, str] = {
    ChangeType.BREAKING: "Breaking Changes",
    ChangeType.FEAT: "Features",
    ChangeType.FIX: "Bug Fixes",
    ChangeType.PERF: "Performance",
    ChangeType.REFACTOR: "Refactoring",
    ChangeType.DOCS: "Documentation",
    ChangeType.STYLE: "Style",
    ChangeType.TEST: "Tests",
    ChangeType.BUILD: "Build",
    ChangeType.CI: "CI",
    ChangeType.CHORE: "Chores",
    ChangeType.REVERT: "Reverts",
    ChangeType.DEPENDENCY: "Dependencies",
    ChangeType.NOTE: "Notes",
}


@dataclass(frozen=True, slots=True)
class Change:
    """One human readable change description.

    Attributes:
        type: Section the change is listed under.
        message: Description text.
    """

    type: ChangeType
    message: str
