"""Changelog rendering and writing."""

from __future__ import annotations

import datetime
from collections.abc import Sequence
from pathlib import Path

from pywurk.versioning.change import Change, ChangeType

CHANGELOG_FILE = "CHANGELOG.md"
CHANGELOG_HEADER = "# Changelog"


def generate_changelog_entry(
    version: str,
    changes: Sequence[Change],
    *,
    date: datetime.date | None = None,
) -> str:
    """Render a changelog entry with one section per change type.

    Args:
        version: Released version.
        changes: Changes included in the release.
        date: Release date (today by default).

    Returns:
        Markdown entry text ending with a blank line.
    """
    date = date or datetime.date.today()
    lines = [f"## {version} ({date.isoformat()})", ""]

    for change_type in ChangeType:
        messages = [c.message for c in changes if c.type is change_type]
        if not messages:
            continue
        lines.append(f"### {change_type.heading}")
        lines.append("")
        lines.extend(f"- {message}" for message in messages)
        lines.append("")

    return "\n".join(lines) + "\n"


def prepend_to_changelog(path: Path, entry: str) -> None:
    """Insert an entry at the top of a changelog, below its title."""
    existing = path.read_text(encoding="utf-8") if path.exists() else ""
    body = existing

    if existing.startswith(CHANGELOG_HEADER):
        _, _, body = existing.partition("\n")

    content = f"{CHANGELOG_HEADER}\n\n{entry}{body.lstrip()}"
    path.write_text(content.rstrip() + "\n", encoding="utf-8")
