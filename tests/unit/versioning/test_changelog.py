"""Tests for changelog rendering."""

from __future__ import annotations

import datetime
from pathlib import Path

from pywurk.versioning.change import Change, ChangeType
from pywurk.versioning.changelog import generate_changelog_entry, prepend_to_changelog

DATE = datetime.date(2024, 1, 2)


def test_entry_sections_in_order():
    entry = generate_changelog_entry(
        "1.1.0",
        [
            Change(ChangeType.DEPENDENCY, "update a to ^1.1.0"),
            Change(ChangeType.FEAT, "add x"),
        ],
        date=DATE,
    )

    assert entry == (
        "## 1.1.0 (2024-01-02)\n"
        "\n"
        "### Features\n"
        "\n"
        "- add x\n"
        "\n"
        "### Dependencies\n"
        "\n"
        "- update a to ^1.1.0\n"
        "\n"
    )


def test_prepend_creates_file(temp_dir: Path):
    path = temp_dir / "CHANGELOG.md"

    prepend_to_changelog(path, generate_changelog_entry("1.0.0", [], date=DATE))

    assert path.read_text() == "# Changelog\n\n## 1.0.0 (2024-01-02)\n"


def test_prepend_keeps_older_entries(temp_dir: Path):
    path = temp_dir / "CHANGELOG.md"
    prepend_to_changelog(
        path, generate_changelog_entry("1.0.0", [Change(ChangeType.FIX, "old")], date=DATE)
    )

    prepend_to_changelog(
        path, generate_changelog_entry("1.1.0", [Change(ChangeType.FEAT, "new")], date=DATE)
    )

    content = path.read_text()
    assert content.startswith("# Changelog\n\n## 1.1.0")
    assert content.index("- new") < content.index("## 1.0.0") < content.index("- old")
    assert content.count("# Changelog") == 1
