"""Commit records read from `git log`."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Commit:
    """A git commit.

    Attributes:
        sha: Full commit SHA.
        message: Full commit message (subject and body).
    """

    sha: str
    message: str

    @property
    def subject(self) -> str:
        return self.message.strip().split("\n", 1)[0]


def parse_log(output: str) -> list[Commit]:
    """Parse output produced with the ``%H%x1f%B%x1e`` format."""
    commits: list[Commit] = []

    for record in output.split("\x1e"):
        record = record.strip("\n")
        if not record:
            continue
        sha, _, message = record.partition("\x1f")
        commits.append(Commit(sha=sha.strip(), message=message.strip()))

    return commits
