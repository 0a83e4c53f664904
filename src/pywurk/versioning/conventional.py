"""Conventional commit parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass

from pywurk.git.commits import Commit
from pywurk.versioning.change import Change, ChangeType
from pywurk.versioning.semver import ReleaseType

# Subject line: type(scope)!: description
SUBJECT_PATTERN = re.compile(
    r"^(?P<type>feat|fix|docs|style|refactor|perf|test|chore|ci|build|revert)"
    r"(?:\((?P<scope>[^)]+)\))?"
    r"(?P<breaking>!)?"
    r": (?P<description>.+)$",
    re.IGNORECASE,
)

# Footer token marking a breaking change anywhere after the subject.
BREAKING_FOOTER = re.compile(r"^BREAKING[ -]CHANGE: ", re.MULTILINE)

# Commit types that produce a release on their own.
RELEASE_TYPES: dict[str, ReleaseType] = {
    "feat": ReleaseType.MINOR,
    "fix": ReleaseType.PATCH,
    "perf": ReleaseType.PATCH,
    "revert": ReleaseType.PATCH,
}

_RANK = {ReleaseType.PATCH: 1, ReleaseType.MINOR: 2, ReleaseType.MAJOR: 3}


@dataclass(frozen=True, slots=True)
class ParsedCommit:
    """A conventional commit. ``breaking`` is set by a ``!`` subject or a breaking footer."""

    sha: str
    type: str
    scope: str | None
    description: str
    body: str | None
    breaking: bool

    @property
    def release_type(self) -> ReleaseType | None:
        """Release this commit requires on its own, if any."""
        if self.breaking:
            return ReleaseType.MAJOR
        return RELEASE_TYPES.get(self.type)

    @property
    def change(self) -> Change:
        scope = f"**{self.scope}:** " if self.scope else ""
        change_type = ChangeType.BREAKING if self.breaking else ChangeType(self.type)
        return Change(change_type, f"{scope}{self.description} ({self.sha[:7]})")


def parse_commit_message(message: str, sha: str = "") -> ParsedCommit | None:
    """Parse a commit message, returning None when it is not a conventional commit."""
    subject, _, rest = message.strip().partition("\n")

    match = SUBJECT_PATTERN.match(subject.strip())
    if match is None:
        return None

    body = rest.strip() or None

    return ParsedCommit(
        sha=sha,
        type=match.group("type").lower(),
        scope=match.group("scope"),
        description=match.group("description").strip(),
        body=body,
        breaking=bool(match.group("breaking") or (body and BREAKING_FOOTER.search(body))),
    )


def parse_commit(commit: Commit) -> ParsedCommit | None:
    return parse_commit_message(commit.message, commit.sha)


def determine_release(commits: list[ParsedCommit], *, initial: bool = False) -> ReleaseType | None:
    """Determine the highest release type required by a list of commits.

    Before 1.0.0 (``initial``), every release type is shifted down one level,
    so breaking changes bump the minor version and features the patch version.

    Args:
        commits: Parsed commits.
        initial: Whether the version being released is below 1.0.0.

    Returns:
        The release type, or None when no commit requires a release.
    """
    release: ReleaseType | None = None

    for commit in commits:
        candidate = commit.release_type
        if candidate and (release is None or _RANK[candidate] > _RANK[release]):
            release = candidate

    if initial and release is ReleaseType.MAJOR:
        return ReleaseType.MINOR
    if initial and release is ReleaseType.MINOR:
        return ReleaseType.PATCH
    return release
