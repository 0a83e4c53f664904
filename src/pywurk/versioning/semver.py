"""Semantic version parsing, ordering and increments."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from functools import total_ordering

VERSION_PATTERN = re.compile(
    r"^[=v\s]*"
    r"(?P<major>0|[1-9]\d*)\.(?P<minor>0|[1-9]\d*)\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?\s*$"
)

Identifier = int | str


class ReleaseType(str, Enum):
    """Semantic version increment kinds."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PREMAJOR = "premajor"
    PREMINOR = "preminor"
    PREPATCH = "prepatch"
    PRERELEASE = "prerelease"

    @property
    def is_pre(self) -> bool:
        return self.value.startswith("pre")


def _identifier(value: str) -> Identifier:
    return int(value) if value.isdigit() else value


def _compare_identifiers(a: Identifier, b: Identifier) -> int:
    if isinstance(a, int) and isinstance(b, int):
        return (a > b) - (a < b)
    # Numeric identifiers always have lower precedence than alphanumeric ones.
    if isinstance(a, int):
        return -1
    if isinstance(b, int):
        return 1
    return (a > b) - (a < b)


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A semantic version.

    Build metadata is kept for formatting but ignored for precedence.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[Identifier, ...] = ()
    build: tuple[str, ...] = ()

    @classmethod
    def parse(cls, value: str) -> Version:
        """Parse a version string.

        Raises:
            ValueError: If the string is not a valid semantic version.
        """
        match = VERSION_PATTERN.match(value)
        if not match:
            raise ValueError(f"Invalid version: {value!r}")

        prerelease = match.group("prerelease")
        build = match.group("build")
        return cls(
            major=int(match.group("major")),
            minor=int(match.group("minor")),
            patch=int(match.group("patch")),
            prerelease=tuple(_identifier(p) for p in prerelease.split(".")) if prerelease else (),
            build=tuple(build.split(".")) if build else (),
        )

    @classmethod
    def try_parse(cls, value: str | None) -> Version | None:
        if value is None:
            return None
        try:
            return cls.parse(value)
        except ValueError:
            return None

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(str(p) for p in self.prerelease)
        return text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self.compare(other) == 0

    def __hash__(self) -> int:
        return hash((self.major, self.minor, self.patch, self.prerelease))

    def __lt__(self, other: Version) -> bool:
        return self.compare(other) < 0

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)

    @property
    def release(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def compare(self, other: Version) -> int:
        if self.release != other.release:
            return -1 if self.release < other.release else 1

        # A version without prerelease ranks above one with it.
        if not self.prerelease and not other.prerelease:
            return 0
        if not self.prerelease:
            return 1
        if not other.prerelease:
            return -1

        for a, b in zip(self.prerelease, other.prerelease):
            result = _compare_identifiers(a, b)
            if result:
                return result

        return (len(self.prerelease) > len(other.prerelease)) - (
            len(self.prerelease) < len(other.prerelease)
        )

    def promote(self) -> Version:
        """Drop the prerelease part, keeping major, minor and patch."""
        return Version(self.major, self.minor, self.patch)

    def bump(self, release_type: ReleaseType | str, preid: str | None = None) -> Version:
        """Increment the version.

        ``preid`` is only used by the ``pre*`` release types.

        Args:
            release_type: Kind of increment.
            preid: Prerelease identifier, e.g. ``beta``.

        Returns:
            The incremented version.
        """
        release_type = ReleaseType(release_type)
        major, minor, patch = self.release

        if release_type is ReleaseType.MAJOR:
            if not (self.prerelease and minor == 0 and patch == 0):
                major += 1
            return Version(major, 0, 0)

        if release_type is ReleaseType.MINOR:
            if not (self.prerelease and patch == 0):
                minor += 1
            return Version(major, minor, 0)

        if release_type is ReleaseType.PATCH:
            if not self.prerelease:
                patch += 1
            return Version(major, minor, patch)

        if release_type is ReleaseType.PREMAJOR:
            return Version(major + 1, 0, 0)._pre(preid)

        if release_type is ReleaseType.PREMINOR:
            return Version(major, minor + 1, 0)._pre(preid)

        if release_type is ReleaseType.PREPATCH:
            return Version(major, minor, patch + 1)._pre(preid)

        # prerelease
        if not self.prerelease:
            return Version(major, minor, patch + 1)._pre(preid)
        return self._pre(preid)

    def _pre(self, preid: str | None) -> Version:
        prerelease = list(self.prerelease)

        if not prerelease:
            prerelease = [0]
        else:
            for index in range(len(prerelease) - 1, -1, -1):
                if isinstance(prerelease[index], int):
                    prerelease[index] = int(prerelease[index]) + 1
                    break
            else:
                prerelease.append(0)

        if preid:
            current = prerelease[1] if len(prerelease) > 1 else None
            if prerelease[0] != preid or not isinstance(current, int):
                prerelease = [preid, 0]

        return Version(self.major, self.minor, self.patch, tuple(prerelease))


def parse_version(value: str | None) -> Version | None:
    """Parse a version, returning None when absent or invalid."""
    return Version.try_parse(value)
