"""npm-style version range matching.

Supports comparator sets joined by ``||``, primitive comparators
(``<``, ``<=``, ``>``, ``>=``, ``=``), caret and tilde ranges, x-ranges and
hyphen ranges. Prerelease versions only satisfy a range when a comparator in
the same set carries a prerelease on the same ``major.minor.patch``.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from typing import cast

from pywurk.versioning.semver import Version

_PART = r"\*|x|X|\d+"

COMPARATOR_PATTERN = re.compile(
    rf"^(?P<op><=|>=|<|>|=|~>|~|\^)?v?"
    rf"(?P<major>{_PART})"
    rf"(?:\.(?P<minor>{_PART})"
    rf"(?:\.(?P<patch>{_PART})"
    r"(?:-(?P<prerelease>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r")?)?$"
)

HYPHEN_PATTERN = re.compile(r"^(?P<low>\S+)\s+-\s+(?P<high>\S+)$")

# Allow whitespace between an operator and its version (">= 1.2.3").
_OPERATOR_SPACE = re.compile(r"(<=|>=|<|>|=|~>|~|\^)\s+")

WILDCARDS = frozenset({"", "*", "x", "X"})


def _floor(version: Version) -> Version:
    """Lowest prerelease of a version, used for exclusive upper bounds."""
    return Version(version.major, version.minor, version.patch, (0,))


@dataclass(frozen=True)
class Comparator:
    """A primitive comparison against a version. ``version=None`` matches anything."""

    op: str = ""
    version: Version | None = None

    def __str__(self) -> str:
        return f"{self.op}{self.version}" if self.version else "*"

    def test(self, version: Version) -> bool:
        if self.version is None:
            return True
        result = version.compare(self.version)
        if self.op == "<":
            return result < 0
        if self.op == "<=":
            return result <= 0
        if self.op == ">":
            return result > 0
        if self.op == ">=":
            return result >= 0
        return result == 0


ANY = Comparator()
NOTHING = Comparator("<", Version(0, 0, 0, (0,)))


@dataclass(frozen=True)
class _Partial:
    major: int | None
    minor: int | None
    patch: int | None
    prerelease: tuple[int | str, ...] = ()

    @classmethod
    def parse(cls, text: str) -> tuple[str, _Partial]:
        match = COMPARATOR_PATTERN.match(text)
        if not match:
            raise ValueError(f"Invalid comparator: {text!r}")

        def part(name: str) -> int | None:
            value = match.group(name)
            return None if value is None or value in WILDCARDS else int(value)

        major, minor, patch = part("major"), part("minor"), part("patch")
        # Anything after a wildcard is a wildcard too ("1.x.3" == "1.x").
        if major is None:
            minor = patch = None
        elif minor is None:
            patch = None

        prerelease: tuple[int | str, ...] = ()
        if match.group("prerelease") and patch is not None:
            prerelease = Version.parse(f"0.0.0-{match.group('prerelease')}").prerelease

        return match.group("op") or "", cls(major, minor, patch, prerelease)

    def filled(self) -> Version:
        return Version(self.major or 0, self.minor or 0, self.patch or 0, self.prerelease)

    def upper(self) -> Version:
        """Exclusive upper bound of the partial's x-range. Requires a major version."""
        major = cast(int, self.major)
        if self.minor is None:
            return _floor(Version(major + 1, 0, 0))
        return _floor(Version(major, self.minor + 1, 0))


def _desugar(op: str, p: _Partial) -> list[Comparator]:
    if op in ("", "="):
        if p.major is None:
            return [ANY]
        if p.patch is None:
            return [Comparator(">=", p.filled()), Comparator("<", p.upper())]
        return [Comparator("=", p.filled())]

    if op == "^":
        if p.major is None:
            return [ANY]
        low = Comparator(">=", p.filled())
        if p.minor is None or p.major > 0:
            return [low, Comparator("<", _floor(Version(p.major + 1, 0, 0)))]
        if p.patch is None or p.minor > 0:
            return [low, Comparator("<", _floor(Version(0, p.minor + 1, 0)))]
        return [low, Comparator("<", _floor(Version(0, 0, p.patch + 1)))]

    if op in ("~", "~>"):
        if p.major is None:
            return [ANY]
        low = Comparator(">=", p.filled())
        if p.minor is None:
            return [low, Comparator("<", _floor(Version(p.major + 1, 0, 0)))]
        return [low, Comparator("<", _floor(Version(p.major, p.minor + 1, 0)))]

    if p.major is None:
        return [NOTHING] if op in ("<", ">") else [ANY]

    if p.patch is not None:
        return [Comparator(op, p.filled())]

    if op == ">":
        return [Comparator(">=", p.upper().promote())]
    if op == ">=":
        return [Comparator(">=", p.filled())]
    if op == "<":
        return [Comparator("<", _floor(p.filled()))]
    # "<="
    return [Comparator("<", p.upper())]


def _hyphen(low: str, high: str) -> list[Comparator]:
    _, lower = _Partial.parse(low)
    _, upper = _Partial.parse(high)
    comparators: list[Comparator] = []

    if lower.major is not None:
        comparators.append(Comparator(">=", lower.filled()))

    if upper.major is not None:
        if upper.patch is None:
            comparators.append(Comparator("<", upper.upper()))
        else:
            comparators.append(Comparator("<=", upper.filled()))

    return comparators or [ANY]


class Range:
    """A parsed version range: a union of comparator sets."""

    def __init__(self, raw: str, sets: list[list[Comparator]]) -> None:
        self.raw = raw
        self.sets = sets

    def __repr__(self) -> str:
        return f"Range({self.raw!r})"

    def __str__(self) -> str:
        return " || ".join(" ".join(str(c) for c in comparators) for comparators in self.sets)

    @classmethod
    def parse(cls, text: str) -> Range:
        """Parse a range.

        Raises:
            ValueError: If any comparator is malformed.
        """
        sets: list[list[Comparator]] = []

        for part in text.split("||"):
            part = _OPERATOR_SPACE.sub(r"\1", part.strip())
            hyphen = HYPHEN_PATTERN.match(part)

            if hyphen:
                sets.append(_hyphen(hyphen.group("low"), hyphen.group("high")))
            elif not part:
                sets.append([ANY])
            else:
                comparators: list[Comparator] = []
                for token in part.split():
                    comparators.extend(_desugar(*_Partial.parse(token)))
                sets.append(comparators)

        return cls(text, sets)

    def comparators(self) -> Iterator[Comparator]:
        for comparators in self.sets:
            yield from comparators

    def test(self, version: Version, *, include_prerelease: bool = False) -> bool:
        return any(
            _test_set(comparators, version, include_prerelease) for comparators in self.sets
        )

    def min_version(self) -> Version | None:
        """Lowest version that satisfies the range, or None if none does."""
        for candidate in (Version(0, 0, 0), Version(0, 0, 0, (0,))):
            if self.test(candidate):
                return candidate

        lowest: Version | None = None

        for comparators in self.sets:
            set_min: Version | None = None

            for comparator in comparators:
                version = comparator.version
                if version is None or comparator.op in ("<", "<="):
                    continue
                if comparator.op == ">":
                    if version.prerelease:
                        version = Version(*version.release, version.prerelease + (0,))
                    else:
                        version = Version(version.major, version.minor, version.patch + 1)
                if set_min is None or version > set_min:
                    set_min = version

            if set_min is not None and (lowest is None or lowest > set_min):
                lowest = set_min

        if lowest is not None and self.test(lowest):
            return lowest
        return None


def _test_set(comparators: list[Comparator], version: Version, include_prerelease: bool) -> bool:
    if not all(comparator.test(version) for comparator in comparators):
        return False

    if version.prerelease and not include_prerelease:
        return any(
            comparator.version is not None
            and comparator.version.prerelease
            and comparator.version.release == version.release
            for comparator in comparators
        )

    return True


def parse_range(text: str) -> Range | None:
    """Parse a range, returning None when it is malformed."""
    try:
        return Range.parse(text)
    except ValueError:
        return None


def satisfies(version: Version | str, range_: Range | str) -> bool:
    """Check whether a version satisfies a range. Invalid input never satisfies."""
    if isinstance(version, str):
        parsed = Version.try_parse(version)
        if parsed is None:
            return False
        version = parsed

    if isinstance(range_, str):
        parsed_range = parse_range(range_)
        if parsed_range is None:
            return False
        range_ = parsed_range

    return range_.test(version)


def min_version(range_: Range | str) -> Version | None:
    """Lowest version satisfying a range, or None."""
    if isinstance(range_, str):
        parsed = parse_range(range_)
        if parsed is None:
            return None
        range_ = parsed
    return range_.min_version()
