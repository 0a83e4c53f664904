"""Dependency links between workspaces."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pywurk.workspace.workspace import Workspace


class LinkType(str, Enum):
    """Kind of dependency a link was declared as."""

    DEPENDENCY = "dependency"
    DEV_DEPENDENCY = "devDependency"
    PEER_DEPENDENCY = "peerDependency"
    OPTIONAL_DEPENDENCY = "optionalDependency"

    @property
    def field(self) -> str:
        """Manifest field holding this kind of dependency."""
        return _FIELDS[self]


_FIELDS: dict[LinkType, str] = {
    LinkType.DEPENDENCY: "dependencies",
    LinkType.DEV_DEPENDENCY: "devDependencies",
    LinkType.PEER_DEPENDENCY: "peerDependencies",
    LinkType.OPTIONAL_DEPENDENCY: "optionalDependencies",
}

NPM_ALIAS = "npm:"


def parse_dependency_spec(key: str, spec: str) -> tuple[str, str]:
    """Split a manifest dependency entry into package name and version range.

    ``"npm:<name>@<range>"`` aliases another package name; anything else is
    a range for the package named by ``key``.

    Args:
        key: Manifest key of the dependency.
        spec: Manifest value of the dependency.

    Returns:
        Tuple of (package name, version range).
    """
    if not spec.startswith(NPM_ALIAS):
        return key, spec

    target = spec[len(NPM_ALIAS) :]
    name, sep, version_range = target.rpartition("@")
    if not name or not sep:
        return target, "*"
    return name, version_range


def format_dependency_spec(spec: str, version_range: str) -> str:
    """Rebuild a manifest value with a new range, preserving any alias."""
    if not spec.startswith(NPM_ALIAS):
        return version_range
    name, _ = parse_dependency_spec("", spec)
    return f"{NPM_ALIAS}{name}@{version_range}"


@dataclass(frozen=True, eq=False)
class Link:
    """Directed edge from a dependent workspace to one of its dependencies.

    Attributes:
        dependent: Workspace declaring the dependency.
        dependency: Workspace depended upon.
        type: Dependency kind.
        id: Manifest key of the dependency entry.
        spec: Raw manifest value.
        version_range: Version range part of ``spec``.
    """

    dependent: Workspace
    dependency: Workspace
    type: LinkType
    id: str
    spec: str
    version_range: str

    def __repr__(self) -> str:
        return (
            f"Link({self.dependent.name} -> {self.dependency.name}, "
            f"{self.type.value}, {self.version_range!r})"
        )
