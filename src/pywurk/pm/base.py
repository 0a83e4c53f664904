"""Package manager adapter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar

from pywurk.errors import MissingExecutableError
from pywurk.execution.results import SpawnResult
from pywurk.execution.spawn import SpawnCoordinator
from pywurk.jsondoc import JsonNode
from pywurk.log import Log
from pywurk.versioning.semver import Version

MANIFEST_FILE = "package.json"


@dataclass(frozen=True, slots=True)
class PackageMetadata:
    """Registry metadata of one published version.

    Attributes:
        version: Published version.
        git_head: Commit the version was published from, if recorded.
    """

    version: str
    git_head: str | None = None


def select_published(entries: Sequence[Any], upper: str) -> PackageMetadata | None:
    """Pick the highest entry whose version is not greater than ``upper``.

    Args:
        entries: Registry info entries (dicts with ``version`` and ``gitHead``).
        upper: Inclusive upper bound.

    Returns:
        Metadata of the selected entry, or None.
    """
    bound = Version.try_parse(upper)
    candidates: list[tuple[Version, PackageMetadata]] = []

    for entry in entries:
        if not isinstance(entry, dict) or not isinstance(entry.get("version"), str):
            continue
        version = Version.try_parse(entry["version"])
        if version is None or (bound is not None and version > bound):
            continue
        git_head = entry.get("gitHead")
        candidates.append(
            (version, PackageMetadata(entry["version"], git_head if isinstance(git_head, str) else None))
        )

    if not candidates:
        return None

    return max(candidates, key=lambda item: item[0])[1]


class PackageManager(ABC):
    """Strategy for one package manager CLI.

    Attributes:
        id: Package manager identifier.
        command: Executable name.
        root_dir: Repository root.
        root_config: Root manifest.
    """

    id: ClassVar[str]
    command: ClassVar[str]

    def __init__(
        self,
        root_dir: Path,
        root_config: JsonNode,
        spawner: SpawnCoordinator,
        log: Log | None = None,
    ) -> None:
        self.root_dir = root_dir
        self.root_config = root_config
        self.log = log or spawner.log
        self.spawn = spawner.bind(cwd=root_dir, log=self.log)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.root_dir)!r})"

    async def get_workspaces(self) -> list[Path]:
        """Discover workspace directories, excluding the root, in discovery order."""
        try:
            paths = await self.list_workspaces()
        except MissingExecutableError:
            paths = None

        if paths is None:
            self.log.debug(f"{self.command} workspace listing failed, expanding patterns")
            paths = expand_patterns(self.root_dir, self.workspace_patterns())

        seen: set[Path] = set()
        result: list[Path] = []
        root = self.root_dir.resolve()

        for path in paths:
            path = (self.root_dir / path).resolve()
            if path == root or path in seen:
                continue
            seen.add(path)
            result.append(path)

        return result

    @abstractmethod
    async def list_workspaces(self) -> list[Path] | None:
        """List workspace directories with the package manager CLI.

        Returns:
            Directories, or None when the CLI could not list them.
        """
        ...

    def workspace_patterns(self) -> list[str]:
        """Workspace glob patterns declared in the root manifest."""
        workspaces = self.root_config.at("workspaces")
        if workspaces.is_(dict):
            workspaces = workspaces.at("packages")
        return [p for p in workspaces.as_(list, []) if isinstance(p, str)]

    def info_args(self, name: str, version: str) -> list[str]:
        return ["info", "--json", f"{name}@<={version}", "version", "gitHead"]

    def parse_info(self, result: SpawnResult) -> list[Any]:
        value = result.stdout_json.unwrap()
        return value if isinstance(value, list) else [value]

    async def get_published(self, name: str, version: str) -> PackageMetadata | None:
        """Get the highest published version not greater than ``version``."""
        result = await self.spawn(
            self.command,
            self.info_args(name, version),
            allow_non_zero_exit_code=True,
        )
        if not result.ok or not result.stdout_text:
            return None

        try:
            entries = self.parse_info(result)
        except ValueError:
            self.log.debug(f'unreadable registry info for "{name}"')
            return None

        return select_published(entries, version)

    async def update(self, names: Sequence[str]) -> None:
        """Refresh lockfile and installed state for the named workspaces."""
        await self.spawn(self.command, ["update", *names], output="ignore")

    def run_script_args(self, script: str, args: Sequence[str]) -> list[str]:
        return ["run", script, *args]


def expand_patterns(root_dir: Path, patterns: Sequence[str]) -> list[Path]:
    """Expand workspace globs to directories containing a manifest.

    Patterns starting with ``!`` exclude previously matched directories.
    """
    matched: list[Path] = []

    for pattern in patterns:
        negate = pattern.startswith("!")
        pattern = pattern.lstrip("!").rstrip("/")
        if not pattern:
            continue

        found = sorted(
            path for path in root_dir.glob(pattern)
            if path.is_dir() and (path / MANIFEST_FILE).is_file()
        )

        if negate:
            excluded = set(found)
            matched = [path for path in matched if path not in excluded]
        else:
            matched.extend(path for path in found if path not in matched)

    return matched
