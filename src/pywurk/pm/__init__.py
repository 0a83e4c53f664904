"""Package manager detection and adapters."""

from __future__ import annotations

from pathlib import Path

from pywurk.errors import UnsupportedPackageManagerError
from pywurk.execution.spawn import SpawnCoordinator
from pywurk.jsondoc import JsonNode
from pywurk.log import Log
from pywurk.pm.base import PackageManager, PackageMetadata, expand_patterns, select_published
from pywurk.pm.npm import Npm
from pywurk.pm.pnpm import Pnpm
from pywurk.pm.yarn import Yarn, YarnClassic

PACKAGE_MANAGERS: dict[str, type[PackageManager]] = {
    cls.id: cls for cls in (Npm, Pnpm, Yarn, YarnClassic)
}


def detect_package_manager(root_dir: Path, root_config: JsonNode) -> str:
    """Detect the package manager used by a repository.

    The ``packageManager`` manifest field wins, then lockfiles, then npm.
    """
    declared = root_config.at("packageManager").as_(str)
    if declared:
        name, _, version = declared.partition("@")
        if name == "yarn" and version.split(".", 1)[0] in ("0", "1"):
            return "yarn-classic"
        return name

    if (root_dir / "pnpm-lock.yaml").exists():
        return "pnpm"
    if (root_dir / "yarn.lock").exists():
        return "yarn" if (root_dir / ".yarnrc.yml").exists() else "yarn-classic"
    return "npm"


def create_package_manager(
    pm: str,
    root_dir: Path,
    root_config: JsonNode,
    spawner: SpawnCoordinator,
    log: Log | None = None,
) -> PackageManager:
    """Create the adapter for a package manager id.

    Raises:
        UnsupportedPackageManagerError: If there is no adapter for ``pm``.
    """
    cls = PACKAGE_MANAGERS.get(pm)
    if cls is None:
        raise UnsupportedPackageManagerError(pm)
    return cls(root_dir, root_config, spawner, log)


__all__ = [
    "PACKAGE_MANAGERS",
    "Npm",
    "PackageManager",
    "PackageMetadata",
    "Pnpm",
    "Yarn",
    "YarnClassic",
    "create_package_manager",
    "detect_package_manager",
    "expand_patterns",
    "select_published",
]
