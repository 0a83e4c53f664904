"""pywurk - monorepo workspace orchestration.

Provides:
- Workspace discovery through the repository's package manager
- Dependency-ordered script execution across workspaces
- Version strategies with local dependency range synchronization
- Terminal-aware process spawning
"""

from pywurk.config import WurkConfig, find_root, load_config
from pywurk.errors import (
    ConfigurationError,
    CyclicDependencyError,
    DirtyRepositoryError,
    GitError,
    InvalidStrategyError,
    MissingExecutableError,
    PluginLoadError,
    SpawnExitCodeError,
    UnsupportedPackageManagerError,
    WorkspaceNotFoundError,
    WurkError,
)
from pywurk.execution import SpawnCoordinator, SpawnResult
from pywurk.log import Log
from pywurk.workspace import Link, LinkType, Workspace, Workspaces

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "Workspace",
    "Workspaces",
    "Link",
    "LinkType",
    "Log",
    "SpawnCoordinator",
    "SpawnResult",
    "WurkConfig",
    "find_root",
    "load_config",
    # Errors
    "WurkError",
    "ConfigurationError",
    "WorkspaceNotFoundError",
    "MissingExecutableError",
    "SpawnExitCodeError",
    "GitError",
    "DirtyRepositoryError",
    "UnsupportedPackageManagerError",
    "InvalidStrategyError",
    "PluginLoadError",
    "CyclicDependencyError",
]
