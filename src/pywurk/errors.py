"""Exception hierarchy for pywurk."""

from __future__ import annotations

from collections.abc import Sequence


class WurkError(Exception):
    """Base exception for all pywurk errors.

    Attributes:
        message: Human readable error message.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(WurkError):
    """Invalid ``wurk`` configuration in the root manifest."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        if field:
            message = f"{field}: {message}"
        super().__init__(message)
        self.field = field


class WorkspaceNotFoundError(WurkError):
    """No repository root manifest could be located."""

    def __init__(self, path: str) -> None:
        super().__init__(f"no package.json found in {path} or any parent directory")
        self.path = path


class MissingExecutableError(WurkError):
    """A spawned command could not be launched because it does not exist."""

    def __init__(self, command: str) -> None:
        super().__init__(f"{command} is required")
        self.command = command


class SpawnExitCodeError(WurkError):
    """A spawned process exited with a non-zero status."""

    def __init__(self, command: str, exit_code: int, signal_code: str | None = None) -> None:
        if signal_code:
            message = f"{command} exited with signal {signal_code}"
        else:
            message = f"{command} exited with code {exit_code}"
        super().__init__(message)
        self.command = command
        self.exit_code = exit_code
        self.signal_code = signal_code


class GitError(WurkError):
    """A git command failed."""

    def __init__(self, message: str, *, command: str | None = None) -> None:
        super().__init__(message)
        self.command = command


class DirtyRepositoryError(WurkError):
    """Versioning requires a clean git working tree."""

    def __init__(self, workspace: str) -> None:
        super().__init__(f"versioning requires a clean git repository ({workspace})")
        self.workspace = workspace


class UnsupportedPackageManagerError(WurkError):
    """The repository uses a package manager without an adapter."""

    def __init__(self, pm: str) -> None:
        super().__init__(f'unsupported package manager "{pm}"')
        self.pm = pm


class InvalidStrategyError(WurkError):
    """A version strategy argument is not a release type, keyword, or version."""

    def __init__(self, value: str) -> None:
        super().__init__(f'invalid strategy "{value}"')
        self.value = value


class PluginLoadError(WurkError):
    """A command plugin could not be loaded or has the wrong shape."""

    def __init__(self, plugin_id: str, reason: str) -> None:
        super().__init__(f'command plugin "{plugin_id}" {reason}')
        self.plugin_id = plugin_id
        self.reason = reason


class CyclicDependencyError(WurkError):
    """Workspace dependencies form a cycle, so no traversal order exists."""

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = list(cycle)
        super().__init__(f"cyclic workspace dependencies: {' -> '.join(self.cycle)}")
