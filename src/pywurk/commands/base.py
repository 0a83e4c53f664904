"""Base command infrastructure."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Generic, TypeVar, cast

from rich.table import Table

from pywurk.config import WurkConfig
from pywurk.execution.spawn import SpawnCoordinator
from pywurk.log import Log
from pywurk.pm.base import PackageManager
from pywurk.workspace import StatusValue, Workspaces

TResult = TypeVar("TResult")

STATUS_STYLES: dict[StatusValue, str] = {
    StatusValue.PENDING: "yellow",
    StatusValue.SUCCESS: "green",
    StatusValue.SKIPPED: "dim",
    StatusValue.FAILED: "red",
}


@dataclass
class CommandContext:
    """Context passed to all commands.

    Attributes:
        log: Root log.
        root: Repository root directory.
        workspaces: Workspace collection with the current selection.
        pm: Package manager adapter.
        spawner: Shared spawn coordinator.
        config: Validated ``wurk`` configuration.
        options: Command specific option values (used by plugins).
    """

    log: Log
    root: Path
    workspaces: Workspaces
    pm: PackageManager
    spawner: SpawnCoordinator
    config: WurkConfig = field(default_factory=WurkConfig)
    options: dict[str, Any] = field(default_factory=dict)
    print_status: bool = False

    def auto_print_status(self) -> None:
        """Print a workspace status summary when the command finishes."""
        self.print_status = True

    def finish(self) -> None:
        if self.print_status:
            print_status_table(self.workspaces, self.log)


def print_status_table(workspaces: Workspaces, log: Log) -> None:
    """Print the status of every workspace that took part in a traversal."""
    visited = [w for w in workspaces.all if w.status.value is not None]
    if not visited or not log.is_enabled("error"):
        return

    table = Table(box=None, show_header=False, pad_edge=False)
    table.add_column("Workspace", style="bold")
    table.add_column("Status")
    table.add_column("Detail", style="dim")

    for workspace in visited:
        value = cast(StatusValue, workspace.status.value)
        table.add_row(
            workspace.name,
            f"[{STATUS_STYLES[value]}]{value.value}[/{STATUS_STYLES[value]}]",
            workspace.status.detail or "",
        )

    log.error_console.print()
    log.error_console.print(table)


class Command(ABC, Generic[TResult]):
    """Base class for all pywurk commands.

    Commands encapsulate the logic for a specific operation.
    They receive a context and return a result.
    """

    def __init__(self, context: CommandContext) -> None:
        """Initialize command.

        Args:
            context: Command context.
        """
        self.context = context
        self.workspaces = context.workspaces
        self.log = context.log

    @abstractmethod
    async def execute(self) -> TResult:
        """Execute the command.

        Returns:
            Command-specific result.
        """
        ...
