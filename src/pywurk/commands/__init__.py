"""Command implementations."""

from pywurk.commands.base import Command, CommandContext, print_status_table
from pywurk.commands.list import ListCommand, list_workspaces
from pywurk.commands.run import RunCommand, RunOptions, RunResult, run_script
from pywurk.commands.version import (
    VersionCommand,
    VersionOptions,
    VersionResult,
    parse_strategy,
    version_workspaces,
)

__all__ = [
    "Command",
    "CommandContext",
    "ListCommand",
    "RunCommand",
    "RunOptions",
    "RunResult",
    "VersionCommand",
    "VersionOptions",
    "VersionResult",
    "list_workspaces",
    "parse_strategy",
    "print_status_table",
    "run_script",
    "version_workspaces",
]
