"""Prefixed, leveled console logging."""

from __future__ import annotations

import os
from typing import Literal

from rich.console import Console
from rich.text import Text

LogLevel = Literal["silent", "error", "warn", "notice", "info", "debug", "trace"]

LOG_LEVELS: dict[str, int] = {
    "silent": 0,
    "error": 10,
    "warn": 20,
    "notice": 30,
    "info": 40,
    "debug": 50,
    "trace": 60,
}

DEFAULT_LEVEL: LogLevel = "info"


def resolve_level(value: str | None) -> LogLevel:
    """Resolve a level name, falling back to ``LOG_LEVEL`` and then ``info``."""
    for candidate in (value, os.environ.get("LOG_LEVEL")):
        if candidate and candidate.lower() in LOG_LEVELS:
            return candidate.lower()  # type: ignore[return-value]
    return DEFAULT_LEVEL


class Log:
    """Logger that writes prefixed lines to rich consoles.

    A root log owns the consoles and the active level. Child logs created with
    :meth:`child` share both, and only differ by prefix, so changing the level
    on the root applies everywhere.

    Attributes:
        prefix: Text prepended to every emitted line.
        trim: Drop empty lines instead of printing them.
    """

    def __init__(
        self,
        *,
        prefix: str = "",
        level: str | None = None,
        console: Console | None = None,
        error_console: Console | None = None,
        trim: bool = False,
    ) -> None:
        self.prefix = prefix
        self.trim = trim
        self.console = console or Console(highlight=False)
        self.error_console = error_console or Console(stderr=True, highlight=False)
        self._level: LogLevel = resolve_level(level)
        self._root: Log = self

    @property
    def level(self) -> LogLevel:
        return self._root._level

    @level.setter
    def level(self, value: str) -> None:
        self._root._level = resolve_level(value)

    def is_enabled(self, level: str) -> bool:
        """Check whether messages at ``level`` are emitted."""
        return LOG_LEVELS[level] <= LOG_LEVELS[self.level]

    def child(self, prefix: str, *, trim: bool | None = None) -> Log:
        """Create a log sharing consoles and level, with a different prefix."""
        log = Log.__new__(Log)
        log.prefix = prefix
        log.trim = self.trim if trim is None else trim
        log.console = self.console
        log.error_console = self.error_console
        log._level = self._level
        log._root = self._root
        return log

    def trace(self, message: object = "") -> None:
        if self.is_enabled("trace"):
            self._write(self.error_console, message, "dim")

    def debug(self, message: object = "") -> None:
        if self.is_enabled("debug"):
            self._write(self.error_console, message, "dim")

    def info(self, message: object = "") -> None:
        if self.is_enabled("info"):
            self._write(self.console, message, None)

    def notice(self, message: object = "") -> None:
        if self.is_enabled("notice"):
            self._write(self.error_console, message, "bold")

    def warn(self, message: object = "") -> None:
        if self.is_enabled("warn"):
            self._write(self.error_console, message, "yellow")

    def error(self, message: object = "") -> None:
        if self.is_enabled("error"):
            self._write(self.error_console, message, "red")

    def print(
        self,
        message: object = "",
        *,
        to: Literal["stdout", "stderr"] = "stdout",
        prefix: bool = True,
        style: str | None = None,
    ) -> None:
        """Write a message regardless of the current level."""
        console = self.console if to == "stdout" else self.error_console
        self._write(console, message, style, use_prefix=prefix)

    def _write(
        self,
        console: Console,
        message: object,
        style: str | None,
        *,
        use_prefix: bool = True,
    ) -> None:
        lines = str("" if message is None else message).splitlines() or [""]
        prefix = self.prefix if use_prefix else ""

        for raw in lines:
            line = Text.from_ansi(raw).plain.rstrip()
            if self.trim and not line:
                continue
            text = Text(prefix)
            text.append(line, style=style)
            console.print(text, soft_wrap=True)
