"""Captured output of a spawned process."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pywurk.jsondoc import JsonNode, parse_json

StreamName = Literal["stdout", "stderr"]


@dataclass(frozen=True, slots=True)
class SpawnResult:
    """Result of a spawned process.

    Output is kept as the ordered sequence of chunks read from the child, so
    stdout, stderr and their interleaving can all be derived on demand.

    Attributes:
        command: Executable name as requested by the caller.
        chunks: Captured ``(stream, data)`` pairs in arrival order.
        exit_code: Process exit code (1 when terminated by a signal).
        signal_code: Name of the terminating signal, if any.
    """

    command: str
    chunks: tuple[tuple[StreamName, bytes], ...] = ()
    exit_code: int = 0
    signal_code: str | None = None

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def _join(self, stream: StreamName | None) -> bytes:
        return b"".join(data for name, data in self.chunks if stream is None or name == stream)

    @property
    def stdout(self) -> bytes:
        return self._join("stdout")

    @property
    def stdout_text(self) -> str:
        return self.stdout.decode("utf-8", errors="replace").strip()

    @property
    def stdout_json(self) -> JsonNode:
        return parse_json(self.stdout_text)

    @property
    def stderr(self) -> bytes:
        return self._join("stderr")

    @property
    def stderr_text(self) -> str:
        return self.stderr.decode("utf-8", errors="replace").strip()

    @property
    def stderr_json(self) -> JsonNode:
        return parse_json(self.stderr_text)

    @property
    def combined(self) -> bytes:
        return self._join(None)

    @property
    def combined_text(self) -> str:
        return self.combined.decode("utf-8", errors="replace").strip()
