"""Process spawning with terminal-aware concurrency control."""

from __future__ import annotations

import asyncio
import contextlib
import os
import shutil
import signal
import sys
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Literal

from pywurk.errors import MissingExecutableError, SpawnExitCodeError
from pywurk.execution.args import SparseArg, get_args, quote
from pywurk.execution.results import SpawnResult, StreamName
from pywurk.log import Log

SpawnInput = bytes | Literal["inherit"] | None
SpawnOutput = Literal["ignore", "inherit", "echo", "buffer"]

Spawn = Callable[..., Awaitable[SpawnResult]]

_READ_SIZE = 64 * 1024


@dataclass(frozen=True)
class SpawnOptions:
    """Options for a single spawn.

    Attributes:
        cwd: Working directory of the child process.
        env: Environment overrides merged over the current environment.
        paths: Extra ``PATH`` entries placed ahead of the inherited ``PATH``.
        input: Bytes written to stdin, or ``"inherit"`` to share the terminal.
        output: ``buffer`` captures output, ``echo`` streams it through the
            log, ``inherit`` shares the terminal, ``ignore`` discards it.
        log: Log used for command echo and output.
        log_command: Print the command before running it. Defaults to true
            for ``echo`` and ``inherit`` output.
        allow_non_zero_exit_code: Return a result instead of raising when the
            process fails.
    """

    cwd: Path | str | None = None
    env: Mapping[str, str] = field(default_factory=dict)
    paths: Sequence[str] = ()
    input: SpawnInput = None
    output: SpawnOutput = "buffer"
    log: Log | None = None
    log_command: bool | None = None
    allow_non_zero_exit_code: bool = False

    @property
    def exclusive(self) -> bool:
        """Whether the child takes over inherited terminal streams."""
        return self.input == "inherit" or self.output == "inherit"


def local_bin_paths(cwd: Path) -> list[str]:
    """Return ``node_modules/.bin`` for ``cwd`` and each ancestor, nearest first."""
    return [str(directory / "node_modules" / ".bin") for directory in (cwd, *cwd.parents)]


def compose_path(cwd: Path, paths: Sequence[str], inherited: str | None) -> str:
    """Compose the child ``PATH``.

    Order: runtime executable directory, local bin directories, caller paths,
    then the inherited ``PATH``. Empty segments are removed.
    """
    entries = [
        os.path.dirname(sys.executable),
        *local_bin_paths(cwd),
        *paths,
        *(inherited or "").split(os.pathsep),
    ]
    return os.pathsep.join(entry for entry in entries if entry)


class SpawnCoordinator:
    """Runs child processes and serializes those that need the terminal.

    Every in-flight spawn is tracked. A spawn that inherits stdin or stdout
    waits for all in-flight spawns to settle and then becomes the blocking
    spawn until it exits. Any other spawn only waits for the blocking spawn
    recorded when it was requested.
    """

    def __init__(self, log: Log | None = None) -> None:
        self.log = log or Log()
        self._all: set[asyncio.Task[SpawnResult]] = set()
        self._blocking: asyncio.Task[SpawnResult] | None = None

    @property
    def in_flight(self) -> int:
        return len(self._all)

    @property
    def blocking(self) -> asyncio.Task[SpawnResult] | None:
        return self._blocking

    def spawn(
        self,
        command: str,
        args: Sequence[SparseArg] = (),
        **options: Any,
    ) -> asyncio.Task[SpawnResult]:
        """Schedule a child process.

        Registration happens synchronously, so the ordering guarantees hold
        for spawns requested back to back without awaiting in between.

        Args:
            command: Executable name or path.
            args: Sparse argument list (see ``get_args``).
            **options: Fields of :class:`SpawnOptions`.

        Returns:
            Task resolving to the spawn result.
        """
        opts = SpawnOptions(**options)

        if opts.exclusive:
            waiting = set(self._all)
            task = asyncio.ensure_future(self._run_after(waiting, command, args, opts))
            self._blocking = task
            task.add_done_callback(self._release_blocking)
        else:
            waiting = {self._blocking} if self._blocking is not None else set()
            task = asyncio.ensure_future(self._run_after(waiting, command, args, opts))

        self._all.add(task)
        task.add_done_callback(self._all.discard)

        return task

    def bind(self, **defaults: Any) -> Spawn:
        """Create a spawn function with default options.

        ``cwd`` from the call is resolved against the default ``cwd``, ``env``
        mappings are merged and ``paths`` are concatenated.
        """

        def spawn(
            command: str,
            args: Sequence[SparseArg] = (),
            **options: Any,
        ) -> asyncio.Task[SpawnResult]:
            base_cwd = defaults.get("cwd")
            cwd = options.get("cwd")
            if base_cwd is not None:
                cwd = Path(base_cwd) / cwd if cwd is not None else Path(base_cwd)

            merged = {
                **defaults,
                **options,
                "cwd": cwd,
                "env": {**defaults.get("env", {}), **options.get("env", {})},
                "paths": [*defaults.get("paths", ()), *options.get("paths", ())],
            }
            return self.spawn(command, args, **merged)

        return spawn

    def _release_blocking(self, task: asyncio.Task[SpawnResult]) -> None:
        if self._blocking is task:
            self._blocking = None

    async def _run_after(
        self,
        waiting: set[asyncio.Task[SpawnResult]],
        command: str,
        args: Sequence[SparseArg],
        options: SpawnOptions,
    ) -> SpawnResult:
        # asyncio.wait never cancels or raises for the awaited tasks.
        if waiting:
            await asyncio.wait(waiting)
        return await run_process(command, args, replace(options, log=options.log or self.log))


async def _pump(
    reader: asyncio.StreamReader,
    stream: StreamName,
    chunks: list[tuple[StreamName, bytes]],
    echo: Log | None,
) -> None:
    # Echoed output is already visible, so it is not captured.
    if echo is not None:
        # Lines are split by hand so a single line may exceed the reader limit.
        pending = b""
        while data := await reader.read(_READ_SIZE):
            *lines, pending = (pending + data).split(b"\n")
            for line in lines:
                echo.print(line.decode("utf-8", errors="replace"), to=stream)
        if pending:
            echo.print(pending.decode("utf-8", errors="replace"), to=stream)
        return

    while data := await reader.read(_READ_SIZE):
        chunks.append((stream, data))


async def _feed(writer: asyncio.StreamWriter, data: bytes) -> None:
    try:
        writer.write(data)
        await writer.drain()
    except (BrokenPipeError, ConnectionResetError):
        pass
    finally:
        writer.close()


def _stdio(options: SpawnOptions) -> tuple[int | None, int | None]:
    if options.input == "inherit":
        stdin = None
    elif options.input is not None:
        stdin = asyncio.subprocess.PIPE
    else:
        stdin = asyncio.subprocess.DEVNULL

    if options.output == "ignore":
        stdout = asyncio.subprocess.DEVNULL
    elif options.output == "inherit":
        stdout = None
    else:
        stdout = asyncio.subprocess.PIPE

    return stdin, stdout


async def run_process(
    command: str,
    args: Sequence[SparseArg],
    options: SpawnOptions,
) -> SpawnResult:
    """Run one child process immediately, without coordination.

    Args:
        command: Executable name or path.
        args: Sparse argument list.
        options: Spawn options.

    Returns:
        Spawn result with captured output.

    Raises:
        MissingExecutableError: If the executable cannot be found.
        SpawnExitCodeError: If the process fails and failures are not allowed.
    """
    log = options.log or Log()
    argv = get_args(args)
    cwd = Path(options.cwd) if options.cwd is not None else Path.cwd()
    log_command = (
        options.log_command
        if options.log_command is not None
        else options.output in ("echo", "inherit")
    )

    if log_command:
        log.print(f"> {quote(command, *argv)}", to="stderr", prefix=options.output != "inherit")
    else:
        log.debug(f"> {quote(command, *argv)}")

    env = {**os.environ, **options.env}
    env["PATH"] = compose_path(cwd, options.paths, options.env.get("PATH", os.environ.get("PATH")))

    executable = shutil.which(command, path=env["PATH"])
    if executable is None:
        raise MissingExecutableError(command)

    stdin, stdout = _stdio(options)

    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            *argv,
            cwd=str(cwd),
            env=env,
            stdin=stdin,
            stdout=stdout,
            stderr=stdout,
        )
    except FileNotFoundError as e:
        raise MissingExecutableError(command) from e

    chunks: list[tuple[StreamName, bytes]] = []
    echo = log if options.output == "echo" else None
    jobs: list[Awaitable[None]] = []

    if process.stdout is not None:
        jobs.append(_pump(process.stdout, "stdout", chunks, echo))
    if process.stderr is not None:
        jobs.append(_pump(process.stderr, "stderr", chunks, echo))
    if process.stdin is not None and isinstance(options.input, bytes):
        jobs.append(_feed(process.stdin, options.input))

    try:
        await asyncio.gather(*jobs)
    except BaseException:
        if process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
        await process.wait()
        raise

    returncode = await process.wait()

    signal_code: str | None = None
    exit_code = returncode
    if returncode < 0:
        try:
            signal_code = signal.Signals(-returncode).name
        except ValueError:
            signal_code = str(-returncode)
        exit_code = 1

    if exit_code != 0 and not options.allow_non_zero_exit_code:
        if chunks:
            if not log_command:
                log.print(f"> {quote(command, *argv)}", to="stderr")
            output = b"".join(data for _, data in chunks)
            log.print(output.decode("utf-8", errors="replace").strip(), to="stderr")
        raise SpawnExitCodeError(command, exit_code, signal_code)

    return SpawnResult(
        command=command,
        chunks=tuple(chunks),
        exit_code=exit_code,
        signal_code=signal_code,
    )
