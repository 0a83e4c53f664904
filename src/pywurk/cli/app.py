"""pywurk CLI application."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import click
import typer
from rich.console import Console
from rich.markup import escape

from pywurk.commands.base import CommandContext
from pywurk.config import MANIFEST_FILE, find_root, load_config, read_manifest
from pywurk.errors import WurkError
from pywurk.execution.spawn import SpawnCoordinator
from pywurk.filters import apply_filters
from pywurk.jsondoc import JsonDocument
from pywurk.log import Log
from pywurk.plugins import CommandPlugin, load_plugins
from pywurk.pm import create_package_manager, detect_package_manager
from pywurk.workspace import RawManifest, Workspaces

Action = Callable[[CommandContext], Awaitable[Any]]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from pywurk import __version__

        print(f"pywurk {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="pywurk",
    help="Monorepo workspace runner and versioner",
    no_args_is_help=True,
    add_completion=False,
)

console = Console(highlight=False)
error_console = Console(stderr=True, highlight=False)


@dataclass
class GlobalOptions:
    """Options shared by every command."""

    scope: str | None = None
    ignore: list[str] | None = None
    since: str | None = None
    include_root: bool = False
    concurrency: int | None = None
    log_level: str | None = None


def parse_comma_list(value: str | None) -> list[str] | None:
    """Parse comma-separated string into list."""
    return [v.strip() for v in value.split(",") if v.strip()] if value else None


@app.callback()
def _app_callback(
    ctx: typer.Context,
    scope: Annotated[
        str | None,
        typer.Option("--scope", "-s", help="Workspace names, paths or globs (comma-separated)"),
    ] = None,
    ignore: Annotated[
        str | None,
        typer.Option("--ignore", "-i", help="Patterns to ignore (comma-separated)"),
    ] = None,
    since: Annotated[
        str | None,
        typer.Option("--since", help="Only workspaces changed since git ref"),
    ] = None,
    include_root: Annotated[
        bool,
        typer.Option("--include-root", help="Include the root workspace"),
    ] = False,
    concurrency: Annotated[
        int | None,
        typer.Option("--concurrency", "-c", min=1, help="Parallel jobs"),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="silent, error, warn, notice, info, debug or trace"),
    ] = None,
    version: Annotated[  # noqa: ARG001
        bool,
        typer.Option("--version", "-V", help="Show version and exit", callback=version_callback),
    ] = False,
) -> None:
    """Run scripts and manage versions across monorepo workspaces."""
    ctx.obj = GlobalOptions(
        scope=scope,
        ignore=parse_comma_list(ignore),
        since=since,
        include_root=include_root,
        concurrency=concurrency,
        log_level=log_level,
    )


async def load_context(
    options: GlobalOptions,
    *,
    cwd: Path | None = None,
    command_options: dict[str, Any] | None = None,
) -> CommandContext:
    """Discover the repository and build the command context.

    Args:
        options: Global CLI options.
        cwd: Directory to start root discovery from.
        command_options: Command specific option values.
    """
    log = Log(level=options.log_level, console=console, error_console=error_console)
    root_dir = find_root(cwd or Path.cwd())
    root_manifest = read_manifest(root_dir / MANIFEST_FILE)
    config = load_config(root_manifest)
    root_config = JsonDocument(root_manifest, readonly=True).root

    spawner = SpawnCoordinator(log)
    pm_id = detect_package_manager(root_dir, root_config)
    log.debug(f"package manager: {pm_id}")
    pm = create_package_manager(pm_id, root_dir, root_config, spawner, log)

    manifests = [
        RawManifest(path, read_manifest(path / MANIFEST_FILE))
        for path in await pm.get_workspaces()
        if (path / MANIFEST_FILE).is_file()
    ]

    workspaces = Workspaces.build(
        RawManifest(root_dir, root_manifest),
        manifests,
        log=log,
        spawner=spawner,
        pm=pm,
        include_root=options.include_root,
        concurrency=options.concurrency or config.concurrency,
    )

    await apply_filters(
        workspaces,
        scope=options.scope,
        ignore=options.ignore,
        since=options.since,
    )

    return CommandContext(
        log=log,
        root=root_dir,
        workspaces=workspaces,
        pm=pm,
        spawner=spawner,
        config=config,
        options=dict(command_options or {}),
    )


def run_action(
    options: GlobalOptions | None,
    action: Action,
    *,
    command_options: dict[str, Any] | None = None,
) -> None:
    """Load the context, run an action and map errors to exit codes."""

    async def run() -> None:
        context = await load_context(options or GlobalOptions(), command_options=command_options)
        try:
            await action(context)
        finally:
            context.finish()

    try:
        asyncio.run(run())
    except WurkError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e
    except Exception as e:
        error_console.print_exception()
        raise typer.Exit(1) from e


@app.command(
    "run",
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def run_cmd(
    ctx: typer.Context,
    script: Annotated[str, typer.Argument(help="Script to run in each workspace")],
    args: Annotated[
        list[str] | None,
        typer.Argument(help="Arguments passed to the script"),
    ] = None,
    interactive: Annotated[
        bool,
        typer.Option("--interactive", help="Share the terminal with each script"),
    ] = False,
) -> None:
    """Run a script in every selected workspace that defines it."""
    from pywurk.commands import run_script

    script_args = [*(args or []), *ctx.args]

    async def action(context: CommandContext) -> None:
        await run_script(context, script, script_args, interactive=interactive)

    run_action(ctx.obj, action)


def list_cmd(ctx: typer.Context) -> None:
    """Print selected workspaces as a JSON array."""
    from pywurk.commands import list_workspaces

    run_action(ctx.obj, list_workspaces)


app.command("list")(list_cmd)
app.command("ls", hidden=True)(list_cmd)


@app.command("version")
def version_cmd(
    ctx: typer.Context,
    strategy: Annotated[
        str,
        typer.Argument(
            help="major, minor, patch, premajor, preminor, prepatch, prerelease, "
            "auto, promote, sync, or a version number",
        ),
    ],
    preid: Annotated[
        str | None,
        typer.Option("--preid", help="Identifier for prerelease versions"),
    ] = None,
    changelog: Annotated[
        bool | None,
        typer.Option(
            "--changelog/--no-changelog",
            help='Add changelog entries (default for the "auto" strategy)',
        ),
    ] = None,
    strict: Annotated[
        bool | None,
        typer.Option("--strict/--no-strict", help="Update ranges that already cover new versions"),
    ] = None,
) -> None:
    """Update workspace versions and local dependency ranges."""
    from pywurk.commands import parse_strategy, version_workspaces

    try:
        parsed = parse_strategy(strategy)
    except WurkError as e:
        error_console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e

    async def action(context: CommandContext) -> None:
        await version_workspaces(
            context,
            parsed,
            preid=preid,
            changelog=changelog,
            strict=strict,
        )

    run_action(ctx.obj, action)


def plugin_command(plugin: CommandPlugin) -> click.Command:
    """Wrap a plugin as a click command sharing the global options."""

    @click.pass_context
    def callback(ctx: click.Context, **kwargs: Any) -> None:
        run_action(ctx.obj, plugin.action, command_options=kwargs)

    return click.Command(
        plugin.name,
        params=list(plugin.config()) if plugin.config else [],
        callback=callback,
        help=plugin.help,
    )


def discover_plugins(cwd: Path | None = None) -> list[CommandPlugin]:
    """Load command plugins for the repository around ``cwd``, if any."""
    log = Log(console=console, error_console=error_console)

    try:
        root_dir = find_root(cwd or Path.cwd())
        root_manifest = read_manifest(root_dir / MANIFEST_FILE)
        config = load_config(root_manifest)
    except WurkError as e:
        log.debug(f"not loading command plugins: {e.message}")
        return []

    return load_plugins(
        JsonDocument(root_manifest, readonly=True).root,
        config.commands,
        log,
        reserved=("run", "list", "ls", "version"),
    )


def main() -> None:
    """Console script entry point."""
    command = typer.main.get_command(app)

    if isinstance(command, click.Group):
        for plugin in discover_plugins():
            command.add_command(plugin_command(plugin))

    command(prog_name="pywurk")


if __name__ == "__main__":
    main()
