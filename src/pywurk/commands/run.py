"""Run command implementation."""

from __future__ import annotations

from dataclasses import dataclass, field

from pywurk.commands.base import Command, CommandContext
from pywurk.workspace import StatusValue, Workspace


@dataclass
class RunOptions:
    """Options for run command."""

    script: str
    args: list[str] = field(default_factory=list)
    interactive: bool = False


@dataclass
class RunResult:
    """Result of run command."""

    ran: list[str] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


class RunCommand(Command[RunResult]):
    """Run a manifest script in every selected workspace that defines it.

    Workspaces run in dependency order. Workspaces without the script are
    skipped silently.
    """

    def __init__(self, context: CommandContext, options: RunOptions) -> None:
        super().__init__(context)
        self.options = options

    async def execute(self) -> RunResult:
        """Execute the script."""
        self.context.auto_print_status()

        pm = self.context.pm
        script = self.options.script
        result = RunResult()

        async def each(workspace: Workspace) -> None:
            if not workspace.config.at("scripts", script).is_(str):
                workspace.log.debug(f'skipping missing script "{script}"')
                workspace.status.set(StatusValue.SKIPPED, "no script")
                result.missing.append(workspace.name)
                return

            result.ran.append(workspace.name)

            if self.options.interactive:
                await workspace.spawn(
                    pm.command,
                    pm.run_script_args(script, self.options.args),
                    input="inherit",
                    output="inherit",
                )
            else:
                await workspace.spawn(
                    pm.command,
                    pm.run_script_args(script, self.options.args),
                    output="echo",
                )

        await self.workspaces.for_each(each)
        return result


async def run_script(
    context: CommandContext,
    script: str,
    args: list[str] | None = None,
    *,
    interactive: bool = False,
) -> RunResult:
    """Convenience function to run a script.

    Args:
        context: Command context.
        script: Name of the manifest script.
        args: Extra arguments passed to the script.
        interactive: Share the terminal with each script (runs one at a time).

    Returns:
        Names of workspaces that ran or lacked the script.
    """
    cmd = RunCommand(context, RunOptions(script=script, args=list(args or []), interactive=interactive))
    return await cmd.execute()
