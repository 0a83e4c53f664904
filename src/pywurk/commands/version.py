"""Version command implementation."""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from pywurk.commands.base import Command, CommandContext
from pywurk.errors import DirtyRepositoryError, InvalidStrategyError
from pywurk.git import is_git_dirty
from pywurk.versioning import (
    Change,
    ReleaseType,
    Version,
    auto,
    bump,
    generate_changelog_entry,
    literal,
    prepend_to_changelog,
    promote,
    sync,
)
from pywurk.versioning.changelog import CHANGELOG_FILE
from pywurk.workspace import StatusValue, Workspace

KEYWORD_STRATEGIES = ("auto", "promote", "sync")

Strategy = ReleaseType | Version | str

_SCOPE_PREFIX = re.compile(r"^@[^/]*/")


def parse_strategy(value: str) -> Strategy:
    """Parse a strategy argument.

    Returns:
        A release type, one of ``auto``, ``promote`` or ``sync``, or a version.

    Raises:
        InvalidStrategyError: If the value is none of those.
    """
    if value in KEYWORD_STRATEGIES:
        return value
    try:
        return ReleaseType(value)
    except ValueError:
        pass

    version = Version.try_parse(value)
    if version is None:
        raise InvalidStrategyError(value)
    return version


@dataclass
class VersionOptions:
    """Options for version command."""

    strategy: Strategy
    preid: str | None = None
    changelog: bool | None = None
    strict: bool | None = None


@dataclass
class VersionResult:
    """Result of version command."""

    updated: list[str] = field(default_factory=list)
    versions: dict[str, str] = field(default_factory=dict)
    commit_message: str | None = None


class VersionCommand(Command[VersionResult]):
    """Apply a version strategy and keep local dependency ranges in sync.

    Phases run in a fixed order: strategy, sync, write, package manager update.
    Nothing is written to disk before the write phase.
    """

    def __init__(self, context: CommandContext, options: VersionOptions) -> None:
        super().__init__(context)
        self.options = options
        self.changes: dict[Workspace, list[Change]] = {}

    @property
    def changelog(self) -> bool:
        if self.options.changelog is not None:
            return self.options.changelog
        if self.context.config.version.changelog is not None:
            return self.context.config.version.changelog
        return self.options.strategy == "auto"

    @property
    def strict(self) -> bool:
        if self.options.strict is not None:
            return self.options.strict
        return self.context.config.version.strict

    def _strategy(self) -> Callable[[Workspace], Awaitable[list[Change]]]:
        strategy = self.options.strategy
        preid = self.options.preid

        if strategy == "auto":
            return auto

        async def apply(workspace: Workspace) -> list[Change]:
            if isinstance(strategy, ReleaseType):
                return bump(workspace, strategy, preid)
            if isinstance(strategy, Version):
                return literal(workspace, strategy)
            return promote(workspace)

        return apply

    async def apply_strategy(self) -> None:
        apply = self._strategy()

        async def each(workspace: Workspace) -> None:
            if workspace.is_private:
                workspace.log.debug("applying strategy to private workspace")
            self.changes[workspace] = list(await apply(workspace))

        await self.workspaces.for_each(each)

    def apply_sync(self) -> None:
        # Dependents of updated workspaces need their ranges checked too.
        self.workspaces.include_dependents()

        def each(workspace: Workspace) -> None:
            self.changes.setdefault(workspace, []).extend(sync(workspace, strict=self.strict))

        self.workspaces.for_each_sync(each)

    async def write(self) -> None:
        # Ordered so that a failed write (e.g. dirty tree) prevents dependents
        # from referencing a version that will not be committed.
        changelog = self.changelog

        async def each(workspace: Workspace) -> None:
            if not workspace.config.is_modified:
                workspace.log.debug("skipping workspace update (no modifications)")
                workspace.status.set(StatusValue.SKIPPED, "no modifications")
                return

            if await is_git_dirty(workspace.git):
                raise DirtyRepositoryError(workspace.name)

            new_version = workspace.config.at("version").as_(str)
            if new_version == workspace.version:
                workspace.status.set_detail("dependency updates")
            else:
                workspace.status.set_detail(f"{workspace.version} -> {new_version}")

            workspace.write_config()

            changes = self.changes.get(workspace, [])
            if changelog and changes and new_version:
                prepend_to_changelog(
                    workspace.dir / CHANGELOG_FILE,
                    generate_changelog_entry(new_version, changes),
                )

            workspace.status.set(StatusValue.SUCCESS)

        await self.workspaces.for_each(each)

    async def execute(self) -> VersionResult:
        """Execute the version command."""
        self.context.auto_print_status()
        strategy = self.options.strategy

        if self.options.preid and not (isinstance(strategy, ReleaseType) and strategy.is_pre):
            self.log.warn('option --preid only applies to "pre*" strategies')

        if strategy != "sync":
            await self.apply_strategy()

        self.apply_sync()
        await self.write()

        updated = [w for w in self.workspaces if w.config.is_modified]
        result = VersionResult(updated=[w.name for w in updated])

        if updated:
            await self.context.pm.update(result.updated)

        for workspace in updated:
            new_version = workspace.config.at("version").as_(str)
            if new_version and new_version != workspace.version:
                result.versions[workspace.name] = new_version

        if result.versions:
            packages = ", ".join(
                f"{_SCOPE_PREFIX.sub('', name)}@{version}" for name, version in result.versions.items()
            )
            result.commit_message = self.context.config.version.commit_message.format(packages=packages)
            self.log.notice("version commit message:")
            self.log.notice(f"  {result.commit_message}")

        return result


async def version_workspaces(
    context: CommandContext,
    strategy: str | Strategy,
    *,
    preid: str | None = None,
    changelog: bool | None = None,
    strict: bool | None = None,
) -> VersionResult:
    """Convenience function to version workspaces.

    Args:
        context: Command context.
        strategy: Release type, ``auto``, ``promote``, ``sync`` or a version.
        preid: Prerelease identifier for ``pre*`` release types.
        changelog: Write changelog entries (default only for ``auto``).
        strict: Never suppress inconsequential range updates.

    Returns:
        Updated workspaces and their new versions.
    """
    if isinstance(strategy, str) and not isinstance(strategy, ReleaseType):
        strategy = parse_strategy(strategy)

    options = VersionOptions(strategy=strategy, preid=preid, changelog=changelog, strict=strict)
    return await VersionCommand(context, options).execute()
