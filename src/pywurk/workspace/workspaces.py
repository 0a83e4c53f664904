"""The collection of repository workspaces and its dependency graph."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pywurk.execution import engine
from pywurk.execution.spawn import SpawnCoordinator
from pywurk.jsondoc import JsonDocument
from pywurk.log import Log
from pywurk.workspace.graph import gating_dependencies, resolve_links, topological_order
from pywurk.workspace.link import Link
from pywurk.workspace.workspace import Workspace

if TYPE_CHECKING:
    from pywurk.pm.base import PackageManager


@dataclass
class RawManifest:
    """A manifest as read from disk.

    Attributes:
        dir: Directory containing the manifest.
        config: Parsed manifest content.
    """

    dir: Path
    config: dict[str, Any]


class Workspaces:
    """All workspaces of a repository, their links and the current selection.

    Iteration yields selected workspaces in discovery order. The root is only
    yielded when ``include_root`` is set.

    Attributes:
        root: The repository root workspace.
        include_root: Whether the root takes part in iteration and traversal.
        concurrency: Default concurrency limit for :meth:`for_each`.
    """

    def __init__(
        self,
        root: Workspace,
        workspaces: Sequence[Workspace],
        *,
        include_root: bool = False,
        concurrency: int | None = None,
    ) -> None:
        self.root = root
        self.include_root = include_root
        self.concurrency = concurrency
        self._all = [root, *(w for w in workspaces if w is not root)]
        self._links_key: tuple[int, ...] | None = None
        self._dependencies: dict[Workspace, list[Link]] = {}
        self._dependents: dict[Workspace, list[Link]] = {}

        for workspace in self._all:
            workspace.workspaces = self

    @classmethod
    def build(
        cls,
        root: RawManifest,
        manifests: Sequence[RawManifest],
        *,
        log: Log | None = None,
        spawner: SpawnCoordinator | None = None,
        pm: PackageManager | None = None,
        include_root: bool = False,
        concurrency: int | None = None,
    ) -> Workspaces:
        """Create workspaces from raw manifests.

        Args:
            root: Root manifest.
            manifests: Workspace manifests in discovery order.
            log: Root log.
            spawner: Shared spawn coordinator.
            pm: Package manager adapter for registry queries.
            include_root: Include the root in iteration.
            concurrency: Default concurrency limit.
        """
        log = log or Log()
        spawner = spawner or SpawnCoordinator(log)

        def create(manifest: RawManifest, is_root: bool) -> Workspace:
            return Workspace(
                manifest.dir,
                JsonDocument(manifest.config),
                is_root=is_root,
                log=log,
                spawner=spawner,
                pm=pm,
            )

        return cls(
            create(root, True),
            [create(manifest, False) for manifest in manifests],
            include_root=include_root,
            concurrency=concurrency,
        )

    @property
    def all(self) -> list[Workspace]:
        """Every workspace including the root, selected or not."""
        return list(self._all)

    def __iter__(self) -> Iterator[Workspace]:
        return (w for w in self._all if self._is_active(w))

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"Workspaces({[w.name for w in self]!r})"

    def _is_active(self, workspace: Workspace) -> bool:
        if workspace.is_root:
            return self.include_root and workspace.selected
        return workspace.selected

    def get(self, name: str) -> Workspace | None:
        """Find a workspace (selected or not) by name."""
        return next((w for w in self._all if w.name == name), None)

    def _links(self) -> tuple[dict[Workspace, list[Link]], dict[Workspace, list[Link]]]:
        # Links are derived from manifest content, so recompute after edits.
        key = tuple(w.config.revision for w in self._all)
        if key != self._links_key:
            self._dependencies, self._dependents = resolve_links(self._all)
            self._links_key = key
        return self._dependencies, self._dependents

    def get_dependency_links(self, workspace: Workspace) -> list[Link]:
        return list(self._links()[0].get(workspace, ()))

    def get_dependent_links(self, workspace: Workspace) -> list[Link]:
        return list(self._links()[1].get(workspace, ()))

    def select(self, predicate: Callable[[Workspace], bool]) -> None:
        """Narrow the selection to workspaces matching ``predicate``."""
        for workspace in self._all:
            if workspace.selected and not predicate(workspace):
                workspace.selected = False

    def include_dependents(self) -> list[Workspace]:
        """Add every direct or transitive dependent of the selection.

        Returns:
            Workspaces newly added to the selection.
        """
        queue = deque(self)
        added: list[Workspace] = []

        while queue:
            workspace = queue.popleft()
            for link in self.get_dependent_links(workspace):
                dependent = link.dependent
                if dependent.selected or (dependent.is_root and not self.include_root):
                    continue
                dependent.selected = True
                added.append(dependent)
                queue.append(dependent)

        return added

    def _gates(self) -> tuple[list[Workspace], dict[Workspace, list[Workspace]]]:
        dependencies = {
            workspace: [link.dependency for link in links]
            for workspace, links in self._links()[0].items()
        }
        selected = list(self)
        selected_set = set(selected)
        gates = {w: gating_dependencies(w, dependencies, selected_set) for w in selected}
        return topological_order(selected, gates), gates

    def ordered(self) -> list[Workspace]:
        """Selected workspaces with every dependency before its dependents.

        Raises:
            CyclicDependencyError: If the selection's dependencies form a cycle.
        """
        return self._gates()[0]

    async def for_each(
        self,
        fn: engine.AsyncCallback,
        *,
        concurrency: int | None = None,
    ) -> None:
        """Run ``fn`` concurrently, each workspace after its dependencies."""
        nodes, gates = self._gates()
        await engine.for_each(nodes, gates, fn, concurrency=concurrency or self.concurrency)

    def for_each_sync(self, fn: engine.SyncCallback) -> None:
        """Run ``fn`` sequentially in dependency order."""
        nodes, gates = self._gates()
        engine.for_each_sync(nodes, gates, fn)

    async def for_each_independent(
        self,
        fn: engine.AsyncCallback,
        *,
        concurrency: int | None = None,
    ) -> None:
        """Run ``fn`` concurrently without ordering."""
        await engine.for_each_independent(
            list(self), fn, concurrency=concurrency or self.concurrency
        )
