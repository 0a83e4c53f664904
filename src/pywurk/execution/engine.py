"""Dependency-ordered traversal of workspaces."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pywurk.workspace.status import StatusValue

if TYPE_CHECKING:
    from pywurk.workspace.workspace import Workspace

AsyncCallback = Callable[["Workspace"], Awaitable[Any]]
SyncCallback = Callable[["Workspace"], Any]


class _Traversal:
    """Bookkeeping shared by the traversal primitives.

    ``culprits`` maps every failed or pruned workspace to the workspace whose
    callback actually failed.
    """

    def __init__(self, nodes: Sequence[Workspace]) -> None:
        self.culprits: dict[Workspace, Workspace] = {}
        self.errors: list[Exception] = []

        for node in nodes:
            node.status.reset()

    def blame(self, gates: Sequence[Workspace]) -> Workspace | None:
        for gate in gates:
            if gate in self.culprits:
                return self.culprits[gate]
            if gate.status.value is StatusValue.FAILED:
                return gate
        return None

    def prune(self, node: Workspace, culprit: Workspace) -> None:
        self.culprits[node] = culprit
        node.status.set(StatusValue.SKIPPED, f'dependency "{culprit.name}" failed')
        node.log.debug(f'skipping workspace (dependency "{culprit.name}" failed)')

    def record(self, node: Workspace, error: Exception | None) -> None:
        if error is None:
            node.status.settle()
            if node.status.value is StatusValue.FAILED:
                self.culprits[node] = node
            return

        node.status.fail(error)
        node.log.debug(f"failed: {error}")
        self.culprits[node] = node
        self.errors.append(error)

    def raise_first(self) -> None:
        if self.errors:
            raise self.errors[0]


async def for_each(
    nodes: Sequence[Workspace],
    gates: Mapping[Workspace, Sequence[Workspace]],
    fn: AsyncCallback,
    *,
    concurrency: int | None = None,
) -> None:
    """Run a callback for every node as soon as its gating dependencies succeed.

    ``nodes`` must be in dependency order. A node whose gating dependency
    failed, or was itself pruned, is marked skipped and never invoked. Errors
    do not interrupt other branches; the first one is re-raised once every
    node has settled.

    Args:
        nodes: Workspaces in dependency order.
        gates: Nearest selected dependencies of each node.
        fn: Async callback.
        concurrency: Maximum number of callbacks running at once.
    """
    traversal = _Traversal(nodes)
    semaphore = asyncio.Semaphore(concurrency) if concurrency else None
    tasks: dict[Workspace, asyncio.Task[None]] = {}

    async def invoke(node: Workspace) -> None:
        try:
            await fn(node)
        except Exception as e:
            traversal.record(node, e)
        else:
            traversal.record(node, None)

    async def visit(node: Workspace) -> None:
        waiting = [tasks[gate] for gate in gates.get(node, ())]
        if waiting:
            await asyncio.wait(waiting)

        culprit = traversal.blame(gates.get(node, ()))
        if culprit is not None:
            traversal.prune(node, culprit)
            return

        if semaphore is None:
            await invoke(node)
        else:
            async with semaphore:
                await invoke(node)

    for node in nodes:
        tasks[node] = asyncio.ensure_future(visit(node))

    if tasks:
        await asyncio.wait(tasks.values())

    traversal.raise_first()


def for_each_sync(
    nodes: Sequence[Workspace],
    gates: Mapping[Workspace, Sequence[Workspace]],
    fn: SyncCallback,
) -> None:
    """Run a synchronous callback for every node, one at a time, in order.

    Each callback observes the effects of every callback before it. Failure
    pruning matches :func:`for_each`.
    """
    traversal = _Traversal(nodes)

    for node in nodes:
        culprit = traversal.blame(gates.get(node, ()))
        if culprit is not None:
            traversal.prune(node, culprit)
            continue

        try:
            fn(node)
        except Exception as e:
            traversal.record(node, e)
        else:
            traversal.record(node, None)

    traversal.raise_first()


async def for_each_independent(
    nodes: Sequence[Workspace],
    fn: AsyncCallback,
    *,
    concurrency: int | None = None,
) -> None:
    """Run a callback for every node concurrently, without ordering."""
    traversal = _Traversal(nodes)
    semaphore = asyncio.Semaphore(concurrency) if concurrency else None

    async def visit(node: Workspace) -> None:
        try:
            if semaphore is None:
                await fn(node)
            else:
                async with semaphore:
                    await fn(node)
        except Exception as e:
            traversal.record(node, e)
        else:
            traversal.record(node, None)

    await asyncio.gather(*(visit(node) for node in nodes))
    traversal.raise_first()
