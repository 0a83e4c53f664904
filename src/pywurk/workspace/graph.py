"""Dependency graph construction and ordering over workspaces."""

from __future__ import annotations

import heapq
from collections import deque
from collections.abc import Hashable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, TypeVar

from pywurk.errors import CyclicDependencyError
from pywurk.workspace.link import Link, LinkType, parse_dependency_spec

if TYPE_CHECKING:
    from pywurk.workspace.workspace import Workspace

N = TypeVar("N", bound=Hashable)


def resolve_links(
    nodes: Sequence[Workspace],
) -> tuple[dict[Workspace, list[Link]], dict[Workspace, list[Link]]]:
    """Derive links from the dependency fields of every manifest.

    Only entries naming another workspace in ``nodes`` produce a link.

    Returns:
        Tuple of (dependency links, dependent links) keyed by workspace.
    """
    by_name: dict[str, Workspace] = {}
    for node in nodes:
        by_name.setdefault(node.name, node)

    dependencies: dict[Workspace, list[Link]] = {node: [] for node in nodes}
    dependents: dict[Workspace, list[Link]] = {node: [] for node in nodes}

    for node in nodes:
        for link_type in LinkType:
            for key, value in node.config.at(link_type.field).items():
                spec = value.as_(str)
                if spec is None:
                    continue

                name, version_range = parse_dependency_spec(key, spec)
                target = by_name.get(name)
                if target is None:
                    continue

                link = Link(node, target, link_type, key, spec, version_range)
                dependencies[node].append(link)
                dependents[target].append(link)

    return dependencies, dependents


def topological_order(nodes: Sequence[N], dependencies: Mapping[N, Iterable[N]]) -> list[N]:
    """Order nodes so that every dependency precedes its dependents.

    Ties are broken by position in ``nodes``. Dependencies outside ``nodes``
    are ignored.

    Raises:
        CyclicDependencyError: If the dependencies form a cycle.
    """
    index = {node: i for i, node in enumerate(nodes)}
    remaining = dict.fromkeys(nodes, 0)
    dependents: dict[N, list[N]] = {node: [] for node in nodes}

    for node in nodes:
        for dependency in dict.fromkeys(dependencies.get(node, ())):
            if dependency in index:
                remaining[node] += 1
                dependents[dependency].append(node)

    ready = [index[node] for node in nodes if remaining[node] == 0]
    heapq.heapify(ready)
    order: list[N] = []

    while ready:
        node = nodes[heapq.heappop(ready)]
        order.append(node)
        for dependent in dependents[node]:
            remaining[dependent] -= 1
            if remaining[dependent] == 0:
                heapq.heappush(ready, index[dependent])

    if len(order) < len(nodes):
        blocked = [node for node in nodes if remaining[node] > 0]
        raise CyclicDependencyError([str(getattr(n, "name", n)) for n in find_cycle(blocked, dependencies)])

    return order


def find_cycle(blocked: Sequence[N], dependencies: Mapping[N, Iterable[N]]) -> list[N]:
    """Walk dependencies among ``blocked`` nodes until one repeats.

    Every blocked node has at least one blocked dependency, so the walk always
    closes a cycle.
    """
    members = set(blocked)
    path: list[N] = []
    seen: dict[N, int] = {}
    node = blocked[0]

    while node not in seen:
        seen[node] = len(path)
        path.append(node)
        node = next(d for d in dependencies.get(node, ()) if d in members)

    return [*path[seen[node] :], node]


def gating_dependencies(
    node: N,
    dependencies: Mapping[N, Iterable[N]],
    selected: set[N],
) -> list[N]:
    """Find the nearest selected dependencies of a node.

    Unselected dependencies are walked through, so a selected workspace still
    waits for a selected workspace it only reaches transitively.
    """
    gates: list[N] = []
    visited: set[N] = set()
    queue = deque(dependencies.get(node, ()))

    while queue:
        current = queue.popleft()
        if current in visited:
            continue
        visited.add(current)

        if current in selected:
            gates.append(current)
        else:
            queue.extend(dependencies.get(current, ()))

    return gates
