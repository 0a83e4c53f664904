"""Tests for dependency-ordered traversal."""

from __future__ import annotations

import asyncio

import pytest

from pywurk.workspace import StatusValue, Workspace


@pytest.fixture
def diamond(make_workspaces):
    """app -> (left, right) -> base, plus an independent workspace."""
    return make_workspaces({
        "app": {"dependencies": {"left": "*", "right": "*"}},
        "left": {"dependencies": {"base": "*"}},
        "right": {"dependencies": {"base": "*"}},
        "base": {},
        "solo": {},
    })


class TestForEach:
    """Tests for Workspaces.for_each."""

    async def test_dependencies_settle_before_dependents(self, diamond) -> None:
        events: list[str] = []

        async def each(workspace: Workspace) -> None:
            events.append(f"start {workspace.name}")
            await asyncio.sleep(0.01 if workspace.name == "left" else 0)
            events.append(f"end {workspace.name}")

        await diamond.for_each(each)

        assert events.count("start base") == 1
        assert events.index("end base") < events.index("start left")
        assert events.index("end base") < events.index("start right")
        assert events.index("end left") < events.index("start app")
        assert events.index("end right") < events.index("start app")
        assert all(w.status.value is StatusValue.SUCCESS for w in diamond)

    async def test_failure_prunes_dependents_only(self, diamond) -> None:
        called: list[str] = []

        async def each(workspace: Workspace) -> None:
            called.append(workspace.name)
            if workspace.name == "left":
                raise RuntimeError("left broke")

        with pytest.raises(RuntimeError, match="left broke"):
            await diamond.for_each(each)

        assert "app" not in called
        assert diamond.get("left").status.value is StatusValue.FAILED
        assert diamond.get("app").status.value is StatusValue.SKIPPED
        assert diamond.get("app").status.detail == 'dependency "left" failed'
        assert diamond.get("right").status.value is StatusValue.SUCCESS
        assert diamond.get("solo").status.value is StatusValue.SUCCESS

    async def test_transitive_prune_names_failed_ancestor(self, make_workspaces) -> None:
        workspaces = make_workspaces({
            "a": {},
            "b": {"dependencies": {"a": "*"}},
            "c": {"dependencies": {"b": "*"}},
        })

        async def each(workspace: Workspace) -> None:
            if workspace.name == "a":
                raise ValueError("nope")

        with pytest.raises(ValueError):
            await workspaces.for_each(each)

        assert workspaces.get("c").status.value is StatusValue.SKIPPED
        assert workspaces.get("c").status.detail == 'dependency "a" failed'

    async def test_first_error_is_raised_and_all_recorded(self, make_workspaces) -> None:
        workspaces = make_workspaces({"a": {}, "b": {}})

        async def each(workspace: Workspace) -> None:
            await asyncio.sleep(0.02 if workspace.name == "a" else 0)
            raise RuntimeError(workspace.name)

        with pytest.raises(RuntimeError, match="^b$"):
            await workspaces.for_each(each)

        assert str(workspaces.get("a").status.error) == "a"

    async def test_skipped_dependency_does_not_prune(self, make_workspaces) -> None:
        workspaces = make_workspaces({"a": {}, "b": {"dependencies": {"a": "*"}}})
        called: list[str] = []

        async def each(workspace: Workspace) -> None:
            called.append(workspace.name)
            if workspace.name == "a":
                workspace.status.set(StatusValue.SKIPPED, "no modifications")

        await workspaces.for_each(each)

        assert called == ["a", "b"]
        assert workspaces.get("a").status.detail == "no modifications"

    async def test_unselected_intermediate_still_gates(self, make_workspaces) -> None:
        workspaces = make_workspaces({
            "base": {},
            "mid": {"dependencies": {"base": "*"}},
            "app": {"dependencies": {"mid": "*"}},
        })
        workspaces.select(lambda w: w.name != "mid")
        events: list[str] = []

        async def each(workspace: Workspace) -> None:
            events.append(f"start {workspace.name}")
            await asyncio.sleep(0.01)
            events.append(f"end {workspace.name}")

        await workspaces.for_each(each)

        assert events == ["start base", "end base", "start app", "end app"]
        assert workspaces.get("mid").status.value is None

    async def test_concurrency_limit(self, make_workspaces) -> None:
        workspaces = make_workspaces({name: {} for name in "abcd"})
        running = 0
        peak = 0

        async def each(workspace: Workspace) -> None:
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1

        await workspaces.for_each(each, concurrency=2)

        assert peak == 2


class TestForEachSync:
    """Tests for Workspaces.for_each_sync."""

    def test_sequential_in_dependency_order(self, diamond) -> None:
        order: list[str] = []

        diamond.for_each_sync(lambda w: order.append(w.name))

        assert order == ["base", "left", "right", "app", "solo"]

    def test_failure_prunes_dependents(self, diamond) -> None:
        def each(workspace: Workspace) -> None:
            if workspace.name == "base":
                raise RuntimeError("base broke")

        with pytest.raises(RuntimeError):
            diamond.for_each_sync(each)

        assert [w.status.value for w in diamond] == [
            StatusValue.SKIPPED,
            StatusValue.SKIPPED,
            StatusValue.SKIPPED,
            StatusValue.FAILED,
            StatusValue.SUCCESS,
        ]


async def test_for_each_independent_runs_everything(diamond) -> None:
    seen: list[str] = []

    async def each(workspace: Workspace) -> None:
        seen.append(workspace.name)
        if workspace.name == "base":
            raise RuntimeError("base")

    with pytest.raises(RuntimeError):
        await diamond.for_each_independent(each)

    assert sorted(seen) == ["app", "base", "left", "right", "solo"]
    assert diamond.get("app").status.value is StatusValue.SUCCESS
