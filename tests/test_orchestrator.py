import asyncio

from graphstats.config_models import StatsSettings
from graphstats.core.orchestrator import OrchestratorState, RecomputeOrchestrator
from graphstats.models import EntityKind, StatPurpose


class MutatingAlgorithms:
    """Mutate the graph once, during the first algorithm call."""

    def __init__(self, provider):
        self.provider = provider
        self.mutated = False

    async def run_algorithm(self, name, source):
        if not self.mutated:
            self.mutated = True
            self.provider.add_edge("C", "D")
        await asyncio.sleep(0)
        snapshot = self.provider.snapshot()
        return {t: {"measure": float(len(t))} for t in snapshot.node_ids()}


def test_single_pass_reaches_ready(triangle):
    orch = RecomputeOrchestrator(triangle)
    assert orch.state is OrchestratorState.IDLE
    asyncio.run(orch.recompute())
    assert orch.state is OrchestratorState.READY
    assert orch.passes == 1
    assert orch.dirty is False
    sizes = orch.stats(EntityKind.NODE, StatPurpose.SIZE)
    assert {k: s.value for k, s in sizes.items()} == {"A": 1.0, "B": 1.0, "C": 1.0}
    assert len(orch.stats("link", "color")) == 3


def test_change_during_pass_runs_exactly_one_more_pass(triangle):
    settings = StatsSettings(
        nodes_size_function="forwardUniquelinksCount", links_size_function="Jaccard"
    )
    orch = RecomputeOrchestrator(triangle, settings, algorithms=MutatingAlgorithms(triangle))
    asyncio.run(orch.recompute())

    assert orch.passes == 2
    assert orch.state is OrchestratorState.READY
    for calc in orch.calculators.values():
        assert calc.generation == triangle.generation
    assert "D" in orch.stats("node", "size")
    assert ("C", "D") in orch.stats("link", "size")


def test_requests_coalesce(triangle):
    orch = RecomputeOrchestrator(triangle)

    async def run():
        first = orch.request_recompute()
        second = orch.request_recompute()
        third = orch.request_recompute()
        assert first is second is third
        await first

    asyncio.run(run())
    assert orch.passes == 1


def test_change_outside_event_loop_marks_dirty(triangle):
    orch = RecomputeOrchestrator(triangle)
    asyncio.run(orch.recompute())
    assert orch.dirty is False
    triangle.add_node("D")
    assert orch.dirty is True
    asyncio.run(orch.recompute())
    assert "D" in orch.stats("node", "size")


def test_listener_removed_when_disabled(triangle):
    orch = RecomputeOrchestrator(triangle, StatsSettings(recompute_stats_on_graph_change=False))
    asyncio.run(orch.recompute())
    triangle.add_node("D")
    assert orch.dirty is False


def test_unavailable_slot_left_empty(triangle):
    orch = RecomputeOrchestrator(triangle, StatsSettings(links_color_function="Jaccard"))
    assert orch.calculator("link", "color") is None
    asyncio.run(orch.recompute())
    assert orch.stats("link", "color") == {}
    assert orch.get_warning("link", "color") == ""
    assert len(orch.stats("link", "size")) == 3


def test_invert_node_stats(triangle):
    settings = StatsSettings(nodes_size_function="forwardUniquelinksCount", invert_node_stats=True)
    orch = RecomputeOrchestrator(triangle, settings)
    asyncio.run(orch.recompute())
    sizes = orch.stats("node", "size")
    assert {k: s.measure for k, s in sizes.items()} == {"A": 0.0, "B": 1.0, "C": 2.0}


def test_configure_rebuilds_and_warns(triangle):
    orch = RecomputeOrchestrator(triangle)
    orch.configure(StatsSettings(nodes_color_function="creationTime"))
    assert orch.dirty is True
    assert orch.get_warning("node", "color") != ""
    asyncio.run(orch.recompute())
    colors = orch.stats("node", "color")
    assert all(s.normalized == 50.0 for s in colors.values())


class BlockingAlgorithms:
    """Never answer until released."""

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def run_algorithm(self, name, source):
        self.started.set()
        await self.release.wait()
        return {}


def test_close_cancels_pass_in_flight(triangle):
    settings = StatsSettings(links_size_function="Jaccard")

    async def run():
        algorithms = BlockingAlgorithms()
        orch = RecomputeOrchestrator(triangle, settings, algorithms=algorithms)
        task = orch.request_recompute()
        await algorithms.started.wait()
        await orch.close()
        assert task.cancelled()
        assert orch.state is OrchestratorState.IDLE
        triangle.add_node("D")
        assert orch._task is None
        return orch

    orch = asyncio.run(run())
    assert orch.passes == 1
    assert orch.calculator("link", "size").generation == -1
