from concurrent.futures import ThreadPoolExecutor

import networkx as nx
import pytest

from graphstats.analysis import similarity
from graphstats.core.snapshot import GraphSnapshot, GraphSnapshotProvider


def test_snapshot_is_frozen(triangle):
    snap = triangle.snapshot()
    with pytest.raises(nx.NetworkXError):
        snap.graph.add_node("D")


def test_snapshot_memoized_per_generation(triangle):
    first = triangle.snapshot()
    assert triangle.snapshot() is first
    triangle.add_node("D")
    second = triangle.snapshot()
    assert second is not first
    assert second.generation == first.generation + 1
    assert "D" not in first.node_ids()
    assert "D" in second.node_ids()


def test_neighbors_out_then_in(triangle):
    snap = triangle.snapshot()
    assert snap.neighbors("B") == ["C", "A"]
    assert snap.out_neighbors("A") == ["B", "C"]
    assert snap.in_neighbors("C") == ["A", "B"]
    assert snap.has_edge("A", "B")
    assert not snap.has_edge("B", "A")


def test_edge_count_defaults_to_one():
    provider = GraphSnapshotProvider.from_dict(
        {"nodes": ["A", {"id": "B", "tags": ["x"]}], "links": [{"source": "A", "target": "B"}]}
    )
    snap = provider.snapshot()
    assert snap.edges() == [("A", "B", 1)]
    assert snap.edge_weight("A", "B") == 1
    assert snap.node_attributes("B")["tags"] == ["x"]


def test_from_links_adds_files_and_unresolved():
    provider = GraphSnapshotProvider.from_links(
        {"A": {"B": 2}}, unresolved={"A": {"missing": 1}}, files=["lonely"]
    )
    snap = provider.snapshot()
    assert snap.node_ids() == {"A", "B", "missing", "lonely"}
    assert snap.edge_weight("A", "B") == 2


def test_reversed_snapshot(triangle):
    rev = triangle.snapshot().reversed()
    assert rev.has_edge("B", "A")
    assert not rev.has_edge("A", "B")
    assert rev.generation == triangle.generation
    assert triangle.snapshot().reversed() is rev


def test_on_change_once_and_unsubscribe(triangle):
    seen = []
    once = []
    unsubscribe = triangle.on_change(seen.append)
    triangle.on_change(once.append, once=True)
    triangle.add_node("D")
    triangle.add_edge("D", "A")
    unsubscribe()
    triangle.remove_edge("D", "A")
    assert seen == [1, 2]
    assert once == [1]


def test_failing_listener_does_not_block_others(triangle, caplog):
    seen = []

    def boom(generation):
        raise RuntimeError("listener failure")

    triangle.on_change(boom)
    triangle.on_change(seen.append)
    triangle.remove_node("A")
    assert seen == [1]
    assert "graph change listener failed" in caplog.text


def test_snapshot_from_graph_copy():
    g = nx.DiGraph([("x", "y")])
    snap = GraphSnapshot(g, generation=3)
    g.add_edge("y", "z")
    assert len(snap) == 2
    assert snap.generation == 3


def test_undirected_memo_is_shared_across_threads(triangle):
    snap = triangle.snapshot()
    with ThreadPoolExecutor(max_workers=8) as pool:
        views = list(pool.map(lambda _: snap.undirected(), range(16)))
    assert all(view is views[0] for view in views)


def test_clustering_computed_once_per_snapshot(triangle, monkeypatch):
    calls = []
    real = nx.clustering

    def counting(graph):
        calls.append(graph)
        return real(graph)

    monkeypatch.setattr(nx, "clustering", counting)
    snap = triangle.snapshot()
    for source in ("A", "B", "C"):
        similarity.clustering_coefficient(snap, source)
    assert len(calls) == 1
    assert snap.clustering() is snap.clustering()
