import asyncio
import math

import pytest

from graphstats.analysis import file_stats
from graphstats.core.calculators import (
    CentralityCalculator,
    EccentricityCalculator,
    FileStatCalculator,
    GraphAnalysisLinkCalculator,
    LinkCountCalculator,
    OccurrencesLinkCalculator,
    SentimentCalculator,
    TopologicalSortCalculator,
)
from graphstats.analysis.nlp import TextDocumentProvider
from graphstats.core.snapshot import GraphSnapshotProvider
from graphstats.models import LinkStatFunction, NodeStatFunction, StatPurpose


def run(coro):
    return asyncio.run(coro)


def values(calc):
    return {k: s.value for k, s in calc.stats.items()}


def test_forward_unique_counts_normalized(triangle):
    calc = LinkCountCalculator(
        NodeStatFunction.FORWARD_UNIQUE_LINKS_COUNT,
        StatPurpose.SIZE,
        triangle,
        direction="out",
        count_duplicates=False,
    )
    assert run(calc.compute_stats()) is True
    assert calc.stats["A"].measure == 2
    assert values(calc) == {"A": 1.5, "B": 1.0, "C": 0.5}
    assert calc.generation == triangle.generation


def test_invert_swaps_link_direction(triangle):
    calc = LinkCountCalculator(
        NodeStatFunction.BACKLINKS_COUNT, StatPurpose.SIZE, triangle, direction="in"
    )
    run(calc.compute_stats(invert=True))
    assert {k: s.measure for k, s in calc.stats.items()} == {"A": 2.0, "B": 1.0, "C": 0.0}


def test_unknown_direction_rejected(triangle):
    with pytest.raises(ValueError):
        LinkCountCalculator(NodeStatFunction.BACKLINKS_COUNT, "size", triangle, direction="up")


def test_entity_failure_becomes_nan(triangle):
    def flaky(snapshot, node_id):
        if node_id == "B":
            raise RuntimeError("no metadata")
        return {"A": 1.0, "C": 3.0}[node_id]

    calc = FileStatCalculator(NodeStatFunction.TAGS_COUNT, StatPurpose.SIZE, triangle, measure=flaky)
    assert run(calc.compute_stats()) is True
    assert math.isnan(calc.stats["B"].measure)
    assert values(calc) == {"A": 0.5, "B": 1.0, "C": 1.5}


def test_time_warning(triangle):
    calc = FileStatCalculator(
        NodeStatFunction.CREATION_TIME,
        StatPurpose.COLOR,
        triangle,
        measure=file_stats.creation_time,
        warning=file_stats.UNRELIABLE_TIME_WARNING,
    )
    assert calc.get_warning() == file_stats.UNRELIABLE_TIME_WARNING
    run(calc.compute_stats())
    assert all(s.normalized == 50.0 for s in calc.stats.values())


def test_stale_pass_discarded(triangle):
    calc = LinkCountCalculator(
        NodeStatFunction.BACKLINKS_COUNT, StatPurpose.SIZE, triangle, direction="in"
    )
    old = triangle.snapshot()
    triangle.add_edge("C", "A")
    assert run(calc.compute_stats(snapshot=old)) is False
    assert calc.stats == {}

    assert run(calc.compute_stats()) is True
    published = calc.stats
    assert run(calc.compute_stats(snapshot=old)) is False
    assert calc.stats is published


def test_centrality_failure_defaults(triangle):
    def broken(graph):
        raise RuntimeError("did not converge")

    calc = CentralityCalculator(
        NodeStatFunction.EIGENVECTOR, StatPurpose.SIZE, triangle, algorithm=broken
    )
    run(calc.compute_stats())
    assert all(math.isnan(s.measure) for s in calc.stats.values())
    assert set(values(calc).values()) == {1.0}
    assert calc.get_link().startswith("https://")


def test_centrality_uses_reversed_graph_when_inverted(triangle):
    seen = []

    def record(graph):
        seen.append(set(graph.edges))
        return {n: 1.0 for n in graph.nodes}

    calc = CentralityCalculator(NodeStatFunction.DEGREE, "size", triangle, algorithm=record)
    run(calc.compute_stats(invert=True))
    assert seen == [{("B", "A"), ("C", "A"), ("C", "B")}]


def test_eccentricity_and_topological(triangle):
    ecc = EccentricityCalculator(NodeStatFunction.ECCENTRICITY, "size", triangle)
    run(ecc.compute_stats())
    assert {k: s.measure for k, s in ecc.stats.items()} == {"A": 1.0, "B": 1.0, "C": 0.0}

    topo = TopologicalSortCalculator(NodeStatFunction.TOPOLOGICAL, "size", triangle)
    run(topo.compute_stats())
    assert {k: s.measure for k, s in topo.stats.items()} == {"A": 1.0, "B": 2.0, "C": 4.0}


def test_sentiment_without_documents(triangle):
    calc = SentimentCalculator(NodeStatFunction.SENTIMENT, "size", triangle)
    run(calc.compute_stats())
    assert all(math.isnan(s.measure) for s in calc.stats.values())

    docs = TextDocumentProvider({"A": "great", "B": "terrible"})
    calc = SentimentCalculator(NodeStatFunction.SENTIMENT, "size", triangle, documents=docs)
    run(calc.compute_stats())
    assert values(calc) == {"A": 1.5, "B": 0.5, "C": 1.0}


def test_occurrences_uses_edge_weights():
    provider = GraphSnapshotProvider.from_links({"A": {"B": 4, "C": 2}})
    calc = OccurrencesLinkCalculator(LinkStatFunction.OCCURRENCES, "size", provider)
    run(calc.compute_stats())
    assert calc.get("A", "B").value == 1.5
    assert calc.get("A", "C").value == 0.5
    assert calc.get("B", "A") is None


def test_link_measures_cached_per_source(triangle, fake_algorithms):
    calc = GraphAnalysisLinkCalculator(
        LinkStatFunction.JACCARD, StatPurpose.SIZE, triangle, algorithms=fake_algorithms
    )
    run(calc.compute_stats())
    assert fake_algorithms.calls == {"A": 1, "B": 1}
    assert {k: s.measure for k, s in calc.stats.items()} == {
        ("A", "B"): 1.0,
        ("A", "C"): 2.0,
        ("B", "C"): 3.0,
    }

    # same generation: the cache answers
    run(calc.compute_stats())
    assert fake_algorithms.calls == {"A": 1, "B": 1}

    triangle.add_node("D")
    run(calc.compute_stats())
    assert fake_algorithms.calls == {"A": 2, "B": 2}


def test_link_invert_evaluates_from_target(triangle, fake_algorithms):
    calc = GraphAnalysisLinkCalculator(
        LinkStatFunction.JACCARD, StatPurpose.SIZE, triangle, algorithms=fake_algorithms
    )
    run(calc.compute_stats(invert=True))
    assert {k: s.measure for k, s in calc.stats.items()} == {
        ("A", "B"): 10.0,
        ("A", "C"): 20.0,
        ("B", "C"): 30.0,
    }


def test_link_provider_failure_is_nan(triangle, fake_algorithms):
    failing = fake_algorithms
    failing.fail = True
    calc = GraphAnalysisLinkCalculator(
        LinkStatFunction.ADAMIC_ADAR, StatPurpose.COLOR, triangle, algorithms=failing
    )
    assert run(calc.compute_stats()) is True
    assert failing.calls == {"A": 1, "B": 1}
    assert all(math.isnan(s.measure) for s in calc.stats.values())
    assert all(s.normalized == 50.0 for s in calc.stats.values())
