import asyncio

import pytest

from graphstats.analysis.algorithms import NetworkxAlgorithmsProvider
from graphstats.analysis.nlp import TextDocumentProvider
from graphstats.core.calculators import GraphAnalysisLinkCalculator
from graphstats.models import LinkStatFunction


def test_supports(triangle):
    provider = NetworkxAlgorithmsProvider(triangle)
    assert provider.supports("Jaccard")
    assert provider.supports(LinkStatFunction.BOW)
    assert not provider.supports("Occurrences")
    assert not provider.supports("PageRank")


def test_run_algorithm_shape(triangle):
    provider = NetworkxAlgorithmsProvider(triangle)
    result = asyncio.run(provider.run_algorithm("Jaccard", "A"))
    assert set(result) == {"A", "B", "C"}
    assert result["B"]["measure"] == pytest.approx(1 / 3)


def test_run_algorithm_errors(triangle):
    provider = NetworkxAlgorithmsProvider(triangle)
    with pytest.raises(ValueError):
        asyncio.run(provider.run_algorithm("PageRank", "A"))
    with pytest.raises(KeyError):
        asyncio.run(provider.run_algorithm("Jaccard", "missing"))


def test_document_algorithms_use_provider(triangle):
    docs = TextDocumentProvider({"A": "alpha beta", "B": "alpha beta", "C": "gamma"})
    provider = NetworkxAlgorithmsProvider(triangle, docs)
    result = asyncio.run(provider.run_algorithm("BoW", "A"))
    assert result["B"]["measure"] == pytest.approx(1.0)
    assert result["C"]["measure"] == pytest.approx(0.0)


def test_link_calculator_end_to_end(triangle):
    algorithms = NetworkxAlgorithmsProvider(triangle)
    calc = GraphAnalysisLinkCalculator(
        LinkStatFunction.JACCARD, "size", triangle, algorithms=algorithms
    )
    assert asyncio.run(calc.compute_stats()) is True
    for stat in calc.stats.values():
        assert stat.measure == pytest.approx(1 / 3)
        assert stat.value == 1.0
