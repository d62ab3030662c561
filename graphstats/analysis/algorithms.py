"""Algorithms providers serving source-anchored link measures."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Optional, Protocol

from ..core.snapshot import GraphSnapshotProvider
from ..models import LinkStatFunction
from . import similarity
from .nlp import DocumentProvider

logger = logging.getLogger(__name__)

ResultMap = Dict[str, Dict[str, float]]


class AlgorithmsProvider(Protocol):
    """Run a named link algorithm from one source node to every target."""

    async def run_algorithm(self, name: str, source: str) -> ResultMap: ...


ALGORITHMS: Dict[LinkStatFunction, similarity.SimilarityFunction] = {
    LinkStatFunction.ADAMIC_ADAR: similarity.adamic_adar,
    LinkStatFunction.BOW: similarity.bag_of_words,
    LinkStatFunction.CLUSTERING_COEFFICIENT: similarity.clustering_coefficient,
    LinkStatFunction.CO_CITATIONS: similarity.co_citations,
    LinkStatFunction.JACCARD: similarity.jaccard,
    LinkStatFunction.OTSUKA_OCHIAI: similarity.otsuka_ochiai_similarity,
    LinkStatFunction.OVERLAP: similarity.overlap,
    LinkStatFunction.SENTIMENT: similarity.sentiment,
}


class NetworkxAlgorithmsProvider:
    """:class:`AlgorithmsProvider` evaluating :mod:`.similarity` functions.

    Each call reads the provider's current snapshot and runs the function in
    a worker thread; snapshots are frozen so concurrent calls are safe.
    """

    def __init__(
        self,
        graph_provider: GraphSnapshotProvider,
        documents: Optional[DocumentProvider] = None,
    ) -> None:
        self.graph_provider = graph_provider
        self.documents = documents

    def supports(self, name: str) -> bool:
        try:
            return LinkStatFunction(name) in ALGORITHMS
        except ValueError:
            return False

    async def run_algorithm(self, name: str, source: str) -> ResultMap:
        try:
            func = ALGORITHMS[LinkStatFunction(name)]
        except (KeyError, ValueError):
            raise ValueError(f"Unknown algorithm: {name}") from None
        snapshot = self.graph_provider.snapshot()
        if not snapshot.has_node(source):
            raise KeyError(f"Unknown source node: {source}")
        logger.debug("running %s from %s (generation %d)", name, source, snapshot.generation)
        measures = await asyncio.to_thread(func, snapshot, source, self.documents)
        return {target: {"measure": measure} for target, measure in measures.items()}
