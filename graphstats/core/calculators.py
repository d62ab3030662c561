"""Calculators binding a metric to a purpose and driving computation passes.

A pass takes one snapshot, evaluates the metric for every entity as an
independent coroutine, normalizes the complete set of raw measures and then
swaps the result into :attr:`StatCalculator.stats`. Consumers therefore only
ever see complete maps. A pass whose snapshot was superseded while it ran is
discarded.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple, Union

from ..analysis import centrality, file_stats
from ..analysis.gradients import evaluate_gradient
from ..analysis.monitoring import increment, update_metric
from ..models import (
    LINK_FUNCTIONS_NEEDING_DOCUMENTS,
    ComputedStat,
    EntityKind,
    LinkStatFunction,
    NodeStatFunction,
    StatPurpose,
)
from .normalization import GradientEvaluator, map_stats
from .snapshot import GraphSnapshot, GraphSnapshotProvider
from .source_cache import SourceCache, TargetMap

logger = logging.getLogger(__name__)

StatFunction = Union[NodeStatFunction, LinkStatFunction]
LinkId = Tuple[str, str]

REFERENCE_LINKS: Dict[StatFunction, str] = {
    NodeStatFunction.DEGREE: "https://en.wikipedia.org/wiki/Degree_(graph_theory)",
    NodeStatFunction.EIGENVECTOR: "https://en.wikipedia.org/wiki/Eigenvector_centrality",
    NodeStatFunction.CLOSENESS: "https://en.wikipedia.org/wiki/Closeness_centrality",
    NodeStatFunction.BETWEENNESS: "https://en.wikipedia.org/wiki/Betweenness_centrality",
    NodeStatFunction.HUB: "https://en.wikipedia.org/wiki/HITS_algorithm",
    NodeStatFunction.AUTHORITY: "https://en.wikipedia.org/wiki/HITS_algorithm",
    NodeStatFunction.ECCENTRICITY: "https://reference.wolfram.com/language/ref/EccentricityCentrality.html",
    NodeStatFunction.TOPOLOGICAL: "https://en.wikipedia.org/wiki/Topological_sorting",
    LinkStatFunction.ADAMIC_ADAR: "https://en.wikipedia.org/wiki/Adamic%E2%80%93Adar_index",
    LinkStatFunction.BOW: "https://en.wikipedia.org/wiki/Bag-of-words_model",
    LinkStatFunction.CLUSTERING_COEFFICIENT: "https://en.wikipedia.org/wiki/Clustering_coefficient",
    LinkStatFunction.CO_CITATIONS: "https://en.wikipedia.org/wiki/Co-citation",
    LinkStatFunction.JACCARD: "https://en.wikipedia.org/wiki/Jaccard_index",
    LinkStatFunction.OTSUKA_OCHIAI: "https://en.wikipedia.org/wiki/Cosine_similarity#Otsuka%E2%80%93Ochiai_coefficient",
    LinkStatFunction.OVERLAP: "https://en.wikipedia.org/wiki/Overlap_coefficient",
}

DOCUMENTS_WARNING = (
    "This measure reads the text of each note; notes without a document "
    "fall back to the default value."
)


class StatCalculator:
    """Base class for node and link calculators."""

    kind: EntityKind

    def __init__(
        self,
        function: StatFunction,
        purpose: StatPurpose | str,
        graph_provider: Optional[GraphSnapshotProvider] = None,
        *,
        gradient: str = "viridis",
        evaluator: GradientEvaluator = evaluate_gradient,
    ) -> None:
        self.function = function
        self.purpose = StatPurpose(purpose)
        self.graph_provider = graph_provider
        self.gradient = gradient
        self.evaluator = evaluator
        self.stats: Dict[Any, ComputedStat] = {}
        self.generation = -1

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.function.value!r}, {self.purpose.value!r})"

    async def compute_stats(
        self, invert: bool = False, snapshot: Optional[GraphSnapshot] = None
    ) -> bool:
        """Run one full pass and publish its result.

        Returns ``False`` when there is no graph to work on or when the pass
        turned out stale, in which case :attr:`stats` is left untouched.
        """

        if snapshot is None:
            if self.graph_provider is None:
                logger.warning("%r has no graph to compute statistics on", self)
                return False
            snapshot = self.graph_provider.snapshot()

        start = time.perf_counter()
        await self.prepare(snapshot, invert)
        ids = self.entity_ids(snapshot)
        measures = await asyncio.gather(
            *(self._safe_stat(snapshot, entity, invert) for entity in ids)
        )
        raw = dict(zip(ids, measures))
        stats = map_stats(raw, self.purpose, gradient=self.gradient, evaluator=self.evaluator)
        update_metric(
            "pass_duration_seconds",
            time.perf_counter() - start,
            {"kind": self.kind.value, "purpose": self.purpose.value},
        )
        return self.publish(stats, snapshot.generation)

    def is_stale(self, generation: int) -> bool:
        if generation < self.generation:
            return True
        return self.graph_provider is not None and self.graph_provider.generation != generation

    def publish(self, stats: Dict[Any, ComputedStat], generation: int) -> bool:
        if self.is_stale(generation):
            logger.debug("%r discarding stale pass for generation %d", self, generation)
            increment("stale_passes_total")
            return False
        self.stats = stats
        self.generation = generation
        return True

    async def _safe_stat(self, snapshot: GraphSnapshot, entity: Hashable, invert: bool) -> float:
        try:
            return float(await self.get_stat(snapshot, entity, invert))
        except Exception:
            logger.warning("%r failed for %r", self, entity, exc_info=True)
            increment("entity_failures_total", {"function": self.function.value})
            return math.nan

    async def prepare(self, snapshot: GraphSnapshot, invert: bool) -> None:
        """Hook for metrics computed once per pass over the whole graph."""

    def entity_ids(self, snapshot: GraphSnapshot) -> List[Any]:
        raise NotImplementedError

    async def get_stat(self, snapshot: GraphSnapshot, entity: Any, invert: bool) -> float:
        raise NotImplementedError

    def get_warning(self) -> str:
        return ""

    def get_link(self) -> str:
        return REFERENCE_LINKS.get(self.function, "")


# ---------------------------------------------------------------------------
# Node calculators
# ---------------------------------------------------------------------------


class NodeStatCalculator(StatCalculator):
    kind = EntityKind.NODE

    def entity_ids(self, snapshot: GraphSnapshot) -> List[str]:
        return list(snapshot.graph.nodes)


class ConstantCalculator(NodeStatCalculator):
    async def get_stat(self, snapshot: GraphSnapshot, entity: str, invert: bool) -> float:
        return file_stats.constant(snapshot, entity)


class LinkCountCalculator(NodeStatCalculator):
    """Count incoming, outgoing or all links of a node.

    ``invert`` swaps incoming and outgoing links.
    """

    _COUNTERS = {
        "in": file_stats.backlink_count,
        "out": file_stats.forwardlink_count,
        "both": file_stats.totallink_count,
    }
    _FLIPPED = {"in": "out", "out": "in", "both": "both"}

    def __init__(
        self,
        function: NodeStatFunction,
        purpose: StatPurpose | str,
        graph_provider: Optional[GraphSnapshotProvider] = None,
        *,
        direction: str = "in",
        count_duplicates: bool = True,
        **kwargs: Any,
    ) -> None:
        if direction not in self._COUNTERS:
            raise ValueError(f"Unknown link direction: {direction}")
        super().__init__(function, purpose, graph_provider, **kwargs)
        self.direction = direction
        self.count_duplicates = count_duplicates

    async def get_stat(self, snapshot: GraphSnapshot, entity: str, invert: bool) -> float:
        direction = self._FLIPPED[self.direction] if invert else self.direction
        return self._COUNTERS[direction](snapshot, entity, self.count_duplicates)


class FileStatCalculator(NodeStatCalculator):
    """Node measure read from note metadata attached to the snapshot."""

    def __init__(
        self,
        function: NodeStatFunction,
        purpose: StatPurpose | str,
        graph_provider: Optional[GraphSnapshotProvider] = None,
        *,
        measure: Callable[[GraphSnapshot, str], float],
        warning: str = "",
        **kwargs: Any,
    ) -> None:
        super().__init__(function, purpose, graph_provider, **kwargs)
        self.measure = measure
        self.warning = warning

    async def get_stat(self, snapshot: GraphSnapshot, entity: str, invert: bool) -> float:
        return self.measure(snapshot, entity)

    def get_warning(self) -> str:
        return self.warning


class CentralityCalculator(NodeStatCalculator):
    """Look nodes up in a centrality mapping computed once per pass.

    The mapping is computed on the reversed graph when ``invert`` is set. If
    the algorithm fails every node measures NaN.
    """

    def __init__(
        self,
        function: NodeStatFunction,
        purpose: StatPurpose | str,
        graph_provider: Optional[GraphSnapshotProvider] = None,
        *,
        algorithm: Callable[..., centrality.CentralityMapping],
        **kwargs: Any,
    ) -> None:
        super().__init__(function, purpose, graph_provider, **kwargs)
        self.algorithm = algorithm
        self.cm: centrality.CentralityMapping = {}

    async def prepare(self, snapshot: GraphSnapshot, invert: bool) -> None:
        graph = snapshot.reversed().graph if invert else snapshot.graph
        try:
            self.cm = await asyncio.to_thread(self.algorithm, graph)
        except Exception:
            logger.warning("%r could not compute centrality", self, exc_info=True)
            increment("entity_failures_total", {"function": self.function.value})
            self.cm = {}

    async def get_stat(self, snapshot: GraphSnapshot, entity: str, invert: bool) -> float:
        return self.cm.get(entity, math.nan)


class EccentricityCalculator(NodeStatCalculator):
    async def get_stat(self, snapshot: GraphSnapshot, entity: str, invert: bool) -> float:
        return centrality.eccentricity(snapshot.reversed() if invert else snapshot, entity)


class TopologicalSortCalculator(NodeStatCalculator):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.topological_weights: Dict[str, float] = {}

    async def prepare(self, snapshot: GraphSnapshot, invert: bool) -> None:
        graph = snapshot.reversed().graph if invert else snapshot.graph
        self.topological_weights = centrality.topological_weights(graph)

    async def get_stat(self, snapshot: GraphSnapshot, entity: str, invert: bool) -> float:
        return self.topological_weights.get(entity, 1.0)


class SentimentCalculator(NodeStatCalculator):
    def __init__(self, *args: Any, documents: Any = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.documents = documents

    async def get_stat(self, snapshot: GraphSnapshot, entity: str, invert: bool) -> float:
        if self.documents is None:
            return math.nan
        doc = self.documents.get_document(entity)
        if doc is None:
            return math.nan
        return self.documents.average_sentiment(doc)

    def get_warning(self) -> str:
        return DOCUMENTS_WARNING


# ---------------------------------------------------------------------------
# Link calculators
# ---------------------------------------------------------------------------


class LinkStatCalculator(StatCalculator):
    kind = EntityKind.LINK

    def entity_ids(self, snapshot: GraphSnapshot) -> List[LinkId]:
        return list(snapshot.graph.edges())

    def get(self, source: str, target: str) -> Optional[ComputedStat]:
        return self.stats.get((source, target))


class ConstantLinkCalculator(LinkStatCalculator):
    async def get_stat(self, snapshot: GraphSnapshot, entity: LinkId, invert: bool) -> float:
        return 1.0


class OccurrencesLinkCalculator(LinkStatCalculator):
    async def get_stat(self, snapshot: GraphSnapshot, entity: LinkId, invert: bool) -> float:
        source, target = entity
        return float(snapshot.edge_weight(source, target))


class GraphAnalysisLinkCalculator(LinkStatCalculator):
    """Link measure served by an algorithms provider, memoized per source.

    ``invert`` evaluates each link from its target: the measure of
    ``(source, target)`` becomes the provider's result for ``target -> source``.
    """

    def __init__(self, *args: Any, algorithms: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.algorithms = algorithms
        self.cache = SourceCache()

    async def prepare(self, snapshot: GraphSnapshot, invert: bool) -> None:
        self.cache.ensure_generation(snapshot.generation)

    async def _fetch(self, source: str) -> TargetMap:
        try:
            results = await self.algorithms.run_algorithm(self.function.value, source)
            return {target: float(res["measure"]) for target, res in results.items()}
        except Exception:
            logger.warning("%r: algorithm failed for source %r", self, source, exc_info=True)
            increment("entity_failures_total", {"function": self.function.value})
            return {}

    async def get_stat(self, snapshot: GraphSnapshot, entity: LinkId, invert: bool) -> float:
        source, target = entity
        if invert:
            source, target = target, source
        results = await self.cache.get_or_compute(source, lambda: self._fetch(source))
        return results.get(target, math.nan)

    def get_warning(self) -> str:
        if self.function in LINK_FUNCTIONS_NEEDING_DOCUMENTS:
            return DOCUMENTS_WARNING
        return ""
