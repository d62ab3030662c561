"""Select and wire calculators from function identifiers."""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Callable, Dict, Optional

from ..analysis import centrality, file_stats
from ..analysis.gradients import evaluate_gradient
from ..models import (
    LINK_FUNCTIONS_NEEDING_ALGORITHMS,
    LINK_FUNCTIONS_NEEDING_DOCUMENTS,
    LinkStatFunction,
    NodeStatFunction,
    StatPurpose,
)
from .calculators import (
    DOCUMENTS_WARNING,
    CentralityCalculator,
    ConstantCalculator,
    ConstantLinkCalculator,
    EccentricityCalculator,
    FileStatCalculator,
    GraphAnalysisLinkCalculator,
    LinkCountCalculator,
    LinkStatCalculator,
    NodeStatCalculator,
    OccurrencesLinkCalculator,
    SentimentCalculator,
    TopologicalSortCalculator,
)
from .normalization import GradientEvaluator
from .snapshot import GraphSnapshotProvider

logger = logging.getLogger(__name__)

NodeBuilder = Callable[..., NodeStatCalculator]


def _link_count(direction: str, count_duplicates: bool) -> NodeBuilder:
    return partial(LinkCountCalculator, direction=direction, count_duplicates=count_duplicates)


def _file_stat(measure: Callable[..., float], warning: str = "") -> NodeBuilder:
    return partial(FileStatCalculator, measure=measure, warning=warning)


def _centrality(algorithm: Callable[..., centrality.CentralityMapping]) -> NodeBuilder:
    return partial(CentralityCalculator, algorithm=algorithm)


class NodeStatCalculatorFactory:
    """Build node calculators.

    Every node function is computed locally with :mod:`networkx`, so the only
    reason to return ``None`` is an unknown identifier.
    """

    _BUILDERS: Dict[NodeStatFunction, NodeBuilder] = {
        NodeStatFunction.DEFAULT: ConstantCalculator,
        NodeStatFunction.CONSTANT: ConstantCalculator,
        NodeStatFunction.BACKLINKS_COUNT: _link_count("in", True),
        NodeStatFunction.BACK_UNIQUE_LINKS_COUNT: _link_count("in", False),
        NodeStatFunction.FORWARD_LINKS_COUNT: _link_count("out", True),
        NodeStatFunction.FORWARD_UNIQUE_LINKS_COUNT: _link_count("out", False),
        NodeStatFunction.TOTAL_LINKS_COUNT: _link_count("both", True),
        NodeStatFunction.TOTAL_UNIQUE_LINKS_COUNT: _link_count("both", False),
        NodeStatFunction.FILENAME_LENGTH: _file_stat(file_stats.filename_length),
        NodeStatFunction.TAGS_COUNT: _file_stat(file_stats.tags_count),
        NodeStatFunction.CREATION_TIME: _file_stat(
            file_stats.creation_time, file_stats.UNRELIABLE_TIME_WARNING
        ),
        NodeStatFunction.MODIFIED_TIME: _file_stat(
            file_stats.modified_time, file_stats.UNRELIABLE_TIME_WARNING
        ),
        NodeStatFunction.ECCENTRICITY: EccentricityCalculator,
        NodeStatFunction.BETWEENNESS: _centrality(centrality.betweenness_centrality),
        NodeStatFunction.CLOSENESS: _centrality(centrality.closeness_centrality),
        NodeStatFunction.DEGREE: _centrality(centrality.degree_centrality),
        NodeStatFunction.TOPOLOGICAL: TopologicalSortCalculator,
        NodeStatFunction.SENTIMENT: SentimentCalculator,
    }

    @classmethod
    def get_calculator(
        cls,
        function: NodeStatFunction | str,
        purpose: StatPurpose | str,
        graph_provider: Optional[GraphSnapshotProvider] = None,
        *,
        documents: Any = None,
        gradient: str = "viridis",
        evaluator: GradientEvaluator = evaluate_gradient,
        eigenvector_max_iter: int = 1000,
        hits_max_iter: int = 1000,
    ) -> Optional[NodeStatCalculator]:
        try:
            function = NodeStatFunction(function)
        except ValueError:
            logger.warning("unknown node stat function %r", function)
            return None

        kwargs: Dict[str, Any] = {"gradient": gradient, "evaluator": evaluator}
        if function is NodeStatFunction.EIGENVECTOR:
            builder: NodeBuilder = _centrality(
                partial(centrality.eigenvector_centrality, max_iter=eigenvector_max_iter)
            )
        elif function is NodeStatFunction.HUB:
            builder = _centrality(partial(centrality.hub_scores, max_iter=hits_max_iter))
        elif function is NodeStatFunction.AUTHORITY:
            builder = _centrality(partial(centrality.authority_scores, max_iter=hits_max_iter))
        else:
            builder = cls._BUILDERS[function]
        if function is NodeStatFunction.SENTIMENT:
            kwargs["documents"] = documents
        return builder(function, purpose, graph_provider, **kwargs)

    @staticmethod
    def get_warning(function: NodeStatFunction | str) -> str:
        try:
            function = NodeStatFunction(function)
        except ValueError:
            return ""
        if function in (NodeStatFunction.CREATION_TIME, NodeStatFunction.MODIFIED_TIME):
            return file_stats.UNRELIABLE_TIME_WARNING
        if function is NodeStatFunction.SENTIMENT:
            return DOCUMENTS_WARNING
        return ""


class LinkStatCalculatorFactory:
    """Build link calculators.

    Similarity functions need an algorithms provider; without one they are
    unavailable and ``None`` is returned.
    """

    @staticmethod
    def get_calculator(
        function: LinkStatFunction | str,
        purpose: StatPurpose | str,
        graph_provider: Optional[GraphSnapshotProvider] = None,
        algorithms: Any = None,
        *,
        gradient: str = "viridis",
        evaluator: GradientEvaluator = evaluate_gradient,
    ) -> Optional[LinkStatCalculator]:
        try:
            function = LinkStatFunction(function)
        except ValueError:
            logger.warning("unknown link stat function %r", function)
            return None

        kwargs: Dict[str, Any] = {"gradient": gradient, "evaluator": evaluator}
        if function is LinkStatFunction.DEFAULT:
            return ConstantLinkCalculator(function, purpose, graph_provider, **kwargs)
        if function is LinkStatFunction.OCCURRENCES:
            return OccurrencesLinkCalculator(function, purpose, graph_provider, **kwargs)
        if function in LINK_FUNCTIONS_NEEDING_ALGORITHMS and algorithms is None:
            logger.info("link stat function %s unavailable: no algorithms provider", function.value)
            return None
        return GraphAnalysisLinkCalculator(
            function, purpose, graph_provider, algorithms=algorithms, **kwargs
        )

    @staticmethod
    def get_warning(function: LinkStatFunction | str) -> str:
        try:
            function = LinkStatFunction(function)
        except ValueError:
            return ""
        if function in LINK_FUNCTIONS_NEEDING_DOCUMENTS:
            return DOCUMENTS_WARNING
        return ""
