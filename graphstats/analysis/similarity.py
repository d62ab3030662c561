"""Source-anchored similarity measures between nodes.

Every function computes the measure from ``source`` to every node of the
snapshot at once and returns ``{target: measure}``. Neighbourhoods ignore
link direction. ``inf`` marks pairs for which the measure is undefined; the
normalization step maps such values to the neutral default.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, Optional

from ..core.snapshot import GraphSnapshot
from .nlp import Document, DocumentProvider, bow_cosine, otsuka_ochiai

TargetMeasures = Dict[str, float]
SimilarityFunction = Callable[[GraphSnapshot, str, Optional[DocumentProvider]], TargetMeasures]


def _inverse_log_degree(degree: int) -> float:
    if degree == 1:
        return math.inf
    if degree == 0:
        # 1 / log(0) tends to 0
        return 0.0
    return 1.0 / math.log(degree)


def adamic_adar(
    snapshot: GraphSnapshot, source: str, documents: Optional[DocumentProvider] = None
) -> TargetMeasures:
    """Sum of ``1 / ln(outdeg(n))`` over neighbours ``n`` shared with ``source``."""

    source_neighbors = set(snapshot.neighbors(source))
    results: TargetMeasures = {}
    for target in snapshot.graph.nodes:
        common = source_neighbors.intersection(snapshot.neighbors(target))
        if not common:
            results[target] = math.inf
            continue
        results[target] = sum(
            _inverse_log_degree(snapshot.graph.out_degree(n)) for n in common
        )
    return results


def jaccard(
    snapshot: GraphSnapshot, source: str, documents: Optional[DocumentProvider] = None
) -> TargetMeasures:
    """Shared neighbours over the union of both neighbourhoods."""

    source_neighbors = set(snapshot.neighbors(source))
    results: TargetMeasures = {}
    for target in snapshot.graph.nodes:
        target_neighbors = set(snapshot.neighbors(target))
        if not source_neighbors or not target_neighbors:
            results[target] = math.inf
            continue
        common = len(source_neighbors & target_neighbors)
        results[target] = common / (len(source_neighbors) + len(target_neighbors) - common)
    return results


def overlap(
    snapshot: GraphSnapshot, source: str, documents: Optional[DocumentProvider] = None
) -> TargetMeasures:
    """Squared number of shared neighbours over the smaller neighbourhood."""

    source_neighbors = set(snapshot.neighbors(source))
    results: TargetMeasures = {}
    for target in snapshot.graph.nodes:
        target_neighbors = set(snapshot.neighbors(target))
        if not source_neighbors or not target_neighbors:
            results[target] = math.inf
            continue
        common = len(source_neighbors & target_neighbors)
        results[target] = common**2 / min(len(source_neighbors), len(target_neighbors))
    return results


def clustering_coefficient(
    snapshot: GraphSnapshot, source: str, documents: Optional[DocumentProvider] = None
) -> TargetMeasures:
    """Local clustering coefficient of every target; degree 0 or 1 gives ``0``."""

    undirected = snapshot.undirected()
    coefficients = snapshot.clustering()
    return {
        target: (0.0 if undirected.degree(target) < 2 else float(coefficients[target]))
        for target in undirected.nodes
    }


def co_citations(
    snapshot: GraphSnapshot, source: str, documents: Optional[DocumentProvider] = None
) -> TargetMeasures:
    """Number of nodes linking to both ``source`` and the target."""

    results: TargetMeasures = {target: 0.0 for target in snapshot.graph.nodes}
    for citing in snapshot.in_neighbors(source):
        for target in snapshot.out_neighbors(citing):
            if target != source:
                results[target] += 1.0
    results[source] = 0.0
    return results


def _document_measures(
    snapshot: GraphSnapshot,
    source: str,
    documents: Optional[DocumentProvider],
    pairwise: Callable[[DocumentProvider, Document, Document], float],
) -> TargetMeasures:
    if documents is None:
        return {target: math.nan for target in snapshot.graph.nodes}
    source_doc = documents.get_document(source)
    results: TargetMeasures = {}
    for target in snapshot.graph.nodes:
        target_doc = documents.get_document(target)
        if source_doc is None or target_doc is None:
            results[target] = math.nan
            continue
        results[target] = pairwise(documents, source_doc, target_doc)
    return results


def bag_of_words(
    snapshot: GraphSnapshot, source: str, documents: Optional[DocumentProvider] = None
) -> TargetMeasures:
    """Cosine similarity of the stop-word free bags of words."""

    return _document_measures(
        snapshot,
        source,
        documents,
        lambda nlp, a, b: bow_cosine(nlp.no_stop_bow(a), nlp.no_stop_bow(b)),
    )


def otsuka_ochiai_similarity(
    snapshot: GraphSnapshot, source: str, documents: Optional[DocumentProvider] = None
) -> TargetMeasures:
    """Otsuka-Ochiai coefficient of the stop-word free token sets."""

    return _document_measures(
        snapshot,
        source,
        documents,
        lambda nlp, a, b: otsuka_ochiai(nlp.no_stop_set(a), nlp.no_stop_set(b)),
    )


def sentiment(
    snapshot: GraphSnapshot, source: str, documents: Optional[DocumentProvider] = None
) -> TargetMeasures:
    """Average sentiment of each target document."""

    results: TargetMeasures = {}
    for target in snapshot.graph.nodes:
        doc = documents.get_document(target) if documents is not None else None
        results[target] = math.nan if doc is None else documents.average_sentiment(doc)
    return results
