"""Whole-graph centrality measures computed with :mod:`networkx`."""

from __future__ import annotations

import logging
import math
from typing import Dict

import networkx as nx

from ..core.snapshot import GraphSnapshot

logger = logging.getLogger(__name__)

CentralityMapping = Dict[str, float]


def degree_centrality(graph: nx.DiGraph) -> CentralityMapping:
    return nx.degree_centrality(graph)


def closeness_centrality(graph: nx.DiGraph) -> CentralityMapping:
    return nx.closeness_centrality(graph)


def betweenness_centrality(graph: nx.DiGraph) -> CentralityMapping:
    return nx.betweenness_centrality(graph)


def eigenvector_centrality(graph: nx.DiGraph, max_iter: int = 1000, tol: float = 1e-6) -> CentralityMapping:
    """Eigenvector centrality of ``graph``.

    :func:`networkx.eigenvector_centrality` raises
    :class:`networkx.PowerIterationFailedConvergence` when the power
    iteration does not settle within ``max_iter`` rounds and
    :class:`networkx.NetworkXPointlessConcept` on an empty graph.
    """

    return nx.eigenvector_centrality(graph, max_iter=max_iter, tol=tol)


def hub_scores(graph: nx.DiGraph, max_iter: int = 1000, tol: float = 1e-8) -> CentralityMapping:
    hubs, _ = nx.hits(graph, max_iter=max_iter, tol=tol)
    return hubs


def authority_scores(graph: nx.DiGraph, max_iter: int = 1000, tol: float = 1e-8) -> CentralityMapping:
    _, authorities = nx.hits(graph, max_iter=max_iter, tol=tol)
    return authorities


def eccentricity(snapshot: GraphSnapshot, node_id: str) -> float:
    """Largest hop distance from ``node_id`` to any node it can reach.

    Reachability follows link direction; pass ``snapshot.reversed()`` to
    follow backlinks instead. A node without outgoing links scores ``0``.
    """

    graph = snapshot.graph
    if not graph.has_node(node_id):
        return math.nan
    lengths = nx.single_source_shortest_path_length(graph, node_id)
    return float(max(lengths.values()))


def topological_weights(graph: nx.DiGraph) -> CentralityMapping:
    """Propagate weights along the condensation of ``graph``.

    Strongly connected components are visited in topological order. Each
    component weighs one plus the weights already assigned to the
    in-neighbours of its members, and every member receives that weight.
    """

    weights: CentralityMapping = {}
    if graph.number_of_nodes() == 0:
        return weights
    condensed = nx.condensation(graph)
    for component in nx.topological_sort(condensed):
        members = condensed.nodes[component]["members"]
        weight = 0.0
        for node in members:
            for neighbor in graph.predecessors(node):
                if neighbor != node:
                    weight += weights.get(neighbor, 0.0)
        weight += 1.0
        for node in members:
            weights[node] = weight
    return weights
