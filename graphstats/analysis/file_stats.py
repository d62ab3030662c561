"""Node measures derived from note metadata and link tables."""

from __future__ import annotations

import math

from ..core.snapshot import GraphSnapshot

UNRELIABLE_TIME_WARNING = (
    "File creation and modification times depend on the operating system, "
    "the timezone and file synchronization; they may be unreliable."
)


def constant(snapshot: GraphSnapshot, node_id: str) -> float:
    """Neutral baseline: every node measures ``1``."""
    return 1.0


def backlink_count(snapshot: GraphSnapshot, node_id: str, count_duplicates: bool = True) -> float:
    """Number of incoming links, summing ``count`` weights when duplicates count."""
    graph = snapshot.graph
    if count_duplicates:
        return float(sum(d.get("count", 1) for _, _, d in graph.in_edges(node_id, data=True)))
    return float(graph.in_degree(node_id))


def forwardlink_count(snapshot: GraphSnapshot, node_id: str, count_duplicates: bool = True) -> float:
    """Number of outgoing links, summing ``count`` weights when duplicates count."""
    graph = snapshot.graph
    if count_duplicates:
        return float(sum(d.get("count", 1) for _, _, d in graph.out_edges(node_id, data=True)))
    return float(graph.out_degree(node_id))


def totallink_count(snapshot: GraphSnapshot, node_id: str, count_duplicates: bool = True) -> float:
    return backlink_count(snapshot, node_id, count_duplicates) + forwardlink_count(
        snapshot, node_id, count_duplicates
    )


def filename_length(snapshot: GraphSnapshot, node_id: str) -> float:
    basename = snapshot.node_attributes(node_id).get("basename")
    return float(len(basename or node_id))


def tags_count(snapshot: GraphSnapshot, node_id: str) -> float:
    return float(len(set(snapshot.node_attributes(node_id).get("tags") or ())))


def _timestamp(snapshot: GraphSnapshot, node_id: str, key: str) -> float:
    value = snapshot.node_attributes(node_id).get(key)
    if value is None:
        return math.nan
    return float(value)


def creation_time(snapshot: GraphSnapshot, node_id: str) -> float:
    return _timestamp(snapshot, node_id, "ctime")


def modified_time(snapshot: GraphSnapshot, node_id: str) -> float:
    return _timestamp(snapshot, node_id, "mtime")
