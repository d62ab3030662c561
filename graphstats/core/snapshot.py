"""Read-only graph snapshots and the provider that owns the live graph."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set, Tuple

import networkx as nx

logger = logging.getLogger(__name__)

ChangeListener = Callable[[int], None]


class GraphSnapshot:
    """Immutable view of the knowledge graph at one generation.

    The wrapped :class:`networkx.DiGraph` is a frozen copy so metric
    functions may run concurrently against the same snapshot. Edge weights
    are stored in the ``count`` attribute and default to ``1``.
    """

    def __init__(self, graph: nx.DiGraph, generation: int = 0) -> None:
        frozen = nx.DiGraph(graph)
        self.graph: nx.DiGraph = nx.freeze(frozen)
        self.generation = generation
        self._reversed: GraphSnapshot | None = None
        self._undirected: nx.Graph | None = None
        self._clustering: Dict[str, float] | None = None
        # metric functions read the memos from worker threads
        self._memo_lock = threading.Lock()

    def __len__(self) -> int:
        return self.graph.number_of_nodes()

    def node_ids(self) -> Set[str]:
        return set(self.graph.nodes)

    def edges(self) -> List[Tuple[str, str, int]]:
        return [
            (u, v, int(d.get("count", 1))) for u, v, d in self.graph.edges(data=True)
        ]

    def neighbors(self, node_id: str) -> List[str]:
        """Return out-neighbours followed by in-neighbours, without repeats."""
        seen: Dict[str, None] = {}
        for n in self.graph.successors(node_id):
            seen[n] = None
        for n in self.graph.predecessors(node_id):
            seen[n] = None
        return list(seen)

    def out_neighbors(self, node_id: str) -> List[str]:
        return list(self.graph.successors(node_id))

    def in_neighbors(self, node_id: str) -> List[str]:
        return list(self.graph.predecessors(node_id))

    def has_edge(self, source: str, target: str) -> bool:
        return self.graph.has_edge(source, target)

    def has_node(self, node_id: str) -> bool:
        return self.graph.has_node(node_id)

    def edge_weight(self, source: str, target: str) -> int:
        return int(self.graph.edges[source, target].get("count", 1))

    def node_attributes(self, node_id: str) -> Mapping[str, Any]:
        return self.graph.nodes[node_id]

    def reversed(self) -> "GraphSnapshot":
        """Return the snapshot with every edge direction flipped."""
        with self._memo_lock:
            if self._reversed is None:
                self._reversed = GraphSnapshot(
                    self.graph.reverse(copy=True), generation=self.generation
                )
            return self._reversed

    def undirected(self) -> nx.Graph:
        with self._memo_lock:
            return self._undirected_locked()

    def _undirected_locked(self) -> nx.Graph:
        if self._undirected is None:
            self._undirected = nx.freeze(self.graph.to_undirected(as_view=False))
        return self._undirected

    def clustering(self) -> Dict[str, float]:
        """Local clustering coefficient of every node of the undirected graph."""
        with self._memo_lock:
            if self._clustering is None:
                self._clustering = dict(nx.clustering(self._undirected_locked()))
            return self._clustering


class GraphSnapshotProvider:
    """Own the mutable graph and hand out generation-tagged snapshots.

    Every mutation bumps :attr:`generation` and notifies the listeners
    registered with :meth:`on_change`.
    """

    def __init__(self, graph: Optional[nx.DiGraph] = None) -> None:
        self._graph = nx.DiGraph(graph) if graph is not None else nx.DiGraph()
        self._generation = 0
        self._listeners: List[Tuple[ChangeListener, bool]] = []
        self._snapshot: GraphSnapshot | None = None

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> GraphSnapshot:
        if self._snapshot is None or self._snapshot.generation != self._generation:
            self._snapshot = GraphSnapshot(self._graph, generation=self._generation)
        return self._snapshot

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------
    def on_change(self, callback: ChangeListener, *, once: bool = False) -> Callable[[], None]:
        """Register ``callback`` and return a function removing it again."""

        entry = (callback, once)
        self._listeners.append(entry)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(entry)
            except ValueError:
                pass

        return _unsubscribe

    def _changed(self) -> None:
        self._generation += 1
        listeners = list(self._listeners)
        self._listeners = [entry for entry in self._listeners if not entry[1]]
        for callback, _ in listeners:
            try:
                callback(self._generation)
            except Exception:
                logger.exception("graph change listener failed")

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def add_node(self, node_id: str, **attrs: Any) -> None:
        self._graph.add_node(node_id, **attrs)
        self._changed()

    def add_edge(self, source: str, target: str, count: int = 1) -> None:
        self._graph.add_edge(source, target, count=int(count))
        self._changed()

    def remove_node(self, node_id: str) -> None:
        self._graph.remove_node(node_id)
        self._changed()

    def remove_edge(self, source: str, target: str) -> None:
        self._graph.remove_edge(source, target)
        self._changed()

    def replace_graph(self, graph: nx.DiGraph) -> None:
        self._graph = nx.DiGraph(graph)
        self._changed()

    # ------------------------------------------------------------------
    # Builders
    # ------------------------------------------------------------------
    @classmethod
    def from_links(
        cls,
        resolved: Mapping[str, Mapping[str, int]],
        unresolved: Optional[Mapping[str, Mapping[str, int]]] = None,
        files: Optional[Iterable[str]] = None,
    ) -> "GraphSnapshotProvider":
        """Build a provider from ``source -> {target: count}`` link tables.

        ``files`` lists nodes that exist even without links. Targets of
        unresolved links are added as nodes of their own.
        """

        graph = nx.DiGraph()
        graph.add_nodes_from(files or [])
        for table in (resolved, unresolved or {}):
            for source, references in table.items():
                for target, count in references.items():
                    graph.add_edge(source, target, count=int(count))
        return cls(graph)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GraphSnapshotProvider":
        """Build a provider from ``{"nodes": [...], "links": [...]}``.

        Nodes are either plain ids or mappings with an ``id`` key; any other
        key becomes a node attribute. Links need ``source`` and ``target``
        and may carry a ``count``.
        """

        graph = nx.DiGraph()
        for node in data.get("nodes", []):
            if isinstance(node, Mapping):
                attrs = {k: v for k, v in node.items() if k != "id"}
                graph.add_node(node["id"], **attrs)
            else:
                graph.add_node(node)
        for link in data.get("links", []):
            graph.add_edge(link["source"], link["target"], count=int(link.get("count", 1)))
        return cls(graph)
