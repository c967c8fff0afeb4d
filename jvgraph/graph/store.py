"""
Graph Store

In-memory record of everything the viewer has discovered so far.

- Nodes and edges are keyed by id; re-adding an id replaces the record
- Edges may reference nodes that have not been fetched yet
- Every mutation is announced to subscribed observers (render surfaces,
  the selection model) right after it is applied
"""

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

import networkx as nx

from .schema import Node, Edge, GraphStats

logger = logging.getLogger(__name__)


class ChangeKind(str, Enum):
    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"
    CLEARED = "cleared"


@dataclass(frozen=True)
class GraphChange:
    """A single store mutation as seen by observers"""
    kind: ChangeKind
    nodes: Tuple[str, ...] = ()
    edges: Tuple[str, ...] = ()


Observer = Callable[[GraphChange], None]


class GraphStore:
    """
    Dedup-on-id store of nodes and edges.

    Usage:
        store = GraphStore()
        unsubscribe = store.subscribe(surface.apply)

        store.upsert_nodes([Node(id="n1", label="Agent")])
        store.upsert_edges([Edge(id="e1", from_="n1", to="n2")])  # n2 not known yet

        store.remove_nodes_except("n1")  # drops e1 as well
    """

    def __init__(self):
        self._nodes: Dict[str, Node] = {}
        self._edges: Dict[str, Edge] = {}
        self._observers: List[Observer] = []

    # ==========================================
    # OBSERVERS
    # ==========================================

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer; returns a callable that unregisters it"""
        self._observers.append(observer)

        def unsubscribe():
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self, change: GraphChange):
        for observer in list(self._observers):
            try:
                observer(change)
            except Exception:
                logger.exception(f"Store observer {observer!r} failed on {change.kind.value} change")

    # ==========================================
    # MUTATIONS
    # ==========================================

    def upsert_nodes(self, nodes: Iterable[Node]) -> int:
        """Insert or replace nodes by id. Returns the number of records that changed."""
        added, updated = [], []

        for node in nodes:
            existing = self._nodes.get(node.id)
            if existing is None:
                added.append(node.id)
            elif existing == node:
                continue
            else:
                updated.append(node.id)
            self._nodes[node.id] = node

        if added:
            self._notify(GraphChange(ChangeKind.ADDED, nodes=tuple(added)))
        if updated:
            self._notify(GraphChange(ChangeKind.UPDATED, nodes=tuple(updated)))
        return len(added) + len(updated)

    def upsert_edges(self, edges: Iterable[Edge]) -> int:
        """Insert or replace edges by id. Dangling endpoints are kept as-is."""
        added, updated = [], []

        for edge in edges:
            existing = self._edges.get(edge.id)
            if existing is None:
                added.append(edge.id)
            elif existing == edge:
                continue
            else:
                updated.append(edge.id)
            self._edges[edge.id] = edge

        if added:
            self._notify(GraphChange(ChangeKind.ADDED, edges=tuple(added)))
        if updated:
            self._notify(GraphChange(ChangeKind.UPDATED, edges=tuple(updated)))
        return len(added) + len(updated)

    def remove_nodes(self, node_ids: Iterable[str]) -> int:
        """Remove the given nodes and every edge touching them"""
        doomed = {nid for nid in node_ids if nid in self._nodes}
        if not doomed:
            return 0

        doomed_edges = [
            eid for eid, edge in self._edges.items()
            if edge.from_ in doomed or edge.to in doomed
        ]
        for eid in doomed_edges:
            del self._edges[eid]
        for nid in doomed:
            del self._nodes[nid]

        self._notify(GraphChange(
            ChangeKind.REMOVED,
            nodes=tuple(sorted(doomed)),
            edges=tuple(doomed_edges),
        ))
        return len(doomed)

    def remove_edges(self, edge_ids: Iterable[str]) -> int:
        doomed = [eid for eid in dict.fromkeys(edge_ids) if eid in self._edges]
        if not doomed:
            return 0

        for eid in doomed:
            del self._edges[eid]

        self._notify(GraphChange(ChangeKind.REMOVED, edges=tuple(doomed)))
        return len(doomed)

    def remove_orphan_edges(self, keep: Iterable[str] = ()) -> int:
        """Remove edges with neither endpoint in the store, except the ids in keep"""
        keep = set(keep)
        return self.remove_edges([edge.id for edge in self.orphan_edges() if edge.id not in keep])

    def remove_nodes_except(self, keep_id: str) -> int:
        """
        Remove every node other than keep_id, plus the edges touching them.

        Edges that touch no node at all are dropped too, so only keep_id and
        the edges attached to it survive.
        """
        removed = self.remove_nodes([nid for nid in self._nodes if nid != keep_id])
        self.remove_orphan_edges()
        return removed

    def prune_unreachable(self, focus_id: str) -> int:
        """
        Remove nodes that are not connected to focus_id.

        Connectivity ignores edge direction and only follows edges whose
        endpoints are both in the store.
        """
        if focus_id not in self._nodes:
            logger.warning(f"Focus node {focus_id} is not in the store; skipping prune")
            return 0

        graph = self.to_networkx().to_undirected(as_view=True)
        reachable = nx.node_connected_component(graph, focus_id)
        return self.remove_nodes([nid for nid in self._nodes if nid not in reachable])

    def clear(self):
        """Empty both collections"""
        if not self._nodes and not self._edges:
            return
        node_ids = tuple(self._nodes)
        edge_ids = tuple(self._edges)
        self._nodes.clear()
        self._edges.clear()
        self._notify(GraphChange(ChangeKind.CLEARED, nodes=node_ids, edges=edge_ids))

    # ==========================================
    # QUERIES
    # ==========================================

    def get_node(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        return self._edges.get(edge_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def has_edge(self, edge_id: str) -> bool:
        return edge_id in self._edges

    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    def edges(self) -> List[Edge]:
        return list(self._edges.values())

    def node_ids(self) -> Set[str]:
        return set(self._nodes)

    def edge_ids(self) -> Set[str]:
        return set(self._edges)

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def dangling_edges(self) -> List[Edge]:
        """Edges with at least one endpoint not (yet) in the store"""
        return [
            edge for edge in self._edges.values()
            if edge.from_ not in self._nodes or edge.to not in self._nodes
        ]

    def orphan_edges(self) -> List[Edge]:
        """Edges with neither endpoint in the store"""
        return [
            edge for edge in self._edges.values()
            if edge.from_ not in self._nodes and edge.to not in self._nodes
        ]

    def to_networkx(self) -> nx.MultiDiGraph:
        """Snapshot as a MultiDiGraph; dangling edges are left out"""
        graph = nx.MultiDiGraph()
        for node in self._nodes.values():
            graph.add_node(node.id, label=node.label, group=node.group)
        for edge in self._edges.values():
            if edge.from_ in self._nodes and edge.to in self._nodes:
                graph.add_edge(edge.from_, edge.to, key=edge.id, label=edge.label)
        return graph

    def stats(self) -> GraphStats:
        """Counts of what has been discovered"""
        return GraphStats(
            total_nodes=self.node_count,
            total_edges=self.edge_count,
            dangling_edges=len(self.dangling_edges()),
            nodes_by_group=dict(Counter(node.group for node in self._nodes.values())),
            edges_by_label=dict(Counter(edge.label for edge in self._edges.values())),
        )

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes
