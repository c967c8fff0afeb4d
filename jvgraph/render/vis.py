"""
vis-network Mirror

A RenderSurface that keeps the graph in the shape vis-network DataSets
expect, for a browser frontend to pull:

    nodes: {id, label, group}
    edges: {id, from, to, label}

View commands ("fit", "clear") are queued and drained by the frontend.
"""

from typing import Any, Dict, List, Sequence

from ..graph.schema import Node, Edge


class VisDataMirror:
    """
    vis-network shaped copy of the store.

    version increases on every change so clients can skip redraws.
    """

    def __init__(self):
        self.nodes: Dict[str, Dict[str, Any]] = {}
        self.edges: Dict[str, Dict[str, Any]] = {}
        self.commands: List[str] = []
        self.version = 0

    def add(self, nodes: Sequence[Node], edges: Sequence[Edge]):
        self._put(nodes, edges)

    def update(self, nodes: Sequence[Node], edges: Sequence[Edge]):
        self._put(nodes, edges)

    def _put(self, nodes: Sequence[Node], edges: Sequence[Edge]):
        for node in nodes:
            self.nodes[node.id] = node.to_vis()
        for edge in edges:
            self.edges[edge.id] = edge.to_vis()
        if nodes or edges:
            self.version += 1

    def remove(self, node_ids: Sequence[str], edge_ids: Sequence[str]):
        for node_id in node_ids:
            self.nodes.pop(node_id, None)
        for edge_id in edge_ids:
            self.edges.pop(edge_id, None)
        self.version += 1

    def clear(self):
        self.nodes.clear()
        self.edges.clear()
        self.commands.append("clear")
        self.version += 1

    def fit(self):
        self.commands.append("fit")

    def drain_commands(self) -> List[str]:
        commands, self.commands = self.commands, []
        return commands

    def export(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "nodes": list(self.nodes.values()),
            "edges": list(self.edges.values()),
            "total_nodes": len(self.nodes),
            "total_edges": len(self.edges),
        }
