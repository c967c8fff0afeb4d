"""
Local Graph Source

In-process GraphSource backed by a NetworkX MultiDiGraph. Answers the
same walker calls as a JIVAS server, in the same raw record shape, so
the explorer can run without one (demo mode, tests).
"""

import asyncio
import logging
from typing import Any, Iterable, List, Optional, Tuple

import networkx as nx

from ..graph.schema import GraphFragment
from .errors import FetchFailure

logger = logging.getLogger(__name__)


class LocalGraphSource:
    """
    Serves fragments out of a NetworkX graph.

    Usage:
        source = LocalGraphSource()
        source.add_node("n1", "Agent", name="support-bot")
        source.add_node("n2", "Action")
        source.add_edge("e1", "n1", "n2", "HasAction")

        fragment = await source.fetch_neighborhood("n1", depth=1)
    """

    def __init__(self, graph: Optional[nx.MultiDiGraph] = None, id_prefix: str = "n::", latency: float = 0.0):
        """
        Args:
            graph: Existing graph; node attrs "name"/"data", edge key = edge id
            id_prefix: Prefix used to build compound edge endpoints
            latency: Artificial delay per call, in seconds
        """
        self.G = graph if graph is not None else nx.MultiDiGraph()
        self.id_prefix = id_prefix
        self.latency = latency
        self.calls: List[Tuple[Any, ...]] = []

    def add_node(self, node_id: str, node_name: str, /, **data) -> "LocalGraphSource":
        """node_name is the record type (e.g. "Agent"); data may carry its own "name"."""
        self.G.add_node(node_id, name=node_name, data=data)
        return self

    def add_edge(self, edge_id: str, source: str, target: str, edge_name: str, /, **data) -> "LocalGraphSource":
        self.G.add_edge(source, target, key=edge_id, name=edge_name, data=data)
        return self

    async def fetch_full_graph(self, root_id: str) -> GraphFragment:
        """Root plus everything reachable by following edges forward"""
        self.calls.append(("full", root_id))
        await self._delay()
        if root_id not in self.G:
            raise FetchFailure(f"Unknown root node: {root_id}", status_code=404)
        return self._fragment({root_id} | nx.descendants(self.G, root_id))

    async def fetch_neighborhood(self, focus_id: str, depth: int) -> GraphFragment:
        """Nodes at most depth outgoing hops away from focus_id"""
        self.calls.append(("neighborhood", focus_id, depth))
        await self._delay()
        if focus_id not in self.G:
            raise FetchFailure(f"Unknown node: {focus_id}", status_code=404)
        return self._fragment(nx.ego_graph(self.G, focus_id, radius=depth).nodes)

    async def _delay(self):
        if self.latency:
            await asyncio.sleep(self.latency)

    def _fragment(self, node_ids: Iterable[str]) -> GraphFragment:
        keep = set(node_ids)
        nodes = [
            {"id": nid, "name": data.get("name", ""), "data": dict(data.get("data") or {})}
            for nid, data in self.G.nodes(data=True)
            if nid in keep
        ]
        edges = [
            {
                "id": key,
                "name": data.get("name", ""),
                "source": f"{self.id_prefix}{u}",
                "target": f"{self.id_prefix}{v}",
                "data": dict(data.get("data") or {}),
            }
            for u, v, key, data in self.G.edges(keys=True, data=True)
            if u in keep and v in keep
        ]
        logger.debug(f"Serving {len(nodes)} nodes, {len(edges)} edges")
        return GraphFragment(nodes=nodes, edges=edges)
