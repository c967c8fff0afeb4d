"""
Graph Source

What the traversal core needs from a remote graph: the whole graph
under a root, or the neighborhood of a node. Both are async and raise
FetchFailure instead of returning partial data.
"""

from typing import Protocol, runtime_checkable

from ..graph.schema import GraphFragment


@runtime_checkable
class GraphSource(Protocol):

    async def fetch_full_graph(self, root_id: str) -> GraphFragment:
        ...

    async def fetch_neighborhood(self, focus_id: str, depth: int) -> GraphFragment:
        ...
