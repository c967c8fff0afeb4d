"""
Render Surface Contract

What the core expects from whatever draws the graph, and the glue that
keeps a surface in step with a GraphStore.
"""

from typing import Callable, List, Protocol, Sequence, runtime_checkable

from ..graph.schema import Node, Edge
from ..graph.store import GraphStore, GraphChange, ChangeKind


@runtime_checkable
class RenderSurface(Protocol):

    def add(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
        ...

    def update(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> None:
        ...

    def remove(self, node_ids: Sequence[str], edge_ids: Sequence[str]) -> None:
        ...

    def clear(self) -> None:
        ...

    def fit(self) -> None:
        ...


def bind_surface(store: GraphStore, surface: RenderSurface) -> Callable[[], None]:
    """
    Replay every store change onto surface.

    The surface is first given the store's current contents. Returns the
    unsubscribe callable.
    """
    surface.add(store.nodes(), store.edges())

    def on_change(change: GraphChange):
        if change.kind == ChangeKind.CLEARED:
            surface.clear()
            return
        if change.kind == ChangeKind.REMOVED:
            surface.remove(list(change.nodes), list(change.edges))
            return

        nodes = _present(change.nodes, store.get_node)
        edges = _present(change.edges, store.get_edge)
        if change.kind == ChangeKind.ADDED:
            surface.add(nodes, edges)
        else:
            surface.update(nodes, edges)

    return store.subscribe(on_change)


def _present(ids, getter) -> List:
    records = (getter(record_id) for record_id in ids)
    return [record for record in records if record is not None]
