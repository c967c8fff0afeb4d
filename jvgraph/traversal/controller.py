"""
Traversal Controller

Applies traversal transitions to a viewer session: mutates the store as
the directive says, fetches the directive's key through the coordinator
and merges the fragment with the policy of the current mode.
"""

import logging
from typing import TYPE_CHECKING, Optional, Union

from ..graph.mapper import normalize_fragment
from ..graph.schema import GraphFragment, MergeReport
from ..graph.store import GraphStore
from ..fetch.errors import FetchFailure
from . import state as transitions
from .state import TraversalMode, TraversalState, Transition

if TYPE_CHECKING:
    from ..fetch.coordinator import FetchCoordinator

logger = logging.getLogger(__name__)


class TraversalController:
    """
    Drives the traversal state machine against a store and a coordinator.

    Usage:
        controller = TraversalController(store, FetchCoordinator(client), root_id="n1")
        await controller.start()
        await controller.double_click_node("n2")
        await controller.change_mode("Focus")
    """

    def __init__(
        self,
        store: GraphStore,
        coordinator: "FetchCoordinator",
        root_id: str,
        mode: Union[str, TraversalMode] = TraversalMode.STEP,
    ):
        if not root_id:
            raise ValueError("A root node id is required")
        self.store = store
        self.coordinator = coordinator
        self.state = TraversalState.initial(root_id, mode)
        self.last_error: Optional[str] = None
        self.last_report: Optional[MergeReport] = None

    @property
    def mode(self) -> TraversalMode:
        return self.state.mode

    @property
    def focus_id(self) -> str:
        return self.state.focus_id

    @property
    def depth(self) -> int:
        return self.state.depth

    # ==========================================
    # EVENTS
    # ==========================================

    async def start(self) -> Optional[MergeReport]:
        return await self.apply(transitions.start(self.state))

    async def change_mode(self, mode: Union[str, TraversalMode]) -> Optional[MergeReport]:
        logger.info(f"Traversal mode {self.state.mode.value} -> {TraversalMode(mode).value}")
        return await self.apply(transitions.change_mode(self.state, mode))

    async def double_click_node(self, node_id: str) -> Optional[MergeReport]:
        return await self.apply(transitions.double_click_node(self.state, node_id))

    async def change_depth(self, depth: int) -> Optional[MergeReport]:
        return await self.apply(transitions.change_depth(self.state, depth))

    def can_reset(self) -> bool:
        return transitions.reset_graph(self.state, self.store.node_count).fetches

    async def reset_graph(self) -> Optional[MergeReport]:
        transition = transitions.reset_graph(self.state, self.store.node_count)
        if not transition.fetches:
            logger.debug("Reset skipped: nothing to reset")
        return await self.apply(transition)

    async def refresh(self) -> Optional[MergeReport]:
        return await self.apply(transitions.refresh(self.state))

    # ==========================================
    # APPLY / MERGE
    # ==========================================

    async def apply(self, transition: Transition) -> Optional[MergeReport]:
        """
        Apply a transition.

        Store effects happen before the fetch is awaited, so the store
        reflects the event even while the fetch is in flight.

        Returns:
            MergeReport if a fragment was merged, None otherwise
            (no fetch needed, stale result, or failure)
        """
        self.state = transition.state
        directive = transition.directive
        if directive is None:
            return None

        if directive.clear_store:
            self.store.clear()
        if directive.prune_to is not None:
            self.store.remove_nodes_except(directive.prune_to)

        try:
            fragment = await self.coordinator.get_or_fetch(directive.key, refresh=directive.refresh)
        except FetchFailure as e:
            self.last_error = str(e)
            logger.warning(f"Fetch failed for {directive.key}: {e}")
            return None

        if fragment is None:
            return None

        self.last_error = None
        return self.merge(fragment)

    def merge(self, fragment: GraphFragment) -> MergeReport:
        """Upsert a fragment; in Focus mode also prune what the focus cannot reach"""
        nodes, edges, nodes_skipped, edges_skipped = normalize_fragment(fragment)

        self.store.upsert_nodes(nodes)
        self.store.upsert_edges(edges)

        pruned = 0
        if self.state.mode == TraversalMode.FOCUS:
            pruned = self.store.prune_unreachable(self.state.focus_id)
            self.store.remove_orphan_edges(keep=(edge.id for edge in edges))

        report = MergeReport(
            nodes_merged=len(nodes),
            edges_merged=len(edges),
            nodes_skipped=nodes_skipped,
            edges_skipped=edges_skipped,
            pruned=pruned,
        )
        logger.info(
            f"Merged {report.nodes_merged} nodes, {report.edges_merged} edges "
            f"(skipped {nodes_skipped + edges_skipped}, pruned {pruned}); "
            f"store has {self.store.node_count} nodes, {self.store.edge_count} edges"
        )
        self.last_report = report
        return report
