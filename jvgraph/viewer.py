"""
Graph Viewer Session

One operator session: a store, a selection, a traversal controller and
a render surface wired together. Pointer events and sidebar controls
come in here and are routed to the selection model or the controller.
"""

import logging
from typing import Any, Dict, Optional, Union

from config.settings import get_settings, Settings
from .graph.schema import Hit, MergeReport
from .graph.selection import Selection, SelectionModel, InspectionView
from .graph.store import GraphStore
from .fetch.client import JivasClient
from .fetch.coordinator import FetchCoordinator
from .fetch.source import GraphSource
from .render.surface import RenderSurface, bind_surface
from .render.vis import VisDataMirror
from .traversal.controller import TraversalController
from .traversal.state import TraversalMode

logger = logging.getLogger(__name__)


class GraphViewer:
    """
    A viewer session over a remote graph.

    Usage:
        viewer = GraphViewer(JivasClient(), root_id="7f3a...")
        await viewer.open()

        viewer.click(Hit(nodes=["7f3a..."]))
        await viewer.double_click(Hit(nodes=["9b2c..."]))
        await viewer.set_mode("Focus")

        await viewer.close()
    """

    def __init__(
        self,
        source: GraphSource,
        root_id: str,
        mode: Union[str, TraversalMode, None] = None,
        surface: Optional[RenderSurface] = None,
    ):
        settings = get_settings()
        self.source = source
        self.store = GraphStore()
        self.selection = SelectionModel(self.store)
        self.coordinator = FetchCoordinator(source)
        self.controller = TraversalController(
            self.store,
            self.coordinator,
            root_id=root_id,
            mode=mode or settings.default_mode,
        )
        self.surface = surface if surface is not None else VisDataMirror()
        self._unbind = bind_surface(self.store, self.surface)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "GraphViewer":
        """Session against the JIVAS server configured in the environment"""
        settings = settings or get_settings()
        client = JivasClient(
            host=settings.jivas_host,
            token=settings.jivas_token,
            timeout=settings.request_timeout,
        )
        return cls(client, root_id=settings.root_node, mode=settings.default_mode)

    async def open(self) -> Optional[MergeReport]:
        """Fetch the first fragment"""
        return await self.controller.start()

    async def close(self):
        """Tear the session down and release the transport"""
        self._unbind()
        self.selection.detach()
        self.store.clear()
        close = getattr(self.source, "close", None)
        if close is not None:
            await close()

    # ==========================================
    # POINTER EVENTS
    # ==========================================

    def click(self, hit: Hit) -> Selection:
        return self.selection.click(hit)

    def context_click(self, hit: Hit) -> Selection:
        return self.selection.context_click(hit)

    async def double_click(self, hit: Hit) -> Optional[MergeReport]:
        """
        Double click on a node moves the traversal focus there.

        On empty canvas it only closes the inspection panel.
        """
        if hit.nodes:
            return await self.controller.double_click_node(hit.nodes[0])
        if hit.is_empty:
            self.selection.close_panel()
        return None

    def close_panel(self):
        self.selection.close_panel()

    # ==========================================
    # CONTROLS
    # ==========================================

    async def set_mode(self, mode: Union[str, TraversalMode]) -> Optional[MergeReport]:
        return await self.controller.change_mode(mode)

    async def set_depth(self, depth: int) -> Optional[MergeReport]:
        return await self.controller.change_depth(depth)

    async def reset(self) -> Optional[MergeReport]:
        """Reset Graph button; refits the view when something was reset"""
        if not self.controller.can_reset():
            return None
        report = await self.controller.reset_graph()
        self.surface.fit()
        return report

    async def refresh(self) -> Optional[MergeReport]:
        return await self.controller.refresh()

    def set_view(self, view: Union[str, InspectionView]):
        self.selection.set_view(view)

    # ==========================================
    # SNAPSHOTS
    # ==========================================

    def traversal_info(self) -> Dict[str, Any]:
        state = self.controller.state
        report = self.controller.last_report
        return {
            "mode": state.mode.value,
            "root_id": state.root_id,
            "focus_id": state.focus_id,
            "depth": state.depth,
            "can_reset": self.controller.can_reset(),
            "last_error": self.controller.last_error,
            "last_merge": report.model_dump() if report is not None else None,
        }

    def selection_info(self) -> Dict[str, Any]:
        current = self.selection.selection
        info: Dict[str, Any] = {
            "kind": current.kind.value,
            "ref": current.ref,
            "panel_open": self.selection.panel_open,
            "view": self.selection.view.value,
        }
        if self.selection.view == InspectionView.JSON:
            info["json"] = self.selection.inspection_json()
        else:
            info["rows"] = [{"key": k, "value": v} for k, v in self.selection.inspection_rows()]
        return info
