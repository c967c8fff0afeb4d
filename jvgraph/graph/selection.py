"""
Selection Model

Tracks the single selected node or edge and backs the inspection panel.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .schema import Node, Edge, Hit
from .store import GraphStore, GraphChange, ChangeKind

logger = logging.getLogger(__name__)


class SelectionKind(str, Enum):
    NONE = "none"
    NODE = "node"
    EDGE = "edge"


class InspectionView(str, Enum):
    TABLE = "table"
    JSON = "json"


@dataclass(frozen=True)
class Selection:
    kind: SelectionKind = SelectionKind.NONE
    ref: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.kind == SelectionKind.NONE


NO_SELECTION = Selection()


class SelectionModel:
    """
    At most one selected element, node or edge, never both.

    The selection always points at a record that is in the store; when
    that record is removed the selection is cleared.

    Usage:
        selection = SelectionModel(store)
        selection.click(Hit(nodes=["n1"]))
        selection.inspection_rows()
        # [("name", "support-bot"), ("published", "true")]
    """

    def __init__(self, store: GraphStore):
        self.store = store
        self.selection: Selection = NO_SELECTION
        self.panel_open = False
        self.view = InspectionView.TABLE
        self._unsubscribe = store.subscribe(self._on_store_change)

    # ==========================================
    # SELECTION
    # ==========================================

    def select_node(self, node_id: str) -> bool:
        if not self.store.has_node(node_id):
            logger.debug(f"Cannot select unknown node {node_id}")
            self.clear_selection()
            return False
        self.selection = Selection(SelectionKind.NODE, node_id)
        return True

    def select_edge(self, edge_id: str) -> bool:
        if not self.store.has_edge(edge_id):
            logger.debug(f"Cannot select unknown edge {edge_id}")
            self.clear_selection()
            return False
        self.selection = Selection(SelectionKind.EDGE, edge_id)
        return True

    def clear_selection(self):
        self.selection = NO_SELECTION

    def _select_hit(self, hit: Hit) -> Selection:
        # Topmost node wins over any edge under the pointer
        if hit.nodes:
            self.select_node(hit.nodes[0])
        elif hit.edges:
            self.select_edge(hit.edges[0])
        else:
            self.clear_selection()
        return self.selection

    def click(self, hit: Hit) -> Selection:
        """Left click: select what was hit, or clear when nothing was"""
        return self._select_hit(hit)

    def context_click(self, hit: Hit) -> Selection:
        """Right click: select what was hit and open the inspection panel"""
        selection = self._select_hit(hit)
        if not selection.is_empty:
            self.open_panel()
        return selection

    # ==========================================
    # INSPECTION PANEL
    # ==========================================

    def open_panel(self):
        self.panel_open = True

    def close_panel(self):
        self.panel_open = False
        self.clear_selection()

    def set_view(self, view: Union[str, InspectionView]):
        self.view = InspectionView(view)

    def selected_record(self) -> Optional[Union[Node, Edge]]:
        if self.selection.kind == SelectionKind.NODE:
            return self.store.get_node(self.selection.ref)
        if self.selection.kind == SelectionKind.EDGE:
            return self.store.get_edge(self.selection.ref)
        return None

    def inspect(self) -> Dict[str, Any]:
        """Attribute bag of the selected element ({} when nothing is selected)"""
        record = self.selected_record()
        return dict(record.attributes) if record else {}

    def inspection_rows(self) -> List[Tuple[str, str]]:
        """Key/value rows for the table view, sorted by key"""
        return [
            (key, format_value(value))
            for key, value in sorted(self.inspect().items(), key=lambda item: item[0])
        ]

    def inspection_json(self) -> str:
        record = self.selected_record()
        if record is None:
            return ""
        return json.dumps(record.attributes, indent=2, default=str)

    # ==========================================
    # STORE EVENTS
    # ==========================================

    def _on_store_change(self, change: GraphChange):
        if change.kind not in (ChangeKind.REMOVED, ChangeKind.CLEARED):
            return
        if self.selection.kind == SelectionKind.NODE and self.selection.ref in change.nodes:
            self.clear_selection()
        elif self.selection.kind == SelectionKind.EDGE and self.selection.ref in change.edges:
            self.clear_selection()

    def detach(self):
        self._unsubscribe()


def format_value(value: Any) -> str:
    """Strings and numbers as-is, anything else as indented JSON"""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return json.dumps(value, indent=2, default=str)
