"""
Graph module - Holds discovered nodes/edges and the current selection
"""

from .schema import Node, Edge, RawNode, RawEdge, GraphFragment, MergeReport, GraphStats, Hit
from .store import GraphStore, GraphChange, ChangeKind
from .selection import SelectionModel, Selection, SelectionKind, InspectionView
from .mapper import normalize_fragment, last_segment

__all__ = [
    "Node",
    "Edge",
    "RawNode",
    "RawEdge",
    "GraphFragment",
    "MergeReport",
    "GraphStats",
    "Hit",
    "GraphStore",
    "GraphChange",
    "ChangeKind",
    "SelectionModel",
    "Selection",
    "SelectionKind",
    "InspectionView",
    "normalize_fragment",
    "last_segment",
]
