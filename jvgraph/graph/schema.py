"""
Graph Schema Definitions

Defines the records held by the viewer's graph store and the raw
shapes returned by the remote walkers.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Dict, Any


class RawNode(BaseModel):
    """
    Node as reported by the remote walker.

    Example:
        id: "7f3a..."
        name: "Agent"
        data: {"name": "support-bot", "published": true}
    """
    id: str = Field(..., min_length=1)
    name: str = Field(default="")
    data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("data", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return {} if value is None else value


class RawEdge(BaseModel):
    """
    Edge as reported by the remote walker.

    source and target are compound identifiers (e.g. "n::7f3a...");
    only the trailing segment is a local node id.
    """
    id: str = Field(..., min_length=1)
    name: str = Field(default="")
    source: str = Field(default="")
    target: str = Field(default="")
    data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("data", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return {} if value is None else value


class Node(BaseModel):
    """A discovered node. group mirrors label and is only used for styling."""
    id: str
    label: str = ""
    group: str = ""
    attributes: Dict[str, Any] = Field(default_factory=dict)

    def to_vis(self) -> Dict[str, Any]:
        return {"id": self.id, "label": self.label, "group": self.group}


class Edge(BaseModel):
    """
    A discovered edge.

    from_/to may reference nodes that are not in the store yet.
    """
    id: str
    label: str = ""
    from_: str = Field(default="", alias="from")
    to: str = ""
    attributes: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(populate_by_name=True)

    def to_vis(self) -> Dict[str, Any]:
        return {"id": self.id, "from": self.from_, "to": self.to, "label": self.label}


class GraphFragment(BaseModel):
    """
    Unvalidated payload of a single fetch.

    Records stay as plain dicts so a single malformed record can be
    skipped without rejecting the whole fragment.
    """
    nodes: List[Any] = Field(default_factory=list)
    edges: List[Any] = Field(default_factory=list)

    @field_validator("nodes", "edges", mode="before")
    @classmethod
    def _none_is_empty(cls, value):
        return [] if value is None else value


class MergeReport(BaseModel):
    """Outcome of normalizing and merging one fragment"""
    nodes_merged: int = 0
    edges_merged: int = 0
    nodes_skipped: int = 0
    edges_skipped: int = 0
    pruned: int = 0


class GraphStats(BaseModel):
    """Statistics about the discovered graph"""
    total_nodes: int
    total_edges: int
    dangling_edges: int
    nodes_by_group: dict
    edges_by_label: dict


class Hit(BaseModel):
    """
    Elements under the pointer, as reported by a render surface.

    Ordered topmost first.
    """
    nodes: List[str] = Field(default_factory=list)
    edges: List[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.nodes and not self.edges
