"""
Fragment Mapper

Turns raw walker records into store records:
- RawNode {id, name, data} → Node {id, label, group, attributes}
- RawEdge {id, name, source, target, data} → Edge {id, label, from, to, attributes}

A record that fails validation is skipped and logged; it never aborts
the rest of the fragment.
"""

import logging
from typing import Any, Dict, List, Tuple

from pydantic import ValidationError

from .schema import RawNode, RawEdge, Node, Edge, GraphFragment

logger = logging.getLogger(__name__)

ID_SEPARATOR = ":"


def last_segment(identifier: str) -> str:
    """
    Local node id from a compound identifier.

    "n::7f3a" -> "7f3a". Identifiers without a separator have no local
    part and map to "".
    """
    if not identifier or ID_SEPARATOR not in identifier:
        return ""
    return identifier.rsplit(ID_SEPARATOR, 1)[-1]


def to_node(raw: Dict[str, Any]) -> Node:
    record = RawNode.model_validate(raw)
    return Node(id=record.id, label=record.name, group=record.name, attributes=record.data)


def to_edge(raw: Dict[str, Any]) -> Edge:
    record = RawEdge.model_validate(raw)
    return Edge(
        id=record.id,
        label=record.name,
        from_=last_segment(record.source),
        to=last_segment(record.target),
        attributes=record.data,
    )


def normalize_fragment(fragment: GraphFragment) -> Tuple[List[Node], List[Edge], int, int]:
    """
    Normalize every record of a fragment.

    Returns:
        (nodes, edges, nodes_skipped, edges_skipped)
    """
    nodes: List[Node] = []
    edges: List[Edge] = []
    nodes_skipped = 0
    edges_skipped = 0

    for raw in fragment.nodes:
        try:
            nodes.append(to_node(raw))
        except ValidationError as e:
            nodes_skipped += 1
            logger.warning(f"Skipping malformed node {_record_id(raw)}: {e.error_count()} error(s)")

    for raw in fragment.edges:
        try:
            edges.append(to_edge(raw))
        except ValidationError as e:
            edges_skipped += 1
            logger.warning(f"Skipping malformed edge {_record_id(raw)}: {e.error_count()} error(s)")

    return nodes, edges, nodes_skipped, edges_skipped


def _record_id(raw: Any) -> str:
    if isinstance(raw, dict):
        return str(raw.get("id", "<no id>"))
    return f"<{type(raw).__name__}>"
