"""
Graph Materializer: flattens query records into a node/edge document.

Driver values are first classified into a small tagged union
(RawRelationship, RawNode, RawScalar) by to_raw_value(); materialize()
then walks the rows in order and builds the GraphResponse:

- every relationship occurrence becomes an edge (no dedup),
- nodes are deduplicated by identity, first-seen properties win,
- everything else (scalars, lists, paths, maps) is dropped.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

from pydantic import BaseModel, Field

LABEL_DELIMITER = ","

_PRIMITIVES = (str, int, float, bool, type(None))


# ─── Raw record values ──────────────────────────────────────


@dataclass(frozen=True)
class RawNode:
    identity: str
    labels: tuple[str, ...] = ()
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RawRelationship:
    identity: str
    start_identity: str
    end_identity: str
    type: str
    properties: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RawScalar:
    value: Any = None


RawRecordValue = Union[RawNode, RawRelationship, RawScalar]


def _plain(value: Any) -> Any:
    """Reduce a property value to something the JSON encoder accepts."""
    if isinstance(value, _PRIMITIVES):
        return value
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_plain(v) for v in value]
    if hasattr(value, "iso_format"):
        # neo4j.time Date/Time/DateTime/Duration
        return value.iso_format()
    return str(value)


def _properties(entity: Any) -> dict[str, Any]:
    items = getattr(entity, "items", None)
    if items is None:
        return {}
    return {str(k): _plain(v) for k, v in items()}


def _is_relationship(value: Any) -> bool:
    # Paths also expose start_node/end_node; only relationships carry a type.
    return (
        hasattr(value, "element_id")
        and getattr(value, "start_node", None) is not None
        and getattr(value, "end_node", None) is not None
        and hasattr(value, "type")
    )


def _is_node(value: Any) -> bool:
    return hasattr(value, "element_id") and isinstance(
        getattr(value, "labels", None), (set, frozenset, list, tuple)
    )


def to_raw_value(value: Any) -> RawRecordValue:
    """Classify one driver value.  Relationship shape is checked first."""
    if _is_relationship(value):
        return RawRelationship(
            identity=str(value.element_id),
            start_identity=str(value.start_node.element_id),
            end_identity=str(value.end_node.element_id),
            type=str(value.type),
            properties=_properties(value),
        )
    if _is_node(value):
        return RawNode(
            identity=str(value.element_id),
            labels=tuple(sorted(str(label) for label in value.labels)),
            properties=_properties(value),
        )
    return RawScalar(value)


# ─── Response models ────────────────────────────────────────


class GraphNode(BaseModel):
    """A deduplicated node in the response graph."""

    id: str = Field(..., description="Stringified database identity")
    label: str = Field(..., description="Node labels joined by a comma")
    data: dict[str, Any] = Field(default_factory=dict, description="Node properties")


class GraphEdge(BaseModel):
    """A relationship occurrence in the response graph."""

    id: str = Field(..., description="Stringified database identity")
    source: str = Field(..., description="Identity of the start node")
    target: str = Field(..., description="Identity of the end node")
    label: str = Field(..., description="Relationship type")
    data: dict[str, Any] = Field(default_factory=dict, description="Relationship properties")


class GraphResponse(BaseModel):
    """Response model for POST /query."""

    nodes: list[GraphNode] = Field(
        default_factory=list, description="Nodes in first-seen order"
    )
    edges: list[GraphEdge] = Field(
        default_factory=list, description="Edges in encounter order"
    )


# ─── Materialization ────────────────────────────────────────


def materialize(rows: Iterable[Sequence[RawRecordValue]]) -> GraphResponse:
    """Build the node/edge document from classified record rows.

    Args:
        rows: One sequence of RawRecordValue per record, in field order.

    Returns:
        GraphResponse with nodes in first-seen order and edges in
        encounter order.
    """
    nodes: dict[str, GraphNode] = {}
    edges: list[GraphEdge] = []

    def remember_node(node: RawNode) -> GraphNode:
        existing = nodes.get(node.identity)
        if existing is None:
            existing = nodes[node.identity] = GraphNode(
                id=node.identity,
                label=LABEL_DELIMITER.join(node.labels),
                data=dict(node.properties),
            )
        return existing

    for row in rows:
        for value in row:
            if isinstance(value, RawRelationship):
                edges.append(
                    GraphEdge(
                        id=value.identity,
                        source=value.start_identity,
                        target=value.end_identity,
                        label=value.type,
                        data=dict(value.properties),
                    )
                )
            elif isinstance(value, RawNode):
                remember_node(value)

    return GraphResponse(nodes=list(nodes.values()), edges=edges)
