"""Query pipeline: request validation, session handling and graph materialization."""

from mg_relay.query.materializer import GraphEdge, GraphNode, GraphResponse, materialize
from mg_relay.query.query_handler import QueryHandler, QueryRequest, parse_query_request

__all__ = [
    "GraphEdge",
    "GraphNode",
    "GraphResponse",
    "QueryHandler",
    "QueryRequest",
    "materialize",
    "parse_query_request",
]
