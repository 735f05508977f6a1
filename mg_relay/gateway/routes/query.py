"""
Query route — POST /query.
"""

import json

from fastapi import APIRouter, Depends, Request

from mg_relay.query import GraphResponse, QueryHandler
from mg_relay.shared.exceptions import InvalidRequest

router = APIRouter()

INVALID_JSON = "Body must be valid JSON."


def _reject_constant(name: str):
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"invalid JSON constant: {name}")


def get_query_handler(request: Request) -> QueryHandler:
    """Return the process-wide QueryHandler installed by the app lifespan."""
    return request.app.state.query_handler


async def _read_json(request: Request):
    body = await request.body()
    if not body.strip():
        return {}
    try:
        return json.loads(body, parse_constant=_reject_constant)
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise InvalidRequest(INVALID_JSON) from e


@router.post("/query", response_model=GraphResponse)
async def run_query(
    request: Request,
    handler: QueryHandler = Depends(get_query_handler),
) -> GraphResponse:
    """Run a Cypher query and return the result as nodes and edges.

    Body: ``{"cypher": "...", "params": {...}}``.  Scalar columns are
    not part of the graph projection and are dropped.
    """
    payload = await _read_json(request)
    return await handler.handle(payload)
