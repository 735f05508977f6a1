"""
Query Handler: validates a /query body, runs it on a request-scoped
session and materializes the records into a GraphResponse.

The session is released exactly once in a ``finally`` block, whatever
the outcome (success, database error, cancellation).
"""

import logging
from typing import Any

from pydantic import BaseModel, Field

from mg_relay.query.materializer import GraphResponse, RawRecordValue, materialize, to_raw_value
from mg_relay.shared.database import MemgraphHandler
from mg_relay.shared.exceptions import ExecutionError, InvalidRequest, ResourceReleaseError
from mg_relay.shared.logging import generate_correlation_id

logger = logging.getLogger("mg_relay.query_handler")

MISSING_CYPHER = "Body must include a 'cypher' string."
PARAMS_NOT_OBJECT = "'params' must be an object."


class QueryRequest(BaseModel):
    """Typed holder for a POST /query body.

    Built only by parse_query_request(), which owns the validation rules
    and their error messages.
    """

    cypher: str = Field(..., description="Cypher query to run")
    params: dict[str, Any] = Field(default_factory=dict, description="Query parameters")


def parse_query_request(payload: Any) -> QueryRequest:
    """Check the shape of a decoded JSON body.

    A body that is not a JSON object is treated as an empty object, so it
    fails on the missing cypher string.  ``params: null`` counts as absent.

    Raises:
        InvalidRequest: cypher missing/empty/non-string, or params present
            but not an object.
    """
    body = payload if isinstance(payload, dict) else {}

    cypher = body.get("cypher")
    if not cypher or not isinstance(cypher, str):
        raise InvalidRequest(MISSING_CYPHER)

    params = body.get("params")
    if params is None:
        params = {}
    if not isinstance(params, dict):
        raise InvalidRequest(PARAMS_NOT_OBJECT)

    return QueryRequest(cypher=cypher, params=params)


class QueryHandler:
    """Runs one query per call against the shared Memgraph driver."""

    def __init__(self, database: MemgraphHandler):
        self._database = database

    @property
    def database(self) -> MemgraphHandler:
        return self._database

    async def handle(self, payload: Any) -> GraphResponse:
        """Validate, execute and materialize a single query.

        Args:
            payload: Decoded JSON body of the request.

        Returns:
            The materialized GraphResponse.

        Raises:
            InvalidRequest: Body has the wrong shape (database untouched).
            ExecutionError: The query failed; detail is logged, not raised.
        """
        request = parse_query_request(payload)
        correlation_id = generate_correlation_id()

        try:
            session = self._database.open_session()
        except Exception as exc:
            logger.exception("[%s] Could not open a Memgraph session", correlation_id)
            raise ExecutionError() from exc

        rows: list[list[RawRecordValue]] = []
        try:
            result = await session.run(request.cypher, request.params)
            async for record in result:
                rows.append([to_raw_value(value) for value in record.values()])
        except Exception as exc:
            logger.exception("[%s] Memgraph query failed", correlation_id)
            raise ExecutionError() from exc
        finally:
            await self._release(session, correlation_id)

        graph = materialize(rows)
        logger.info(
            "[%s] Query returned %d records -> %d nodes, %d edges",
            correlation_id,
            len(rows),
            len(graph.nodes),
            len(graph.edges),
        )
        return graph

    async def _release(self, session: Any, correlation_id: str) -> None:
        try:
            await self._database.close_session(session)
        except ResourceReleaseError as exc:
            logger.warning("[%s] %s", correlation_id, exc)
