"""
Health routes — GET /, GET /healthz and GET /readyz.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from mg_relay.gateway.routes.query import get_query_handler
from mg_relay.query import QueryHandler

router = APIRouter()

SERVICE_NAME = "mg-relay"


@router.get("/")
async def root(handler: QueryHandler = Depends(get_query_handler)) -> dict:
    """Service banner with the target address (no scheme, no credentials)."""
    return {
        "service": SERVICE_NAME,
        "status": "ok",
        "message": "POST a Cypher query to /query",
        "target": handler.database.config.banner_target,
    }


@router.get("/healthz")
async def healthz() -> dict:
    """Liveness only; the database is not contacted."""
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(handler: QueryHandler = Depends(get_query_handler)):
    """Readiness: 200 if Memgraph answers a connectivity check, else 503."""
    if await handler.database.verify():
        return {"status": "ok"}
    return JSONResponse(status_code=503, content={"status": "unavailable"})
