"""
FastAPI Gateway — HTTP layer of the relay.

Build with create_app(); serve with ``python main.py`` or
``uvicorn mg_relay.gateway.app:create_app --factory``.

The lifespan connects the shared MemgraphHandler (verifying connectivity
before uvicorn binds its socket) and closes it on shutdown.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mg_relay.gateway.config import GatewaySettings
from mg_relay.gateway.middleware import BodySizeLimitMiddleware
from mg_relay.gateway.routes import health, query
from mg_relay.query import QueryHandler
from mg_relay.shared.database import MemgraphHandler, resolve_connection_config
from mg_relay.shared.exceptions import ExecutionError, InvalidRequest
from mg_relay.shared.observability import (
    LangfuseMiddleware,
    init_langfuse,
    shutdown_langfuse,
)

logger = logging.getLogger("mg_relay.gateway.app")

QUERY_FAILED = "Memgraph query failed."


async def _invalid_request(_request: Request, exc: InvalidRequest) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": exc.message})


async def _execution_error(_request: Request, exc: ExecutionError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": QUERY_FAILED})


def create_app(
    settings: GatewaySettings | None = None,
    database: MemgraphHandler | None = None,
) -> FastAPI:
    """Build the relay application.

    Args:
        settings: Gateway settings; read from the environment when omitted.
        database: Pre-built handler (tests); built from settings otherwise.

    Raises:
        ConfigurationError: Connection settings are missing or placeholders.
            Raised here, before any listener exists.
    """
    settings = settings or GatewaySettings()
    if database is None:
        database = MemgraphHandler(resolve_connection_config(settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Connect on startup, close on shutdown."""
        logger.info("Starting mg-relay")
        init_langfuse()

        await database.connect()
        app.state.query_handler = QueryHandler(database)
        logger.info("mg-relay ready (target %s)", database.config.banner_target)

        try:
            yield
        finally:
            logger.info("Shutting down mg-relay, closing resources")
            await database.close()
            shutdown_langfuse()

    app = FastAPI(
        title="mg-relay",
        description="Runs Cypher queries against Memgraph and returns nodes and edges",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(InvalidRequest, _invalid_request)
    app.add_exception_handler(ExecutionError, _execution_error)

    # Last added runs first: CORS wraps everything, including 413s
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=int(settings.request_limit))
    app.add_middleware(LangfuseMiddleware)

    origins = settings.cors_origins
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(health.router, tags=["Health"])
    app.include_router(query.router, tags=["Query"])

    return app
