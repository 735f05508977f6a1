"""
Langfuse observability integration.

Wraps every HTTP request in a Langfuse span.
Only activates when LANGFUSE_PUBLIC_KEY and LANGFUSE_SECRET_KEY are provided in .env
"""

import logging
import os
from typing import Callable, Optional

from fastapi import Request, Response
from langfuse import Langfuse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("mg_relay.observability")

# Global Langfuse client
_langfuse_client: Optional[Langfuse] = None
_langfuse_enabled: bool = False


def init_langfuse() -> Optional[Langfuse]:
    """
    Initialize Langfuse client if environment variables are set.

    Required environment variables:
    - LANGFUSE_PUBLIC_KEY
    - LANGFUSE_SECRET_KEY
    - LANGFUSE_HOST (optional, defaults to https://cloud.langfuse.com)

    Returns:
        Langfuse client if initialized, None otherwise
    """
    global _langfuse_client, _langfuse_enabled

    public_key = os.getenv("LANGFUSE_PUBLIC_KEY")
    secret_key = os.getenv("LANGFUSE_SECRET_KEY")
    host = os.getenv("LANGFUSE_HOST", "https://cloud.langfuse.com")

    if not public_key or not secret_key:
        logger.info("Langfuse not configured - request tracing disabled")
        _langfuse_enabled = False
        return None

    try:
        _langfuse_client = Langfuse(
            public_key=public_key,
            secret_key=secret_key,
            host=host,
        )
        _langfuse_enabled = True
        logger.info(f"Langfuse initialized successfully - host: {host}")
        return _langfuse_client

    except Exception as e:
        logger.error(f"Failed to initialize Langfuse: {e}")
        _langfuse_enabled = False
        return None


def is_langfuse_enabled() -> bool:
    """Check if Langfuse is enabled."""
    return _langfuse_enabled


def shutdown_langfuse():
    """Flush and shutdown Langfuse client."""
    global _langfuse_client, _langfuse_enabled

    if _langfuse_client:
        logger.info("Shutting down Langfuse - flushing pending traces")
        try:
            _langfuse_client.flush()
        except Exception as e:
            logger.error(f"Error flushing Langfuse: {e}")
        finally:
            _langfuse_client = None
            _langfuse_enabled = False


class LangfuseMiddleware(BaseHTTPMiddleware):
    """
    Request tracing with Langfuse.

    Records method, path and response status for each request.
    Request bodies are not captured (they carry queries and parameters).
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Trace the HTTP request/response cycle."""

        client = _langfuse_client
        if not is_langfuse_enabled() or client is None:
            return await call_next(request)

        method = request.method
        path = request.url.path

        with client.start_as_current_span(name=f"{method} {path}") as span:
            span.update_trace(
                name=f"{method} {path}",
                metadata={"method": method, "path": path},
                tags=["http", method.lower()],
            )
            try:
                response = await call_next(request)
            except Exception as e:
                span.update(output={"error": type(e).__name__}, level="ERROR")
                raise

            span.update(output={"status_code": response.status_code})
            return response
