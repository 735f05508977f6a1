"""
Memgraph Connection Handler

Owns the one async Bolt driver for the lifetime of the process.
The driver's connection pool is shared by every request; requests only
ever get short-lived sessions from it via open_session().
"""

import logging

from neo4j import AsyncDriver, AsyncGraphDatabase, AsyncSession

from mg_relay.shared.database.connection_config import ConnectionConfig
from mg_relay.shared.exceptions import DatabaseConnectionError, ResourceReleaseError

logger = logging.getLogger("mg_relay.memgraph_handler")


class MemgraphHandler:
    """
    Manages a single async driver built from a resolved ConnectionConfig.

    Usage
    -----
    handler = MemgraphHandler(config)
    await handler.connect()            # open + verify connectivity
    session = handler.open_session()   # one per request
    ...
    await handler.close_session(session)
    await handler.close()              # at shutdown
    """

    def __init__(self, config: ConnectionConfig):
        self._config = config
        self._driver: AsyncDriver | None = None

    # ─── Lifecycle ──────────────────────────────────────────

    async def connect(self) -> "MemgraphHandler":
        """Create the async driver and verify connectivity.

        Returns:
            Self for method chaining.

        Raises:
            DatabaseConnectionError: If the driver cannot be created or
                Memgraph cannot be reached with the configured credentials.
        """
        if self._driver is not None:
            return self

        target = self._config.banner_target
        try:
            driver = AsyncGraphDatabase.driver(
                self._config.driver_uri,
                auth=self._config.auth,
                **self._config.driver_options(),
            )
        except Exception as exc:
            raise DatabaseConnectionError(
                f"Unable to create driver for {target}: {exc}"
            ) from exc

        try:
            await driver.verify_connectivity()
        except Exception as exc:
            logger.error("Unable to connect to Memgraph at %s", target)
            try:
                await driver.close()
            except Exception:
                logger.exception("Failed to close driver after connectivity failure")
            raise DatabaseConnectionError(
                f"Unable to connect to Memgraph at {target}: {exc}"
            ) from exc

        self._driver = driver
        logger.info(
            "Connected to Memgraph at %s (db=%s)",
            target,
            self._config.database or "default",
        )
        return self

    async def close(self) -> None:
        """Close the underlying driver.  Safe to call more than once.

        Failures are logged and never raised; shutdown must not fail
        because the database went away first.
        """
        driver, self._driver = self._driver, None
        if driver is None:
            return
        try:
            await driver.close()
            logger.info("Memgraph connection closed")
        except Exception:
            logger.exception("Failed to close Memgraph driver")

    # ─── Properties ─────────────────────────────────────────

    @property
    def driver(self) -> AsyncDriver:
        """Return the raw async driver.

        Raises:
            RuntimeError: If handler is not connected (call connect() first).
        """
        if self._driver is None:
            raise RuntimeError("MemgraphHandler is not connected; call connect() first")
        return self._driver

    @property
    def config(self) -> ConnectionConfig:
        """Return the resolved connection config."""
        return self._config

    # ─── Sessions ───────────────────────────────────────────

    def open_session(self) -> AsyncSession:
        """Open a request-scoped session on the shared driver.

        Sessions are cheap; the driver pools the actual connections.
        The caller owns the session and must pass it to close_session().
        """
        if self._config.database:
            return self.driver.session(database=self._config.database)
        return self.driver.session()

    async def close_session(self, session: AsyncSession) -> None:
        """Close a session obtained from open_session().

        Raises:
            ResourceReleaseError: If the session could not be closed.
        """
        try:
            await session.close()
        except Exception as exc:
            raise ResourceReleaseError(f"Failed to close session: {exc}") from exc

    async def verify(self) -> bool:
        """Quick health-check: returns True if the database is reachable."""
        if self._driver is None:
            return False
        try:
            await self._driver.verify_connectivity()
            return True
        except Exception as exc:
            logger.warning("Memgraph connectivity check failed: %s", exc)
            return False
