"""
Custom exception hierarchy for the relay.

All relay errors inherit from RelayError so they can be caught
uniformly at the gateway level.
"""


class RelayError(Exception):
    """Base exception for all relay errors."""

    def __init__(self, message: str, component: str = "unknown"):
        self.message = message
        self.component = component
        super().__init__(f"[{component}] {message}")


class ConfigurationError(RelayError):
    """Connection settings are missing or still hold placeholder values."""

    def __init__(self, message: str):
        super().__init__(message, component="config")


class DatabaseConnectionError(RelayError):
    """Failed to connect to Memgraph."""

    def __init__(self, message: str):
        super().__init__(message, component="database")


class ResourceReleaseError(RelayError):
    """Closing a session or the driver failed."""

    def __init__(self, message: str):
        super().__init__(message, component="database")


class InvalidRequest(RelayError):
    """The request body does not have the expected shape.

    ``message`` is safe to return to the caller verbatim.
    """

    def __init__(self, message: str):
        super().__init__(message, component="query")


class ExecutionError(RelayError):
    """A query failed against the database.

    The underlying driver error is chained as ``__cause__`` and must not
    be echoed to the caller.
    """

    def __init__(self, message: str = "database query failed"):
        super().__init__(message, component="query")
