"""
Structured logging with per-request correlation IDs.

Provides a consistent logging setup for the relay so that the log
lines of a single query can be traced together.
"""

import logging
import uuid


def setup_logging(name: str, level: str = "INFO") -> logging.Logger:
    """
    Configure logging and return a named logger.

    Called once at startup with the package root ('mg_relay'); module
    loggers use ``logging.getLogger("mg_relay.<module>")`` and inherit
    the level from it.

    Args:
        name: Logger name (e.g. 'mg_relay').
        level: Log level string (e.g. 'INFO', 'DEBUG').

    Returns:
        Configured logger instance.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s",
    )
    # basicConfig is a no-op once configured; the named logger still honours level
    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    return logger


def generate_correlation_id() -> str:
    """Generate a short unique ID for tracing one request through the logs."""
    return uuid.uuid4().hex[:12]
