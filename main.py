"""
Entry point: runs the relay under uvicorn.

Startup order:
    1. Resolve connection settings (exit 1 on placeholder/missing values).
    2. Lifespan startup verifies Memgraph connectivity; uvicorn only binds
       its socket if that succeeds and exits non-zero otherwise.

SIGTERM/SIGINT are handled by uvicorn: it stops accepting connections,
runs the lifespan shutdown (closes the driver) and exits 0.

Usage:
    python main.py
"""

import sys

import uvicorn
from dotenv import load_dotenv

from mg_relay.gateway.app import create_app
from mg_relay.gateway.config import GatewaySettings
from mg_relay.shared.exceptions import ConfigurationError
from mg_relay.shared.logging import setup_logging


def main() -> None:
    load_dotenv()
    settings = GatewaySettings()
    logger = setup_logging("mg_relay", level=settings.log_level)

    try:
        app = create_app(settings)
    except ConfigurationError as exc:
        logger.error("Invalid configuration: %s", exc.message)
        sys.exit(1)

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        lifespan="on",
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
