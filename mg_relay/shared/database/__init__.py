"""
Database package — connection configuration and the shared driver handler.
"""

from .connection_config import ConnectionConfig, TrustPolicy, resolve_connection_config
from .memgraph_handler import MemgraphHandler

__all__ = [
    "ConnectionConfig",
    "MemgraphHandler",
    "TrustPolicy",
    "resolve_connection_config",
]
