"""mg-relay: Cypher over HTTP, answered as nodes and edges."""

__version__ = "0.1.0"
