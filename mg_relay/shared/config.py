"""
Base configuration for the relay.

Uses Pydantic Settings for environment-based configuration.
Field names map onto the MG_* environment variables (case-insensitive).
"""

from pydantic_settings import BaseSettings


class BaseRelaySettings(BaseSettings):
    """Settings shared by every process that talks to Memgraph."""

    service_name: str = "mg-relay"

    # Memgraph connection (MG_URI wins over the host/scheme/port parts)
    mg_uri: str = ""
    mg_scheme: str = "bolt+ssc"
    mg_host: str = ""
    mg_port: str = "7687"
    mg_user: str = ""
    mg_pass: str = ""
    mg_database: str = ""
    mg_trust: str = ""

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
