"""Gateway configuration."""

from pydantic import ByteSize

from mg_relay.shared.config import BaseRelaySettings


class GatewaySettings(BaseRelaySettings):
    """Settings specific to the HTTP gateway."""

    host: str = "0.0.0.0"
    port: int = 8080
    # Comma-separated; empty allows every origin (without credentials)
    allow_origins: str = ""
    request_limit: ByteSize = ByteSize(256 * 1024)

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.allow_origins.split(",") if origin.strip()]
