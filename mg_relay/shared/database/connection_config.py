"""
Connection Config Resolver

Turns the MG_* settings into a single immutable ConnectionConfig:
target address, transport encryption and certificate trust policy.
Runs once at process start; any problem is a ConfigurationError and
the relay must not start.

Scheme conventions (Bolt URIs):

    bolt://      plain TCP
    bolt+s://    TLS, server certificate checked against the system CAs
    bolt+ssc://  TLS, any server certificate accepted (self-signed)

``+ssc`` deliberately disables certificate validation.  It exists for
intra-cluster deployments where Memgraph runs with a self-signed
certificate; a warning is logged whenever it is in effect.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from neo4j import TrustAll, TrustCustomCAs, TrustSystemCAs

from mg_relay.shared.config import BaseRelaySettings
from mg_relay.shared.exceptions import ConfigurationError

logger = logging.getLogger("mg_relay.connection_config")

PLACEHOLDER_HOST = "YOUR_HOST"
PLACEHOLDER_PASSWORD = "change-me"

TRUST_ALL_CERTIFICATES = "TRUST_ALL_CERTIFICATES"
TRUST_SYSTEM_CA_SIGNED_CERTIFICATES = "TRUST_SYSTEM_CA_SIGNED_CERTIFICATES"

_SCHEME_PREFIX = re.compile(r"^[^/]+://")
_USERINFO_PREFIX = re.compile(r"^[^@/]*@")


class TrustPolicy(str, Enum):
    """How the driver validates the server's TLS certificate."""

    SYSTEM_CA = "system_ca"
    ALL = "all"
    CUSTOM = "custom"


@dataclass(frozen=True)
class Credentials:
    user: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class ConnectionConfig:
    """Resolved, validated connection settings.  Immutable."""

    target_address: str
    transport_secure: bool
    trust_policy: TrustPolicy
    credentials: Credentials
    database: str | None = None
    trusted_certificates: tuple[str, ...] = ()

    @property
    def scheme(self) -> str:
        return self.target_address.partition("://")[0]

    @property
    def driver_uri(self) -> str:
        """Target address with the ``+s``/``+ssc`` suffix removed.

        The Python driver refuses explicit encryption/trust options on a
        secure scheme, so security is always passed via driver_options().
        """
        base_scheme = self.scheme.split("+", 1)[0]
        return f"{base_scheme}://{self.target_address.partition('://')[2]}"

    @property
    def banner_target(self) -> str:
        """Address without scheme or credentials, safe to show to callers."""
        return _USERINFO_PREFIX.sub("", _SCHEME_PREFIX.sub("", self.target_address))

    @property
    def auth(self) -> tuple[str, str]:
        return (self.credentials.user, self.credentials.password)

    def driver_options(self) -> dict[str, Any]:
        """Keyword arguments for ``AsyncGraphDatabase.driver``."""
        if not self.transport_secure:
            return {}
        if self.trust_policy is TrustPolicy.ALL:
            trust = TrustAll()
        elif self.trust_policy is TrustPolicy.CUSTOM:
            trust = TrustCustomCAs(*self.trusted_certificates)
        else:
            trust = TrustSystemCAs()
        return {"encrypted": True, "trusted_certificates": trust}


def _resolve_address(settings: BaseRelaySettings) -> str:
    if settings.mg_uri:
        return settings.mg_uri
    if settings.mg_host:
        port = f":{settings.mg_port}" if settings.mg_port else ""
        return f"{settings.mg_scheme}://{settings.mg_host}{port}"
    return ""


def _resolve_trust(
    scheme: str, explicit: str
) -> tuple[TrustPolicy, tuple[str, ...]]:
    """Explicit MG_TRUST wins; otherwise ``+ssc`` means accept-all."""
    explicit = explicit.strip()
    if explicit == TRUST_ALL_CERTIFICATES:
        return TrustPolicy.ALL, ()
    if explicit == TRUST_SYSTEM_CA_SIGNED_CERTIFICATES:
        return TrustPolicy.SYSTEM_CA, ()
    if explicit:
        paths = tuple(p.strip() for p in explicit.split(",") if p.strip())
        if not paths:
            raise ConfigurationError(
                "MG_TRUST must name a trust strategy or CA certificate file(s)."
            )
        return TrustPolicy.CUSTOM, paths
    if "+ssc" in scheme:
        return TrustPolicy.ALL, ()
    return TrustPolicy.SYSTEM_CA, ()


def resolve_connection_config(settings: BaseRelaySettings) -> ConnectionConfig:
    """Build a ConnectionConfig from settings or fail fast.

    Args:
        settings: Relay settings (normally read from the environment).

    Returns:
        The resolved ConnectionConfig.

    Raises:
        ConfigurationError: Address, user or password missing, or still
            holding a placeholder value.
    """
    address = _resolve_address(settings)
    if not address or PLACEHOLDER_HOST in address:
        raise ConfigurationError(
            "Set MG_URI or MG_HOST/MG_PORT environment variables before starting the relay."
        )
    if "://" not in address:
        raise ConfigurationError(
            f"Connection address must include a scheme, e.g. bolt+ssc://host:7687 (got {address!r})."
        )
    if not settings.mg_user:
        raise ConfigurationError("MG_USER environment variable must be provided.")
    if not settings.mg_pass or settings.mg_pass == PLACEHOLDER_PASSWORD:
        raise ConfigurationError("MG_PASS environment variable must be provided.")

    scheme = address.partition("://")[0]
    trust_policy, certificates = _resolve_trust(scheme, settings.mg_trust)

    config = ConnectionConfig(
        target_address=address,
        transport_secure="+s" in scheme,
        trust_policy=trust_policy,
        credentials=Credentials(settings.mg_user, settings.mg_pass),
        database=settings.mg_database or None,
        trusted_certificates=certificates,
    )

    if config.transport_secure and config.trust_policy is TrustPolicy.ALL:
        logger.warning(
            "TLS certificate validation is disabled for %s (trust all certificates)",
            config.banner_target,
        )
    return config
