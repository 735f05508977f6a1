"""
Unit tests for connection config resolution.

Pure functions over settings; nothing here touches the network.
"""

import logging

import pytest
from neo4j import TrustAll, TrustCustomCAs, TrustSystemCAs

from mg_relay.shared.database import TrustPolicy, resolve_connection_config
from mg_relay.shared.exceptions import ConfigurationError

from conftest import make_settings


class TestAddressResolution:
    def test_explicit_uri_used_verbatim(self):
        config = resolve_connection_config(
            make_settings(mg_uri="neo4j+s://graph.example.com:7999", mg_host="ignored")
        )
        assert config.target_address == "neo4j+s://graph.example.com:7999"

    def test_host_synthesized_with_default_scheme_and_port(self):
        config = resolve_connection_config(make_settings(mg_uri="", mg_host="memgraph"))
        assert config.target_address == "bolt+ssc://memgraph:7687"

    def test_host_with_custom_scheme_and_port(self):
        config = resolve_connection_config(
            make_settings(mg_uri="", mg_host="memgraph", mg_scheme="bolt", mg_port="7688")
        )
        assert config.target_address == "bolt://memgraph:7688"

    def test_empty_port_is_omitted(self):
        config = resolve_connection_config(
            make_settings(mg_uri="", mg_host="memgraph", mg_port="")
        )
        assert config.target_address == "bolt+ssc://memgraph"

    def test_no_uri_and_no_host_fails(self):
        with pytest.raises(ConfigurationError, match="MG_URI or MG_HOST"):
            resolve_connection_config(make_settings(mg_uri="", mg_host=""))

    @pytest.mark.parametrize(
        "overrides",
        [
            {"mg_uri": "bolt+ssc://YOUR_HOST:7687"},
            {"mg_uri": "", "mg_host": "YOUR_HOST"},
        ],
    )
    def test_placeholder_host_fails(self, overrides):
        with pytest.raises(ConfigurationError):
            resolve_connection_config(make_settings(**overrides))

    def test_address_without_scheme_fails(self):
        with pytest.raises(ConfigurationError, match="scheme"):
            resolve_connection_config(make_settings(mg_uri="memgraph:7687"))


class TestCredentials:
    def test_missing_user_fails(self):
        with pytest.raises(ConfigurationError, match="MG_USER"):
            resolve_connection_config(make_settings(mg_user=""))

    @pytest.mark.parametrize("password", ["", "change-me"])
    def test_missing_or_placeholder_password_fails(self, password):
        with pytest.raises(ConfigurationError, match="MG_PASS"):
            resolve_connection_config(make_settings(mg_pass=password))

    def test_password_not_in_repr(self):
        config = resolve_connection_config(make_settings(mg_pass="hunter2"))
        assert "hunter2" not in repr(config)
        assert config.auth == ("relay", "hunter2")

    def test_database_name_optional(self):
        assert resolve_connection_config(make_settings()).database is None
        config = resolve_connection_config(make_settings(mg_database="memgraph"))
        assert config.database == "memgraph"


class TestTransportSecurity:
    def test_plain_bolt_is_not_secure(self):
        config = resolve_connection_config(make_settings(mg_uri="bolt://db:7687"))
        assert config.transport_secure is False
        assert config.trust_policy is TrustPolicy.SYSTEM_CA
        assert config.driver_options() == {}

    def test_ssc_scheme_trusts_all_certificates(self, caplog):
        with caplog.at_level(logging.WARNING):
            config = resolve_connection_config(make_settings(mg_uri="bolt+ssc://db:7687"))
        assert config.transport_secure is True
        assert config.trust_policy is TrustPolicy.ALL
        assert "certificate validation is disabled" in caplog.text

    def test_s_scheme_uses_system_cas(self):
        config = resolve_connection_config(make_settings(mg_uri="neo4j+s://db:7687"))
        assert config.transport_secure is True
        assert config.trust_policy is TrustPolicy.SYSTEM_CA

    def test_explicit_trust_overrides_ssc(self):
        config = resolve_connection_config(
            make_settings(
                mg_uri="bolt+ssc://db:7687",
                mg_trust="TRUST_SYSTEM_CA_SIGNED_CERTIFICATES",
            )
        )
        assert config.trust_policy is TrustPolicy.SYSTEM_CA

    def test_explicit_trust_all(self):
        config = resolve_connection_config(
            make_settings(mg_uri="bolt+s://db:7687", mg_trust="TRUST_ALL_CERTIFICATES")
        )
        assert config.trust_policy is TrustPolicy.ALL

    def test_explicit_trust_ca_paths(self):
        config = resolve_connection_config(
            make_settings(mg_uri="bolt+s://db:7687", mg_trust="/etc/ca/a.pem, /etc/ca/b.pem")
        )
        assert config.trust_policy is TrustPolicy.CUSTOM
        assert config.trusted_certificates == ("/etc/ca/a.pem", "/etc/ca/b.pem")

    def test_blank_trust_list_fails(self):
        with pytest.raises(ConfigurationError, match="MG_TRUST"):
            resolve_connection_config(make_settings(mg_trust=" , "))


class TestDriverTranslation:
    def test_secure_suffix_stripped_from_driver_uri(self):
        config = resolve_connection_config(make_settings(mg_uri="bolt+ssc://db:7687"))
        assert config.driver_uri == "bolt://db:7687"

    def test_plain_uri_unchanged(self):
        config = resolve_connection_config(make_settings(mg_uri="neo4j://db:7687"))
        assert config.driver_uri == "neo4j://db:7687"

    @pytest.mark.parametrize(
        "uri, trust, expected",
        [
            ("bolt+ssc://db:7687", "", TrustAll),
            ("bolt+s://db:7687", "", TrustSystemCAs),
            ("bolt+s://db:7687", "/etc/ca.pem", TrustCustomCAs),
        ],
    )
    def test_driver_options(self, uri, trust, expected):
        config = resolve_connection_config(make_settings(mg_uri=uri, mg_trust=trust))
        options = config.driver_options()
        assert options["encrypted"] is True
        assert isinstance(options["trusted_certificates"], expected)

    def test_banner_target_strips_scheme_and_credentials(self):
        config = resolve_connection_config(
            make_settings(mg_uri="bolt+ssc://admin:pw@db.internal:7687")
        )
        assert config.banner_target == "db.internal:7687"
