"""Tests for ClientConfig validation and TLS setup."""

from __future__ import annotations

import ssl

import pytest
import truststore

from roer.spinnaker.config import ClientConfig, build_ssl_context
from roer.spinnaker.errors import ClientConfigError
from roer.spinnaker.http import HTTPTransport


@pytest.fixture
def pem_pair(tmp_path):
    cert = tmp_path / "client.crt"
    key = tmp_path / "client.key"
    cert.write_text("not a certificate", encoding="utf-8")
    key.write_text("not a key", encoding="utf-8")
    return cert, key


class TestValidate:
    def test_valid_config_is_returned(self):
        config = ClientConfig(endpoint="https://gate.example.com/")

        assert config.validate() is config
        assert config.base_url == "https://gate.example.com"

    @pytest.mark.parametrize("endpoint", ["", "   "])
    def test_endpoint_is_required(self, endpoint):
        with pytest.raises(ClientConfigError, match="SPINNAKER_API must be set"):
            ClientConfig(endpoint=endpoint).validate()

    def test_endpoint_must_be_http(self):
        with pytest.raises(ClientConfigError, match="http"):
            ClientConfig(endpoint="gate.example.com").validate()

    def test_cert_and_key_go_together(self, pem_pair):
        cert, _ = pem_pair

        with pytest.raises(ClientConfigError, match="must be defined together"):
            ClientConfig(endpoint="https://gate", cert_path=cert).validate()

    def test_cert_files_must_exist(self, tmp_path, pem_pair):
        _, key = pem_pair

        with pytest.raises(ClientConfigError, match="certPath file does not exist"):
            ClientConfig(endpoint="https://gate", cert_path=tmp_path / "missing.crt", key_path=key).validate()

    def test_client_timeout_must_be_positive(self):
        with pytest.raises(ClientConfigError, match="timeout"):
            ClientConfig(endpoint="https://gate", client_timeout=0).validate()

    def test_fiat_credentials_go_together(self):
        with pytest.raises(ClientConfigError, match="fiat"):
            ClientConfig(endpoint="https://gate", fiat_user="bob").validate()

        assert ClientConfig(endpoint="https://gate", fiat_user="bob", fiat_pass="pw").has_fiat_credentials


class TestSSLContext:
    def test_default_uses_system_trust_store(self):
        context = build_ssl_context(ClientConfig(endpoint="https://gate"))

        assert isinstance(context, truststore.SSLContext)

    def test_insecure_disables_verification(self):
        context = build_ssl_context(ClientConfig(endpoint="https://gate", insecure=True))

        assert context.verify_mode == ssl.CERT_NONE
        assert context.check_hostname is False

    def test_unloadable_keypair_is_a_config_error(self, pem_pair):
        cert, key = pem_pair
        config = ClientConfig(endpoint="https://gate", cert_path=cert, key_path=key, insecure=True)

        with pytest.raises(ClientConfigError, match="loading x509 keypair"):
            build_ssl_context(config)


class TestTransportClient:
    def test_session_cookie_and_timeout_seed_the_client(self):
        config = ClientConfig(endpoint="https://gate", session="abc123", client_timeout=7)

        with HTTPTransport(config) as transport:
            assert transport.client.cookies.get("SESSION") == "abc123"
            assert transport.client.timeout.read == 7

    def test_client_is_built_once(self):
        with HTTPTransport(ClientConfig(endpoint="https://gate")) as transport:
            assert transport.client is transport.client
