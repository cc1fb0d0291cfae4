"""Client configuration for the Spinnaker API."""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import truststore

from .errors import ClientConfigError

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_TIMEOUT = 10.0
SESSION_COOKIE_NAME = "SESSION"


@dataclass(frozen=True)
class ClientConfig:
    """Everything needed to build an authenticated HTTP transport.

    ``bearer_token`` (an IAP token) is attached to every request made through
    a transport built from this config; ``session`` seeds the cookie jar with
    a gate ``SESSION`` cookie.
    """

    endpoint: str
    cert_path: Optional[Path] = None
    key_path: Optional[Path] = None
    session: Optional[str] = None
    bearer_token: Optional[str] = None
    fiat_user: Optional[str] = None
    fiat_pass: Optional[str] = None
    client_timeout: float = DEFAULT_CLIENT_TIMEOUT
    insecure: bool = False

    @property
    def has_client_cert(self) -> bool:
        return self.cert_path is not None and self.key_path is not None

    @property
    def has_fiat_credentials(self) -> bool:
        return bool(self.fiat_user and self.fiat_pass)

    def validate(self) -> "ClientConfig":
        """Raise ``ClientConfigError`` for unusable settings, else return self."""
        if not self.endpoint or not self.endpoint.strip():
            raise ClientConfigError("SPINNAKER_API must be set")
        if not self.endpoint.startswith(("http://", "https://")):
            raise ClientConfigError(f"endpoint must be an http(s) URL, got '{self.endpoint}'")
        if (self.cert_path is None) != (self.key_path is None):
            raise ClientConfigError("certPath and keyPath must be defined together")
        for name, path in (("certPath", self.cert_path), ("keyPath", self.key_path)):
            if path is not None and not path.is_file():
                raise ClientConfigError(f"{name} file does not exist: {path}")
        if self.client_timeout <= 0:
            raise ClientConfigError("client timeout must be greater than zero")
        if bool(self.fiat_user) != bool(self.fiat_pass):
            raise ClientConfigError("fiat user and password must be given together")
        return self

    @property
    def base_url(self) -> str:
        return self.endpoint.rstrip("/")


def build_ssl_context(config: ClientConfig) -> ssl.SSLContext:
    """Build the TLS context: system trust store plus optional client cert."""
    if config.insecure:
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    else:
        context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

    if config.has_client_cert:
        logger.debug("Configuring TLS with pem cert/key pair")
        try:
            context.minimum_version = ssl.TLSVersion.TLSv1_2
            context.load_cert_chain(certfile=str(config.cert_path), keyfile=str(config.key_path))
        except (OSError, ssl.SSLError) as exc:
            raise ClientConfigError(f"loading x509 keypair: {exc}") from exc
    return context


__all__ = ["DEFAULT_CLIENT_TIMEOUT", "SESSION_COOKIE_NAME", "ClientConfig", "build_ssl_context"]
