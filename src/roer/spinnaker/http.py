"""HTTP transport shared by every Spinnaker API call.

One ``httpx.Client`` (one connection pool, one cookie jar) is reused for all
calls of an invocation. Calls are issued and awaited sequentially; the cookie
jar relies on that.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import httpx

from .config import SESSION_COOKIE_NAME, ClientConfig, build_ssl_context
from .errors import TransportError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HTTPResponse:
    """Status code and raw body of a completed call."""

    status_code: int
    body: bytes

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")


class HTTPTransport:
    """GET / POST / DELETE primitives returning status code and raw body.

    A single attempt is made per call. Connection, TLS and timeout failures
    surface as ``TransportError``; any status code is returned to the caller
    for interpretation.
    """

    def __init__(self, config: ClientConfig, client: Optional[httpx.Client] = None):
        self.config = config
        self._client = client

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = self._build_client()
        return self._client

    def _build_client(self) -> httpx.Client:
        cookies = httpx.Cookies()
        if self.config.session:
            cookies.set(SESSION_COOKIE_NAME, self.config.session)
        return httpx.Client(
            verify=build_ssl_context(self.config),
            cookies=cookies,
            timeout=self.config.client_timeout,
        )

    def _headers(self, extra: Optional[Mapping[str, str]] = None) -> dict[str, str]:
        headers = dict(extra or {})
        if self.config.bearer_token:
            headers["Authorization"] = f"Bearer {self.config.bearer_token}"
        return headers

    def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        data: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> HTTPResponse:
        headers = {"Accept": "application/json"}
        if json is not None:
            headers["Content-Type"] = "application/json"

        try:
            response = self.client.request(
                method,
                url,
                headers=self._headers(headers),
                json=json,
                data=data,
                timeout=timeout if timeout is not None else httpx.USE_CLIENT_DEFAULT,
            )
        except httpx.TimeoutException as exc:
            raise TransportError(method, url, f"timed out ({exc})", timed_out=True) from exc
        except httpx.RequestError as exc:
            raise TransportError(method, url, str(exc) or exc.__class__.__name__) from exc

        return HTTPResponse(status_code=response.status_code, body=response.content)

    def get(self, url: str, timeout: Optional[float] = None) -> HTTPResponse:
        return self.request("GET", url, timeout=timeout)

    def post_json(self, url: str, body: Any) -> HTTPResponse:
        return self.request("POST", url, json=body)

    def post_form(self, url: str, data: Mapping[str, str]) -> HTTPResponse:
        return self.request("POST", url, data=data)

    def delete(self, url: str) -> HTTPResponse:
        return self.request("DELETE", url)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False


__all__ = ["HTTPResponse", "HTTPTransport"]
