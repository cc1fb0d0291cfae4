from __future__ import annotations

import json
from typing import Any, Callable, Iterator, Optional

import httpx
import pytest

from roer.spinnaker.client import SpinnakerClient
from roer.spinnaker.config import ClientConfig

GATE_URL = "https://gate.example.com"


class FakeGate:
    """Route table for ``httpx.MockTransport``.

    Responses queued for a route are served in order; the last one repeats.
    Requests to unknown routes fail the test.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[tuple[int, bytes]]] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        status: int = 200,
        json_body: Any = None,
        content: bytes = b"",
    ) -> None:
        if json_body is not None:
            content = json.dumps(json_body).encode("utf-8")
        self.routes.setdefault((method, path), []).append((status, content))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            raise AssertionError(f"unexpected request {request.method} {request.url}")
        status, content = queue.pop(0) if len(queue) > 1 else queue[0]
        return httpx.Response(status, content=content)

    def paths(self) -> list[tuple[str, str]]:
        return [(request.method, request.url.path) for request in self.requests]

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)

    def build_client(self, config: ClientConfig) -> SpinnakerClient:
        http_client = httpx.Client(transport=httpx.MockTransport(self.handler))
        return SpinnakerClient.from_config(config, http_client=http_client)


@pytest.fixture
def gate() -> FakeGate:
    return FakeGate()


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(endpoint=GATE_URL)


@pytest.fixture
def spinnaker_client(gate: FakeGate, client_config: ClientConfig) -> Iterator[SpinnakerClient]:
    client = gate.build_client(client_config)
    yield client
    client.close()


@pytest.fixture
def make_execution() -> Callable[..., dict[str, Any]]:
    """Build an execution payload as gate returns it."""

    def _make(
        status: str = "RUNNING",
        end_time: int = 0,
        variables: Optional[list[dict[str, Any]]] = None,
        **extra: Any,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": "01HTASK",
            "name": "Create Application: myapp",
            "application": "myapp",
            "status": status,
            "buildTime": 1700000000000,
            "startTime": 1700000000100,
            "endTime": end_time,
            "steps": [],
            "variables": variables or [],
        }
        payload.update(extra)
        return payload

    return _make


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point ``Path.home()`` at a temp dir and clear connection env vars."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for name in (
        "SPINNAKER_API",
        "SPINNAKER_CLIENT_CERT",
        "SPINNAKER_CLIENT_KEY",
        "SPINNAKER_API_SESSION",
        "SPINNAKER_IAP_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
    return home


@pytest.fixture
def cli_gate(gate: FakeGate, isolated_home, monkeypatch) -> FakeGate:
    """Serve CLI commands from ``gate`` instead of a real server."""
    monkeypatch.setenv("SPINNAKER_API", GATE_URL)
    monkeypatch.setattr("roer.cli.helpers.create_client", gate.build_client)
    return gate
