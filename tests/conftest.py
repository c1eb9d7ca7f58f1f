from __future__ import annotations

import os
import random
from typing import Any

import pytest

try:
    from pytest_socket import disable_socket, enable_socket, socket_allow_hosts
except Exception:  # pragma: no cover - pytest_socket optional in some environments
    disable_socket = enable_socket = None  # type: ignore[assignment]
    socket_allow_hosts = None  # type: ignore[assignment]

from hostedsearch import SearchClient

JSON_HEADERS = {"Content-Type": "application/json; charset=UTF-8"}
HOSTS = ["host-1.search.test", "host-2.search.test", "host-3.search.test"]


@pytest.fixture(autouse=True)
def _disable_network(request: pytest.FixtureRequest):
    """Forbid real network access; HTTP is simulated with requests-mock."""

    if os.getenv("PYTEST_ALLOW_NETWORK", "0") == "1" or not (
        disable_socket and enable_socket
    ):
        yield
        return

    hosts = ["127.0.0.1", "::1"] if socket_allow_hosts else None
    if hosts:
        socket_allow_hosts(hosts)
    disable_socket()
    try:
        yield
    finally:
        enable_socket()


@pytest.fixture
def client() -> SearchClient:
    return SearchClient(
        "ApplicationID",
        "API-Key",
        HOSTS,
        rng=random.Random(7),
        poll_interval=0,
    )


@pytest.fixture
def json_response():
    """Build response entries for ``requests_mock`` response lists."""

    def _build(payload: Any, status_code: int = 200) -> dict:
        return {"json": payload, "status_code": status_code, "headers": JSON_HEADERS}

    return _build
