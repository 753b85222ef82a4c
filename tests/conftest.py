"""Shared fixtures for the RealTimeTrains client tests."""

import base64
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import pytest

from rtt_client import RttClient

FIXTURES = Path(__file__).parent / "fixtures"

USERNAME = "username"
PASSWORD = "password"
ROOT_URL = "https://rtt.test/api/v1/json/"
EXPECTED_AUTH = "Basic " + base64.b64encode(f"{USERNAME}:{PASSWORD}".encode()).decode()


def load_fixture(name: str) -> dict[str, Any]:
    return json.loads((FIXTURES / name).read_text())


@pytest.fixture
def lineup_payload() -> dict[str, Any]:
    return load_fixture("lineup.json")


@pytest.fixture
def service_payload() -> dict[str, Any]:
    return load_fixture("service.json")


def mock_api(
    lineup: dict[str, Any],
    service: dict[str, Any],
    seen: list[httpx.Request],
    route: dict[str, Any] | None = None,
) -> Callable[[httpx.Request], httpx.Response]:
    """Fake RTT server answering by endpoint and number of path segments."""

    prefix = "/api/v1/json/"
    search_shapes = {1, 4, 5}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.headers.get("Authorization") != EXPECTED_AUTH:
            return httpx.Response(401, text="Unauthorized")

        if not request.url.path.startswith(prefix):
            return httpx.Response(404)
        command, *params = request.url.path[len(prefix):].split("/")
        if command == "search" and len(params) == 3 and params[1] == "to":
            return httpx.Response(200, json=route or lineup)
        if command == "search" and len(params) in search_shapes:
            return httpx.Response(200, json=lineup)
        if command == "service" and len(params) == 5:
            return httpx.Response(200, json=service)
        return httpx.Response(400, text=f"Request not recognised: {params}")

    return handler


@pytest.fixture
def route_payload() -> dict[str, Any]:
    return load_fixture("lineup_between.json")


@pytest.fixture
def requests_seen() -> list[httpx.Request]:
    return []


@pytest.fixture
def http_client(
    lineup_payload: dict[str, Any],
    service_payload: dict[str, Any],
    route_payload: dict[str, Any],
    requests_seen: list[httpx.Request],
) -> httpx.AsyncClient:
    transport = httpx.MockTransport(
        mock_api(lineup_payload, service_payload, requests_seen, route_payload)
    )
    return httpx.AsyncClient(transport=transport)


@pytest.fixture
def rtt_client(http_client: httpx.AsyncClient) -> RttClient:
    return RttClient(USERNAME, PASSWORD, root_url=ROOT_URL, http_client=http_client)
