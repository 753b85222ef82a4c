"""Tests for the RealTimeTrains HTTP client."""

import datetime as dt
import inspect

import httpx
import pytest
from conftest import PASSWORD, ROOT_URL, USERNAME

from rtt_client import (
    AuthenticationFailed,
    AuthPolicy,
    DecodeError,
    EmptyLocation,
    InvalidLocation,
    Lineup,
    LineupFilter,
    LocationDetailHeader,
    OriginEqualsDestination,
    RailDataApi,
    RttClient,
    RttSettings,
    Service,
    TransportError,
    UnexpectedStatus,
    create_rtt_client,
)

WHEN = dt.datetime(2020, 2, 3, 4, 5)


def client_for(handler, **kwargs) -> RttClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RttClient(
        kwargs.pop("username", USERNAME),
        kwargs.pop("password", PASSWORD),
        root_url=ROOT_URL,
        http_client=http_client,
        **kwargs,
    )


def test_endpoints_derived_from_root():
    client = RttClient(USERNAME, PASSWORD, root_url="https://api.rtt.io/api/v1/json")
    assert client.search_endpoint == "https://api.rtt.io/api/v1/json/search/"
    assert client.service_endpoint == "https://api.rtt.io/api/v1/json/service/"


def test_default_root():
    client = RttClient(USERNAME, PASSWORD)
    assert client.search_endpoint == "https://api.rtt.io/api/v1/json/search/"


RAIL_DATA_OPERATIONS = [
    "get_departures",
    "get_departures_between",
    "get_services_on_date",
    "get_services_at_time",
    "get_service_info",
]


@pytest.mark.parametrize("name", RAIL_DATA_OPERATIONS)
def test_client_implements_rail_data_operation(name):
    declared = getattr(RailDataApi, name)
    implemented = getattr(RttClient, name)

    assert inspect.iscoroutinefunction(implemented)
    assert list(inspect.signature(implemented).parameters) == list(
        inspect.signature(declared).parameters
    )


@pytest.mark.asyncio
async def test_get_departures(rtt_client, requests_seen, lineup_payload):
    lineup = await rtt_client.get_departures("MAN")

    assert isinstance(lineup, Lineup)
    assert lineup.location.name == lineup_payload["location"]["name"]
    assert [s.service_uid for s in lineup.services] == [
        s["serviceUid"] for s in lineup_payload["services"]
    ]
    assert str(requests_seen[0].url) == ROOT_URL + "search/MAN"
    assert requests_seen[0].method == "GET"
    assert requests_seen[0].content == b""


@pytest.mark.asyncio
async def test_get_departures_between(rtt_client, requests_seen):
    lineup = await rtt_client.get_departures_between("MAN", "BHM")

    assert lineup.location.crs == "MAN"
    assert lineup.filter == LineupFilter(
        destination=LocationDetailHeader(
            name="Birmingham New Street", crs="BHM", tiploc="BHAMNWS"
        )
    )
    assert [service.service_uid for service in lineup.services] == ["P12345"]
    assert str(requests_seen[0].url) == ROOT_URL + "search/MAN/to/BHM"


@pytest.mark.asyncio
async def test_get_services_on_date(rtt_client, requests_seen):
    await rtt_client.get_services_on_date("MAN", dt.date(2020, 2, 3))
    assert str(requests_seen[0].url) == ROOT_URL + "search/MAN/2020/02/03"


@pytest.mark.asyncio
async def test_get_services_at_time(rtt_client, requests_seen):
    await rtt_client.get_services_at_time("MAN", WHEN)
    assert str(requests_seen[0].url) == ROOT_URL + "search/MAN/2020/02/03/0405"


@pytest.mark.asyncio
async def test_get_service_info(rtt_client, requests_seen):
    service = await rtt_client.get_service_info("W16631", WHEN)

    assert isinstance(service, Service)
    assert service.service_uid == "Q13773"
    assert len(service.locations) == 3
    assert str(requests_seen[0].url) == ROOT_URL + "service/W16631/2020/02/03/0405"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("method", "args", "error"),
    [
        ("get_departures", ("",), EmptyLocation),
        ("get_departures_between", ("MAN", ""), EmptyLocation),
        ("get_departures_between", ("MAN", "MAN"), OriginEqualsDestination),
        ("get_services_on_date", ("", WHEN.date()), EmptyLocation),
        ("get_services_at_time", ("", WHEN), EmptyLocation),
        ("get_service_info", ("", WHEN), EmptyLocation),
        ("get_departures", ("..",), InvalidLocation),
        ("get_departures_between", ("MAN", "."), InvalidLocation),
        ("get_service_info", ("..", WHEN), InvalidLocation),
    ],
)
async def test_invalid_input_sends_no_request(rtt_client, requests_seen, method, args, error):
    with pytest.raises(error):
        await getattr(rtt_client, method)(*args)
    assert requests_seen == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("method", "args"),
    [
        ("get_departures", ("MAN",)),
        ("get_departures_between", ("MAN", "BHM")),
        ("get_services_on_date", ("MAN", WHEN.date())),
        ("get_services_at_time", ("MAN", WHEN)),
        ("get_service_info", ("W16631", WHEN)),
    ],
)
async def test_unauthorized_raises_authentication_failed(method, args):
    def handler(request: httpx.Request) -> httpx.Response:
        # a body that would fail decoding if the client tried
        return httpx.Response(401, text="not json")

    client = client_for(handler, username="fake", password="fake")
    with pytest.raises(AuthenticationFailed):
        await getattr(client, method)(*args)


@pytest.mark.asyncio
async def test_wrong_credentials_rejected_by_server(http_client):
    client = RttClient("fake", "fake", root_url=ROOT_URL, http_client=http_client)
    with pytest.raises(AuthenticationFailed):
        await client.get_departures("MAN")


@pytest.mark.asyncio
async def test_empty_credentials_omit_authorization_header():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    client = client_for(handler, username="", password="secret")
    await client.get_departures("MAN")
    assert "Authorization" not in seen[0].headers


@pytest.mark.asyncio
async def test_always_policy_sends_authorization_header():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={})

    client = client_for(handler, username="", password="", auth_policy=AuthPolicy.ALWAYS)
    await client.get_departures("MAN")
    assert seen[0].headers["Authorization"].startswith("Basic ")


@pytest.mark.asyncio
async def test_other_error_status_raises_unexpected_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="upstream exploded")

    client = client_for(handler)
    with pytest.raises(UnexpectedStatus) as excinfo:
        await client.get_departures("MAN")
    assert excinfo.value.status_code == 500
    assert "upstream exploded" in excinfo.value.body


@pytest.mark.asyncio
async def test_non_json_body_raises_decode_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>maintenance</html>")

    client = client_for(handler)
    with pytest.raises(DecodeError) as excinfo:
        await client.get_departures("MAN")
    assert isinstance(excinfo.value.__cause__, ValueError)


@pytest.mark.asyncio
async def test_wrong_shape_raises_decode_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"services": "none"})

    client = client_for(handler)
    with pytest.raises(DecodeError):
        await client.get_departures("MAN")


@pytest.mark.asyncio
async def test_transport_error_propagates_unmodified():
    failure = httpx.ConnectError("connection refused")

    def handler(request: httpx.Request) -> httpx.Response:
        raise failure

    client = client_for(handler)
    with pytest.raises(TransportError) as excinfo:
        await client.get_departures("MAN")
    assert excinfo.value is failure


@pytest.mark.asyncio
async def test_injected_client_is_not_closed(http_client):
    async with RttClient(USERNAME, PASSWORD, http_client=http_client):
        pass
    assert not http_client.is_closed


@pytest.mark.asyncio
async def test_owned_client_is_closed():
    client = RttClient(USERNAME, PASSWORD)
    await client.close()
    assert client._client.is_closed


@pytest.mark.asyncio
async def test_create_rtt_client_uses_settings(http_client, requests_seen):
    settings = RttSettings(username=USERNAME, password=PASSWORD, base_url=ROOT_URL)
    client = create_rtt_client(settings, http_client=http_client)

    assert client.username == USERNAME
    lineup = await client.get_departures("BMH")
    assert lineup.location.tiploc == "BOMO"
    assert str(requests_seen[0].url) == ROOT_URL + "search/BMH"
