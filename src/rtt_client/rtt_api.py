from __future__ import annotations

import datetime as dt
from typing import Optional, Protocol, TypeVar

import httpx
import structlog

from . import paths
from .config import DEFAULT_ROOT_URL, DEFAULT_TIMEOUT, AuthPolicy, RttSettings
from .errors import AuthenticationFailed, DecodeError, UnexpectedStatus
from .models import Lineup, Service

logger = structlog.get_logger(__name__)

_Model = TypeVar("_Model", Lineup, Service)


class RailDataApi(Protocol):
    """Queries offered by a RealTimeTrains data source."""

    async def get_departures(self, origin: str) -> Lineup: ...

    async def get_departures_between(self, origin: str, destination: str) -> Lineup: ...

    async def get_services_on_date(self, origin: str, date: dt.date) -> Lineup: ...

    async def get_services_at_time(self, origin: str, when: dt.datetime) -> Lineup: ...

    async def get_service_info(self, service_id: str, when: dt.datetime) -> Service: ...


class RttClient:
    """Async client for the RealTimeTrains search and service endpoints.

    The ``http_client`` may be supplied by the caller, who then stays
    responsible for its timeout, TLS and proxy configuration and for closing
    it. Otherwise the client creates its own and closes it in :meth:`close`.
    """

    def __init__(
        self,
        username: str,
        password: str,
        *,
        root_url: str = DEFAULT_ROOT_URL,
        http_client: Optional[httpx.AsyncClient] = None,
        auth_policy: AuthPolicy = AuthPolicy.OMIT_IF_EMPTY,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._username = username
        self._password = password
        self._auth_policy = auth_policy
        self._search_endpoint = paths.resolve(root_url, "search/")
        self._service_endpoint = paths.resolve(root_url, "service/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Accept": "application/json"},
            follow_redirects=True,
        )

    @property
    def username(self) -> str:
        return self._username

    @property
    def search_endpoint(self) -> str:
        return self._search_endpoint

    @property
    def service_endpoint(self) -> str:
        return self._service_endpoint

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "RttClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def get_departures(self, origin: str) -> Lineup:
        """Return the services departing ``origin``."""

        url = paths.resolve(self._search_endpoint, paths.departures(origin))
        return await self._fetch(url, Lineup)

    async def get_departures_between(self, origin: str, destination: str) -> Lineup:
        """Return the services departing ``origin`` that call at ``destination``."""

        url = paths.resolve(
            self._search_endpoint, paths.departures_between(origin, destination)
        )
        return await self._fetch(url, Lineup)

    async def get_services_on_date(self, origin: str, date: dt.date) -> Lineup:
        url = paths.resolve(self._search_endpoint, paths.services_on_date(origin, date))
        return await self._fetch(url, Lineup)

    async def get_services_at_time(self, origin: str, when: dt.datetime) -> Lineup:
        url = paths.resolve(self._search_endpoint, paths.services_at_time(origin, when))
        return await self._fetch(url, Lineup)

    async def get_service_info(self, service_id: str, when: dt.datetime) -> Service:
        """Return the full stopping pattern of one service run."""

        url = paths.resolve(self._service_endpoint, paths.service_info(service_id, when))
        return await self._fetch(url, Service)

    def _auth(self) -> Optional[httpx.BasicAuth]:
        if self._auth_policy is AuthPolicy.OMIT_IF_EMPTY and not (
            self._username and self._password
        ):
            return None
        return httpx.BasicAuth(self._username, self._password)

    async def _fetch(self, url: str, model: type[_Model]) -> _Model:
        logger.debug("rtt_request", url=url)
        auth = self._auth()
        if auth is None:
            response = await self._client.get(url)
        else:
            response = await self._client.get(url, auth=auth)
        return self._decode_or_error(response, model)

    @staticmethod
    def _decode_or_error(response: httpx.Response, model: type[_Model]) -> _Model:
        if response.status_code == httpx.codes.UNAUTHORIZED:
            logger.warning("rtt_authentication_failed", url=str(response.url))
            raise AuthenticationFailed()
        if response.status_code >= 400:
            logger.error(
                "rtt_unexpected_status", url=str(response.url), status=response.status_code
            )
            raise UnexpectedStatus(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError as exc:
            snippet = response.text[:200] or "<empty body>"
            content_type = response.headers.get("content-type", "unknown")
            logger.error("rtt_decode_failed", url=str(response.url), error=str(exc))
            raise DecodeError(
                "RealTimeTrains returned a non-JSON response "
                f"(status {response.status_code}, content-type {content_type}): {snippet}"
            ) from exc

        try:
            return model.from_dict(payload)
        except DecodeError as exc:
            logger.error("rtt_decode_failed", url=str(response.url), error=str(exc))
            raise


def create_rtt_client(
    settings: RttSettings, *, http_client: Optional[httpx.AsyncClient] = None
) -> RttClient:
    """Factory helper to create an RTT client."""

    return RttClient(
        settings.username,
        settings.password,
        root_url=settings.base_url,
        http_client=http_client,
        auth_policy=settings.auth_policy,
        timeout=settings.timeout,
    )
