"""Typed async client for the RealTimeTrains REST API."""

from .config import DEFAULT_ROOT_URL, AuthPolicy, RttSettings
from .errors import (
    AuthenticationFailed,
    DecodeError,
    EmptyLocation,
    InvalidLocation,
    OriginEqualsDestination,
    RttError,
    TransportError,
    UnexpectedStatus,
)
from .models import (
    Lineup,
    LineupFilter,
    LocationContainer,
    LocationDetail,
    LocationDetailHeader,
    Pair,
    Service,
    ServiceType,
)
from .rtt_api import RailDataApi, RttClient, create_rtt_client

__all__ = [
    "DEFAULT_ROOT_URL",
    "AuthPolicy",
    "AuthenticationFailed",
    "DecodeError",
    "EmptyLocation",
    "InvalidLocation",
    "Lineup",
    "LineupFilter",
    "LocationContainer",
    "LocationDetail",
    "LocationDetailHeader",
    "OriginEqualsDestination",
    "Pair",
    "RailDataApi",
    "RttClient",
    "RttError",
    "RttSettings",
    "Service",
    "ServiceType",
    "TransportError",
    "UnexpectedStatus",
    "create_rtt_client",
]
