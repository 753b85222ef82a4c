from __future__ import annotations

import enum
import functools
import types
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Mapping, Self, get_args, get_origin, get_type_hints

from .errors import DecodeError


class ServiceType(str, enum.Enum):
    """Kind of vehicle running a service. Values the API adds later decode as plain strings."""

    BUS = "bus"
    SHIP = "ship"
    TRAIN = "train"


def _json(key: str, default: Any = None, *, factory: Any = None) -> Any:
    """Declare a field stored under ``key`` in the API's JSON payloads."""

    if factory is not None:
        return field(default_factory=factory, metadata={"json": key})
    return field(default=default, metadata={"json": key})


class _JsonModel:
    """Mapping between frozen dataclasses and the API's camel-case JSON objects.

    Missing and ``null`` keys decode to the field default, unknown keys are
    ignored, and :meth:`to_dict` leaves out zero values so that decoding its
    output yields an equal object.
    """

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        return _decode_object(cls, data)

    def to_dict(self) -> dict[str, Any]:
        return _encode_object(self)


@dataclass(frozen=True)
class Pair(_JsonModel):
    """Origin or destination of a service."""

    tiploc: str = _json("tiploc", "")
    description: str = _json("description", "")
    working_time: str = _json("workingTime", "")
    public_time: str = _json("publicTime", "")


@dataclass(frozen=True)
class LocationDetailHeader(_JsonModel):
    name: str = _json("name", "")
    crs: str = _json("crs", "")
    tiploc: str = _json("tiploc", "")


@dataclass(frozen=True)
class LocationDetail(_JsonModel):
    """A location a service calls at or passes through."""

    realtime_activated: bool = _json("realtimeActivated", False)
    tiploc: str = _json("tiploc", "")
    crs: str = _json("crs", "")
    description: str = _json("description", "")

    wtt_booked_arrival: str = _json("wttBookedArrival", "")
    wtt_booked_departure: str = _json("wttBookedDeparture", "")
    wtt_booked_pass: str = _json("wttBookedPass", "")
    gbtt_booked_arrival: str = _json("gbttBookedArrival", "")
    gbtt_booked_arrival_next_day: bool = _json("gbttBookedArrivalNextDay", False)
    gbtt_booked_departure: str = _json("gbttBookedDeparture", "")
    gbtt_booked_departure_next_day: bool = _json("gbttBookedDepartureNextDay", False)

    origin: tuple[Pair, ...] = _json("origin", ())
    destination: tuple[Pair, ...] = _json("destination", ())
    is_call: bool = _json("isCall", False)
    is_public_call: bool = _json("isPublicCall", False)

    realtime_arrival: str = _json("realtimeArrival", "")
    realtime_arrival_actual: bool = _json("realtimeArrivalActual", False)
    realtime_arrival_no_report: bool = _json("realtimeArrivalNoReport", False)
    realtime_arrival_next_day: bool = _json("realtimeArrivalNextDay", False)

    realtime_departure: str = _json("realtimeDeparture", "")
    realtime_departure_actual: bool = _json("realtimeDepartureActual", False)
    realtime_departure_no_report: bool = _json("realtimeDepartureNoReport", False)
    realtime_departure_next_day: bool = _json("realtimeDepartureNextDay", False)

    realtime_pass: str = _json("realtimePass", "")
    realtime_pass_actual: bool = _json("realtimePassActual", False)
    realtime_pass_no_report: bool = _json("realtimePassNoReport", False)

    # lateness in minutes, negative when early
    realtime_gbtt_arrival_lateness: int = _json("realtimeGbttArrivalLateness", 0)
    realtime_gbtt_departure_lateness: int = _json("realtimeGbttDepartureLateness", 0)
    realtime_wtt_arrival_lateness: int = _json("realtimeWttArrivalLateness", 0)
    realtime_wtt_departure_lateness: int = _json("realtimeWttDepartureLateness", 0)

    platform: str = _json("platform", "")
    platform_confirmed: bool = _json("platformConfirmed", False)
    platform_changed: bool = _json("platformChanged", False)
    line: str = _json("line", "")
    line_confirmed: bool = _json("lineConfirmed", False)
    path: str = _json("path", "")
    path_confirmed: bool = _json("pathConfirmed", False)
    cancel_reason_code: str = _json("cancelReasonCode", "")
    cancel_reason_short_text: str = _json("cancelReasonShortText", "")
    cancel_reason_long_text: str = _json("cancelReasonLongText", "")
    display_as: str = _json("displayAs", "")
    service_location: str = _json("serviceLocation", "")


@dataclass(frozen=True)
class LocationContainer(_JsonModel):
    """Summary of one service in a lineup, seen from the queried location."""

    location_detail: LocationDetail = _json("locationDetail", factory=LocationDetail)
    service_uid: str = _json("serviceUid", "")
    run_date: str = _json("runDate", "")
    train_identity: str = _json("trainIdentity", "")
    running_identity: str = _json("runningIdentity", "")
    atoc_code: str = _json("atocCode", "")
    atoc_name: str = _json("atocName", "")
    service_type: ServiceType | str = _json("serviceType", "")
    is_passenger: bool = _json("isPassenger", False)
    planned_cancel: bool = _json("plannedCancel", False)
    origin: tuple[Pair, ...] = _json("origin", ())
    destination: tuple[Pair, ...] = _json("destination", ())
    countdown_minutes: int = _json("countdownMinutes", 0)


@dataclass(frozen=True)
class LineupFilter(_JsonModel):
    """Route restriction echoed back by origin-to-destination searches."""

    origin: LocationDetailHeader = _json("origin", factory=LocationDetailHeader)
    destination: LocationDetailHeader = _json("destination", factory=LocationDetailHeader)


@dataclass(frozen=True)
class Lineup(_JsonModel):
    """Services departing or passing a location, optionally filtered to a destination."""

    location: LocationDetailHeader = _json("location", factory=LocationDetailHeader)
    filter: LineupFilter = _json("filter", factory=LineupFilter)
    services: tuple[LocationContainer, ...] = _json("services", ())


@dataclass(frozen=True)
class Service(_JsonModel):
    """A single scheduled run with its full stopping pattern."""

    service_uid: str = _json("serviceUid", "")
    run_date: str = _json("runDate", "")
    service_type: ServiceType | str = _json("serviceType", "")
    is_passenger: bool = _json("isPassenger", False)
    train_identity: str = _json("trainIdentity", "")
    power_type: str = _json("powerType", "")
    train_class: str = _json("trainClass", "")
    sleeper: str = _json("sleeper", "")
    atoc_code: str = _json("atocCode", "")
    atoc_name: str = _json("atocName", "")
    performance_monitored: bool = _json("performanceMonitored", False)
    origin: tuple[Pair, ...] = _json("origin", ())
    destination: tuple[Pair, ...] = _json("destination", ())
    locations: tuple[LocationDetail, ...] = _json("locations", ())
    realtime_activated: bool = _json("realtimeActivated", False)
    running_identity: str = _json("runningIdentity", "")
    planned_cancel: bool = _json("plannedCancel", False)

    def is_fresher_than(self, other: Service) -> bool:
        """Return whether this snapshot carries different, and so newer, data than ``other``."""

        return self != other


@functools.cache
def _field_types(cls: type) -> dict[str, Any]:
    return get_type_hints(cls)


def _decode_object(cls: type, data: Any) -> Any:
    if not isinstance(data, Mapping):
        raise DecodeError(
            f"Expected a JSON object for {cls.__name__}, got {type(data).__name__}"
        )

    types = _field_types(cls)
    values: dict[str, Any] = {}
    for item in fields(cls):
        key = item.metadata["json"]
        raw = data.get(key)
        if raw is None:
            continue
        values[item.name] = _decode_value(types[item.name], raw, key)
    return cls(**values)


def _decode_value(kind: Any, raw: Any, key: str) -> Any:
    if get_origin(kind) is tuple:
        if not isinstance(raw, list):
            raise DecodeError(f"Expected a JSON array for '{key}', got {type(raw).__name__}")
        item_kind = get_args(kind)[0]
        return tuple(_decode_value(item_kind, entry, key) for entry in raw)
    if is_dataclass(kind):
        return _decode_object(kind, raw)
    if isinstance(kind, types.UnionType):
        return _decode_enum(kind, raw, key)

    # bool is a subclass of int, so integers must be checked explicitly
    if kind is int and (isinstance(raw, bool) or not isinstance(raw, int)):
        raise DecodeError(f"Expected an integer for '{key}', got {raw!r}")
    if not isinstance(raw, kind):
        raise DecodeError(f"Expected {kind.__name__} for '{key}', got {raw!r}")
    return raw


def _decode_enum(kind: Any, raw: Any, key: str) -> Any:
    if not isinstance(raw, str):
        raise DecodeError(f"Expected str for '{key}', got {raw!r}")
    members = next(arg for arg in get_args(kind) if issubclass(arg, enum.Enum))
    try:
        return members(raw)
    except ValueError:
        return raw


def _encode_object(obj: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for item in fields(obj):
        value = _encode_value(getattr(obj, item.name))
        if value:
            payload[item.metadata["json"]] = value
    return payload


def _encode_value(value: Any) -> Any:
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, tuple):
        return [_encode_value(entry) for entry in value]
    if is_dataclass(value):
        return _encode_object(value)
    return value
