"""Relative paths for the RealTimeTrains search and service endpoints.

Every builder validates its inputs before producing a path, so an invalid
query never reaches the network. Paths are relative and are combined with
a base endpoint through :func:`resolve`.
"""

from __future__ import annotations

import datetime as dt
import posixpath
from urllib.parse import quote, urlsplit, urlunsplit

from .errors import EmptyLocation, InvalidLocation, OriginEqualsDestination


def resolve(base: str, path: str) -> str:
    """Join ``path`` onto the path of ``base``, keeping its query and fragment."""

    parts = urlsplit(base)
    base_path = parts.path or "/"
    if not base_path.endswith("/"):
        base_path += "/"
    joined = posixpath.join(base_path, path.lstrip("/"))
    return urlunsplit(parts._replace(path=joined))


def departures(origin: str) -> str:
    if not origin:
        raise EmptyLocation()
    return _segment(origin)


def departures_between(origin: str, destination: str) -> str:
    if not origin or not destination:
        raise EmptyLocation()
    if origin == destination:
        raise OriginEqualsDestination(origin)
    return "/".join([_segment(origin), "to", _segment(destination)])


def services_on_date(origin: str, date: dt.date) -> str:
    """Services calling at ``origin`` on a given day."""

    if not origin:
        raise EmptyLocation()
    return "/".join([_segment(origin), _date_path(date)])


def services_at_time(origin: str, when: dt.datetime) -> str:
    """Services calling at ``origin`` around a given time of day."""

    if not origin:
        raise EmptyLocation()
    return "/".join([_segment(origin), _date_path(when), _time_path(when)])


def service_info(service_id: str, when: dt.datetime) -> str:
    if not service_id:
        raise EmptyLocation()
    return "/".join([_segment(service_id), _date_path(when), _time_path(when)])


def _segment(value: str) -> str:
    # quoting leaves dots alone, and "." or ".." would be resolved as dot segments
    if value in (".", ".."):
        raise InvalidLocation(value)
    return quote(value, safe="")


def _date_path(date: dt.date) -> str:
    return f"{date.year}/{date.month:02d}/{date.day:02d}"


def _time_path(when: dt.datetime) -> str:
    return f"{when.hour:02d}{when.minute:02d}"
