from __future__ import annotations

import httpx

# Connection failures, timeouts and protocol errors from the transport are
# raised as-is.
TransportError = httpx.TransportError


class RttError(RuntimeError):
    """Base class for errors raised by the RealTimeTrains client."""


class EmptyLocation(RttError, ValueError):
    """Raised when an empty location or service identifier is given."""

    def __init__(self) -> None:
        super().__init__("Empty location given")


class OriginEqualsDestination(RttError, ValueError):
    """Raised when a route query uses the same origin and destination."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"Origin location is equal to destination ({location})")


class InvalidLocation(RttError, ValueError):
    """Raised when a location or service identifier would escape its endpoint path."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"Invalid location given ({location!r})")


class AuthenticationFailed(RttError):
    """Raised when the API rejects the configured credentials."""

    def __init__(self) -> None:
        super().__init__("RealTimeTrains authentication failed")


class UnexpectedStatus(RttError):
    """Raised when the API answers with an error status other than 401."""

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"RealTimeTrains error {status_code}: {body[:200]}")


class DecodeError(RttError, ValueError):
    """Raised when a response body is not JSON or does not match the expected shape."""
