from __future__ import annotations

import enum
import os
from dataclasses import dataclass
from typing import Optional, Self

DEFAULT_ROOT_URL = "https://api.rtt.io/api/v1/json/"
DEFAULT_TIMEOUT = 10.0


class AuthPolicy(str, enum.Enum):
    """When to send the HTTP basic authentication header."""

    # skip the header when the username or password is empty
    OMIT_IF_EMPTY = "omit-if-empty"
    ALWAYS = "always"


@dataclass(frozen=True)
class RttSettings:
    """Credentials and options for the RealTimeTrains API."""

    username: str
    password: str
    base_url: str = DEFAULT_ROOT_URL
    timeout: float = DEFAULT_TIMEOUT
    auth_policy: AuthPolicy = AuthPolicy.OMIT_IF_EMPTY

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""

        try:
            username = os.environ["RTT_USERNAME"]
            password = os.environ["RTT_PASSWORD"]
        except KeyError as exc:
            missing = exc.args[0]
            raise RuntimeError(
                f"Missing RealTimeTrains credential in environment: {missing}"
            ) from None
        return cls._with_options(username, password)

    @classmethod
    def from_env_optional(cls) -> Optional[Self]:
        username = os.environ.get("RTT_USERNAME")
        password = os.environ.get("RTT_PASSWORD")
        if not username or not password:
            return None
        return cls._with_options(username, password)

    @classmethod
    def _with_options(cls, username: str, password: str) -> Self:
        base_url = os.environ.get("RTT_BASE_URL", DEFAULT_ROOT_URL)
        raw_timeout = os.environ.get("RTT_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise RuntimeError(f"RTT_TIMEOUT must be a number, got {raw_timeout!r}") from None

        raw_policy = os.environ.get("RTT_AUTH_POLICY", AuthPolicy.OMIT_IF_EMPTY.value)
        try:
            auth_policy = AuthPolicy(raw_policy)
        except ValueError:
            choices = ", ".join(policy.value for policy in AuthPolicy)
            raise RuntimeError(
                f"RTT_AUTH_POLICY must be one of {choices}, got {raw_policy!r}"
            ) from None

        return cls(
            username=username,
            password=password,
            base_url=base_url,
            timeout=timeout,
            auth_policy=auth_policy,
        )
