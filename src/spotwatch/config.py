"""Monitor configuration for spotwatch."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from spotwatch._constants import (
    DEFAULT_CHECK_INTERVAL,
    DEFAULT_TOKEN_TTL,
    IMDS_BASE_URL,
    IMDS_TIMEOUT,
    NOTIFY_TIMEOUT,
    NTFY_SERVER,
    TOPIC_ENV,
)
from spotwatch.exceptions import SpotwatchConfigError

_ENV_CONFIG_MAP: dict[str, str] = {
    TOPIC_ENV: "topic",
    "NTFY_SERVER": "ntfy_server",
    "SPOTWATCH_IMDS_URL": "imds_base_url",
}


def _env_number(env: Mapping[str, str], key: str, cast: type[float] | type[int]) -> float | int | None:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return None
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise SpotwatchConfigError(f"{key} must be a number, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class MonitorConfig:
    """Monitor configuration.

    Parameters
    ----------
    topic : str
        ntfy topic the alerts are published to. Required.
    ntfy_server : str
        Base URL of the ntfy server. The topic is appended as the path.
    imds_base_url : str
        Base URL of the instance metadata service.
    check_interval : float
        Seconds between two poll cycles.
    token_ttl : int
        Lifetime in seconds requested for every IMDSv2 token.
    imds_timeout : float
        Per-request timeout for metadata calls.
    notify_timeout : float
        Per-request timeout for the webhook call.
    """

    topic: str
    ntfy_server: str = NTFY_SERVER
    imds_base_url: str = IMDS_BASE_URL
    check_interval: float = DEFAULT_CHECK_INTERVAL
    token_ttl: int = DEFAULT_TOKEN_TTL
    imds_timeout: float = IMDS_TIMEOUT
    notify_timeout: float = NOTIFY_TIMEOUT

    def __post_init__(self) -> None:
        topic = (self.topic or "").strip()
        if not topic:
            raise SpotwatchConfigError(f"{TOPIC_ENV} environment variable is not set")
        object.__setattr__(self, "topic", topic)
        object.__setattr__(self, "ntfy_server", self.ntfy_server.rstrip("/"))
        object.__setattr__(self, "imds_base_url", self.imds_base_url.rstrip("/"))

        for name in ("check_interval", "token_ttl", "imds_timeout", "notify_timeout"):
            if getattr(self, name) <= 0:
                raise SpotwatchConfigError(f"{name} must be positive, got {getattr(self, name)}")

    @classmethod
    def from_env(cls, **overrides: Any) -> MonitorConfig:
        """Create configuration from environment variables.

        Reads ``NTFY_TOPIC`` (required), ``NTFY_SERVER``,
        ``SPOTWATCH_IMDS_URL``, ``SPOTWATCH_CHECK_INTERVAL`` and
        ``SPOTWATCH_TOKEN_TTL``. Explicit keyword arguments override
        environment values.

        Raises
        ------
        SpotwatchConfigError
            When the topic is missing or a numeric variable is malformed.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {"topic": ""}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        if "check_interval" not in overrides:
            interval = _env_number(env, "SPOTWATCH_CHECK_INTERVAL", float)
            if interval is not None:
                config_kwargs["check_interval"] = interval

        if "token_ttl" not in overrides:
            ttl = _env_number(env, "SPOTWATCH_TOKEN_TTL", int)
            if ttl is not None:
                config_kwargs["token_ttl"] = ttl

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
