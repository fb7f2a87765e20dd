"""Configuration for the Polycom Trio driver."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import voluptuous as vol

from .const import (
    CONF_DIAL_POLL_ATTEMPTS,
    CONF_DIAL_POLL_INTERVAL,
    CONF_HOST,
    CONF_MODEL,
    CONF_PASSWORD,
    CONF_PORT,
    CONF_REQUEST_TIMEOUT,
    CONF_USERNAME,
    CONF_VERIFY_SSL,
    DEFAULT_PORT,
    DEFAULT_REQUEST_TIMEOUT,
    DIAL_POLL_ATTEMPTS,
    DIAL_POLL_INTERVAL,
    MODEL_TRIO,
    MODEL_VVX,
)
from .exceptions import TrioConfigError


def _host(value: Any) -> str:
    host = vol.Coerce(str)(value).strip()
    if not host:
        raise vol.Invalid("host cannot be empty")
    return host


CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOST): _host,
        vol.Optional(CONF_PORT, default=DEFAULT_PORT): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=65535)
        ),
        vol.Required(CONF_USERNAME): str,
        vol.Required(CONF_PASSWORD): str,
        # devices usually ship with self-signed certificates
        vol.Optional(CONF_VERIFY_SSL, default=False): vol.Boolean(),
        vol.Optional(CONF_REQUEST_TIMEOUT, default=DEFAULT_REQUEST_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False)
        ),
        vol.Optional(CONF_MODEL, default=MODEL_TRIO): vol.All(
            vol.Lower, vol.In([MODEL_TRIO, MODEL_VVX])
        ),
        vol.Optional(CONF_DIAL_POLL_ATTEMPTS, default=DIAL_POLL_ATTEMPTS): vol.All(
            vol.Coerce(int), vol.Range(min=1)
        ),
        vol.Optional(CONF_DIAL_POLL_INTERVAL, default=DIAL_POLL_INTERVAL): vol.All(
            vol.Coerce(float), vol.Range(min=0)
        ),
    }
)


@dataclass(frozen=True)
class TrioConfig:
    """Validated driver configuration."""

    host: str
    username: str
    password: str
    port: int = DEFAULT_PORT
    verify_ssl: bool = False
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    model: str = MODEL_TRIO
    dial_poll_attempts: int = DIAL_POLL_ATTEMPTS
    dial_poll_interval: float = DIAL_POLL_INTERVAL

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TrioConfig:
        """Validate a raw mapping and build the configuration."""
        try:
            validated = CONFIG_SCHEMA(dict(data))
        except vol.Invalid as err:
            raise TrioConfigError(f"Invalid configuration: {err}") from err
        return cls(**validated)
