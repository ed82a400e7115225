"""Client configuration."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import voluptuous as vol

from .const import (
    CONF_HOST,
    CONF_IDENTITY,
    CONF_KEY,
    CONF_LIST_DELAY,
    CONF_PORT,
    CONF_PSK,
    CONF_REQUEST_TIMEOUT,
    DEFAULT_LIST_DELAY,
    DEFAULT_PORT,
    REQUEST_TIMEOUT,
)
from .exceptions import ValidationError

_non_empty = vol.All(str, vol.Strip, vol.Length(min=1))

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOST): _non_empty,
        vol.Required(CONF_KEY): _non_empty,
        vol.Required(CONF_IDENTITY): _non_empty,
        vol.Optional(CONF_PSK, default=None): vol.Any(None, _non_empty),
        vol.Optional(CONF_PORT, default=DEFAULT_PORT): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=65535)
        ),
        vol.Optional(CONF_LIST_DELAY, default=DEFAULT_LIST_DELAY): vol.All(
            vol.Coerce(float), vol.Range(min=0)
        ),
        vol.Optional(CONF_REQUEST_TIMEOUT, default=REQUEST_TIMEOUT): vol.Any(
            None, vol.All(vol.Coerce(float), vol.Range(min=0, min_included=False))
        ),
    }
)


@dataclass(frozen=True)
class ClientConfig:
    """Validated settings for one gateway connection."""

    host: str
    key: str
    identity: str
    psk: str | None = None
    port: int = DEFAULT_PORT
    list_delay: float = DEFAULT_LIST_DELAY
    request_timeout: float | None = REQUEST_TIMEOUT

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClientConfig:
        """Validate a mapping and build the configuration.

        Raises:
            ValidationError: A value is missing or out of range.
        """
        try:
            validated = CONFIG_SCHEMA(dict(data))
        except vol.Invalid as err:
            raise ValidationError(f"Invalid configuration: {err}") from err
        return cls(**validated)

    def as_dict(self, redact: bool = True) -> dict[str, Any]:
        """Return the configuration as a mapping, secrets redacted by default."""
        data = {
            CONF_HOST: self.host,
            CONF_KEY: self.key,
            CONF_IDENTITY: self.identity,
            CONF_PSK: self.psk,
            CONF_PORT: self.port,
            CONF_LIST_DELAY: self.list_delay,
            CONF_REQUEST_TIMEOUT: self.request_timeout,
        }
        if redact:
            for secret in (CONF_KEY, CONF_PSK):
                if data[secret]:
                    data[secret] = "**REDACTED**"
        return data
