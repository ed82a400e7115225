"""Device model representing a paired remote, dimmer, bulb or sensor."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum

from .light_control import LightControl


class DeviceType(IntEnum):
    """Application type of a device (IPSO 3311, 3335, 3342)."""

    REMOTE = 0
    DIMMER = 1
    LIGHT = 2
    SENSOR = 4


class PowerSource(IntEnum):
    """Available power sources (IPSO 3)."""

    DC = 0
    INTERNAL_BATTERY = 1
    EXTERNAL_BATTERY = 2
    BATTERY = 3
    POWER_OVER_ETHERNET = 4
    USB = 5
    AC = 6
    SOLAR = 7


@dataclass
class DeviceInfo:
    """Read-only device information (IPSO 3)."""

    manufacturer: str | None = None
    model_number: str | None = None
    serial: str | None = None
    firmware_version: str | None = None
    power_source: PowerSource | int | None = None
    battery_level: int | None = None  # percentage


@dataclass
class Device:
    """A device paired with the gateway."""

    info: DeviceInfo = field(default_factory=DeviceInfo)
    light_control: list[LightControl] = field(default_factory=list)
    type: DeviceType | int | None = None
    name: str | None = None
    created_at: int | None = None  # Unix timestamp
    id: int | None = None
    reachable: int | None = None
    last_seen: int | None = None  # Unix timestamp
    ota_update_state: int | None = None

    @property
    def is_light(self) -> bool:
        """Return True if this device is a bulb."""
        return self.type == DeviceType.LIGHT

    @property
    def is_reachable(self) -> bool:
        """Return True if the gateway can currently reach this device."""
        return self.reachable == 1

    @property
    def created(self) -> datetime | None:
        """Return the pairing time as an aware datetime."""
        if self.created_at is None:
            return None
        return datetime.fromtimestamp(self.created_at, tz=timezone.utc)

    @property
    def last_seen_at(self) -> datetime | None:
        """Return the last contact time as an aware datetime."""
        if self.last_seen is None:
            return None
        return datetime.fromtimestamp(self.last_seen, tz=timezone.utc)
