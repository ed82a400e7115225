"""Light control settings of a single bulb (IPSO 3311 object)."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class LightControl:
    """Settings that control one light source.

    Every field is optional; only the fields that are set are sent when a
    light control is used in a request.
    """

    color: str | None = None  # hex RGB
    color_hue: int | None = None  # RGB bulbs only
    color_saturation: int | None = None  # RGB bulbs only
    color_x: int | None = None
    color_y: int | None = None
    power: int | None = None  # 0 = off, 1 = on
    dim: int | None = None  # 0..254, not a percentage
    mireds: int | None = None  # 250..454
    transition_duration: int | None = None
    cumulative_active_power: float | None = None  # Wh, read-only
    on_time: int | None = None  # seconds, writing 0 resets
    power_factor: float | None = None  # read-only
    sensor_unit: str | None = None  # UCUM unit, read-only
    id: int | None = None

    @property
    def is_on(self) -> bool:
        """Return True if the light is switched on."""
        return self.power == 1


@dataclass
class DeviceSet:
    """Request body that changes a device's light settings."""

    light_control: list[LightControl]
