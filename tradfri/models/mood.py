"""Mood model: a stored set of light settings for a group of devices."""
from __future__ import annotations

from dataclasses import dataclass, field

from .light_control import LightControl


@dataclass
class Mood:
    """A mood on the gateway."""

    id: int | None = None
    created_at: int | None = None  # Unix timestamp
    name: str | None = None
    is_predefined: int | None = None
    index: int | None = None
    is_active: int | None = None
    light_controls: list[LightControl] = field(default_factory=list)
    use_current_light_settings: int | None = None

    @property
    def device_ids(self) -> list[int]:
        """Return the ids of the devices this mood controls."""
        return [control.id for control in self.light_controls if control.id is not None]


@dataclass
class AddMoodRequest:
    """Request body that creates a mood."""

    name: str
    is_active: int = 1
