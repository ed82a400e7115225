"""Group model: a named set of devices controlled together."""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Group:
    """A group on the gateway."""

    power: int | None = None
    dim: int | None = None  # 0..254, not a percentage
    name: str | None = None
    created_at: int | None = None  # Unix timestamp
    id: int | None = None
    device_ids: list[int] = field(default_factory=list)
    mood_id: int | None = None

    @property
    def is_on(self) -> bool:
        """Return True if the group is switched on."""
        return self.power == 1


@dataclass
class AddGroupRequest:
    """Request body that creates a group."""

    device_ids: list[int]
    name: str
