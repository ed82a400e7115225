"""Gateway entity models."""
from __future__ import annotations

from .device import Device, DeviceInfo, DeviceType, PowerSource
from .gateway import Gateway
from .group import AddGroupRequest, Group
from .light_control import DeviceSet, LightControl
from .mood import AddMoodRequest, Mood

__all__ = [
    "AddGroupRequest",
    "AddMoodRequest",
    "Device",
    "DeviceInfo",
    "DeviceSet",
    "DeviceType",
    "Gateway",
    "Group",
    "LightControl",
    "Mood",
    "PowerSource",
]
