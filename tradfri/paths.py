"""Typed resource paths.

Paths are only ever built from a known root and numeric ids, so a
malformed or injected path segment cannot reach the gateway.
"""
from __future__ import annotations

from dataclasses import dataclass

from .const import (
    PATH_DEVICES,
    PATH_GATEWAY_FACTORY_RESET,
    PATH_GATEWAY_IDENT,
    PATH_GATEWAY_INFO,
    PATH_GATEWAY_REBOOT,
    PATH_GROUP_ADD,
    PATH_GROUPS,
    PATH_MOODS,
    ROOT_DEVICES,
    ROOT_GATEWAY,
    ROOT_GROUPS,
    ROOT_MOODS,
)
from .exceptions import ValidationError

ROOTS = frozenset({ROOT_DEVICES, ROOT_GROUPS, ROOT_MOODS, ROOT_GATEWAY})

# Fixed resources whose last segment is not a numeric id
FIXED_PATHS = frozenset(
    {
        PATH_GATEWAY_IDENT,
        PATH_GATEWAY_INFO,
        PATH_GATEWAY_REBOOT,
        PATH_GATEWAY_FACTORY_RESET,
        PATH_DEVICES,
        PATH_GROUPS,
        PATH_GROUP_ADD,
        PATH_MOODS,
    }
)


def _check_id(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(f"Invalid resource identifier: {value!r}")
    return value


@dataclass(frozen=True)
class ResourcePath:
    """A gateway resource: root[/parent-id][/child-id]."""

    root: int
    ids: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        if self.root not in ROOTS:
            raise ValidationError(f"Unknown resource root: {self.root!r}")
        if len(self.ids) > 2:
            raise ValidationError(f"Too many path segments: {self.ids!r}")
        for value in self.ids:
            _check_id(value)

    def child(self, child_id: int) -> ResourcePath:
        """Return the path of a child resource."""
        return ResourcePath(self.root, (*self.ids, _check_id(child_id)))

    def __str__(self) -> str:
        return "/" + "/".join(str(part) for part in (self.root, *self.ids))


def device_path(device_id: int) -> str:
    """Return the path of one device."""
    return str(ResourcePath(ROOT_DEVICES).child(device_id))


def group_path(group_id: int) -> str:
    """Return the path of one group."""
    return str(ResourcePath(ROOT_GROUPS).child(group_id))


def mood_path(parent: int, mood_id: int | None = None) -> str:
    """Return the path of the moods under ``parent``, or of one mood."""
    path = ResourcePath(ROOT_MOODS).child(parent)
    if mood_id is not None:
        path = path.child(mood_id)
    return str(path)


def resolve(path: ResourcePath | str) -> str:
    """Return the wire form of a path, validating free strings.

    A string must be one of the fixed resources or parse into a
    ``ResourcePath``: a known root followed by at most two numeric ids.

    Raises:
        ValidationError: The string is not a valid gateway path.
    """
    if isinstance(path, ResourcePath):
        return str(path)
    if not isinstance(path, str):
        raise ValidationError(f"Invalid resource path: {path!r}")
    if path in FIXED_PATHS:
        return path

    segments = path.split("/")
    # leading "/" yields an empty first segment
    if len(segments) < 2 or segments[0] or not all(
        segment.isascii() and segment.isdigit() for segment in segments[1:]
    ):
        raise ValidationError(f"Invalid resource path: {path!r}")
    root, *ids = (int(segment) for segment in segments[1:])
    return str(ResourcePath(root, tuple(ids)))
