"""Mapping between domain models and the gateway's wire encoding.

The gateway encodes entities as JSON objects keyed by small numeric
strings. The tables below are the single source of truth for those keys;
models stay plain dataclasses and the client never touches raw keys.

Encoding only emits fields that are set (not None, not an empty list), so
a replace request carries exactly the target fields.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Generic, TypeVar

from .exceptions import DecodeError
from .models import (
    AddGroupRequest,
    AddMoodRequest,
    Device,
    DeviceInfo,
    DeviceSet,
    DeviceType,
    Gateway,
    Group,
    LightControl,
    Mood,
    PowerSource,
)
from .types import JsonValue, PskRequestDict, PskResponseDict

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

PSK_REQUEST_KEY = "9090"
PSK_RESPONSE_KEY = "9091"


# === Value converters ===


def _integer(low: int, high: int) -> Callable[[Any], int]:
    def convert(value: Any) -> int:
        # bool is an int subclass but never a valid gateway integer
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected integer, got {type(value).__name__}")
        if not low <= value <= high:
            raise ValueError(f"{value} outside [{low}, {high}]")
        return value

    return convert


def _string(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected string, got {type(value).__name__}")
    return value


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected number, got {type(value).__name__}")
    return float(value)


def _enum(enum_cls: type[IntEnum]) -> Callable[[Any], Any]:
    """Decode to the enum member, keeping unknown values as plain ints."""
    as_int = _integer(0, 0xFF)

    def convert(value: Any) -> Any:
        value = as_int(value)
        try:
            return enum_cls(value)
        except ValueError:
            _LOGGER.debug("Unknown %s value: %s", enum_cls.__name__, value)
            return value

    return convert


UINT8 = _integer(0, 0xFF)
UINT32 = _integer(0, 0xFFFFFFFF)
INT32 = _integer(-(2**31), 2**31 - 1)
INT = _integer(-(2**63), 2**63 - 1)
TIMESTAMP = INT
STRING = _string
FLOAT = _number


# === Schema table ===


@dataclass(frozen=True)
class WireField:
    """One model attribute and where it lives in the wire object.

    ``keys`` is a path: most fields sit directly under one key, a few are
    nested inside wrapper objects (e.g. a group's linked device ids).
    """

    attr: str
    keys: tuple[str, ...]
    convert: Callable[[Any], Any] | None = None
    schema: Schema[Any] | None = None
    many: bool = False


class Schema(Generic[T]):
    """Field-key table for one model class."""

    def __init__(self, model: type[T], fields: list[WireField]) -> None:
        self.model = model
        self.fields = fields

    def decode(self, data: Any) -> T:
        """Build a model instance from a decoded JSON object."""
        if not isinstance(data, dict):
            raise DecodeError(
                f"{self.model.__name__}: expected object, got {type(data).__name__}"
            )
        values: dict[str, Any] = {}
        for wire_field in self.fields:
            raw = _lookup(data, wire_field.keys)
            if raw is None:
                continue
            try:
                values[wire_field.attr] = self._decode_value(wire_field, raw)
            except (TypeError, ValueError) as err:
                raise DecodeError(
                    f"{self.model.__name__}.{wire_field.attr} "
                    f"({'/'.join(wire_field.keys)}): {err}"
                ) from err
        return self.model(**values)

    @staticmethod
    def _decode_value(wire_field: WireField, raw: Any) -> Any:
        if wire_field.many:
            if not isinstance(raw, list):
                raise TypeError(f"expected array, got {type(raw).__name__}")
            return [Schema._decode_item(wire_field, item) for item in raw]
        return Schema._decode_item(wire_field, raw)

    @staticmethod
    def _decode_item(wire_field: WireField, raw: Any) -> Any:
        if wire_field.schema is not None:
            return wire_field.schema.decode(raw)
        if wire_field.convert is not None:
            return wire_field.convert(raw)
        return raw

    def encode(self, obj: T) -> dict[str, Any]:
        """Build the wire object for a model instance, set fields only."""
        data: dict[str, Any] = {}
        for wire_field in self.fields:
            value = getattr(obj, wire_field.attr)
            if value is None or (isinstance(value, list) and not value):
                continue
            if wire_field.schema is not None:
                nested = wire_field.schema
                if wire_field.many:
                    value = [nested.encode(item) for item in value]
                else:
                    value = nested.encode(value)
                    if not value:
                        continue
            elif isinstance(value, IntEnum):
                value = int(value)
            _assign(data, wire_field.keys, value)
        return data


def _lookup(data: dict[str, Any], keys: tuple[str, ...]) -> Any:
    current: Any = data
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _assign(data: dict[str, Any], keys: tuple[str, ...], value: Any) -> None:
    current = data
    for key in keys[:-1]:
        current = current.setdefault(key, {})
    current[keys[-1]] = value


LIGHT_CONTROL_SCHEMA = Schema(
    LightControl,
    [
        WireField("color", ("5706",), STRING),
        WireField("color_hue", ("5707",), INT),
        WireField("color_saturation", ("5708",), INT),
        WireField("color_x", ("5709",), INT),
        WireField("color_y", ("5710",), INT),
        WireField("power", ("5850",), UINT8),
        WireField("dim", ("5851",), UINT8),
        WireField("mireds", ("5711",), INT),
        WireField("transition_duration", ("5712",), INT),
        WireField("cumulative_active_power", ("5805",), FLOAT),
        WireField("on_time", ("5852",), UINT32),
        WireField("power_factor", ("5820",), FLOAT),
        WireField("sensor_unit", ("5701",), STRING),
        WireField("id", ("9003",), UINT32),
    ],
)

DEVICE_INFO_SCHEMA = Schema(
    DeviceInfo,
    [
        WireField("manufacturer", ("0",), STRING),
        WireField("model_number", ("1",), STRING),
        WireField("serial", ("2",), STRING),
        WireField("firmware_version", ("3",), STRING),
        WireField("power_source", ("6",), _enum(PowerSource)),
        WireField("battery_level", ("9",), UINT8),
    ],
)

DEVICE_SCHEMA = Schema(
    Device,
    [
        WireField("info", ("3",), schema=DEVICE_INFO_SCHEMA),
        WireField("light_control", ("3311",), schema=LIGHT_CONTROL_SCHEMA, many=True),
        WireField("type", ("5750",), _enum(DeviceType)),
        WireField("name", ("9001",), STRING),
        WireField("created_at", ("9002",), TIMESTAMP),
        WireField("id", ("9003",), UINT32),
        WireField("reachable", ("9019",), UINT8),
        WireField("last_seen", ("9020",), TIMESTAMP),
        WireField("ota_update_state", ("9054",), INT),
    ],
)

GROUP_SCHEMA = Schema(
    Group,
    [
        WireField("power", ("5850",), UINT8),
        WireField("dim", ("5851",), UINT8),
        WireField("name", ("9001",), STRING),
        WireField("created_at", ("9002",), TIMESTAMP),
        WireField("id", ("9003",), UINT32),
        WireField("device_ids", ("9018", "15002", "9003"), UINT32, many=True),
        WireField("mood_id", ("9039",), UINT32),
    ],
)

MOOD_SCHEMA = Schema(
    Mood,
    [
        WireField("id", ("9003",), UINT32),
        WireField("created_at", ("9002",), TIMESTAMP),
        WireField("name", ("9001",), STRING),
        WireField("is_predefined", ("9068",), UINT8),
        WireField("index", ("9057",), INT32),
        WireField("is_active", ("9058",), UINT8),
        WireField("light_controls", ("15013",), schema=LIGHT_CONTROL_SCHEMA, many=True),
        WireField("use_current_light_settings", ("9070",), UINT8),
    ],
)

GATEWAY_SCHEMA = Schema(
    Gateway,
    [
        WireField("id", ("9081",), STRING),
        WireField("ntp_server", ("9023",), STRING),
        WireField("firmware_version", ("9029",), STRING),
        WireField("current_timestamp", ("9059",), TIMESTAMP),
        WireField("current_time_utc", ("9060",), STRING),
        WireField("commissioning_mode", ("9061",), UINT32),
        WireField("release_notes_url", ("9056",), STRING),
        WireField("name", ("9035",), STRING),
        WireField("time_source", ("9071",), INT),
        WireField("ota_update_state", ("9054",), INT),
        WireField("update_progress", ("9055",), INT),
        WireField("update_priority", ("9066",), INT),
        WireField("update_accepted_timestamp", ("9069",), INT),
        WireField("force_ota_update_check", ("9032",), STRING),
        WireField("dst_time_offset", ("9080",), INT),
        WireField("dst_start_month", ("9072",), INT),
        WireField("dst_start_day", ("9073",), INT),
        WireField("dst_start_hour", ("9074",), INT),
        WireField("dst_start_minute", ("9075",), INT),
        WireField("dst_end_month", ("9076",), INT),
        WireField("dst_end_day", ("9077",), INT),
        WireField("dst_end_hour", ("9078",), INT),
        WireField("dst_end_minute", ("9079",), INT),
        WireField("google_home_pair_status", ("9105",), INT),
        WireField("alexa_pair_status", ("9093",), INT),
        WireField("certificate_provisioned", ("9092",), INT),
    ],
)

DEVICE_SET_SCHEMA = Schema(
    DeviceSet,
    [WireField("light_control", ("3311",), schema=LIGHT_CONTROL_SCHEMA, many=True)],
)

ADD_GROUP_SCHEMA = Schema(
    AddGroupRequest,
    [
        WireField("device_ids", ("9003",), UINT32, many=True),
        WireField("name", ("9001",), STRING),
    ],
)

ADD_MOOD_SCHEMA = Schema(
    AddMoodRequest,
    [
        WireField("name", ("9001",), STRING),
        WireField("is_active", ("9058",), UINT8),
    ],
)

SCHEMAS: dict[type, Schema[Any]] = {
    schema.model: schema
    for schema in (
        LIGHT_CONTROL_SCHEMA,
        DEVICE_INFO_SCHEMA,
        DEVICE_SCHEMA,
        GROUP_SCHEMA,
        MOOD_SCHEMA,
        GATEWAY_SCHEMA,
        DEVICE_SET_SCHEMA,
        ADD_GROUP_SCHEMA,
        ADD_MOOD_SCHEMA,
    )
}


# === Payload helpers ===


def loads(payload: bytes | None) -> JsonValue:
    """Parse a response body."""
    if not payload:
        raise DecodeError("Empty payload", payload)
    try:
        return json.loads(payload)
    except (ValueError, RecursionError) as err:
        # ValueError covers JSONDecodeError and UnicodeDecodeError
        raise DecodeError(f"Invalid JSON: {err!r}", payload) from err


def dumps(data: Any) -> bytes:
    """Serialize a model instance (or an already keyed dict) to a body."""
    schema = SCHEMAS.get(type(data))
    if schema is not None:
        data = schema.encode(data)
    return json.dumps(data, separators=(",", ":")).encode("utf-8")


def decode(model: type[T], payload: bytes | None) -> T:
    """Parse a response body into the given model."""
    schema = SCHEMAS.get(model)
    if schema is None:
        raise TypeError(f"No wire schema for {model.__name__}")
    return schema.decode(loads(payload))


def decode_ids(payload: bytes | None) -> list[int]:
    """Parse an id index, e.g. the body of GET /15001."""
    data = loads(payload)
    if not isinstance(data, list):
        raise DecodeError(f"Expected id array, got {type(data).__name__}", payload)
    try:
        return [UINT32(item) for item in data]
    except (TypeError, ValueError) as err:
        raise DecodeError(f"Invalid id in index: {err}", payload) from err


def psk_request(identity: str) -> PskRequestDict:
    """Body of the credential exchange request."""
    return {PSK_REQUEST_KEY: identity}


def decode_psk(payload: bytes | None) -> str:
    """Extract the pre-shared key from a credential exchange reply."""
    data = loads(payload)
    if not isinstance(data, dict):
        raise DecodeError("Expected object in credential exchange reply", payload)
    response: PskResponseDict = data  # type: ignore[assignment]
    psk = response.get(PSK_RESPONSE_KEY)
    if not isinstance(psk, str) or not psk:
        raise DecodeError("Credential exchange reply carries no key", payload)
    return psk
