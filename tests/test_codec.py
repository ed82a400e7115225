"""Test wire encoding and decoding."""
from __future__ import annotations

import json

import pytest

from tradfri import codec
from tradfri.exceptions import DecodeError
from tradfri.models import (
    AddGroupRequest,
    AddMoodRequest,
    Device,
    DeviceSet,
    DeviceType,
    Gateway,
    Group,
    LightControl,
    Mood,
    PowerSource,
)

from conftest import json_body


class TestDecodeDevice:
    """Test decoding devices."""

    def test_full_device(self, device_payload):
        """Test every mapped field lands on the model."""
        device = codec.decode(Device, json_body(device_payload))

        assert device.id == 65537
        assert device.name == "Living room"
        assert device.type is DeviceType.LIGHT
        assert device.is_light
        assert device.is_reachable
        assert device.created_at == 1546801839
        assert device.created.year == 2019
        assert device.last_seen == 1546802000
        assert device.info.manufacturer == "IKEA of Sweden"
        assert device.info.firmware_version == "1.3.009"
        assert device.info.power_source is PowerSource.INTERNAL_BATTERY
        assert device.info.battery_level is None

        assert len(device.light_control) == 1
        light = device.light_control[0]
        assert light.is_on
        assert light.dim == 254
        assert light.color == "f1e0b5"
        assert (light.color_x, light.color_y) == (30138, 26909)
        assert light.mireds is None

    def test_missing_fields_are_none(self):
        """Test absent keys leave defaults in place."""
        device = codec.decode(Device, b'{"9003": 65540}')

        assert device.id == 65540
        assert device.name is None
        assert device.light_control == []
        assert device.info.manufacturer is None
        assert device.created is None
        assert not device.is_light

    def test_unknown_device_type_kept_as_int(self):
        """Test unknown enum values survive as plain ints."""
        device = codec.decode(Device, b'{"5750": 7}')

        assert device.type == 7
        assert not isinstance(device.type, DeviceType)

    def test_unknown_keys_ignored(self):
        """Test unmapped keys are skipped."""
        device = codec.decode(Device, b'{"9003": 1, "9999": "x"}')

        assert device.id == 1

    @pytest.mark.parametrize(
        "body",
        [
            b'{"9003": "65537"}',
            b'{"9003": -1}',
            b'{"9003": true}',
            b'{"9001": 12}',
            b'{"3311": {"5850": 1}}',
            b'{"3311": [{"5851": 300}]}',
            b'{"3": []}',
        ],
    )
    def test_type_mismatch(self, body):
        """Test structural mismatches raise DecodeError."""
        with pytest.raises(DecodeError):
            codec.decode(Device, body)

    def test_error_names_field(self):
        """Test the error message names the offending attribute."""
        with pytest.raises(DecodeError, match="Device.name"):
            codec.decode(Device, b'{"9001": 12}')


class TestDecodeOthers:
    """Test decoding groups, moods and the gateway."""

    def test_group_nested_device_ids(self, group_payload):
        """Test linked device ids are read from the nested wrapper."""
        group = codec.decode(Group, json_body(group_payload))

        assert group.id == 131073
        assert group.name == "Kitchen"
        assert group.is_on
        assert group.dim == 200
        assert group.device_ids == [65537, 65538]
        assert group.mood_id == 196608

    def test_group_without_devices(self):
        """Test a group with no linked devices."""
        group = codec.decode(Group, b'{"9003": 131074, "9018": {}}')

        assert group.device_ids == []

    def test_mood(self, mood_payload):
        """Test moods and their light settings."""
        mood = codec.decode(Mood, json_body(mood_payload))

        assert mood.id == 196608
        assert mood.name == "FOCUS"
        assert mood.index == 2
        assert mood.is_active == 1
        assert mood.is_predefined == 1
        assert mood.device_ids == [65537, 65538]
        assert mood.light_controls[0].mireds == 250

    def test_gateway(self, gateway_payload):
        """Test the gateway resource."""
        gateway = codec.decode(Gateway, json_body(gateway_payload))

        assert gateway.id == "7e1b1fd0b8b3c4ab"
        assert gateway.ntp_server == "pool.ntp.org"
        assert gateway.firmware_version == "1.21.031"
        assert gateway.current_timestamp == 1546802500
        assert gateway.commissioning_mode == 0
        assert not gateway.commissioning

    def test_no_schema(self):
        """Test decoding into an unmapped type is a programming error."""
        with pytest.raises(TypeError):
            codec.decode(dict, b"{}")


class TestPayloads:
    """Test body parsing helpers."""

    @pytest.mark.parametrize("body", [None, b""])
    def test_empty_body(self, body):
        """Test empty bodies are rejected."""
        with pytest.raises(DecodeError, match="Empty payload"):
            codec.loads(body)

    def test_invalid_json(self):
        """Test the raw body is kept on the error."""
        with pytest.raises(DecodeError) as exc_info:
            codec.loads(b"{not json")

        assert exc_info.value.payload == b"{not json"

    def test_deeply_nested(self):
        """Test pathological nesting is a decode error, not a crash."""
        with pytest.raises(DecodeError):
            codec.loads(b"[" * 100000)

    def test_invalid_utf8(self):
        """Test undecodable bytes."""
        with pytest.raises(DecodeError):
            codec.loads(b"\xff\xfe")

    def test_top_level_must_be_object(self):
        """Test a model cannot be decoded from an array."""
        with pytest.raises(DecodeError, match="expected object"):
            codec.decode(Device, b"[1, 2]")

    def test_decode_ids(self):
        """Test id index parsing."""
        assert codec.decode_ids(b"[65537, 65538, 65539]") == [65537, 65538, 65539]
        assert codec.decode_ids(b"[]") == []

    @pytest.mark.parametrize("body", [b'{"a": 1}', b'[1, "2"]', b"[-5]"])
    def test_decode_ids_rejects(self, body):
        """Test malformed indexes."""
        with pytest.raises(DecodeError):
            codec.decode_ids(body)

    def test_psk_request(self):
        """Test the credential exchange request body."""
        assert codec.dumps(codec.psk_request("client-42")) == b'{"9090":"client-42"}'

    def test_decode_psk(self):
        """Test the key is extracted and extra keys ignored."""
        assert codec.decode_psk(b'{"9091": "abc", "9029": "1.21.031"}') == "abc"

    @pytest.mark.parametrize(
        "body", [b"{}", b'{"9091": ""}', b'{"9091": 5}', b'["abc"]', None]
    )
    def test_decode_psk_rejects(self, body):
        """Test replies without a usable key."""
        with pytest.raises(DecodeError):
            codec.decode_psk(body)


class TestEncode:
    """Test encoding requests."""

    def test_only_set_fields(self):
        """Test unset fields are omitted."""
        body = codec.dumps(DeviceSet(light_control=[LightControl(dim=127)]))

        assert json.loads(body) == {"3311": [{"5851": 127}]}

    def test_compact(self):
        """Test bodies carry no whitespace."""
        assert codec.dumps(LightControl(power=1, dim=254)) == b'{"5850":1,"5851":254}'

    def test_group_nested_keys(self):
        """Test nested wire paths are rebuilt on encode."""
        data = codec.GROUP_SCHEMA.encode(Group(name="Hall", device_ids=[1, 2]))

        assert data == {"9001": "Hall", "9018": {"15002": {"9003": [1, 2]}}}

    def test_enum_encoded_as_int(self):
        """Test enum members are written as plain ints."""
        data = codec.DEVICE_SCHEMA.encode(Device(type=DeviceType.LIGHT, id=9))

        assert data == {"5750": 2, "9003": 9}
        assert type(data["5750"]) is int

    def test_empty_nested_object_omitted(self):
        """Test an all-unset nested object is dropped."""
        assert codec.DEVICE_SCHEMA.encode(Device()) == {}

    def test_add_group(self):
        """Test the group creation body."""
        body = codec.dumps(AddGroupRequest(device_ids=[65537], name="Desk"))

        assert json.loads(body) == {"9003": [65537], "9001": "Desk"}

    def test_add_mood(self):
        """Test the mood creation body."""
        body = codec.dumps(AddMoodRequest(name="Evening"))

        assert json.loads(body) == {"9001": "Evening", "9058": 1}

    def test_plain_dict_passes_through(self):
        """Test already keyed bodies are serialized as is."""
        assert codec.dumps({"5850": 0}) == b'{"5850":0}'

    def test_decode_encode_keeps_values(self, group_payload):
        """Test a decoded group encodes back to its wire keys."""
        group = codec.decode(Group, json_body(group_payload))

        assert codec.GROUP_SCHEMA.encode(group) == group_payload
