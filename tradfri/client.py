"""Gateway protocol client."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

from . import codec
from .color import (
    hex_rgb_to_color_xy_dim,
    kelvin_to_mired,
    kelvin_to_rgb,
    ms_to_duration,
    percentage_to_dim,
    rgb_to_hex,
)
from .config import ClientConfig
from .const import (
    DEFAULT_LIST_DELAY,
    DEFAULT_PORT,
    PATH_DEVICES,
    PATH_GATEWAY_FACTORY_RESET,
    PATH_GATEWAY_INFO,
    PATH_GATEWAY_REBOOT,
    PATH_GROUP_ADD,
    PATH_GROUPS,
    PATH_MOODS,
    REQUEST_TIMEOUT,
)
from .exceptions import DecodeError, GatewayError, ValidationError
from .models import (
    AddGroupRequest,
    AddMoodRequest,
    Device,
    DeviceSet,
    Gateway,
    Group,
    LightControl,
    Mood,
)
from .observe import Subscription, device_subscription, gateway_subscription
from .paths import ResourcePath, device_path, group_path, mood_path, resolve
from .protocols import ChannelConnector, Method, Response
from .session import SessionManager

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class TradfriClient:
    """Client for one gateway.

    Every operation is a live round trip over the client's single secure
    channel. The session is established on first use if ``connect()`` was
    not called.
    """

    def __init__(
        self,
        host: str,
        key: str,
        identity: str,
        *,
        connector: ChannelConnector | None = None,
        psk: str | None = None,
        port: int = DEFAULT_PORT,
        list_delay: float = DEFAULT_LIST_DELAY,
        request_timeout: float | None = REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the client.

        Args:
            host: Hostname or IP address of the gateway.
            key: Security code printed on the gateway.
            identity: Client identity to register and connect with.
            connector: Opens secure channels. Defaults to the aiocoap
                based connector.
            psk: Previously obtained pre-shared key for ``identity``.
            port: Gateway port.
            list_delay: Seconds between sequential fetches when listing.
            request_timeout: Per-exchange timeout in seconds for the default
                connector. None disables it.
        """
        if connector is None:
            from .transport import AiocoapConnector

            connector = AiocoapConnector(request_timeout=request_timeout)
        self._session = SessionManager(
            host, key, identity, connector, port=port, psk=psk
        )
        self._list_delay = list_delay

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        connector: ChannelConnector | None = None,
    ) -> TradfriClient:
        """Create a client from a validated configuration."""
        return cls(
            config.host,
            config.key,
            config.identity,
            connector=connector,
            psk=config.psk,
            port=config.port,
            list_delay=config.list_delay,
            request_timeout=config.request_timeout,
        )

    async def __aenter__(self) -> TradfriClient:
        """Async context manager entry."""
        await self._session.ensure_connected()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    @property
    def session(self) -> SessionManager:
        """Return the session manager."""
        return self._session

    @property
    def psk(self) -> str | None:
        """Return the pre-shared key in use, for the caller to persist."""
        return self._session.psk

    async def connect(self, identity: str | None = None) -> None:
        """Establish the session, acquiring a pre-shared key if needed."""
        await self._session.connect(identity)

    async def close(self) -> None:
        """Close the secure channel."""
        await self._session.close()

    # === Verbs ===

    async def _request(
        self,
        method: Method,
        path: ResourcePath | str,
        payload: Any = None,
    ) -> Response:
        """Send one request over the session.

        Raises:
            ValidationError: ``path`` is not a valid gateway path.
            TransportError: Channel failure, passed through unchanged.
            GatewayError: The gateway answered with an error code.
        """
        path = resolve(path)
        channel = await self._session.ensure_connected()
        body = codec.dumps(payload) if payload is not None else None
        _LOGGER.debug("%s %s %s", method.value, path, body.decode() if body else "")

        response = await channel.request(method, path, body)

        _LOGGER.debug("<- %s %s", response.code, response.payload)
        if response.is_error:
            raise GatewayError(path, response.code)
        return response

    async def fetch(self, path: ResourcePath | str) -> Any:
        """Fetch a resource and return its decoded JSON body."""
        response = await self._request(Method.FETCH, path)
        return codec.loads(response.payload)

    async def replace(self, path: ResourcePath | str, payload: Any) -> None:
        """Replace the given fields of a resource."""
        await self._request(Method.REPLACE, path, payload)

    async def create(self, path: ResourcePath | str, payload: Any = None) -> None:
        """Create a resource, or trigger an action resource."""
        await self._request(Method.CREATE, path, payload)

    async def delete(self, path: ResourcePath | str) -> None:
        """Delete a resource."""
        await self._request(Method.DELETE, path)

    async def _fetch_model(self, model: type[T], path: str) -> T:
        response = await self._request(Method.FETCH, path)
        return codec.decode(model, response.payload)

    async def _fetch_ids(self, path: str) -> list[int]:
        response = await self._request(Method.FETCH, path)
        return codec.decode_ids(response.payload)

    async def _fetch_each(
        self,
        ids: list[int],
        fetch_one: Callable[[int], Awaitable[T]],
    ) -> list[T]:
        """Fetch entities one by one, pausing between requests.

        The first failure aborts the listing; nothing is returned.
        """
        entities: list[T] = []
        for index, entity_id in enumerate(ids):
            if index:
                await asyncio.sleep(self._list_delay)
            entity = await fetch_one(entity_id)
            _LOGGER.debug("Found %s", entity)
            entities.append(entity)
        return entities

    # === Gateway ===

    async def get_gateway(self) -> Gateway:
        """Fetch gateway information."""
        return await self._fetch_model(Gateway, PATH_GATEWAY_INFO)

    async def set_ntp_server(self, ntp_server: str) -> None:
        """Set the NTP server the gateway uses."""
        await self.replace(PATH_GATEWAY_INFO, Gateway(ntp_server=ntp_server))

    async def set_commissioning_mode(self, seconds: int) -> None:
        """Accept pairing requests from new devices for ``seconds``."""
        if seconds < 0:
            raise ValidationError(f"Commissioning time must not be negative: {seconds}")
        await self.replace(PATH_GATEWAY_INFO, Gateway(commissioning_mode=seconds))

    async def reboot(self) -> None:
        """Reboot the gateway."""
        await self.create(PATH_GATEWAY_REBOOT)

    async def factory_reset(self) -> None:
        """Reset the gateway to factory defaults."""
        _LOGGER.warning("Resetting gateway to factory defaults")
        await self.create(PATH_GATEWAY_FACTORY_RESET)

    # === Devices ===

    async def list_device_ids(self) -> list[int]:
        """List the ids of all paired devices."""
        return await self._fetch_ids(PATH_DEVICES)

    async def get_device(self, device_id: int) -> Device:
        """Fetch one device."""
        return await self._fetch_model(Device, device_path(device_id))

    async def list_devices(self) -> list[Device]:
        """Fetch every paired device."""
        ids = await self.list_device_ids()
        _LOGGER.debug("Enumerating %d devices", len(ids))
        return await self._fetch_each(ids, self.get_device)

    async def set_device(self, device_id: int, change: LightControl) -> None:
        """Apply light settings to a device."""
        await self.replace(device_path(device_id), DeviceSet(light_control=[change]))

    async def remove_device(self, device_id: int) -> None:
        """Unpair a device from the gateway."""
        await self.delete(device_path(device_id))

    async def set_device_power(self, device_id: int, on: bool) -> None:
        """Switch a light on or off."""
        await self.set_device(device_id, LightControl(power=int(on)))

    async def set_device_brightness(
        self,
        device_id: int,
        percentage: float,
        transition_ms: int | None = None,
    ) -> None:
        """Dim a light to a 0..100 brightness percentage."""
        await self.set_device(
            device_id,
            LightControl(
                dim=percentage_to_dim(percentage),
                transition_duration=_duration(transition_ms),
            ),
        )

    async def set_device_color_temperature(
        self,
        device_id: int,
        kelvin: float,
        transition_ms: int | None = None,
    ) -> None:
        """Set a white-spectrum light's color temperature in Kelvin."""
        await self.set_device(
            device_id,
            LightControl(
                mireds=kelvin_to_mired(kelvin),
                transition_duration=_duration(transition_ms),
            ),
        )

    async def set_device_hex_color(
        self,
        device_id: int,
        hex_color: str,
        transition_ms: int | None = None,
    ) -> None:
        """Set a color light from a six digit hex RGB value.

        The hex value is converted to xy chromaticity; its luminance sets
        the brightness.
        """
        x, y, dim = hex_rgb_to_color_xy_dim(hex_color)
        await self.set_device(
            device_id,
            LightControl(
                color_x=x,
                color_y=y,
                dim=percentage_to_dim(dim),
                transition_duration=_duration(transition_ms),
            ),
        )

    async def set_device_kelvin_color(
        self,
        device_id: int,
        kelvin: float,
        transition_ms: int | None = None,
    ) -> None:
        """Give a color light the appearance of a black-body temperature.

        Unlike ``set_device_color_temperature`` this is not clamped to the
        white-spectrum range, so it also reaches candle light or daylight.
        """
        hex_color = rgb_to_hex(*kelvin_to_rgb(kelvin))
        _LOGGER.debug("%sK approximated as #%s", kelvin, hex_color)
        await self.set_device_hex_color(device_id, hex_color, transition_ms)

    # === Groups ===

    async def list_group_ids(self) -> list[int]:
        """List the ids of all groups."""
        return await self._fetch_ids(PATH_GROUPS)

    async def get_group(self, group_id: int) -> Group:
        """Fetch one group."""
        return await self._fetch_model(Group, group_path(group_id))

    async def list_groups(self) -> list[Group]:
        """Fetch every group."""
        ids = await self.list_group_ids()
        _LOGGER.debug("Enumerating %d groups", len(ids))
        return await self._fetch_each(ids, self.get_group)

    async def add_group(self, device_ids: list[int], name: str) -> None:
        """Create a group of existing devices.

        The gateway silently accepts unknown device ids, so every id is
        checked against the device index before anything is written.

        Raises:
            ValidationError: Some id is not a paired device.
        """
        existing = set(await self.list_device_ids())
        unknown = [device_id for device_id in device_ids if device_id not in existing]
        if unknown:
            _LOGGER.debug("Refusing to create group with unknown ids %s", unknown)
            raise ValidationError("nonexistent identifiers")

        await self.replace(
            PATH_GROUP_ADD, AddGroupRequest(device_ids=list(device_ids), name=name)
        )

    async def set_group(self, group: Group) -> None:
        """Write the set fields of ``group`` to the group with its id."""
        if group.id is None:
            raise ValidationError("Group has no id")
        await self.replace(group_path(group.id), group)

    async def remove_group(self, group_id: int) -> None:
        """Delete a group."""
        await self.delete(group_path(group_id))

    # === Moods ===

    async def mood_parent(self) -> int:
        """Resolve the synthetic parent id all moods live under."""
        ids = await self._fetch_ids(PATH_MOODS)
        if not ids:
            raise DecodeError("Mood root lists no parent")
        return ids[0]

    async def list_mood_ids(self, parent: int | None = None) -> list[int]:
        """List the ids of all moods."""
        if parent is None:
            parent = await self.mood_parent()
        return await self._fetch_ids(mood_path(parent))

    async def get_mood(self, mood_id: int, parent: int | None = None) -> Mood:
        """Fetch one mood."""
        if parent is None:
            parent = await self.mood_parent()
        return await self._fetch_model(Mood, mood_path(parent, mood_id))

    async def list_moods(self, parent: int | None = None) -> list[Mood]:
        """Fetch every mood."""
        if parent is None:
            parent = await self.mood_parent()
        ids = await self.list_mood_ids(parent)
        _LOGGER.debug("Enumerating %d moods", len(ids))
        resolved = parent
        return await self._fetch_each(
            ids, lambda mood_id: self.get_mood(mood_id, resolved)
        )

    async def add_mood(self, name: str, parent: int | None = None) -> None:
        """Create a mood."""
        if parent is None:
            parent = await self.mood_parent()
        await self.create(mood_path(parent), AddMoodRequest(name=name))

    async def remove_mood(self, mood_id: int, parent: int | None = None) -> None:
        """Delete a mood."""
        if parent is None:
            parent = await self.mood_parent()
        await self.delete(mood_path(parent, mood_id))

    # === Observation ===

    async def observe_gateway(self) -> Subscription[Gateway]:
        """Observe the gateway; call ``events()`` on the result for updates."""
        channel = await self._session.ensure_connected()
        return await gateway_subscription(channel)

    async def observe_device(self, device_id: int) -> Subscription[Device]:
        """Observe a device, e.g. to follow changes made with a remote."""
        channel = await self._session.ensure_connected()
        return await device_subscription(channel, device_id)


def _duration(transition_ms: int | None) -> int | None:
    if transition_ms is None:
        return None
    return ms_to_duration(transition_ms)
