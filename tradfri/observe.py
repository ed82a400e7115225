"""Typed event streams over raw observe notifications.

Subscribing registers an observation on one resource path. Each call to
``Subscription.events()`` starts a pair of tasks:

- a raw reader that moves notification bodies from the channel into a
  single-slot handoff queue, and
- a forwarder that decodes each body into the entity type and puts it on
  the output queue of the returned ``EventStream``.

A body that fails to decode is logged and skipped; it never ends the
stream. When the channel's notification stream ends (connection closed,
observation cancelled by the gateway) the output stream is closed and
iteration stops.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Any, Callable, Generic, TypeVar

from . import codec
from .const import PATH_GATEWAY_INFO
from .exceptions import DecodeError, TransportError
from .models import Device, Gateway
from .paths import device_path
from .protocols import SecureChannel

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

# Marks the end of a stream on the internal queues
_CLOSED: Any = object()


class EventStream(Generic[T]):
    """Async iterator over decoded notifications of one subscription."""

    def __init__(
        self,
        path: str,
        stream: AsyncIterator[bytes],
        decode: Callable[[bytes], T],
    ) -> None:
        self.path = path
        self._decode = decode
        self._handoff: asyncio.Queue[Any] = asyncio.Queue(maxsize=1)
        self._events: asyncio.Queue[Any] = asyncio.Queue()
        self._finished = False
        self._reader = asyncio.create_task(self._read_raw(stream))
        self._forwarder = asyncio.create_task(self._forward())

    def __aiter__(self) -> EventStream[T]:
        return self

    async def __anext__(self) -> T:
        if self._finished:
            raise StopAsyncIteration
        item = await self._events.get()
        if item is _CLOSED:
            self._finished = True
            raise StopAsyncIteration
        return item

    @property
    def closed(self) -> bool:
        """Return True once the underlying stream has ended."""
        return self._forwarder.done()

    async def aclose(self) -> None:
        """Stop both tasks and end iteration."""
        for task in (self._reader, self._forwarder):
            task.cancel()
        await asyncio.gather(self._reader, self._forwarder, return_exceptions=True)
        self._events.put_nowait(_CLOSED)

    async def _read_raw(self, stream: AsyncIterator[bytes]) -> None:
        try:
            async for frame in stream:
                await self._handoff.put(frame)
        except asyncio.CancelledError:
            raise
        except TransportError as err:
            _LOGGER.warning("Observation of %s ended: %s", self.path, err)
        except Exception as err:
            _LOGGER.warning("Observation of %s failed: %r", self.path, err)
        # not reached on cancellation; aclose() closes the output itself
        await self._handoff.put(_CLOSED)

    async def _forward(self) -> None:
        try:
            while True:
                frame = await self._handoff.get()
                if frame is _CLOSED:
                    break
                try:
                    value = self._decode(frame)
                except DecodeError as err:
                    _LOGGER.debug(
                        "Dropping malformed notification on %s: %s", self.path, err
                    )
                    continue
                except Exception as err:
                    _LOGGER.error(
                        "Error decoding notification on %s: %r", self.path, err
                    )
                    continue
                self._events.put_nowait(value)
        finally:
            _LOGGER.debug("Observation stream for %s closed", self.path)
            self._events.put_nowait(_CLOSED)


class Subscription(Generic[T]):
    """An observation registered on one resource.

    ``events()`` starts a fresh task pair on every call and all of them
    read from the same notification stream, so each notification reaches
    only one of them. Call it once per subscription.
    """

    def __init__(
        self,
        path: str,
        stream: AsyncIterator[bytes],
        decode: Callable[[bytes], T],
    ) -> None:
        self.path = path
        self._stream = stream
        self._decode = decode

    @classmethod
    async def open(
        cls,
        channel: SecureChannel,
        path: str,
        decode: Callable[[bytes], T],
    ) -> Subscription[T]:
        """Register an observation on ``path``.

        Raises:
            TransportError: The gateway did not accept the observation.
        """
        _LOGGER.debug("Observing %s", path)
        stream = await channel.observe(path)
        return cls(path, stream, decode)

    def events(self) -> EventStream[T]:
        """Start forwarding decoded notifications and return the stream."""
        return EventStream(self.path, self._stream, self._decode)


def decode_gateway(payload: bytes) -> Gateway:
    """Decode a gateway notification body."""
    return codec.decode(Gateway, payload)


def decode_device(payload: bytes) -> Device:
    """Decode a device notification body."""
    return codec.decode(Device, payload)


async def gateway_subscription(channel: SecureChannel) -> Subscription[Gateway]:
    """Observe the gateway resource."""
    return await Subscription.open(channel, PATH_GATEWAY_INFO, decode_gateway)


async def device_subscription(
    channel: SecureChannel, device_id: int
) -> Subscription[Device]:
    """Observe one device."""
    return await Subscription.open(channel, device_path(device_id), decode_device)
