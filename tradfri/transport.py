"""CoAP over DTLS secure channel backed by aiocoap.

DTLS needs the optional ``DTLSSocket`` package (``pip install
tradfri[dtls]``); without it aiocoap cannot open ``coaps://`` URIs and
every connect fails with a TransportError.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Any

import async_timeout
from aiocoap import Context, Message
from aiocoap import error as coap_error
from aiocoap.numbers.codes import Code

from .const import REQUEST_TIMEOUT
from .exceptions import TransportError
from .protocols import Method, Response

_LOGGER = logging.getLogger(__name__)

_METHODS = {
    Method.FETCH: Code.GET,
    Method.CREATE: Code.POST,
    Method.REPLACE: Code.PUT,
    Method.DELETE: Code.DELETE,
}

_END: Any = object()


def _dotted(code: int) -> str:
    """Format a response code as "class.detail", e.g. 69 -> "2.05"."""
    return f"{code >> 5}.{code & 0x1F:02d}"


class _ObservationStream:
    """Queue-backed notification stream that tolerates several readers."""

    def __init__(self, path: str, request: Any, initial: bytes | None = None) -> None:
        self._path = path
        self._request = request
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        if initial:
            self._queue.put_nowait(initial)
        self._pump = asyncio.create_task(self._run())

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self

    async def __anext__(self) -> bytes:
        item = await self._queue.get()
        if item is _END:
            # let any other reader see the end as well
            self._queue.put_nowait(_END)
            raise StopAsyncIteration
        if isinstance(item, Exception):
            self._queue.put_nowait(_END)
            raise item
        return item

    async def _run(self) -> None:
        try:
            async for notification in self._request.observation:
                self._queue.put_nowait(notification.payload)
        except (coap_error.Error, OSError) as err:
            _LOGGER.debug("Observation of %s failed: %s", self._path, err)
            self._queue.put_nowait(
                TransportError(f"Observation of {self._path} failed: {err}")
            )
            return
        self._queue.put_nowait(_END)

    def cancel(self) -> None:
        """Cancel the observation and end the stream."""
        self._request.observation.cancel()
        self._pump.cancel()
        self._queue.put_nowait(_END)


class AiocoapChannel:
    """A DTLS session with one gateway."""

    def __init__(
        self,
        context: Context,
        base_uri: str,
        request_timeout: float | None,
    ) -> None:
        self._context = context
        self._base_uri = base_uri
        self._request_timeout = request_timeout
        self._observations: list[_ObservationStream] = []

    async def request(
        self,
        method: Method,
        path: str,
        payload: bytes | None = None,
    ) -> Response:
        """Send one confirmable request and wait for the response."""
        message = Message(
            code=_METHODS[method], uri=self._base_uri + path, payload=payload or b""
        )
        try:
            async with async_timeout.timeout(self._request_timeout):
                response = await self._context.request(message).response
        except asyncio.TimeoutError as err:
            raise TransportError(f"{method.value} {path} timed out") from err
        except (coap_error.Error, OSError) as err:
            raise TransportError(f"{method.value} {path} failed: {err}") from err
        return Response(code=_dotted(response.code), payload=response.payload or None)

    async def observe(self, path: str) -> AsyncIterator[bytes]:
        """Register an observation and return its notification stream."""
        message = Message(code=Code.GET, uri=self._base_uri + path)
        message.opt.observe = 0
        request = self._context.request(message)
        try:
            async with async_timeout.timeout(self._request_timeout):
                first = await request.response
        except asyncio.TimeoutError as err:
            raise TransportError(f"Observe {path} timed out") from err
        except (coap_error.Error, OSError) as err:
            raise TransportError(f"Observe {path} failed: {err}") from err

        if not first.code.is_successful():
            raise TransportError(f"Observe {path} refused: {_dotted(first.code)}")

        # the registration response carries the current state
        stream = _ObservationStream(path, request, first.payload)
        self._observations.append(stream)
        return stream

    async def close(self) -> None:
        """Cancel observations and shut the context down."""
        for stream in self._observations:
            stream.cancel()
        self._observations.clear()
        await self._context.shutdown()


class AiocoapConnector:
    """Opens aiocoap DTLS channels."""

    def __init__(self, request_timeout: float | None = REQUEST_TIMEOUT) -> None:
        self._request_timeout = request_timeout

    async def connect(
        self,
        host: str,
        port: int,
        identity: str,
        psk: str,
    ) -> AiocoapChannel:
        """Create a client context holding the PSK credentials for host."""
        base_uri = f"coaps://{host}:{port}"
        _LOGGER.debug("Opening DTLS context for %s as %s", base_uri, identity)
        try:
            context = await Context.create_client_context()
        except (coap_error.Error, OSError) as err:
            raise TransportError(f"Cannot create CoAP context: {err}") from err

        context.client_credentials.load_from_dict(
            {
                f"{base_uri}/*": {
                    "dtls": {
                        "psk": psk.encode("utf-8"),
                        "client-identity": identity.encode("utf-8"),
                    }
                }
            }
        )
        return AiocoapChannel(context, base_uri, self._request_timeout)
