"""Session establishment with the gateway.

A new client identity has to be registered once: the client opens a
bootstrap channel with the fixed pre-auth identity and the security code
from the gateway label, asks the gateway to issue a pre-shared key for
the chosen identity, and then opens the operational channel with that
identity/key pair.

The key is cached for the lifetime of the manager only. Callers that want
to skip the exchange next time read ``psk`` and pass it back in.
"""
from __future__ import annotations

import asyncio
import logging
from enum import Enum

from . import codec
from .const import DEFAULT_PORT, PATH_GATEWAY_IDENT, PREAUTH_IDENTITY
from .exceptions import AuthenticationFailed, DecodeError, TransportError
from .protocols import CODE_CREATED, ChannelConnector, Method, SecureChannel

_LOGGER = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle of a session; close() drops CONNECTED back to AUTHENTICATED."""

    UNAUTHENTICATED = "unauthenticated"
    ACQUIRING_KEY = "acquiring_key"
    AUTHENTICATED = "authenticated"
    CONNECTED = "connected"


class SessionManager:
    """Owns the single secure channel of a client.

    Connection attempts are serialized by a lock: when several tasks need
    a session before one exists, the first one performs the credential
    exchange and the others reuse the channel it opened.
    """

    def __init__(
        self,
        host: str,
        key: str,
        identity: str,
        connector: ChannelConnector,
        *,
        port: int = DEFAULT_PORT,
        psk: str | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._key = key
        self._identity = identity
        self._connector = connector
        self._psk = psk or None
        self._channel: SecureChannel | None = None
        self._state = (
            SessionState.AUTHENTICATED if self._psk else SessionState.UNAUTHENTICATED
        )
        self._lock = asyncio.Lock()

    @property
    def state(self) -> SessionState:
        """Return the current session state."""
        return self._state

    @property
    def identity(self) -> str:
        """Return the identity the operational channel uses."""
        return self._identity

    @property
    def psk(self) -> str | None:
        """Return the cached pre-shared key, if one was obtained."""
        return self._psk

    @property
    def channel(self) -> SecureChannel | None:
        """Return the open channel, if any."""
        return self._channel

    async def connect(self, identity: str | None = None) -> SecureChannel:
        """Open the operational channel, acquiring a key first if needed.

        Calling again with a cached key skips the credential exchange and
        reopens the channel directly.

        Args:
            identity: Identity to register/connect with. Defaults to the
                identity given at construction. Changing it drops the
                cached key.

        Returns:
            The newly opened channel.

        Raises:
            AuthenticationFailed: Credential exchange failed.
            TransportError: The operational handshake failed.
        """
        async with self._lock:
            return await self._connect(identity)

    async def ensure_connected(self) -> SecureChannel:
        """Return the open channel, establishing the session if needed."""
        channel = self._channel
        if channel is not None:
            return channel
        async with self._lock:
            # another task may have connected while we waited
            if self._channel is not None:
                return self._channel
            return await self._connect(None)

    async def close(self) -> None:
        """Close the channel. The cached key survives."""
        async with self._lock:
            await self._close_channel()

    async def _connect(self, identity: str | None) -> SecureChannel:
        if identity is not None and identity != self._identity:
            _LOGGER.debug("Identity changed to %s, dropping cached key", identity)
            self._identity = identity
            self._psk = None

        await self._close_channel()

        if self._psk is None:
            self._psk = await self._acquire_psk()

        _LOGGER.info(
            "Connecting to gateway %s:%d as %s", self._host, self._port, self._identity
        )
        self._channel = await self._connector.connect(
            self._host, self._port, self._identity, self._psk
        )
        self._state = SessionState.CONNECTED
        return self._channel

    async def _acquire_psk(self) -> str:
        """Run the credential exchange for the current identity."""
        self._state = SessionState.ACQUIRING_KEY
        _LOGGER.info("Requesting pre-shared key for identity %s", self._identity)

        try:
            bootstrap = await self._connector.connect(
                self._host, self._port, PREAUTH_IDENTITY, self._key
            )
        except TransportError as err:
            self._state = SessionState.UNAUTHENTICATED
            raise AuthenticationFailed(f"Bootstrap handshake failed: {err}") from err

        try:
            response = await bootstrap.request(
                Method.CREATE,
                PATH_GATEWAY_IDENT,
                codec.dumps(codec.psk_request(self._identity)),
            )
            if response.code != CODE_CREATED:
                raise AuthenticationFailed(
                    f"Credential exchange returned {response.code}", code=response.code
                )
            psk = codec.decode_psk(response.payload)
        except TransportError as err:
            self._state = SessionState.UNAUTHENTICATED
            raise AuthenticationFailed(f"Credential exchange failed: {err}") from err
        except DecodeError as err:
            self._state = SessionState.UNAUTHENTICATED
            raise AuthenticationFailed(str(err), code=CODE_CREATED) from err
        except AuthenticationFailed:
            self._state = SessionState.UNAUTHENTICATED
            raise
        finally:
            await bootstrap.close()

        self._state = SessionState.AUTHENTICATED
        _LOGGER.debug("Obtained pre-shared key for identity %s", self._identity)
        return psk

    async def _close_channel(self) -> None:
        channel = self._channel
        if channel is None:
            return
        self._channel = None
        if self._psk is not None:
            self._state = SessionState.AUTHENTICATED
        await channel.close()
