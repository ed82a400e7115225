"""Secure channel protocol interfaces.

The datagram transport (DTLS session, retransmission, observe
registration) is an external collaborator. These protocols describe what
the client needs from it so that a real CoAP stack or an in-memory fake
can be plugged in.
"""
from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

# Response codes, "class.detail"
CODE_CREATED = "2.01"
CODE_DELETED = "2.02"
CODE_CHANGED = "2.04"
CODE_CONTENT = "2.05"


class Method(str, Enum):
    """The four verbs the gateway understands."""

    FETCH = "GET"
    CREATE = "POST"
    REPLACE = "PUT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class Response:
    """Status and optional body of one exchange."""

    code: str
    payload: bytes | None = None

    @property
    def is_success(self) -> bool:
        """Return True for 2.xx codes."""
        return self.code.startswith("2.")

    @property
    def is_error(self) -> bool:
        """Return True for 4.xx and 5.xx codes."""
        return self.code[:2] in ("4.", "5.")


@runtime_checkable
class SecureChannel(Protocol):
    """An established request/response + observe session with a gateway."""

    async def request(
        self,
        method: Method,
        path: str,
        payload: bytes | None = None,
    ) -> Response:
        """Send one confirmable request and wait for its response.

        Args:
            method: Request verb.
            path: Resource path, e.g. "/15001/65537".
            payload: Request body, None for fetch/delete.

        Returns:
            Response with status code and body.

        Raises:
            TransportError: The exchange failed at the channel level.
        """
        ...

    async def observe(self, path: str) -> AsyncIterator[bytes]:
        """Register an observation on a resource.

        Args:
            path: Resource path to observe.

        Returns:
            Async iterator yielding the body of every notification. It
            ends when the observation or the connection is torn down.

        Raises:
            TransportError: The registration failed.
        """
        ...

    async def close(self) -> None:
        """Tear down the session. Open observations end."""
        ...


@runtime_checkable
class ChannelConnector(Protocol):
    """Factory that opens secure channels to a gateway."""

    async def connect(
        self,
        host: str,
        port: int,
        identity: str,
        psk: str,
    ) -> SecureChannel:
        """Open a secure channel authenticated with identity/psk.

        Raises:
            TransportError: The handshake failed.
        """
        ...
