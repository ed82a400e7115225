"""Shared fixtures for gateway client tests."""
from __future__ import annotations

import json
from collections.abc import AsyncIterator
from typing import Any

import pytest

from tradfri.client import TradfriClient
from tradfri.const import PATH_GATEWAY_IDENT, PREAUTH_IDENTITY
from tradfri.protocols import (
    CODE_CHANGED,
    CODE_CONTENT,
    CODE_CREATED,
    CODE_DELETED,
    Method,
    Response,
)

TEST_HOST = "192.168.1.20"
TEST_KEY = "SECURITYCODE1234"
TEST_IDENTITY = "client-42"
TEST_PSK = "s3cr3tPsk"

# Default status for writes that have no scripted reply
_WRITE_CODES = {
    Method.CREATE: CODE_CREATED,
    Method.REPLACE: CODE_CHANGED,
    Method.DELETE: CODE_DELETED,
}


def json_body(data: Any) -> bytes:
    """Encode a wire object the way the gateway does."""
    return json.dumps(data).encode("utf-8")


class FakeChannel:
    """In-memory secure channel that records requests and replays scripts.

    Replies are looked up by (method, path). A scripted reply can be a
    Response, an exception instance to raise, or a sequence set with
    replies() and consumed in order.
    """

    def __init__(self) -> None:
        self.requests: list[tuple[Method, str, bytes | None]] = []
        self.routes: dict[tuple[Method, str], Any] = {}
        self.notifications: dict[str, list[Any]] = {}
        self.observed: list[str] = []
        self.closed = False

    def reply(
        self,
        method: Method,
        path: str,
        data: Any = None,
        code: str | None = None,
    ) -> None:
        """Script the reply for one (method, path)."""
        if isinstance(data, (Response, Exception)):
            self.routes[(method, path)] = data
            return
        body = json_body(data) if data is not None else None
        self.routes[(method, path)] = Response(code or CODE_CONTENT, body)

    def replies(self, method: Method, path: str, *responses: Any) -> None:
        """Script successive replies for one (method, path)."""
        self.routes[(method, path)] = list(responses)

    def json_requests(self) -> list[tuple[Method, str, Any]]:
        """Return recorded requests with decoded bodies."""
        return [
            (method, path, json.loads(body) if body else None)
            for method, path, body in self.requests
        ]

    async def request(
        self,
        method: Method,
        path: str,
        payload: bytes | None = None,
    ) -> Response:
        self.requests.append((method, path, payload))
        scripted = self.routes.get((method, path))
        if isinstance(scripted, list):
            scripted = scripted.pop(0)
        if scripted is None:
            if method is Method.FETCH:
                return Response("4.04")
            return Response(_WRITE_CODES[method])
        if isinstance(scripted, Exception):
            raise scripted
        return scripted

    async def observe(self, path: str) -> AsyncIterator[bytes]:
        self.observed.append(path)
        frames = self.notifications.get(path, [])

        async def _stream() -> AsyncIterator[bytes]:
            for frame in frames:
                if isinstance(frame, Exception):
                    raise frame
                yield frame

        return _stream()

    async def close(self) -> None:
        self.closed = True


class FakeConnector:
    """Hands out a bootstrap channel for the pre-auth identity, else the main one."""

    def __init__(self, channel: FakeChannel, bootstrap: FakeChannel) -> None:
        self.channel = channel
        self.bootstrap = bootstrap
        self.connects: list[tuple[str, int, str, str]] = []
        self.fail_with: Exception | None = None

    async def connect(
        self,
        host: str,
        port: int,
        identity: str,
        psk: str,
    ) -> FakeChannel:
        self.connects.append((host, port, identity, psk))
        if self.fail_with is not None:
            raise self.fail_with
        if identity == PREAUTH_IDENTITY:
            return self.bootstrap
        return self.channel


@pytest.fixture
def channel() -> FakeChannel:
    """Create the operational channel."""
    return FakeChannel()


@pytest.fixture
def bootstrap_channel() -> FakeChannel:
    """Create a bootstrap channel that issues TEST_PSK."""
    bootstrap = FakeChannel()
    bootstrap.reply(
        Method.CREATE,
        PATH_GATEWAY_IDENT,
        {"9091": TEST_PSK, "9029": "1.21.031"},
        code=CODE_CREATED,
    )
    return bootstrap


@pytest.fixture
def connector(channel: FakeChannel, bootstrap_channel: FakeChannel) -> FakeConnector:
    """Create a connector over the fake channels."""
    return FakeConnector(channel, bootstrap_channel)


@pytest.fixture
def client(connector: FakeConnector) -> TradfriClient:
    """Create a client that already holds a pre-shared key."""
    return TradfriClient(
        TEST_HOST,
        TEST_KEY,
        TEST_IDENTITY,
        connector=connector,
        psk=TEST_PSK,
    )


@pytest.fixture
def device_payload() -> dict[str, Any]:
    """Wire object of a color bulb."""
    return {
        "3": {
            "0": "IKEA of Sweden",
            "1": "TRADFRI bulb E27 CWS opal 600lm",
            "2": "",
            "3": "1.3.009",
            "6": 1,
        },
        "3311": [
            {
                "5706": "f1e0b5",
                "5709": 30138,
                "5710": 26909,
                "5850": 1,
                "5851": 254,
                "9003": 0,
            }
        ],
        "5750": 2,
        "9001": "Living room",
        "9002": 1546801839,
        "9003": 65537,
        "9019": 1,
        "9020": 1546802000,
        "9054": 0,
    }


@pytest.fixture
def group_payload() -> dict[str, Any]:
    """Wire object of a group with two lights."""
    return {
        "5850": 1,
        "5851": 200,
        "9001": "Kitchen",
        "9002": 1546801000,
        "9003": 131073,
        "9018": {"15002": {"9003": [65537, 65538]}},
        "9039": 196608,
    }


@pytest.fixture
def mood_payload() -> dict[str, Any]:
    """Wire object of a mood."""
    return {
        "9001": "FOCUS",
        "9002": 1546801500,
        "9003": 196608,
        "9057": 2,
        "9058": 1,
        "9068": 1,
        "15013": [
            {"5850": 1, "5851": 254, "5711": 250, "9003": 65537},
            {"5850": 1, "5851": 127, "9003": 65538},
        ],
    }


@pytest.fixture
def gateway_payload() -> dict[str, Any]:
    """Wire object of the gateway resource."""
    return {
        "9023": "pool.ntp.org",
        "9029": "1.21.031",
        "9054": 0,
        "9059": 1546802500,
        "9060": "2019-01-06T19:08:20.000Z",
        "9061": 0,
        "9081": "7e1b1fd0b8b3c4ab",
        "9092": 0,
    }
