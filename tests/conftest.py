from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any

import aiohttp
import pytest

FEED_URL = "ws://feed.test/ws"


@dataclass(frozen=True)
class FakeMessage:
    type: aiohttp.WSMsgType
    data: Any = None


class FakeWebSocket:
    """In-memory stand-in for ``aiohttp.ClientWebSocketResponse``."""

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.closed = False
        self.close_calls = 0
        self.fail_send = False
        self._inbox: asyncio.Queue[FakeMessage | None] = asyncio.Queue()

    def feed_text(self, text: str) -> None:
        self._inbox.put_nowait(FakeMessage(aiohttp.WSMsgType.TEXT, text))

    def feed_json(self, payload: dict[str, Any]) -> None:
        self.feed_text(json.dumps(payload))

    def feed_error(self) -> None:
        self._inbox.put_nowait(FakeMessage(aiohttp.WSMsgType.ERROR))

    def peer_close(self) -> None:
        self._inbox.put_nowait(None)

    async def send_str(self, data: str) -> None:
        if self.closed or self.fail_send:
            raise ConnectionResetError("Cannot write to closing transport")
        self.sent.append(data)

    async def close(self) -> bool:
        self.close_calls += 1
        self.closed = True
        self._inbox.put_nowait(None)
        return True

    def exception(self) -> BaseException | None:
        return None

    def __aiter__(self) -> FakeWebSocket:
        return self

    async def __anext__(self) -> FakeMessage:
        msg = await self._inbox.get()
        if msg is None:
            self.closed = True
            raise StopAsyncIteration
        return msg


class FakeConnector:
    """Connector double: hands out queued outcomes, then fresh sockets."""

    HANG = "hang"

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.sockets: list[FakeWebSocket] = []
        self._plan: list[Any] = []

    def queue(self, outcome: Any) -> None:
        self._plan.append(outcome)

    async def __call__(self, url: str) -> FakeWebSocket:
        self.calls.append(url)
        outcome = self._plan.pop(0) if self._plan else FakeWebSocket()
        if outcome == self.HANG:
            await asyncio.Event().wait()
        if isinstance(outcome, BaseException):
            raise outcome
        self.sockets.append(outcome)
        return outcome

    @property
    def latest(self) -> FakeWebSocket:
        return self.sockets[-1]


async def settle(rounds: int = 10) -> None:
    """Let pending callbacks and tasks run to their next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()
