"""High-level async client for a replicated record feed."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

import aiohttp

from pyfeedsync._channel import ChannelManager, ChannelState, Connector, aiohttp_connector
from pyfeedsync.commands import CommandSink
from pyfeedsync.config import FeedConfig
from pyfeedsync.exceptions import FeedSyncError
from pyfeedsync.models.intent import Intent
from pyfeedsync.state.store import ReplicaStore

_logger = logging.getLogger(__name__)


class FeedClient:
    """Async client that mirrors a server-held collection locally.

    Usage::

        async with FeedClient(FeedConfig.from_page_url("http://localhost:8080/")) as client:
            client.store.subscribe(print)
            await client.wait_until_connected(10)
            await client.remove("MG-1")
    """

    def __init__(
        self,
        config: FeedConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        store: ReplicaStore | None = None,
        connect: Connector | None = None,
        on_change: Callable[[Mapping[str, dict[str, Any]]], None] | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._store = store if store is not None else ReplicaStore()
        self._connect = connect
        self._channel: ChannelManager | None = None
        self._sink: CommandSink | None = None
        self._state_waiters: list[asyncio.Event] = []
        if on_change is not None:
            self._store.subscribe(on_change)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> FeedClient:
        connect = self._connect
        if connect is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            connect = aiohttp_connector(self._http_session, heartbeat=self._config.heartbeat)
        self._channel = ChannelManager(
            self._config.url,
            store=self._store,
            connect=connect,
            reconnect_delay=self._config.reconnect_delay,
            connect_timeout=self._config.connect_timeout,
            on_state_change=self._on_state_change,
            logger=_logger,
        )
        self._sink = CommandSink(self._channel)
        self._channel.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        channel = self._channel
        self._channel = None
        self._sink = None
        if channel is not None:
            await channel.close()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def store(self) -> ReplicaStore:
        return self._store

    @property
    def state(self) -> ChannelState:
        if self._channel is None:
            return ChannelState.DISCONNECTED
        return self._channel.state

    def is_connected(self) -> bool:
        return self._channel is not None and self._channel.is_connected()

    def _require_sink(self) -> CommandSink:
        if self._sink is None:
            raise FeedSyncError("Client not started. Use 'async with FeedClient(...) as client:'")
        return self._sink

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def send(self, intent: Intent) -> bool:
        """Send *intent* if connected; dropped silently otherwise."""
        return await self._require_sink().send(intent)

    async def remove(self, record_id: str) -> bool:
        """Ask the server to delete *record_id*."""
        return await self._require_sink().remove(record_id)

    # ------------------------------------------------------------------
    # Connection waiting
    # ------------------------------------------------------------------

    def _on_state_change(self, state: ChannelState) -> None:
        if state != ChannelState.CONNECTED:
            return
        waiters, self._state_waiters = self._state_waiters, []
        for waiter in waiters:
            waiter.set()

    async def wait_until_connected(self, timeout: float | None = None) -> bool:
        """Wait until the channel is connected; ``False`` on timeout."""
        if self.is_connected():
            return True
        waiter = asyncio.Event()
        self._state_waiters.append(waiter)
        try:
            await asyncio.wait_for(waiter.wait(), timeout)
            return True
        except TimeoutError:
            return False
        finally:
            if waiter in self._state_waiters:
                self._state_waiters.remove(waiter)
