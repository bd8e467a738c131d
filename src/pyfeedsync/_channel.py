"""WebSocket channel lifecycle: connect, read, relinquish, reconnect.

The channel owns at most one live transport at a time.  Every
transition to ``disconnected`` schedules exactly one reconnect after a
fixed delay; the cycle repeats for as long as the channel runs.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from enum import StrEnum
from typing import Any, Protocol

import aiohttp

from pyfeedsync._logfmt import describe_delta
from pyfeedsync.config import DEFAULT_RECONNECT_DELAY
from pyfeedsync.exceptions import FeedTransportError
from pyfeedsync.protocol import decode_or_none
from pyfeedsync.state.store import ReplicaStore


class ChannelState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


class WebSocketLike(Protocol):
    """Structural interface of the transport the channel drives.

    ``aiohttp.ClientWebSocketResponse`` satisfies it; tests pass
    in-memory doubles.
    """

    @property
    def closed(self) -> bool: ...

    async def send_str(self, data: str) -> None: ...

    async def close(self) -> Any: ...

    def exception(self) -> BaseException | None: ...

    def __aiter__(self) -> AsyncIterator[Any]: ...


Connector = Callable[[str], Awaitable[WebSocketLike]]


def aiohttp_connector(session: aiohttp.ClientSession, *, heartbeat: float | None = None) -> Connector:
    """Build a connector that opens WebSockets through *session*."""

    async def _connect(url: str) -> WebSocketLike:
        return await session.ws_connect(url, heartbeat=heartbeat)

    return _connect


class ChannelManager:
    """Keeps one feed transport alive and applies its frames to a store."""

    def __init__(
        self,
        url: str,
        *,
        store: ReplicaStore,
        connect: Connector,
        reconnect_delay: float = DEFAULT_RECONNECT_DELAY,
        connect_timeout: float | None = None,
        on_state_change: Callable[[ChannelState], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._url = url
        self._store = store
        self._connect = connect
        self._reconnect_delay = reconnect_delay
        self._connect_timeout = connect_timeout
        self._on_state_change = on_state_change
        self._logger = logger or logging.getLogger(__name__)

        self._loop: asyncio.AbstractEventLoop | None = None
        self._state = ChannelState.DISCONNECTED
        self._ws: WebSocketLike | None = None
        self._task: asyncio.Task[None] | None = None
        # Single slot: scheduling replaces, never stacks.
        self._reconnect_handle: asyncio.TimerHandle | None = None
        self._closers: set[asyncio.Task[None]] = set()
        self._started = False
        self._closed = False
        self._attempts = 0

    @property
    def url(self) -> str:
        return self._url

    @property
    def state(self) -> ChannelState:
        """Current lifecycle state."""
        return self._state

    @property
    def reconnect_pending(self) -> bool:
        """Whether a reconnect attempt is scheduled and has not fired yet."""
        return self._reconnect_handle is not None

    @property
    def attempts(self) -> int:
        """Number of connection attempts made so far."""
        return self._attempts

    def is_connected(self) -> bool:
        return self._ws is not None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Make the first connection attempt immediately."""
        if self._started:
            return
        self._loop = asyncio.get_running_loop()
        self._started = True
        self._attempt()

    async def close(self) -> None:
        """Tear the channel down for good (end of the process/session)."""
        self._closed = True
        handle, self._reconnect_handle = self._reconnect_handle, None
        if handle is not None:
            handle.cancel()

        ws, self._ws = self._ws, None
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if ws is not None:
            await self._close_transport(ws)
        for closer in list(self._closers):
            with contextlib.suppress(asyncio.CancelledError):
                await closer
        self._set_state(ChannelState.DISCONNECTED)
        self._logger.debug("Channel closed url=%s", self._url)

    def drop(self, reason: str = "dropped") -> None:
        """Relinquish the live transport and fall back to reconnecting."""
        ws = self._ws
        if ws is not None and self._relinquish(ws, reason):
            self._spawn_close(ws)

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    async def send(self, data: str) -> bool:
        """Write one text frame if a transport is live.

        Returns ``False`` without raising when there is no live transport
        or the write fails; a failed write also drops the transport.
        """
        ws = self._ws
        if ws is None:
            return False
        try:
            await ws.send_str(data)
        except (aiohttp.ClientError, ConnectionError, RuntimeError) as exc:
            self._logger.debug("Channel send failed: %s", exc)
            if self._relinquish(ws, "send failed"):
                self._spawn_close(ws)
            return False
        return True

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _attempt(self) -> None:
        self._reconnect_handle = None
        if self._closed or self._loop is None:
            return
        self._task = self._loop.create_task(self._run(), name="pyfeedsync-channel")

    def _schedule_reconnect(self) -> None:
        if self._closed or self._loop is None:
            return
        if self._reconnect_handle is not None:
            self._reconnect_handle.cancel()
        self._logger.info("Reconnecting in %.1fs url=%s", self._reconnect_delay, self._url)
        self._reconnect_handle = self._loop.call_later(self._reconnect_delay, self._attempt)

    def _set_state(self, state: ChannelState) -> None:
        if state == self._state:
            return
        self._state = state
        if self._on_state_change is not None:
            try:
                self._on_state_change(state)
            except Exception:
                self._logger.debug("on_state_change callback failed", exc_info=True)

    async def _open(self) -> WebSocketLike:
        try:
            if self._connect_timeout is None:
                return await self._connect(self._url)
            return await asyncio.wait_for(self._connect(self._url), self._connect_timeout)
        except TimeoutError as exc:
            if self._connect_timeout is None:
                message = f"Connect to {self._url} timed out"
            else:
                message = f"Connect to {self._url} timed out after {self._connect_timeout}s"
            raise FeedTransportError(message, url=self._url) from exc
        except (aiohttp.ClientError, OSError) as exc:
            raise FeedTransportError(f"Connect to {self._url} failed: {exc}", url=self._url) from exc

    async def _run(self) -> None:
        self._set_state(ChannelState.CONNECTING)
        self._attempts += 1
        self._logger.debug("Channel connecting url=%s attempt=%d", self._url, self._attempts)
        try:
            ws = await self._open()
        except FeedTransportError as exc:
            self._logger.warning("Channel connect failed: %s", exc)
            self._set_state(ChannelState.DISCONNECTED)
            self._schedule_reconnect()
            return
        except Exception:
            self._logger.warning("Channel connect failed url=%s", self._url, exc_info=True)
            self._set_state(ChannelState.DISCONNECTED)
            self._schedule_reconnect()
            return

        self._ws = ws
        self._set_state(ChannelState.CONNECTED)
        self._logger.info("Channel connected url=%s", self._url)

        reason = "read loop failed"
        try:
            reason = await self._read(ws)
        except Exception:
            self._logger.warning("Channel read loop failed url=%s", self._url, exc_info=True)
        finally:
            self._relinquish(ws, reason)
            if not ws.closed:
                await self._close_transport(ws)

    async def _read(self, ws: WebSocketLike) -> str:
        try:
            async for msg in ws:
                if self._ws is not ws:
                    return "relinquished"
                if msg.type in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
                    self._handle_frame(msg.data)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    return f"transport error: {ws.exception()}"
        except (aiohttp.ClientError, OSError) as exc:
            return f"transport error: {exc}"
        return "closed by peer"

    def _handle_frame(self, data: str | bytes) -> None:
        delta = decode_or_none(data)
        if delta is None:
            return
        self._logger.debug("Applying %s", describe_delta(delta))
        self._store.apply(delta)

    def _relinquish(self, ws: WebSocketLike, reason: str) -> bool:
        if self._ws is not ws:
            return False
        self._ws = None
        self._set_state(ChannelState.DISCONNECTED)
        if self._closed:
            return True
        self._logger.warning("Channel disconnected (%s) url=%s", reason, self._url)
        self._schedule_reconnect()
        return True

    def _spawn_close(self, ws: WebSocketLike) -> None:
        if self._loop is None:
            return
        closer = self._loop.create_task(self._close_transport(ws))
        self._closers.add(closer)
        closer.add_done_callback(self._closers.discard)

    async def _close_transport(self, ws: WebSocketLike) -> None:
        try:
            await ws.close()
        except (aiohttp.ClientError, OSError, RuntimeError):
            self._logger.debug("Transport close failed url=%s", self._url, exc_info=True)
