"""Outbound command path: intent -> JSON text frame -> live transport."""

from __future__ import annotations

import logging
from typing import Protocol

from pyfeedsync.models.intent import Intent
from pyfeedsync.protocol import encode_intent

_logger = logging.getLogger(__name__)


class CommandChannel(Protocol):
    def is_connected(self) -> bool: ...

    async def send(self, data: str) -> bool: ...


class CommandSink:
    """Best-effort, at-most-once delivery of user intents.

    Intents issued while the channel is down are dropped: nothing is
    queued and nothing is raised.  The user can retry once the feed is
    back.
    """

    def __init__(self, channel: CommandChannel) -> None:
        self._channel = channel

    async def send(self, intent: Intent) -> bool:
        """Write *intent* if the channel is connected; return whether it was written."""
        if not self._channel.is_connected():
            _logger.debug("Dropping intent action=%s id=%s (not connected)", intent.action, intent.id)
            return False
        return await self._channel.send(encode_intent(intent))

    async def remove(self, record_id: str) -> bool:
        return await self.send(Intent.remove(record_id))
