"""Custom exception hierarchy for pyfeedsync."""

from __future__ import annotations


class FeedSyncError(Exception):
    """Base exception for all pyfeedsync errors."""


class FeedSyncConfigError(FeedSyncError):
    """Invalid or missing configuration."""


class DecodeError(FeedSyncError):
    """Inbound frame could not be decoded into a delta.

    Raised for frames that are not JSON, not a JSON object, or that lack
    the fields their action requires.  The channel logs and discards the
    frame; it never closes the transport because of it.
    """

    def __init__(
        self,
        message: str,
        *,
        action: str | None = None,
        raw: str | bytes = "",
    ) -> None:
        self.action = action
        self.raw = raw
        super().__init__(message)


class UnknownActionError(DecodeError):
    """Structurally valid frame whose action tag is not ``sync``/``add``/``del``."""


class FeedTransportError(FeedSyncError):
    """WebSocket-level failure (connect refused, handshake error, reset)."""

    def __init__(self, message: str, *, url: str = "") -> None:
        self.url = url
        super().__init__(message)
