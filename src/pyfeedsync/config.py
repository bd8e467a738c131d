"""Client configuration for pyfeedsync."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit

from pyfeedsync.exceptions import FeedSyncConfigError

#: Path of the feed endpoint on the hosting server.
DEFAULT_FEED_PATH = "/ws"

#: Fixed delay between a disconnection and the next connection attempt.
DEFAULT_RECONNECT_DELAY: float = 5.0

_SCHEME_MAP = {
    "http": "ws",
    "https": "wss",
    "ws": "ws",
    "wss": "wss",
}


def endpoint_from_page_url(page_url: str, *, path: str = DEFAULT_FEED_PATH) -> str:
    """Derive the WebSocket endpoint from the URL of the hosting page.

    ``http`` pages upgrade to ``ws``, ``https`` pages to ``wss``; the
    host (and port) are kept, the path is replaced by *path*.
    """
    parts = urlsplit(page_url.strip())
    scheme = _SCHEME_MAP.get(parts.scheme.lower())
    if scheme is None:
        raise FeedSyncConfigError(f"Unsupported page URL scheme: {page_url!r}")
    if not parts.netloc:
        raise FeedSyncConfigError(f"Page URL has no host: {page_url!r}")
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{scheme}://{parts.netloc}{path}"


def _env_float(env: Mapping[str, str], key: str) -> float | None:
    value = env.get(key)
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise FeedSyncConfigError(f"{key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class FeedConfig:
    """Client configuration.

    Parameters
    ----------
    url : str
        WebSocket endpoint of the feed (``ws://`` or ``wss://``).
    reconnect_delay : float
        Seconds to wait after a disconnection before reconnecting.
        The delay is fixed; there is no backoff growth.
    connect_timeout : float or None
        Upper bound for a single connection attempt.  ``None`` (default)
        lets a stalled attempt wait indefinitely.
    heartbeat : float or None
        WebSocket ping interval handed to aiohttp.  ``None`` disables it.
    """

    url: str
    reconnect_delay: float = DEFAULT_RECONNECT_DELAY
    connect_timeout: float | None = None
    heartbeat: float | None = None

    def __post_init__(self) -> None:
        scheme = urlsplit(self.url).scheme.lower()
        if scheme not in {"ws", "wss"}:
            raise FeedSyncConfigError(f"Feed URL must use ws:// or wss://, got {self.url!r}")
        if self.reconnect_delay < 0:
            raise FeedSyncConfigError("reconnect_delay must be >= 0")
        if self.connect_timeout is not None and self.connect_timeout <= 0:
            raise FeedSyncConfigError("connect_timeout must be > 0 when set")
        if self.heartbeat is not None and self.heartbeat <= 0:
            raise FeedSyncConfigError("heartbeat must be > 0 when set")

    @classmethod
    def from_page_url(cls, page_url: str, **overrides: Any) -> FeedConfig:
        """Create configuration for the feed served next to *page_url*."""
        path = overrides.pop("path", DEFAULT_FEED_PATH)
        return cls(url=endpoint_from_page_url(page_url, path=path), **overrides)

    @classmethod
    def from_env(cls, **overrides: Any) -> FeedConfig:
        """Create configuration from environment variables.

        Reads ``FEEDSYNC_URL`` (or ``FEEDSYNC_PAGE_URL`` to derive it) and
        the optional ``FEEDSYNC_RECONNECT_DELAY``, ``FEEDSYNC_CONNECT_TIMEOUT``
        and ``FEEDSYNC_HEARTBEAT``.  Explicit keyword arguments override
        environment values.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {}
        url = env.get("FEEDSYNC_URL")
        page_url = env.get("FEEDSYNC_PAGE_URL")
        if url:
            config_kwargs["url"] = url
        elif page_url:
            config_kwargs["url"] = endpoint_from_page_url(page_url)

        _ENV_FLOAT_MAP = {
            "FEEDSYNC_RECONNECT_DELAY": "reconnect_delay",
            "FEEDSYNC_CONNECT_TIMEOUT": "connect_timeout",
            "FEEDSYNC_HEARTBEAT": "heartbeat",
        }
        for env_key, field_name in _ENV_FLOAT_MAP.items():
            if field_name in overrides:
                continue
            value = _env_float(env, env_key)
            if value is not None:
                config_kwargs[field_name] = value

        config_kwargs.update(overrides)
        if "url" not in config_kwargs:
            raise FeedSyncConfigError("Set FEEDSYNC_URL or FEEDSYNC_PAGE_URL (or pass url=...)")

        return cls(**config_kwargs)
