"""Helpers for compact debug logging.

Feed frames can carry the whole collection (a ``sync`` snapshot), so they
are clipped before being written to DEBUG logs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def clip_for_log(value: str | bytes, *, max_chars: int = 256) -> str:
    """Return a printable, length-bounded rendition of a raw frame."""
    if isinstance(value, bytes):
        text = value.decode("utf-8", errors="replace")
    else:
        text = value
    if len(text) > max_chars:
        return f"{text[:max_chars]}…<truncated {len(text) - max_chars} chars>"
    return text


def describe_delta(delta: Any) -> str:
    """One-line summary of a decoded delta (never the full payload)."""
    action = getattr(delta, "action", "?")
    if action == "sync":
        data = getattr(delta, "data", None)
        size = len(data) if isinstance(data, Mapping) else 0
        return f"sync records={size}"
    return f"{action} id={getattr(delta, 'id', None)!r}"
