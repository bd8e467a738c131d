"""Feed wire protocol: JSON text frames in both directions.

Inbound frames are decoded once, at the boundary, into one of the
:mod:`pyfeedsync.models.delta` variants.  Everything downstream matches
on the variant type and never looks at the raw ``action`` string again.
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from pyfeedsync._logfmt import clip_for_log
from pyfeedsync.exceptions import DecodeError, UnknownActionError
from pyfeedsync.models.delta import DELTA_ACTIONS, AddDelta, DeleteDelta, SyncDelta, delta_adapter
from pyfeedsync.models.intent import Intent

_logger = logging.getLogger(__name__)


def decode(raw: str | bytes) -> SyncDelta | AddDelta | DeleteDelta:
    """Decode one inbound frame into a delta.

    Raises
    ------
    DecodeError
        The frame is not a JSON object, or the fields its action needs
        are missing or of the wrong shape.
    UnknownActionError
        The frame is well formed but its action is not one of
        ``sync``, ``add`` or ``del``.
    """
    try:
        payload = json.loads(raw)
    # ValueError also covers oversized integer literals; deep nesting
    # exhausts the parser's recursion limit.
    except (ValueError, RecursionError) as exc:
        raise DecodeError(f"Frame is not valid JSON: {exc}", raw=raw) from exc

    if not isinstance(payload, dict):
        raise DecodeError("Frame is not a JSON object", raw=raw)

    action = payload.get("action")
    if not isinstance(action, str) or action not in DELTA_ACTIONS:
        raise UnknownActionError(
            f"Unknown action {action!r}",
            action=action if isinstance(action, str) else None,
            raw=raw,
        )

    try:
        return delta_adapter.validate_python(payload)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in err["loc"][1:]) or "?" for err in exc.errors())
        raise DecodeError(f"Malformed {action!r} frame: invalid {fields}", action=action, raw=raw) from exc


def decode_or_none(raw: str | bytes) -> SyncDelta | AddDelta | DeleteDelta | None:
    """Decode a frame, logging and discarding it when it cannot be used."""
    try:
        return decode(raw)
    except UnknownActionError as exc:
        _logger.debug("Discarding frame with unknown action=%r frame=%s", exc.action, clip_for_log(raw))
    except DecodeError as exc:
        _logger.debug("Discarding malformed frame: %s frame=%s", exc, clip_for_log(raw))
    return None


def encode_intent(intent: Intent) -> str:
    """Serialize an outbound intent to its compact JSON text frame."""
    return json.dumps(intent.model_dump(mode="json"), separators=(",", ":"))
