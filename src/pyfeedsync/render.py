"""Plain-text presentation of the replica.

A thin observer: it reads records through :class:`MessageRecord` and
re-renders the whole table on every store notification.
"""

from __future__ import annotations

import sys
from collections.abc import Mapping
from typing import Any, TextIO

from pyfeedsync.models.record import MessageRecord

EMPTY_TEXT = "No messages"
_HEADERS = ("From", "To", "Body", "Id")


def render_table(snapshot: Mapping[str, Mapping[str, Any]]) -> str:
    """Render *snapshot* as an aligned From/To/Body/Id table."""
    if not snapshot:
        return EMPTY_TEXT

    rows: list[tuple[str, ...]] = []
    for record_id, record in snapshot.items():
        msg = MessageRecord.from_record(record)
        rows.append((msg.sender, msg.recipient, msg.body.replace("\n", " "), record_id))

    widths = [max(len(row[i]) for row in (_HEADERS, *rows)) for i in range(len(_HEADERS))]
    lines = [
        " | ".join(cell.ljust(width) for cell, width in zip(row, widths, strict=True)).rstrip()
        for row in (_HEADERS, *rows)
    ]
    lines.insert(1, "-+-".join("-" * width for width in widths))
    return "\n".join(lines)


class TableRenderer:
    """Store observer that writes the table to *stream* on every change."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self.renders = 0

    def __call__(self, snapshot: Mapping[str, Mapping[str, Any]]) -> None:
        self.renders += 1
        self._stream.write(render_table(snapshot) + "\n\n")
        self._stream.flush()
