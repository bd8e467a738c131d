"""Inbound delta models.

A delta is one unit of change pushed by the server.  The ``action`` tag
selects the variant:

* ``sync`` replaces the whole replica with ``data``;
* ``add`` upserts ``data`` under ``id``;
* ``del`` removes ``id`` (absent ids are a no-op).
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field, TypeAdapter

from pyfeedsync.models._base import FeedBaseModel, Record


class SyncDelta(FeedBaseModel):
    """Full snapshot of the server collection."""

    action: Literal["sync"] = "sync"
    data: dict[str, Record]


class AddDelta(FeedBaseModel):
    """Insert or overwrite one record."""

    action: Literal["add"] = "add"
    id: str
    data: Record


class DeleteDelta(FeedBaseModel):
    """Remove one record."""

    action: Literal["del"] = "del"
    id: str


Delta = Annotated[SyncDelta | AddDelta | DeleteDelta, Field(discriminator="action")]

DELTA_ACTIONS: frozenset[str] = frozenset({"sync", "add", "del"})

delta_adapter: TypeAdapter[SyncDelta | AddDelta | DeleteDelta] = TypeAdapter(Delta)
