"""Outbound intent model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Intent(BaseModel):
    """A user-initiated request sent to the server over the channel.

    ``action`` names the requested operation and ``id`` the target
    record.  Additional keyword fields are carried verbatim so other
    named intents can attach parameters.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    action: str = Field(..., min_length=1)
    id: str

    @classmethod
    def remove(cls, record_id: str) -> Intent:
        """Ask the server to delete *record_id* from the collection."""
        return cls(action="remove", id=record_id)
