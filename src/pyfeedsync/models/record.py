"""Typed view of an SMS record as the mock messaging server emits it.

The replica stores records as opaque dicts; this model is only used by
presentation code that wants named attributes.  Every field is optional
so a record of a different shape still renders.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, Field, model_validator

from pyfeedsync.models._base import FeedBaseModel


class MessageRecord(FeedBaseModel):
    """One message in the feed."""

    sender: str = Field(default="", validation_alias=AliasChoices("From", "from", "sender"))
    recipient: str = Field(default="", validation_alias=AliasChoices("To", "to", "recipient"))
    body: str = Field(default="", validation_alias=AliasChoices("Body", "body"))

    raw: dict[str, Any] = Field(default_factory=dict)
    """Record as stored in the replica."""

    @model_validator(mode="before")
    @classmethod
    def _ensure_raw(cls, values: Any) -> Any:
        if not isinstance(values, Mapping):
            return values
        # Non-string values (e.g. null) fall back to the field default.
        merged = {k: v for k, v in values.items() if isinstance(v, str)}
        merged["raw"] = dict(values)
        return merged

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> MessageRecord:
        return cls.model_validate(dict(record))
