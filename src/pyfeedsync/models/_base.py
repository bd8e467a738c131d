"""Base model for feed payloads.

Every wire model inherits from :class:`FeedBaseModel` which provides:

* frozen instances, so a decoded value cannot change after validation;
* ``extra="ignore"`` so fields the server adds later do not break
  decoding;
* ``populate_by_name=True`` so models can be built from either the wire
  name or the Python field name.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

Record = dict[str, Any]
"""Opaque record value as carried on the wire (a JSON object)."""


class FeedBaseModel(BaseModel):
    """Base for feed wire models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
