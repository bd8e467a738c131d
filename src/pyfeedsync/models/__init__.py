"""Data models for feed frames and records."""

from pyfeedsync.models._base import FeedBaseModel, Record
from pyfeedsync.models.delta import DELTA_ACTIONS, AddDelta, DeleteDelta, Delta, SyncDelta
from pyfeedsync.models.intent import Intent
from pyfeedsync.models.record import MessageRecord

__all__ = [
    "DELTA_ACTIONS",
    "AddDelta",
    "DeleteDelta",
    "Delta",
    "FeedBaseModel",
    "Intent",
    "MessageRecord",
    "Record",
    "SyncDelta",
]
