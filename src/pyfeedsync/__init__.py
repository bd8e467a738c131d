"""pyfeedsync - Async client-side replica of a WebSocket record feed."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyfeedsync")
except PackageNotFoundError:
    __version__ = "0+local"
from pyfeedsync._channel import ChannelManager, ChannelState
from pyfeedsync.client import FeedClient
from pyfeedsync.commands import CommandSink
from pyfeedsync.config import FeedConfig, endpoint_from_page_url
from pyfeedsync.exceptions import (
    DecodeError,
    FeedSyncConfigError,
    FeedSyncError,
    FeedTransportError,
    UnknownActionError,
)
from pyfeedsync.models import AddDelta, DeleteDelta, Delta, Intent, MessageRecord, SyncDelta
from pyfeedsync.protocol import decode, encode_intent
from pyfeedsync.render import TableRenderer, render_table
from pyfeedsync.state import ReplicaStore

__all__ = [
    "__version__",
    "AddDelta",
    "ChannelManager",
    "ChannelState",
    "CommandSink",
    "DecodeError",
    "DeleteDelta",
    "Delta",
    "FeedClient",
    "FeedConfig",
    "FeedSyncConfigError",
    "FeedSyncError",
    "FeedTransportError",
    "Intent",
    "MessageRecord",
    "ReplicaStore",
    "SyncDelta",
    "TableRenderer",
    "UnknownActionError",
    "decode",
    "encode_intent",
    "endpoint_from_page_url",
    "render_table",
]
