"""State/store layer.

This package is the single source of truth for the client-side replica:
decoded deltas from the feed are applied here and observers are told
about every change.
"""

from pyfeedsync.state.store import Observer, ReplicaStore

__all__ = ["Observer", "ReplicaStore"]
