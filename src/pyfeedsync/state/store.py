"""In-memory replica store.

This is the only component allowed to mutate the replica.  It applies
already-validated deltas and notifies observers; it performs no I/O.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterator, Mapping
from types import MappingProxyType

from pyfeedsync.models._base import Record
from pyfeedsync.models.delta import AddDelta, DeleteDelta, SyncDelta

_logger = logging.getLogger(__name__)

Observer = Callable[[Mapping[str, Record]], None]


class ReplicaStore:
    """Observable mapping from record id to record.

    Every call to :meth:`apply` notifies each observer exactly once, even
    when the delta changed nothing (e.g. deleting an absent id), so
    observers can re-render on every notification without diffing.
    """

    def __init__(self, initial: Mapping[str, Record] | None = None) -> None:
        self._records: dict[str, Record] = copy.deepcopy(dict(initial)) if initial else {}
        self._observers: list[Observer] = []

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def get(self, record_id: str) -> Record | None:
        record = self._records.get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def snapshot(self) -> Mapping[str, Record]:
        """Read-only view of the current entries."""
        return MappingProxyType(copy.deepcopy(self._records))

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register *observer*; returns a callable that unregisters it."""
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    def apply(self, delta: SyncDelta | AddDelta | DeleteDelta) -> None:
        """Apply a decoded delta and notify observers."""
        match delta:
            case SyncDelta(data=data):
                self._records = copy.deepcopy(dict(data))
            case AddDelta(id=record_id, data=record):
                # Records are values: later changes to the caller's dict must not leak in.
                self._records[record_id] = copy.deepcopy(record)
            case DeleteDelta(id=record_id):
                self._records.pop(record_id, None)
            case _:
                raise TypeError(f"Unsupported delta type: {type(delta).__name__}")
        self._notify()

    def _notify(self) -> None:
        if not self._observers:
            return
        view = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(view)
            except Exception:
                _logger.debug("Replica observer %r failed", observer, exc_info=True)

    def __repr__(self) -> str:
        return f"ReplicaStore(records={list(self._records)!r})"
