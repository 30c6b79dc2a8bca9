"""State Store - persisted work queue snapshot and append-only history."""

from shipyard.state_store.exceptions import SnapshotWriteError, StateStoreError
from shipyard.state_store.models import HistoryAction, HistoryEntry, SyncState, utc_now_iso
from shipyard.state_store.store import StateStore

__all__ = [
    "HistoryAction",
    "HistoryEntry",
    "SnapshotWriteError",
    "StateStore",
    "StateStoreError",
    "SyncState",
    "utc_now_iso",
]
