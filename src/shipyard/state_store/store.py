"""StateStore - read-merge-write access to the local sync snapshot."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from shipyard.config import DEFAULT_STATE_FILE
from shipyard.state_store.exceptions import SnapshotWriteError
from shipyard.state_store.models import HistoryEntry, SyncState, utc_now_iso
from shipyard.work_queue import QueueBuilder

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shipyard.tickets import Ticket

logger = logging.getLogger(__name__)


class StateStore:
    """Owns the JSON snapshot of the work queue and its history.

    The queue part is replaced wholesale on every rebuild; the history part
    is only ever appended to. An unreadable snapshot is discarded and treated
    as empty. There is no file locking: concurrent writers race and the last
    one wins.
    """

    def __init__(
        self,
        path: str | Path = DEFAULT_STATE_FILE,
        queue_builder: QueueBuilder | None = None,
    ) -> None:
        """Initialize State Store.

        Args:
            path: Snapshot file path.
            queue_builder: Builder used for the active queue selection.
        """
        self.path = Path(path)
        self.queue_builder = queue_builder or QueueBuilder()

    def exists(self) -> bool:
        return self.path.exists()

    def _read(self) -> SyncState | None:
        """Parse the snapshot, or None if it is absent or unparsable."""
        if not self.path.exists():
            return None
        try:
            raw = self.path.read_text(encoding="utf-8")
            return SyncState.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            # JSONDecodeError and UnicodeDecodeError are ValueErrors
            logger.warning("Discarding unreadable snapshot %s: %s", self.path, e)
            return None

    def load(self) -> SyncState:
        """Read the persisted snapshot.

        Returns:
            The stored state, or an empty state if the file is missing or
            cannot be parsed.
        """
        return self._read() or SyncState()

    def _write(self, state: SyncState) -> None:
        """Atomically replace the snapshot file.

        Raises:
            SnapshotWriteError: If the file cannot be written.
        """
        payload = json.dumps(state.to_dict(), indent=2)
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=directory
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise SnapshotWriteError(f"Failed to write snapshot {self.path}: {e}") from e

    def rebuild_and_persist(self, tickets: Iterable[Ticket]) -> SyncState:
        """Rebuild the active queue from a full ticket set and persist it.

        History from the previous snapshot is carried over unchanged.

        Args:
            tickets: Every normalized ticket from the remote listing.

        Returns:
            The state that was written.
        """
        previous = self.load()
        state = SyncState(
            last_synced=utc_now_iso(),
            queue=self.queue_builder.build_queue(tickets),
            history=list(previous.history),
        )
        self._write(state)
        logger.info(
            "Persisted snapshot: %d queued, %d history entries",
            len(state.queue),
            len(state.history),
        )
        return state

    def append_history(self, entry: HistoryEntry) -> bool:
        """Append one entry to the persisted history.

        A missing snapshot is left alone (history catches up on the next
        full rebuild). A corrupted snapshot is replaced by a fresh state
        holding only this entry.

        Returns:
            True if the entry was written.
        """
        if not self.path.exists():
            logger.debug("No snapshot at %s; skipping history entry", self.path)
            return False

        state = self.load()
        state.history.append(entry)
        self._write(state)
        logger.debug("Recorded %s for ticket %s", entry.action, entry.ticket_id)
        return True
