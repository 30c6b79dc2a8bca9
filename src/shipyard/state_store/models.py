"""Data models for the persisted sync snapshot."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from shipyard.work_queue import QueueItem

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class HistoryAction(StrEnum):
    """Kind of action recorded in the history log."""

    CREATED = "created"
    STARTED = "started"
    DONE = "done"
    STATUS_CHANGE = "status_change"


@dataclass(frozen=True)
class HistoryEntry:
    """One immutable record in the append-only history log."""

    ticket_id: str
    title: str
    action: HistoryAction
    timestamp: str = field(default_factory=utc_now_iso)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoryEntry:
        if not isinstance(data, dict):
            raise TypeError(f"history entry must be an object, got {type(data).__name__}")
        return cls(
            ticket_id=str(data["ticket_id"]),
            title=str(data["title"]),
            action=HistoryAction(data["action"]),
            timestamp=str(data["timestamp"]),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["action"] = self.action.value
        return data


def _entries(value: Any) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeError(f"expected a JSON array, got {type(value).__name__}")
    return value


def _parse_queue(value: Any) -> list[QueueItem]:
    if value is None:
        return []
    if not isinstance(value, list):
        logger.warning("Dropping unreadable queue of type %s", type(value).__name__)
        return []
    queue = []
    for item in value:
        try:
            queue.append(QueueItem.from_dict(item))
        except (KeyError, ValueError, TypeError) as e:
            logger.warning("Dropping unreadable queue entry %r: %s", item, e)
    return queue


@dataclass
class SyncState:
    """The persisted snapshot: last sync time, active queue, action history."""

    last_synced: str | None = None
    queue: list[QueueItem] = field(default_factory=list)
    history: list[HistoryEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SyncState:
        """Rebuild from snapshot JSON.

        The queue is rebuilt from scratch on every sync, so queue entries that
        no longer parse are dropped with a warning. History is kept as
        written and must parse in full.

        Raises:
            KeyError, ValueError, TypeError: If the document or its history
                is malformed.
        """
        if not isinstance(data, dict):
            raise TypeError(f"snapshot must be a JSON object, got {type(data).__name__}")
        last_synced = data.get("last_synced")
        return cls(
            last_synced=str(last_synced) if last_synced is not None else None,
            queue=_parse_queue(data.get("queue")),
            history=[HistoryEntry.from_dict(entry) for entry in _entries(data.get("history"))],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "last_synced": self.last_synced,
            "queue": [item.to_dict() for item in self.queue],
            "history": [entry.to_dict() for entry in self.history],
        }
