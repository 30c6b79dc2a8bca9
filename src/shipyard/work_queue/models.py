"""Data models for the work queue."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any, TypeVar

from shipyard.tickets import Ticket, TicketArea, TicketPriority, TicketStatus


E = TypeVar("E", bound=StrEnum)


def _coerce(enum_cls: type[E], value: Any) -> E | None:
    try:
        return enum_cls(value) if value else None
    except ValueError:
        return None


@dataclass
class QueueItem:
    """Projection of a Ticket kept in the persisted snapshot."""

    ticket_id: str
    title: str
    status: TicketStatus
    area: TicketArea | None = None
    priority: TicketPriority | None = None
    blocked_by: list[str] = field(default_factory=list)
    blocks: list[str] = field(default_factory=list)
    branch: str | None = None

    @classmethod
    def from_ticket(cls, ticket: Ticket) -> QueueItem:
        return cls(
            ticket_id=ticket.id,
            title=ticket.title,
            status=ticket.status,
            area=ticket.area,
            priority=ticket.priority,
            blocked_by=list(ticket.blocked_by),
            blocks=list(ticket.blocks),
            branch=ticket.branch,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> QueueItem:
        """Rebuild from snapshot JSON.

        Unknown area or priority values read as None, as on ticket extraction.

        Raises:
            KeyError, ValueError, TypeError: If the entry is not an object or
                lacks an id, title or known status.
        """
        if not isinstance(data, dict):
            raise TypeError(f"queue entry must be an object, got {type(data).__name__}")
        return cls(
            ticket_id=str(data["ticket_id"]),
            title=str(data["title"]),
            status=TicketStatus(data["status"]),
            area=_coerce(TicketArea, data.get("area")),
            priority=_coerce(TicketPriority, data.get("priority")),
            blocked_by=[str(i) for i in data.get("blocked_by") or []],
            blocks=[str(i) for i in data.get("blocks") or []],
            branch=data.get("branch"),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        data["area"] = self.area.value if self.area else None
        data["priority"] = self.priority.value if self.priority else None
        return data
