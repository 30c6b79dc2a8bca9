"""Data models for Shipyard tickets."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class TicketStatus(StrEnum):
    """Ticket workflow status. Any status may move to any other."""

    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    ON_HOLD = "On hold"
    IN_REVIEW = "In Review"
    REVIEW_AI_FIX = "Review AI Fix"
    DONE = "Done"
    BLOCKED_BY_HUMAN = "Blocked by human"


class TicketArea(StrEnum):
    """Ticket area."""

    FRONTEND = "Frontend"
    BACKEND = "Backend"
    GROWTH = "Growth"
    DELIVERY = "Delivery"
    DOCS = "Docs"


class TicketPriority(StrEnum):
    """Ticket priority, P0 most urgent."""

    P0 = "P0"
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"


# Statuses that stamp Resolved At when set
RESOLVING_STATUSES = frozenset({TicketStatus.DONE, TicketStatus.REVIEW_AI_FIX})

UNTITLED = "(untitled)"


@dataclass
class Ticket:
    """Canonical representation of one Shipyard ticket.

    ``eligible`` is derived at normalization time: True when the acting
    identity is among the assignees, or when no acting identity is configured.
    """

    id: str
    title: str = UNTITLED
    status: TicketStatus = TicketStatus.OPEN
    summary: str | None = None
    spec_url: str | None = None
    due: str | None = None
    branch: str | None = None
    commit: str | None = None
    feature: str | None = None
    resolved_at: str | None = None
    area: TicketArea | None = None
    application: str | None = None
    type: str | None = None
    priority: TicketPriority | None = None
    blocked_by: list[str] = field(default_factory=list)
    blocks: list[str] = field(default_factory=list)
    assignees: list[str] = field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None
    eligible: bool = True

    @property
    def is_blocked(self) -> bool:
        """Whether the ticket has at least one dependency."""
        return len(self.blocked_by) > 0

    @property
    def effective_priority(self) -> TicketPriority:
        """Priority used for ordering; missing priority ranks as P4."""
        return self.priority if self.priority is not None else TicketPriority.P4


def short_id(ticket_id: str) -> str:
    """First 8 characters of a ticket id with dashes removed."""
    return ticket_id.replace("-", "")[:8]
