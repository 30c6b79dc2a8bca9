"""QueueBuilder - filters and orders tickets into the actionable work queue."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from shipyard.tickets import Ticket, TicketPriority, TicketStatus
from shipyard.work_queue.models import QueueItem

logger = logging.getLogger(__name__)

# Statuses that never appear in the active queue
EXCLUDED_STATUSES = frozenset(
    {
        TicketStatus.DONE,
        TicketStatus.BLOCKED_BY_HUMAN,
        TicketStatus.ON_HOLD,
    }
)


def queue_order(ticket: Ticket | QueueItem) -> tuple[bool, str]:
    """Sort key: unblocked before blocked, then priority P0..P4 (missing = P4)."""
    priority = ticket.priority if ticket.priority is not None else TicketPriority.P4
    return (len(ticket.blocked_by) > 0, priority.value)


class QueueBuilder:
    """Selects the tickets the acting identity should work on, in order.

    Args:
        target_app: Scope tag. Empty or None matches every application.
        excluded_statuses: Statuses left out of the active queue.
    """

    def __init__(
        self,
        target_app: str | None = None,
        excluded_statuses: Iterable[TicketStatus] = EXCLUDED_STATUSES,
    ) -> None:
        self.target_app = target_app or None
        self.excluded_statuses = frozenset(excluded_statuses)

    def in_scope(self, ticket: Ticket) -> bool:
        """Whether the ticket belongs to the configured application."""
        return self.target_app is None or ticket.application == self.target_app

    def is_active(self, ticket: Ticket) -> bool:
        return (
            self.in_scope(ticket)
            and ticket.eligible
            and ticket.status not in self.excluded_statuses
        )

    def is_ready(self, ticket: Ticket) -> bool:
        return self.is_active(ticket) and ticket.status == TicketStatus.OPEN

    def active(self, tickets: Iterable[Ticket]) -> list[Ticket]:
        """Active queue selection, ordered. Ties keep listing order."""
        return sorted((t for t in tickets if self.is_active(t)), key=queue_order)

    def ready(self, tickets: Iterable[Ticket]) -> list[Ticket]:
        """Ready selection: active tickets with status exactly Open, ordered."""
        return sorted((t for t in tickets if self.is_ready(t)), key=queue_order)

    def build_queue(self, tickets: Iterable[Ticket]) -> list[QueueItem]:
        """Project the active selection into snapshot queue items."""
        items = [QueueItem.from_ticket(t) for t in self.active(tickets)]
        logger.debug("Built queue with %d item(s) (scope=%s)", len(items), self.target_app)
        return items
