"""Tickets - canonical ticket model and extraction from Notion pages."""

from shipyard.tickets.models import (
    RESOLVING_STATUSES,
    UNTITLED,
    Ticket,
    TicketArea,
    TicketPriority,
    TicketStatus,
    short_id,
)
from shipyard.tickets.normalizer import extract_ticket, is_eligible

__all__ = [
    "RESOLVING_STATUSES",
    "UNTITLED",
    "Ticket",
    "TicketArea",
    "TicketPriority",
    "TicketStatus",
    "extract_ticket",
    "is_eligible",
    "short_id",
]
