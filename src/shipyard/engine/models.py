"""Data models for the Shipyard engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shipyard.tickets import Ticket


@dataclass
class TicketDetails:
    """A ticket together with its page content rendered as text."""

    ticket: Ticket
    description: str


@dataclass
class SelfTestReport:
    """Result of a connectivity self-test.

    Attributes:
        data_source_id: Resolved tickets data source.
        page_count: Pages in the data source.
        sample: First ticket of the listing, if any.
        tickets_by_application: Ticket count per application ("(none)" when unset).
        write_ok: Whether the create + archive probe succeeded.
        write_error: Failure message of the probe, if any.
    """

    data_source_id: str
    page_count: int
    sample: Ticket | None = None
    tickets_by_application: dict[str, int] = field(default_factory=dict)
    write_ok: bool = False
    write_error: str | None = None
