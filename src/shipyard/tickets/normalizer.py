"""Ticket normalizer - builds canonical Tickets from raw Notion pages."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any, TypeVar

from shipyard.tickets import schema
from shipyard.tickets.models import (
    UNTITLED,
    Ticket,
    TicketArea,
    TicketPriority,
    TicketStatus,
)
from shipyard.tickets.properties import (
    extract_date,
    extract_multi_select,
    extract_person_ids,
    extract_plain_text,
    extract_relation_ids,
    extract_select,
    extract_url,
)

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=StrEnum)


def _coerce(enum_cls: type[E], value: str | None) -> E | None:
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _first(values: list[str]) -> str | None:
    return values[0] if values else None


def is_eligible(assignee_ids: list[str], acting_identity_id: str | None) -> bool:
    """Whether a ticket with these assignees may be worked by the acting identity.

    With no acting identity configured every ticket is eligible.
    """
    if not acting_identity_id:
        return True
    return acting_identity_id in assignee_ids


def extract_ticket(page: dict[str, Any], acting_identity_id: str | None = None) -> Ticket:
    """Build a Ticket from a raw Notion page object.

    Status accepts both ``status`` and ``select`` shapes; Area and Application
    accept both ``multi_select`` and ``select`` and keep the first value.
    A page missing every optional property still yields a valid Ticket.

    Args:
        page: Page object with ``id``, ``properties``, ``created_time`` and
            ``last_edited_time``.
        acting_identity_id: Configured acting identity, used for ``eligible``.

    Returns:
        The normalized Ticket.
    """
    props = page.get("properties")
    if not isinstance(props, dict):
        props = {}

    raw_status = extract_select(props.get(schema.STATUS))
    status = _coerce(TicketStatus, raw_status)
    if status is None:
        if raw_status is not None:
            logger.warning(
                "Unknown status %r on ticket %s; treating as Open", raw_status, page.get("id")
            )
        status = TicketStatus.OPEN

    assignees = extract_person_ids(props.get(schema.ASSIGNEE))

    return Ticket(
        id=str(page.get("id", "")),
        title=extract_plain_text(props.get(schema.TITLE)) or UNTITLED,
        status=status,
        summary=extract_plain_text(props.get(schema.SUMMARY)),
        spec_url=extract_url(props.get(schema.SPEC_URL)),
        due=extract_date(props.get(schema.DUE)),
        branch=extract_plain_text(props.get(schema.BRANCH)),
        commit=extract_plain_text(props.get(schema.COMMIT)),
        feature=extract_plain_text(props.get(schema.FEATURE)),
        resolved_at=extract_date(props.get(schema.RESOLVED_AT)),
        area=_coerce(TicketArea, _first(extract_multi_select(props.get(schema.AREA)))),
        application=_first(extract_multi_select(props.get(schema.APPLICATION))),
        type=extract_select(props.get(schema.TYPE)),
        priority=_coerce(TicketPriority, extract_select(props.get(schema.PRIORITY))),
        blocked_by=extract_relation_ids(props.get(schema.DEPENDENCY)),
        blocks=extract_relation_ids(props.get(schema.BLOCKS)),
        assignees=assignees,
        created_at=page.get("created_time"),
        updated_at=page.get("last_edited_time"),
        eligible=is_eligible(assignees, acting_identity_id),
    )
