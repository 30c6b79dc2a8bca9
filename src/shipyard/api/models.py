"""Pydantic models for REST API."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from shipyard.tickets import TicketArea, TicketPriority, TicketStatus

T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    data: T | None = None
    error: str | None = None


# Ticket models


class TicketResponse(BaseModel):
    """Response model for a ticket."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    status: TicketStatus
    summary: str | None
    spec_url: str | None
    due: str | None
    branch: str | None
    commit: str | None
    feature: str | None
    resolved_at: str | None
    area: TicketArea | None
    application: str | None
    type: str | None
    priority: TicketPriority | None
    blocked_by: list[str]
    blocks: list[str]
    assignees: list[str]
    created_at: str | None
    updated_at: str | None
    eligible: bool


def ticket_to_response(ticket: Any) -> TicketResponse:
    """Convert a Ticket to TicketResponse."""
    return TicketResponse.model_validate(ticket)


class TicketDetailsResponse(BaseModel):
    """Response model for a ticket with its rendered description."""

    model_config = ConfigDict(from_attributes=True)

    ticket: TicketResponse
    description: str


class TicketCreate(BaseModel):
    """Request model for creating a ticket."""

    title: str = Field(..., min_length=1)
    area: TicketArea
    body: str | None = None
    priority: TicketPriority = TicketPriority.P0
    assignee: str | None = None
    type: str = Field(default="Task", min_length=1)
    application: str | None = None


class StatusUpdate(BaseModel):
    """Request model for a status change."""

    status: TicketStatus
    title: str | None = None


class AnnotationUpdate(BaseModel):
    """Request model for branch/commit/feature annotations."""

    branch: str | None = None
    commit: str | None = None
    feature: str | None = None

    @model_validator(mode="after")
    def _require_one(self) -> "AnnotationUpdate":
        if self.branch is None and self.commit is None and self.feature is None:
            raise ValueError("at least one of branch, commit, feature is required")
        return self


class DependencyUpdate(BaseModel):
    """Request model for dependency relations. Omitted fields stay untouched."""

    blocked_by: list[str] | None = None
    blocks: list[str] | None = None


class AssigneeUpdate(BaseModel):
    """Request model for assigning a ticket to a team member."""

    name: str = Field(..., min_length=1)


class ActionResponse(BaseModel):
    """Response model for mutations without a payload."""

    message: str


# Snapshot models


class QueueItemResponse(BaseModel):
    """Response model for a queue item."""

    model_config = ConfigDict(from_attributes=True)

    ticket_id: str
    title: str
    status: TicketStatus
    area: TicketArea | None
    priority: TicketPriority | None
    blocked_by: list[str]
    blocks: list[str]
    branch: str | None


class HistoryEntryResponse(BaseModel):
    """Response model for a history entry."""

    model_config = ConfigDict(from_attributes=True)

    ticket_id: str
    title: str
    action: str
    timestamp: str


class SyncStateResponse(BaseModel):
    """Response model for the persisted snapshot."""

    model_config = ConfigDict(from_attributes=True)

    last_synced: str | None
    queue: list[QueueItemResponse]
    history: list[HistoryEntryResponse]


def sync_state_to_response(state: Any) -> SyncStateResponse:
    """Convert a SyncState to SyncStateResponse."""
    return SyncStateResponse.model_validate(state)
