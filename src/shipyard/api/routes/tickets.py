"""Ticket read and mutation endpoints."""

from fastapi import APIRouter, status

from shipyard.api.dependencies import EngineDep
from shipyard.api.models import (
    ActionResponse,
    AnnotationUpdate,
    APIResponse,
    AssigneeUpdate,
    DependencyUpdate,
    StatusUpdate,
    TicketCreate,
    TicketDetailsResponse,
    TicketResponse,
    ticket_to_response,
)
from shipyard.tickets import short_id

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.get("/ready", response_model=APIResponse[list[TicketResponse]])
async def list_ready(engine: EngineDep) -> APIResponse[list[TicketResponse]]:
    """List Open tickets ready to start, unblocked first then by priority."""
    tickets = await engine.list_ready()
    return APIResponse(data=[ticket_to_response(t) for t in tickets])


@router.post(
    "",
    response_model=APIResponse[TicketResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_ticket(ticket: TicketCreate, engine: EngineDep) -> APIResponse[TicketResponse]:
    """Create a ticket, then refresh the local snapshot."""
    created = await engine.create_ticket(
        ticket.title,
        ticket.area,
        body=ticket.body,
        priority=ticket.priority,
        assignee=ticket.assignee,
        ticket_type=ticket.type,
        application=ticket.application,
    )
    await engine.sync()
    return APIResponse(data=ticket_to_response(created))


@router.get("/{ticket_id}", response_model=APIResponse[TicketDetailsResponse])
async def get_ticket(ticket_id: str, engine: EngineDep) -> APIResponse[TicketDetailsResponse]:
    """Get a ticket with its rendered description."""
    details = await engine.fetch_details(ticket_id)
    return APIResponse(data=TicketDetailsResponse.model_validate(details))


@router.patch("/{ticket_id}/status", response_model=APIResponse[ActionResponse])
async def update_status(
    ticket_id: str, update: StatusUpdate, engine: EngineDep
) -> APIResponse[ActionResponse]:
    """Change a ticket's status, then refresh the local snapshot."""
    await engine.set_status(ticket_id, update.status, title=update.title)
    await engine.sync()
    return APIResponse(
        data=ActionResponse(message=f"Ticket {short_id(ticket_id)} -> {update.status}")
    )


@router.patch("/{ticket_id}/annotations", response_model=APIResponse[ActionResponse])
async def update_annotations(
    ticket_id: str, update: AnnotationUpdate, engine: EngineDep
) -> APIResponse[ActionResponse]:
    """Set branch, commit and/or feature annotations (one write each), then refresh."""
    updated = []
    if update.branch is not None:
        await engine.set_branch(ticket_id, update.branch)
        updated.append("branch")
    if update.commit is not None:
        await engine.set_commit(ticket_id, update.commit)
        updated.append("commit")
    if update.feature is not None:
        await engine.set_feature(ticket_id, update.feature)
        updated.append("feature")
    if updated:
        await engine.sync()
    return APIResponse(data=ActionResponse(message=f"Updated {', '.join(updated)}"))


@router.patch("/{ticket_id}/dependencies", response_model=APIResponse[ActionResponse])
async def update_dependencies(
    ticket_id: str, update: DependencyUpdate, engine: EngineDep
) -> APIResponse[ActionResponse]:
    """Replace dependency relations, then refresh; omitted relations stay untouched."""
    sent = await engine.set_dependencies(
        ticket_id, blocked_by=update.blocked_by, blocks=update.blocks
    )
    if sent:
        await engine.sync()
    message = "Dependencies updated" if sent else "Nothing to update"
    return APIResponse(data=ActionResponse(message=message))


@router.patch("/{ticket_id}/assignee", response_model=APIResponse[ActionResponse])
async def update_assignee(
    ticket_id: str, update: AssigneeUpdate, engine: EngineDep
) -> APIResponse[ActionResponse]:
    """Assign a ticket to a configured team member, then refresh the local snapshot."""
    await engine.set_assignee(ticket_id, update.name)
    await engine.sync()
    return APIResponse(data=ActionResponse(message=f"Assigned to {update.name}"))


@router.delete("/{ticket_id}", status_code=status.HTTP_204_NO_CONTENT)
async def archive_ticket(ticket_id: str, engine: EngineDep) -> None:
    """Archive a ticket, then refresh the local snapshot."""
    await engine.archive(ticket_id)
    await engine.sync()
