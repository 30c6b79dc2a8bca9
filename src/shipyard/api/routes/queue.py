"""Work queue snapshot and sync endpoints."""

from fastapi import APIRouter, Query

from shipyard.api.dependencies import EngineDep
from shipyard.api.models import (
    APIResponse,
    HistoryEntryResponse,
    SyncStateResponse,
    sync_state_to_response,
)

router = APIRouter(tags=["queue"])


@router.get("/queue", response_model=APIResponse[SyncStateResponse])
def get_queue(engine: EngineDep) -> APIResponse[SyncStateResponse]:
    """Return the locally persisted snapshot without contacting Notion."""
    return APIResponse(data=sync_state_to_response(engine.store.load()))


@router.post("/sync", response_model=APIResponse[SyncStateResponse])
async def sync_queue(engine: EngineDep) -> APIResponse[SyncStateResponse]:
    """Fetch every ticket, rebuild the active queue and persist it."""
    state = await engine.sync()
    return APIResponse(data=sync_state_to_response(state))


@router.get("/history", response_model=APIResponse[list[HistoryEntryResponse]])
def list_history(
    engine: EngineDep,
    ticket_id: str | None = Query(default=None, description="Filter by ticket ID"),
    limit: int = Query(default=100, ge=1, le=1000, description="Max results (most recent)"),
) -> APIResponse[list[HistoryEntryResponse]]:
    """List history entries, oldest first, optionally for a single ticket."""
    history = engine.store.load().history
    if ticket_id is not None:
        history = [entry for entry in history if entry.ticket_id == ticket_id]
    history = history[-limit:]
    return APIResponse(data=[HistoryEntryResponse.model_validate(e) for e in history])
