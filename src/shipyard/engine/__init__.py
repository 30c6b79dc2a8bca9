"""Engine - sync pipeline and mutation operations against Shipyard."""

from shipyard.engine.engine import ShipyardEngine
from shipyard.engine.exceptions import (
    AssigneeNotFoundError,
    EngineError,
    MutationError,
    TicketNotFoundError,
)
from shipyard.engine.models import SelfTestReport, TicketDetails

__all__ = [
    "AssigneeNotFoundError",
    "EngineError",
    "MutationError",
    "SelfTestReport",
    "ShipyardEngine",
    "TicketDetails",
    "TicketNotFoundError",
]
