"""Custom exceptions for the Shipyard engine."""


class EngineError(Exception):
    """Base exception for engine errors."""


class MutationError(EngineError):
    """A remote write was rejected.

    Attributes:
        operation: Name of the failed operation, e.g. "Status update".
    """

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation


class TicketNotFoundError(EngineError):
    """Ticket with given ID does not exist or is not shared with the integration."""


class AssigneeNotFoundError(EngineError):
    """Team member name has no configured user id."""
