"""Custom exceptions for the Notion client."""


class NotionError(Exception):
    """Base exception for Notion client errors."""


class NotionTransportError(NotionError):
    """Request could not be completed or the response was not JSON."""
