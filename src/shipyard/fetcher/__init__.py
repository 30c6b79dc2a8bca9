"""Fetcher - paginated retrieval of Shipyard ticket pages."""

from shipyard.fetcher.exceptions import DataSourceNotFoundError, FetchError, FetcherError
from shipyard.fetcher.fetcher import TICKETS_SOURCE_MARKER, TicketFetcher

__all__ = [
    "TICKETS_SOURCE_MARKER",
    "DataSourceNotFoundError",
    "FetchError",
    "FetcherError",
    "TicketFetcher",
]
