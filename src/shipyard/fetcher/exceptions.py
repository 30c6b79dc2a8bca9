"""Custom exceptions for the Paginated Fetcher."""


class FetcherError(Exception):
    """Base exception for fetcher errors."""


class DataSourceNotFoundError(FetcherError):
    """The tickets data source could not be resolved."""


class FetchError(FetcherError):
    """A listing request returned an error; no partial results are kept."""
