"""TicketFetcher - walks paginated Notion listings."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from shipyard.config import DEFAULT_PAGE_SIZE
from shipyard.fetcher.exceptions import DataSourceNotFoundError, FetchError
from shipyard.notion import RateLimiter, error_message, is_error

if TYPE_CHECKING:
    from shipyard.notion import Transport

logger = logging.getLogger(__name__)

# Substring identifying the tickets data source inside the Shipyard database
TICKETS_SOURCE_MARKER = "Tickets"


class TicketFetcher:
    """Retrieves complete, unfiltered page listings from the tickets data source.

    The data source id is resolved from the parent database on first use and
    cached for the lifetime of the fetcher. Requests are issued one at a time;
    the rate limiter runs between pages.
    """

    def __init__(
        self,
        transport: Transport,
        database_id: str,
        rate_limiter: RateLimiter | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """Initialize the fetcher.

        Args:
            transport: Request capability (NotionClient or a test double).
            database_id: Id of the Shipyard database.
            rate_limiter: Delay applied between consecutive pages.
            page_size: Results requested per page.
        """
        self.transport = transport
        self.database_id = database_id
        self.rate_limiter = rate_limiter or RateLimiter()
        self.page_size = page_size
        self._data_source_id: str | None = None

    async def resolve_data_source_id(self) -> str:
        """Resolve the tickets data source id, caching it after the first call.

        Picks the first source whose name contains "Tickets", else the first
        source listed.

        Raises:
            DataSourceNotFoundError: If the database lookup fails or lists no
                data sources.
        """
        if self._data_source_id is not None:
            return self._data_source_id

        data = await self.transport.request(f"/databases/{self.database_id}")
        if is_error(data):
            raise DataSourceNotFoundError(
                f"Failed to resolve data sources: {error_message(data)}"
            )

        sources = [s for s in data.get("data_sources") or [] if isinstance(s, dict)]
        if not sources:
            raise DataSourceNotFoundError("No data sources found on Shipyard database")

        chosen = next(
            (s for s in sources if TICKETS_SOURCE_MARKER in str(s.get("name", ""))),
            sources[0],
        )
        self._data_source_id = str(chosen["id"])
        logger.info(
            "Resolved data source %s (%s)", self._data_source_id, chosen.get("name", "?")
        )
        return self._data_source_id

    async def _paginate(self, path: str, method: str, what: str) -> list[dict[str, Any]]:
        """Collect every result of a cursor-paginated listing.

        Raises:
            FetchError: If any page is an error object. Results gathered from
                earlier pages are dropped.
        """
        results: list[dict[str, Any]] = []
        cursor: str | None = None
        requests = 0

        while True:
            page: dict[str, Any] = {"page_size": self.page_size}
            if cursor:
                page["start_cursor"] = cursor

            if method == "GET":
                data = await self.transport.request(path, method, params=page)
            else:
                data = await self.transport.request(path, method, json=page)
            requests += 1

            if is_error(data):
                raise FetchError(f"{what} error: {error_message(data)}")

            results.extend(r for r in data.get("results") or [] if isinstance(r, dict))

            cursor = data.get("next_cursor") if data.get("has_more") else None
            if not cursor:
                break
            await self.rate_limiter.wait()

        logger.debug("Fetched %d result(s) from %s in %d request(s)", len(results), path, requests)
        return results

    async def fetch_all_pages(self) -> list[dict[str, Any]]:
        """Fetch every page of the tickets data source, in listing order."""
        data_source_id = await self.resolve_data_source_id()
        pages = await self._paginate(
            f"/data_sources/{data_source_id}/query", "POST", "Data source query"
        )
        logger.info("Fetched %d page(s) from data source %s", len(pages), data_source_id)
        return pages

    async def fetch_block_children(self, block_id: str) -> list[dict[str, Any]]:
        """Fetch every child block of a page or block, in order."""
        return await self._paginate(f"/blocks/{block_id}/children", "GET", "Block children")
