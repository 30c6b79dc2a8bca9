"""ShipyardEngine - ticket synchronization and mutation operations."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from typing import TYPE_CHECKING, Any

from shipyard.config import ConfigError
from shipyard.engine.exceptions import (
    AssigneeNotFoundError,
    EngineError,
    MutationError,
    TicketNotFoundError,
)
from shipyard.engine.models import SelfTestReport, TicketDetails
from shipyard.fetcher import TicketFetcher
from shipyard.notion import (
    NotionClient,
    NotionError,
    RateLimiter,
    error_message,
    is_error,
    paragraph_blocks,
    render_blocks,
    text_spans,
)
from shipyard.state_store import (
    HistoryAction,
    HistoryEntry,
    StateStore,
    SyncState,
    utc_now_iso,
)
from shipyard.tickets import (
    RESOLVING_STATUSES,
    Ticket,
    TicketArea,
    TicketPriority,
    TicketStatus,
    extract_ticket,
    schema,
)
from shipyard.work_queue import QueueBuilder

if TYPE_CHECKING:
    from shipyard.config import ShipyardConfig
    from shipyard.notion import Transport

logger = logging.getLogger(__name__)

MAX_TITLE_LENGTH = 200
DEFAULT_TICKET_TYPE = "Task"
SELF_TEST_TITLE = "_selftest_probe_"

# History action recorded for a status change
_STATUS_ACTIONS = {
    TicketStatus.IN_PROGRESS: HistoryAction.STARTED,
    TicketStatus.DONE: HistoryAction.DONE,
}


def _rich_text(value: str) -> dict[str, Any]:
    return {"rich_text": text_spans(value) if value else []}


def _relation(ids: list[str]) -> dict[str, Any]:
    return {"relation": [{"id": page_id} for page_id in ids]}


def _people(user_id: str) -> dict[str, Any]:
    return {"people": [{"id": user_id}]}


class ShipyardEngine:
    """Synchronizes the local work queue with the Shipyard tickets database.

    The engine:
    - Fetches the complete ticket listing and normalizes every page
    - Builds the active queue and persists it with the existing history
    - Applies single-write mutations (status, annotations, relations,
      assignee, creation, archival), each followed by the rate-limit delay
    - Records created/started/done/status_change actions in the history log

    All remote calls are awaited one after another. Public operations hold
    one lock for their whole run, so callers sharing an engine (such as
    concurrent API requests) never have more than one request in flight.
    """

    def __init__(
        self,
        config: ShipyardConfig,
        transport: Transport,
        store: StateStore | None = None,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            config: Explicit configuration (scope tag, identities, limits).
            transport: Request capability for the Notion API.
            store: Snapshot store. Defaults to one at ``config.state_file``.
            rate_limiter: Delay between remote calls. Defaults to
                ``config.rate_limit_delay``.
        """
        self.config = config
        self.transport = transport
        self.rate_limiter = rate_limiter or RateLimiter(config.rate_limit_delay)
        self.queue_builder = QueueBuilder(target_app=config.target_app)
        self.store = store or StateStore(config.state_file, self.queue_builder)
        self.fetcher = TicketFetcher(
            transport,
            config.database_id,
            rate_limiter=self.rate_limiter,
            page_size=config.page_size,
        )
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: ShipyardConfig) -> ShipyardEngine:
        """Create an engine talking to the real Notion API."""
        client = NotionClient(
            token=config.api_key,
            base_url=config.api_base,
            notion_version=config.notion_version,
        )
        return cls(config, client)

    async def close(self) -> None:
        """Close the underlying transport if it holds resources."""
        if isinstance(self.transport, NotionClient):
            await self.transport.close()

    # --- Read operations ---

    def _normalize(self, page: dict[str, Any]) -> Ticket:
        return extract_ticket(page, self.config.acting_identity_id or None)

    async def _fetch_tickets(self) -> list[Ticket]:
        self.config.require_remote()
        pages = await self.fetcher.fetch_all_pages()
        return [self._normalize(page) for page in pages]

    async def fetch_tickets(self) -> list[Ticket]:
        """Fetch and normalize every ticket, in remote listing order."""
        async with self._lock:
            return await self._fetch_tickets()

    async def sync(self) -> SyncState:
        """Rebuild the local snapshot from the complete remote listing.

        Returns:
            The persisted SyncState.

        Raises:
            FetchError: If any listing page fails; the snapshot is left untouched.
        """
        async with self._lock:
            tickets = await self._fetch_tickets()
            state = self.store.rebuild_and_persist(tickets)
        logger.info("Sync complete: %d of %d ticket(s) queued", len(state.queue), len(tickets))
        return state

    async def list_ready(self) -> list[Ticket]:
        """Tickets ready to start (status Open), unblocked first then by priority."""
        async with self._lock:
            tickets = await self._fetch_tickets()
        ready = self.queue_builder.ready(tickets)
        logger.info("Found %d ready ticket(s)", len(ready))
        return ready

    async def fetch_details(self, ticket_id: str) -> TicketDetails:
        """Fetch one ticket and render its page content as text.

        Raises:
            TicketNotFoundError: If the page does not exist.
            EngineError: If the lookup fails for another reason.
        """
        self.config.require_remote()
        async with self._lock:
            page = await self.transport.request(f"/pages/{ticket_id}")
            if is_error(page):
                if page.get("code") == "object_not_found":
                    raise TicketNotFoundError(f"Ticket {ticket_id} not found")
                raise EngineError(f"Ticket lookup failed: {error_message(page)}")

            blocks = await self.fetcher.fetch_block_children(ticket_id)
        return TicketDetails(ticket=self._normalize(page), description=render_blocks(blocks))

    # --- Mutations ---

    async def _update_page(
        self, ticket_id: str, payload: dict[str, Any], operation: str
    ) -> dict[str, Any]:
        """Send one PATCH to a page and apply the rate-limit delay.

        Raises:
            MutationError: If the remote store rejects the write.
        """
        self.config.require_remote()
        data = await self.transport.request(f"/pages/{ticket_id}", "PATCH", json=payload)
        if is_error(data):
            raise MutationError(operation, error_message(data))
        await self.rate_limiter.wait()
        return data

    def _record(self, ticket_id: str, title: str, action: HistoryAction) -> None:
        self.store.append_history(HistoryEntry(ticket_id=ticket_id, title=title, action=action))

    def _creation_assignee(self, assignee: str | None) -> str | None:
        if assignee:
            user_id = self.config.resolve_assignee(assignee)
            if user_id:
                return user_id
            logger.warning(
                "Unknown team member %r; falling back to the acting identity", assignee
            )
        return self.config.acting_identity_id or None

    async def create_ticket(
        self,
        title: str,
        area: TicketArea,
        body: str | None = None,
        priority: TicketPriority = TicketPriority.P0,
        assignee: str | None = None,
        ticket_type: str = DEFAULT_TICKET_TYPE,
        application: str | None = None,
        record: bool = True,
    ) -> Ticket:
        """Create a new Open ticket in the tickets data source.

        The body is written as paragraph blocks of at most
        ``config.block_chunk_size`` characters each, in order.

        Args:
            title: Ticket title (truncated to 200 characters).
            area: Ticket area.
            body: Optional free-text description.
            priority: Ticket priority.
            assignee: Team member name. Unknown or missing names fall back to
                the acting identity when one is configured.
            ticket_type: Value of the Type property.
            application: Application tag. Defaults to the configured scope.
            record: Whether to append a "created" history entry.

        Returns:
            The created ticket, normalized from the response.

        Raises:
            ConfigError: If no application is given and no scope is configured.
            MutationError: If the remote store rejects the page.
        """
        async with self._lock:
            return await self._create_ticket(
                title, area, body, priority, assignee, ticket_type, application, record
            )

    async def _create_ticket(
        self,
        title: str,
        area: TicketArea,
        body: str | None,
        priority: TicketPriority,
        assignee: str | None,
        ticket_type: str,
        application: str | None,
        record: bool,
    ) -> Ticket:
        self.config.require_remote()
        app_name = application or self.config.target_app
        if not app_name:
            raise ConfigError("TARGET_APP is not set and no application was provided")

        data_source_id = await self.fetcher.resolve_data_source_id()

        properties: dict[str, Any] = {
            schema.TITLE: {"title": text_spans(title[:MAX_TITLE_LENGTH])},
            schema.STATUS: {"status": {"name": TicketStatus.OPEN.value}},
            schema.APPLICATION: {"multi_select": [{"name": app_name}]},
            schema.AREA: {"multi_select": [{"name": TicketArea(area).value}]},
            schema.TYPE: {"select": {"name": ticket_type}},
            schema.PRIORITY: {"select": {"name": TicketPriority(priority).value}},
        }
        user_id = self._creation_assignee(assignee)
        if user_id:
            properties[schema.ASSIGNEE] = _people(user_id)

        payload: dict[str, Any] = {
            "parent": {"type": "data_source_id", "data_source_id": data_source_id},
            "properties": properties,
        }
        if body:
            payload["children"] = paragraph_blocks(body, self.config.block_chunk_size)

        logger.info("Creating ticket %r [%s] %s", title, area, priority)
        data = await self.transport.request("/pages", "POST", json=payload)
        if is_error(data) or not data.get("id"):
            message = error_message(data) if is_error(data) else str(data)
            raise MutationError("Ticket creation", message)
        await self.rate_limiter.wait()

        ticket = self._normalize(data)
        logger.info("Created ticket %s", ticket.id)
        if record:
            self._record(ticket.id, ticket.title, HistoryAction.CREATED)
        return ticket

    async def set_status(
        self, ticket_id: str, status: TicketStatus, title: str | None = None
    ) -> None:
        """Set a ticket's status.

        Any status may be set from any other. Moving to Done or Review AI Fix
        also stamps Resolved At in the same write.

        Args:
            ticket_id: Page id of the ticket.
            status: New status.
            title: Title to record in history. Defaults to a placeholder
                naming the action.
        """
        status = TicketStatus(status)
        properties: dict[str, Any] = {schema.STATUS: {"status": {"name": status.value}}}
        if status in RESOLVING_STATUSES:
            properties[schema.RESOLVED_AT] = {"date": {"start": utc_now_iso()}}

        logger.info("Setting status of %s to %s", ticket_id, status)
        async with self._lock:
            await self._update_page(ticket_id, {"properties": properties}, "Status update")

            action = _STATUS_ACTIONS.get(status, HistoryAction.STATUS_CHANGE)
            self._record(ticket_id, title or f"({action.value})", action)

    async def _set_text(self, ticket_id: str, prop: str, value: str, operation: str) -> None:
        logger.info("Setting %s of %s to %r", prop.strip(), ticket_id, value)
        async with self._lock:
            await self._update_page(
                ticket_id, {"properties": {prop: _rich_text(value)}}, operation
            )

    async def set_branch(self, ticket_id: str, branch: str) -> None:
        await self._set_text(ticket_id, schema.BRANCH, branch, "Branch update")

    async def set_commit(self, ticket_id: str, commit: str) -> None:
        await self._set_text(ticket_id, schema.COMMIT, commit, "Commit update")

    async def set_feature(self, ticket_id: str, feature: str) -> None:
        await self._set_text(ticket_id, schema.FEATURE, feature, "Feature update")

    async def set_dependencies(
        self,
        ticket_id: str,
        blocked_by: list[str] | None = None,
        blocks: list[str] | None = None,
    ) -> bool:
        """Replace the dependency relations of a ticket.

        Each relation is written only when given; an empty list clears it.
        Cycles, including self-references, are written as given.

        Returns:
            False if neither relation was given and nothing was sent.
        """
        properties: dict[str, Any] = {}
        if blocked_by is not None:
            properties[schema.DEPENDENCY] = _relation(blocked_by)
        if blocks is not None:
            properties[schema.BLOCKS] = _relation(blocks)
        if not properties:
            return False

        logger.info(
            "Updating dependencies of %s (blocked_by=%s, blocks=%s)",
            ticket_id,
            blocked_by,
            blocks,
        )
        async with self._lock:
            await self._update_page(ticket_id, {"properties": properties}, "Dependency update")
        return True

    async def set_assignee(self, ticket_id: str, name: str) -> None:
        """Assign a ticket to a team member by name.

        Raises:
            AssigneeNotFoundError: If the name is not configured. Nothing is sent.
        """
        user_id = self.config.resolve_assignee(name)
        if not user_id:
            known = ", ".join(self.config.team_users) or "(none configured)"
            raise AssigneeNotFoundError(f'Unknown team member "{name}". Known: {known}')

        logger.info("Assigning %s to %s", ticket_id, name)
        async with self._lock:
            await self._update_page(
                ticket_id, {"properties": {schema.ASSIGNEE: _people(user_id)}}, "Assignee update"
            )

    async def archive(self, ticket_id: str) -> None:
        """Archive (soft-delete) a ticket page."""
        logger.info("Archiving %s", ticket_id)
        async with self._lock:
            await self._update_page(ticket_id, {"archived": True}, "Archive")

    # --- Diagnostics ---

    async def self_test(self) -> SelfTestReport:
        """Check connectivity, read access and write access.

        Write access is probed by creating and archiving a throwaway ticket
        under the configured scope. A probe failure, or a missing scope, is
        reported, not raised.
        """
        self.config.require_remote()
        async with self._lock:
            data_source_id = await self.fetcher.resolve_data_source_id()
            pages = await self.fetcher.fetch_all_pages()
            tickets = [self._normalize(page) for page in pages]

            report = SelfTestReport(
                data_source_id=data_source_id,
                page_count=len(pages),
                sample=tickets[0] if tickets else None,
                tickets_by_application=dict(
                    Counter(t.application or "(none)" for t in tickets)
                ),
            )

            try:
                probe = await self._create_ticket(
                    SELF_TEST_TITLE,
                    TicketArea.BACKEND,
                    body=None,
                    priority=TicketPriority.P4,
                    assignee=None,
                    ticket_type=DEFAULT_TICKET_TYPE,
                    application=None,
                    record=False,
                )
                await self._update_page(probe.id, {"archived": True}, "Archive")
                report.write_ok = True
            except (ConfigError, EngineError, NotionError) as e:
                logger.error("Self-test write probe failed: %s", e)
                report.write_error = str(e)

        return report
