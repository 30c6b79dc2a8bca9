"""Shared pytest fixtures and configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from shipyard.config import ShipyardConfig
from shipyard.engine import ShipyardEngine
from shipyard.notion import RateLimiter
from shipyard.state_store import StateStore
from shipyard.work_queue import QueueBuilder


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


class FakeTransport:
    """In-memory stand-in for the Notion transport.

    Responses are returned in the order they were queued; every call is
    recorded as (method, path, json, params).
    """

    def __init__(self, responses: list[dict[str, Any]] | None = None) -> None:
        self.responses = list(responses or [])
        self.calls: list[tuple[str, str, dict[str, Any] | None, dict[str, Any] | None]] = []

    def queue(self, *responses: dict[str, Any]) -> None:
        self.responses.extend(responses)

    async def request(
        self,
        path: str,
        method: str = "GET",
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        self.calls.append((method, path, json, params))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {path}")
        return self.responses.pop(0)


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def notion_error(message: str = "boom", code: str = "validation_error") -> dict[str, Any]:
    return {"object": "error", "status": 400, "code": code, "message": message}


def make_page(
    page_id: str = "11111111-2222-3333-4444-555555555555",
    title: str | None = "Test ticket",
    status: str | None = "Open",
    application: str | None = "Humanize",
    area: str | None = "Backend",
    priority: str | None = None,
    blocked_by: list[str] | None = None,
    blocks: list[str] | None = None,
    assignees: list[str] | None = None,
    branch: str | None = None,
    **extra_props: Any,
) -> dict[str, Any]:
    """Build a raw Notion page in the shapes the tickets data source uses."""
    props: dict[str, Any] = {}
    if title is not None:
        props["Ticket"] = {"type": "title", "title": [{"plain_text": title}]}
    if status is not None:
        props["Status"] = {"type": "status", "status": {"name": status}}
    if application is not None:
        props["Application"] = {"type": "multi_select", "multi_select": [{"name": application}]}
    if area is not None:
        props["Area"] = {"type": "multi_select", "multi_select": [{"name": area}]}
    if priority is not None:
        props["Priority"] = {"type": "select", "select": {"name": priority}}
    if blocked_by is not None:
        props["Dependency"] = {"type": "relation", "relation": [{"id": i} for i in blocked_by]}
    if blocks is not None:
        props["Blocks "] = {"type": "relation", "relation": [{"id": i} for i in blocks]}
    if assignees is not None:
        props["Assignee"] = {"type": "people", "people": [{"id": i} for i in assignees]}
    if branch is not None:
        props["Branch"] = {"type": "rich_text", "rich_text": [{"plain_text": branch}]}
    props.update(extra_props)
    return {
        "object": "page",
        "id": page_id,
        "created_time": "2026-01-05T10:00:00.000Z",
        "last_edited_time": "2026-01-06T12:30:00.000Z",
        "properties": props,
    }


def query_response(
    pages: list[dict[str, Any]], next_cursor: str | None = None
) -> dict[str, Any]:
    return {
        "object": "list",
        "results": pages,
        "has_more": next_cursor is not None,
        "next_cursor": next_cursor,
    }


@pytest.fixture
def page_factory():
    """Factory for raw Notion pages."""
    return make_page


@pytest.fixture
def query_factory():
    """Factory for data source query responses."""
    return query_response


@pytest.fixture
def error_factory():
    """Factory for Notion error objects."""
    return notion_error


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def rate_limiter(sleeper: RecordingSleep) -> RateLimiter:
    return RateLimiter(0.35, sleep=sleeper)


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    return tmp_path / "humanize_state.json"


@pytest.fixture
def config(state_path: Path) -> ShipyardConfig:
    """Configuration scoped to the Humanize app with no acting identity."""
    return ShipyardConfig(
        api_key="test-key",
        database_id="db-123",
        target_app="Humanize",
        team_users={"Alice": "user-alice", "Bob": "user-bob"},
        state_file=state_path,
    )


@pytest.fixture
def store(state_path: Path, config: ShipyardConfig) -> StateStore:
    return StateStore(state_path, QueueBuilder(target_app=config.target_app))


@pytest.fixture
def engine(
    config: ShipyardConfig,
    transport: FakeTransport,
    store: StateStore,
    rate_limiter: RateLimiter,
) -> ShipyardEngine:
    """Engine over the fake transport with the data source already resolved."""
    engine = ShipyardEngine(config, transport, store=store, rate_limiter=rate_limiter)
    engine.fetcher._data_source_id = "ds-tickets"
    return engine
