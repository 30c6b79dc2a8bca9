"""Integration tests for ticket routes."""

import pytest
from fastapi.testclient import TestClient

OK_PAGE = {"object": "page", "id": "t1", "properties": {}}


@pytest.mark.integration
class TestReadRoutes:
    """Tests for ready listing and ticket details."""

    def test_ready(self, client: TestClient, transport, page_factory, query_factory) -> None:
        transport.queue(
            query_factory(
                [
                    page_factory("late", priority="P4"),
                    page_factory("busy", status="In Progress"),
                    page_factory("soon", priority="P0"),
                ]
            )
        )

        response = client.get("/api/v1/tickets/ready")

        assert response.status_code == 200
        data = response.json()["data"]
        assert [t["id"] for t in data] == ["soon", "late"]
        assert data[0]["status"] == "Open"
        assert data[0]["application"] == "Humanize"

    def test_details(self, client: TestClient, transport, page_factory, query_factory) -> None:
        transport.queue(
            page_factory("t1", title="Fix login"),
            query_factory(
                [{"type": "quote", "quote": {"rich_text": [{"plain_text": "Note"}]}}]
            ),
        )

        response = client.get("/api/v1/tickets/t1")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["ticket"]["title"] == "Fix login"
        assert data["description"] == "> Note"

    def test_details_not_found(self, client: TestClient, transport, error_factory) -> None:
        transport.queue(error_factory("missing", "object_not_found"))

        response = client.get("/api/v1/tickets/gone")

        assert response.status_code == 404
        assert response.json()["error"] == "Ticket gone not found"


@pytest.mark.integration
class TestCreateRoute:
    """Tests for POST /tickets."""

    def test_creates_and_syncs(
        self, client: TestClient, transport, page_factory, query_factory
    ) -> None:
        transport.queue(page_factory("new-1", title="Add export"), query_factory([]))

        response = client.post(
            "/api/v1/tickets",
            json={"title": "Add export", "area": "Frontend", "priority": "P1"},
        )

        assert response.status_code == 201
        assert response.json()["data"]["id"] == "new-1"
        props = transport.calls[0][2]["properties"]
        assert props["Type"] == {"select": {"name": "Task"}}
        assert props["Priority"] == {"select": {"name": "P1"}}
        assert transport.calls[1][1] == "/data_sources/ds-tickets/query"

    def test_invalid_area(self, client: TestClient, transport) -> None:
        response = client.post("/api/v1/tickets", json={"title": "x", "area": "Sales"})
        assert response.status_code == 422
        assert transport.calls == []

    def test_missing_application_is_server_error(self, client: TestClient, engine) -> None:
        engine.config.target_app = ""

        response = client.post("/api/v1/tickets", json={"title": "x", "area": "Docs"})

        assert response.status_code == 500
        assert "TARGET_APP is not set" in response.json()["error"]


@pytest.mark.integration
class TestMutationRoutes:
    """Tests for PATCH and DELETE ticket routes."""

    def test_status_done(self, client: TestClient, transport, query_factory) -> None:
        transport.queue(OK_PAGE, query_factory([]))

        response = client.patch(
            "/api/v1/tickets/1a2b3c4d-aaaa/status", json={"status": "Done", "title": "Fix"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["message"] == "Ticket 1a2b3c4d -> Done"
        props = transport.calls[0][2]["properties"]
        assert "Resolved At" in props

    def test_status_rejected(self, client: TestClient, transport, error_factory) -> None:
        transport.queue(error_factory("Invalid status"))

        response = client.patch("/api/v1/tickets/t1/status", json={"status": "Open"})

        assert response.status_code == 502
        assert response.json()["error"] == "Status update failed: Invalid status"

    def test_status_unknown_value(self, client: TestClient) -> None:
        response = client.patch("/api/v1/tickets/t1/status", json={"status": "Archived"})
        assert response.status_code == 422

    def test_annotations(self, client: TestClient, transport, query_factory) -> None:
        transport.queue(OK_PAGE, OK_PAGE, query_factory([]))

        response = client.patch(
            "/api/v1/tickets/t1/annotations", json={"branch": "feature/x", "commit": "abc"}
        )

        assert response.status_code == 200
        assert response.json()["data"]["message"] == "Updated branch, commit"
        assert [list(call[2]["properties"]) for call in transport.calls[:2]] == [
            ["Branch"],
            ["Commit"],
        ]
        assert transport.calls[2][1] == "/data_sources/ds-tickets/query"

    def test_annotations_require_a_field(self, client: TestClient) -> None:
        response = client.patch("/api/v1/tickets/t1/annotations", json={})
        assert response.status_code == 422

    def test_dependencies(
        self, client: TestClient, transport, engine, page_factory, query_factory
    ) -> None:
        transport.queue(
            OK_PAGE,
            query_factory([page_factory("t1", blocked_by=["t2"]), page_factory("t2")]),
        )

        response = client.patch("/api/v1/tickets/t1/dependencies", json={"blocked_by": ["t2"]})

        assert response.status_code == 200
        assert transport.calls[0][2] == {"properties": {"Dependency": {"relation": [{"id": "t2"}]}}}
        queue = {item.id: item for item in engine.store.load().queue}
        assert queue["t1"].blocked_by == ["t2"]

    def test_dependencies_empty_body(self, client: TestClient, transport) -> None:
        response = client.patch("/api/v1/tickets/t1/dependencies", json={})

        assert response.json()["data"]["message"] == "Nothing to update"
        assert transport.calls == []

    def test_assignee(self, client: TestClient, transport, query_factory) -> None:
        transport.queue(OK_PAGE, query_factory([]))

        response = client.patch("/api/v1/tickets/t1/assignee", json={"name": "Alice"})

        assert response.status_code == 200
        assert transport.calls[0][2] == {"properties": {"Assignee": {"people": [{"id": "user-alice"}]}}}
        assert len(transport.calls) == 2

    def test_unknown_assignee(self, client: TestClient, transport) -> None:
        response = client.patch("/api/v1/tickets/t1/assignee", json={"name": "Zed"})

        assert response.status_code == 422
        assert response.json()["error"].startswith('Unknown team member "Zed"')
        assert transport.calls == []

    def test_archive_drops_ticket_from_snapshot(
        self, client: TestClient, transport, engine, page_factory, query_factory
    ) -> None:
        transport.queue(query_factory([page_factory("t1"), page_factory("t2")]))
        client.post("/api/v1/sync")
        assert [item.id for item in engine.store.load().queue] == ["t1", "t2"]
        transport.queue(OK_PAGE, query_factory([page_factory("t2")]))

        response = client.delete("/api/v1/tickets/t1")

        assert response.status_code == 204
        assert transport.calls[1] == ("PATCH", "/pages/t1", {"archived": True}, None)
        assert [item.id for item in engine.store.load().queue] == ["t2"]
