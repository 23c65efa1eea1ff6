"""Tests for the automation HTTP router."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from agencyhub.interface.automation_router import router


@pytest.fixture
def client(service, registry) -> TestClient:
    """Create a test client for an app carrying only the automation router."""
    app = FastAPI()
    app.include_router(router)
    app.state.automation_service = service
    app.state.task_registry = registry
    return TestClient(app)


def _task_payload(task_id: str = "task-1", **fields) -> dict:
    return {"id": task_id, "title": "Design review", "project_id": "proj-1", **fields}


@pytest.mark.unit
class TestRuleEndpoints:
    """Tests for rule CRUD over HTTP."""

    def test_list_seeded_rules(self, client: TestClient) -> None:
        response = client.get("/automations/rules")

        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == ["auto-due-date-24h", "auto-urgent-assign", "auto-overdue-warning"]

    def test_create_rule(self, client: TestClient) -> None:
        payload = {
            "name": "Tag client work",
            "description": "Tag every new task",
            "trigger": {"type": "task_created", "conditions": []},
            "actions": [{"type": "add_tag", "tag": "client"}],
        }

        response = client.post("/automations/rules", json=payload)

        assert response.status_code == 201
        data = response.json()
        assert data["id"].startswith("auto-")
        assert data["trigger_count"] == 0
        assert data["actions"] == [{"type": "add_tag", "tag": "client"}]

    def test_create_rule_without_name_is_rejected(self, client: TestClient) -> None:
        payload = {"name": "", "description": "x", "trigger": {"type": "task_created"}}

        response = client.post("/automations/rules", json=payload)

        assert response.status_code == 422

    def test_get_unknown_rule(self, client: TestClient) -> None:
        response = client.get("/automations/rules/missing")

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "ERR_RULE_NOT_FOUND"

    def test_patch_rule(self, client: TestClient) -> None:
        response = client.patch("/automations/rules/auto-overdue-warning", json={"name": "Overdue"})

        assert response.status_code == 200
        assert response.json()["name"] == "Overdue"
        assert len(response.json()["actions"]) == 2

    def test_patch_with_blank_name_is_rejected(self, client: TestClient) -> None:
        response = client.patch("/automations/rules/auto-overdue-warning", json={"name": "  "})

        assert response.status_code == 422
        assert client.get("/automations/rules/auto-overdue-warning").json()["name"] == "Alerta de Tarefa Atrasada"

    def test_toggle_rule(self, client: TestClient) -> None:
        response = client.post("/automations/rules/auto-due-date-24h/toggle")

        assert response.status_code == 200
        assert response.json()["is_active"] is False

    def test_delete_rule(self, client: TestClient) -> None:
        assert client.delete("/automations/rules/auto-due-date-24h").status_code == 204
        assert client.delete("/automations/rules/auto-due-date-24h").status_code == 404


@pytest.mark.unit
class TestEventEndpoints:
    """Tests for task lifecycle events."""

    def test_task_created_runs_automations(self, client: TestClient, registry) -> None:
        response = client.post("/automations/events/task-created", json={"task": _task_payload(priority="urgent")})

        assert response.status_code == 200
        [result] = response.json()
        assert result["trigger_type"] == "task_created"
        assert result["matched_rule_ids"] == ["auto-urgent-assign"]
        assert registry.get("task-1") is not None

    def test_task_updated_returns_results_in_dispatch_order(self, client: TestClient) -> None:
        payload = {
            "task": _task_payload(status="done"),
            "previous_task": _task_payload(status="review"),
        }

        response = client.post("/automations/events/task-updated", json=payload)

        assert [r["trigger_type"] for r in response.json()] == ["status_changed", "task_completed", "task_updated"]

    def test_due_date_check_uses_registered_tasks(self, client: TestClient, make_task) -> None:
        due = make_task(due_in_hours=4)
        client.post(
            "/automations/events/task-created",
            json={"task": _task_payload(due_date=due.due_date, due_time=due.due_time)},
        )

        response = client.post("/automations/events/due-date-check")

        assert response.json() == {"tasks_checked": 1, "rules_matched": 1}

    def test_deleted_task_is_no_longer_checked(self, client: TestClient, registry) -> None:
        client.post("/automations/events/task-created", json={"task": _task_payload()})

        assert client.delete("/automations/events/tasks/task-1").status_code == 204
        assert len(registry) == 0
        assert client.delete("/automations/events/tasks/task-1").status_code == 204


@pytest.mark.unit
class TestNotificationEndpoints:
    """Tests for the notification center endpoints."""

    @pytest.fixture
    def notification_id(self, client: TestClient) -> str:
        client.post("/automations/events/task-created", json={"task": _task_payload(priority="urgent")})
        return client.get("/automations/notifications").json()["notifications"][0]["id"]

    def test_list_with_unread_count(self, client: TestClient, notification_id: str) -> None:
        data = client.get("/automations/notifications").json()

        assert data["unread_count"] == 1
        assert data["notifications"][0]["automation_rule_id"] == "auto-urgent-assign"

    def test_mark_read_and_unread(self, client: TestClient, notification_id: str) -> None:
        assert client.post(f"/automations/notifications/{notification_id}/read").status_code == 204
        assert client.get("/automations/notifications").json()["unread_count"] == 0
        assert client.get("/automations/notifications", params={"unread_only": True}).json()["notifications"] == []

        assert client.post(f"/automations/notifications/{notification_id}/unread").status_code == 204
        assert client.get("/automations/notifications").json()["unread_count"] == 1

    def test_unknown_notification(self, client: TestClient) -> None:
        response = client.post("/automations/notifications/notif-missing/read")

        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "ERR_NOTIFICATION_NOT_FOUND"

    def test_read_all_scoped_to_project(self, client: TestClient, notification_id: str) -> None:
        other = client.post("/automations/notifications/read-all", params={"project_id": "proj-2"})
        assert other.json() == {"count": 0}

        response = client.post("/automations/notifications/read-all", params={"project_id": "proj-1"})
        assert response.json() == {"count": 1}

    def test_delete_and_clear(self, client: TestClient, notification_id: str) -> None:
        assert client.delete(f"/automations/notifications/{notification_id}").status_code == 204
        assert client.delete(f"/automations/notifications/{notification_id}").status_code == 404
        assert client.delete("/automations/notifications").json() == {"count": 0}
