import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.append(str(Path(__file__).resolve().parents[1]))

from neurowork.application import get_workforce_service, reset_workforce_state

CEO = {"X-Employee-Id": "e_1"}
MANAGER = {"X-Employee-Id": "e_2"}
MIKE = {"X-Employee-Id": "e_3"}
PRIYA = {"X-Employee-Id": "e_4"}
TOM = {"X-Employee-Id": "e_5"}


@pytest.fixture(autouse=True)
def reset_state():
    reset_workforce_state()
    yield
    reset_workforce_state()


@pytest.fixture()
def client(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("NEUROWORK_STATE_PATH", raising=False)
    from neurowork.app import create_app

    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


def _employee(client: TestClient, employee_id: str) -> dict:
    response = client.get(f"/api/employees/{employee_id}")
    assert response.status_code == 200
    return response.json()["employee"]


def test_login_hides_credentials(client):
    response = client.post("/api/session/login", json={"email": "mike@neurowork.ai", "password": "password123"})
    assert response.status_code == 200
    employee = response.json()["employee"]
    assert employee["id"] == "e_3"
    assert "password" not in employee

    response = client.post("/api/session/login", json={"email": "mike@neurowork.ai", "password": "nope"})
    assert response.status_code == 401


def test_end_to_end_task_flow(client):
    # 1. manager creates an individual task
    response = client.post(
        "/api/tasks",
        headers=MANAGER,
        json={
            "title": "Audit dashboards",
            "description": "Check every chart",
            "type": "OPEN",
            "priority": "Medium",
            "estimated_hours": 4,
            "required_skills": "Testing, Documentation",
        },
    )
    assert response.status_code == 201
    task = response.json()
    assert task["status"] == "PENDING"
    assert task["required_skills"] == ["Testing", "Documentation"]
    assert task["required_people"] is None

    # 2. an employee takes it
    response = client.post(f"/api/tasks/{task['id']}/assign", headers=TOM)
    assert response.status_code == 200
    assert response.json()["assigned_to_id"] == "e_5"
    tom = _employee(client, "e_5")
    assert tom["workload_score"] == 33
    assert tom["status"] == "OPTIMAL"

    # 3. progress, notes and files
    response = client.put(f"/api/tasks/{task['id']}/progress", headers=TOM, json={"progress": 100})
    finished = response.json()
    assert finished["status"] == "COMPLETED"
    assert finished["completed_at"]

    response = client.put(f"/api/tasks/{task['id']}/progress", headers=TOM, json={"progress": 50})
    assert response.json()["status"] == "IN_PROGRESS"
    assert response.json()["completed_at"] == finished["completed_at"]

    assert client.post(f"/api/tasks/{task['id']}/notes", headers=TOM, json={"text": "Half done"}).status_code == 200
    assert client.post(f"/api/tasks/{task['id']}/notes", headers=TOM, json={"text": " "}).status_code == 400
    response = client.post(f"/api/tasks/{task['id']}/files", headers=TOM, json={"name": "charts.xlsx"})
    assert response.json()["files"] == ["charts.xlsx"]

    # 4. views
    response = client.get("/api/tasks", params={"view": "active", "employee_id": "e_5"})
    assert [item["id"] for item in response.json()["items"]] == [task["id"]]

    # 5. deletion keeps workload
    assert client.delete(f"/api/tasks/{task['id']}", headers=CEO).status_code == 204
    assert client.get(f"/api/tasks/{task['id']}").status_code == 404
    assert _employee(client, "e_5")["workload_score"] == 33


def test_group_join_and_leave(client):
    response = client.post(
        "/api/tasks",
        headers=CEO,
        json={
            "title": "Launch event",
            "description": "Plan the launch",
            "type": "MANDATORY",
            "priority": "High",
            "estimated_hours": 10,
            "is_group_task": True,
            "required_people": 2,
        },
    )
    task_id = response.json()["id"]

    response = client.post(f"/api/tasks/{task_id}/group", headers=MIKE)
    assert response.json()["group_assignee_ids"] == ["e_3"]
    assert _employee(client, "e_3")["workload_score"] == 55

    client.post(f"/api/tasks/{task_id}/group", headers=TOM)
    response = client.post(f"/api/tasks/{task_id}/group", headers=PRIYA)
    assert response.status_code == 200
    assert response.json()["group_assignee_ids"] == ["e_3", "e_5"]
    assert _employee(client, "e_4")["workload_score"] == 85

    response = client.post(f"/api/tasks/{task_id}/group", headers=MIKE)
    assert response.json()["group_assignee_ids"] == ["e_5"]
    assert _employee(client, "e_3")["workload_score"] == 55

    assert client.post(f"/api/tasks/{task_id}/assign", headers=MIKE).status_code == 409


def test_role_checks(client):
    payload = {"title": "x", "description": "y", "type": "OPEN", "priority": "Low", "estimated_hours": 1}
    assert client.post("/api/tasks", headers=MIKE, json=payload).status_code == 403
    assert client.post("/api/tasks", json=payload).status_code == 403
    assert client.delete("/api/tasks/t_1", headers=MIKE).status_code == 403
    assert client.put("/api/employees/e_4", headers=MIKE, json={"bio": "hi"}).status_code == 403

    response = client.put("/api/employees/e_3", headers=MIKE, json={"bio": "hi", "skills": "React, Go"})
    assert response.status_code == 200
    assert response.json()["skills"] == ["React", "Go"]


def test_scenario_e_invalid_task_is_not_stored(client):
    before = client.get("/api/tasks").json()["items"]
    version = get_workforce_service().store.version
    response = client.post(
        "/api/tasks",
        headers=MANAGER,
        json={"title": "Nothing", "description": "Zero hours", "type": "OPEN", "priority": "Low", "estimated_hours": 0},
    )
    assert response.status_code == 400
    assert client.get("/api/tasks").json()["items"] == before
    assert get_workforce_service().store.version == version


def test_products_and_company_overview(client):
    response = client.post("/api/products/p_1/comments", headers=MIKE, json={"text": "Rolled out v2"})
    assert response.json()["dev_comments"][0]["author"] == "Mike Ross"

    response = client.post(
        "/api/products/p_1/bugs",
        headers=TOM,
        json={"severity": "LOW", "title": "Typo", "description": "Footer typo"},
    )
    bug = response.json()["bug_reports"][0]
    assert bug["reported_by"] == "Tom Becker"
    response = client.post(f"/api/products/p_1/bugs/{bug['id']}/toggle", headers=TOM)
    assert response.json()["bug_reports"][0]["status"] == "RESOLVED"

    overview = client.get("/api/products/overview").json()
    assert len(overview["history"]) == 6
    assert overview["totals"]["revenue"] > 0


def test_analysis_falls_back_without_configuration(client):
    response = client.post("/api/analysis/workload")
    assert response.status_code == 200
    report = response.json()
    assert report["efficiency_score"] == 0
    assert report["recommendations"] == ["Check API Key", "Retry Analysis"]

    response = client.post("/api/products/p_2/analysis")
    assert response.json()["key_risks"] == ["API Error"]

    assert client.post("/api/analysis/chat", json={"message": ""}).status_code == 400


def test_snapshot_and_reset(client):
    version = client.get("/api/snapshot").json()["version"]
    client.post("/api/tasks/t_4/assign", headers=TOM)
    snapshot = client.get("/api/snapshot").json()
    assert snapshot["version"] == version + 1
    assert snapshot["workload_ledger"][0]["employee_id"] == "e_5"
    assert all("password" not in item for item in snapshot["employees"])

    assert client.post("/api/snapshot/reset", headers=TOM).status_code == 403
    response = client.post("/api/snapshot/reset", headers=CEO)
    assert response.status_code == 200
    assert client.get("/api/snapshot").json()["workload_ledger"] == []


def test_non_finite_numbers_are_rejected(client):
    response = client.put(
        "/api/tasks/t_4/progress",
        headers={**TOM, "Content-Type": "application/json"},
        content='{"progress": NaN}',
    )
    assert response.status_code == 400
    task = client.get("/api/tasks/t_4").json()
    assert task["status"] == "PENDING"
    assert task["completed_at"] is None

    response = client.post(
        "/api/tasks",
        headers=MANAGER,
        json={"title": "Endless", "description": "Never ends", "type": "OPEN", "priority": "Low", "estimated_hours": "1e999"},
    )
    assert response.status_code == 400


def test_bad_server_log_duration_is_a_client_error(client):
    payload = {"type": "OUTAGE", "description": "DB failover", "duration_minutes": "soon"}
    assert client.post("/api/products/p_1/server-logs", headers=MIKE, json=payload).status_code == 400
    payload["duration_minutes"] = -10
    assert client.post("/api/products/p_1/server-logs", headers=MIKE, json=payload).status_code == 400
    del payload["duration_minutes"]
    response = client.post("/api/products/p_1/server-logs", headers=MIKE, json=payload)
    assert response.json()["server_logs"][0]["duration_minutes"] == 60
