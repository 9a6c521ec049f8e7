# tests/test_tasks_api.py

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from taskforge_api.app.api.v1.endpoints.tasks import get_task_service
from taskforge_api.app.main import app
from taskforge_api.app.services.task_service import TaskService
from taskforge_api.app.services.task_store import TaskStore


URL = "/api/v1/tasks"


def _create(client: TestClient, user_id: int | None = None, **body) -> dict:
    headers = {"X-User-Id": str(user_id)} if user_id is not None else {}
    resp = client.post(URL, json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_returns_camel_case_task(client: TestClient) -> None:
    body = _create(client, 1, title="Buy milk", priority="MEDIUM", dueDate="2026-11-01")

    assert body["id"] > 0
    assert body["ownerId"] == 1
    assert body["status"] == "TODO"
    assert body["priority"] == "MEDIUM"
    assert body["dueDate"] == "2026-11-01"
    assert "createdAt" in body and "updatedAt" in body


def test_missing_header_uses_fallback_identity(client: TestClient) -> None:
    body = _create(client, title="anonymous")
    assert body["ownerId"] == 1

    resp = client.get(f"{URL}/{body['id']}", headers={"X-User-Id": "1"})
    assert resp.status_code == 200


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"title": ""},
        {"title": "   "},
        {"title": "x" * 141},
        {"title": "ok", "description": "d" * 10001},
        {"title": "ok", "priority": "URGENT"},
    ],
)
def test_create_validation_errors(client: TestClient, body: dict) -> None:
    assert client.post(URL, json=body).status_code == 422


def test_get_foreign_task_is_404(client: TestClient) -> None:
    task = _create(client, 2, title="secret")

    resp = client.get(f"{URL}/{task['id']}", headers={"X-User-Id": "1"})
    assert resp.status_code == 404
    assert resp.json()["detail"] == f"Task not found or not owned by user: {task['id']}"

    missing = client.get(f"{URL}/9999", headers={"X-User-Id": "1"})
    assert missing.status_code == 404
    assert missing.json()["detail"] == "Task not found or not owned by user: 9999"


def test_update_applies_only_given_fields(client: TestClient) -> None:
    task = _create(client, 1, title="Draft", description="first pass", priority="LOW")

    resp = client.put(
        f"{URL}/{task['id']}",
        json={"status": "IN_PROGRESS", "priority": None},
        headers={"X-User-Id": "1"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "IN_PROGRESS"
    assert body["priority"] == "LOW"
    assert body["title"] == "Draft"
    assert body["description"] == "first pass"
    assert body["ownerId"] == 1


def test_update_foreign_task_is_404_and_unchanged(client: TestClient) -> None:
    task = _create(client, 2, title="owner two")

    resp = client.put(f"{URL}/{task['id']}", json={"title": "x"}, headers={"X-User-Id": "1"})
    assert resp.status_code == 404

    still = client.get(f"{URL}/{task['id']}", headers={"X-User-Id": "2"}).json()
    assert still["title"] == "owner two"


def test_update_rejects_empty_title(client: TestClient) -> None:
    task = _create(client, 1, title="t")
    resp = client.put(f"{URL}/{task['id']}", json={"title": ""}, headers={"X-User-Id": "1"})
    assert resp.status_code == 422


def test_delete_then_404(client: TestClient) -> None:
    task = _create(client, 1, title="bye")

    assert client.delete(f"{URL}/{task['id']}", headers={"X-User-Id": "2"}).status_code == 404

    resp = client.delete(f"{URL}/{task['id']}", headers={"X-User-Id": "1"})
    assert resp.status_code == 204
    assert resp.content == b""

    assert client.delete(f"{URL}/{task['id']}", headers={"X-User-Id": "1"}).status_code == 404
    assert client.get(f"{URL}/{task['id']}", headers={"X-User-Id": "1"}).status_code == 404


def test_list_envelope_with_status_filter(client: TestClient) -> None:
    todo = _create(client, 1, title="todo")
    done = _create(client, 1, title="done")
    client.put(f"{URL}/{done['id']}", json={"status": "DONE"}, headers={"X-User-Id": "1"})
    _create(client, 2, title="someone else")

    resp = client.get(URL, params={"status": "TODO", "page": 0, "size": 10}, headers={"X-User-Id": "1"})

    assert resp.status_code == 200
    body = resp.json()
    assert [t["id"] for t in body["content"]] == [todo["id"]]
    assert body["pageNumber"] == 0
    assert body["pageSize"] == 10
    assert body["totalElements"] == 1
    assert body["totalPages"] == 1
    assert body["isLast"] is True


def test_list_sorting_and_paging_params(client: TestClient) -> None:
    for title in ["c", "a", "b"]:
        _create(client, 1, title=title)

    resp = client.get(URL, params={"sortBy": "title", "sortDir": "desc", "size": 2})
    body = resp.json()

    assert [t["title"] for t in body["content"]] == ["c", "b"]
    assert body["totalPages"] == 2
    assert body["isLast"] is False


@pytest.mark.parametrize(
    "params",
    [{"page": -1}, {"size": -1}, {"status": "LATER"}, {"priority": "URGENT"}],
)
def test_list_rejects_invalid_params(client: TestClient, params: dict) -> None:
    assert client.get(URL, params=params).status_code == 422


def test_non_integer_user_header_is_rejected(client: TestClient) -> None:
    assert client.get(URL, headers={"X-User-Id": "alice"}).status_code == 422


def test_storage_failure_is_generic_500(tmp_path) -> None:
    # No migrations applied, so every query fails with OperationalError.
    broken = TaskService(TaskStore(str(tmp_path / "unmigrated.sqlite3")))
    app.dependency_overrides[get_task_service] = lambda: broken
    try:
        resp = TestClient(app).get(URL)
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}


@pytest.mark.parametrize("method", ["get", "delete"])
def test_task_id_beyond_integer_range_is_404(client: TestClient, method: str) -> None:
    resp = getattr(client, method)(f"{URL}/99999999999999999999")
    assert resp.status_code == 404


def test_update_with_task_id_beyond_integer_range_is_404(client: TestClient) -> None:
    resp = client.put(f"{URL}/99999999999999999999", json={"title": "x"})
    assert resp.status_code == 404


def test_huge_page_number_returns_empty_last_page(client: TestClient) -> None:
    _create(client, 1, title="only")

    resp = client.get(URL, params={"page": 10**17, "size": 1000})

    assert resp.status_code == 200
    body = resp.json()
    assert body["content"] == []
    assert body["totalElements"] == 1
    assert body["isLast"] is True


def test_user_header_beyond_integer_range_is_rejected(client: TestClient) -> None:
    resp = client.post(URL, json={"title": "x"}, headers={"X-User-Id": str(2**63)})
    assert resp.status_code == 422
