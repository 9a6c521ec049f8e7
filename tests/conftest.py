# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from taskforge_api.app.api.v1.endpoints.tasks import get_task_service
from taskforge_api.app.core.db import init_db
from taskforge_api.app.main import app
from taskforge_api.app.services.task_service import TaskService
from taskforge_api.app.services.task_store import TaskStore


@pytest.fixture()
def db_path(tmp_path: Path) -> str:
    """Fresh migrated SQLite file per test."""
    path = str(tmp_path / "tasks.sqlite3")
    init_db(path)
    return path


@pytest.fixture()
def store(db_path: str) -> TaskStore:
    return TaskStore(db_path)


@pytest.fixture()
def service(store: TaskStore) -> TaskService:
    return TaskService(store)


@pytest.fixture()
def client(service: TaskService):
    """
    TestClient wired to the per-test database.

    The client is not used as a context manager, so the startup hook
    (which migrates the configured default database) does not run.
    """
    app.dependency_overrides[get_task_service] = lambda: service
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
