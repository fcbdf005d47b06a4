"""Shared fixtures: a file-backed store, test settings and an API client."""
from __future__ import annotations

import os
from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

# Set env vars BEFORE any imports that might cache them
os.environ.setdefault("TASKSAVER_JWT_SECRET", "test-secret")
os.environ.setdefault("TASKSAVER_STORE_BACKEND", "file")

from api.dependencies import get_settings, get_store  # noqa: E402
from api.main import app  # noqa: E402
from tasksaver.config import Settings  # noqa: E402
from tasksaver.items import Event, Task  # noqa: E402
from tasksaver.store import FileStore  # noqa: E402

TEST_SECRET = "test-secret"
CREATED = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        jwt_secret=TEST_SECRET,
        store_backend="file",
        data_dir=tmp_path / "data",
        cache_dir=tmp_path / "cache",
    )


@pytest.fixture
def store(tmp_path):
    return FileStore(tmp_path / "data")


@pytest.fixture
def client(store, settings):
    """TestClient wired to the temp store; the lifespan is not run."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


def register_and_login(client, name="Alice", email="alice@example.com", password="secret123"):
    """Register an account and return (user dict, auth headers)."""
    client.post("/api/auth/register", json={"name": name, "email": email, "password": password})
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    body = resp.json()
    return body["user"], {"Authorization": f"Bearer {body['token']}"}


def make_task(title="Task", **overrides) -> Task:
    data = dict(
        id=overrides.pop("id", title.lower().replace(" ", "-")),
        user_id="u1",
        title=title,
        created_at=CREATED,
        updated_at=CREATED,
    )
    data.update(overrides)
    return Task(**data)


def make_event(title="Event", start=None, end=None, **overrides) -> Event:
    start = start or datetime(2024, 3, 10, 9, 0)
    data = dict(
        id=overrides.pop("id", title.lower().replace(" ", "-")),
        title=title,
        start_date=start,
        end_date=end or start,
        created_at=CREATED,
        updated_at=CREATED,
    )
    data.update(overrides)
    return Event(**data)
