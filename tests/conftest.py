"""Shared fixtures: every test gets its own data folders and store."""

import pytest
from fastapi.testclient import TestClient

from exam_simulator_api.app.core.config import settings
from exam_simulator_api.app.core.store import InMemoryStore, JsonFileStore, set_store
from exam_simulator_api.app.main import app

from .helpers import ADMIN_EMAIL, ADMIN_PASSWORD


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "data_dir", str(tmp_path / "data"))
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path / "uploads"))
    monkeypatch.setattr(settings, "public_dir", str(tmp_path / "public"))
    monkeypatch.setattr(settings, "admin_email", ADMIN_EMAIL)
    monkeypatch.setattr(settings, "admin_password", ADMIN_PASSWORD)
    monkeypatch.setattr(settings, "firebase_credentials", "")
    monkeypatch.setattr(settings, "firebase_bucket", "")
    monkeypatch.setattr(settings, "pass_threshold", 70.0)
    yield
    set_store(None)


@pytest.fixture
def file_store(tmp_path):
    store = JsonFileStore(tmp_path / "data")
    set_store(store)
    return store


@pytest.fixture
def memory_store():
    store = InMemoryStore()
    set_store(store)
    return store


@pytest.fixture
def client(file_store):
    # Server errors are rendered by the app's own handlers.
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest.fixture
def api():
    """Prefix helper so tests read like the public routes."""
    return lambda path: f"{settings.api_prefix}{path}"
