import os
import tempfile

# Settings are cached on first use; pin them before the app is imported.
os.environ["ENV_MODE"] = "development"
os.environ.setdefault("MEDIA_DIRECTORY", tempfile.mkdtemp(prefix="spice-media-"))

import pytest
from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.main import app
from app.services.realtime import MockRealtimeDatabase, get_realtime_db
from app.services.storage import LocalStorageService, get_storage_service


@pytest.fixture()
def settings():
    return get_settings()


@pytest.fixture()
def db():
    return MockRealtimeDatabase()


@pytest.fixture()
def storage(tmp_path):
    return LocalStorageService(tmp_path / "media", "/media")


@pytest.fixture()
def client(db, storage):
    app.dependency_overrides[get_realtime_db] = lambda: db
    app.dependency_overrides[get_storage_service] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def admin_client(client, settings):
    response = client.post(
        "/admin/login",
        data={"email": settings.admin_email, "password": settings.admin_password},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return client
