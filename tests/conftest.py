import pytest
from fastapi.testclient import TestClient

from postbox.config import settings
from postbox.core.database import RecordStore
from postbox.main import create_app


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(settings, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def store(tmp_path):
    record_store = RecordStore(tmp_path / "database.json")
    record_store.initialize()
    return record_store


@pytest.fixture
def client(tmp_path):
    app = create_app(store=RecordStore(tmp_path / "api.json"))
    with TestClient(app) as test_client:
        yield test_client
