import pytest
from fastapi.testclient import TestClient

from config import settings
from services import alias_store, config_store
from services.json_store import JsonDocument


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "DATABASE_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def configs(tmp_path):
    doc = JsonDocument(tmp_path / "ai_configs.json", config_store.default_document)
    return config_store.AIConfigStore(doc)


@pytest.fixture
def aliases(tmp_path):
    doc = JsonDocument(tmp_path / "aliases.json", alias_store.default_document)
    return alias_store.AliasStore(doc)


@pytest.fixture
def client(data_dir):
    from main import app

    with TestClient(app) as c:
        yield c
