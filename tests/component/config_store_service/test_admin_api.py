import pytest
from fastapi.testclient import TestClient

from services.config_store_service import ConfigurationStore, FileSource, create_app


@pytest.fixture
def config_file(write_config):
    return write_config("application_name=shop\nreporting.remote.port=2004\n")


@pytest.fixture
def client(config_file):
    app = create_app(lambda: ConfigurationStore(FileSource(config_file), reload_interval_seconds=-1))
    with TestClient(app) as client:
        yield client


def test_get_metadata(client, config_file):
    response = client.get("/api/v1/config/metadata")
    assert response.status_code == 200
    metadata = response.json()
    assert metadata["generation"] == 1
    assert metadata["source"] == "file"
    assert metadata["location"] == str(config_file)
    assert metadata["key_count"] == 2
    assert metadata["failed"] is False


def test_get_keys(client):
    response = client.get("/api/v1/config/keys")
    assert response.status_code == 200
    assert response.json() == {"keys": ["application_name", "reporting.remote.port"], "generation": 1}


def test_get_value(client):
    response = client.get("/api/v1/config/value/reporting.remote.port")
    assert response.status_code == 200
    assert response.json() == {"key": "reporting.remote.port", "value": "2004", "generation": 1}


def test_get_missing_value(client):
    response = client.get("/api/v1/config/value/nonexistent")
    assert response.status_code == 404


def test_reload(client, config_file):
    config_file.write_text("application_name=checkout\n")

    response = client.post("/api/v1/config/reload")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["metadata"]["generation"] == 2
    assert body["metadata"]["key_count"] == 1

    assert client.get("/api/v1/config/value/application_name").json()["value"] == "checkout"
    assert client.get("/api/v1/config/value/reporting.remote.port").status_code == 404


def test_reload_with_missing_source(client, config_file):
    config_file.unlink()

    response = client.post("/api/v1/config/reload")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert body["metadata"]["failed"] is True
    assert client.get("/api/v1/config/keys").json()["keys"] == []


def test_store_is_closed_on_shutdown(config_file):
    stores = []

    def factory():
        store = ConfigurationStore(FileSource(config_file), reload_interval_seconds=60)
        stores.append(store)
        return store

    with TestClient(create_app(factory)):
        assert stores[0].reloading is True
    assert stores[0].reloading is False


def test_value_lookups_do_not_fill_the_cache(client):
    """Test that client-chosen keys are read from the raw snapshot, not cached."""
    for index in range(50):
        assert client.get(f"/api/v1/config/value/unknown/{index}").status_code == 404
    assert client.get("/api/v1/config/value/application_name").status_code == 200

    store = client.app.state.store
    assert len(store._generation.cache) == 0
