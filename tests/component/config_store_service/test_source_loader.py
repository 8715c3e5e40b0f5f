import httpx
import pytest

from services.config_store_service.src.schemas import ConfigSource
from services.config_store_service.src.source_loader import (
    FileSource,
    HttpSource,
    MappingSource,
    PackageResourceSource,
    RawSnapshot,
    RawSourceLoader,
    source_for,
)


def test_load_properties_file(write_config):
    """Test loading a properties file into an immutable snapshot."""
    config_path = write_config("# monitoring\nreporting.remote.port=2004\napplication_name = shop\n")
    snapshot = RawSourceLoader(FileSource(config_path)).load()

    assert isinstance(snapshot, RawSnapshot)
    assert dict(snapshot) == {"reporting.remote.port": "2004", "application_name": "shop"}
    assert snapshot.source == ConfigSource.FILE
    assert snapshot.location == str(config_path)
    assert snapshot.failed is False
    with pytest.raises(TypeError):
        snapshot["application_name"] = "other"


def test_snapshot_copies_its_input():
    values = {"a": "1"}
    snapshot = RawSnapshot(values)
    values["a"] = "2"
    assert snapshot["a"] == "1"


def test_checksum_depends_on_content_only():
    assert RawSnapshot({"a": "1", "b": "2"}).checksum == RawSnapshot({"b": "2", "a": "1"}).checksum
    assert RawSnapshot({"a": "1"}).checksum != RawSnapshot({"a": "2"}).checksum


def test_missing_file_gives_empty_snapshot(tmp_path, log_records):
    """Test behavior when the properties file is not found."""
    snapshot = RawSourceLoader(FileSource(tmp_path / "nonexistent.properties")).load()
    assert len(snapshot) == 0
    assert snapshot.failed is True
    assert any(record.levelname == "WARNING" for record in log_records.records)


def test_malformed_properties_gives_empty_snapshot(write_config, logged_errors):
    config_path = write_config("good=1\nbad=\\uZZZZ\n")
    snapshot = RawSourceLoader(FileSource(config_path)).load()
    assert dict(snapshot) == {}
    assert snapshot.failed is True
    assert logged_errors()


def test_undecodable_file_gives_empty_snapshot(tmp_path, logged_errors):
    config_path = tmp_path / "binary.properties"
    config_path.write_bytes(b"key=\xff\xfe\xfa")
    snapshot = RawSourceLoader(FileSource(config_path)).load()
    assert snapshot.failed is True
    assert logged_errors()


def test_load_yaml_file(write_config):
    config_path = write_config(
        "monitor.collect_headers: false\n"
        "reporting.remote.port: 2004\n"
        "monitor.http.headers.excluded:\n"
        "  - Cookie\n"
        "  - Authorization\n"
        "instance_name: null\n",
        filename="hotconf.yaml",
    )
    snapshot = RawSourceLoader(FileSource(config_path)).load()
    assert dict(snapshot) == {
        "monitor.collect_headers": "false",
        "reporting.remote.port": "2004",
        "monitor.http.headers.excluded": "Cookie, Authorization",
    }


def test_nested_yaml_is_rejected(write_config, logged_errors):
    config_path = write_config("monitor:\n  collect_headers: false\n", filename="hotconf.yml")
    snapshot = RawSourceLoader(FileSource(config_path)).load()
    assert snapshot.failed is True
    assert len(snapshot) == 0
    assert logged_errors()


def test_empty_yaml_is_an_empty_mapping(write_config):
    snapshot = RawSourceLoader(FileSource(write_config("", filename="empty.yaml"))).load()
    assert len(snapshot) == 0
    assert snapshot.failed is False


def test_package_resource(tmp_path, monkeypatch):
    package_dir = tmp_path / "bundled_settings"
    package_dir.mkdir()
    (package_dir / "__init__.py").write_text("")
    (package_dir / "hotconf.properties").write_text("application_name=bundled\n")
    monkeypatch.syspath_prepend(str(tmp_path))

    snapshot = RawSourceLoader(PackageResourceSource("bundled_settings")).load()
    assert dict(snapshot) == {"application_name": "bundled"}
    assert snapshot.location == "package:bundled_settings/hotconf.properties"
    assert snapshot.source == ConfigSource.PACKAGE_RESOURCE


def test_missing_package_resource(logged_errors):
    snapshot = RawSourceLoader(PackageResourceSource("no_such_package_anywhere")).load()
    assert snapshot.failed is True
    assert not logged_errors()


def test_http_source():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/v1/config/hotconf.properties"
        return httpx.Response(200, text="server_url=http://collector:8080\n")

    source = HttpSource(
        "http://config_manager:8000/api/v1/config/hotconf.properties",
        transport=httpx.MockTransport(handler),
    )
    snapshot = RawSourceLoader(source).load()
    assert dict(snapshot) == {"server_url": "http://collector:8080"}
    assert snapshot.source == ConfigSource.HTTP


def test_http_source_yaml_content_type():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, text="remote_port: 2004\n", headers={"content-type": "application/yaml"})
    )
    snapshot = RawSourceLoader(HttpSource("http://config_manager:8000/config", transport=transport)).load()
    assert dict(snapshot) == {"remote_port": "2004"}


@pytest.mark.parametrize("status_code", [404, 500])
def test_http_error_status_gives_empty_snapshot(status_code):
    transport = httpx.MockTransport(lambda request: httpx.Response(status_code))
    snapshot = RawSourceLoader(HttpSource("http://config_manager:8000/config", transport=transport)).load()
    assert snapshot.failed is True
    assert len(snapshot) == 0


def test_http_transport_error_gives_empty_snapshot(logged_errors):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    snapshot = RawSourceLoader(HttpSource("http://config_manager:8000/config", transport=httpx.MockTransport(handler))).load()
    assert snapshot.failed is True
    assert logged_errors()


def test_unexpected_source_error_is_contained(logged_errors):
    class BrokenSource(MappingSource):
        def read(self):
            raise RuntimeError("boom")

    snapshot = RawSourceLoader(BrokenSource({})).load()
    assert snapshot.failed is True
    assert any("boom" in message for message in logged_errors())


def test_mapping_source_stringifies_values():
    snapshot = RawSourceLoader(MappingSource({"port": 2003, "enabled": True})).load()
    assert dict(snapshot) == {"port": "2003", "enabled": "True"}


@pytest.mark.parametrize("location,source_type", [
    ("http://config_manager:8000/hotconf.properties", HttpSource),
    ("https://config.example.com/hotconf.yaml", HttpSource),
    ("package:my_app.settings/monitoring.properties", PackageResourceSource),
    ("/etc/hotconf/hotconf.properties", FileSource),
    ("hotconf.properties", FileSource),
])
def test_source_for(location, source_type):
    assert isinstance(source_for(location), source_type)


def test_source_for_package_default_resource():
    source = source_for("package:my_app")
    assert source.package == "my_app"
    assert source.name == "hotconf.properties"


def test_yaml_dates_are_kept_as_iso_strings(write_config):
    """Test that date-like YAML scalars do not invalidate the whole document."""
    config_path = write_config(
        "released: 2024-01-01\n"
        "maintenance_windows:\n"
        "  - 2024-02-01\n"
        "  - 2024-03-01\n"
        "reporting.remote.port: 2004\n",
        filename="hotconf.yaml",
    )
    snapshot = RawSourceLoader(FileSource(config_path)).load()
    assert snapshot.failed is False
    assert dict(snapshot) == {
        "released": "2024-01-01",
        "maintenance_windows": "2024-02-01, 2024-03-01",
        "reporting.remote.port": "2004",
    }
