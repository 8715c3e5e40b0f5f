import pytest
from pathlib import Path

from shared.common_utils.logger import logger


@pytest.fixture
def write_config(tmp_path):
    """Write a configuration file into a temporary directory and return its path."""
    def _write(content: str, filename: str = "hotconf.properties") -> Path:
        config_path = tmp_path / filename
        config_path.write_text(content, encoding="utf-8")
        return config_path
    return _write


@pytest.fixture
def log_records(caplog):
    """Capture records of the shared logger, which does not propagate to root."""
    logger.addHandler(caplog.handler)
    yield caplog
    logger.removeHandler(caplog.handler)


@pytest.fixture
def logged_errors(log_records):
    def _errors() -> list:
        return [record.getMessage() for record in log_records.records if record.levelname == "ERROR"]
    return _errors
