"""Unit tests for environment-driven settings."""

from pathlib import Path

import pytest

from orderedit.domain.exceptions import ValidationError
from orderedit.infrastructure.config import Settings


def test_defaults():
    settings = Settings.from_env({})
    assert settings.backend == "json"
    assert settings.timezone == "Pacific/Guam"
    assert settings.http_timeout == 30.0
    assert settings.log_level == "INFO"
    assert settings.data_dir.name == "data"


def test_http_backend():
    settings = Settings.from_env({
        "ORDEREDIT_BACKEND": "HTTP",
        "ORDEREDIT_API_BASE_URL": "https://api.example.com/",
        "ORDEREDIT_API_TOKEN": "secret",
        "ORDEREDIT_RESTAURANT_ID": "1",
        "ORDEREDIT_HTTP_TIMEOUT": "5",
        "ORDEREDIT_LOG_LEVEL": "debug",
        "ORDEREDIT_DATA_DIR": "/tmp/orders",
    })
    assert settings.backend == "http"
    assert settings.api_base_url == "https://api.example.com"
    assert settings.api_token == "secret"
    assert settings.restaurant_id == "1"
    assert settings.http_timeout == 5.0
    assert settings.log_level == "DEBUG"
    assert settings.data_dir == Path("/tmp/orders")


def test_http_backend_requires_base_url():
    with pytest.raises(ValidationError, match="ORDEREDIT_API_BASE_URL"):
        Settings.from_env({"ORDEREDIT_BACKEND": "http"})


def test_unknown_backend():
    with pytest.raises(ValidationError, match="must be one of"):
        Settings.from_env({"ORDEREDIT_BACKEND": "sqlite"})


def test_invalid_timeout():
    with pytest.raises(ValidationError, match="ORDEREDIT_HTTP_TIMEOUT"):
        Settings.from_env({"ORDEREDIT_HTTP_TIMEOUT": "soon"})
