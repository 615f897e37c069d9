"""
Unit tests for configuration settings
"""

import pytest

from lambda_runtime_client.config.settings import get_settings
from lambda_runtime_client.utils.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove runtime variables that may leak in from the host environment."""
    for name in (
        "AWS_LAMBDA_RUNTIME_API",
        "_HANDLER",
        "MAX_RETRY_COUNT",
        "RETRY_SCOPE",
        "AWS_LAMBDA_FUNCTION_NAME",
        "AWS_LAMBDA_FUNCTION_MEMORY_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_settings_defaults(monkeypatch):
    """Test settings with only the runtime API address set."""
    monkeypatch.setenv("AWS_LAMBDA_RUNTIME_API", "127.0.0.1:9001")

    settings = get_settings()

    assert settings.runtime_api == "127.0.0.1:9001"
    assert settings.handler is None
    assert settings.max_retry_count == 3
    assert settings.retry_scope == "invocation"


def test_settings_from_environment(monkeypatch):
    """Test settings are read from the Lambda environment variables."""
    monkeypatch.setenv("AWS_LAMBDA_RUNTIME_API", "127.0.0.1:9001")
    monkeypatch.setenv("_HANDLER", "handler.greet")
    monkeypatch.setenv("MAX_RETRY_COUNT", "5")
    monkeypatch.setenv("RETRY_SCOPE", "process")
    monkeypatch.setenv("AWS_LAMBDA_FUNCTION_NAME", "greet")
    monkeypatch.setenv("AWS_LAMBDA_FUNCTION_MEMORY_SIZE", "256")

    settings = get_settings()

    assert settings.handler == "handler.greet"
    assert settings.max_retry_count == 5
    assert settings.retry_scope == "process"
    assert settings.function_name == "greet"
    assert settings.memory_limit_in_mb == 256


def test_missing_runtime_api_is_configuration_error():
    """Test the runtime API address is required."""
    with pytest.raises(ConfigurationError) as exc_info:
        get_settings()

    assert "AWS_LAMBDA_RUNTIME_API" in exc_info.value.message


def test_invalid_retry_scope_is_configuration_error(monkeypatch):
    """Test unknown retry scopes are rejected."""
    monkeypatch.setenv("AWS_LAMBDA_RUNTIME_API", "127.0.0.1:9001")
    monkeypatch.setenv("RETRY_SCOPE", "forever")

    with pytest.raises(ConfigurationError):
        get_settings()
