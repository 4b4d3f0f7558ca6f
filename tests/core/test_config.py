from __future__ import annotations

import pytest

from serpstat_mcp.core.config import DEFAULT_API_URL, SerpstatConfig, load_config
from serpstat_mcp.core.errors import ConfigurationError


def test_defaults_with_only_token() -> None:
    config = load_config({"SERPSTAT_API_TOKEN": "abc123"})

    assert config.api_token == "abc123"
    assert config.api_url == DEFAULT_API_URL
    assert config.log_level == "error"
    assert config.max_retries == 1
    assert config.request_timeout_ms == 30_000


def test_environment_overrides() -> None:
    config = load_config(
        {
            "SERPSTAT_API_TOKEN": " abc123 ",
            "SERPSTAT_API_URL": "https://proxy.example.com/v4",
            "LOG_LEVEL": "DEBUG",
            "MAX_RETRIES": "3",
            "REQUEST_TIMEOUT": "1500",
        }
    )

    assert config.api_token == "abc123"
    assert config.api_url == "https://proxy.example.com/v4"
    assert config.log_level == "debug"
    assert config.max_retries == 3
    assert config.request_timeout_ms == 1500


def test_warning_is_accepted_as_warn() -> None:
    assert load_config({"SERPSTAT_API_TOKEN": "t", "LOG_LEVEL": "warning"}).log_level == "warn"


def test_missing_token_is_rejected() -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        load_config({})

    assert "SERPSTAT_API_TOKEN" in str(exc_info.value)


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("MAX_RETRIES", "-1"),
        ("MAX_RETRIES", "many"),
        ("REQUEST_TIMEOUT", "0"),
        ("LOG_LEVEL", "verbose"),
        ("SERPSTAT_API_URL", "ftp://api.serpstat.com"),
    ],
)
def test_invalid_values_name_the_variable(key: str, value: str) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        load_config({"SERPSTAT_API_TOKEN": "t", key: value})

    assert str(exc_info.value).startswith("Invalid configuration: ")
    assert key in str(exc_info.value)


def test_upstream_settings_convert_timeout_to_seconds() -> None:
    config = SerpstatConfig(api_token="t", request_timeout_ms=2500, max_retries=4)

    settings = config.upstream_settings()

    assert settings.api_token == "t"
    assert settings.base_url == DEFAULT_API_URL
    assert settings.retry.timeout_seconds == 2.5
    assert settings.retry.max_retries == 4
