"""Environment-driven configuration for the Serpstat MCP server."""

from __future__ import annotations

import os
from collections.abc import Mapping
from urllib.parse import urlparse

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError
from .logs import LogLevel
from .upstream import RetryPolicy, UpstreamSettings

DEFAULT_API_URL = "https://api.serpstat.com/v4"
DEFAULT_REQUEST_TIMEOUT_MS = 30_000
DEFAULT_MAX_RETRIES = 1

ENV_API_TOKEN = "SERPSTAT_API_TOKEN"
ENV_API_URL = "SERPSTAT_API_URL"
ENV_LOG_LEVEL = "LOG_LEVEL"
ENV_MAX_RETRIES = "MAX_RETRIES"
ENV_REQUEST_TIMEOUT = "REQUEST_TIMEOUT"


class SerpstatConfig(BaseModel):
    """Process configuration loaded once at startup."""

    api_token: str = Field(min_length=1)
    api_url: str = DEFAULT_API_URL
    log_level: LogLevel = "error"
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    request_timeout_ms: int = Field(default=DEFAULT_REQUEST_TIMEOUT_MS, gt=0)
    backoff_base_seconds: float = Field(default=0.5, ge=0)
    backoff_max_seconds: float = Field(default=8.0, ge=0)

    @field_validator("api_url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme not in {"http", "https"} or not parsed.netloc:
            raise ValueError("must be an http(s) URL")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().lower()
            return "warn" if value == "warning" else value
        return value

    def upstream_settings(self) -> UpstreamSettings:
        return UpstreamSettings(
            base_url=self.api_url,
            api_token=self.api_token,
            retry=RetryPolicy(
                timeout_seconds=self.request_timeout_ms / 1000,
                max_retries=self.max_retries,
                backoff_base_seconds=self.backoff_base_seconds,
                backoff_max_seconds=self.backoff_max_seconds,
            ),
        )


def load_config(environ: Mapping[str, str] | None = None) -> SerpstatConfig:
    """Build a ``SerpstatConfig`` from environment variables."""

    env = os.environ if environ is None else environ
    values: dict[str, object] = {"api_token": env.get(ENV_API_TOKEN, "").strip()}
    if env.get(ENV_API_URL):
        values["api_url"] = env[ENV_API_URL].strip()
    if env.get(ENV_LOG_LEVEL):
        values["log_level"] = env[ENV_LOG_LEVEL]
    if env.get(ENV_MAX_RETRIES):
        values["max_retries"] = env[ENV_MAX_RETRIES].strip()
    if env.get(ENV_REQUEST_TIMEOUT):
        values["request_timeout_ms"] = env[ENV_REQUEST_TIMEOUT].strip()

    try:
        return SerpstatConfig.model_validate(values)
    except ValidationError as exc:
        problems = "; ".join(
            f"{_env_name(error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {problems}") from exc


def _env_name(location: tuple[object, ...]) -> str:
    field = str(location[0]) if location else ""
    return {
        "api_token": ENV_API_TOKEN,
        "api_url": ENV_API_URL,
        "log_level": ENV_LOG_LEVEL,
        "max_retries": ENV_MAX_RETRIES,
        "request_timeout_ms": ENV_REQUEST_TIMEOUT,
    }.get(field, field)


__all__ = [
    "DEFAULT_API_URL",
    "SerpstatConfig",
    "load_config",
]
