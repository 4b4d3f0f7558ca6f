"""Logging setup and redaction helpers."""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from typing import Any, Literal, TextIO

LogLevel = Literal["error", "warn", "info", "debug"]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LEVELS: dict[str, int] = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}
SENSITIVE_KEYS: frozenset[str] = frozenset(
    {"httpauthpass", "httpauthlogin", "password", "token", "api_token", "apitoken"}
)

_HANDLER_MARKER = "_serpstat_mcp_handler"


def _mask(token: str) -> str:
    if len(token) <= 8:
        return "••••"
    return f"{token[:4]}…{token[-4:]}"


def redact_arguments(arguments: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``arguments`` with credential-like values masked."""

    redacted: dict[str, Any] = {}
    for key, value in arguments.items():
        if key.lower() in SENSITIVE_KEYS and value is not None:
            redacted[key] = _mask(str(value))
        elif isinstance(value, Mapping):
            redacted[key] = redact_arguments(value)
        else:
            redacted[key] = value
    return redacted


def configure_logging(level: str = "error", *, stream: TextIO | None = None) -> None:
    """Route package logs to stderr; stdout carries the MCP stream."""

    root_logger = logging.getLogger()
    root_logger.setLevel(LEVELS.get(level.lower(), logging.ERROR))
    for existing in list(root_logger.handlers):
        if getattr(existing, _HANDLER_MARKER, False):
            root_logger.removeHandler(existing)
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    setattr(handler, _HANDLER_MARKER, True)
    root_logger.addHandler(handler)


__all__ = ["LEVELS", "LOG_FORMAT", "LogLevel", "SENSITIVE_KEYS", "configure_logging", "redact_arguments"]
