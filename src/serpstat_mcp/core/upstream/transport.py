"""HTTP transport helpers for the Serpstat client."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx

from .types import OutboundRequest, UpstreamResult, UpstreamSettings

logger = logging.getLogger(__name__)

TRANSIENT_EXCEPTIONS: tuple[type[BaseException], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
    asyncio.TimeoutError,
)


class PermanentResponseError(Exception):
    """The upstream answered, but with something no retry can fix."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransientResponseError(Exception):
    """The upstream answered with a server-side failure worth retrying."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


def build_endpoint(settings: UpstreamSettings) -> str:
    return settings.base_url.rstrip("/")


def build_headers(settings: UpstreamSettings) -> dict[str, str]:
    headers = {"Content-Type": "application/json", "Accept": "application/json"}
    if settings.api_token:
        headers["Authorization"] = f"Bearer {settings.api_token}"
    return headers


def build_query(settings: UpstreamSettings) -> dict[str, str]:
    return {"token": settings.api_token} if settings.api_token else {}


def is_transient_status(status_code: int) -> bool:
    return status_code >= 500


def check_status(response: httpx.Response) -> None:
    """Raise a classified error for any non-2xx response."""

    if response.is_success:
        return
    detail = _error_detail(response)
    message = f"Serpstat API request failed with status {response.status_code}: {detail}"
    if is_transient_status(response.status_code):
        raise TransientResponseError(message, response.status_code)
    raise PermanentResponseError(message, response.status_code)


def parse_envelope(request: OutboundRequest, response: httpx.Response, attempts: int) -> UpstreamResult[Any]:
    """Decode the upstream body into an ``UpstreamResult`` without judging it."""

    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise PermanentResponseError(
            "Invalid JSON in Serpstat API response", response.status_code
        ) from exc
    if not isinstance(body, dict):
        raise PermanentResponseError(
            f"Unexpected Serpstat API response of type {type(body).__name__}", response.status_code
        )

    error = body.get("error")
    if error is not None and not isinstance(error, dict):
        error = {"message": str(error)}

    logger.debug("Serpstat response for %s (%s): %s", request.id, request.method, body)
    if "result" in body:
        return UpstreamResult(request_id=request.id, result=body["result"], error=error, attempts=attempts)
    return UpstreamResult(request_id=request.id, error=error, attempts=attempts)


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        text = response.text.strip()
        return text[:200] if text else response.reason_phrase
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if error:
            return str(error)
    return response.reason_phrase


__all__ = [
    "PermanentResponseError",
    "TRANSIENT_EXCEPTIONS",
    "TransientResponseError",
    "build_endpoint",
    "build_headers",
    "build_query",
    "check_status",
    "is_transient_status",
    "parse_envelope",
]
