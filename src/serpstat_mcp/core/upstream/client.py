"""Concrete Serpstat client implementation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from ..errors import TransportError
from .transport import (
    TRANSIENT_EXCEPTIONS,
    PermanentResponseError,
    TransientResponseError,
    build_endpoint,
    build_headers,
    build_query,
    check_status,
    parse_envelope,
)
from .types import OutboundRequest, RetryPolicy, RetryState, UpstreamResult, UpstreamSettings

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class SerpstatClient:
    """Async RPC-over-HTTP client with per-attempt deadlines and bounded retries."""

    def __init__(
        self,
        settings: UpstreamSettings,
        *,
        client: httpx.AsyncClient | None = None,
        sleep: SleepFn | None = None,
    ) -> None:
        self._settings = settings
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=settings.retry.timeout_seconds)
        self._sleep = sleep or self._interruptible_sleep
        self._shutdown = asyncio.Event()

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._settings.retry

    @property
    def closed(self) -> bool:
        return self._shutdown.is_set()

    async def execute(self, request: OutboundRequest, policy: RetryPolicy | None = None) -> UpstreamResult[Any]:
        """Send ``request`` and return the parsed envelope.

        Transient failures (network errors, attempt timeouts, 5xx) are retried
        up to ``policy.max_retries`` more times with exponential backoff;
        permanent failures (4xx, undecodable bodies) surface after one attempt.
        """

        policy = policy or self._settings.retry
        url = build_endpoint(self._settings)
        headers = build_headers(self._settings)
        query = build_query(self._settings)
        payload = request.as_payload()
        state = RetryState()

        while state.attempts <= policy.max_retries:
            if self.closed:
                raise TransportError("Serpstat client is shutting down", attempts=state.attempts)
            state.attempts += 1
            logger.debug(
                "Serpstat request %s (%s) attempt %d/%d",
                request.id,
                request.method,
                state.attempts,
                policy.max_retries + 1,
            )
            try:
                response = await asyncio.wait_for(
                    self._client.post(url, params=query, headers=headers, json=payload),
                    timeout=policy.timeout_seconds,
                )
                check_status(response)
                return parse_envelope(request, response, state.attempts)
            except PermanentResponseError as exc:
                logger.error("Serpstat request %s failed permanently: %s", request.id, exc)
                raise TransportError(str(exc), attempts=state.attempts, status_code=exc.status_code) from exc
            except TransientResponseError as exc:
                state.last_error = exc
            except TRANSIENT_EXCEPTIONS as exc:
                state.last_error = exc
            except httpx.HTTPError as exc:
                logger.error("Serpstat request %s failed: %s", request.id, exc)
                raise TransportError(f"Serpstat API request failed: {exc}", attempts=state.attempts) from exc

            if state.attempts > policy.max_retries:
                break
            delay = policy.delay_for(state.attempts)
            if policy.max_elapsed_seconds is not None and state.elapsed + delay > policy.max_elapsed_seconds:
                logger.warning("Serpstat request %s exceeded its retry time budget", request.id)
                break
            logger.warning(
                "Serpstat request failed (%s); retrying in %.1fs (%d retries left)",
                _describe(state.last_error),
                delay,
                policy.max_retries - state.attempts + 1,
            )
            await self._sleep(delay)

        raise TransportError(
            f"Serpstat API request failed: {_describe(state.last_error)}",
            attempts=state.attempts,
            status_code=getattr(state.last_error, "status_code", None),
        ) from state.last_error

    async def aclose(self) -> None:
        """Stop new attempts, wake pending backoffs and dispose an owned HTTP client."""

        self._shutdown.set()
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> SerpstatClient:
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.aclose()

    async def _interruptible_sleep(self, delay: float) -> None:
        try:
            await asyncio.wait_for(self._shutdown.wait(), timeout=delay)
        except asyncio.TimeoutError:
            pass


def _describe(error: BaseException | None) -> str:
    if error is None:
        return "unknown error"
    if isinstance(error, (TransientResponseError, PermanentResponseError)):
        return str(error)
    text = str(error)
    name = type(error).__name__
    if isinstance(error, asyncio.TimeoutError) and not text:
        return "request timed out"
    return f"{name}: {text}" if text else name


__all__ = ["SerpstatClient"]
