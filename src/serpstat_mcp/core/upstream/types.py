"""Shared upstream transport types."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")

_MISSING: Any = object()


@dataclass(slots=True)
class RetryPolicy:
    """Deadline and retry configuration for one upstream call."""

    timeout_seconds: float = 30.0
    max_retries: int = 1
    backoff_base_seconds: float = 0.5
    backoff_max_seconds: float = 8.0
    max_elapsed_seconds: float | None = None

    def delay_for(self, attempt: int) -> float:
        """Backoff before the attempt following ``attempt`` (1-based)."""
        return min(self.backoff_max_seconds, self.backoff_base_seconds * 2 ** (attempt - 1))


@dataclass(slots=True)
class UpstreamSettings:
    """Runtime configuration for the Serpstat client."""

    base_url: str
    api_token: str
    retry: RetryPolicy = field(default_factory=RetryPolicy)


@dataclass(frozen=True, slots=True)
class OutboundRequest:
    """One RPC-style request: ``{id, method, params}``."""

    id: str
    method: str
    params: dict[str, Any]

    @classmethod
    def build(cls, prefix: str, method: str, params: dict[str, Any]) -> OutboundRequest:
        return cls(id=new_correlation_id(prefix), method=method, params=params)

    def as_payload(self) -> dict[str, Any]:
        return {"id": self.id, "method": self.method, "params": self.params}


@dataclass(frozen=True, slots=True)
class UpstreamResult(Generic[T]):
    """Deserialized upstream envelope, uninterpreted."""

    request_id: str
    result: T | Any = _MISSING
    error: dict[str, Any] | None = None
    attempts: int = 1

    @property
    def has_result(self) -> bool:
        # null and an absent key both mean "no result data"; falsy values do not.
        return self.result is not _MISSING and self.result is not None

    @property
    def is_error(self) -> bool:
        return self.error is not None


@dataclass(slots=True)
class RetryState:
    """Transient bookkeeping for a single ``SerpstatClient.execute`` call."""

    attempts: int = 0
    started_at: float = field(default_factory=time.monotonic)
    last_error: Exception | None = None

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at


def new_correlation_id(prefix: str) -> str:
    return f"{prefix}_{time.time_ns() // 1_000_000}_{uuid.uuid4().hex[:8]}"


__all__ = [
    "OutboundRequest",
    "RetryPolicy",
    "RetryState",
    "UpstreamResult",
    "UpstreamSettings",
    "new_correlation_id",
]
