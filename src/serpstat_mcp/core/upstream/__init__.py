"""Upstream Serpstat transport package.

This namespace hosts the async `SerpstatClient` together with its shared
types (`types.py`) and HTTP helpers (`transport.py`). Importing from here
keeps the public surface stable for tool contracts and tests.
"""

from .client import SerpstatClient
from .types import OutboundRequest, RetryPolicy, RetryState, UpstreamResult, UpstreamSettings, new_correlation_id

__all__ = [
    "OutboundRequest",
    "RetryPolicy",
    "RetryState",
    "SerpstatClient",
    "UpstreamResult",
    "UpstreamSettings",
    "new_correlation_id",
]
