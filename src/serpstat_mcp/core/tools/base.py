"""Shared types for tool contracts.

A ``Tool`` is a declarative record: an argument schema, the upstream method
it calls, an optional mapping from validated arguments to request params
and an expected result shape. ``Tool.call`` runs the contract end to end
against a ``SerpstatClient``; no per-tool subclasses are needed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..errors import UpstreamAPIError, UpstreamDataError
from ..logs import redact_arguments
from ..upstream import OutboundRequest, SerpstatClient, UpstreamResult
from ..validation import ValidatedArguments, check_value, validate_arguments

logger = logging.getLogger(__name__)

ParamsBuilder = Callable[[ValidatedArguments], dict[str, Any]]
ResultMapper = Callable[[Any], Any]
MetricsSelector = Callable[[Any], dict[str, Any]]


@dataclass(slots=True)
class Tool:
    """Contract binding one argument schema to one upstream method."""

    name: str
    description: str
    input_schema: dict[str, Any]
    method: str
    output_schema: dict[str, Any] = field(default_factory=dict)
    build_params: ParamsBuilder | None = None
    unwrap: ResultMapper | None = None
    log_metrics: MetricsSelector | None = None
    request_prefix: str | None = None
    result_optional: bool = False

    def validate(self, arguments: dict[str, Any] | None) -> ValidatedArguments:
        return validate_arguments(self.input_schema, arguments)

    def build_request(self, arguments: ValidatedArguments) -> OutboundRequest:
        params = self.build_params(arguments) if self.build_params else arguments.as_params()
        return OutboundRequest.build(self.request_prefix or self.name, self.method, params)

    def check_result(self, upstream: UpstreamResult[Any]) -> Any:
        """Return the typed payload or raise if the envelope carries none."""

        if upstream.is_error:
            error = upstream.error or {}
            raise UpstreamAPIError(str(error.get("message", "Unknown error")), error.get("code"))
        if not upstream.has_result:
            if not self.result_optional:
                raise UpstreamDataError()
            return self.unwrap(None) if self.unwrap else None
        result = upstream.result
        if self.output_schema:
            problems = check_value(self.output_schema, result)
            if problems:
                detail = ", ".join(str(item) for item in problems[:5])
                raise UpstreamDataError(f"Malformed result data received from Serpstat API: {detail}")
        return self.unwrap(result) if self.unwrap else result

    async def call(self, arguments: ValidatedArguments, client: SerpstatClient) -> Any:
        logger.info("Calling %s (%s) with %s", self.name, self.method, summarize_arguments(arguments))
        request = self.build_request(arguments)
        upstream = await client.execute(request)
        result = self.check_result(upstream)
        metrics = (self.log_metrics or summarize_result)(upstream.result if upstream.has_result else None)
        logger.info("Successfully completed %s: %s", self.name, metrics)
        return result


@dataclass(slots=True)
class Toolkit:
    """Groups related tools together."""

    name: str
    version: str
    description: str
    tools: list[Tool]


def summarize_arguments(arguments: ValidatedArguments) -> dict[str, Any]:
    """Scalars as-is, containers by size; credentials masked."""

    summary: dict[str, Any] = {}
    for key, value in redact_arguments(arguments.values).items():
        if isinstance(value, (list, tuple)):
            summary[key] = f"[{len(value)} items]"
        elif isinstance(value, dict):
            summary[key] = f"{{{len(value)} keys}}"
        else:
            summary[key] = value
    return summary


def summarize_result(result: Any) -> dict[str, Any]:
    """Pick row counts and quota fields out of a typical Serpstat payload."""

    if isinstance(result, list):
        return {"items": len(result)}
    if not isinstance(result, dict):
        return {"result": result}
    metrics: dict[str, Any] = {}
    data = result.get("data")
    if isinstance(data, list):
        metrics["rows"] = len(data)
    summary = result.get("summary_info")
    if isinstance(summary, dict):
        for key in ("left_lines", "total", "page"):
            if key in summary:
                metrics[key] = summary[key]
    return metrics


def paged_result_schema(data_type: str = "array") -> dict[str, Any]:
    """Result shape shared by the ``{data, summary_info}`` style procedures."""

    return {
        "type": "object",
        "properties": {
            "data": {"type": data_type},
            "summary_info": {"type": "object"},
        },
        "required": ["data"],
    }


__all__ = [
    "Tool",
    "Toolkit",
    "paged_result_schema",
    "summarize_arguments",
    "summarize_result",
]
