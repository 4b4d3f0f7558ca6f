"""Credit and quota lookups. These calls do not consume API credits."""

from __future__ import annotations

from typing import Any

from .base import Tool, Toolkit

_NO_ARGUMENTS: dict[str, Any] = {"type": "object", "properties": {}, "additionalProperties": False}

_STATS_RESULT = {
    "type": "object",
    "properties": {"data": {"type": "object"}},
    "required": ["data"],
}


def _credits_metrics(result: Any) -> dict[str, Any]:
    data = result.get("data", {}) if isinstance(result, dict) else {}
    return {key: data.get(key) for key in ("max_lines", "used_lines", "left_lines")}


def _audit_metrics(result: Any) -> dict[str, Any]:
    data = result.get("data", {}) if isinstance(result, dict) else {}
    return {key: data.get(key) for key in ("total", "used", "left")}


def credits_toolkit() -> Toolkit:
    credits_stats = Tool(
        name="get_credits_stats",
        description=(
            "Check available API credits, usage statistics, account information, and browser plugin "
            "limits. Perfect for monitoring API usage and planning resource-heavy operations. "
            "This method does not consume API credits."
        ),
        input_schema=dict(_NO_ARGUMENTS),
        method="SerpstatLimitsProcedure.getStats",
        output_schema=_STATS_RESULT,
        log_metrics=_credits_metrics,
        request_prefix="credits_stats",
    )
    audit_stats = Tool(
        name="get_credits_for_audit_stats",
        description=(
            "Check available audit credits including one-page audit, JavaScript scanning, and page "
            "crawl limits. Use this before running site audits to verify available resources. "
            "This method does not consume API credits."
        ),
        input_schema=dict(_NO_ARGUMENTS),
        method="SerpstatLimitsProcedure.getAuditStats",
        output_schema=_STATS_RESULT,
        log_metrics=_audit_metrics,
        request_prefix="audit_stats",
    )
    return Toolkit(
        name="serpstat.credits",
        version="1.0.0",
        description="API and audit credit accounting.",
        tools=[credits_stats, audit_stats],
    )


__all__ = ["credits_toolkit"]
