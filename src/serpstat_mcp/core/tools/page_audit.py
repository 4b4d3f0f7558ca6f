"""One-page audit tools (``AuditOnePage``)."""

from __future__ import annotations

from typing import Any

from .base import Tool, Toolkit
from .constants import DEFAULT_AUDIT_LIMIT, MIN_AUDIT_OFFSET, MIN_PAGE_ID, SITE_AUDIT_USER_AGENT_IDS


def _page_id(description: str) -> dict[str, Any]:
    return {"type": "integer", "minimum": MIN_PAGE_ID, "description": description}


def _scan_metrics(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        return {}
    return {"pageId": result.get("pageId"), "reportId": result.get("reportId")}


def page_audit_toolkit() -> Toolkit:
    start_scan = Tool(
        name="page_audit_start_scan",
        description=(
            "Scan a single webpage with JavaScript rendering. Returns pageId and reportId for tracking. "
            "Use page_audit_get_reports_for_page to check progress and wait for progress=100 before "
            "retrieving results with page_audit_get_results_report. API COST: 10 credits per scan."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "name": {"type": "string", "minLength": 1, "description": "Name of the audit project"},
                "url": {"type": "string", "format": "uri", "description": "Page URL to scan"},
                "userAgent": {
                    "type": "integer",
                    "enum": list(SITE_AUDIT_USER_AGENT_IDS),
                    "description": "User agent ID (0=Chrome, 1=Serpstat, 2=Google, 3=Yandex, 4=Firefox, 5=IE)",
                },
                "httpAuthLogin": {
                    "type": "string",
                    "description": "Login for Basic HTTP authentication (optional)",
                },
                "httpAuthPass": {
                    "type": "string",
                    "description": "Password for Basic HTTP authentication (optional)",
                },
            },
            "required": ["name", "url", "userAgent"],
            "additionalProperties": False,
        },
        method="AuditOnePage.scan",
        log_metrics=_scan_metrics,
        request_prefix="start_one_page_audit_scan",
    )

    last_scans = Tool(
        name="page_audit_get_last_scans",
        description=(
            "Get list of all one-page audit projects with pageId, url, name, status, the latest report "
            "(SDO score and issue counts) and settings. Use this as a starting point to find the pageId "
            "for other operations. Does not consume API credits."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "limit": {
                    "type": "integer",
                    "minimum": 1,
                    "default": DEFAULT_AUDIT_LIMIT,
                    "description": "Number of items to return",
                },
                "offset": {
                    "type": "integer",
                    "minimum": MIN_AUDIT_OFFSET,
                    "default": MIN_AUDIT_OFFSET,
                    "description": "Offset for pagination",
                },
                "teamMemberId": {"type": "integer", "description": "Filter by team member ID (optional)"},
            },
            "additionalProperties": False,
        },
        method="AuditOnePage.getPagesList",
        request_prefix="get_one_page_audits_list",
    )

    reports_for_page = Tool(
        name="page_audit_get_reports_for_page",
        description=(
            "Get history of all audit reports for a specific page: reportId, auditDate, status, SDO "
            "score, error counts by priority and scan progress (0-100). Does not consume API credits."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "pageId": _page_id("Page ID to get reports for"),
                "limit": {"type": "integer", "minimum": 1, "description": "Number of reports to return (optional)"},
                "offset": {
                    "type": "integer",
                    "minimum": MIN_AUDIT_OFFSET,
                    "description": "Offset for pagination (optional)",
                },
            },
            "required": ["pageId"],
            "additionalProperties": False,
        },
        method="AuditOnePage.getReportsListByPage",
        request_prefix="get_one_page_reports_list",
    )

    results_report = Tool(
        name="page_audit_get_results_report",
        description=(
            "Get detailed audit results for a page: errors grouped by category with priority and "
            "countAll/countNew/countFixed, page details and the report summary. Does not consume API "
            "credits."
        ),
        input_schema={
            "type": "object",
            "properties": {"pageId": _page_id("Page ID to get audit results for")},
            "required": ["pageId"],
            "additionalProperties": False,
        },
        method="AuditOnePage.getPageAudit",
        request_prefix="get_one_page_audit_results",
    )

    return Toolkit(
        name="serpstat.page_audit",
        version="1.0.0",
        description="Single-page audits with JavaScript rendering.",
        tools=[start_scan, last_scans, reports_for_page, results_report],
    )


__all__ = ["page_audit_toolkit"]
