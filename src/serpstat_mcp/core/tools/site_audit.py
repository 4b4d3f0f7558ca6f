"""Site audit tools (``AuditSite``). Only ``start_site_audit`` consumes credits."""

from __future__ import annotations

from typing import Any

from .base import Tool, Toolkit
from .constants import (
    DEFAULT_AUDIT_LIMIT,
    DEFAULT_ERROR_ELEMENTS_LIMIT,
    MAX_DOMAIN_LENGTH,
    MAX_SCAN_SPEED,
    MIN_AUDIT_OFFSET,
    MIN_DOMAIN_LENGTH,
    MIN_ERROR_THRESHOLD,
    MIN_FOLDER_DEPTH,
    MIN_PAGES_LIMIT,
    MIN_PROJECT_ID,
    MIN_REPORT_ID,
    MIN_SCAN_DURATION,
    MIN_SCAN_SPEED,
    MIN_URL_DEPTH,
    SITE_AUDIT_ERROR_DISPLAY_MODES,
    SITE_AUDIT_INTERVAL_IDS,
    SITE_AUDIT_SCAN_TYPES,
    SITE_AUDIT_SCHEDULE_REPEAT_IDS,
    SITE_AUDIT_USER_AGENT_IDS,
)

# Error keys come from a fixed server-side catalogue (``no_desc``, ``h1_missing`` ...).
ERROR_NAME_PATTERN = r"^[a-z][a-z0-9_]*$"


_ID_MINIMUMS = {"projectId": MIN_PROJECT_ID, "reportId": MIN_REPORT_ID, "compareReportId": MIN_REPORT_ID}


def _id_field(name: str, description: str) -> dict[str, Any]:
    minimum = _ID_MINIMUMS[name]
    return {"type": "integer", "minimum": minimum, "description": description}


def _single_id_schema(name: str, description: str) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {name: _id_field(name, description)},
        "required": [name],
        "additionalProperties": False,
    }


def _paging_fields(description: str) -> dict[str, Any]:
    return {
        "limit": {
            "type": "integer",
            "minimum": 1,
            "default": DEFAULT_AUDIT_LIMIT,
            "description": description,
        },
        "offset": {
            "type": "integer",
            "minimum": MIN_AUDIT_OFFSET,
            "default": MIN_AUDIT_OFFSET,
            "description": "Offset for pagination",
        },
    }


def _error_name_field(description: str) -> dict[str, Any]:
    return {"type": "string", "minLength": 1, "pattern": ERROR_NAME_PATTERN, "description": description}


def _strict_object(properties: dict[str, Any], required: list[str], description: str) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": properties,
        "required": required,
        "additionalProperties": False,
        "description": description,
    }


def _keywords_block(description: str, verb: str) -> dict[str, Any]:
    return _strict_object(
        {
            "checked": {"type": "boolean", "description": f"Apply {verb} rule"},
            "keywords": {"type": "string", "description": f"Keywords to {verb} (comma-separated)"},
        },
        ["checked", "keywords"],
        description,
    )


def _flag(description: str) -> dict[str, Any]:
    return {"type": "boolean", "description": description}


def _at_least(minimum: int, description: str) -> dict[str, Any]:
    return {"type": "integer", "minimum": minimum, "description": description}


def _settings_schema() -> dict[str, Any]:
    main_settings = {
        "domain": {
            "type": "string",
            "minLength": MIN_DOMAIN_LENGTH,
            "maxLength": MAX_DOMAIN_LENGTH,
            "description": "Project domain",
        },
        "name": {"type": "string", "minLength": MIN_DOMAIN_LENGTH, "description": "Project name"},
        "subdomainsCheck": _flag("Check domain with subdomains"),
        "pagesLimit": _at_least(MIN_PAGES_LIMIT, "Scan pages limit"),
        "scanSpeed": {
            "type": "integer",
            "minimum": MIN_SCAN_SPEED,
            "maximum": MAX_SCAN_SPEED,
            "description": "Scan speed (1-30, every increment of 3 adds one thread)",
        },
        "autoSpeed": _flag("Auto speed control"),
        "scanNoIndex": _flag("Scan NoIndex pages"),
        "autoUserAgent": _flag("Automatic change of user agent"),
        "scanWrongCanonical": _flag("Scan wrong Canonical pages"),
        "scanDuration": _at_least(MIN_SCAN_DURATION, "Scan duration in hours"),
        "folderDepth": _at_least(MIN_FOLDER_DEPTH, "Maximum folders in URL path"),
        "urlDepth": _at_least(MIN_URL_DEPTH, "Maximum clicks from main page"),
        "userAgent": {
            "type": "integer",
            "enum": list(SITE_AUDIT_USER_AGENT_IDS),
            "description": "User agent ID (0=Chrome, 1=Serpstat, 2=Google, 3=Yandex, 4=Firefox, 5=IE)",
        },
        "robotsTxt": _flag("Verify robots.txt compliance"),
        "withImages": _flag("Scan images"),
    }
    thresholds = {
        "tiny_title": "Min title length",
        "long_title": "Max title length",
        "tiny_desc": "Min description length",
        "long_desc": "Max description length",
        "long_url": "Max URL length",
        "large_image_size": "Max image size (KB)",
        "large_page_size": "Max page size (MB)",
        "many_external_links": "Max external links",
    }
    repeat_hint = "0=manual, 1=daily, 2=every 3 days, 3=weekly, 4=every 2 weeks, 5=monthly"
    return {
        "type": "object",
        "properties": {
            "projectId": _id_field("projectId", "Project ID to update settings for"),
            "mainSettings": _strict_object(main_settings, list(main_settings), "Main crawl settings"),
            "dontScanKeywordsBlock": _keywords_block("Exclude pages with these keywords in URL", "exclude"),
            "onlyScanKeywordsBlock": _keywords_block("Only scan pages with these keywords in URL", "include"),
            "baseAuthBlock": _strict_object(
                {
                    "login": {"type": "string", "description": "HTTP Basic auth login"},
                    "password": {"type": "string", "description": "HTTP Basic auth password"},
                },
                ["login", "password"],
                "HTTP Basic authentication credentials",
            ),
            "mailTriggerSettings": _strict_object(
                {
                    "emails": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Email addresses for notifications",
                    },
                    "interval": {
                        "type": "integer",
                        "enum": list(SITE_AUDIT_INTERVAL_IDS),
                        "description": f"Notification interval ({repeat_hint})",
                    },
                    "enabled": _flag("Enable email notifications"),
                },
                ["emails", "interval", "enabled"],
                "Email notification settings",
            ),
            "scheduleSettings": _strict_object(
                {
                    "scheduleRepeatOption": {
                        "type": "integer",
                        "enum": list(SITE_AUDIT_SCHEDULE_REPEAT_IDS),
                        "description": f"Scan schedule ({repeat_hint})",
                    }
                },
                ["scheduleRepeatOption"],
                "Scan scheduling settings",
            ),
            "scanSetting": _strict_object(
                {
                    "type": {
                        "type": "integer",
                        "enum": list(SITE_AUDIT_SCAN_TYPES),
                        "description": "Scan type (1=all site, 2=URL list, 3=sitemap list)",
                    },
                    "list": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "URLs to scan (for types 2 and 3)",
                    },
                    "importedFilename": {"type": "string", "description": "Imported filename (optional)"},
                },
                ["type", "list"],
                "Scan type and URL list settings",
            ),
            "errorsSettings": _strict_object(
                {name: _at_least(MIN_ERROR_THRESHOLD, text) for name, text in thresholds.items()},
                list(thresholds),
                "Error detection thresholds (optional)",
            ),
        },
        "required": [
            "projectId",
            "mainSettings",
            "dontScanKeywordsBlock",
            "onlyScanKeywordsBlock",
            "baseAuthBlock",
            "mailTriggerSettings",
            "scheduleSettings",
            "scanSetting",
        ],
        "additionalProperties": False,
    }


def _drill_down_schema(*, compare_required: bool, limit_default: int, extra: dict[str, Any]) -> dict[str, Any]:
    required = ["reportId", "projectId", "errorName", *extra]
    if compare_required:
        required.insert(1, "compareReportId")
    return {
        "type": "object",
        "properties": {
            "reportId": _id_field("reportId", "The unique identifier for an audit report"),
            "compareReportId": _id_field(
                "compareReportId",
                "Another audit report ID from the same project to compare against",
            ),
            "projectId": _id_field("projectId", "The unique identifier for an audit site project"),
            "errorName": _error_name_field("Error key to filter by (e.g., image_no_alt, no_desc)"),
            "mode": {
                "type": "string",
                "enum": list(SITE_AUDIT_ERROR_DISPLAY_MODES),
                "default": "all",
                "description": "Error display mode: all (all errors), new (new errors), solved (fixed errors)",
            },
            "limit": {
                "type": "integer",
                "minimum": 1,
                "default": limit_default,
                "description": "Count of returned items in response",
            },
            "offset": {
                "type": "integer",
                "minimum": MIN_AUDIT_OFFSET,
                "default": MIN_AUDIT_OFFSET,
                "description": "Batch number required for pagination",
            },
            **extra,
        },
        "required": required,
        "additionalProperties": False,
    }


def _total_metrics(result: Any) -> dict[str, Any]:
    return {"totalCount": result.get("totalCount") if isinstance(result, dict) else None}


def _stop_metrics(result: Any) -> dict[str, Any]:
    return {"result": result.get("result") if isinstance(result, dict) else result}


def site_audit_toolkit() -> Toolkit:
    tools = [
        Tool(
            name="get_site_audit_settings",
            description=(
                "Get current configuration of an EXISTING audit project: main settings (domain, name, "
                "pagesLimit, scanSpeed, userAgent, robotsTxt ...), scan filters, authentication, email "
                "notifications, scheduling and error thresholds. Compare with "
                "get_site_audit_project_default_settings which returns the template for NEW projects. "
                "Does not consume API credits."
            ),
            input_schema=_single_id_schema("projectId", "Project ID to get settings for"),
            method="AuditSite.getSettings",
            output_schema={"type": "object"},
            request_prefix="get_site_audit_settings",
        ),
        Tool(
            name="set_site_audit_settings",
            description=(
                "Replace the complete configuration of an EXISTING audit project. Every settings block "
                "except errorsSettings is required; read the current values with "
                "get_site_audit_settings first and send them back with your changes. Returns a success "
                "flag. Does not consume API credits."
            ),
            input_schema=_settings_schema(),
            method="AuditSite.setSettings",
            unwrap=lambda result: {"success": True, "result": result},
            result_optional=True,
            request_prefix="set_site_audit_settings",
        ),
        Tool(
            name="start_site_audit",
            description=(
                "Launch audit scan for a project. Returns reportId to track progress; check completion "
                "with get_site_audits_list (progress field). API COST: 1 credit per page without JS "
                "rendering, 10 credits per page with JS rendering. Wait for progress=100 before "
                "analyzing results."
            ),
            input_schema=_single_id_schema("projectId", "Project ID to start audit for"),
            method="AuditSite.start",
            request_prefix="start_site_audit",
        ),
        Tool(
            name="stop_site_audit",
            description=(
                "Stop active audit scan for a project. Partial results may be available. Check "
                "get_site_audits_list to see if audit was stopped (stoped field)."
            ),
            input_schema=_single_id_schema("projectId", "Project ID to stop audit for"),
            method="AuditSite.stop",
            output_schema={"type": "object", "properties": {"result": {"type": "boolean"}}, "required": ["result"]},
            unwrap=lambda result: {"success": result["result"]},
            log_metrics=_stop_metrics,
            request_prefix="stop_site_audit",
        ),
        Tool(
            name="get_site_audit_results_by_categories",
            description=(
                "Get AGGREGATED error statistics by category: highCount, mediumCount, lowCount and "
                "informationCount for each fixed category (pages_status, meta_tags, headings, content, "
                "multimedia, indexation, redirects, links, server_params, https, hreflang, amp, markup, "
                "pagespeed_desktop, pagespeed_mobile). Does not consume API credits. For a per-error "
                "breakdown use get_site_audit_deteailed_report."
            ),
            input_schema=_single_id_schema("reportId", "Audit report ID to get statistics for"),
            method="AuditSite.getCategoriesStatistic",
            request_prefix="get_categories_statistic",
        ),
        Tool(
            name="get_site_audit_history",
            description=(
                "Track how a SPECIFIC error type changed over time across all audits in a project. "
                "Returns reportId, date and count for each audit. The errorName is the error.key "
                "reported by get_site_audit_deteailed_report, e.g. 'no_desc'. Does not consume API "
                "credits."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": _id_field("projectId", "Project ID to get error history for"),
                    "errorName": _error_name_field("Error type name (e.g., h1_missing, no_desc, long_title)"),
                    **_paging_fields("Number of history items to return"),
                },
                "required": ["projectId", "errorName"],
                "additionalProperties": False,
            },
            method="AuditSite.getHistoryByCountError",
            request_prefix="get_history_by_count_error",
        ),
        Tool(
            name="get_site_audits_list",
            description=(
                "STARTING POINT for audit analysis. Returns all audit reports for a project with "
                "reportId, date, SDO score (0-100), pages scanned, issue counts, progress (0-100) and "
                "the hasDetailData flag. Does not consume API credits."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "projectId": _id_field("projectId", "Project ID to get audits list for"),
                    **_paging_fields("Number of audits to return"),
                },
                "required": ["projectId"],
                "additionalProperties": False,
            },
            method="AuditSite.getList",
            request_prefix="get_site_audits_list",
        ),
        Tool(
            name="get_site_audit_scanned_urls_list",
            description=(
                "Get the CONFIGURED URL list for scanning (not actual scan results). Only works when "
                "the project scans a URL list or sitemap list; returns 'Scan url list not found' for "
                "whole-site scans. Does not consume API credits."
            ),
            input_schema=_single_id_schema("projectId", "Project ID to get scanned URLs list for"),
            method="AuditSite.getScanUserUrlList",
            request_prefix="get_scan_user_url_list",
        ),
        Tool(
            name="get_site_audit_project_default_settings",
            description=(
                "Get DEFAULT TEMPLATE settings for creating new projects (not the settings of an "
                "existing project). Returns server-side recommended defaults with empty domain and "
                "name. Does not consume API credits and does not require projectId."
            ),
            input_schema={"type": "object", "properties": {}, "additionalProperties": False},
            method="AuditSite.getDefaultSettings",
            output_schema={"type": "object"},
            request_prefix="get_default_settings",
        ),
        Tool(
            name="get_site_audit_bref_info",
            description=(
                "Get quick summary of a single audit for dashboard display: sdo (0-100 score), error "
                "counts by priority, checkedPageCount, progress, stoped and captchaDetected flags, "
                "redirectCount. Lightweight method, does not consume API credits."
            ),
            input_schema=_single_id_schema("reportId", "The unique identifier for an audit report"),
            method="AuditSite.getBasicInfo",
            request_prefix="get_basic_info",
        ),
        Tool(
            name="get_site_audit_deteailed_report",
            description=(
                "Get COMPLETE error breakdown organized by categories. Each error carries key (e.g. "
                "'no_desc', 'h1_missing'), priority, countAll, countNew and countFixed; the last two are "
                "relative to compareReportId. Use error.key with get_site_audit_history. Does not "
                "consume API credits."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "reportId": _id_field("reportId", "The unique identifier for an audit report"),
                    "compareReportId": _id_field(
                        "compareReportId",
                        "Another audit report ID from the same project to compare against",
                    ),
                },
                "required": ["reportId"],
                "additionalProperties": False,
            },
            method="AuditSite.getReportWithoutDetails",
            request_prefix="get_report_without_details",
        ),
        Tool(
            name="get_site_audit_pages_spec_errors",
            description=(
                "DRILL-DOWN STEP 1: list the pages affected by one error type in a report. Returns "
                "totalCount and data rows with url, crc (needed for "
                "get_site_audit_elements_with_issues) and per-page counts. mode filters all, new or "
                "solved errors relative to compareReportId. Does not consume API credits."
            ),
            input_schema=_drill_down_schema(
                compare_required=True,
                limit_default=DEFAULT_ERROR_ELEMENTS_LIMIT,
                extra={},
            ),
            method="AuditSite.getErrorElements",
            log_metrics=_total_metrics,
            request_prefix="get_error_elements",
        ),
        Tool(
            name="get_site_audit_elements_with_issues",
            description=(
                "DRILL-DOWN STEP 2: list the individual elements (images, links, tags ...) with the "
                "given error on one page. Take crc from get_site_audit_pages_spec_errors. Does not "
                "consume API credits."
            ),
            input_schema=_drill_down_schema(
                compare_required=False,
                limit_default=DEFAULT_AUDIT_LIMIT,
                extra={"crc": {"type": "integer", "description": "Page CRC from get_site_audit_pages_spec_errors"}},
            ),
            method="AuditSite.getSubElementsByCrc",
            log_metrics=_total_metrics,
            request_prefix="get_sub_elements_by_crc",
        ),
    ]
    return Toolkit(
        name="serpstat.site_audit",
        version="1.0.0",
        description="Whole-site audit projects, reports and error history.",
        tools=tools,
    )


__all__ = ["site_audit_toolkit"]
