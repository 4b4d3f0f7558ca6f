"""Rank tracker tools. None of these calls consume API credits."""

from __future__ import annotations

from typing import Any

from .base import Tool, Toolkit
from .constants import (
    DATE_REGEX,
    DEFAULT_RT_PAGE_SIZE,
    MAX_RT_KEYWORDS_FILTER,
    MIN_PAGE,
    MIN_RT_PROJECT_ID,
    MIN_RT_REGION_ID,
    RT_ALLOWED_PAGE_SIZES,
    RT_SERP_HISTORY_SORT_TYPES,
    sort_order_field,
)

REGIONS_REFERENCE = (
    "https://docs.google.com/spreadsheets/d/1LUDtm-L1qWMVpmWuN-nvDyYFfQtfiXUh5LIHE8sjs0k/"
    "edit?gid=75443986#gid=75443986"
)

_OBJECT_RESULT = {"type": "object"}


def _project_id(description: str = "Project identifier") -> dict[str, Any]:
    return {"type": "integer", "minimum": MIN_RT_PROJECT_ID, "description": description}


def _page_size(description: str) -> dict[str, Any]:
    return {
        "type": "integer",
        "enum": list(RT_ALLOWED_PAGE_SIZES),
        "default": DEFAULT_RT_PAGE_SIZE,
        "description": description,
    }


def _date(description: str) -> dict[str, Any]:
    return {"type": "string", "pattern": DATE_REGEX, "description": description}


def _serp_history_properties(default_sort: str, page_size_hint: str) -> dict[str, Any]:
    allowed = ", ".join(str(size) for size in RT_ALLOWED_PAGE_SIZES)
    return {
        "projectId": _project_id("Rank tracker project ID. Get from get_rt_projects_list."),
        "projectRegionId": {
            "type": "integer",
            "minimum": MIN_RT_REGION_ID,
            "description": (
                "Region ID for the project. Get from get_rt_project_regions_list. "
                f"Region reference: {REGIONS_REFERENCE}"
            ),
        },
        "page": {
            "type": "integer",
            "minimum": MIN_PAGE,
            "default": 1,
            "description": "Page number for pagination. Starts at 1.",
        },
        "pageSize": _page_size(f"Number of keywords per page. Allowed values: {allowed}. {page_size_hint}"),
        "dateFrom": _date("Start date of the period in YYYY-MM-DD format (e.g., '2025-09-01')."),
        "dateTo": _date("End date of the period in YYYY-MM-DD format (e.g., '2025-09-30')."),
        "sort": {
            "type": "string",
            "enum": list(RT_SERP_HISTORY_SORT_TYPES),
            "description": (
                "Sort results by 'keyword' (alphabetically) or 'date' (chronologically). "
                f"Default is '{default_sort}'."
            ),
        },
        "order": sort_order_field("Sorting order: 'asc' (oldest first) or 'desc' (newest first). Default is 'desc'."),
        "keywords": {
            "type": "array",
            "items": {"type": "string"},
            "maxItems": MAX_RT_KEYWORDS_FILTER,
            "description": f"Filter by specific keywords (max {MAX_RT_KEYWORDS_FILTER} keywords)",
        },
        "withTags": {
            "type": "boolean",
            "default": False,
            "description": "Include keyword tag IDs and values in the response.",
        },
    }


def rank_tracking_toolkit() -> Toolkit:
    allowed = ", ".join(str(size) for size in RT_ALLOWED_PAGE_SIZES)

    projects_list = Tool(
        name="get_rt_projects_list",
        description=(
            "Get a list of rank tracker projects including project ID, name, domain, creation date, "
            "and tracking status. This method does not consume API credits."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "page": {
                    "type": "integer",
                    "minimum": MIN_PAGE,
                    "default": 1,
                    "description": "Page number in the projects list",
                },
                "pageSize": _page_size(f"Number of results per page. Allowed values: {allowed}"),
            },
            "additionalProperties": False,
        },
        method="RtApiProjectProcedure.getProjects",
        output_schema=_OBJECT_RESULT,
        request_prefix="rt_projects_list",
    )

    project_status = Tool(
        name="get_rt_project_status",
        description=(
            "Get the current status of position updates (parsing) for a rank tracker project and "
            "region. Use this to check if data is ready before requesting results. This method does "
            "not consume API credits."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "projectId": _project_id(),
                "regionId": {
                    "type": "integer",
                    "minimum": MIN_RT_REGION_ID,
                    "description": f"Search region ID (see {REGIONS_REFERENCE})",
                },
            },
            "required": ["projectId", "regionId"],
            "additionalProperties": False,
        },
        method="RtApiProjectProcedure.getProjectStatus",
        output_schema=_OBJECT_RESULT,
        request_prefix="rt_project_status",
    )

    regions_list = Tool(
        name="get_rt_project_regions_list",
        description=(
            "Get the list of regions configured for a rank tracker project, including region ID, "
            "status, SERP type, device type, search engine, and location details. This method does "
            "not consume API credits."
        ),
        input_schema={
            "type": "object",
            "properties": {"projectId": _project_id()},
            "required": ["projectId"],
            "additionalProperties": False,
        },
        method="RtApiSearchEngineProcedure.getProjectRegions",
        output_schema=_OBJECT_RESULT,
        request_prefix="rt_project_regions",
    )

    keyword_history = Tool(
        name="get_rt_project_keyword_serp_history",
        description=(
            "Get complete Google top-100 SERP history for tracked keywords in a rank tracker project. "
            "WARNING: returns large datasets (full top-100 for each keyword/date combination); use a "
            "pageSize of 20-50 together with date and keyword filters. This method does not consume "
            "API credits."
        ),
        input_schema={
            "type": "object",
            "properties": _serp_history_properties(
                "date", "RECOMMENDED: 20 or 50 to avoid response truncation."
            ),
            "required": ["projectId", "projectRegionId", "page"],
            "additionalProperties": False,
        },
        method="RtApiSerpResultsProcedure.getKeywordsSerpResultsHistory",
        output_schema=_OBJECT_RESULT,
        request_prefix="rt_keyword_serp_history",
    )

    url_properties = _serp_history_properties(
        "keyword", "Recommended: 100, since only your own positions are returned."
    )
    url_properties["domain"] = {
        "type": "string",
        "description": (
            "Domain or URL to track: 'domain.com' for the whole domain, 'sub.domain.com' for a "
            "subdomain, or a full URL 'https://domain.com/page' for a single page. Do NOT include "
            "the protocol for domain-level tracking."
        ),
    }
    url_history = Tool(
        name="get_rt_project_url_serp_history",
        description=(
            "Get ranking history showing only your domain's positions across all tracked keywords. "
            "Unlike get_rt_project_keyword_serp_history this returns only positions where the given "
            "domain or URL ranks. This method does not consume API credits."
        ),
        input_schema={
            "type": "object",
            "properties": url_properties,
            "required": ["projectId", "projectRegionId", "page"],
            "additionalProperties": False,
        },
        method="RtApiSerpResultsProcedure.getUrlsSerpResultsHistory",
        output_schema=_OBJECT_RESULT,
        request_prefix="rt_url_serp_history",
    )

    return Toolkit(
        name="serpstat.rank_tracking",
        version="1.0.0",
        description="Rank tracker projects, regions and SERP history.",
        tools=[projects_list, project_status, regions_list, keyword_history, url_history],
    )


__all__ = ["rank_tracking_toolkit"]
