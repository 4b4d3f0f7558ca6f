"""Page-level (URL) analytics tools backed by ``SerpstatUrlProcedure``."""

from __future__ import annotations

from typing import Any

from .base import Tool, Toolkit, paged_result_schema
from .constants import (
    KEYWORD_INTENTS,
    MAX_FILTER_CONCURRENCY,
    MAX_FILTER_COST,
    MAX_FILTER_DIFFICULTY,
    MAX_FILTER_POSITION,
    MAX_KEYWORD_LENGTH,
    MAX_URL_CONTAIN_LENGTH,
    MIN_KEYWORD_LENGTH,
    MIN_URL_CONTAIN_LENGTH,
    URL_OUTPUT_DATA_TYPES,
    bounded,
    page_fields,
    search_engine_field,
    sort_order_field,
)


def _url_field(description: str) -> dict[str, Any]:
    return {"type": "string", "format": "uri", "description": description}


def _ranges(*specs: tuple[str, str, float | None, float | None]) -> dict[str, Any]:
    return {
        f"{name}{suffix}": bounded(kind, minimum, maximum)
        for name, kind, minimum, maximum in specs
        for suffix in ("", "_from", "_to")
    }


def _summary_metrics(result: Any) -> dict[str, Any]:
    if not isinstance(result, dict):
        return {}
    summary = result.get("summary_info") or {}
    return {
        "urls": result.get("urls"),
        "traffic": result.get("traffic"),
        "keywords": result.get("keywords"),
        "left_lines": summary.get("left_lines") if isinstance(summary, dict) else None,
    }


def _summary_traffic() -> Tool:
    return Tool(
        name="get_url_summary_traff",
        description=(
            "Returns traffic and keyword statistics for website pages that match a specific URL mask. "
            "Shows organic traffic and number of keywords found for URLs matching the given pattern. "
            "**HIGH-COST METHOD - EXPLICIT CONFIRMATION REQUIRED**. Before executing, inform the user: "
            "`This operation will cost 1000-2000 credits`. API COST: 1000 credits per each of "
            "`traffic`|`keywords` output parameter"
        ),
        input_schema={
            "type": "object",
            "properties": {
                "se": search_engine_field(default="g_us", description="Search database ID"),
                "domain": {
                    "type": "string",
                    "description": "The domain for which to retrieve traffic and keyword data",
                },
                "urlContains": {
                    "type": "string",
                    "minLength": MIN_URL_CONTAIN_LENGTH,
                    "maxLength": MAX_URL_CONTAIN_LENGTH,
                    "description": (
                        "URL pattern to filter results. Must be at least 3 characters long. Examples: "
                        "'/blog/' matches all blog pages, '/en/' matches English version. "
                        "Cannot use '/' alone."
                    ),
                },
                "output_data": {
                    "type": "string",
                    "enum": list(URL_OUTPUT_DATA_TYPES),
                    "description": (
                        "Which data to return. 'traffic' or 'keywords' cost 1000 credits each; "
                        "omitting it returns both (2000 credits)."
                    ),
                },
            },
            "required": ["se", "domain", "urlContains"],
            "additionalProperties": False,
        },
        method="SerpstatUrlProcedure.getSummaryTraffic",
        output_schema={"type": "object"},
        log_metrics=_summary_metrics,
        request_prefix="get_url_summary_traffic",
    )


def _competitors() -> Tool:
    return Tool(
        name="get_url_competitors",
        description=(
            "Returns competitor URLs that rank for the same keywords in Google top-10. The analyzed "
            "URL must rank for 10+ keywords in top-10 to have competitor data available; new or "
            "low-traffic pages return a 'Data not found' error. The URL parameter must include the "
            "protocol. API cost: 1 credit per result row returned."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "se": search_engine_field(default="g_us", description="Search database ID"),
                "url": _url_field(
                    "Full URL to analyze including protocol, e.g. 'https://example.com/page'"
                ),
                "sort": {
                    "type": "object",
                    "properties": {
                        "cnt": sort_order_field(
                            "Sort by number of keywords in top 10 for which pages intersect"
                        ),
                    },
                    "additionalProperties": False,
                    "description": "Sorting parameters",
                },
                **page_fields(),
            },
            "required": ["se", "url"],
            "additionalProperties": False,
        },
        method="SerpstatUrlProcedure.getUrlCompetitors",
        output_schema=paged_result_schema(),
    )


def _keywords() -> Tool:
    filters: dict[str, Any] = _ranges(
        ("cost", "number", 0, MAX_FILTER_COST),
        ("position", "integer", 1, MAX_FILTER_POSITION),
        ("concurrency", "integer", 1, MAX_FILTER_CONCURRENCY),
        ("difficulty", "number", 0, MAX_FILTER_DIFFICULTY),
        ("region_queries_count", "integer", 0, None),
        ("region_queries_count_wide", "integer", 0, None),
    )
    filters["keyword_length"] = bounded("integer", MIN_KEYWORD_LENGTH)
    filters["traff"] = bounded("integer", 0)
    filters["url_contains"] = {"type": "string", "description": "Exact website pages ranking for keywords"}
    filters["right_spelling"] = {"type": "boolean", "description": "Display or hide misspelled keywords"}
    filters["keyword_contain"] = {"type": "string", "description": "Contains all keywords (exact matching)"}
    filters["keyword_not_contain"] = {
        "type": "string",
        "description": "Does not contain all keywords (exact matching)",
    }
    filters["keyword_contain_one_of"] = {
        "type": "string",
        "description": "Contains one of the keywords (exact matching)",
    }
    filters["keyword_not_contain_one_of"] = {
        "type": "string",
        "description": "Does not contain one of the keywords (exact matching)",
    }
    filters["intents_contain"] = {
        "type": "array",
        "items": {"type": "string", "enum": list(KEYWORD_INTENTS)},
        "description": "Contains one or several intents",
    }
    filters["intents_not_contain"] = {
        "type": "array",
        "items": {"type": "string", "enum": list(KEYWORD_INTENTS)},
        "description": "Does not contain one of the intents",
    }
    return Tool(
        name="get_url_keywords",
        description=(
            "Returns a list of keywords for which the specified URL ranks in top-100 Google search "
            "results, with positions, estimated traffic, difficulty, search volume and SERP features. "
            "API cost: 1 credit per result row returned."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "se": search_engine_field(default="g_us", description="Search database ID"),
                "url": _url_field("Full URL to analyze including protocol (https://)"),
                "withIntents": {
                    "type": "boolean",
                    "description": "Include keyword search intent classification",
                },
                "sort": {
                    "type": "object",
                    "properties": {
                        "position": sort_order_field("Sort by position"),
                        "difficulty": sort_order_field("Sort by keyword difficulty"),
                        "cost": sort_order_field("Sort by cost per click"),
                        "traff": sort_order_field("Sort by traffic"),
                    },
                    "additionalProperties": False,
                    "description": "Sorting parameters",
                },
                "filters": {
                    "type": "object",
                    "properties": filters,
                    "additionalProperties": False,
                    "description": "Filter conditions",
                },
                **page_fields(),
            },
            "required": ["se", "url"],
            "additionalProperties": False,
        },
        method="SerpstatUrlProcedure.getUrlKeywords",
        output_schema=paged_result_schema(),
    )


def _missing_keywords() -> Tool:
    filters: dict[str, Any] = _ranges(
        ("region_queries_count", "integer", 0, None),
        ("region_queries_count_wide", "integer", 0, None),
        ("cost", "number", 0, None),
        ("concurrency", "number", 0, None),
        ("weight", "integer", 0, None),
    )
    filters["keyword"] = {"type": "string", "description": "Any text value"}
    filters["minus_keywords"] = {
        "type": "array",
        "items": {"type": "string", "minLength": MIN_KEYWORD_LENGTH, "maxLength": MAX_KEYWORD_LENGTH},
        "description": "Excluding keywords",
    }
    filters["right_spelling"] = {
        "type": "boolean",
        "description": "Filter by spelling: true - contains all, false - does not contain all",
    }
    return Tool(
        name="get_url_missing_keywords",
        description=(
            "Identifies keyword opportunities by finding keywords where your competitors rank in "
            "top-20 but your URL does not. The weight metric shows how many competitor URLs from "
            "top-20 rank for that keyword. API cost: 1 credit per result row returned."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "url": _url_field("Analyzed URL"),
                "se": search_engine_field(default="g_us", description="Search database ID"),
                "sort": {
                    "type": "object",
                    "properties": {
                        "weight": sort_order_field(
                            "Sort by number of competitor URLs in top-20 ranking for this keyword"
                        ),
                    },
                    "additionalProperties": False,
                    "description": "Sorting parameters",
                },
                "filters": {
                    "type": "object",
                    "properties": filters,
                    "additionalProperties": False,
                    "description": "Filter conditions",
                },
                **page_fields(),
            },
            "required": ["url", "se"],
            "additionalProperties": False,
        },
        method="SerpstatUrlProcedure.getUrlMissingKeywords",
        output_schema=paged_result_schema(),
    )


def urls_toolkit() -> Toolkit:
    return Toolkit(
        name="serpstat.urls",
        version="1.0.0",
        description="Traffic, competitors and keyword gaps for individual pages.",
        tools=[_summary_traffic(), _competitors(), _keywords(), _missing_keywords()],
    )


__all__ = ["urls_toolkit"]
