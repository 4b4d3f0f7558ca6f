"""Keyword research tools."""

from __future__ import annotations

from typing import Any

from .base import Tool, Toolkit, paged_result_schema
from .constants import (
    KEYWORD_INTENTS,
    MAX_FILTER_CONCURRENCY,
    MAX_FILTER_COST,
    MAX_FILTER_DIFFICULTY,
    MAX_KEYWORD_LENGTH,
    MAX_KEYWORDS_ITEMS,
    MAX_QUERIES_COUNT,
    MIN_KEYWORD_LENGTH,
    bounded,
    page_fields,
    search_engine_field,
    sort_order_field,
)

_SORT_FIELDS = (
    "region_queries_count",
    "cost",
    "difficulty",
    "concurrency",
    "found_results",
    "keyword_length",
)

_TEXT_MATCH_FILTERS = (
    "keyword_contain",
    "keyword_not_contain",
    "keyword_contain_one_of",
    "keyword_not_contain_one_of",
    "keyword_contain_broad_match",
    "keyword_not_contain_broad_match",
)


def _keyword_filters() -> dict[str, Any]:
    properties: dict[str, Any] = {}
    ranges = (
        ("cost", "number", 0, MAX_FILTER_COST),
        ("region_queries_count", "integer", 0, MAX_QUERIES_COUNT),
        ("keyword_length", "integer", 1, None),
        ("difficulty", "integer", 0, MAX_FILTER_DIFFICULTY),
        ("concurrency", "integer", 1, MAX_FILTER_CONCURRENCY),
    )
    for name, kind, minimum, maximum in ranges:
        for key in (name, f"{name}_from", f"{name}_to"):
            properties[key] = bounded(kind, minimum, maximum)
    properties["right_spelling"] = {"type": "boolean"}
    for name in _TEXT_MATCH_FILTERS:
        properties[name] = {"type": "array", "items": {"type": "string"}}
    properties["lang"] = {"type": "string"}
    properties["intents_contain"] = {"type": "array", "items": {"type": "string", "enum": list(KEYWORD_INTENTS)}}
    properties["intents_not_contain"] = {"type": "array", "items": {"type": "string", "enum": list(KEYWORD_INTENTS)}}
    return {
        "type": "object",
        "properties": properties,
        "additionalProperties": False,
        "description": "Search filters",
    }


def keywords_toolkit() -> Toolkit:
    get_keywords = Tool(
        name="get_keywords",
        description=(
            "Shows organic keywords related to the researched keyword for which domains rank in the "
            "Google top-100. Each keyword comes with its search volume, CPC and competition level."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "keyword": {
                    "type": "string",
                    "minLength": MIN_KEYWORD_LENGTH,
                    "maxLength": MAX_KEYWORD_LENGTH,
                    "description": "Keyword to find related keywords for",
                },
                "se": search_engine_field(default="g_us"),
                "minusKeywords": {
                    "type": "array",
                    "items": {"type": "string", "minLength": MIN_KEYWORD_LENGTH, "maxLength": MAX_KEYWORD_LENGTH},
                    "maxItems": MAX_KEYWORDS_ITEMS,
                    "description": "Keywords to exclude from the search",
                },
                "withIntents": {
                    "type": "boolean",
                    "default": False,
                    "description": "Include keyword intents",
                },
                **page_fields(),
                "sort": {
                    "type": "object",
                    "properties": {name: sort_order_field() for name in _SORT_FIELDS},
                    "additionalProperties": False,
                    "description": "Sort configuration",
                },
                "filters": _keyword_filters(),
            },
            "required": ["keyword", "se"],
            "additionalProperties": False,
        },
        method="SerpstatKeywordProcedure.getKeywords",
        output_schema=paged_result_schema(),
    )
    return Toolkit(
        name="serpstat.keywords",
        version="1.0.0",
        description="Keyword research.",
        tools=[get_keywords],
    )


__all__ = ["keywords_toolkit"]
