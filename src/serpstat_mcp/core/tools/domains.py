"""Domain analytics tools backed by ``SerpstatDomainProcedure``."""

from __future__ import annotations

from typing import Any

from .base import Tool, Toolkit, paged_result_schema
from .constants import (
    DOMAIN_REGIONS_SORT_FIELDS,
    KEYWORD_INTENTS,
    MAX_FILTER_CONCURRENCY,
    MAX_FILTER_DIFFICULTY,
    MAX_FILTER_POSITION,
    MAX_KEYWORD_LENGTH,
    MAX_KEYWORDS_ITEMS,
    MAX_URL_CONTAIN_LENGTH,
    MAX_URL_PREFIX_LENGTH,
    MIN_KEYWORD_LENGTH,
    bounded,
    domain_field,
    page_fields,
    search_engine_field,
    sort_order_field,
)

MAX_DOMAINS_PER_REQUEST = 100
MAX_COMPETITORS = 100
DEFAULT_COMPETITORS = 10
MAX_MINUS_DOMAINS = 50


def _keyword_list(description: str) -> dict[str, Any]:
    return {
        "type": "array",
        "items": {"type": "string", "minLength": MIN_KEYWORD_LENGTH, "maxLength": MAX_KEYWORD_LENGTH},
        "maxItems": MAX_KEYWORDS_ITEMS,
        "description": description,
    }


def _range(name: str, kind: str, minimum: float | None = None, maximum: float | None = None) -> dict[str, Any]:
    """``name``, ``name_from`` and ``name_to`` filters sharing one bound."""

    return {key: bounded(kind, minimum, maximum) for key in (name, f"{name}_from", f"{name}_to")}


def _domain_keyword_filters() -> dict[str, Any]:
    properties: dict[str, Any] = {}
    properties.update(_range("position", "integer", 1, MAX_FILTER_POSITION))
    properties.update(_range("cost", "number", 0))
    properties.update(_range("region_queries_count", "integer", 0))
    properties["traff"] = bounded("integer", 0)
    properties.update(_range("difficulty", "number", 0, MAX_FILTER_DIFFICULTY))
    properties["keyword_length"] = bounded("integer", 1)
    properties.update(_range("concurrency", "integer", 1, MAX_FILTER_CONCURRENCY))
    properties["right_spelling"] = {"type": "boolean"}
    properties["keyword_contain"] = {"type": "string"}
    properties["keyword_not_contain"] = {"type": "string"}
    properties["intents_contain"] = {"type": "array", "items": {"type": "string", "enum": list(KEYWORD_INTENTS)}}
    properties["intents_not_contain"] = {"type": "array", "items": {"type": "string", "enum": list(KEYWORD_INTENTS)}}
    return {
        "type": "object",
        "properties": properties,
        "additionalProperties": False,
        "description": "Filter conditions",
    }


def _domains_info() -> Tool:
    return Tool(
        name="get_domains_info",
        description=(
            "Get comprehensive SEO information for multiple domains including visibility, keywords, "
            "traffic, and dynamics"
        ),
        input_schema={
            "type": "object",
            "properties": {
                "domains": {
                    "type": "array",
                    "items": domain_field("Domain name"),
                    "minItems": 1,
                    "maxItems": MAX_DOMAINS_PER_REQUEST,
                    "description": "List of domains to analyze (1-100 domains)",
                },
                "se": search_engine_field(description="Search engine database (e.g., g_us for Google US)"),
                "filters": {
                    "type": "object",
                    "properties": {
                        "traff": {"type": "number", "description": "Exact traffic value"},
                        "traff_from": {"type": "number", "description": "Minimum traffic value"},
                        "traff_to": {"type": "number", "description": "Maximum traffic value"},
                        "visible": {"type": "number", "description": "Exact visibility value"},
                        "visible_from": {"type": "number", "description": "Minimum visibility value"},
                        "visible_to": {"type": "number", "description": "Maximum visibility value"},
                    },
                    "additionalProperties": False,
                    "description": "Optional filters for the results",
                },
            },
            "required": ["domains", "se"],
            "additionalProperties": False,
        },
        method="SerpstatDomainProcedure.getDomainsInfo",
        output_schema=paged_result_schema(),
        request_prefix="domains_info",
    )


def _competitors() -> Tool:
    return Tool(
        name="get_domain_competitors",
        description=(
            "Get a list of competitor domains for a given domain, including visibility, traffic, "
            "and relevance."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "domain": domain_field("Domain to analyze"),
                "se": search_engine_field(),
                "size": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": MAX_COMPETITORS,
                    "default": DEFAULT_COMPETITORS,
                    "description": "Number of results to return",
                },
                "filters": {
                    "type": "object",
                    "properties": {
                        "visible": {"type": "number", "minimum": 0, "description": "Minimum site visibility"},
                        "traff": {"type": "integer", "minimum": 0, "description": "Minimum estimated traffic"},
                        "minus_domains": {
                            "type": "array",
                            "items": domain_field("Domain to exclude"),
                            "minItems": 1,
                            "maxItems": MAX_MINUS_DOMAINS,
                            "uniqueItems": True,
                            "description": "Array of domains to exclude from the analysis.",
                        },
                    },
                    "additionalProperties": False,
                    "description": "Optional filter conditions",
                },
            },
            "required": ["domain", "se"],
            "additionalProperties": False,
        },
        method="SerpstatDomainProcedure.getCompetitors",
        output_schema=paged_result_schema(),
        request_prefix="competitors",
    )


def _domain_keywords() -> Tool:
    sort_fields = (
        "position",
        "region_queries_count",
        "cost",
        "traff",
        "difficulty",
        "keyword_length",
        "concurrency",
    )
    return Tool(
        name="get_domain_keywords",
        description=(
            "Get keywords that domain ranks for in Google search results. Includes position, traffic, "
            "difficulty analysis with comprehensive SEO insights and performance metrics."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "domain": domain_field("Domain name to analyze"),
                "se": search_engine_field(default="g_us"),
                "withSubdomains": {
                    "type": "boolean",
                    "default": False,
                    "description": "Include subdomains in analysis",
                },
                "withIntents": {
                    "type": "boolean",
                    "default": False,
                    "description": "Include keyword intents (works for g_ua and g_us only)",
                },
                "url": {"type": "string", "format": "uri", "description": "Specific URL to filter results"},
                "keywords": _keyword_list("Array of keywords to search for"),
                "minusKeywords": _keyword_list("Array of keywords to exclude from search"),
                **page_fields(),
                "sort": {
                    "type": "object",
                    "properties": {name: sort_order_field() for name in sort_fields},
                    "additionalProperties": False,
                    "description": "Sort configuration",
                },
                "filters": _domain_keyword_filters(),
            },
            "required": ["domain", "se"],
            "additionalProperties": False,
        },
        method="SerpstatDomainProcedure.getDomainKeywords",
        output_schema=paged_result_schema(),
        request_prefix="domain_keywords",
    )


def _domain_urls() -> Tool:
    return Tool(
        name="get_domain_urls",
        description=(
            "Get URLs within a domain and keyword count for each URL. Analyze URL structure, "
            "performance distribution, and identify top-performing pages. Each URL costs 1 API "
            "credit, minimum 1 credit per request."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "domain": domain_field("Domain name to analyze"),
                "se": search_engine_field(default="g_us"),
                "filters": {
                    "type": "object",
                    "properties": {
                        "url_prefix": {
                            "type": "string",
                            "maxLength": MAX_URL_PREFIX_LENGTH,
                            "description": "Filter URLs that start with given prefix",
                        },
                        "url_contain": {
                            "type": "string",
                            "maxLength": MAX_URL_CONTAIN_LENGTH,
                            "description": "Filter URLs that contain specified substring",
                        },
                        "url_not_contain": {
                            "type": "string",
                            "maxLength": MAX_URL_CONTAIN_LENGTH,
                            "description": "Exclude URLs that contain specified substring",
                        },
                    },
                    "additionalProperties": False,
                    "description": "URL filtering options",
                },
                "sort": {
                    "type": "object",
                    "properties": {"keywords": sort_order_field("Sort by number of keywords")},
                    "additionalProperties": False,
                    "description": "Sort configuration",
                },
                **page_fields(),
            },
            "required": ["domain", "se"],
            "additionalProperties": False,
        },
        method="SerpstatDomainProcedure.getDomainUrls",
        output_schema=paged_result_schema(),
        request_prefix="domain_urls",
    )


def _regions_count() -> Tool:
    return Tool(
        name="get_domain_regions_count",
        description=(
            "Analyze domain keyword presence across all Google regional databases. Shows keyword count "
            "by country, regional performance comparison and international SEO insights. Start every "
            "complex domain analysis with this tool."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "domain": domain_field("Domain name to analyze"),
                "sort": {
                    "type": "string",
                    "enum": list(DOMAIN_REGIONS_SORT_FIELDS),
                    "description": "Sort by field",
                },
                "order": sort_order_field("Sort order"),
            },
            "required": ["domain"],
            "additionalProperties": False,
        },
        method="SerpstatDomainProcedure.getRegionsCount",
        output_schema=paged_result_schema(),
        request_prefix="domain_regions_count",
    )


def domains_toolkit() -> Toolkit:
    return Toolkit(
        name="serpstat.domains",
        version="1.0.0",
        description="Domain visibility, competitors, keywords, URLs and regional coverage.",
        tools=[_domains_info(), _competitors(), _domain_keywords(), _domain_urls(), _regions_count()],
    )


__all__ = ["domains_toolkit"]
