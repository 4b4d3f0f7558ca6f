"""Backlink analytics tools."""

from __future__ import annotations

from .base import Tool, Toolkit, paged_result_schema
from .constants import SEARCH_TYPES, domain_field


def backlinks_toolkit() -> Toolkit:
    summary = Tool(
        name="get_backlinks_summary",
        description=(
            "Get comprehensive backlinks summary using Serpstat API. Returns referring domains, "
            "backlinks count, link types, quality metrics and recent changes for domain or subdomain."
        ),
        input_schema={
            "type": "object",
            "properties": {
                "query": domain_field("Domain or subdomain to analyze"),
                "searchType": {
                    "type": "string",
                    "enum": list(SEARCH_TYPES),
                    "default": "domain",
                    "description": "Type of search query",
                },
            },
            "required": ["query"],
            "additionalProperties": False,
        },
        method="SerpstatBacklinksProcedure.getSummaryV2",
        output_schema=paged_result_schema("object"),
        request_prefix="backlinks_summary",
    )
    return Toolkit(
        name="serpstat.backlinks",
        version="1.0.0",
        description="Backlink profile summaries.",
        tools=[summary],
    )


__all__ = ["backlinks_toolkit"]
