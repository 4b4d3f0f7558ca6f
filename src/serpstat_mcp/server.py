"""MCP stdio server exposing the Serpstat tool registry."""

from __future__ import annotations

import logging
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from serpstat_mcp import __version__
from serpstat_mcp.core.render import ToolResponseEnvelope
from serpstat_mcp.core.tool_registry import ToolRegistry

logger = logging.getLogger(__name__)

SERVER_NAME = "serpstat-mcp"


def to_mcp_tools(registry: ToolRegistry) -> list[types.Tool]:
    return [
        types.Tool(name=entry["name"], description=entry["description"], inputSchema=entry["inputSchema"])
        for entry in registry.describe()
    ]


def to_call_result(envelope: ToolResponseEnvelope) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=block.text) for block in envelope.content],
        isError=envelope.is_error,
    )


def build_server(registry: ToolRegistry) -> Server:
    """Wire discovery and call handling onto a low-level MCP server.

    Argument checking stays with the registry's own validator so that
    violations come back as the usual ``Invalid parameters`` envelope.
    """

    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return to_mcp_tools(registry)

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        envelope = await registry.invoke(name, arguments)
        return to_call_result(envelope)

    return server


async def serve(registry: ToolRegistry) -> None:
    """Serve ``registry`` over stdio until the client disconnects."""

    server = build_server(registry)
    logger.info("Serpstat MCP server %s started with %d tools", __version__, len(registry.available_tools()))
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


__all__ = ["SERVER_NAME", "build_server", "serve", "to_call_result", "to_mcp_tools"]
