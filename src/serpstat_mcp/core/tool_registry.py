"""Tool registry and call dispatcher."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from serpstat_mcp.core.errors import (
    ConfigurationError,
    SerpstatMCPError,
    ToolAlreadyRegisteredError,
    ToolkitAlreadyRegisteredError,
    ToolRegistryError,
    UnknownToolError,
)
from serpstat_mcp.core.render import ToolResponseEnvelope, render_error, render_success
from serpstat_mcp.core.tools import DEFAULT_TOOLKIT_FACTORIES
from serpstat_mcp.core.tools.base import Tool, Toolkit
from serpstat_mcp.core.upstream import SerpstatClient
from serpstat_mcp.core.validation import check_schema

logger = logging.getLogger(__name__)


class CallPhase(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    DISPATCHED = "dispatched"
    COMPLETED = "completed"


_NEXT_PHASE = {
    CallPhase.RECEIVED: CallPhase.VALIDATED,
    CallPhase.VALIDATED: CallPhase.DISPATCHED,
}


@dataclass(slots=True)
class ToolCall:
    """Lifecycle record of a single invocation."""

    name: str
    phase: CallPhase = CallPhase.RECEIVED
    outcome: str | None = None
    started_at: float = field(default_factory=time.monotonic)

    def advance(self, phase: CallPhase) -> None:
        if self.phase is CallPhase.COMPLETED:
            raise ToolRegistryError(f"Call to '{self.name}' already completed")
        if phase is not CallPhase.COMPLETED and _NEXT_PHASE.get(self.phase) is not phase:
            raise ToolRegistryError(
                f"Call to '{self.name}' cannot move from {self.phase.value} to {phase.value}"
            )
        self.phase = phase

    def complete(self, outcome: str) -> None:
        self.advance(CallPhase.COMPLETED)
        self.outcome = outcome

    @property
    def elapsed_ms(self) -> float:
        return (time.monotonic() - self.started_at) * 1000


class ToolRegistry:
    """Stores tool contracts grouped by toolkits and dispatches calls to them."""

    def __init__(
        self,
        toolkits: list[Toolkit] | None = None,
        *,
        client: SerpstatClient | None = None,
    ) -> None:
        self._tools: dict[str, Tool] = {}
        self._toolkits: dict[str, Toolkit] = {}
        self._client = client
        if toolkits:
            for toolkit in toolkits:
                self.add_toolkit(toolkit)

    @property
    def client(self) -> SerpstatClient | None:
        return self._client

    def add_toolkit(self, toolkit: Toolkit, *, overwrite: bool = False) -> None:
        previous_toolkit = self._toolkits.get(toolkit.name)
        if previous_toolkit is not None:
            if not overwrite:
                raise ToolkitAlreadyRegisteredError(f"Toolkit '{toolkit.name}' already registered")
            for tool in previous_toolkit.tools:
                self.unregister(tool.name)

        registered: list[str] = []
        try:
            for tool in toolkit.tools:
                self.register(tool, overwrite=overwrite)
                registered.append(tool.name)
        except Exception:
            for tool_name in registered:
                self.unregister(tool_name)
            if previous_toolkit is not None:
                for tool in previous_toolkit.tools:
                    self.register(tool, overwrite=True)
            raise

        self._toolkits[toolkit.name] = toolkit

    def register(self, tool: Tool, *, overwrite: bool = False) -> None:
        if not overwrite and tool.name in self._tools:
            raise ToolAlreadyRegisteredError(f"Tool '{tool.name}' already registered")
        check_schema(tool.input_schema, tool.name)
        if tool.output_schema:
            check_schema(tool.output_schema, f"{tool.name}.result")
        self._tools[tool.name] = tool

    def unregister(self, name: str) -> None:
        self._tools.pop(name, None)

    def get(self, name: str) -> Tool:
        try:
            return self._tools[name]
        except KeyError as exc:
            raise UnknownToolError(name) from exc

    def available_tools(self) -> dict[str, Tool]:
        return dict(self._tools)

    def available_toolkits(self) -> dict[str, Toolkit]:
        return dict(self._toolkits)

    def describe(self) -> list[dict[str, Any]]:
        """Discovery documents in registration order."""
        return [
            {"name": tool.name, "description": tool.description, "inputSchema": tool.input_schema}
            for tool in self._tools.values()
        ]

    async def invoke(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResponseEnvelope:
        """Run one call end to end. Failures come back as error envelopes."""

        call = ToolCall(name=name)
        logger.debug("Received call to %s", name)
        try:
            tool = self.get(name)
            validated = tool.validate(arguments)
            call.advance(CallPhase.VALIDATED)
            if self._client is None:
                raise ConfigurationError("Serpstat client is not configured")
            call.advance(CallPhase.DISPATCHED)
            payload = await tool.call(validated, self._client)
        except SerpstatMCPError as exc:
            logger.error("Tool %s failed: %s", name, exc)
            envelope = render_error(exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Tool %s failed unexpectedly", name)
            envelope = render_error(exc)
        else:
            envelope = render_success(payload)

        call.complete("error" if envelope.is_error else "success")
        logger.debug("Completed call to %s (%s) in %.0fms", name, call.outcome, call.elapsed_ms)
        return envelope


def build_default_registry(client: SerpstatClient | None = None) -> ToolRegistry:
    """Return a registry pre-populated with the built-in toolkits."""
    toolkits = [factory() for factory in DEFAULT_TOOLKIT_FACTORIES]
    return ToolRegistry(toolkits=toolkits, client=client)


__all__ = [
    "CallPhase",
    "Tool",
    "ToolCall",
    "ToolRegistry",
    "Toolkit",
    "build_default_registry",
]
