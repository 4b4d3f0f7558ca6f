"""Core services for the Serpstat MCP server."""

from .config import DEFAULT_API_URL, SerpstatConfig, load_config
from .errors import (
    ConfigurationError,
    SerpstatMCPError,
    TransportError,
    UnknownToolError,
    UpstreamAPIError,
    UpstreamDataError,
    ValidationError,
)
from .logs import configure_logging
from .render import ToolResponseEnvelope, render_error, render_success
from .tool_registry import CallPhase, ToolCall, ToolRegistry, build_default_registry
from .upstream import SerpstatClient
from .validation import ValidatedArguments, validate_arguments

__all__ = [
    "CallPhase",
    "ConfigurationError",
    "DEFAULT_API_URL",
    "SerpstatClient",
    "SerpstatConfig",
    "SerpstatMCPError",
    "ToolCall",
    "ToolRegistry",
    "ToolResponseEnvelope",
    "TransportError",
    "UnknownToolError",
    "UpstreamAPIError",
    "UpstreamDataError",
    "ValidatedArguments",
    "ValidationError",
    "build_default_registry",
    "configure_logging",
    "load_config",
    "render_error",
    "render_success",
    "validate_arguments",
]
