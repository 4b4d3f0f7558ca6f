"""Error taxonomy for the tool invocation pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


class SerpstatMCPError(RuntimeError):
    """Base error for every failure the pipeline knows how to render."""


@dataclass(frozen=True, slots=True)
class Violation:
    """A single schema violation found in caller-supplied arguments."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


class ValidationError(SerpstatMCPError):
    """Raised when tool arguments violate the declared schema."""

    def __init__(self, violations: Sequence[Violation]) -> None:
        self.violations = list(violations)
        super().__init__("Invalid parameters: " + ", ".join(str(item) for item in self.violations))


class ToolRegistryError(SerpstatMCPError):
    """Base error for tool registry failures."""


class ToolAlreadyRegisteredError(ToolRegistryError):
    """Raised when attempting to register a tool with a duplicate name."""


class ToolkitAlreadyRegisteredError(ToolRegistryError):
    """Raised when attempting to register a toolkit twice."""


class UnknownToolError(ToolRegistryError):
    """Raised when a call names a tool with no registered contract."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class SchemaDefinitionError(ToolRegistryError):
    """Raised when a tool declares a schema the validator cannot interpret."""


class TransportError(SerpstatMCPError):
    """Raised when the upstream request fails after the retry policy is spent."""

    def __init__(self, message: str, *, attempts: int, status_code: int | None = None) -> None:
        self.attempts = attempts
        self.status_code = status_code
        plural = "attempt" if attempts == 1 else "attempts"
        super().__init__(f"{message} (after {attempts} {plural})")


class UpstreamAPIError(SerpstatMCPError):
    """Raised when the upstream envelope carries an explicit error object."""

    def __init__(self, message: str, code: int | str | None = None) -> None:
        self.code = code
        super().__init__(f"Serpstat API error: {message} (code: {code})")


class UpstreamDataError(SerpstatMCPError):
    """Raised when a nominally successful call returns no usable payload."""

    def __init__(self, message: str = "No result data received from Serpstat API") -> None:
        super().__init__(message)


class ConfigurationError(SerpstatMCPError):
    """Raised when process configuration cannot be loaded."""


__all__ = [
    "ConfigurationError",
    "SchemaDefinitionError",
    "SerpstatMCPError",
    "ToolAlreadyRegisteredError",
    "ToolRegistryError",
    "ToolkitAlreadyRegisteredError",
    "TransportError",
    "UnknownToolError",
    "UpstreamAPIError",
    "UpstreamDataError",
    "ValidationError",
    "Violation",
]
