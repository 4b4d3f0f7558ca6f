"""Response envelopes returned across the protocol boundary."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from .errors import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TextContent:
    """A single text content block."""

    text: str
    type: Literal["text"] = "text"

    def as_dict(self) -> dict[str, str]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True, slots=True)
class ToolResponseEnvelope:
    """Outcome of one tool call: success (``is_error`` unset) or error."""

    content: list[TextContent] = field(default_factory=list)
    is_error: bool = False

    @property
    def text(self) -> str:
        return "\n".join(block.text for block in self.content)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"content": [block.as_dict() for block in self.content]}
        if self.is_error:
            payload["isError"] = True
        return payload


def render_success(payload: Any) -> ToolResponseEnvelope:
    try:
        text = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError) as exc:
        logger.error("Unable to serialize tool result: %s", exc)
        return render_error(exc)
    return ToolResponseEnvelope(content=[TextContent(text=text)])


def render_error(error: BaseException) -> ToolResponseEnvelope:
    """Build an error envelope; never raises."""

    try:
        if isinstance(error, ValidationError):
            message = "Invalid parameters: " + ", ".join(str(item) for item in error.violations)
        else:
            message = str(error) or type(error).__name__
    except Exception:  # noqa: BLE001
        message = type(error).__name__
    return ToolResponseEnvelope(content=[TextContent(text=f"Error: {message}")], is_error=True)


__all__ = ["TextContent", "ToolResponseEnvelope", "render_error", "render_success"]
