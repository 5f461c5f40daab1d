# =============================================================================
# core/models.py  -  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the shape of everything that flows between the
# registry, the handlers and the MCP bridge:
#
#   ToolDefinition     name + schema models + handler, one per tool
#   InvocationRequest  a tool name and its raw argument bag
#   InvocationResult   content blocks + optional structured mirror + error flag
#   TextContent /      the two kinds of content block a tool can return
#   ImageContent
#
# The INPUT records (one pydantic model per tool) live in core/schemas.py.
# Nothing here imports FastMCP: the MCP bridge in tools/ converts these into
# SDK types at the edge.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Union

from pydantic import BaseModel


# -----------------------------------------------------------------------------
# Content blocks
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class TextContent:
    """A block of human-readable text."""

    text: str
    type: str = "text"

    def to_dict(self) -> dict:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class ImageContent:
    """A binary image, carried as base64 text."""

    data: str                          # base64-encoded bytes
    mime_type: str = "image/png"
    type: str = "image"

    def to_dict(self) -> dict:
        return {"type": self.type, "data": self.data, "mimeType": self.mime_type}


ContentBlock = Union[TextContent, ImageContent]


# -----------------------------------------------------------------------------
# InvocationResult: what every handler returns
# -----------------------------------------------------------------------------
@dataclass
class InvocationResult:
    """The standard response envelope of one tool call.

    Always carries at least one content block, including on error.
    """

    content: list[ContentBlock]
    structured: Optional[dict] = None  # mirror of the same data, machine-readable
    is_error: bool = False

    def __post_init__(self):
        if not self.content:
            raise ValueError("InvocationResult requires at least one content block")

    @classmethod
    def text(cls, text: str, structured: Optional[dict] = None) -> "InvocationResult":
        return cls(content=[TextContent(text=text)], structured=structured)

    @classmethod
    def image(cls, data: str, mime_type: str = "image/png") -> "InvocationResult":
        return cls(content=[ImageContent(data=data, mime_type=mime_type)])

    @classmethod
    def error(cls, message: str) -> "InvocationResult":
        return cls(content=[TextContent(text=message)], is_error=True)

    @property
    def first_text(self) -> str:
        """Text of the first text block, or "" when there is none."""
        for block in self.content:
            if isinstance(block, TextContent):
                return block.text
        return ""

    def to_dict(self) -> dict:
        """Render in the MCP wire shape (camelCase keys)."""
        result: dict[str, Any] = {"content": [block.to_dict() for block in self.content]}
        if self.structured is not None:
            result["structuredContent"] = self.structured
        if self.is_error:
            result["isError"] = True
        return result


# -----------------------------------------------------------------------------
# InvocationRequest
# -----------------------------------------------------------------------------
@dataclass
class InvocationRequest:
    tool_name: str
    arguments: dict[str, Any] = field(default_factory=dict)


# -----------------------------------------------------------------------------
# ToolDefinition
# -----------------------------------------------------------------------------
# A handler receives the VALIDATED input record and the shared ToolContext
# (core/context.py) and returns an InvocationResult, or raises a ToolboxError.
# -----------------------------------------------------------------------------
Handler = Callable[[Any, Any], Awaitable[InvocationResult]]


@dataclass(frozen=True)
class ToolDefinition:
    """One registered tool.  Created at startup, never mutated."""

    name: str
    description: str
    input_model: type[BaseModel]
    handler: Handler
    output_model: Optional[type[BaseModel]] = None
    title: Optional[str] = None

    def input_schema(self) -> dict:
        return self.input_model.model_json_schema()

    def output_schema(self) -> Optional[dict]:
        if self.output_model is None:
            return None
        return self.output_model.model_json_schema()
