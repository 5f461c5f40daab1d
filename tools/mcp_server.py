# =============================================================================
# tools/mcp_server.py  -  FastMCP server (ALL tools and the resource)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the tool registry (core/registry.py) over MCP.  Every registered
#   ToolDefinition becomes one FastMCP tool whose JSON schema is the
#   definition's pydantic input model; calling it runs ToolRegistry.invoke.
#
# HOW A CALL FLOWS:
#   1. An MCP client sends tools/call {"name": "geocode", "arguments": {...}}
#   2. FastMCP routes it to the matching RegistryTool below
#   3. RegistryTool.run -> registry.invoke (validation, defaults, handler)
#   4. The InvocationResult is converted into MCP content blocks
#   5. Error results and registry errors are raised as ToolError, which the
#      SDK sends back as {"isError": true, "content": [<text>]}
#
# TOOLS:       greet, calculator, getTime, geocode, get-weather, generate-image
# RESOURCE:    server://info  (JSON, see core/server_info.py)
#
# RUNNING THIS SERVER:
#     a) stdio (default):  python -m tools.mcp_server
#     b) HTTP:             MCP_TRANSPORT=http MCP_PORT=8000 python -m tools.mcp_server
# =============================================================================

import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import ImageContent as MCPImageContent
from mcp.types import TextContent as MCPTextContent
from mcp.types import ToolAnnotations
from pydantic import Field

from core.config import Settings
from core.context import ToolContext
from core.errors import ToolboxError
from core.models import ContentBlock, ImageContent, InvocationResult, ToolDefinition
from core.registry import ToolRegistry
from core.server_info import (
    SERVER_INFO_URI,
    SERVER_NAME,
    SERVER_VERSION,
    build_server_info,
)
from core.toolbox import build_registry

# =============================================================================
# Logging Setup
# =============================================================================
# Logs go to STDERR: with the stdio transport, STDOUT carries the MCP JSON
# stream and any stray line there would corrupt it.
#
#   CYAN   incoming requests (tool name + parameters)
#   GREEN  responses
#   YELLOW intermediate status / errors
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logger = logging.getLogger("toolbox.mcp")

_MAX_LOGGED_CHARS = 500


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _log_request(tool_name: str, params: Optional[dict[str, Any]] = None) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in (params or {}).items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: InvocationResult) -> InvocationResult:
    """Log the result as compact JSON in GREEN (image data elided), then return it."""
    payload = result.to_dict()
    for block in payload["content"]:
        if block.get("type") == "image":
            block["data"] = f"<{len(block['data'])} base64 chars>"
    text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    if len(text) > _MAX_LOGGED_CHARS:
        text = text[:_MAX_LOGGED_CHARS] + "…"
    logger.info(f"{_GREEN}  ← {tool_name} response: {text}{_RESET}")
    return result


# =============================================================================
# InvocationResult -> MCP content
# =============================================================================
def to_mcp_content(block: ContentBlock) -> Any:
    if isinstance(block, ImageContent):
        return MCPImageContent(type="image", data=block.data, mimeType=block.mime_type)
    return MCPTextContent(type="text", text=block.text)


# =============================================================================
# RegistryTool: one FastMCP tool backed by a ToolDefinition
# =============================================================================
class RegistryTool(Tool):
    """FastMCP tool whose execution is delegated to ToolRegistry.invoke."""

    registry_invoke: Callable[[str, dict[str, Any]], Awaitable[InvocationResult]] = Field(exclude=True)

    @classmethod
    def from_definition(cls, definition: ToolDefinition, registry: ToolRegistry) -> "RegistryTool":
        return cls(
            name=definition.name,
            description=definition.description,
            parameters=definition.input_schema(),
            output_schema=definition.output_schema(),
            annotations=ToolAnnotations(
                title=definition.title,
                readOnlyHint=True,
                openWorldHint=definition.name in ("geocode", "get-weather", "generate-image"),
            ),
            registry_invoke=registry.invoke,
        )

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        _log_request(self.name, arguments)
        try:
            result = await self.registry_invoke(self.name, arguments)
        except ToolboxError as exc:
            _log_status(f"Rejected: {exc}")
            raise ToolError(str(exc)) from exc

        _log_response(self.name, result)
        if result.is_error:
            raise ToolError(result.first_text)
        return ToolResult(
            content=[to_mcp_content(block) for block in result.content],
            structured_content=result.structured,
        )


# =============================================================================
# Server factory
# =============================================================================
def create_server(
    settings: Optional[Settings] = None,
    registry: Optional[ToolRegistry] = None,
) -> FastMCP:
    """Build a FastMCP server exposing every registered tool and server://info.

    Args:
        settings: Configuration; defaults to Settings.from_env().  Ignored
            when ``registry`` is given (the registry's context already has it).
        registry: Pre-built registry (tests inject one with stub clients).
    """
    if registry is None:
        registry = build_registry(ToolContext(settings or Settings.from_env()))

    @asynccontextmanager
    async def lifespan(server: FastMCP):
        try:
            yield
        finally:
            await registry.context.aclose()

    server = FastMCP(SERVER_NAME, version=SERVER_VERSION, lifespan=lifespan)

    for definition in registry.definitions():
        server.add_tool(RegistryTool.from_definition(definition, registry))

    if not registry.context.settings.image_generation_enabled:
        _log_status("HF_TOKEN not set: generate-image will report a missing credential")

    @server.resource(
        SERVER_INFO_URI,
        name="server-info",
        description="서버 정보, 가동 시간, 사용 가능한 도구 목록",
        mime_type="application/json",
    )
    def server_info() -> str:
        _log_request("server://info")
        return json.dumps(build_server_info(registry), ensure_ascii=False, indent=2)

    return server


# =============================================================================
# Server entry point
# =============================================================================
def main() -> None:
    load_dotenv()
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    server = create_server(settings)
    if settings.transport == "http":
        _log_status(f"Serving MCP over HTTP on {settings.host}:{settings.port}")
        server.run(transport="http", host=settings.host, port=settings.port)
    else:
        server.run()


if __name__ == "__main__":
    main()
