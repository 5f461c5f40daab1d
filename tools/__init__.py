# =============================================================================
# tools/__init__.py
# =============================================================================
# The MCP edge of the project.  tools/mcp_server.py turns every
# ToolDefinition in core.toolbox into a FastMCP tool, publishes the
# server://info resource, and converts InvocationResults to MCP content.
#
# No tool logic lives here; it only adapts core/ to the protocol.
# =============================================================================
