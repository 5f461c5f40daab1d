# =============================================================================
# core/__init__.py
# =============================================================================
# The toolbox itself: input schemas, the tool registry/dispatcher, and one
# module per tool (greeting, calculator, clock, geocoding, weather,
# image_generation) plus the server://info document.
#
# Nothing in this package imports FastMCP.  The MCP wiring lives in tools/.
# =============================================================================
