# =============================================================================
# tools/__init__.py
# =============================================================================
# The MCP surface of the server.
#
#   mcp_server.py  FastMCP instance and the five tools
#   schemas.py     pydantic shapes for nested tool arguments
#
# Tools translate between MCP and core/: they read saved preferences, call
# the backend client, format results as JSON text and turn every failure
# into an {"error": ...} payload.  Ordering and formatting rules live in
# core/, not here.
# =============================================================================
