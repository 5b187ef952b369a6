# =============================================================================
# core/__init__.py
# =============================================================================
# Framework-free logic for the Doppio Coffee MCP server: configuration, data
# models, the preference store, the backend HTTP client, ordering rules and
# response formatting.
#
# Nothing in this package imports FastMCP.  The tools/ layer wires these
# pieces to MCP; everything here can be exercised from a plain test.
# =============================================================================

__version__ = "1.0.0"
