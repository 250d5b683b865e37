# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP server.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between the MCP protocol and core/.
#   It advertises the catalog, forwards each call to the dispatcher, and
#   turns results and failures into MCP responses.
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT build command lines (that's core/handlers.py)
#   - They do NOT validate input (that's core/validation.py)
#   - They do NOT start processes (that's core/cli.py)
# =============================================================================
