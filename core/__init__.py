# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains the tool-invocation pipeline:
#
#   catalog.py     tool names, descriptions, input schemas (data only)
#   validation.py  checks tool input against the catalog schemas
#   cli.py         builds argument lists and runs the obsidian binary
#   projects.py    text helpers for the project backlog tools
#   handlers.py    maps a tool call onto one or more CLI commands
#
# CRITICAL ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or any MCP code.  The server
#   layer (tools/) depends on core/, never the other way round, so every
#   module here can be tested with a fake runner and no MCP client.
# =============================================================================
