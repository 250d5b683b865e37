# =============================================================================
# tools/mcp_server.py  -  FastMCP Tool Server (every Obsidian tool, one place)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the tool catalog (core/catalog.py) to an MCP client such as
#   VS Code or Claude Desktop.  Each tool is a thin wrapper: it hands the
#   call to core/handlers.py and turns the result into MCP text content.
#
# HOW IT WORKS (the flow):
#   1. The client lists tools → FastMCP returns the catalog's schemas
#   2. The client calls e.g. "search_vault" with {"query": "TODO"}
#   3. ObsidianTool.run() sends it to ToolDispatcher.invoke() on a worker
#      thread (the obsidian subprocess blocks, the event loop must not)
#   4. The CLI output comes back as a single text content block
#   5. Any failure becomes an MCP error result via ToolError
#
# REGISTRATION:
#   One ObsidianTool per catalog entry, not @mcp.tool() functions.  The
#   schema a client sees is the same dict core/validation.py checks.
#
# RUNNING THIS SERVER:
#   obsidian-mcp            (console script, see main.py)
#   python main.py          (same thing)
# =============================================================================

import asyncio
import logging
import sys
from typing import Any, Mapping, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from pydantic import Field

from core.catalog import TOOLS
from core.errors import ObsidianCliError, ValidationError
from core.handlers import ToolDispatcher

SERVER_NAME = "obsidian-mcp"
EMPTY_OUTPUT = "(no output)"

# =============================================================================
# Logging Setup
# =============================================================================
# We log to STDERR because stdout IS the MCP transport.  A stray log line on
# stdout would corrupt the JSON-RPC stream and disconnect the client.
#
#   CYAN   → incoming tool calls (name + parameters)
#   GREEN  → responses
#   YELLOW → status / failures
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

_PREVIEW_CHARS = 200

logger = logging.getLogger("obsidian_mcp")


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr with the [MCP] prefix."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _log_request(tool_name: str, params: Mapping[str, Any]) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status or failure message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str) -> str:
    """Log a preview of the tool output in GREEN, then return it."""
    preview = text if len(text) <= _PREVIEW_CHARS else text[:_PREVIEW_CHARS] + "…"
    logger.info(f"{_GREEN}  ← {tool_name} response ({len(text)} chars): {preview!r}{_RESET}")
    return text


def format_tool_error(error: BaseException) -> str:
    """Turn a failure from a tool call into the message the client sees."""
    if isinstance(error, ValidationError):
        return str(error)
    if isinstance(error, ObsidianCliError):
        return f"Obsidian CLI error (exit {error.exit_code}): {error.message}"
    return str(error)


class ObsidianTool(Tool):
    """One catalog entry, served by a ToolDispatcher."""

    dispatcher: Any = Field(default=None, exclude=True)

    async def run(self, arguments: dict[str, Any]) -> ToolResult:
        params = arguments or {}
        _log_request(self.name, params)

        try:
            text = await asyncio.to_thread(self.dispatcher.invoke, self.name, params)
        except Exception as exc:
            message = format_tool_error(exc)
            _log_status(f"{self.name} failed: {message}")
            raise ToolError(message) from exc

        _log_response(self.name, text)
        return ToolResult(content=[TextContent(type="text", text=text or EMPTY_OUTPUT)])


# =============================================================================
# Server factory
# =============================================================================
def create_server(dispatcher: Optional[ToolDispatcher] = None) -> FastMCP:
    """Create a FastMCP server with every catalog tool registered.

    Does not start the server; call .run() (stdio by default) for that.

    Args:
        dispatcher: Routes tool calls to the CLI.  Defaults to a dispatcher
            with a default ObsidianCli (no vault, 15 s timeout).
    """
    dispatcher = dispatcher or ToolDispatcher()
    server = FastMCP(SERVER_NAME)

    for entry in TOOLS:
        server.add_tool(
            ObsidianTool(
                name=entry["name"],
                description=entry["description"],
                parameters=entry["inputSchema"],
                dispatcher=dispatcher,
            )
        )

    return server
