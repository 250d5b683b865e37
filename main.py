# =============================================================================
# main.py  -  Entry Point for the Obsidian MCP Server
# =============================================================================
#
# HOW TO RUN:
#   obsidian-mcp               (after `pip install -e .`)
#   python main.py
#
# WHAT HAPPENS:
#   1. Loads .env (OBSIDIAN_VAULT, OBSIDIAN_TIMEOUT, ...) into the environment
#   2. Builds Settings from the environment (core/config.py)
#   3. Creates the ObsidianCli runner with those settings
#   4. Registers every catalog tool on a FastMCP server
#   5. Serves MCP over stdio until the client disconnects
#
# CLIENT CONFIGURATION (e.g. VS Code mcp.json):
#   {
#     "servers": {
#       "obsidian": {
#         "command": "obsidian-mcp",
#         "env": { "OBSIDIAN_VAULT": "My Vault" }
#       }
#     }
#   }
#
# The Obsidian desktop app (v1.12+) must be running: the `obsidian` CLI
# talks to it, and every tool call fails with a CLI error otherwise.
# =============================================================================

import logging

from dotenv import load_dotenv

from core.cli import ObsidianCli
from core.config import load_settings
from core.handlers import ToolDispatcher
from tools.mcp_server import SERVER_NAME, configure_logging, create_server

logger = logging.getLogger("obsidian_mcp")


def main() -> None:
    """Start the Obsidian MCP server on stdio."""
    # .env must be loaded BEFORE settings are read.
    load_dotenv()
    settings = load_settings()
    configure_logging(settings.log_level)

    runner = ObsidianCli(
        binary=settings.binary,
        default_vault=settings.vault,
        timeout=settings.timeout,
    )
    server = create_server(ToolDispatcher(runner))

    logger.info(
        "%s running on stdio (vault=%s, timeout=%gs)",
        SERVER_NAME,
        settings.vault or "<active>",
        settings.timeout,
    )
    server.run()


if __name__ == "__main__":
    main()
