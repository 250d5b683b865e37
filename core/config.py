# =============================================================================
# core/config.py  -  Server Settings (read from the environment)
# =============================================================================
#
# main.py calls load_dotenv() first, so values may come from a .env file or
# from the shell.  Nothing else in core/ reads os.environ: the settings are
# built once at startup and passed explicitly to ObsidianCli.
#
#   OBSIDIAN_VAULT       default vault (appended as vault=<name>)
#   OBSIDIAN_BIN         executable name, resolved on PATH
#   OBSIDIAN_TIMEOUT     per-command timeout in seconds (default 15)
#   OBSIDIAN_LOG_LEVEL   logging level for the server (default INFO)
# =============================================================================

import logging
import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_BINARY = "obsidian"
DEFAULT_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration for the Obsidian MCP server."""

    vault: Optional[str] = None
    binary: str = DEFAULT_BINARY
    timeout: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = "INFO"


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None or not raw.strip():
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Invalid OBSIDIAN_TIMEOUT=%r; using %.0fs", raw, DEFAULT_TIMEOUT_SECONDS)
        return DEFAULT_TIMEOUT_SECONDS
    if not math.isfinite(value) or value <= 0:
        logger.warning("Non-positive OBSIDIAN_TIMEOUT=%r; using %.0fs", raw, DEFAULT_TIMEOUT_SECONDS)
        return DEFAULT_TIMEOUT_SECONDS
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment (or from an explicit mapping, for tests)."""
    env = os.environ if environ is None else environ

    vault = (env.get("OBSIDIAN_VAULT") or "").strip() or None
    binary = (env.get("OBSIDIAN_BIN") or "").strip() or DEFAULT_BINARY

    return Settings(
        vault=vault,
        binary=binary,
        timeout=_parse_timeout(env.get("OBSIDIAN_TIMEOUT")),
        log_level=(env.get("OBSIDIAN_LOG_LEVEL") or "INFO").upper(),
    )
