# =============================================================================
# core/models.py  -  Data Models (the "nouns" of the tool pipeline)
# =============================================================================
#
# These dataclasses describe the data that flows through a tool call:
#
#   ParameterBag   →  what the client sent        (validated, never mutated)
#   ToolSchema     →  what the catalog declares   (parsed once, cached)
#   ToolCommand    →  which CLI command a tool maps to
#   CliResult      →  what the obsidian process returned
#
# They carry no behavior.  Everything that acts on them lives in
# validation.py, cli.py and handlers.py.
# =============================================================================

from dataclasses import dataclass, field
from typing import Mapping, Optional, Union

# A scalar tool parameter as it arrives over MCP.  None means "not given".
ParamValue = Union[str, int, float, bool, None]

# Insertion order matters: it becomes the CLI argument order.
ParameterBag = Mapping[str, ParamValue]


# -----------------------------------------------------------------------------
# PropertySchema / ToolSchema - the validator's view of a catalog entry
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class PropertySchema:
    """Declared type (and allowed values) of one tool parameter."""

    type: Optional[str] = None                 # "string", "number" or "boolean"
    enum: Optional[tuple[str, ...]] = None     # allowed values, if restricted


@dataclass(frozen=True)
class ToolSchema:
    """The parts of a tool's input schema the validator needs.

    `required` keeps the catalog's order so the first missing field reported
    is the first one the catalog lists.
    """

    required: tuple[str, ...]
    properties: Mapping[str, PropertySchema]


# -----------------------------------------------------------------------------
# ToolCommand - a tool that maps 1:1 onto a single CLI command
# -----------------------------------------------------------------------------
# Example: search_vault → ToolCommand("search", ("query", "path", "limit",
# "format"), defaults={"format": "json"}) produces
#   ["search", "query=TODO", "format=json"]
# for input {"query": "TODO"}.
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class ToolCommand:
    """How a simple tool's input becomes one obsidian command line."""

    command: str                               # CLI subcommand, e.g. "property:set"
    params: tuple[str, ...] = ()               # forwarded input keys, in CLI order
    defaults: Mapping[str, str] = field(default_factory=dict)
    flags: tuple[str, ...] = ()                # always-on flags, appended last


# -----------------------------------------------------------------------------
# CliResult - raw output of one obsidian invocation
# -----------------------------------------------------------------------------
@dataclass
class CliResult:
    """What the obsidian process produced, before success/failure is decided."""

    stdout: str
    stderr: str
    exit_code: int
