# =============================================================================
# core/errors.py  -  Error Taxonomy for Tool Invocations
# =============================================================================
#
# Every way a tool call can fail is one of the exceptions below.  The server
# layer (tools/mcp_server.py) turns them into MCP error results; nothing in
# core/ ever prints or swallows them.
#
#   ValidationError        → bad caller input, raised BEFORE any process runs
#   ObsidianCliError       → the obsidian binary timed out or exited non-zero
#   BacklogItemNotFound    → a compound operation found nothing to change
#   PartialOperationError  → a compound operation failed after a side effect
# =============================================================================

from enum import Enum
from typing import Optional, Sequence


class ErrorKind(str, Enum):
    """Classification attached to every tool failure."""

    UNKNOWN_TOOL = "unknown_tool"
    MISSING_REQUIRED = "missing_required"
    EMPTY_REQUIRED = "empty_required"
    TYPE_MISMATCH = "type_mismatch"
    INVALID_ENUM = "invalid_enum"
    TIMEOUT = "timeout"
    NON_ZERO_EXIT = "non_zero_exit"
    NOT_FOUND = "not_found"
    PARTIAL_FAILURE = "partial_failure"


class ObsidianToolError(Exception):
    """Base class for all classified tool failures."""

    kind: ErrorKind


class ValidationError(ObsidianToolError):
    """Tool input did not match the tool's declared schema.

    Attributes:
        tool_name: The tool the caller asked for.
        kind: Which check failed (unknown tool, missing field, ...).
        expected / actual: Set for TYPE_MISMATCH.
        allowed / value: Set for INVALID_ENUM.
    """

    def __init__(
        self,
        tool_name: str,
        message: str,
        kind: ErrorKind = ErrorKind.TYPE_MISMATCH,
        *,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
        allowed: Optional[Sequence[str]] = None,
        value: Optional[str] = None,
    ) -> None:
        self.tool_name = tool_name
        self.kind = kind
        self.expected = expected
        self.actual = actual
        self.allowed = tuple(allowed) if allowed is not None else None
        self.value = value
        super().__init__(f'Validation error for "{tool_name}": {message}')


class ObsidianCliError(ObsidianToolError):
    """The Obsidian CLI timed out or exited with a non-zero status.

    Carries the exit code and the raw stderr for diagnostics.
    """

    def __init__(
        self,
        message: str,
        exit_code: int,
        stderr: str = "",
        kind: ErrorKind = ErrorKind.NON_ZERO_EXIT,
        command: Optional[Sequence[str]] = None,
    ) -> None:
        self.exit_code = exit_code
        self.stderr = stderr
        self.kind = kind
        self.command = list(command) if command is not None else []
        super().__init__(message)

    @property
    def message(self) -> str:
        return self.args[0]


class BacklogItemNotFound(ObsidianToolError):
    """No unchecked backlog line matched the requested item."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, item: str, project: Optional[str] = None) -> None:
        self.item = item
        self.project = project
        where = f' in project "{project}"' if project else ""
        super().__init__(f'No unchecked backlog item matching "{item}"{where}')


class PartialOperationError(ObsidianToolError):
    """A multi-step operation failed after earlier steps already changed the vault.

    Earlier steps are NOT rolled back: the CLI offers no transactions, so
    `completed` tells the caller what is now in the vault.
    """

    kind = ErrorKind.PARTIAL_FAILURE

    def __init__(self, operation: str, completed: Sequence[str], failed: str, cause: Exception) -> None:
        self.operation = operation
        self.completed = list(completed)
        self.failed = failed
        self.cause = cause
        done = ", ".join(self.completed)
        super().__init__(
            f"{operation} partially completed: created {done} but failed on {failed}: {cause}"
        )
