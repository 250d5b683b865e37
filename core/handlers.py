# =============================================================================
# core/handlers.py  -  Tool Dispatcher (tool name → obsidian command)
# =============================================================================
#
# HOW A TOOL CALL FLOWS:
#
#   ToolDispatcher.invoke("search_vault", {"query": "TODO"})
#     1. validate_input()  - schema check, raises before anything runs
#     2. pick the command  - COMMANDS table, or a composite handler below
#     3. build_args()      - ["search", "query=TODO", "format=json"]
#     4. runner.run()      - ObsidianCli in production, a fake in tests
#
# SIMPLE vs COMPOSITE TOOLS:
#   Most tools map onto exactly one CLI command and are described as data
#   in COMMANDS.  A few always set a flag the client never sees ("silent"
#   so Obsidian doesn't steal focus, "all"/"counts" so tags and properties
#   come back with numbers); those flags are part of the table and can't be
#   turned off.
#
#   The project tools have no CLI counterpart.  They are built from several
#   commands run one after another, each step using the previous output:
#     backlog_done   - read backlog → rewrite one line → create (overwrite)
#     project_list   - files under Projects/ → unique folder names
#     project_create - create overview.md → create backlog.md
#   These are NOT transactional.  If project_create fails on the second
#   file, the first one stays in the vault and PartialOperationError says so.
# =============================================================================

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional

from core.cli import ObsidianCli, ProcessRunner, build_args
from core.errors import (
    BacklogItemNotFound,
    ErrorKind,
    ObsidianCliError,
    PartialOperationError,
    ValidationError,
)
from core.models import ParameterBag, ToolCommand
from core.projects import (
    BACKLOG_FILE,
    OVERVIEW_FILE,
    PROJECTS_ROOT,
    backlog_document,
    backlog_line,
    mark_done,
    overview_document,
    project_names,
    project_path,
)
from core.validation import validate_input

logger = logging.getLogger(__name__)

_NOTE_TARGET = ("file", "path")


# =============================================================================
# Simple tools: one tool → one CLI command
# =============================================================================
COMMANDS: dict[str, ToolCommand] = {
    # --- Core: note management ---
    "create_note": ToolCommand(
        "create", ("name", "content", "template", "overwrite"), flags=("silent",)
    ),
    "read_note": ToolCommand("read", _NOTE_TARGET),
    "append_to_note": ToolCommand("append", (*_NOTE_TARGET, "content"), flags=("silent",)),
    "prepend_to_note": ToolCommand("prepend", (*_NOTE_TARGET, "content"), flags=("silent",)),
    "search_vault": ToolCommand(
        "search", ("query", "path", "limit", "format"), defaults={"format": "json"}
    ),
    "daily_note": ToolCommand("daily", flags=("silent",)),
    "daily_append": ToolCommand("daily:append", ("content",), flags=("silent",)),
    # --- Discovery & context ---
    "get_vault_info": ToolCommand("vault", ("info",)),
    "list_files": ToolCommand("files", ("folder", "ext", "total")),
    # The CLI needs `all` and `counts` to return a useful listing.
    "get_tags": ToolCommand("tags", ("sort",), flags=("all", "counts")),
    "get_backlinks": ToolCommand("backlinks", _NOTE_TARGET),
    "get_outline": ToolCommand("outline", (*_NOTE_TARGET, "format")),
    # --- Properties / metadata ---
    "set_property": ToolCommand("property:set", ("name", "value", "type", *_NOTE_TARGET)),
    "read_property": ToolCommand("property:read", ("name", *_NOTE_TARGET)),
    "list_properties": ToolCommand("properties", (*_NOTE_TARGET, "sort"), flags=("counts",)),
    "remove_property": ToolCommand("property:remove", ("name", *_NOTE_TARGET)),
    # --- Tasks ---
    "list_tasks": ToolCommand(
        "tasks", (*_NOTE_TARGET, "all", "daily", "done", "todo", "verbose")
    ),
    "toggle_task": ToolCommand("task", ("ref", "file", "line"), flags=("toggle",)),
    # --- Daily notes (extended) ---
    "daily_read": ToolCommand("daily:read"),
    "daily_prepend": ToolCommand("daily:prepend", ("content",), flags=("silent",)),
    # --- Templates ---
    "list_templates": ToolCommand("templates", ("total",)),
    "read_template": ToolCommand("template:read", ("name", "resolve")),
    # --- Links & tags (extended) ---
    "get_links": ToolCommand("links", _NOTE_TARGET),
    "get_tag_info": ToolCommand("tag", ("tag", "verbose")),
    # --- Files & Bases ---
    "move_file": ToolCommand("move", ("from", "to"), flags=("silent",)),
    "query_base": ToolCommand(
        "base:query", ("base", "view", "format", "limit"), defaults={"format": "json"}
    ),
}


def command_args(entry: ToolCommand, params: ParameterBag) -> list[str]:
    """Argument list for a simple tool: forwarded keys, defaults, forced flags."""
    bag: dict[str, Any] = {}
    for key in entry.params:
        value = params.get(key)
        if value is None:
            value = entry.defaults.get(key)
        bag[key] = value
    for flag in entry.flags:
        bag[flag] = True
    return build_args(entry.command, bag)


class ToolDispatcher:
    """Route a tool call to the Obsidian CLI through a ProcessRunner.

    Args:
        runner: Anything with ObsidianCli's run() signature.  Defaults to
            an ObsidianCli with default settings.
        clock: Returns "now" for @done timestamps (injectable for tests).
    """

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.runner: ProcessRunner = runner if runner is not None else ObsidianCli()
        self.clock = clock
        self._composites: dict[str, Callable[[ParameterBag, Optional[str]], str]] = {
            "backlog_add": self._backlog_add,
            "backlog_read": self._backlog_read,
            "backlog_done": self._backlog_done,
            "project_list": self._project_list,
            "project_overview": self._project_overview,
            "project_create": self._project_create,
        }

    def invoke(self, name: str, params: Optional[ParameterBag] = None, *, vault: Optional[str] = None) -> str:
        """Validate the input, run the tool's command(s), return the CLI output.

        Args:
            name: Tool name from the catalog.
            params: Tool input.  None values are treated as absent.
            vault: Per-call vault; overrides the runner's default vault.

        Raises:
            ValidationError: Input failed the schema check (nothing ran).
            ObsidianCliError: The CLI timed out or exited non-zero.
            BacklogItemNotFound: backlog_done found no matching item.
            PartialOperationError: project_create failed after creating overview.md.
        """
        params = params or {}
        validate_input(name, params)

        entry = COMMANDS.get(name)
        if entry is not None:
            return self._run(command_args(entry, params), vault)

        handler = self._composites.get(name)
        if handler is None:
            # Listed in the catalog but never wired up here.
            raise ValidationError(name, f'Unknown tool "{name}"', ErrorKind.UNKNOWN_TOOL)
        return handler(params, vault)

    def _run(self, args: list[str], vault: Optional[str]) -> str:
        return self.runner.run(args, vault=vault)

    # -------------------------------------------------------------------------
    # Project backlog
    # -------------------------------------------------------------------------
    def _backlog_add(self, params: ParameterBag, vault: Optional[str]) -> str:
        line = backlog_line(str(params["item"]), params.get("priority"))
        return self._run(
            build_args("append", {
                "path": project_path(str(params["project"]), BACKLOG_FILE),
                "content": line,
                "silent": True,
            }),
            vault,
        )

    def _backlog_read(self, params: ParameterBag, vault: Optional[str]) -> str:
        path = project_path(str(params["project"]), BACKLOG_FILE)
        return self._run(build_args("read", {"path": path}), vault)

    def _backlog_done(self, params: ParameterBag, vault: Optional[str]) -> str:
        project = str(params["project"])
        item = str(params["item"])
        path = project_path(project, BACKLOG_FILE)

        # Step 1: read the current backlog
        text = self._run(build_args("read", {"path": path}), vault)

        # Step 2: rewrite the first matching open item
        try:
            new_text, done = mark_done(text, item, self.clock())
        except BacklogItemNotFound:
            raise BacklogItemNotFound(item, project) from None
        if not new_text.endswith("\n"):
            new_text += "\n"

        # Step 3: write the whole file back
        self._run(
            build_args("create", {
                "path": path,
                "content": new_text,
                "overwrite": True,
                "silent": True,
            }),
            vault,
        )
        logger.info("Backlog item done in %s: %s", project, done)
        return f"Marked done: {done}"

    # -------------------------------------------------------------------------
    # Projects
    # -------------------------------------------------------------------------
    def _project_list(self, params: ParameterBag, vault: Optional[str]) -> str:
        listing = self._run(build_args("files", {"folder": PROJECTS_ROOT}), vault)
        names = project_names(listing)
        if not names:
            return "No projects found"
        return "\n".join(names)

    def _project_overview(self, params: ParameterBag, vault: Optional[str]) -> str:
        path = project_path(str(params["project"]), OVERVIEW_FILE)
        return self._run(build_args("read", {"path": path}), vault)

    def _project_create(self, params: ParameterBag, vault: Optional[str]) -> str:
        project = str(params["project"])
        overview_path = project_path(project, OVERVIEW_FILE)
        backlog_path = project_path(project, BACKLOG_FILE)

        overview = overview_document(
            project,
            str(params["description"]),
            repo=params.get("repo"),
            tech=params.get("tech"),
            today=self.clock().date(),
        )

        # Step 1: overview.md.  A failure here has no side effect to report.
        self._run(
            build_args("create", {"path": overview_path, "content": overview, "silent": True}),
            vault,
        )

        # Step 2: backlog.md.  overview.md already exists and stays.
        try:
            self._run(
                build_args("create", {
                    "path": backlog_path,
                    "content": backlog_document(project),
                    "silent": True,
                }),
                vault,
            )
        except ObsidianCliError as exc:
            logger.warning("project_create left %s without %s: %s", overview_path, backlog_path, exc)
            raise PartialOperationError("project_create", [overview_path], backlog_path, exc) from exc

        return f'Created project "{project}": {overview_path}, {backlog_path}'


_default_dispatcher: Optional[ToolDispatcher] = None


def handle_tool(name: str, params: Optional[Mapping[str, Any]] = None, runner: Optional[ProcessRunner] = None) -> str:
    """Route one tool call.  Uses a shared default dispatcher unless a runner is given."""
    global _default_dispatcher
    if runner is not None:
        return ToolDispatcher(runner).invoke(name, params)
    if _default_dispatcher is None:
        _default_dispatcher = ToolDispatcher()
    return _default_dispatcher.invoke(name, params)
