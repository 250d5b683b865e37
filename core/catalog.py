# =============================================================================
# core/catalog.py  -  Tool Catalog (names, descriptions, input schemas)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Declares every tool the server exposes as plain data: a name, the
#   description the client's LLM reads, and a JSON Schema for the input.
#
#   Nothing here executes anything.  The catalog is read by two consumers:
#     - core/validation.py checks tool input against the schemas
#     - tools/mcp_server.py advertises the tools to the MCP client
#   The command each tool runs lives in core/handlers.py.
#
# TOOL GROUPS:
#   1. Core notes      - create, read, append, prepend, search, daily note
#   2. Discovery       - vault info, files, tags, backlinks, outline
#   3. Properties      - set, read, list, remove frontmatter properties
#   4. Tasks           - list and toggle task checkboxes
#   5. Daily (ext.)    - read and prepend to the daily note
#   6. Templates       - list and read templates
#   7. Links / Tags    - outgoing links, single-tag detail
#   8. Files / Bases   - move files, query Bases views
#   9. Projects        - per-project backlog, overview, listing, creation
# =============================================================================

from typing import Any, Optional

_PROJECT_DESCRIPTION = "Project name (used as folder name under Projects/)"


def _object_schema(
    properties: dict[str, dict[str, Any]],
    required: Optional[list[str]] = None,
) -> dict[str, Any]:
    """Wrap property definitions in an object schema; omit an empty 'required'."""
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


def _string(description: str, enum: Optional[list[str]] = None) -> dict[str, Any]:
    prop: dict[str, Any] = {"type": "string", "description": description}
    if enum is not None:
        prop["enum"] = enum
    return prop


def _number(description: str) -> dict[str, Any]:
    return {"type": "number", "description": description}


def _boolean(description: str) -> dict[str, Any]:
    return {"type": "boolean", "description": description}


def _note_target(file_description: str = "Note name") -> dict[str, dict[str, Any]]:
    """The file/path pair most note tools use to identify a note."""
    return {
        "file": _string(file_description),
        "path": _string("Exact path from vault root (e.g. 'folder/note.md')"),
    }


TOOLS: list[dict[str, Any]] = [
    # -------------------------------------------------------------------------
    # 1. Core: note management
    # -------------------------------------------------------------------------
    {
        "name": "create_note",
        "description": (
            "Create a new note in the Obsidian vault. Supports optional content and templates. "
            "Use this when you need to record a new session, decision, or piece of documentation."
        ),
        "inputSchema": _object_schema(
            {
                "name": _string("Note name (without .md extension)"),
                "content": _string(
                    "Initial content for the note. Supports markdown. Use \\n for newlines."
                ),
                "template": _string("Template name to use for the note"),
                "overwrite": _boolean("Overwrite if a note with this name already exists"),
            },
            ["name"],
        ),
    },
    {
        "name": "read_note",
        "description": (
            "Read the full contents of a note. Returns the markdown content including frontmatter. "
            "Provide at least one of 'file' or 'path' to identify the note."
        ),
        "inputSchema": _object_schema(
            _note_target("Note name (resolved like internal links, no path or extension needed)")
        ),
    },
    {
        "name": "append_to_note",
        "description": (
            "Append content to the end of an existing note. Useful for adding session logs, "
            "tasks, or follow-up notes to an existing document."
        ),
        "inputSchema": _object_schema(
            {
                **_note_target("Note name to append to"),
                "content": _string("Content to append. Use \\n for newlines."),
            },
            ["content"],
        ),
    },
    {
        "name": "prepend_to_note",
        "description": (
            "Prepend content after the frontmatter of a note. Useful for adding a summary or "
            "status update at the top of an existing document."
        ),
        "inputSchema": _object_schema(
            {
                **_note_target("Note name to prepend to"),
                "content": _string("Content to prepend. Use \\n for newlines."),
            },
            ["content"],
        ),
    },
    {
        "name": "search_vault",
        "description": (
            "Search the vault for text. Returns matching files and context. "
            "Use Obsidian's full search syntax (supports operators, tags, paths)."
        ),
        "inputSchema": _object_schema(
            {
                "query": _string("Search query (supports Obsidian search syntax)"),
                "path": _string("Limit search to a folder path"),
                "limit": _number("Maximum number of results"),
                "format": _string("Output format (default: json)", ["text", "json"]),
            },
            ["query"],
        ),
    },
    {
        "name": "daily_note",
        "description": (
            "Get today's daily note path, creating it if it doesn't exist. "
            "Returns the file path of the daily note."
        ),
        "inputSchema": _object_schema({}),
    },
    {
        "name": "daily_append",
        "description": (
            "Append content to today's daily note. Creates the daily note if it doesn't exist. "
            "Useful for logging tasks, session summaries, or quick entries."
        ),
        "inputSchema": _object_schema(
            {"content": _string("Content to append to the daily note. Use \\n for newlines.")},
            ["content"],
        ),
    },
    # -------------------------------------------------------------------------
    # 2. Discovery & context
    # -------------------------------------------------------------------------
    {
        "name": "get_vault_info",
        "description": (
            "Get information about the Obsidian vault: name, path, file count, "
            "folder count, and size."
        ),
        "inputSchema": _object_schema(
            {
                "info": _string(
                    "Return only a specific piece of info",
                    ["name", "path", "files", "folders", "size"],
                ),
            }
        ),
    },
    {
        "name": "list_files",
        "description": "List files in the vault. Can filter by folder and/or file extension.",
        "inputSchema": _object_schema(
            {
                "folder": _string("Filter to files in this folder"),
                "ext": _string("Filter by file extension (e.g. 'md', 'png')"),
                "total": _boolean("Return only the file count instead of the list"),
            }
        ),
    },
    {
        "name": "get_tags",
        "description": (
            "List all tags in the vault with their occurrence counts. "
            "Always returns all tags with counts included."
        ),
        "inputSchema": _object_schema(
            {"sort": _string("Sort order (default: name)", ["name", "count"])}
        ),
    },
    {
        "name": "get_backlinks",
        "description": (
            "List all notes that link to a given note (backlinks/incoming links). "
            "Provide at least one of 'file' or 'path' to identify the note."
        ),
        "inputSchema": _object_schema(_note_target("Note name to find backlinks for")),
    },
    {
        "name": "get_outline",
        "description": "Get the heading structure/outline of a note.",
        "inputSchema": _object_schema(
            {
                **_note_target(),
                "format": _string("Output format (default: tree)", ["tree", "md"]),
            }
        ),
    },
    # -------------------------------------------------------------------------
    # 3. Properties / metadata
    # -------------------------------------------------------------------------
    {
        "name": "set_property",
        "description": (
            "Set a frontmatter property on a note. Supports text, list, number, checkbox, "
            "date, datetime types."
        ),
        "inputSchema": _object_schema(
            {
                "name": _string("Property name"),
                "value": _string("Property value"),
                "type": _string(
                    "Property type",
                    ["text", "list", "number", "checkbox", "date", "datetime"],
                ),
                **_note_target(),
            },
            ["name", "value"],
        ),
    },
    {
        "name": "read_property",
        "description": "Read a frontmatter property value from a note.",
        "inputSchema": _object_schema(
            {"name": _string("Property name to read"), **_note_target()},
            ["name"],
        ),
    },
    {
        "name": "list_properties",
        "description": (
            "List all frontmatter properties used across the vault, or on a specific note. "
            "Returns property names with occurrence counts."
        ),
        "inputSchema": _object_schema(
            {
                **_note_target("Note name to list properties for (omit for vault-wide)"),
                "sort": _string("Sort order (default: name)", ["name", "count"]),
            }
        ),
    },
    {
        "name": "remove_property",
        "description": "Remove a frontmatter property from a note.",
        "inputSchema": _object_schema(
            {"name": _string("Property name to remove"), **_note_target()},
            ["name"],
        ),
    },
    # -------------------------------------------------------------------------
    # 4. Tasks
    # -------------------------------------------------------------------------
    {
        "name": "list_tasks",
        "description": (
            "List tasks from notes. Can filter by file, completion status, or show tasks "
            "from the daily note."
        ),
        "inputSchema": _object_schema(
            {
                "file": _string("Filter tasks to a specific note"),
                "path": _string("Filter tasks by file path"),
                "all": _boolean("List all tasks in the vault"),
                "daily": _boolean("Show tasks from today's daily note"),
                "done": _boolean("Show only completed tasks"),
                "todo": _boolean("Show only incomplete tasks"),
                "verbose": _boolean("Group by file with line numbers"),
            }
        ),
    },
    {
        "name": "toggle_task",
        "description": (
            "Toggle a task's completion status. "
            "Identify the task by 'ref' (path:line) or by 'file' and 'line' together."
        ),
        "inputSchema": _object_schema(
            {
                "ref": _string("Task reference in path:line format (e.g. 'Recipe.md:8')"),
                "file": _string("Note name containing the task"),
                "line": _number("Line number of the task"),
            }
        ),
    },
    # -------------------------------------------------------------------------
    # 5. Daily notes (extended)
    # -------------------------------------------------------------------------
    {
        "name": "daily_read",
        "description": (
            "Read the contents of today's daily note. Returns the full markdown content "
            "including frontmatter. Creates the daily note if it doesn't exist."
        ),
        "inputSchema": _object_schema({}),
    },
    {
        "name": "daily_prepend",
        "description": (
            "Prepend content after the frontmatter of today's daily note. Useful for "
            "adding standup summaries or status updates at the top of the daily note."
        ),
        "inputSchema": _object_schema(
            {"content": _string("Content to prepend. Use \\n for newlines.")},
            ["content"],
        ),
    },
    # -------------------------------------------------------------------------
    # 6. Templates
    # -------------------------------------------------------------------------
    {
        "name": "list_templates",
        "description": (
            "List all available templates in the vault. Returns template names that can "
            "be used with create_note's template parameter."
        ),
        "inputSchema": _object_schema(
            {"total": _boolean("Return only the template count instead of the list")}
        ),
    },
    {
        "name": "read_template",
        "description": (
            "Read the contents of a template. Optionally resolves template variables "
            "like {{date}}, {{time}}, and {{title}}."
        ),
        "inputSchema": _object_schema(
            {
                "name": _string("Template name (without path or extension)"),
                "resolve": _boolean("Resolve template variables ({{date}}, {{time}}, {{title}})"),
            },
            ["name"],
        ),
    },
    # -------------------------------------------------------------------------
    # 7. Links & tags (extended)
    # -------------------------------------------------------------------------
    {
        "name": "get_links",
        "description": (
            "List all outgoing links from a note. Returns the files that the given note "
            "links to. The complement of get_backlinks."
        ),
        "inputSchema": _object_schema(_note_target("Note name to find outgoing links for")),
    },
    {
        "name": "get_tag_info",
        "description": (
            "Get detailed information about a specific tag, including occurrence count "
            "and the list of files that use it."
        ),
        "inputSchema": _object_schema(
            {
                "tag": _string("Tag name (with or without # prefix)"),
                "verbose": _boolean("Include the list of files using this tag"),
            },
            ["tag"],
        ),
    },
    # -------------------------------------------------------------------------
    # 8. File management & Bases
    # -------------------------------------------------------------------------
    {
        "name": "move_file",
        "description": (
            "Move or rename a file in the vault. Obsidian will automatically update "
            "all internal links to the moved file."
        ),
        "inputSchema": _object_schema(
            {
                "from": _string("Current file path from vault root"),
                "to": _string("New file path from vault root"),
            },
            ["from", "to"],
        ),
    },
    {
        "name": "query_base",
        "description": (
            "Query an Obsidian Base and return structured results. Bases provide "
            "database-like views of notes filtered by tags, properties, and folders."
        ),
        "inputSchema": _object_schema(
            {
                "base": _string("Base file name or path (e.g. 'ADRs' or 'Bases/ADRs.base')"),
                "view": _string("View name within the base (uses first view if omitted)"),
                "format": _string(
                    "Output format (default: json)", ["json", "csv", "tsv", "md", "paths"]
                ),
                "limit": _number("Maximum number of results"),
            },
            ["base"],
        ),
    },
    # -------------------------------------------------------------------------
    # 9. Project management
    # -------------------------------------------------------------------------
    {
        "name": "backlog_add",
        "description": (
            "Add an item to a project's backlog. The backlog is stored at "
            "'Projects/<project>/backlog.md'. Creates the file if it does not exist. "
            "Items are appended as task checkboxes. Use the priority parameter to tag "
            "an item with @high, @medium, or @low."
        ),
        "inputSchema": _object_schema(
            {
                "project": _string(_PROJECT_DESCRIPTION),
                "item": _string("Backlog item description"),
                "priority": _string(
                    "Priority tag appended as @high, @medium, or @low",
                    ["high", "medium", "low"],
                ),
            },
            ["project", "item"],
        ),
    },
    {
        "name": "backlog_read",
        "description": (
            "Read a project's backlog. Returns the contents of "
            "'Projects/<project>/backlog.md'."
        ),
        "inputSchema": _object_schema({"project": _string(_PROJECT_DESCRIPTION)}, ["project"]),
    },
    {
        "name": "backlog_done",
        "description": (
            "Mark a backlog item as done. Finds the first unchecked item whose text "
            "contains the given substring and checks it off with a @done timestamp. "
            "The item is changed from '- [ ] item' to '- [x] item @done (YY-MM-DD HH:mm)'."
        ),
        "inputSchema": _object_schema(
            {
                "project": _string(_PROJECT_DESCRIPTION),
                "item": _string(
                    "Substring to match against unchecked backlog items. "
                    "The first matching '- [ ]' line is marked as done."
                ),
            },
            ["project", "item"],
        ),
    },
    {
        "name": "project_list",
        "description": "List all projects in the vault. Returns the folder names under Projects/.",
        "inputSchema": _object_schema({}),
    },
    {
        "name": "project_overview",
        "description": (
            "Read a project's overview. Returns the contents of "
            "'Projects/<project>/overview.md', which contains project metadata "
            "such as description, repo URL, status, and tech stack."
        ),
        "inputSchema": _object_schema({"project": _string(_PROJECT_DESCRIPTION)}, ["project"]),
    },
    {
        "name": "project_create",
        "description": (
            "Create a new project. Sets up 'Projects/<project>/overview.md' with "
            "metadata frontmatter and 'Projects/<project>/backlog.md' with a heading. "
            "Use this when starting work on a project for the first time."
        ),
        "inputSchema": _object_schema(
            {
                "project": _string("Project name (becomes the folder name under Projects/)"),
                "description": _string("One-line project description"),
                "repo": _string("Repository URL (e.g. https://github.com/user/repo)"),
                "tech": _string("Comma-separated tech stack (e.g. 'TypeScript, React, Vitest')"),
            },
            ["project", "description"],
        ),
    },
]

_TOOLS_BY_NAME: dict[str, dict[str, Any]] = {tool["name"]: tool for tool in TOOLS}


def get_tool(name: str) -> Optional[dict[str, Any]]:
    """Look up a tool definition by name, or None if the catalog has no such tool."""
    return _TOOLS_BY_NAME.get(name)


def tool_names() -> list[str]:
    """All tool names, in catalog order."""
    return [tool["name"] for tool in TOOLS]
