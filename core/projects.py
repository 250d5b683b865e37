# =============================================================================
# core/projects.py  -  Project Backlog Logic (pure text, no CLI calls)
# =============================================================================
#
# Projects live in the vault as plain markdown:
#
#   Projects/
#     <project>/
#       overview.md   - frontmatter (description, repo, status, tech) + heading
#       backlog.md    - "- [ ] item" checkbox lines
#
# The Obsidian CLI has no notion of a "project", so the project tools are
# built from ordinary read/append/create/files commands (see handlers.py).
# The text manipulation they need lives here so it can be tested without
# any process.
# =============================================================================

from datetime import date, datetime
from typing import Optional

from core.errors import BacklogItemNotFound

PROJECTS_ROOT = "Projects"
OVERVIEW_FILE = "overview.md"
BACKLOG_FILE = "backlog.md"

OPEN_MARKER = "- [ ] "
DONE_MARKER = "- [x] "
DONE_TIMESTAMP_FORMAT = "%y-%m-%d %H:%M"   # YY-MM-DD HH:mm


def project_path(project: str, filename: str) -> str:
    """Vault path of a file inside a project folder."""
    return f"{PROJECTS_ROOT}/{project}/{filename}"


def backlog_line(item: str, priority: Optional[str] = None) -> str:
    """Format a new backlog entry, e.g. "- [ ] Fix login @high"."""
    if priority:
        return f"{OPEN_MARKER}{item} @{priority}"
    return f"{OPEN_MARKER}{item}"


def mark_done(text: str, item: str, now: datetime) -> tuple[str, str]:
    """Check off the first open backlog line that contains `item`.

    "- [ ] Fix bug"  →  "- [x] Fix bug @done (25-07-14 09:30)"

    Only the matched line changes; every other line, including its line
    ending, is kept byte for byte.

    Returns:
        (new_text, done_line) where done_line has no line ending.

    Raises:
        BacklogItemNotFound: No "- [ ] " line has `item` in its text.
    """
    lines = text.splitlines(keepends=True)
    stamp = now.strftime(DONE_TIMESTAMP_FORMAT)

    for index, line in enumerate(lines):
        body = line.rstrip("\r\n")
        if not body.startswith(OPEN_MARKER):
            continue
        text_part = body[len(OPEN_MARKER):]
        if item not in text_part:
            continue
        ending = line[len(body):]
        done = f"{DONE_MARKER}{text_part} @done ({stamp})"
        lines[index] = done + ending
        return "".join(lines), done

    raise BacklogItemNotFound(item)


def project_names(listing: str) -> list[str]:
    """Derive project names from a `files` listing of the Projects folder.

    "Projects/alpha/backlog.md\\nProjects/alpha/overview.md\\nProjects/beta/x.md"
      → ["alpha", "beta"]

    Names are unique and keep the order in which they first appear.
    Lines outside Projects/ and files directly in Projects/ are ignored.
    """
    prefix = f"{PROJECTS_ROOT}/"
    names: list[str] = []
    seen: set[str] = set()

    for raw in listing.splitlines():
        line = raw.strip()
        if not line.startswith(prefix):
            continue
        rest = line[len(prefix):]
        if "/" not in rest:
            continue
        name = rest.split("/", 1)[0]
        if name and name not in seen:
            seen.add(name)
            names.append(name)

    return names


def overview_document(
    project: str,
    description: str,
    repo: Optional[str] = None,
    tech: Optional[str] = None,
    today: Optional[date] = None,
) -> str:
    """Initial overview.md: metadata frontmatter followed by a heading."""
    created = (today or date.today()).isoformat()
    frontmatter = [
        "---",
        f"description: {_yaml_scalar(description)}",
        f"repo: {_yaml_scalar(repo or '')}",
        "status: active",
    ]
    if tech:
        stack = [part.strip() for part in tech.split(",") if part.strip()]
        frontmatter.append("tech:")
        frontmatter.extend(f"  - {_yaml_scalar(part)}" for part in stack)
    frontmatter.append(f"created: {created}")
    frontmatter.append("---")

    return "\n".join(frontmatter) + f"\n\n# {project}\n\n{description}\n"


def backlog_document(project: str) -> str:
    """Initial backlog.md: a heading and no items."""
    return f"# {project} Backlog\n\n"


def _yaml_scalar(value: str) -> str:
    """Quote a frontmatter value when plain YAML would misread it."""
    if value == "":
        return '""'
    if value[0] in "-?:,[]{}#&*!|>'\"%@`" or ": " in value or " #" in value:
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return value
