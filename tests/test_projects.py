"""Tests for the project backlog text helpers."""

from datetime import date, datetime

import pytest

from core.errors import BacklogItemNotFound, ErrorKind
from core.projects import (
    backlog_document,
    backlog_line,
    mark_done,
    overview_document,
    project_names,
    project_path,
)

NOW = datetime(2025, 7, 14, 9, 30)


class TestBacklogLine:
    def test_plain(self):
        assert backlog_line("Fix login") == "- [ ] Fix login"

    def test_priority(self):
        assert backlog_line("Fix login", "high") == "- [ ] Fix login @high"

    def test_path(self):
        assert project_path("alpha", "backlog.md") == "Projects/alpha/backlog.md"


# ---------------------------------------------------------------------------
# mark_done
# ---------------------------------------------------------------------------

class TestMarkDone:
    def test_marks_first_match(self):
        text = "- [ ] Fix bug\n- [ ] Write docs\n"
        new_text, done = mark_done(text, "Fix", NOW)
        assert done == "- [x] Fix bug @done (25-07-14 09:30)"
        assert new_text == "- [x] Fix bug @done (25-07-14 09:30)\n- [ ] Write docs\n"

    def test_only_first_of_several_matches(self):
        text = "- [ ] docs one\n- [ ] docs two\n"
        new_text, _ = mark_done(text, "docs", NOW)
        assert new_text.splitlines()[1] == "- [ ] docs two"

    def test_skips_checked_items(self):
        text = "- [x] Fix bug @done (25-01-01 10:00)\n- [ ] Fix bug again\n"
        new_text, done = mark_done(text, "Fix bug", NOW)
        assert done == "- [x] Fix bug again @done (25-07-14 09:30)"
        assert new_text.startswith("- [x] Fix bug @done (25-01-01 10:00)\n")

    def test_substring_is_case_sensitive(self):
        with pytest.raises(BacklogItemNotFound):
            mark_done("- [ ] Fix bug\n", "fix", NOW)

    def test_keeps_other_lines_and_endings(self):
        text = "# alpha Backlog\r\n\r\n- [ ] one\r\n- [ ] two"
        new_text, _ = mark_done(text, "two", NOW)
        assert new_text == "# alpha Backlog\r\n\r\n- [ ] one\r\n- [x] two @done (25-07-14 09:30)"

    def test_keeps_priority_tag(self):
        _, done = mark_done("- [ ] Ship it @high\n", "Ship", NOW)
        assert done == "- [x] Ship it @high @done (25-07-14 09:30)"

    def test_not_found(self):
        with pytest.raises(BacklogItemNotFound) as exc_info:
            mark_done("# Backlog\n\n- [x] done already\n", "missing", NOW)
        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert str(exc_info.value) == 'No unchecked backlog item matching "missing"'

    def test_marker_itself_is_not_matched(self):
        text = "- [ ] Fix bug\n- [ ] Write docs\n"
        for item in ("[ ]", "- ", "- [ ] Fix"):
            with pytest.raises(BacklogItemNotFound):
                mark_done(text, item, NOW)

    def test_indented_lines_do_not_match(self):
        with pytest.raises(BacklogItemNotFound):
            mark_done("  - [ ] nested item\n", "nested", NOW)


# ---------------------------------------------------------------------------
# project_names
# ---------------------------------------------------------------------------

class TestProjectNames:
    def test_unique_in_first_seen_order(self):
        listing = (
            "Projects/beta/overview.md\n"
            "Projects/alpha/backlog.md\n"
            "Projects/beta/backlog.md\n"
            "Projects/alpha/notes/deep.md\n"
        )
        assert project_names(listing) == ["beta", "alpha"]

    def test_ignores_other_lines(self):
        listing = "Projects/readme.md\nInbox/x.md\n\n  Projects/gamma/overview.md  \n"
        assert project_names(listing) == ["gamma"]

    def test_empty(self):
        assert project_names("") == []


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

class TestDocuments:
    def test_overview_minimal(self):
        doc = overview_document("alpha", "A test project", today=date(2025, 7, 14))
        assert doc == (
            "---\n"
            "description: A test project\n"
            'repo: ""\n'
            "status: active\n"
            "created: 2025-07-14\n"
            "---\n"
            "\n"
            "# alpha\n"
            "\n"
            "A test project\n"
        )

    def test_overview_with_repo_and_tech(self):
        doc = overview_document(
            "alpha",
            "Desc",
            repo="https://github.com/user/alpha",
            tech="Python, FastMCP, ,pytest",
            today=date(2025, 7, 14),
        )
        assert "repo: https://github.com/user/alpha\n" in doc
        assert "tech:\n  - Python\n  - FastMCP\n  - pytest\ncreated: 2025-07-14\n" in doc

    def test_overview_quotes_awkward_values(self):
        doc = overview_document("a", 'Notes: "draft"', today=date(2025, 7, 14))
        assert 'description: "Notes: \\"draft\\""\n' in doc

    def test_backlog_document(self):
        assert backlog_document("alpha") == "# alpha Backlog\n\n"
