"""Common types and patterns for the outline task codec."""

from __future__ import annotations

import re

from pydantic import BaseModel

# =============================================================================
# Obsidian Tasks glyphs
# =============================================================================
#
# Inline metadata follows the Obsidian Tasks emoji conventions. The Todoist id
# marker is the one extension this project owns: it is written back by the
# sync passes and is the only durable link between a line and a remote task.
# =============================================================================

DUE_MARKER = "\U0001f4c5"  # 📅
SCHEDULED_MARKER = "\u23f3"  # ⏳
ID_MARKER = "\U0001f194"  # 🆔
RECURRENCE_MARKER = "\U0001f501"  # 🔁
DONE_MARKER = "\u2705"  # ✅

INCOMPLETE_CHECKBOX = "- [ ]"
COMPLETED_CHECKBOX = "- [x]"

INDENT_SIZE = 4

PRIORITY_URGENT = 1
PRIORITY_HIGH = 2
PRIORITY_NONE = 4

# Enumeration order matters: the first marker present in the line wins,
# regardless of where in the line it appears. Todoist has no marker for
# tier 3, so "medium" never comes out of a parse.
PRIORITY_MARKERS: dict[str, int] = {
    "\u23eb": PRIORITY_URGENT,  # ⏫ highest
    "\U0001f53c": PRIORITY_HIGH,  # 🔼 high
    "\U0001f53d": PRIORITY_NONE,  # 🔽 low
    "\u23ec": PRIORITY_NONE,  # ⏬ lowest
}

# =============================================================================
# Regular expressions
# =============================================================================

TASK_RE = re.compile(r"^(\s*)- \[([ xX])\] (.+)$")

DUE_DATE_RE = re.compile(DUE_MARKER + r"\s*(\d{4}-\d{2}-\d{2})")
SCHEDULED_DATE_RE = re.compile(SCHEDULED_MARKER + r"\s*(\d{4}-\d{2}-\d{2})")
REMOTE_ID_RE = re.compile(ID_MARKER + r"\s*(\S+)")
TAG_RE = re.compile(r"#[\w-]+")
LINK_RE = re.compile(r"\[\[([^\]]+)\]\]")
RECURRENCE_RE = re.compile(RECURRENCE_MARKER + r"\s*\S+")

# Used when rewriting lines: swallows the whitespace in front of the marker
# so repeated stamping never accumulates spaces.
REMOTE_ID_TOKEN_RE = re.compile(r"\s*" + ID_MARKER + r"\s*\S+")

WHITESPACE_RE = re.compile(r"\s+")


# =============================================================================
# Parsed record
# =============================================================================


class TaskRecord(BaseModel):
    """Structured attributes extracted from one outline line.

    A record is only meaningful for the text snapshot it was parsed from:
    ``line_number`` indexes into that snapshot split on ``"\\n"``.

    Attributes:
        line_number: Zero-based line index in the source text.
        raw_text: The line exactly as it appeared.
        title: Cleaned title with every recognised marker removed.
        tags: Hashtags in text order, duplicates kept, ``#`` included.
        due_date: ISO date following the due marker, if any.
        scheduled_date: ISO date following the scheduled marker, if any.
        priority: Todoist priority tier (1 urgent ... 4 none).
        remote_id: Todoist task id stamped on the line, if any.
        indent_level: Nesting depth derived from leading whitespace.
        completed: True for ``[x]`` / ``[X]`` checkboxes.
    """

    line_number: int
    raw_text: str
    title: str
    tags: list[str] = []
    due_date: str | None = None
    scheduled_date: str | None = None
    priority: int = PRIORITY_NONE
    remote_id: str | None = None
    indent_level: int = 0
    completed: bool = False

    model_config = {"frozen": True}

    @property
    def outgoing_date(self) -> str | None:
        """Date sent to Todoist: the due date, else the scheduled date."""
        return self.due_date or self.scheduled_date
