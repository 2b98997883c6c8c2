"""Parse Markdown checkbox lines into ``TaskRecord`` objects.

Only lines shaped like ``<indent>- [ ] <content>`` (or ``[x]`` / ``[X]``)
are tasks. Every other line -- prose, headings, blank lines, malformed
checkboxes -- parses to ``None``. Parsing never raises.
"""

from __future__ import annotations

from .common import (
    DUE_DATE_RE,
    INDENT_SIZE,
    LINK_RE,
    PRIORITY_MARKERS,
    PRIORITY_NONE,
    RECURRENCE_RE,
    REMOTE_ID_RE,
    SCHEDULED_DATE_RE,
    TAG_RE,
    TASK_RE,
    WHITESPACE_RE,
    TaskRecord,
)


def parse_content(content: str) -> list[TaskRecord]:
    """Parse every task line in *content*.

    Args:
        content: Full outline text.

    Returns:
        Records in line order, each carrying its zero-based line index.
    """
    records: list[TaskRecord] = []
    for index, line in enumerate(content.split("\n")):
        record = parse_line(line, index)
        if record is not None:
            records.append(record)
    return records


def parse_line(line: str, line_number: int) -> TaskRecord | None:
    """Parse a single line as a task.

    Args:
        line: One line of outline text (no trailing newline).
        line_number: Zero-based index of the line in its document.

    Returns:
        The parsed record, or ``None`` if the line is not a task.
    """
    match = TASK_RE.match(line)
    if match is None:
        return None

    indent, checkbox, content = match.groups()

    return TaskRecord(
        line_number=line_number,
        raw_text=line,
        title=clean_title(content),
        tags=extract_tags(content),
        due_date=_first_group(DUE_DATE_RE, content),
        scheduled_date=_first_group(SCHEDULED_DATE_RE, content),
        priority=extract_priority(content),
        remote_id=_first_group(REMOTE_ID_RE, content),
        indent_level=indent_level(indent),
        completed=checkbox.lower() == "x",
    )


def indent_level(indent: str) -> int:
    """Convert leading whitespace to a nesting level (tab = 4 spaces)."""
    spaces = len(indent.replace("\t", " " * INDENT_SIZE))
    return spaces // INDENT_SIZE


def extract_tags(content: str) -> list[str]:
    return TAG_RE.findall(content)


def extract_priority(content: str) -> int:
    """Return the tier of the first priority marker in map order.

    The marker table is scanned in its own order, so with two markers on
    one line the earlier *table* entry wins, not the earlier position in
    the text.
    """
    for marker, priority in PRIORITY_MARKERS.items():
        if marker in content:
            return priority
    return PRIORITY_NONE


def clean_title(content: str) -> str:
    """Strip metadata from task content, leaving the human title.

    Dates, the id marker, tags, recurrence rules and priority markers are
    removed; ``[[links]]`` become their inner text; whitespace runs
    collapse to single spaces.
    """
    title = DUE_DATE_RE.sub("", content, count=1)
    title = SCHEDULED_DATE_RE.sub("", title, count=1)
    title = REMOTE_ID_RE.sub("", title, count=1)
    title = TAG_RE.sub("", title)
    title = RECURRENCE_RE.sub("", title)
    title = LINK_RE.sub(r"\1", title)

    for marker in PRIORITY_MARKERS:
        title = title.replace(marker, "", 1)

    return WHITESPACE_RE.sub(" ", title).strip()


def _first_group(pattern, content: str) -> str | None:
    match = pattern.search(content)
    return match.group(1) if match else None
