"""Rewrite task lines to reflect sync state.

The formatter only touches the sync metadata it owns (the id marker, the
checkbox and the completion stamp); the rest of the line is preserved
except for trailing whitespace, which is trimmed. A CRLF line keeps its
carriage return.
"""

from __future__ import annotations

from .common import (
    COMPLETED_CHECKBOX,
    DONE_MARKER,
    ID_MARKER,
    INCOMPLETE_CHECKBOX,
    REMOTE_ID_TOKEN_RE,
)


def append_id(line: str, remote_id: str) -> str:
    """Stamp *remote_id* on *line*, replacing any id already present."""
    body, eol = _split_eol(line)
    return f"{remove_id(body)} {ID_MARKER} {remote_id}{eol}"


def mark_completed(line: str, completion_date: str) -> str:
    """Tick the checkbox and append a completion stamp.

    The id marker is dropped: a completed line is never pulled or pushed
    again, so it no longer needs a link to Todoist.

    Args:
        line: Original task line.
        completion_date: ``YYYY-MM-DD`` date for the stamp.
    """
    body, eol = _split_eol(line)
    result = body.replace(INCOMPLETE_CHECKBOX, COMPLETED_CHECKBOX, 1)
    result = REMOTE_ID_TOKEN_RE.sub("", result)
    return f"{result.rstrip()} {DONE_MARKER} {completion_date}{eol}"


def remove_id(line: str) -> str:
    body, eol = _split_eol(line)
    return REMOTE_ID_TOKEN_RE.sub("", body).rstrip() + eol


def _split_eol(line: str) -> tuple[str, str]:
    # lines come from splitting on "\n", so CRLF text leaves a trailing "\r"
    if line.endswith("\r"):
        return line[:-1], "\r"
    return line, ""
