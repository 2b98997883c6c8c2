"""Parent/child structure inferred from outline indentation."""

from __future__ import annotations

from outline_todoist.outline import TaskRecord


def resolve_parent_lines(records: list[TaskRecord]) -> dict[int, int]:
    """Map each nested task's line to its parent task's line.

    The parent of a task at level L > 0 is the nearest earlier task whose
    level is strictly lower. Single forward pass with a stack of open
    ancestors: pop while the top is at the same level or deeper, the
    remaining top (if any) is the parent, then push the current task.

    Args:
        records: Every task parsed from one snapshot, in line order --
            completed and unmapped tasks included, since they still
            anchor their children.

    Returns:
        ``{child_line: parent_line}``; top-level tasks and orphans (no
        shallower task above them) are absent.
    """
    parents: dict[int, int] = {}
    stack: list[TaskRecord] = []

    for record in records:
        while stack and stack[-1].indent_level >= record.indent_level:
            stack.pop()
        if stack and record.indent_level > 0:
            parents[record.line_number] = stack[-1].line_number
        stack.append(record)

    return parents


def sort_by_hierarchy(records: list[TaskRecord]) -> list[TaskRecord]:
    """Order tasks so every parent precedes its children.

    Stable: tasks at the same level keep their line order.
    """
    return sorted(records, key=lambda r: r.indent_level)
