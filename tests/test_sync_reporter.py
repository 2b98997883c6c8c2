"""Tests for outline_todoist.sync.reporter -- notice, report and JSON."""

import json

from outline_todoist.sync.models import SyncFailure, SyncResult
from outline_todoist.sync.reporter import (
    format_sync_notice,
    format_sync_report,
    result_to_json,
)


def _failure(n):
    return SyncFailure(title=f"Task {n}", message=f"err {n}", line_number=n)


class TestNotice:
    def test_nothing_happened(self):
        assert format_sync_notice(SyncResult(content="")) == "No tasks to sync"

    def test_counts(self):
        result = SyncResult(content="", created=2, updated=1, completed=3)
        assert format_sync_notice(result) == (
            "Synced with Todoist\n• 2 created, 1 updated\n• 3 marked complete"
        )

    def test_only_completed(self):
        result = SyncResult(content="", completed=1)
        assert format_sync_notice(result) == (
            "Synced with Todoist\n• 1 marked complete"
        )

    def test_failure_preview_is_bounded(self):
        errors = [_failure(n) for n in range(5)]
        result = SyncResult(content="", failed=5, errors=errors)

        notice = format_sync_notice(result)

        assert notice.startswith("Synced with Todoist\n• 5 failed\n• Failed: ")
        assert '"Task 0" - err 0' in notice
        assert '"Task 2" - err 2' in notice
        assert "Task 3" not in notice

    def test_custom_preview_size(self):
        errors = [_failure(n) for n in range(3)]
        result = SyncResult(content="", failed=3, errors=errors)
        notice = format_sync_notice(result, max_errors=1)
        assert "Task 1" not in notice


class TestReport:
    def test_lists_every_failure_one_based(self):
        result = SyncResult(
            content="",
            created=1,
            failed=2,
            errors=[_failure(0), _failure(9)],
        )

        report = format_sync_report(result, source="tasks.md")

        assert report.splitlines()[0] == "Sync report for 'tasks.md'"
        assert "  Created:   1" in report
        assert "  line 1: Task 0: err 0" in report
        assert "  line 10: Task 9: err 9" in report

    def test_without_errors(self):
        report = format_sync_report(SyncResult(content=""))
        assert "Errors:" not in report
        assert report.startswith("Sync report\n")


def test_result_to_json_is_serialisable():
    result = SyncResult(
        content="secret text", created=1, failed=1, errors=[_failure(2)]
    )

    data = result_to_json(result)

    assert "content" not in data
    assert data["errors"] == [
        {"title": "Task 2", "message": "err 2", "line_number": 2}
    ]
    json.dumps(data)
