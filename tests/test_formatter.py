"""Tests for outline_todoist.outline.formatter -- line rewriting."""

from outline_todoist.outline import (
    append_id,
    mark_completed,
    parse_line,
    remove_id,
)


class TestAppendId:
    def test_appends_marker(self):
        assert append_id("- [ ] Task #work", "123") == "- [ ] Task #work 🆔 123"

    def test_replaces_existing_id(self):
        line = "- [ ] Task #work 🆔 old"
        assert append_id(line, "new") == "- [ ] Task #work 🆔 new"

    def test_trailing_whitespace_not_accumulated(self):
        line = "- [ ] Task   "
        once = append_id(line, "1")
        twice = append_id(once, "1")
        assert once == twice == "- [ ] Task 🆔 1"

    def test_id_in_middle_of_line_moves_to_end(self):
        line = "- [ ] Task 🆔 1 📅 2024-01-15"
        assert append_id(line, "2") == "- [ ] Task 📅 2024-01-15 🆔 2"

    def test_indentation_preserved(self):
        assert append_id("\t- [ ] Child", "9").startswith("\t- [ ] Child")

    def test_parses_back(self):
        record = parse_line(append_id("- [ ] Task #work", "abc"), 0)
        assert record.remote_id == "abc"
        assert record.title == "Task"


class TestMarkCompleted:
    def test_ticks_box_drops_id_and_stamps_date(self):
        line = "- [ ] Task #work 🆔 task-1"
        assert (
            mark_completed(line, "2024-01-20")
            == "- [x] Task #work ✅ 2024-01-20"
        )

    def test_only_first_checkbox_replaced(self):
        line = "- [ ] Explain - [ ] syntax"
        assert mark_completed(line, "2024-01-20").startswith(
            "- [x] Explain - [ ] syntax"
        )

    def test_indentation_preserved(self):
        result = mark_completed("    - [ ] Child 🆔 7", "2024-01-20")
        assert result == "    - [x] Child ✅ 2024-01-20"

    def test_result_parses_as_completed_without_id(self):
        record = parse_line(
            mark_completed("- [ ] Task 📅 2024-01-15 🆔 1", "2024-01-20"), 0
        )
        assert record.completed is True
        assert record.remote_id is None
        assert record.due_date == "2024-01-15"


class TestRemoveId:
    def test_removes_marker(self):
        assert remove_id("- [ ] Task 🆔 42") == "- [ ] Task"

    def test_line_without_id_only_rstripped(self):
        assert remove_id("- [ ] Task  ") == "- [ ] Task"


class TestCrlfLines:
    def test_append_id_keeps_carriage_return(self):
        assert append_id("- [ ] Task #work\r", "1") == "- [ ] Task #work 🆔 1\r"

    def test_append_id_replaces_id_before_carriage_return(self):
        assert append_id("- [ ] Task 🆔 old\r", "new") == "- [ ] Task 🆔 new\r"

    def test_mark_completed_keeps_carriage_return(self):
        assert (
            mark_completed("- [ ] Task 🆔 1\r", "2024-01-20")
            == "- [x] Task ✅ 2024-01-20\r"
        )

    def test_remove_id_keeps_carriage_return(self):
        assert remove_id("- [ ] Task 🆔 1  \r") == "- [ ] Task\r"
