"""Tests for outline_todoist.core.client -- REST calls and retry/backoff."""

from unittest.mock import Mock, patch

import pytest
import requests

from outline_todoist.config import Config
from outline_todoist.core.client import TodoistClient
from outline_todoist.core.errors import (
    NotFoundError,
    RetriesExhaustedError,
    TransportError,
)
from outline_todoist.core.models import ItemCreate, ItemUpdate
from outline_todoist.core.retry import RetryPolicy

REQUEST = "outline_todoist.core.client.requests.Session.request"


def _response(status=200, payload=None):
    response = Mock()
    response.status_code = status
    response.ok = 200 <= status < 400
    response.json.return_value = payload
    return response


def _client(config, sleeps=None):
    sleeps = [] if sleeps is None else sleeps
    return TodoistClient(config, sleep=sleeps.append)


# -------------------------------------------------------------------------
# Session and URL handling
# -------------------------------------------------------------------------


def test_session_headers(mock_config):
    client = TodoistClient(mock_config)
    assert client.session.headers["Authorization"] == "Bearer test-token"
    assert client.session.headers["Content-Type"] == "application/json"


def test_session_is_reused_within_a_thread(mock_config):
    client = TodoistClient(mock_config)
    assert client.session is client.session


def test_base_url_trailing_slash_stripped():
    config = Config(api_token="t", api_url="https://api.example.com/rest/v2/")
    assert TodoistClient(config).base_url == "https://api.example.com/rest/v2"


def test_default_retry_policy_from_config():
    config = Config(api_token="t", max_attempts=5, retry_base_delay=0.5)
    policy = TodoistClient(config).retry_policy
    assert policy.max_attempts == 5
    assert policy.base_delay == 0.5


# -------------------------------------------------------------------------
# Projects
# -------------------------------------------------------------------------


@patch(REQUEST)
def test_list_collections(mock_request, mock_config):
    mock_request.return_value = _response(
        payload=[{"id": "1", "name": "Inbox"}, {"id": 2, "name": "Work"}]
    )

    collections = TodoistClient(mock_config).list_collections()

    assert [(c.id, c.name) for c in collections] == [
        ("1", "Inbox"),
        ("2", "Work"),
    ]
    args, kwargs = mock_request.call_args
    assert args == ("GET", "https://api.todoist.example/rest/v2/projects")
    assert kwargs["timeout"] == mock_config.timeout


@patch(REQUEST)
def test_validate_connection_returns_project_count(mock_request, mock_config):
    mock_request.return_value = _response(
        payload=[{"id": "1", "name": "Inbox"}]
    )
    assert TodoistClient(mock_config).validate_connection() == 1


# -------------------------------------------------------------------------
# get_item()
# -------------------------------------------------------------------------


@patch(REQUEST)
def test_get_item_parses_wire_fields(mock_request, mock_config):
    mock_request.return_value = _response(
        payload={
            "id": "task-1",
            "content": "Review notes",
            "project_id": "proj-work",
            "priority": 4,
            "is_completed": True,
            "due": {"date": "2024-01-15", "string": "Jan 15"},
            "parent_id": None,
        }
    )

    item = TodoistClient(mock_config).get_item("task-1")

    assert item.id == "task-1"
    assert item.title == "Review notes"
    assert item.collection_id == "proj-work"
    assert item.completed is True
    assert item.due_date == "2024-01-15"
    assert mock_request.call_args[0] == (
        "GET",
        "https://api.todoist.example/rest/v2/tasks/task-1",
    )


@patch(REQUEST)
def test_get_item_404_returns_none(mock_request, mock_config):
    mock_request.return_value = _response(status=404)
    assert TodoistClient(mock_config).get_item("gone") is None


@patch(REQUEST)
def test_get_item_not_found_message_returns_none(mock_request, mock_config):
    mock_request.side_effect = RuntimeError("Task not found")
    assert TodoistClient(mock_config).get_item("gone") is None


@patch(REQUEST)
def test_get_item_connection_error_with_404_in_url_propagates(
    mock_request, mock_config
):
    mock_request.side_effect = requests.ConnectionError(
        "Max retries exceeded with url: /rest/v2/tasks/7404512"
    )
    with pytest.raises(requests.ConnectionError):
        TodoistClient(mock_config).get_item("7404512")


@patch(REQUEST)
def test_get_item_is_not_retried(mock_request, mock_config):
    mock_request.return_value = _response(status=503)
    sleeps = []

    with pytest.raises(TransportError) as exc_info:
        _client(mock_config, sleeps).get_item("task-1")

    assert exc_info.value.status_code == 503
    assert mock_request.call_count == 1
    assert sleeps == []


@patch(REQUEST)
def test_get_item_other_errors_propagate(mock_request, mock_config):
    mock_request.return_value = _response(status=500)
    with pytest.raises(TransportError, match="Request failed: 500"):
        TodoistClient(mock_config).get_item("task-1")


# -------------------------------------------------------------------------
# Writes
# -------------------------------------------------------------------------


@patch(REQUEST)
def test_create_item_sends_wire_payload(mock_request, mock_config):
    mock_request.return_value = _response(
        payload={"id": "new-1", "content": "Write", "project_id": "p"}
    )

    created = TodoistClient(mock_config).create_item(
        ItemCreate(
            title="Write",
            collection_id="p",
            priority=1,
            due_date="2024-01-15",
        )
    )

    assert created.id == "new-1"
    args, kwargs = mock_request.call_args
    assert args == ("POST", "https://api.todoist.example/rest/v2/tasks")
    assert kwargs["json"] == {
        "content": "Write",
        "project_id": "p",
        "priority": 1,
        "due_date": "2024-01-15",
    }


@patch(REQUEST)
def test_update_item_omits_unset_fields(mock_request, mock_config):
    mock_request.return_value = _response(payload={"id": "7"})

    TodoistClient(mock_config).update_item("7", ItemUpdate(title="New"))

    args, kwargs = mock_request.call_args
    assert args == ("POST", "https://api.todoist.example/rest/v2/tasks/7")
    assert kwargs["json"] == {"content": "New"}


@patch(REQUEST)
def test_update_item_404_raises_not_found(mock_request, mock_config):
    mock_request.return_value = _response(status=404)
    sleeps = []

    with pytest.raises(NotFoundError):
        _client(mock_config, sleeps).update_item("7", ItemUpdate(title="x"))

    assert mock_request.call_count == 1
    assert sleeps == []


@patch(REQUEST)
def test_close_item(mock_request, mock_config):
    mock_request.return_value = _response(status=204)

    TodoistClient(mock_config).close_item("7")

    args, kwargs = mock_request.call_args
    assert args == (
        "POST",
        "https://api.todoist.example/rest/v2/tasks/7/close",
    )
    assert kwargs["json"] is None


# -------------------------------------------------------------------------
# Retry / backoff
# -------------------------------------------------------------------------


class TestRetry:
    @patch(REQUEST)
    def test_two_retryable_failures_then_success(
        self, mock_request, mock_config
    ):
        mock_request.side_effect = [
            _response(status=503),
            _response(status=429),
            _response(payload=[]),
        ]
        sleeps = []

        result = _client(mock_config, sleeps).list_collections()

        assert result == []
        assert mock_request.call_count == 3
        assert sleeps == [1.0, 2.0]

    @patch(REQUEST)
    def test_three_retryable_failures_exhaust(self, mock_request, mock_config):
        mock_request.return_value = _response(status=429)
        sleeps = []

        with pytest.raises(RetriesExhaustedError) as exc_info:
            _client(mock_config, sleeps).close_item("1")

        assert mock_request.call_count == 3
        assert sleeps == [1.0, 2.0]
        assert exc_info.value.attempts == 3
        assert exc_info.value.last_status == 429
        assert "Max retries exceeded after 3 attempts" in str(exc_info.value)

    @pytest.mark.parametrize("status", [400, 401, 403, 422])
    @patch(REQUEST)
    def test_non_retryable_status_fails_immediately(
        self, mock_request, status, mock_config
    ):
        mock_request.return_value = _response(status=status)
        sleeps = []

        with pytest.raises(TransportError) as exc_info:
            _client(mock_config, sleeps).create_item(
                ItemCreate(title="t", collection_id="p")
            )

        assert exc_info.value.status_code == status
        assert mock_request.call_count == 1
        assert sleeps == []

    @patch(REQUEST)
    def test_injected_policy(self, mock_request, mock_config):
        mock_request.return_value = _response(status=500)
        sleeps = []
        client = TodoistClient(
            mock_config,
            retry_policy=RetryPolicy(
                max_attempts=4, base_delay=0.1, multiplier=3.0
            ),
            sleep=sleeps.append,
        )

        with pytest.raises(RetriesExhaustedError):
            client.list_collections()

        assert mock_request.call_count == 4
        assert sleeps == pytest.approx([0.1, 0.3, 0.9])

    @patch(REQUEST)
    def test_network_errors_are_not_retried(self, mock_request, mock_config):
        mock_request.side_effect = requests.ConnectionError("boom")

        with pytest.raises(requests.ConnectionError):
            _client(mock_config).list_collections()

        assert mock_request.call_count == 1
