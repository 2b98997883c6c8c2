"""Shared pytest fixtures for outline-todoist tests."""

import itertools
from unittest.mock import MagicMock

import pytest

from outline_todoist.config import Config
from outline_todoist.config_schema import TagMapping
from outline_todoist.core.errors import NotFoundError
from outline_todoist.core.models import ItemCreate, ItemUpdate, RemoteItem

_ENV_VARS = (
    "TODOIST_API_TOKEN",
    "TODOIST_API_URL",
    "TODOIST_MAX_ATTEMPTS",
    "TODOIST_DEBUG",
    "OUTLINE_TODOIST_CONFIG",
    "LOG_LEVEL",
    "LOG_FILE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the developer's own Todoist settings out of every test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def work_mapping():
    return TagMapping(tag="#work", collection_id="proj-work", display_name="Work")


@pytest.fixture
def mock_config(work_mapping):
    """Create a Config instance for testing."""
    return Config(
        api_token="test-token",
        api_url="https://api.todoist.example/rest/v2",
        tag_mappings=(work_mapping,),
    )


@pytest.fixture
def mock_todoist_client(mock_config):
    """Create a mock TodoistClient instance for testing."""
    from outline_todoist.core.client import TodoistClient

    client = MagicMock(spec=TodoistClient)
    client.config = mock_config
    return client


class FakeTodoistClient:
    """In-memory stand-in for TodoistClient used by the sync tests.

    Tasks live in ``items``; every call is appended to ``calls`` as
    ``(method, args)`` so tests can assert on traffic.
    """

    def __init__(self, config=None):
        self.config = config
        self.items: dict[str, RemoteItem] = {}
        self.calls: list[tuple[str, tuple]] = []
        self._ids = (f"new-{n}" for n in itertools.count(1))

    def add(self, item_id, **fields):
        self.items[item_id] = RemoteItem(id=item_id, **fields)
        return self.items[item_id]

    def get_item(self, item_id):
        self.calls.append(("get", (item_id,)))
        return self.items.get(item_id)

    def create_item(self, item: ItemCreate):
        self.calls.append(("create", (item,)))
        new_id = next(self._ids)
        created = RemoteItem(
            id=new_id,
            title=item.title,
            collection_id=item.collection_id,
            priority=item.priority or 4,
            due_date=item.due_date,
            parent_id=item.parent_id,
        )
        self.items[new_id] = created
        return created

    def update_item(self, item_id, changes: ItemUpdate):
        self.calls.append(("update", (item_id, changes)))
        if item_id not in self.items:
            raise NotFoundError()
        current = self.items[item_id]
        updated = current.model_copy(
            update=changes.model_dump(exclude_none=True)
        )
        self.items[item_id] = updated
        return updated

    def close_item(self, item_id):
        self.calls.append(("close", (item_id,)))
        self.items[item_id] = self.items[item_id].model_copy(
            update={"completed": True}
        )

    def methods(self, name):
        return [args for method, args in self.calls if method == name]


@pytest.fixture
def fake_client(mock_config):
    return FakeTodoistClient(mock_config)
