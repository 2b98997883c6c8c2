import logging
import threading
import time
from collections.abc import Callable
from typing import Any

import requests

from ..config import Config
from .errors import (
    NotFoundError,
    RetriesExhaustedError,
    TransportError,
    is_not_found,
)
from .models import Collection, ItemCreate, ItemUpdate, RemoteItem
from .retry import RetryPolicy

logger = logging.getLogger(__name__)


class TodoistClient:
    """Blocking client for the five Todoist REST calls the sync needs.

    Listing, creating, updating and closing are retried with exponential
    backoff on rate-limit and transient server statuses. Fetching a single
    task is not retried; a missing task comes back as ``None``.

    Args:
        config: Connection settings (token, base URL, timeout, retries).
        retry_policy: Overrides the policy derived from *config*.
        sleep: Called with the backoff delay in seconds between attempts.
    """

    def __init__(
        self,
        config: Config,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.retry_policy = retry_policy or RetryPolicy(
            max_attempts=config.max_attempts,
            base_delay=config.retry_base_delay,
        )
        self._sleep = sleep
        self._thread_local = threading.local()
        self.base_url = config.api_url.rstrip("/")

    @property
    def session(self) -> requests.Session:
        """Session for the current thread."""
        return self._get_session()

    def _get_session(self) -> requests.Session:
        if not hasattr(self._thread_local, "session"):
            self._thread_local.session = self._create_session()
        return self._thread_local.session

    def _create_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update(
            {
                "Authorization": f"Bearer {self.config.api_token}",
                "Content-Type": "application/json",
            }
        )
        return session

    def _send(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        return self._get_session().request(
            method,
            url,
            json=payload,
            timeout=self.config.timeout,
        )

    def _request_with_retry(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> requests.Response:
        """Send a request, retrying retryable statuses with backoff.

        Raises:
            NotFoundError: On 404 (never retried).
            TransportError: On any other non-retryable failing status.
            RetriesExhaustedError: If every attempt hit a retryable status.
        """
        policy = self.retry_policy
        last_status: int | None = None

        for attempt in range(1, policy.max_attempts + 1):
            response = self._send(method, path, payload)
            if response.ok:
                return response

            status = response.status_code
            if not policy.should_retry(status):
                _raise_for_status(response)

            last_status = status
            if attempt < policy.max_attempts:
                delay = policy.delay_before(attempt)
                logger.warning(
                    "%s %s returned %d (attempt %d/%d), retrying in %.1fs",
                    method,
                    path,
                    status,
                    attempt,
                    policy.max_attempts,
                    delay,
                )
                self._sleep(delay)

        logger.error(
            "%s %s failed after %d attempts (last status %s)",
            method,
            path,
            policy.max_attempts,
            last_status,
        )
        raise RetriesExhaustedError(policy.max_attempts, last_status)

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def list_collections(self) -> list[Collection]:
        """
        List all projects of the authenticated user.
        """
        response = self._request_with_retry("GET", "/projects")
        return [Collection.model_validate(p) for p in response.json()]

    def validate_connection(self) -> int:
        """
        Validate the token by listing projects.
        Returns the number of projects visible to the token.
        """
        return len(self.list_collections())

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def get_item(self, item_id: str) -> RemoteItem | None:
        """
        Fetch one task by id.

        A task deleted in Todoist is an expected state, not an error:
        a 404 response (or an error that reports not-found) yields None.

        Raises:
            TransportError: On any other failing status.
        """
        try:
            response = self._send("GET", f"/tasks/{item_id}")
            if response.status_code == 404:
                return None
            if not response.ok:
                _raise_for_status(response)
            return RemoteItem.model_validate(response.json())
        except Exception as err:
            if is_not_found(err):
                logger.debug("Task %s not found in Todoist", item_id)
                return None
            raise

    def create_item(self, item: ItemCreate) -> RemoteItem:
        """
        Create a task.

        Args:
            item: Title, project and optional priority/due date/parent.

        Returns:
            The created task, carrying its new id.
        """
        response = self._request_with_retry(
            "POST", "/tasks", item.to_payload()
        )
        created = RemoteItem.model_validate(response.json())
        logger.info("Created Todoist task %s", created.id)
        return created

    def update_item(self, item_id: str, changes: ItemUpdate) -> RemoteItem:
        """
        Update title, priority and/or due date of an existing task.

        Raises:
            NotFoundError: If the task no longer exists.
        """
        response = self._request_with_retry(
            "POST", f"/tasks/{item_id}", changes.to_payload()
        )
        return RemoteItem.model_validate(response.json())

    def close_item(self, item_id: str) -> None:
        """
        Mark a task complete.
        """
        self._request_with_retry("POST", f"/tasks/{item_id}/close")


def _raise_for_status(response: requests.Response) -> None:
    if response.status_code == 404:
        raise NotFoundError()
    raise TransportError(response.status_code)
