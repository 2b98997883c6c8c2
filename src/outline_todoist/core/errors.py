"""Exceptions raised by the Todoist client.

``TransportError`` and ``RetriesExhaustedError`` are fatal for the single
call that raised them. The sync passes catch them per task and record a
failure instead of aborting the run.
"""

from __future__ import annotations

import re

import requests

# "404" as a standalone status, never as part of a longer number such as an id
_NOT_FOUND_RE = re.compile(r"(?<!\d)404(?!\d)|not found", re.IGNORECASE)


class TodoistError(Exception):
    """Base class for Todoist client failures."""


class TransportError(TodoistError):
    """A request failed with a status that retrying will not fix."""

    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        super().__init__(message or f"Request failed: {status_code}")


class NotFoundError(TransportError):
    """The addressed task (or project) does not exist in Todoist."""

    def __init__(self, message: str | None = None):
        super().__init__(404, message)


class RetriesExhaustedError(TodoistError):
    """Every attempt ended in a retryable status."""

    def __init__(self, attempts: int, last_status: int | None):
        self.attempts = attempts
        self.last_status = last_status
        super().__init__(
            f"Max retries exceeded after {attempts} attempts "
            f"(last status: {last_status})"
        )


def is_not_found(error: BaseException) -> bool:
    """Return True if *error* means the remote object is gone.

    Covers the typed ``NotFoundError`` and ``requests`` errors that carry a
    404 response. Errors from other layers count when their message names
    a 404 status or says "not found".

    A ``requests`` error without a response (connection reset, timeout) is
    never not-found: its message embeds the request URL and with it the
    task id.
    """
    if isinstance(error, NotFoundError):
        return True
    if isinstance(error, TransportError):
        return error.status_code == 404
    if isinstance(error, requests.RequestException):
        response = error.response
        return response is not None and response.status_code == 404
    return _NOT_FOUND_RE.search(str(error)) is not None
