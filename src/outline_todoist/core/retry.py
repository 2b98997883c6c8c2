"""Retry policy for Todoist write and list requests."""

from __future__ import annotations

from dataclasses import dataclass, field

# 429 = rate limited, 5xx = transient server trouble
DEFAULT_RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503})


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """Exponential backoff settings.

    Attributes:
        max_attempts: Total attempts including the first one.
        base_delay: Seconds to wait before the first retry.
        multiplier: Factor applied to the delay after each retry.
        retryable_statuses: HTTP statuses worth another attempt.
    """

    max_attempts: int = 3
    base_delay: float = 1.0
    multiplier: float = 2.0
    retryable_statuses: frozenset[int] = field(
        default=DEFAULT_RETRYABLE_STATUSES
    )

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay < 0:
            raise ValueError("base_delay cannot be negative")

    def should_retry(self, status_code: int) -> bool:
        return status_code in self.retryable_statuses

    def delay_before(self, retry_number: int) -> float:
        """Seconds to sleep before retry *retry_number* (1-based)."""
        return self.base_delay * self.multiplier ** (retry_number - 1)
