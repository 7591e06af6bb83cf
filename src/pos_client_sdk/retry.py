from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


def is_retryable_status(status_code: int) -> bool:
    return status_code == 429 or status_code >= 500


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed exponential backoff: no jitter, no cap beyond the retry count."""

    max_retries: int = 3
    base_delay_seconds: float = 1.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.base_delay_seconds < 0:
            raise ValueError(f"base_delay_seconds must be >= 0, got {self.base_delay_seconds}")

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after failed ``attempt`` (0-based) before the next one."""
        return self.base_delay_seconds * (2**attempt)

    def schedule(self) -> list[float]:
        return [self.delay_for(attempt) for attempt in range(self.max_retries)]

    def can_retry(self, attempt: int) -> bool:
        return attempt < self.max_retries


@dataclass(frozen=True)
class Success:
    body: Any


@dataclass(frozen=True)
class RetryableFailure:
    status_code: int
    text: str


@dataclass(frozen=True)
class TerminalFailure:
    status_code: int
    text: str


@dataclass(frozen=True)
class TransportFailure:
    cause: Exception


AttemptOutcome = Union[Success, RetryableFailure, TerminalFailure, TransportFailure]


def classify_status(status_code: int, text: str) -> RetryableFailure | TerminalFailure:
    if is_retryable_status(status_code):
        return RetryableFailure(status_code=status_code, text=text)
    return TerminalFailure(status_code=status_code, text=text)
