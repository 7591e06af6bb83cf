from __future__ import annotations

import logging
import time
from collections.abc import Callable

from .auth_store import AuthStore, TokenProvider
from .config import ClientConfig, load_config
from .error_mapper import map_error
from .exceptions import ApiError, TransportError
from .logging_setup import get_logger, log_event
from .request import RequestDescriptor, build_headers, build_url, cancelled_error
from .retry import RetryableFailure, RetryPolicy, TerminalFailure, TransportFailure

logger = get_logger("pos_client_sdk.http")


def transport_error(descriptor: RequestDescriptor, cause: Exception) -> TransportError:
    return TransportError(
        code="TRANSPORT_ERROR",
        message=f"{descriptor.method} {descriptor.path} failed: {cause}",
        details={"type": type(cause).__name__},
        status_code=0,
    )


class RequestCore:
    """State and bookkeeping shared by the sync and async clients.

    Nothing here is mutated per call; retry state lives in the ``request``
    loop of each client.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        token_provider: TokenProvider | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or load_config()
        self.token_provider = token_provider or AuthStore(app_name=self.config.app_name)
        self.policy = RetryPolicy(
            max_retries=self.config.retries,
            base_delay_seconds=self.config.retry_base_delay_seconds,
        )
        self._clock = clock

    def _url(self, descriptor: RequestDescriptor) -> str:
        return build_url(self.config.api_base_url, descriptor.path)

    def _headers(self, descriptor: RequestDescriptor) -> dict[str, str]:
        return build_headers(self.token_provider.get_token(), descriptor.headers)

    def _attempt_timeout(self, started: float, deadline: float | None) -> float:
        if deadline is None:
            return self.config.timeout_seconds
        remaining = deadline - (self._clock() - started)
        return max(0.001, min(self.config.timeout_seconds, remaining))

    def _ensure_before_deadline(
        self,
        descriptor: RequestDescriptor,
        started: float,
        deadline: float | None,
        upcoming_wait: float = 0.0,
    ) -> None:
        if deadline is None:
            return
        if self._clock() - started + upcoming_wait >= deadline:
            raise cancelled_error(descriptor.method, descriptor.path, reason="deadline")

    def _failure_error(
        self,
        descriptor: RequestDescriptor,
        outcome: RetryableFailure | TerminalFailure | TransportFailure,
    ) -> ApiError:
        if isinstance(outcome, TransportFailure):
            return transport_error(descriptor, outcome.cause)
        return map_error(outcome.status_code, outcome.text)

    def _log_retry(
        self,
        descriptor: RequestDescriptor,
        outcome: RetryableFailure | TransportFailure,
        attempt: int,
        delay: float,
    ) -> None:
        reason: dict[str, object]
        if isinstance(outcome, TransportFailure):
            reason = {"error": type(outcome.cause).__name__}
        else:
            reason = {"status": outcome.status_code}
        log_event(
            logger,
            logging.WARNING,
            "request_retry",
            method=descriptor.method,
            path=descriptor.path,
            attempt=attempt + 1,
            max_attempts=self.policy.max_attempts,
            delay_ms=int(delay * 1000),
            **reason,
        )

    def _log_failure(self, descriptor: RequestDescriptor, error: ApiError, attempt: int) -> None:
        log_event(
            logger,
            logging.ERROR,
            "request_failed",
            method=descriptor.method,
            path=descriptor.path,
            attempts=attempt + 1,
            status=error.status_code,
            code=error.code,
        )
