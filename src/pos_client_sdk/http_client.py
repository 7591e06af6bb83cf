from __future__ import annotations

import time
from collections.abc import Callable, Mapping
from typing import Any

import requests
from requests.adapters import HTTPAdapter

from .auth_store import TokenProvider
from .config import ClientConfig
from .core import RequestCore
from .exceptions import ApiError
from .request import RequestDescriptor, build_descriptor, evaluate_response
from .retry import AttemptOutcome, Success, TerminalFailure, TransportFailure


class HttpClient(RequestCore):
    """Blocking counterpart of :class:`AsyncHttpClient` with the same retry contract.

    Built with ``retries=0`` it behaves as a plain single-attempt client.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        token_provider: TokenProvider | None = None,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(config=config, token_provider=token_provider, clock=clock)
        self._owns_session = session is None
        if session is None:
            session = requests.Session()
            adapter = HTTPAdapter(
                pool_connections=self.config.max_connections,
                pool_maxsize=self.config.max_connections,
            )
            session.mount("http://", adapter)
            session.mount("https://", adapter)
        self.session = session
        self._sleep = sleep

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def request(
        self,
        path: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        deadline: float | None = None,
    ) -> Any:
        descriptor = build_descriptor(path, method=method, headers=headers, body=body)
        return self.send(descriptor, deadline=deadline)

    def send(self, descriptor: RequestDescriptor, *, deadline: float | None = None) -> Any:
        url = self._url(descriptor)
        started = self._clock()
        last_error: ApiError | None = None
        for attempt in range(self.policy.max_attempts):
            self._ensure_before_deadline(descriptor, started, deadline)
            outcome = self._attempt(descriptor, url, self._attempt_timeout(started, deadline))
            if isinstance(outcome, Success):
                return outcome.body

            error = self._failure_error(descriptor, outcome)
            last_error = error
            if isinstance(outcome, TerminalFailure) or not self.policy.can_retry(attempt):
                self._log_failure(descriptor, error, attempt)
                if isinstance(outcome, TransportFailure):
                    raise error from outcome.cause
                raise error

            delay = self.policy.delay_for(attempt)
            self._ensure_before_deadline(descriptor, started, deadline, upcoming_wait=delay)
            self._log_retry(descriptor, outcome, attempt, delay)
            self._sleep(delay)

        if last_error is not None:
            raise last_error
        raise RuntimeError(f"HTTP request made no attempts: {descriptor.method} {descriptor.path}")

    def _attempt(self, descriptor: RequestDescriptor, url: str, timeout: float) -> AttemptOutcome:
        body = descriptor.body
        if isinstance(body, str):
            body = body.encode("utf-8")
        try:
            response = self.session.request(
                method=descriptor.method,
                url=url,
                headers=self._headers(descriptor),
                data=body,
                timeout=timeout,
                verify=self.config.verify_ssl,
            )
        except requests.RequestException as exc:
            return TransportFailure(cause=exc)
        return evaluate_response(response.status_code, response.content, response.text)
