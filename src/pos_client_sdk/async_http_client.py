from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

import httpx

from .auth_store import TokenProvider
from .config import ClientConfig
from .core import RequestCore
from .exceptions import ApiError
from .request import RequestDescriptor, build_descriptor, cancelled_error, evaluate_response
from .retry import AttemptOutcome, Success, TerminalFailure, TransportFailure

Sleep = Callable[[float], Awaitable[None]]


class AsyncHttpClient(RequestCore):
    """Resilient request client for asyncio callers.

    Each logical call retries 429/5xx responses and transport failures on a
    fixed exponential schedule (``base_delay * 2**attempt``) and then either
    returns the parsed JSON body or raises an :class:`ApiError`.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        token_provider: TokenProvider | None = None,
        client: httpx.AsyncClient | None = None,
        sleep: Sleep | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(config=config, token_provider=token_provider, clock=clock)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=self.config.timeout_seconds,
            verify=self.config.verify_ssl,
            limits=httpx.Limits(max_connections=self.config.max_connections),
        )
        self._sleep: Sleep = sleep or asyncio.sleep

    async def __aenter__(self) -> "AsyncHttpClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        deadline: float | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> Any:
        descriptor = build_descriptor(path, method=method, headers=headers, body=body)
        return await self.send(descriptor, deadline=deadline, cancel_event=cancel_event)

    async def send(
        self,
        descriptor: RequestDescriptor,
        *,
        deadline: float | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> Any:
        url = self._url(descriptor)
        started = self._clock()
        last_error: ApiError | None = None
        attempt = 0
        while attempt <= self.policy.max_retries:
            if cancel_event is not None and cancel_event.is_set():
                raise cancelled_error(descriptor.method, descriptor.path, reason="cancelled")
            self._ensure_before_deadline(descriptor, started, deadline)

            outcome = await self._attempt(descriptor, url, self._attempt_timeout(started, deadline))
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
            await self._wait(descriptor, delay, cancel_event)
            attempt += 1

        if last_error is not None:
            raise last_error
        raise RuntimeError(f"HTTP request made no attempts: {descriptor.method} {descriptor.path}")

    async def _attempt(self, descriptor: RequestDescriptor, url: str, timeout: float) -> AttemptOutcome:
        try:
            response = await self._client.request(
                descriptor.method,
                url,
                headers=self._headers(descriptor),
                content=descriptor.body,
                timeout=timeout,
            )
        except httpx.TransportError as exc:
            return TransportFailure(cause=exc)
        return evaluate_response(response.status_code, response.content, response.text)

    async def _wait(
        self,
        descriptor: RequestDescriptor,
        delay: float,
        cancel_event: asyncio.Event | None,
    ) -> None:
        if cancel_event is None:
            await self._sleep(delay)
            return
        sleeper = asyncio.ensure_future(self._sleep(delay))
        watcher = asyncio.ensure_future(cancel_event.wait())
        try:
            done, _ = await asyncio.wait({sleeper, watcher}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (sleeper, watcher):
                task.cancel()
            await asyncio.gather(sleeper, watcher, return_exceptions=True)
        if watcher in done:
            raise cancelled_error(descriptor.method, descriptor.path, reason="cancelled")
