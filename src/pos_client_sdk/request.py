from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .exceptions import ApiError, RequestCancelledError
from .retry import AttemptOutcome, Success, classify_status

JSON_CONTENT_TYPE = "application/json"


@dataclass(frozen=True)
class RequestDescriptor:
    path: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str | bytes | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))


def serialize_body(body: Any) -> str | bytes | None:
    """Pass pre-serialized payloads through; JSON-encode anything else."""
    if body is None or isinstance(body, (str, bytes)):
        return body
    return json.dumps(body)


def build_descriptor(
    path: str,
    *,
    method: str = "GET",
    headers: Mapping[str, str] | None = None,
    body: Any = None,
) -> RequestDescriptor:
    return RequestDescriptor(
        path=path,
        method=method,
        headers=dict(headers or {}),
        body=serialize_body(body),
    )


def build_url(base_url: str, path: str) -> str:
    """Append ``path`` to the fixed origin; absolute URLs are refused."""
    route = path.split("?", 1)[0]
    if "://" in route or route.startswith("//"):
        raise ValueError(f"Request path must be origin-relative, got {path!r}")
    return base_url.rstrip("/") + "/" + path.lstrip("/")


def build_headers(token: str | None, caller_headers: Mapping[str, str]) -> dict[str, str]:
    headers: dict[str, str] = {"Content-Type": JSON_CONTENT_TYPE}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    # header names are case-insensitive; a caller key replaces the default one
    overridden = {key.lower() for key in caller_headers}
    merged = {key: value for key, value in headers.items() if key.lower() not in overridden}
    merged.update(caller_headers)
    return merged


def parse_json_body(status_code: int, content: bytes) -> Any:
    if not content or not content.strip():
        return None
    try:
        return json.loads(content)
    except ValueError as exc:
        raise ApiError(
            code="INVALID_RESPONSE",
            message=f"API error {status_code}: response body is not valid JSON",
            details={"type": type(exc).__name__},
            status_code=status_code,
            body_text=content.decode("utf-8", errors="replace"),
        ) from exc


def evaluate_response(status_code: int, content: bytes, text: str) -> AttemptOutcome:
    if 200 <= status_code < 300:
        return Success(body=parse_json_body(status_code, content))
    return classify_status(status_code, text)


def cancelled_error(method: str, path: str, *, reason: str) -> RequestCancelledError:
    code = "DEADLINE_EXCEEDED" if reason == "deadline" else "REQUEST_CANCELLED"
    return RequestCancelledError(
        code=code,
        message=f"{method} {path} cancelled before completion ({reason})",
        details={"type": reason},
        status_code=0,
    )
