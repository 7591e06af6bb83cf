from __future__ import annotations

import json

from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    ServerError,
    ValidationError,
)


def _error_code(status_code: int) -> str:
    if status_code == 429:
        return "RATE_LIMITED"
    if status_code >= 500:
        return "SERVER_ERROR"
    return "HTTP_ERROR"


def map_error(status_code: int, body_text: str | None) -> ApiError:
    """Build the terminal error for a non-2xx response.

    The raw body text is always kept for diagnostics. When the backend
    answered with a JSON object its ``code`` and ``details`` are lifted onto
    the error.
    """
    text = body_text or ""
    payload: object = None
    if text:
        try:
            payload = json.loads(text)
        except ValueError:
            payload = None
    code = _error_code(status_code)
    details: object | None = None
    if isinstance(payload, dict):
        code = str(payload.get("code") or code)
        details = payload.get("details")
    mapped: type[ApiError]
    if status_code == 401:
        mapped = AuthError
    elif status_code == 403:
        mapped = PermissionError
    elif status_code == 404:
        mapped = NotFoundError
    elif status_code in {400, 422}:
        mapped = ValidationError
    elif status_code == 409:
        mapped = ConflictError
    elif status_code == 429:
        mapped = RateLimitError
    elif status_code >= 500:
        mapped = ServerError
    else:
        mapped = ApiError
    return mapped(
        code=code,
        message=f"API error {status_code}: {text}",
        details=details,
        status_code=status_code,
        body_text=text,
    )
