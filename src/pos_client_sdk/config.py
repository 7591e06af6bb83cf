from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_BASE_URL = "http://localhost:5000"


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str = "dev"
    api_base_url: str = DEFAULT_API_BASE_URL
    timeout_seconds: float = 10.0
    retries: int = 3
    retry_base_delay_seconds: float = 1.0
    max_connections: int = 20
    verify_ssl: bool = True
    app_name: str = "pos-client"

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load config from environment with optional .env override.

    The backend origin comes from ``POS_API_URL_<ENV>`` or ``POS_API_URL`` and
    falls back to the local development server when neither is set.
    """
    load_dotenv(env_file)

    env_name = (os.getenv("POS_ENV") or "dev").strip()
    env_key = env_name.upper()

    api_base_url = (
        (os.getenv(f"POS_API_URL_{env_key}") or "").strip()
        or (os.getenv("POS_API_URL") or "").strip()
        or DEFAULT_API_BASE_URL
    )

    timeout_seconds = _read_float("POS_TIMEOUT_SECONDS", "10")
    _validate(
        timeout_seconds > 0,
        f"Invalid POS_TIMEOUT_SECONDS: expected > 0, got {timeout_seconds}",
    )

    retries = _read_int("POS_RETRIES", "3")
    _validate(retries >= 0, f"Invalid POS_RETRIES: expected >= 0, got {retries}")

    retry_base_delay_seconds = _read_float("POS_RETRY_BASE_DELAY_SECONDS", "1.0")
    _validate(
        retry_base_delay_seconds >= 0,
        (
            "Invalid POS_RETRY_BASE_DELAY_SECONDS: "
            f"expected >= 0, got {retry_base_delay_seconds}"
        ),
    )

    max_connections = _read_int("POS_MAX_CONNECTIONS", "20")
    _validate(
        max_connections >= 1,
        f"Invalid POS_MAX_CONNECTIONS: expected >= 1, got {max_connections}",
    )

    verify_ssl = _coerce_bool(os.getenv("POS_VERIFY_SSL"), True)
    app_name = (os.getenv("POS_APP_NAME") or "pos-client").strip()

    return ClientConfig(
        env_name=env_name,
        api_base_url=api_base_url.rstrip("/"),
        timeout_seconds=timeout_seconds,
        retries=retries,
        retry_base_delay_seconds=retry_base_delay_seconds,
        max_connections=max_connections,
        verify_ssl=verify_ssl,
        app_name=app_name,
    )
