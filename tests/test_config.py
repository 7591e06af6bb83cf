from __future__ import annotations

import os

import pytest

from pos_client_sdk.config import DEFAULT_API_BASE_URL, ConfigError, load_config

_VARS = (
    "POS_ENV",
    "POS_API_URL",
    "POS_API_URL_DEV",
    "POS_API_URL_STAGING",
    "POS_TIMEOUT_SECONDS",
    "POS_RETRIES",
    "POS_RETRY_BASE_DELAY_SECONDS",
    "POS_MAX_CONNECTIONS",
    "POS_VERIFY_SSL",
    "POS_APP_NAME",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    # load_dotenv writes into os.environ; keep those writes local to the test
    monkeypatch.setattr(os, "environ", dict(os.environ))
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def test_load_config_falls_back_to_local_backend() -> None:
    cfg = load_config()

    assert cfg.api_base_url == DEFAULT_API_BASE_URL == "http://localhost:5000"
    assert cfg.retries == 3
    assert cfg.retry_base_delay_seconds == 1.0
    assert cfg.verify_ssl is True


def test_load_config_reads_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POS_API_URL", "https://pos.example.com/")

    assert load_config().api_base_url == "https://pos.example.com"


def test_load_config_profile(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("POS_ENV", "staging")
    monkeypatch.setenv("POS_API_URL", "https://pos.example.com")
    monkeypatch.setenv("POS_API_URL_STAGING", "https://staging.example.com")

    cfg = load_config()

    assert cfg.api_base_url == "https://staging.example.com"
    assert cfg.normalized_env == "staging"


def test_load_config_from_env_file(tmp_path) -> None:
    env_file = tmp_path / "pos.env"
    env_file.write_text("POS_API_URL=https://file.example.com\nPOS_RETRIES=5\nPOS_VERIFY_SSL=no\n")

    cfg = load_config(str(env_file))

    assert cfg.api_base_url == "https://file.example.com"
    assert cfg.retries == 5
    assert cfg.verify_ssl is False


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("POS_TIMEOUT_SECONDS", "0"),
        ("POS_RETRIES", "-1"),
        ("POS_RETRY_BASE_DELAY_SECONDS", "-0.5"),
        ("POS_MAX_CONNECTIONS", "0"),
    ],
)
def test_load_config_rejects_invalid_ranges(monkeypatch: pytest.MonkeyPatch, key: str, value: str) -> None:
    monkeypatch.setenv(key, value)

    with pytest.raises(ConfigError, match=key):
        load_config()


@pytest.mark.parametrize(
    "key",
    ["POS_TIMEOUT_SECONDS", "POS_RETRIES", "POS_RETRY_BASE_DELAY_SECONDS", "POS_MAX_CONNECTIONS"],
)
def test_load_config_rejects_invalid_types(monkeypatch: pytest.MonkeyPatch, key: str) -> None:
    monkeypatch.setenv(key, "abc")

    with pytest.raises(ConfigError, match=key):
        load_config()
