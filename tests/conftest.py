from __future__ import annotations

import sys
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
SDK_SRC = BASE_DIR / "src"

sys.path.insert(0, str(SDK_SRC))

from pos_client_sdk.config import ClientConfig  # noqa: E402

BASE_URL = "https://api.example.com"


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(api_base_url=BASE_URL, retries=3, retry_base_delay_seconds=1.0)


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()
