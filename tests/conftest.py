from __future__ import annotations

import pytest

from tests.dummies import GRACE, MockBackend

CONFIG_KEYS = [
    "CUSTOMERS_API_URL",
    "CUSTOMERS_API_TIMEOUT",
    "SUCCESS_NOTICE_MS",
    "PAGE_TITLE",
    "LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's `.env` from leaking into tests."""
    for key in CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def backend() -> MockBackend:
    return MockBackend([GRACE])
