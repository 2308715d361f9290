"""Shared pytest fixtures for the Apicalypse tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

_project_src = Path(__file__).parent.parent / "src"
if str(_project_src) not in sys.path:
    sys.path.insert(0, str(_project_src))

from apicalypse.config import ClientConfig, RetrySettings  # noqa: E402
from apicalypse.session import reset_shared_session  # noqa: E402

BASE_URL = "https://api.example.com/v4"


@pytest.fixture(autouse=True)
def _fresh_shared_session():
    reset_shared_session()
    yield
    reset_shared_session()


@pytest.fixture()
def client_config() -> ClientConfig:
    return ClientConfig(
        name="test",
        base_url=BASE_URL,
        headers={"Client-ID": "abc", "Authorization": "Bearer secret"},
        timeout=5.0,
        retries=RetrySettings(max_tries=1, backoff_multiplier=1.0),
        page_size=2,
    )
