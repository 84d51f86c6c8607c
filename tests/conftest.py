from __future__ import annotations

import pytest

from core.config import SyncSettings
from fake_client import FakeAccount, FakeSession


@pytest.fixture
def settings() -> SyncSettings:
    return SyncSettings(_env_file=None, request_timeout_seconds=5, refresh_timeout_seconds=5)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def account(session) -> FakeAccount:
    return FakeAccount(session)
