"""Shared fixtures."""
from typing import List, Tuple

import pytest

from calculator_history.common.config import AppConfig
from calculator_history.common.errors import StoreFailure
from calculator_history.server.notifier import Notifier
from calculator_history.server.store import OperationStore, SqlOperationStore


class FakeNotifier(Notifier):
    """Notifier recording what it sends, optionally failing."""

    def __init__(self, error: Exception = None):
        self.sent: List[Tuple[str, str, str]] = []
        self.error = error

    def send(self, device_token: str, title: str, body: str) -> str:
        if self.error is not None:
            raise self.error
        self.sent.append((device_token, title, body))
        return f"projects/demo/messages/{len(self.sent)}"


class BrokenStore(OperationStore):
    """Store failing on every call, like an unreachable database."""

    def _fail(self, *args, **kwargs):
        raise StoreFailure("Record store operation failed", details="connection refused")

    create = list_all = get_by_id = update = delete_by_id = delete_all = _fail


@pytest.fixture
def config() -> AppConfig:
    """Configuration using an in-memory database."""
    return AppConfig.from_env({"DATABASE_URL": "sqlite://"})


@pytest.fixture
def store(config: AppConfig):
    """Empty SQL store on an in-memory SQLite database."""
    sql_store = SqlOperationStore.from_url(config.database_url)
    yield sql_store
    sql_store.close()


@pytest.fixture
def notifier() -> FakeNotifier:
    """Notifier that always succeeds."""
    return FakeNotifier()
