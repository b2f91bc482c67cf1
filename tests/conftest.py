from __future__ import annotations

import logging
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from taskmaster.app.main import create_app
from taskmaster.config import Settings
from taskmaster.infra.storage.kv_memory import InMemoryKeyValueStorage
from taskmaster.services.task_store import TaskStore


@pytest.fixture()
def storage() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture()
def store(storage: InMemoryKeyValueStorage) -> TaskStore:
    return TaskStore(storage)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    return Settings(
        storage="memory",
        db_path=str(tmp_path / "taskmaster.db"),
        log_dir=tmp_path / "logs",
        log_to_file=False,
    )


@pytest.fixture()
def client(settings: Settings, store: TaskStore) -> TestClient:
    return TestClient(create_app(settings, store=store))


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # create_app() reconfigures the root logger
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
