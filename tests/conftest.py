# tests/conftest.py

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from tasktrack.config import Settings
from tasktrack.storage.gateway import StorageGateway
from tasktrack.tasks.task_repository import TaskRepository
from tasktrack.tasks.task_service import TaskService


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings pointing at a per-test directory.

    Built directly rather than via Settings.from_env() so the developer's
    environment / .env cannot leak into tests.
    """
    return Settings(
        app_name="tasktrack-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        log_dir=tmp_path / "logs",
    )


@pytest.fixture()
def gateway(settings: Settings) -> Iterator[StorageGateway]:
    gw = StorageGateway(settings.tasks_db_path)
    gw.initialize()
    try:
        yield gw
    finally:
        gw.close()


@pytest.fixture()
def repo(gateway: StorageGateway) -> TaskRepository:
    return TaskRepository(gateway)


@pytest.fixture()
def service(repo: TaskRepository) -> TaskService:
    """Service wired to the real SQLite repository."""
    return TaskService(repo)
