# tests/test_bootstrap.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tasktrack.bootstrap import configure_logging, create_initial_state, shutdown
from tasktrack.config import Settings
from tasktrack.errors import NotInitializedError, StorageInitError
from tasktrack.logging_setup import level_from_name


def test_state_lifecycle(settings: Settings) -> None:
    state = create_initial_state(settings=settings)
    try:
        assert state.storage.is_initialized
        task = state.tasks.create_task({"title": "boot"})
        assert state.task_repo.get_by_id(task.id) == task
    finally:
        shutdown(state)

    assert not state.storage.is_initialized
    with pytest.raises(NotInitializedError):
        state.tasks.list_tasks()

    # Data persisted in the file survives a restart.
    again = create_initial_state(settings=settings)
    try:
        assert again.tasks.list_tasks().total == 1
    finally:
        shutdown(again)


def test_state_fails_fast_on_bad_db_path(settings: Settings, tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", "utf-8")
    bad = Settings(
        app_name=settings.app_name,
        log_level=settings.log_level,
        data_dir=settings.data_dir,
        tasks_db_path=blocker / "tasks.sqlite3",
        log_dir=settings.log_dir,
    )
    with pytest.raises(StorageInitError):
        create_initial_state(settings=bad)


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKTRACK_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("TASKTRACK_LOG_LEVEL", "debug")
    monkeypatch.delenv("TASKTRACK_DB_PATH", raising=False)
    monkeypatch.delenv("TASKTRACK_LOG_DIR", raising=False)
    monkeypatch.delenv("TASKTRACK_APP_NAME", raising=False)

    s = Settings.from_env()
    assert s.app_name == "tasktrack"
    assert s.log_level == "DEBUG"
    assert s.tasks_db_path == tmp_path / "data" / "tasks.sqlite3"
    assert s.log_dir == tmp_path / "data"

    monkeypatch.setenv("TASKTRACK_DB_PATH", str(tmp_path / "elsewhere.db"))
    assert Settings.from_env().tasks_db_path == tmp_path / "elsewhere.db"


def test_configure_logging_writes_file(settings: Settings) -> None:
    root = logging.getLogger()
    foreign = list(root.handlers)
    saved_level = root.level
    try:
        configure_logging(settings)
        log_file = configure_logging(settings)  # second call replaces, does not duplicate
        assert log_file.parent == settings.log_dir

        owned = [h for h in root.handlers if h not in foreign]
        assert len(owned) == 2
        assert all(h in root.handlers for h in foreign)

        logging.getLogger("tasktrack.test").info("hello from test")
        for h in owned:
            h.flush()
        assert "hello from test" in log_file.read_text("utf-8")
    finally:
        for h in [h for h in root.handlers if h not in foreign]:
            root.removeHandler(h)
            h.close()
        root.setLevel(saved_level)
        logging.captureWarnings(False)


def test_level_from_name() -> None:
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name("WARNING") == logging.WARNING
    assert level_from_name("nonsense") == logging.INFO
    assert level_from_name(logging.ERROR) == logging.ERROR
