# src/tasktrack/bootstrap.py

"""
Composition root.

Whatever hosts the service (an HTTP app, a worker, a test) calls
create_initial_state() once at startup and shutdown() on exit. The storage
handle is passed around explicitly; nothing here is a module-level global.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .config import Settings, get_settings
from .core.state import AppState
from .logging_setup import setup_logging
from .storage.gateway import StorageGateway
from .tasks.task_repository import TaskRepository
from .tasks.task_service import TaskService

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings | None = None) -> Path:
    """Console level follows settings.log_level; the file under settings.log_dir gets everything."""
    if settings is None:
        settings = get_settings()
    return setup_logging(log_dir=settings.log_dir, level=settings.log_level)


def create_initial_state(*, settings: Settings | None = None) -> AppState:
    """
    Build AppState from the provided settings and initialize the store.

    Raises StorageInitError if the database cannot be opened; that is
    fatal for process start.
    """
    if settings is None:
        settings = get_settings()

    storage = StorageGateway(settings.tasks_db_path)
    storage.initialize()

    repo = TaskRepository(storage)
    state = AppState(
        settings=settings,
        storage=storage,
        task_repo=repo,
        tasks=TaskService(repo),
    )
    logger.info("%s ready tasks=%s", settings.app_name, repo.count())
    return state


def shutdown(state: AppState) -> None:
    state.storage.close()
    logger.info("%s stopped.", state.settings.app_name)
