# src/tasktrack/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..config import Settings
from ..storage.gateway import StorageGateway
from ..tasks.task_repository import TaskRepository
from ..tasks.task_service import TaskService


@dataclass(slots=True)
class AppState:
    settings: Settings
    storage: StorageGateway
    task_repo: TaskRepository
    tasks: TaskService
