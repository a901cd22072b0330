# src/tasktrack/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the service layer.

TaskService depends on this Protocol instead of the concrete SQLite
repository, so tests can drive it with an in-memory fake.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Task, TaskCreate, TaskFilters, TaskPage, TaskPatch


class TaskRepo(Protocol):
    def create(self, data: TaskCreate) -> Task: ...
    def list(self, filters: TaskFilters | None = None) -> TaskPage: ...
    def get_by_id(self, task_id: int) -> Task | None: ...
    def update(self, task_id: int, patch: TaskPatch) -> Task | None: ...
    def delete(self, task_id: int) -> bool: ...
