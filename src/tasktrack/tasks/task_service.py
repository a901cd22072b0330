# src/tasktrack/tasks/task_service.py

"""
The five operations offered to the API/controller layer.

Callers hand over decoded JSON bodies, query parameters and raw path ids.
Everything is validated here first; a ValidationError is raised before the
repository is touched. Storage errors propagate unchanged.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.ports import TaskRepo
from .task_models import Task, TaskFilters, TaskPage
from .validation import (
    check_filters,
    parse_list_filters,
    parse_task_id,
    validate_create,
    validate_patch,
)


class TaskService:
    def __init__(self, repo: TaskRepo) -> None:
        self._repo = repo

    def create_task(self, payload: Mapping[str, Any]) -> Task:
        data = validate_create(payload)
        return self._repo.create(data)

    def list_tasks(self, filters: Mapping[str, Any] | TaskFilters | None = None) -> TaskPage:
        if isinstance(filters, TaskFilters):
            filters = check_filters(filters)
        else:
            filters = parse_list_filters(filters)
        return self._repo.list(filters)

    def get_task(self, task_id: Any) -> Task | None:
        """Returns None when no task has this id."""
        return self._repo.get_by_id(parse_task_id(task_id))

    def update_task(self, task_id: Any, patch: Mapping[str, Any]) -> Task | None:
        tid = parse_task_id(task_id)
        return self._repo.update(tid, validate_patch(patch))

    def delete_task(self, task_id: Any) -> bool:
        return self._repo.delete(parse_task_id(task_id))
