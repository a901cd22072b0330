# src/tasktrack/tasks/task_repository.py

from __future__ import annotations

import logging
import sqlite3
from datetime import UTC, datetime, timedelta
from typing import Any

from ..errors import PersistenceError
from ..storage.gateway import StorageGateway
from .task_models import (
    UNSET,
    Task,
    TaskCreate,
    TaskFilters,
    TaskPage,
    TaskPatch,
    TaskStatus,
    format_ts,
    parse_ts,
)

logger = logging.getLogger(__name__)

_COLUMNS = "id, title, description, status, priority, created_at, updated_at"

# Newest first; id breaks ties between rows created in the same instant.
_ORDER_BY = "created_at DESC, id DESC"

# Patch field -> column. Iterated in this order so generated SQL is stable.
_PATCH_COLUMNS = (
    ("title", "title"),
    ("description", "description"),
    ("status", "status"),
    ("priority", "priority"),
)

_LIKE_ESCAPE = "\\"


def _escape_like(term: str) -> str:
    return (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


def build_where(filters: TaskFilters) -> tuple[str, list[Any]]:
    """
    Conjunctive WHERE clause for a list query.

    A filter is applied whenever it is present, even if its value is falsy
    (priority=0 still narrows). An empty search string means "no search".
    """
    clauses: list[str] = []
    params: list[Any] = []

    if filters.status is not None:
        clauses.append("status = ?")
        params.append(TaskStatus(filters.status).value)

    if filters.priority is not None:
        clauses.append("priority = ?")
        params.append(int(filters.priority))

    if filters.search:
        like = f"%{_escape_like(filters.search)}%"
        clauses.append(f"(title LIKE ? ESCAPE '{_LIKE_ESCAPE}' OR description LIKE ? ESCAPE '{_LIKE_ESCAPE}')")
        params.extend([like, like])

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    return where, params


class TaskRepository:
    """
    Maps rows of the `tasks` table to Task records.

    Holds nothing but the gateway reference; each method is a short
    sequence of independent single-shot store calls (no cross-call
    transaction), so concurrent updates of one row are last-write-wins.
    """

    def __init__(self, gateway: StorageGateway) -> None:
        self._gw = gateway

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            title=str(row["title"]),
            description=str(row["description"] or ""),
            status=TaskStatus(row["status"]),
            priority=int(row["priority"]),
            created_at=parse_ts(row["created_at"]),
            updated_at=parse_ts(row["updated_at"]),
        )

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    # ---- public API ----

    def create(self, data: TaskCreate) -> Task:
        now = format_ts(self._now())
        task_id = self._gw.insert(
            """
            INSERT INTO tasks (title, description, status, priority, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (data.title, data.description, TaskStatus(data.status).value, int(data.priority), now, now),
        )

        task = self.get_by_id(task_id)
        if task is None:
            raise PersistenceError(f"Task id={task_id} vanished right after insert")
        logger.debug("Task created id=%s status=%s priority=%s", task.id, task.status, task.priority)
        return task

    def list(self, filters: TaskFilters | None = None) -> TaskPage:
        filters = filters or TaskFilters()
        where, params = build_where(filters)

        row = self._gw.query_one(f"SELECT COUNT(*) AS n FROM tasks {where}", params)
        total = int(row["n"]) if row is not None else 0

        rows = self._gw.query_many(
            f"SELECT {_COLUMNS} FROM tasks {where} ORDER BY {_ORDER_BY} LIMIT ? OFFSET ?",
            [*params, int(filters.limit), int(filters.offset)],
        )
        return TaskPage(
            data=[self._row_to_task(r) for r in rows],
            total=total,
            limit=filters.limit,
            offset=filters.offset,
        )

    def get_by_id(self, task_id: int) -> Task | None:
        row = self._gw.query_one(f"SELECT {_COLUMNS} FROM tasks WHERE id = ?", (int(task_id),))
        return self._row_to_task(row) if row is not None else None

    def update(self, task_id: int, patch: TaskPatch) -> Task | None:
        existing = self.get_by_id(task_id)
        if existing is None:
            return None

        if patch.is_empty():
            return existing

        fields: list[str] = []
        params: list[Any] = []
        for attr, column in _PATCH_COLUMNS:
            value = getattr(patch, attr)
            if value is UNSET:
                continue
            if attr == "status":
                value = TaskStatus(value).value
            fields.append(f"{column} = ?")
            params.append(value)

        # Keep updated_at strictly increasing even if the clock has not moved
        # (or moved backwards) since the last write.
        updated_at = max(self._now(), existing.updated_at + timedelta(microseconds=1))
        fields.append("updated_at = ?")
        params.append(format_ts(updated_at))
        params.append(int(task_id))

        changed = self._gw.execute(f"UPDATE tasks SET {', '.join(fields)} WHERE id = ?", params)
        if changed == 0:
            # Deleted between the read and the write.
            return None

        logger.debug("Task updated id=%s fields=%s", task_id, sorted(patch.supplied()))
        return self.get_by_id(task_id)

    def delete(self, task_id: int) -> bool:
        removed = self._gw.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),)) > 0
        if removed:
            logger.debug("Task deleted id=%s", task_id)
        return removed

    def count(self) -> int:
        row = self._gw.query_one("SELECT COUNT(*) AS n FROM tasks")
        return int(row["n"]) if row is not None else 0
