# src/tasktrack/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Final

DEFAULT_DESCRIPTION: Final = ""
DEFAULT_PRIORITY: Final = 3
MIN_PRIORITY: Final = 1
MAX_PRIORITY: Final = 5
DEFAULT_LIMIT: Final = 10
DEFAULT_OFFSET: Final = 0


# Marker for "field not supplied" in a patch (distinct from None or "").
UNSET: Any = object()


class TaskStatus(StrEnum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(s.value for s in cls)


def format_ts(ts: datetime) -> str:
    """Storage/API form: ISO-8601 UTC with microseconds (sorts chronologically)."""
    return ts.astimezone(UTC).isoformat(timespec="microseconds")


def parse_ts(raw: str) -> datetime:
    ts = datetime.fromisoformat(raw)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC)


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    title: str
    description: str
    status: TaskStatus
    priority: int
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """API-facing record (camelCase timestamps, ISO strings)."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "priority": self.priority,
            "createdAt": format_ts(self.created_at),
            "updatedAt": format_ts(self.updated_at),
        }


@dataclass(frozen=True, slots=True)
class TaskCreate:
    title: str
    description: str = DEFAULT_DESCRIPTION
    status: TaskStatus = TaskStatus.PENDING
    priority: int = DEFAULT_PRIORITY


@dataclass(frozen=True, slots=True)
class TaskPatch:
    """
    Partial update. A field left as UNSET keeps its stored value;
    any other value (including "") is written.
    """

    title: str | Any = UNSET
    description: str | Any = UNSET
    status: TaskStatus | Any = UNSET
    priority: int | Any = UNSET

    def supplied(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not UNSET}

    def is_empty(self) -> bool:
        return not self.supplied()


@dataclass(frozen=True, slots=True)
class TaskFilters:
    status: TaskStatus | None = None
    priority: int | None = None
    search: str | None = None
    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET


@dataclass(frozen=True, slots=True)
class TaskPage:
    data: list[Task] = field(default_factory=list)
    total: int = 0
    limit: int = DEFAULT_LIMIT
    offset: int = DEFAULT_OFFSET

    def to_dict(self) -> dict[str, Any]:
        return {
            "data": [t.to_dict() for t in self.data],
            "total": self.total,
            "limit": self.limit,
            "offset": self.offset,
        }
