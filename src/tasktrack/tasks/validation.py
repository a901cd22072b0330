# src/tasktrack/tasks/validation.py

"""
Input checks applied before anything reaches the repository.

All functions are pure: they look at caller-supplied data, raise a
ValidationError subclass describing the first offending field, or return
a typed value object ready for the repository.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from ..errors import InvalidFieldError, InvalidIdentifierError, ValidationError
from .task_models import (
    DEFAULT_DESCRIPTION,
    DEFAULT_LIMIT,
    DEFAULT_OFFSET,
    DEFAULT_PRIORITY,
    MAX_PRIORITY,
    MIN_PRIORITY,
    UNSET,
    TaskCreate,
    TaskFilters,
    TaskPatch,
    TaskStatus,
)

_STATUS_HINT = ", ".join(TaskStatus.values())

# SQLite INTEGER is a signed 64-bit value.
SQLITE_INT_MIN = -(2**63)
SQLITE_INT_MAX = 2**63 - 1

# Plain ASCII decimal only: no "1_000", no non-Latin digits.
_INT_RE = re.compile(r"[+-]?[0-9]+")


def _is_int(value: Any) -> bool:
    # bool is an int subclass; True is not a priority.
    return isinstance(value, int) and not isinstance(value, bool)


def check_title(value: Any) -> str:
    if not isinstance(value, str):
        raise InvalidFieldError("title", "Title must be a string")
    if not value.strip():
        raise InvalidFieldError("title", "Title must not be empty")
    return value


def check_description(value: Any) -> str:
    if value is None:
        return DEFAULT_DESCRIPTION
    if not isinstance(value, str):
        raise InvalidFieldError("description", "Description must be a string")
    return value


def check_status(value: Any) -> TaskStatus:
    if isinstance(value, str):
        try:
            return TaskStatus(value)
        except ValueError:
            pass
    raise InvalidFieldError("status", f"Invalid status. Must be one of: {_STATUS_HINT}")


def check_priority(value: Any) -> int:
    if not _is_int(value) or not MIN_PRIORITY <= value <= MAX_PRIORITY:
        raise InvalidFieldError("priority", f"Priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}")
    return int(value)


def validate_create(payload: Mapping[str, Any]) -> TaskCreate:
    """Validate a create body. Absent optional fields take their defaults."""
    if not isinstance(payload, Mapping):
        raise ValidationError("body", "Request body must be an object")

    if payload.get("title") is None:
        raise ValidationError("title", "Title is required", kind="missing_field")
    title = check_title(payload["title"])

    description = check_description(payload.get("description", DEFAULT_DESCRIPTION))

    raw_status = payload.get("status")
    status = TaskStatus.PENDING if raw_status is None else check_status(raw_status)

    raw_priority = payload.get("priority")
    priority = DEFAULT_PRIORITY if raw_priority is None else check_priority(raw_priority)

    return TaskCreate(title=title, description=description, status=status, priority=priority)


def validate_patch(payload: Mapping[str, Any]) -> TaskPatch:
    """
    Validate an update body into a TaskPatch.

    Keys that are absent stay UNSET. An explicit null description clears it
    to ""; an explicit null for any other field is rejected.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("body", "Request body must be an object")

    title = UNSET
    if "title" in payload:
        title = check_title(payload["title"])

    description = UNSET
    if "description" in payload:
        description = check_description(payload["description"])

    status = UNSET
    if "status" in payload:
        status = check_status(payload["status"])

    priority = UNSET
    if "priority" in payload:
        priority = check_priority(payload["priority"])

    return TaskPatch(title=title, description=description, status=status, priority=priority)


def _to_int(raw: Any) -> int | None:
    """int or decimal string -> int within SQLite range; None if it is neither."""
    if _is_int(raw):
        value = int(raw)
    elif isinstance(raw, str) and _INT_RE.fullmatch(raw.strip()):
        value = int(raw.strip())
    else:
        return None
    if not SQLITE_INT_MIN <= value <= SQLITE_INT_MAX:
        return None
    return value


def parse_task_id(raw: Any) -> int:
    """Path parameter -> int. Accepts ints and base-10 integer strings."""
    value = _to_int(raw)
    if value is None:
        raise InvalidIdentifierError(raw)
    return value


def _parse_int(name: str, raw: Any) -> int | None:
    if raw is None or (isinstance(raw, str) and raw.strip() == ""):
        return None
    value = _to_int(raw)
    if value is None:
        raise InvalidFieldError(name, f"{name} must be an integer")
    return value


def check_filters(filters: TaskFilters) -> TaskFilters:
    """Re-check an already-typed TaskFilters (callers may build one directly)."""
    if filters.status is not None:
        check_status(filters.status)
    for name in ("priority", "limit", "offset"):
        value = getattr(filters, name)
        if value is None and name == "priority":
            continue
        if _to_int(value) is None:
            raise InvalidFieldError(name, f"{name} must be an integer")
    if filters.search is not None and not isinstance(filters.search, str):
        raise InvalidFieldError("search", "search must be a string")
    if filters.limit < 1:
        raise InvalidFieldError("limit", "limit must be at least 1")
    if filters.offset < 0:
        raise InvalidFieldError("offset", "offset must not be negative")
    return filters


def parse_list_filters(query: Mapping[str, Any] | None = None) -> TaskFilters:
    """
    Build TaskFilters from query-string style input.

    - empty strings count as absent
    - priority is parsed but not range-checked (out-of-range simply matches nothing)
    - limit >= 1, offset >= 0
    """
    if query is None:
        query = {}
    if not isinstance(query, Mapping):
        raise ValidationError("query", "Query parameters must be an object")

    status: TaskStatus | None = None
    raw_status = query.get("status")
    if raw_status is not None and raw_status != "":
        status = check_status(raw_status)

    search = query.get("search")
    if search is not None and not isinstance(search, str):
        raise InvalidFieldError("search", "search must be a string")

    limit = _parse_int("limit", query.get("limit"))
    offset = _parse_int("offset", query.get("offset"))

    return check_filters(
        TaskFilters(
            status=status,
            priority=_parse_int("priority", query.get("priority")),
            search=search or None,
            limit=DEFAULT_LIMIT if limit is None else limit,
            offset=DEFAULT_OFFSET if offset is None else offset,
        )
    )
