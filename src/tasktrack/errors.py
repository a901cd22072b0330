# src/tasktrack/errors.py

"""
Error taxonomy shared by storage, validation and the service layer.

"Not found" is deliberately absent: a missing task is a normal result
(None / False), never an exception.
"""

from __future__ import annotations


class TaskTrackError(Exception):
    """Base class for every error raised by tasktrack."""


# ---- storage ----


class StorageError(TaskTrackError):
    """A storage-level failure."""


class StorageInitError(StorageError):
    """The backing store could not be opened or the schema could not be created."""


class NotInitializedError(StorageError):
    """A gateway call was made before initialize() or after close()."""

    def __init__(self, message: str = "Storage gateway is not initialized; call initialize() first.") -> None:
        super().__init__(message)


class PersistenceError(StorageError):
    """A statement failed after input passed validation (constraint violation, I/O)."""


# ---- validation ----


class ValidationError(TaskTrackError):
    """
    Bad caller input. Detected before any store access.

    Carries plain data so the API layer can render it however it likes:
    - kind:  "missing_field" | "invalid_field" | "invalid_identifier"
    - field: offending field name (or "id")
    """

    kind = "invalid_field"

    def __init__(self, field: str, message: str, *, kind: str | None = None) -> None:
        super().__init__(message)
        self.field = field
        self.message = message
        if kind is not None:
            self.kind = kind

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "kind": self.kind, "field": self.field}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r}, field={self.field!r}, message={self.message!r})"


class InvalidFieldError(ValidationError):
    kind = "invalid_field"


class InvalidIdentifierError(ValidationError):
    kind = "invalid_identifier"

    def __init__(self, raw: object) -> None:
        super().__init__("id", f"Invalid task ID: {raw!r}")
        self.raw = raw
