# src/tasktrack/storage/gateway.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ..errors import NotInitializedError, PersistenceError, StorageInitError

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"

Params = Sequence[Any]

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS tasks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT '',
        status TEXT NOT NULL DEFAULT 'pending'
            CHECK (status IN ('pending', 'in_progress', 'completed')),
        priority INTEGER NOT NULL DEFAULT 3
            CHECK (priority >= 1 AND priority <= 5),
        created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f+00:00', 'now')),
        updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f+00:00', 'now'))
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_tasks_created ON tasks(created_at, id)",
    "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status)",
)


class StorageGateway:
    """
    Owner of the single SQLite connection.

    Lifecycle:
    - construct (nothing is opened yet)
    - initialize(): open the file, create the schema if missing (idempotent)
    - close(): release the connection

    Every primitive is single-shot: the connection runs in autocommit mode,
    so no transaction is held open between calls. A lock serializes use of
    the shared connection when callers live on different threads.
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = db_path if db_path == MEMORY_DB else Path(db_path)
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()

    @property
    def db_path(self) -> str | Path:
        return self._db_path

    @property
    def is_initialized(self) -> bool:
        return self._conn is not None

    # ---- lifecycle ----

    def initialize(self) -> None:
        with self._lock:
            if self._conn is not None:
                return

            conn: sqlite3.Connection | None = None
            try:
                if isinstance(self._db_path, Path):
                    self._db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(
                    str(self._db_path),
                    timeout=30.0,
                    isolation_level=None,
                    check_same_thread=False,
                )
                conn.row_factory = sqlite3.Row
                self._configure_conn(conn)
                for stmt in _SCHEMA:
                    conn.execute(stmt)
            except (sqlite3.Error, OSError) as exc:
                if conn is not None:
                    with contextlib.suppress(sqlite3.Error):
                        conn.close()
                raise StorageInitError(f"Cannot initialize task store at {self._db_path}: {exc}") from exc

            self._conn = conn
            logger.info("StorageGateway ready db=%s", self._db_path)

    def close(self) -> None:
        with self._lock:
            if self._conn is None:
                return
            conn, self._conn = self._conn, None
            conn.close()
            logger.info("StorageGateway closed db=%s", self._db_path)

    def __enter__(self) -> StorageGateway:
        self.initialize()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise NotInitializedError()
        return self._conn

    # ---- primitives ----

    def execute(self, statement: str, params: Params = ()) -> int:
        """Run a mutating statement and return the number of affected rows."""
        with self._lock:
            conn = self._require_conn()
            try:
                cur = conn.execute(statement, tuple(params))
            except (sqlite3.Error, OverflowError) as exc:
                raise PersistenceError(f"Statement failed: {exc}") from exc
            return cur.rowcount

    def query_one(self, statement: str, params: Params = ()) -> sqlite3.Row | None:
        with self._lock:
            conn = self._require_conn()
            try:
                return conn.execute(statement, tuple(params)).fetchone()
            except (sqlite3.Error, OverflowError) as exc:
                raise PersistenceError(f"Query failed: {exc}") from exc

    def query_many(self, statement: str, params: Params = ()) -> list[sqlite3.Row]:
        """Rows come back in whatever order the statement asks for."""
        with self._lock:
            conn = self._require_conn()
            try:
                return conn.execute(statement, tuple(params)).fetchall()
            except (sqlite3.Error, OverflowError) as exc:
                raise PersistenceError(f"Query failed: {exc}") from exc

    def insert(self, statement: str, params: Params = ()) -> int:
        """Run an INSERT and return the store-assigned row id."""
        with self._lock:
            conn = self._require_conn()
            try:
                cur = conn.execute(statement, tuple(params))
            except (sqlite3.Error, OverflowError) as exc:
                raise PersistenceError(f"Insert failed: {exc}") from exc
            rowid = cur.lastrowid
            if rowid is None:
                raise PersistenceError("SQLite did not return lastrowid for insert")
            return int(rowid)
