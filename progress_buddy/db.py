from __future__ import annotations

# progress_buddy/db.py
import logging
import os
import sqlite3
import threading
from dataclasses import dataclass
from typing import Any, Callable, Sequence, TypeVar

from .config import get_db_path
from .errors import InitializationError, QueryError, StoreError
from .repository import activity_repo, goal_repo, log_repo

logger = logging.getLogger(__name__)

T = TypeVar("T")

# UTC with millisecond precision; text order == time order.
NOW_SQL = "strftime('%Y-%m-%d %H:%M:%f', 'now')"

SCHEMA = f"""
CREATE TABLE IF NOT EXISTS activities (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL,
  description TEXT,
  specific TEXT NOT NULL,
  measurable TEXT NOT NULL,
  achievable TEXT,
  relevant TEXT,
  timebound TEXT NOT NULL,
  buddy_email TEXT,
  completed BOOLEAN NOT NULL DEFAULT 0,
  created_at DATETIME NOT NULL DEFAULT ({NOW_SQL}),
  updated_at DATETIME NOT NULL DEFAULT ({NOW_SQL})
);

CREATE TABLE IF NOT EXISTS logs (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  activity_id INTEGER NOT NULL,
  text TEXT NOT NULL,
  metrics TEXT,
  created_at DATETIME NOT NULL DEFAULT ({NOW_SQL}),
  FOREIGN KEY (activity_id) REFERENCES activities (id) ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS idx_logs_activity ON logs(activity_id);

CREATE TABLE IF NOT EXISTS goals (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  activity_id INTEGER NOT NULL,
  target_value INTEGER NOT NULL,
  current_value INTEGER NOT NULL DEFAULT 0,
  target_date DATE,
  achieved BOOLEAN NOT NULL DEFAULT 0,
  created_at DATETIME NOT NULL DEFAULT ({NOW_SQL}),
  FOREIGN KEY (activity_id) REFERENCES activities (id) ON DELETE CASCADE
);
CREATE INDEX IF NOT EXISTS idx_goals_activity ON goals(activity_id);
"""


@dataclass(frozen=True)
class RunResult:
    id: int | None
    changes: int


class Store:
    """Owns the SQLite connection for the process.

    Lifecycle is explicit: ``init()`` opens the database and creates the
    schema, ``close()`` releases it. Also usable as ``with Store(...) as s``.

    A single connection is shared, so every statement runs under an
    ``RLock``; a transaction holds the lock for its whole unit of work.
    Statements cannot be cancelled once started.
    """

    def __init__(self, db_path: str | None = None, timeout: float = 5.0):
        self._explicit_path = db_path
        self.timeout = timeout
        self.db_path: str | None = None
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.RLock()

    # ---------------- lifecycle ----------------

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def init(self) -> "Store":
        if self._conn is not None:
            return self
        path = get_db_path(self._explicit_path)
        if path != ":memory:":
            dirn = os.path.dirname(os.path.abspath(path))
            try:
                os.makedirs(dirn, exist_ok=True)
            except OSError as exc:
                raise InitializationError(f"cannot create data directory {dirn}: {exc}") from exc
        try:
            conn = sqlite3.connect(
                path,
                timeout=self.timeout,
                check_same_thread=False,
                isolation_level=None,
            )
        except sqlite3.Error as exc:
            raise InitializationError(f"cannot open database {path}: {exc}") from exc

        conn.row_factory = sqlite3.Row
        self._conn = conn
        self.db_path = path
        try:
            conn.execute("PRAGMA foreign_keys = ON;")
            self.create_schema()
        except (sqlite3.Error, StoreError) as exc:
            self._conn = None
            conn.close()
            raise InitializationError(f"cannot initialize schema in {path}: {exc}") from exc
        logger.info("connected to SQLite database at %s", path)
        return self

    def create_schema(self) -> None:
        """Create activities, logs and goals. Safe to call repeatedly."""
        conn = self._require_conn()
        with self._lock:
            conn.executescript(SCHEMA)

    def close(self) -> None:
        conn = self._conn
        if conn is None:
            return
        with self._lock:
            self._conn = None
            try:
                conn.close()
            except sqlite3.Error as exc:
                raise StoreError(f"error closing database: {exc}") from exc
        logger.info("database connection closed")

    def __enter__(self) -> "Store":
        if not self.is_open:
            self.init()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreError("store is not initialized; call init() first")
        return self._conn

    # ---------------- query primitives ----------------

    def _execute(self, kind: str, query: str, params: Sequence[Any]) -> sqlite3.Cursor:
        conn = self._require_conn()
        try:
            return conn.execute(query, tuple(params))
        except sqlite3.Error as exc:
            logger.debug("%s query failed: %s | params=%r | %s", kind, query.strip(), params, exc)
            raise QueryError(f"{kind} query failed: {exc}") from exc

    def get(self, query: str, params: Sequence[Any] = ()) -> dict | None:
        with self._lock:
            row = self._execute("get", query, params).fetchone()
        return dict(row) if row is not None else None

    def all(self, query: str, params: Sequence[Any] = ()) -> list[dict]:
        with self._lock:
            rows = self._execute("all", query, params).fetchall()
        return [dict(r) for r in rows]

    def run(self, query: str, params: Sequence[Any] = ()) -> RunResult:
        with self._lock:
            cur = self._execute("run", query, params)
            return RunResult(id=cur.lastrowid, changes=cur.rowcount)

    def _rollback(self, conn: sqlite3.Connection) -> None:
        # the caller re-raises the failure that triggered the rollback
        if not conn.in_transaction:
            return
        try:
            conn.execute("ROLLBACK")
        except sqlite3.Error as exc:
            logger.error("rollback failed: %s", exc)

    def transaction(self, work: Callable[[], T]) -> T:
        """Run ``work()`` inside BEGIN/COMMIT; roll back and re-raise on any failure.

        A failed COMMIT (e.g. SQLITE_BUSY) is rolled back as well, so the
        connection never stays inside a dead transaction.
        """
        conn = self._require_conn()
        with self._lock:
            if conn.in_transaction:
                raise QueryError("nested transactions are not supported")
            self._execute("transaction", "BEGIN", ())
            try:
                result = work()
                self._execute("transaction", "COMMIT", ())
            except BaseException:
                self._rollback(conn)
                raise
            return result

    def atomic(self, work: Callable[[], T]) -> T:
        """Run ``work()`` in the caller's open transaction, or in a new one."""
        conn = self._require_conn()
        with self._lock:
            # holding the lock means an open transaction belongs to this thread
            if conn.in_transaction:
                return work()
            return self.transaction(work)

    def ping(self) -> dict | None:
        return self.get("SELECT 1 AS test")

    # ---------------- activities ----------------

    def list_activities(self) -> list[dict]:
        return activity_repo.list_activities(self)

    def get_activity(self, activity_id: int) -> dict | None:
        return activity_repo.get_activity(self, activity_id)

    def create_activity(self, fields: dict) -> int:
        return activity_repo.create_activity(self, fields)

    def update_activity(self, activity_id: int, fields: dict) -> int:
        return activity_repo.update_activity(self, activity_id, fields)

    def delete_activity(self, activity_id: int) -> int:
        return activity_repo.delete_activity(self, activity_id)

    # ---------------- logs ----------------

    def list_logs_by_activity(self, activity_id: int) -> list[dict]:
        return log_repo.list_logs_by_activity(self, activity_id)

    def create_log(self, fields: dict) -> int:
        return log_repo.create_log(self, fields)

    # ---------------- goals ----------------

    def list_goals_by_activity(self, activity_id: int) -> list[dict]:
        return goal_repo.list_goals_by_activity(self, activity_id)

    def get_goal(self, goal_id: int) -> dict | None:
        return goal_repo.get_goal(self, goal_id)

    def create_goal(self, fields: dict) -> int:
        return goal_repo.create_goal(self, fields)

    def update_goal_progress(self, goal_id: int, current_value: int) -> dict:
        return goal_repo.update_goal_progress(self, goal_id, current_value)
