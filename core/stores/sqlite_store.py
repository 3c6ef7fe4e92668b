# =============================================================================
# core/stores/sqlite_store.py - Embedded SQLite Record Store
# =============================================================================
# One database file with the four entity tables. Each operation opens its
# own connection, runs a single statement and commits, so concurrent
# requests rely on SQLite's own write locking.
#
# Booleans are stored as 0/1 integers; Repository converts them back.
# =============================================================================

from __future__ import annotations

import logging
import re
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from app.exceptions import BackendUnavailableError

from .base import ALL_TABLES, RecordStore, Repository, TableSpec

logger = logging.getLogger(__name__)

BACKEND = "sqlite"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS admins (
  id          INTEGER PRIMARY KEY AUTOINCREMENT,
  username    TEXT UNIQUE NOT NULL,
  password    TEXT NOT NULL,
  created_at  TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS products (
  id          INTEGER PRIMARY KEY AUTOINCREMENT,
  name        TEXT NOT NULL,
  description TEXT,
  price       REAL NOT NULL CHECK (price >= 0),
  category    TEXT NOT NULL,
  image       TEXT,
  in_stock    INTEGER NOT NULL DEFAULT 1,
  featured    INTEGER NOT NULL DEFAULT 0,
  created_at  TEXT NOT NULL,
  updated_at  TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS messages (
  id          INTEGER PRIMARY KEY AUTOINCREMENT,
  name        TEXT NOT NULL,
  email       TEXT NOT NULL,
  subject     TEXT,
  message     TEXT NOT NULL,
  status      TEXT NOT NULL DEFAULT 'unread' CHECK (status IN ('unread', 'read')),
  created_at  TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS subscribers (
  id            INTEGER PRIMARY KEY AUTOINCREMENT,
  email         TEXT UNIQUE NOT NULL,
  status        TEXT NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'inactive')),
  subscribed_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_products_created    ON products(created_at);
CREATE INDEX IF NOT EXISTS idx_products_category   ON products(category);
CREATE INDEX IF NOT EXISTS idx_messages_created    ON messages(created_at);
CREATE INDEX IF NOT EXISTS idx_subscribers_created ON subscribers(subscribed_at);
"""

# sqlite3 reports: UNIQUE constraint failed: subscribers.email
_UNIQUE_PATTERN = re.compile(r"UNIQUE constraint failed: \w+\.(?P<column>\w+)")


class SqliteRepository(Repository):
    """Repository over one SQLite table."""

    native_booleans = False

    def __init__(self, spec: TableSpec, store: "SqliteRecordStore"):
        super().__init__(spec)
        self._store = store

    @contextmanager
    def _connection(self, pending: dict[str, Any] | None = None) -> Iterator[sqlite3.Connection]:
        """Connection that maps sqlite3 errors to store errors."""
        try:
            with self._store.connect() as conn:
                yield conn
        except sqlite3.IntegrityError as e:
            match = _UNIQUE_PATTERN.search(str(e))
            if match is None:
                raise BackendUnavailableError(BACKEND, str(e)) from e
            column = match.group("column")
            raise self._duplicate(column, (pending or {}).get(column)) from e
        except sqlite3.Error as e:
            raise BackendUnavailableError(BACKEND, str(e)) from e

    def _where(self, filters: dict[str, Any]) -> tuple[str, list[Any]]:
        if not filters:
            return "", []
        clause = " AND ".join(f"{column} = ?" for column in filters)
        return f" WHERE {clause}", list(filters.values())

    def _fetch_by_id(self, conn: sqlite3.Connection, record_id: int) -> dict[str, Any] | None:
        row = conn.execute(f"SELECT * FROM {self.spec.name} WHERE id = ?", (record_id,)).fetchone()
        return dict(row) if row is not None else None

    def _select(self, filters: dict[str, Any]) -> list[dict[str, Any]]:
        where, params = self._where(filters)
        sql = (
            f"SELECT * FROM {self.spec.name}{where} "
            f"ORDER BY {self.spec.created_field} DESC, id DESC"
        )
        with self._connection() as conn:
            return [dict(row) for row in conn.execute(sql, params).fetchall()]

    def _select_one(self, field_name: str, value: Any) -> dict[str, Any] | None:
        with self._connection() as conn:
            row = conn.execute(
                f"SELECT * FROM {self.spec.name} WHERE {field_name} = ? LIMIT 1", (value,)
            ).fetchone()
            return dict(row) if row is not None else None

    def _count(self) -> int:
        with self._connection() as conn:
            return conn.execute(f"SELECT COUNT(*) FROM {self.spec.name}").fetchone()[0]

    def _insert(self, row: dict[str, Any]) -> dict[str, Any]:
        columns = list(row)
        placeholders = ", ".join("?" for _ in columns)
        sql = f"INSERT INTO {self.spec.name} ({', '.join(columns)}) VALUES ({placeholders})"
        with self._connection(pending=row) as conn:
            cursor = conn.execute(sql, [row[column] for column in columns])
            conn.commit()
            return self._fetch_by_id(conn, cursor.lastrowid)

    def _update(self, record_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
        assignments = ", ".join(f"{column} = ?" for column in changes)
        sql = f"UPDATE {self.spec.name} SET {assignments} WHERE id = ?"
        with self._connection(pending=changes) as conn:
            cursor = conn.execute(sql, [*changes.values(), record_id])
            conn.commit()
            if cursor.rowcount == 0:
                return None
            return self._fetch_by_id(conn, record_id)

    def _delete(self, record_id: int) -> bool:
        with self._connection() as conn:
            cursor = conn.execute(f"DELETE FROM {self.spec.name} WHERE id = ?", (record_id,))
            conn.commit()
            return cursor.rowcount > 0


class SqliteRecordStore(RecordStore):
    """
    Record store backed by an embedded SQLite database file.

    - Ensures schema on init().
    - Provides a context-managed connection method.
    """

    backend = BACKEND

    def __init__(self, db_path: Path | str, timeout: float = 10.0):
        self.db_path = Path(db_path)
        self.timeout = timeout

        repos = {spec.name: SqliteRepository(spec, self) for spec in ALL_TABLES}
        self.credentials = repos["admins"]
        self.products = repos["products"]
        self.messages = repos["messages"]
        self.subscribers = repos["subscribers"]

    @contextmanager
    def connect(self) -> Iterator[sqlite3.Connection]:
        conn = sqlite3.connect(self.db_path, timeout=self.timeout)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def init(self) -> None:
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            with self.connect() as conn:
                try:
                    conn.execute("PRAGMA journal_mode=WAL;")
                except sqlite3.OperationalError:
                    # Non-fatal; some filesystems don't support WAL
                    logger.warning("Could not enable WAL journal mode")
                conn.executescript(SCHEMA_SQL)
                conn.commit()
        except (OSError, sqlite3.Error) as e:
            raise BackendUnavailableError(BACKEND, f"cannot initialize {self.db_path}: {e}") from e
        logger.info(f"SQLite record store ready at {self.db_path}")
