"""SQLite store: schema ownership and connection lifecycle."""

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from macro_tracker.config import Settings, resolve_db_path
from macro_tracker.errors import SchemaError, StoreClosedError, StoreIOError

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS entries (
  id             TEXT PRIMARY KEY,
  created_at     TEXT NOT NULL,
  date           TEXT NOT NULL,
  source         TEXT NOT NULL DEFAULT 'manual',
  raw_input      TEXT NOT NULL DEFAULT '',
  total_calories REAL NOT NULL DEFAULT 0,
  total_protein  REAL NOT NULL DEFAULT 0,
  total_carbs    REAL NOT NULL DEFAULT 0,
  total_fat      REAL NOT NULL DEFAULT 0,
  total_fiber    REAL NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_entries_date ON entries(date);

CREATE TABLE IF NOT EXISTS items (
  id         TEXT PRIMARY KEY,
  entry_id   TEXT NOT NULL REFERENCES entries(id) ON DELETE CASCADE,
  name       TEXT NOT NULL,
  quantity   TEXT NOT NULL DEFAULT '',
  calories   REAL NOT NULL DEFAULT 0,
  protein    REAL NOT NULL DEFAULT 0,
  carbs      REAL NOT NULL DEFAULT 0,
  fat        REAL NOT NULL DEFAULT 0,
  fiber      REAL NOT NULL DEFAULT 0,
  confidence TEXT NOT NULL DEFAULT 'medium'
);

CREATE INDEX IF NOT EXISTS idx_items_entry_id ON items(entry_id);

CREATE TABLE IF NOT EXISTS goals (
  id         TEXT PRIMARY KEY DEFAULT 'default',
  calories   REAL NOT NULL DEFAULT 2000,
  protein    REAL NOT NULL DEFAULT 150,
  carbs      REAL NOT NULL DEFAULT 250,
  fat        REAL NOT NULL DEFAULT 65,
  fiber      REAL NOT NULL DEFAULT 30,
  updated_at TEXT NOT NULL
);
"""

EXPECTED_COLUMNS: dict[str, frozenset[str]] = {
    "entries": frozenset(
        {
            "id",
            "created_at",
            "date",
            "source",
            "raw_input",
            "total_calories",
            "total_protein",
            "total_carbs",
            "total_fat",
            "total_fiber",
        }
    ),
    "items": frozenset(
        {
            "id",
            "entry_id",
            "name",
            "quantity",
            "calories",
            "protein",
            "carbs",
            "fat",
            "fiber",
            "confidence",
        }
    ),
    "goals": frozenset(
        {"id", "calories", "protein", "carbs", "fat", "fiber", "updated_at"}
    ),
}


class SqliteStore:
    """Owns one SQLite connection and the schema behind it.

    Writes go through ``transaction()`` and reads through ``read()``; both
    hold an internal lock so the handle can be shared between threads.
    """

    def __init__(self, connection: sqlite3.Connection, path: Path) -> None:
        self._connection: sqlite3.Connection | None = connection
        self._lock = threading.RLock()
        self.path = path

    @classmethod
    def open(cls, path: Path | None = None) -> "SqliteStore":
        """Open or create the database and ensure the schema.

        Without ``path`` the location comes from the configured state directory.
        """
        path = path or resolve_db_path(Settings())
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreIOError(f"Cannot create store directory {path.parent}") from exc
        try:
            connection = sqlite3.connect(
                str(path), isolation_level=None, check_same_thread=False
            )
        except sqlite3.Error as exc:
            raise StoreIOError(f"Cannot open store at {path}") from exc
        connection.row_factory = sqlite3.Row
        try:
            _configure(connection, path)
            _ensure_schema(connection)
        except Exception:
            connection.close()
            raise
        logger.info("Opened store at %s", path)
        return cls(connection, path)

    @property
    def closed(self) -> bool:
        return self._connection is None

    def close(self) -> None:
        """Release the connection; later operations raise StoreClosedError."""
        with self._lock:
            if self._connection is None:
                return
            self._connection.close()
            self._connection = None
            logger.info("Closed store at %s", self.path)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Run statements in one write transaction, rolled back on error."""
        with self._lock:
            connection = self._require_open()
            connection.execute("BEGIN IMMEDIATE")
            try:
                yield connection
            except BaseException:
                connection.execute("ROLLBACK")
                raise
            connection.execute("COMMIT")

    @contextmanager
    def read(self) -> Iterator[sqlite3.Connection]:
        """Run queries against a single consistent snapshot."""
        with self._lock:
            connection = self._require_open()
            connection.execute("BEGIN")
            try:
                yield connection
            finally:
                connection.execute("COMMIT")

    def __enter__(self) -> "SqliteStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _require_open(self) -> sqlite3.Connection:
        if self._connection is None:
            raise StoreClosedError(f"Store at {self.path} is closed")
        return self._connection


def _configure(connection: sqlite3.Connection, path: Path) -> None:
    try:
        connection.execute("PRAGMA journal_mode = WAL")
        connection.execute("PRAGMA foreign_keys = ON")
    except sqlite3.OperationalError as exc:
        raise StoreIOError(f"Cannot write to store at {path}") from exc
    except sqlite3.DatabaseError as exc:
        raise SchemaError(f"{path} is not a usable database") from exc


def _ensure_schema(connection: sqlite3.Connection) -> None:
    try:
        connection.executescript(SCHEMA_SQL)
    except sqlite3.DatabaseError as exc:
        raise SchemaError(f"Cannot apply schema: {exc}") from exc
    for table, expected in EXPECTED_COLUMNS.items():
        rows = connection.execute(f"PRAGMA table_info({table})").fetchall()
        missing = expected - {row["name"] for row in rows}
        if missing:
            raise SchemaError(
                f"Table {table} is missing column(s): {', '.join(sorted(missing))}"
            )
