"""Database initialization and the storage context shared by the core."""
import sqlite3
from contextlib import contextmanager
from pathlib import Path

from loguru import logger

from katakana_srs.config import DEFAULT_DB_PATH
from katakana_srs.errors import StorageFailure

SCHEMA = """
CREATE TABLE IF NOT EXISTS lesson_batches (
    batch_number INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    completed INTEGER NOT NULL DEFAULT 0,
    completed_at TEXT
);

CREATE TABLE IF NOT EXISTS symbols (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    character TEXT NOT NULL UNIQUE,
    romaji TEXT NOT NULL,
    category TEXT NOT NULL CHECK(category IN ('basic', 'dakuten', 'combo')),
    batch_number INTEGER NOT NULL REFERENCES lesson_batches(batch_number),
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS reviews (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    symbol_id INTEGER NOT NULL UNIQUE REFERENCES symbols(id),
    stage INTEGER NOT NULL DEFAULT 0 CHECK(stage >= 0 AND stage <= 7),
    next_due TEXT NOT NULL,
    correct_count INTEGER NOT NULL DEFAULT 0,
    incorrect_count INTEGER NOT NULL DEFAULT 0,
    last_reviewed TEXT,
    created_at TEXT
);

CREATE INDEX IF NOT EXISTS idx_reviews_next_due ON reviews(next_due);

CREATE TABLE IF NOT EXISTS user_notes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    symbol_id INTEGER NOT NULL UNIQUE REFERENCES symbols(id),
    note TEXT NOT NULL,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS schema_migrations (
    version INTEGER PRIMARY KEY,
    name TEXT NOT NULL,
    applied_at TEXT NOT NULL
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path, isolation_level=None)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    try:
        conn.executescript(SCHEMA)
    finally:
        conn.close()


def _rollback(conn: sqlite3.Connection) -> None:
    # the failed statement may already have ended the transaction
    if not conn.in_transaction:
        return
    try:
        conn.execute("ROLLBACK")
    except sqlite3.Error as exc:
        logger.warning("Rollback failed: {}", exc)


class Database:
    """Explicit storage context: open -> use -> close.

    Every core operation takes a Database as its first argument. Writes that
    must be all-or-nothing go through ``transaction()``, which takes SQLite's
    write lock up front (BEGIN IMMEDIATE) so concurrent writers serialize
    instead of interleaving a read and a stale update.
    """

    def __init__(self, path: str = DEFAULT_DB_PATH):
        self.path = path
        self._conn = None
        self._depth = 0

    def open(self) -> "Database":
        if self._conn is None:
            try:
                init_db(self.path)
                self._conn = get_connection(self.path)
            except sqlite3.Error as exc:
                raise StorageFailure(f"Cannot open database {self.path}: {exc}") from exc
            logger.debug("Opened database {}", self.path)
        return self

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("Closed database {}", self.path)

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def __enter__(self) -> "Database":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageFailure("Database is not open")
        return self._conn

    @contextmanager
    def transaction(self):
        """Run the block atomically. Nested calls join the outer transaction."""
        conn = self.connection
        if self._depth:
            self._depth += 1
            try:
                yield conn
            finally:
                self._depth -= 1
            return
        try:
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as exc:
            raise StorageFailure(str(exc)) from exc
        self._depth = 1
        try:
            yield conn
        except sqlite3.Error as exc:
            _rollback(conn)
            raise StorageFailure(str(exc)) from exc
        except BaseException:
            _rollback(conn)
            raise
        else:
            try:
                conn.execute("COMMIT")
            except sqlite3.Error as exc:
                _rollback(conn)
                raise StorageFailure(f"Commit failed: {exc}") from exc
        finally:
            self._depth = 0

    def execute(self, sql: str, params=()) -> sqlite3.Cursor:
        try:
            return self.connection.execute(sql, params)
        except sqlite3.Error as exc:
            raise StorageFailure(str(exc)) from exc

    def query(self, sql: str, params=()) -> list:
        return self.execute(sql, params).fetchall()

    def query_one(self, sql: str, params=()):
        return self.execute(sql, params).fetchone()

    def scalar(self, sql: str, params=()):
        row = self.query_one(sql, params)
        return row[0] if row else None
