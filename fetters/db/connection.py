"""Database connection management.

get_db() returns a connection with WAL mode, Row factory, and foreign keys.
Connections are cached per-thread for safety.
"""

from __future__ import annotations

import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from ..log import get_logger
from .errors import MigrationError, StoreConnectionError
from .schema import MIGRATIONS, MIGRATIONS_TABLE_SQL

log = get_logger(__name__)

_local = threading.local()


def get_db(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Return a SQLite connection (cached per-thread).

    Args:
        db_path: Override the default database path. Useful for testing.
    """
    if db_path is None:
        from ..paths import database_path

        db_path = database_path()
    path = str(db_path)
    conn = getattr(_local, "conn", None)

    # Return cached connection if same path and still open
    if conn is not None and getattr(_local, "db_path", None) == path:
        try:
            conn.execute("SELECT 1")
            return conn
        except sqlite3.ProgrammingError:
            pass  # connection was closed, create a new one

    try:
        conn = sqlite3.connect(path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
    except sqlite3.Error as exc:
        raise StoreConnectionError(exc) from exc

    _local.conn = conn
    _local.db_path = path
    return conn


def close_db() -> None:
    """Close the thread-local connection if it exists."""
    conn = getattr(_local, "conn", None)
    if conn is not None:
        conn.close()
        _local.conn = None
        _local.db_path = None


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run the enclosed statements atomically.

    Commits when the block exits normally and rolls back on any exception.
    Blocks must not be nested: the inner exit would commit the outer work.
    """
    try:
        yield conn
    except BaseException:
        conn.rollback()
        raise
    conn.commit()


def applied_versions(conn: sqlite3.Connection) -> set[int]:
    conn.executescript(MIGRATIONS_TABLE_SQL)
    rows = conn.execute("SELECT version FROM schema_migrations").fetchall()
    return {r["version"] for r in rows}


def run_migrations(conn: sqlite3.Connection) -> list[int]:
    """Apply every pending migration in order. Returns the versions applied.

    Each migration and its bookkeeping row run in one transaction, so a
    failure leaves the schema at the last fully applied version.
    """
    try:
        done = applied_versions(conn)
        applied: list[int] = []
        for migration in MIGRATIONS:
            if migration.version in done:
                continue
            log.info("Applying migration %03d_%s", migration.version, migration.name)
            conn.executescript(
                "BEGIN;\n"
                f"{migration.sql}\n"
                "INSERT INTO schema_migrations (version, name) "
                f"VALUES ({int(migration.version)}, '{migration.name}');\n"
                "COMMIT;"
            )
            applied.append(migration.version)
    except sqlite3.Error as exc:
        if conn.in_transaction:
            conn.rollback()
        log.error("Migration failed: %s", exc)
        raise MigrationError(exc) from exc
    return applied


def init_db(db_path: str | Path | None = None) -> sqlite3.Connection:
    """Open the database, run migrations and seed statuses. Returns the connection.

    Idempotent: safe to call on every command invocation.
    """
    from .statuses import seed_statuses

    conn = get_db(db_path)
    run_migrations(conn)
    seed_statuses(db=conn)
    return conn
