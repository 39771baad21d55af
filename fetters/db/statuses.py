"""Read and seed the statuses table."""

from __future__ import annotations

import sqlite3

from .connection import get_db, transaction
from .models import DEFAULT_STATUSES, Status


def seed_statuses(*, db: sqlite3.Connection | None = None) -> None:
    """Insert each default status that is not stored yet. Idempotent."""
    conn = db or get_db()
    with transaction(conn):
        for name in DEFAULT_STATUSES:
            row = conn.execute(
                "SELECT id FROM statuses WHERE name = ?", (name,)
            ).fetchone()
            if row is None:
                conn.execute("INSERT INTO statuses (name) VALUES (?)", (name,))


def list_statuses(*, db: sqlite3.Connection | None = None) -> list[Status]:
    """Return every status ordered by ID (seed order)."""
    conn = db or get_db()
    rows = conn.execute("SELECT * FROM statuses ORDER BY id").fetchall()
    return [Status.from_row(r) for r in rows]


def get_status(status_id: int, *, db: sqlite3.Connection | None = None) -> Status | None:
    conn = db or get_db()
    row = conn.execute("SELECT * FROM statuses WHERE id = ?", (status_id,)).fetchone()
    return Status.from_row(row) if row else None


def get_status_by_name(name: str, *, db: sqlite3.Connection | None = None) -> Status | None:
    conn = db or get_db()
    row = conn.execute("SELECT * FROM statuses WHERE name = ?", (name,)).fetchone()
    return Status.from_row(row) if row else None
