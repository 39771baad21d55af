"""CRUD operations for the titles table."""

from __future__ import annotations

import sqlite3

from .connection import get_db
from .models import Title


def get_or_create_title(name: str, *, db: sqlite3.Connection | None = None) -> Title:
    """Return the title row for *name*, creating it if needed.

    An existing row is left untouched and returned as-is.
    """
    conn = db or get_db()
    conn.execute(
        "INSERT INTO titles (name) VALUES (?) ON CONFLICT(name) DO NOTHING",
        (name,),
    )
    conn.commit()
    row = conn.execute("SELECT * FROM titles WHERE name = ?", (name,)).fetchone()
    return Title.from_row(row)


def get_title(title_id: int, *, db: sqlite3.Connection | None = None) -> Title | None:
    """Fetch a single title by ID."""
    conn = db or get_db()
    row = conn.execute("SELECT * FROM titles WHERE id = ?", (title_id,)).fetchone()
    return Title.from_row(row) if row else None


def list_titles(*, db: sqlite3.Connection | None = None) -> list[Title]:
    """List all titles alphabetically."""
    conn = db or get_db()
    rows = conn.execute("SELECT * FROM titles ORDER BY name").fetchall()
    return [Title.from_row(r) for r in rows]
