"""CRUD operations for the sprints table.

``num_jobs`` is only ever changed through increment_num_jobs() and
decrement_num_jobs(), which the job functions call inside their own
transaction so the counter always equals the number of jobs in the sprint.
"""

from __future__ import annotations

import sqlite3
from datetime import date

from .connection import get_db, transaction
from .errors import SprintNameConflict
from .models import Sprint, format_sprint_date

_UPDATABLE = ("name", "start_date", "end_date")


def _is_name_conflict(exc: sqlite3.IntegrityError) -> bool:
    return "UNIQUE" in str(exc) and "sprints.name" in str(exc)


def add_sprint(
    name: str,
    start_date: str,
    end_date: str | None = None,
    num_jobs: int = 0,
    *,
    db: sqlite3.Connection | None = None,
) -> Sprint:
    """Insert a new sprint. Raises SprintNameConflict if *name* is taken."""
    conn = db or get_db()
    try:
        with transaction(conn):
            row = conn.execute(
                """
                INSERT INTO sprints (name, start_date, end_date, num_jobs)
                VALUES (?, ?, ?, ?)
                RETURNING *
                """,
                (name, start_date, end_date, num_jobs),
            ).fetchone()
    except sqlite3.IntegrityError as exc:
        if _is_name_conflict(exc):
            raise SprintNameConflict(name) from exc
        raise
    return Sprint.from_row(row)


def get_sprint(sprint_id: int, *, db: sqlite3.Connection | None = None) -> Sprint | None:
    conn = db or get_db()
    row = conn.execute("SELECT * FROM sprints WHERE id = ?", (sprint_id,)).fetchone()
    return Sprint.from_row(row) if row else None


def get_sprint_by_name(name: str, *, db: sqlite3.Connection | None = None) -> Sprint | None:
    conn = db or get_db()
    row = conn.execute("SELECT * FROM sprints WHERE name = ?", (name,)).fetchone()
    return Sprint.from_row(row) if row else None


def get_or_create_sprint(
    name: str, *, today: date | None = None, db: sqlite3.Connection | None = None
) -> Sprint:
    """Return the sprint called *name*, creating it (starting today) if missing."""
    conn = db or get_db()
    existing = get_sprint_by_name(name, db=conn)
    if existing is not None:
        return existing
    start = format_sprint_date(today or date.today())
    return add_sprint(name, start, db=conn)


def update_sprint(
    sprint_id: int, *, db: sqlite3.Connection | None = None, **changes
) -> Sprint | None:
    """Apply a partial update to a sprint.

    Accepts any subset of ``name``, ``start_date`` and ``end_date``; passing
    ``end_date=None`` clears the end date. Returns None if the sprint does
    not exist.
    """
    unknown = set(changes) - set(_UPDATABLE)
    if unknown:
        raise ValueError(f"Cannot update sprint field(s): {', '.join(sorted(unknown))}")
    conn = db or get_db()
    if not changes:
        return get_sprint(sprint_id, db=conn)

    assignments = ", ".join(f"{field} = ?" for field in changes)
    try:
        with transaction(conn):
            row = conn.execute(
                f"UPDATE sprints SET {assignments} WHERE id = ? RETURNING *",
                (*changes.values(), sprint_id),
            ).fetchone()
    except sqlite3.IntegrityError as exc:
        if _is_name_conflict(exc):
            raise SprintNameConflict(changes["name"]) from exc
        raise
    return Sprint.from_row(row) if row else None


def list_sprints(*, db: sqlite3.Connection | None = None) -> list[Sprint]:
    """List all sprints in creation order."""
    conn = db or get_db()
    rows = conn.execute("SELECT * FROM sprints ORDER BY id").fetchall()
    return [Sprint.from_row(r) for r in rows]


def increment_num_jobs(sprint_id: int, *, db: sqlite3.Connection | None = None) -> None:
    """Add one to a sprint's job counter. Does not commit."""
    conn = db or get_db()
    conn.execute(
        "UPDATE sprints SET num_jobs = num_jobs + 1 WHERE id = ?", (sprint_id,)
    )


def decrement_num_jobs(sprint_id: int, *, db: sqlite3.Connection | None = None) -> None:
    """Subtract one from a sprint's job counter. Does not commit."""
    conn = db or get_db()
    conn.execute(
        "UPDATE sprints SET num_jobs = num_jobs - 1 WHERE id = ?", (sprint_id,)
    )
