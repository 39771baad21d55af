"""CRUD operations for the interview_stages table.

Stages of a job are numbered 1..N with no gaps. New stages are appended
with get_next_stage_number(); delete_stage() renumbers the survivors in the
same transaction as the delete.
"""

from __future__ import annotations

import sqlite3

from .connection import get_db, transaction
from .models import InterviewStage, StageStatus

_UPDATABLE = ("name", "status", "scheduled_date", "notes")


def add_stage(
    new_stage: InterviewStage, *, db: sqlite3.Connection | None = None
) -> InterviewStage:
    """Insert a stage. Its stage_number should come from get_next_stage_number()."""
    status = StageStatus.parse(new_stage.status).value
    conn = db or get_db()
    with transaction(conn):
        row = conn.execute(
            """
            INSERT INTO interview_stages
                (job_id, stage_number, name, status, scheduled_date, notes, created)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            RETURNING *
            """,
            (
                new_stage.job_id,
                new_stage.stage_number,
                new_stage.name,
                status,
                new_stage.scheduled_date,
                new_stage.notes,
                new_stage.created,
            ),
        ).fetchone()
    return InterviewStage.from_row(row)


def get_stage(stage_id: int, *, db: sqlite3.Connection | None = None) -> InterviewStage | None:
    conn = db or get_db()
    row = conn.execute(
        "SELECT * FROM interview_stages WHERE id = ?", (stage_id,)
    ).fetchone()
    return InterviewStage.from_row(row) if row else None


def list_stages(job_id: int, *, db: sqlite3.Connection | None = None) -> list[InterviewStage]:
    """All stages of a job ordered by stage number."""
    conn = db or get_db()
    rows = conn.execute(
        "SELECT * FROM interview_stages WHERE job_id = ? ORDER BY stage_number",
        (job_id,),
    ).fetchall()
    return [InterviewStage.from_row(r) for r in rows]


def get_next_stage_number(job_id: int, *, db: sqlite3.Connection | None = None) -> int:
    """MAX(stage_number) + 1 for the job, or 1 if it has no stages."""
    conn = db or get_db()
    row = conn.execute(
        "SELECT COALESCE(MAX(stage_number), 0) + 1 FROM interview_stages WHERE job_id = ?",
        (job_id,),
    ).fetchone()
    return row[0]


def update_stage(
    stage_id: int, *, db: sqlite3.Connection | None = None, **changes
) -> InterviewStage | None:
    """Update any subset of name, status, scheduled_date and notes.

    stage_number and job_id cannot be changed. Returns None if the stage
    does not exist.
    """
    unknown = set(changes) - set(_UPDATABLE)
    if unknown:
        raise ValueError(f"Cannot update stage field(s): {', '.join(sorted(unknown))}")
    if changes.get("status") is not None:
        changes["status"] = StageStatus.parse(changes["status"]).value
    conn = db or get_db()
    if not changes:
        return get_stage(stage_id, db=conn)

    assignments = ", ".join(f"{field} = ?" for field in changes)
    with transaction(conn):
        row = conn.execute(
            f"UPDATE interview_stages SET {assignments} WHERE id = ? RETURNING *",
            (*changes.values(), stage_id),
        ).fetchone()
    return InterviewStage.from_row(row) if row else None


def _renumber(conn: sqlite3.Connection, job_id: int) -> int:
    rows = conn.execute(
        "SELECT id, stage_number FROM interview_stages WHERE job_id = ? ORDER BY stage_number",
        (job_id,),
    ).fetchall()
    changed = 0
    for position, row in enumerate(rows, start=1):
        if row["stage_number"] != position:
            conn.execute(
                "UPDATE interview_stages SET stage_number = ? WHERE id = ?",
                (position, row["id"]),
            )
            changed += 1
    return changed


def renumber_stages(job_id: int, *, db: sqlite3.Connection | None = None) -> int:
    """Close gaps so the job's stages are numbered 1..N.

    Only rows whose number changes are written. Returns how many changed.
    """
    conn = db or get_db()
    with transaction(conn):
        return _renumber(conn, job_id)


def delete_stage(stage_id: int, *, db: sqlite3.Connection | None = None) -> InterviewStage | None:
    """Delete a stage, renumber the job's remaining stages, return the removed row."""
    conn = db or get_db()
    with transaction(conn):
        row = conn.execute(
            "DELETE FROM interview_stages WHERE id = ? RETURNING *", (stage_id,)
        ).fetchone()
        if row is None:
            return None
        _renumber(conn, row["job_id"])
    return InterviewStage.from_row(row)
