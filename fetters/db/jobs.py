"""CRUD, listing and insight queries for the jobs table."""

from __future__ import annotations

import sqlite3

from .connection import get_db, transaction
from .models import CountAndPercentage, Job, JobQuery, ListedJob, Sprint
from .sprints import decrement_num_jobs, increment_num_jobs

# Base SELECT that JOINs titles, statuses and sprints for display names.
# ``stages`` is NULL when the job has no interview stages.
_SELECT_LISTED_JOBS = """
    SELECT j.id,
           j.created,
           j.company_name,
           t.name AS title,
           s.name AS status,
           NULLIF((SELECT COUNT(*) FROM interview_stages st
                    WHERE st.job_id = j.id), 0) AS stages,
           j.link,
           j.notes
      FROM jobs j
      LEFT JOIN titles   t  ON j.title_id  = t.id
      LEFT JOIN statuses s  ON j.status_id = s.id
      LEFT JOIN sprints  sp ON j.sprint_id = sp.id
"""

# Query field -> joined column it matches against
_SUBSTRING_FILTERS = {
    "company": "j.company_name",
    "link": "j.link",
    "notes": "j.notes",
    "status": "s.name",
    "title": "t.name",
}

_UPDATABLE = ("company_name", "title_id", "status_id", "link", "notes", "sprint_id")


def like_pattern(value: str) -> str:
    """Build a ``%value%`` LIKE pattern with wildcards in *value* escaped."""
    escaped = value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def add_job(
    company_name: str,
    created: str,
    title_id: int,
    status_id: int,
    sprint_id: int,
    *,
    link: str | None = None,
    notes: str | None = None,
    db: sqlite3.Connection | None = None,
) -> Job:
    """Insert a job and bump its sprint's counter in one transaction."""
    conn = db or get_db()
    with transaction(conn):
        row = conn.execute(
            """
            INSERT INTO jobs (created, company_name, title_id, status_id, link, notes, sprint_id)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            RETURNING *
            """,
            (created, company_name, title_id, status_id, link, notes, sprint_id),
        ).fetchone()
        increment_num_jobs(sprint_id, db=conn)
    return Job.from_row(row)


def get_job(job_id: int, *, db: sqlite3.Connection | None = None) -> Job | None:
    """Fetch a single job row by ID."""
    conn = db or get_db()
    row = conn.execute("SELECT * FROM jobs WHERE id = ?", (job_id,)).fetchone()
    return Job.from_row(row) if row else None


def update_job(
    job_id: int, *, db: sqlite3.Connection | None = None, **changes
) -> Job | None:
    """Write only the supplied fields of a job.

    Moving a job to another sprint (``sprint_id``) moves one unit of the
    ``num_jobs`` counter along with it. Returns None if the job does not exist.
    """
    unknown = set(changes) - set(_UPDATABLE)
    if unknown:
        raise ValueError(f"Cannot update job field(s): {', '.join(sorted(unknown))}")
    conn = db or get_db()
    current = get_job(job_id, db=conn)
    if current is None:
        return None
    if not changes:
        return current

    assignments = ", ".join(f"{field} = ?" for field in changes)
    with transaction(conn):
        row = conn.execute(
            f"UPDATE jobs SET {assignments} WHERE id = ? RETURNING *",
            (*changes.values(), job_id),
        ).fetchone()
        new_sprint_id = changes.get("sprint_id", current.sprint_id)
        if new_sprint_id != current.sprint_id:
            decrement_num_jobs(current.sprint_id, db=conn)
            increment_num_jobs(new_sprint_id, db=conn)
    return Job.from_row(row)


def delete_job(job_id: int, *, db: sqlite3.Connection | None = None) -> Job | None:
    """Delete a job and return the removed row, or None if it did not exist.

    The sprint counter is decremented in the same transaction and the job's
    interview stages go with it (ON DELETE CASCADE).
    """
    conn = db or get_db()
    with transaction(conn):
        row = conn.execute(
            "DELETE FROM jobs WHERE id = ? RETURNING *", (job_id,)
        ).fetchone()
        if row is None:
            return None
        decrement_num_jobs(row["sprint_id"], db=conn)
    return Job.from_row(row)


def list_jobs(
    query: JobQuery | None = None,
    current_sprint: Sprint | None = None,
    *,
    db: sqlite3.Connection | None = None,
) -> list[ListedJob]:
    """List jobs matching *query*, in insertion order.

    Without ``query.sprint`` only jobs in *current_sprint* are returned;
    with it, sprint names are matched as substrings across all sprints.
    String filters are case-insensitive (ASCII) substring matches. The
    ``stages`` filter is applied after the rows come back: 0 keeps jobs
    with any stages, N keeps jobs with exactly N.
    """
    conn = db or get_db()
    query = query or JobQuery()
    clauses: list[str] = []
    params: list = []

    if query.sprint is not None:
        clauses.append("sp.name LIKE ? ESCAPE '\\'")
        params.append(like_pattern(query.sprint))
    elif current_sprint is not None:
        clauses.append("j.sprint_id = ?")
        params.append(current_sprint.id)

    for field, column in _SUBSTRING_FILTERS.items():
        value = getattr(query, field)
        if value is not None:
            clauses.append(f"{column} LIKE ? ESCAPE '\\'")
            params.append(like_pattern(value))

    where = (" WHERE " + " AND ".join(clauses)) if clauses else ""
    rows = conn.execute(f"{_SELECT_LISTED_JOBS}{where} ORDER BY j.id", params).fetchall()
    jobs = [ListedJob.from_row(r) for r in rows]

    if query.stages is not None:
        if query.stages == 0:
            jobs = [j for j in jobs if j.stages is not None]
        else:
            jobs = [j for j in jobs if j.stages == query.stages]
    return jobs


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------

def count_total_jobs(*, db: sqlite3.Connection | None = None) -> int:
    conn = db or get_db()
    return conn.execute("SELECT COUNT(*) FROM jobs").fetchone()[0]


def count_jobs_in_sprint(sprint_id: int, *, db: sqlite3.Connection | None = None) -> int:
    conn = db or get_db()
    return conn.execute(
        "SELECT COUNT(*) FROM jobs WHERE sprint_id = ?", (sprint_id,)
    ).fetchone()[0]


def _percentage(count: int, total: int) -> str:
    return f"{count / total * 100:.2f}%"


def _with_percentages(
    counts: list[sqlite3.Row], sprint_total: int, overall_total: int
) -> list[CountAndPercentage]:
    return [
        CountAndPercentage(
            label=r["label"],
            count=r["count"],
            sprint_percentage=_percentage(r["count"], sprint_total),
            overall_percentage=_percentage(r["count"], overall_total),
        )
        for r in counts
        if r["label"] is not None
    ]


def count_jobs_per_status(
    current_sprint: Sprint, *, db: sqlite3.Connection | None = None
) -> list[CountAndPercentage]:
    """Count the current sprint's jobs per status.

    Percentages are relative to the current sprint's total and to all jobs.
    Statuses without jobs are omitted; an empty sprint yields [].
    """
    conn = db or get_db()
    overall_total = count_total_jobs(db=conn)
    sprint_total = count_jobs_in_sprint(current_sprint.id, db=conn)
    if not overall_total or not sprint_total:
        return []

    rows = conn.execute(
        """
        SELECT s.name AS label, COUNT(j.id) AS count
          FROM jobs j
          LEFT JOIN statuses s ON j.status_id = s.id
         WHERE j.sprint_id = ?
         GROUP BY s.name
         ORDER BY s.name
        """,
        (current_sprint.id,),
    ).fetchall()
    return _with_percentages(rows, sprint_total, overall_total)


def count_jobs_per_sprint(
    current_sprint: Sprint, *, db: sqlite3.Connection | None = None
) -> list[CountAndPercentage]:
    """Count jobs in every sprint that has any.

    The sprint percentage is each sprint's count over the *current* sprint's
    total, so sprints other than the current one can exceed 100%.
    """
    conn = db or get_db()
    overall_total = count_total_jobs(db=conn)
    sprint_total = count_jobs_in_sprint(current_sprint.id, db=conn)
    if not overall_total or not sprint_total:
        return []

    rows = conn.execute(
        """
        SELECT sp.name AS label, COUNT(j.id) AS count
          FROM jobs j
          LEFT JOIN sprints sp ON j.sprint_id = sp.id
         GROUP BY sp.id
         ORDER BY sp.id
        """
    ).fetchall()
    return _with_percentages(rows, sprint_total, overall_total)
