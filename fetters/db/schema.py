"""Ordered schema migrations for the fetters database.

Each migration runs once; applied versions are recorded in
``schema_migrations`` so run_migrations() is idempotent.
"""

from __future__ import annotations

from typing import NamedTuple


class Migration(NamedTuple):
    version: int
    name: str
    sql: str


MIGRATIONS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
    version    INTEGER PRIMARY KEY,
    name       TEXT NOT NULL,
    applied_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%S', 'now', 'localtime'))
);
"""

_CREATE_TABLES = """
-- Sprints: named, date-bounded groups of applications
CREATE TABLE IF NOT EXISTS sprints (
    id         INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT,
    name       TEXT NOT NULL UNIQUE,
    start_date TEXT NOT NULL,               -- YYYY-MM-DD
    end_date   TEXT,                        -- YYYY-MM-DD
    num_jobs   INTEGER NOT NULL DEFAULT 0 CHECK (num_jobs >= 0)
);

-- Statuses: seeded application statuses
CREATE TABLE IF NOT EXISTS statuses (
    id   INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);

-- Titles: interned job titles
CREATE TABLE IF NOT EXISTS titles (
    id   INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE
);

-- Jobs: one row per tracked application
CREATE TABLE IF NOT EXISTS jobs (
    id           INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT,
    created      TEXT NOT NULL,             -- YYYY-MM-DD HH:MM:SS
    company_name TEXT NOT NULL,
    title_id     INTEGER NOT NULL REFERENCES titles (id),
    status_id    INTEGER NOT NULL REFERENCES statuses (id),
    link         TEXT,
    notes        TEXT,
    sprint_id    INTEGER NOT NULL REFERENCES sprints (id)
);
"""

_ADD_INTERVIEW_STAGES = """
CREATE TABLE IF NOT EXISTS interview_stages (
    id             INTEGER NOT NULL PRIMARY KEY AUTOINCREMENT,
    job_id         INTEGER NOT NULL,
    stage_number   INTEGER NOT NULL CHECK (stage_number >= 1),
    name           TEXT,
    status         TEXT NOT NULL DEFAULT 'SCHEDULED'
                       CHECK (status IN ('SCHEDULED', 'PASSED', 'REJECTED')),
    scheduled_date TEXT NOT NULL,           -- YYYY/MM/DD
    notes          TEXT,
    created        TEXT NOT NULL,
    FOREIGN KEY (job_id) REFERENCES jobs (id) ON DELETE CASCADE,
    UNIQUE (job_id, stage_number)
);

CREATE INDEX IF NOT EXISTS idx_interview_stages_job_id ON interview_stages (job_id);
"""

_ADD_JOB_INDEXES = """
CREATE INDEX IF NOT EXISTS idx_jobs_sprint_id ON jobs (sprint_id);
CREATE INDEX IF NOT EXISTS idx_jobs_status_id ON jobs (status_id);
"""

MIGRATIONS: list[Migration] = [
    Migration(1, "create_tables", _CREATE_TABLES),
    Migration(2, "add_interview_stage_tracking", _ADD_INTERVIEW_STAGES),
    Migration(3, "add_job_indexes", _ADD_JOB_INDEXES),
]
