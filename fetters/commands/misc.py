"""The banner, export and insights commands."""

from __future__ import annotations

import sqlite3
from datetime import date
from pathlib import Path

from ..db.models import JobQuery, Sprint
from ..display import paint, success
from ..export import export_filename, write_spreadsheet
from ..insights import show_insights
from ..log import get_logger
from .common import matching_jobs, scope_name

log = get_logger(__name__)

BANNER = r"""
    ______     __  __
   / ____/__  / /_/ /____  __________
  / /_  / _ \/ __/ __/ _ \/ ___/ ___/
 / __/ /  __/ /_/ /_/  __/ /  (__  )
/_/    \___/\__/\__/\___/_/  /____/
"""


def banner() -> None:
    print(paint(BANNER, "cyan", "bold"))


def export(
    conn: sqlite3.Connection,
    current_sprint: Sprint,
    directory: str | None = None,
    filename: str | None = None,
    sprint: str | None = None,
    *,
    today: date | None = None,
) -> Path:
    """Write the jobs of *sprint* (default: the current one) to an XLSX file."""
    query = JobQuery(sprint=sprint)
    jobs = matching_jobs(conn, query, current_sprint)
    sprint_name = scope_name(query, current_sprint)

    target_dir = Path(directory).expanduser() if directory else Path.cwd()
    path = target_dir / export_filename(sprint_name, filename, today)
    write_spreadsheet(jobs, sprint_name, path)
    print(success(f"Successfully exported all jobs for sprint {sprint_name} to path: {path}!"))
    return path


def insights(conn: sqlite3.Connection, current_sprint: Sprint) -> None:
    show_insights(current_sprint, db=conn)
