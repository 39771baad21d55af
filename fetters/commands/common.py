"""Helpers shared by the command modules."""

from __future__ import annotations

import os
import sqlite3
import subprocess
import sys
from pathlib import Path

from ..db.errors import FettersIOError, NoJobsAvailable
from ..db.jobs import list_jobs
from ..db.models import JobQuery, ListedJob, Sprint
from ..display import colorize_status, display_jobs, failure
from ..prompts import ask_confirm, ask_select


def job_label(job: ListedJob) -> str:
    return (
        f"ID: {job.id} | Company: {colorize_status(job.company_name, job.status)} | "
        f"Title: {colorize_status(job.title or '', job.status)} | "
        f"Status: {colorize_status(job.status or '', job.status)}"
    )


def scope_name(query: JobQuery, current_sprint: Sprint) -> str:
    """Sprint name shown to the user for a query."""
    return query.sprint if query.sprint is not None else current_sprint.name


def matching_jobs(
    conn: sqlite3.Connection, query: JobQuery, current_sprint: Sprint
) -> list[ListedJob]:
    """list_jobs() that raises NoJobsAvailable instead of returning []."""
    jobs = list_jobs(query, current_sprint, db=conn)
    if not jobs:
        raise NoJobsAvailable(scope_name(query, current_sprint))
    return jobs


def select_job(
    conn: sqlite3.Connection, query: JobQuery, current_sprint: Sprint
) -> ListedJob | None:
    """Show matching jobs and let the user pick one. None if skipped."""
    jobs = matching_jobs(conn, query, current_sprint)
    display_jobs(jobs, scope_name(query, current_sprint))
    return ask_select("Select a job application:", jobs, fmt=job_label)


def open_in_default_app(target: str | Path) -> None:
    """Open a file with the platform's default application."""
    try:
        if sys.platform.startswith("win"):
            os.startfile(str(target))  # noqa: S606
        elif sys.platform == "darwin":
            subprocess.run(["open", str(target)], check=True)
        else:
            subprocess.run(["xdg-open", str(target)], check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise FettersIOError(exc) from exc


def confirm(prompt: str) -> bool:
    """Yes/no confirmation; prints why nothing happens on "no" or a skip."""
    answer = ask_confirm(prompt)
    if answer is None:
        print(failure("Invalid input, try again"))
        return False
    if not answer:
        print(failure("Cancelled."))
    return answer
