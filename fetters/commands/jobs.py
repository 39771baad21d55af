"""Commands that track, change and browse job applications."""

from __future__ import annotations

import sqlite3
import webbrowser
from pathlib import Path
from urllib.parse import urlparse

from ..db.jobs import add_job, delete_job, list_jobs, update_job
from ..db.models import JobQuery, ListedJob, Sprint, now_timestamp
from ..db.sprints import list_sprints
from ..db.statuses import list_statuses
from ..db.titles import get_or_create_title
from ..display import display_jobs, failure, success, warning
from ..log import get_logger
from ..prompts import ask_multi_select, ask_optional, ask_select, ask_text
from .common import confirm, open_in_default_app, scope_name, select_job

log = get_logger(__name__)

DEFAULT_STATUS = "PENDING"
UPDATABLE_FIELDS = ["Company", "Title", "Status", "Link", "Notes", "Sprint"]


def add(conn: sqlite3.Connection, company: str, current_sprint: Sprint) -> None:
    """Prompt for the details of a new application and track it."""
    title_name = ask_text("Enter the job title:")
    if title_name is None:
        return

    statuses = list_statuses(db=conn)
    default = next((i for i, s in enumerate(statuses) if s.name == DEFAULT_STATUS), None)
    status = ask_select("Select the application status:", statuses, default=default)
    if status is None:
        return

    link = ask_optional("Enter a link to the application:")
    if link is None:
        return
    notes = ask_optional("Enter any notes for this application:")
    if notes is None:
        return
    created = now_timestamp()

    preview = ListedJob(
        id=0,
        created=created,
        company_name=company,
        title=title_name,
        status=status.name,
        link=link or None,
        notes=notes or None,
    )
    display_jobs([preview], current_sprint.name)
    if not confirm("Confirm new job?"):
        return

    title = get_or_create_title(title_name, db=conn)
    job = add_job(
        company,
        created,
        title.id,
        status.id,
        current_sprint.id,
        link=preview.link,
        notes=preview.notes,
        db=conn,
    )
    log.info("Added job %s (%s) to sprint %s", job.id, company, current_sprint.name)
    print(success(f"\nSuccessfully tracked a new job application for {company}!\n"))


def show(conn: sqlite3.Connection, query: JobQuery, current_sprint: Sprint) -> None:
    """Print the jobs matching *query* as a table."""
    jobs = list_jobs(query, current_sprint, db=conn)
    name = scope_name(query, current_sprint)
    if not jobs:
        print(warning(f"\nNo job applications found for sprint [{name}].\n"))
        return
    display_jobs(jobs, name)


def delete(conn: sqlite3.Connection, query: JobQuery, current_sprint: Sprint) -> None:
    job = select_job(conn, query, current_sprint)
    if job is None:
        return
    if job.stages:
        print(warning(f"This will also delete {job.stages} interview stage(s)."))
    if not confirm(f"Delete the application for {job.company_name}?"):
        return

    deleted = delete_job(job.id, db=conn)
    if deleted is None:
        print(failure(f"Job {job.id} no longer exists."))
        return
    log.info("Deleted job %s (%s)", deleted.id, deleted.company_name)
    print(success(f"\nDeleted the job application for {deleted.company_name}.\n"))


def _prompt_changes(conn: sqlite3.Connection, job: ListedJob) -> dict | None:
    """Ask for a new value of each chosen field.

    Returns None if the user skips any prompt. A new title is returned by name
    under ``title`` and only interned once the update is confirmed.
    """
    fields = ask_multi_select("Select the fields to update:", UPDATABLE_FIELDS)
    if not fields:
        return None

    changes: dict = {}
    for field in fields:
        if field == "Company":
            value = ask_text("Enter a new company name:", default=job.company_name)
            if value is None:
                return None
            changes["company_name"] = value
        elif field == "Title":
            value = ask_text("Enter a new job title:", default=job.title or "")
            if value is None:
                return None
            changes["title"] = value
        elif field == "Status":
            statuses = list_statuses(db=conn)
            current = next((i for i, s in enumerate(statuses) if s.name == job.status), None)
            status = ask_select("Select a new status:", statuses, default=current)
            if status is None:
                return None
            changes["status"] = status
        elif field == "Link":
            value = ask_optional("Enter a new link:", current=job.link)
            if value is None:
                return None
            changes["link"] = value or None
        elif field == "Notes":
            value = ask_optional("Enter new notes:", current=job.notes)
            if value is None:
                return None
            changes["notes"] = value or None
        elif field == "Sprint":
            sprint = ask_select("Move the application to sprint:", list_sprints(db=conn))
            if sprint is None:
                return None
            changes["sprint_id"] = sprint.id
    return changes


def update(conn: sqlite3.Connection, query: JobQuery, current_sprint: Sprint) -> None:
    job = select_job(conn, query, current_sprint)
    if job is None:
        return
    changes = _prompt_changes(conn, job)
    if not changes:
        return

    title_name = changes.pop("title", None)
    status = changes.pop("status", None)
    if status is not None:
        changes["status_id"] = status.id

    preview = ListedJob(**vars(job))
    if title_name is not None:
        preview.title = title_name
    if status is not None:
        preview.status = status.name
    for field in ("company_name", "link", "notes"):
        if field in changes:
            setattr(preview, field, changes[field])
    display_jobs([preview], scope_name(query, current_sprint))
    if not confirm("Confirm updates?"):
        return

    if title_name is not None:
        changes["title_id"] = get_or_create_title(title_name, db=conn).id
    update_job(job.id, db=conn, **changes)
    log.info("Updated job %s: %s", job.id, sorted(changes))
    print(success(f"\nUpdated the job application for {preview.company_name}!\n"))


def _is_url(link: str) -> bool:
    return urlparse(link).scheme in ("http", "https", "file", "mailto")


def open_link(conn: sqlite3.Connection, query: JobQuery, current_sprint: Sprint) -> None:
    """Open a job's link in the browser, or its local file in the default app."""
    job = select_job(conn, query, current_sprint)
    if job is None:
        return
    if not job.link:
        print(warning(f"\nNo link or file tracked for {job.company_name}.\n"))
        return

    if _is_url(job.link):
        webbrowser.open(job.link)
        print(success(f"\nOpened {job.link}\n"))
        return

    path = Path(job.link).expanduser()
    if not path.exists():
        print(failure(f"\nFile not found: {path}\n"))
        return
    open_in_default_app(path)
    print(success(f"\nOpened {path}\n"))
