"""Commands that manage the interview stages of a job application."""

from __future__ import annotations

import dataclasses
import sqlite3

from ..db.models import (
    STAGE_DATE_FORMAT,
    InterviewStage,
    JobQuery,
    ListedJob,
    Sprint,
    StageStatus,
    format_stage_date,
    now_timestamp,
    parse_stage_date,
)
from ..db.stages import add_stage, delete_stage, get_next_stage_number, list_stages, update_stage
from ..display import print_stage_tree, success, warning
from ..log import get_logger
from ..prompts import ask_date, ask_multi_select, ask_optional, ask_select
from .common import confirm, select_job

log = get_logger(__name__)

STAGE_FIELDS = ["Name", "Status", "Date", "Notes"]
PREVIEW_ID = -1


def _stages_or_warn(conn: sqlite3.Connection, job: ListedJob) -> list[InterviewStage]:
    stages = list_stages(job.id, db=conn)
    if not stages:
        print(warning(f"\nNo interview stages tracked for {job.company_name}.\n"))
    return stages


def add(conn: sqlite3.Connection, query: JobQuery, current_sprint: Sprint) -> None:
    """Append a new stage to a job, previewing the resulting tree first."""
    job = select_job(conn, query, current_sprint)
    if job is None:
        return

    next_number = get_next_stage_number(job.id, db=conn)
    name = ask_optional("Enter a name for this stage (e.g. Phone Screen):")
    if name is None:
        return
    status = ask_select("Select the status for this stage:", list(StageStatus))
    if status is None:
        return
    scheduled = ask_date(status.date_prompt, STAGE_DATE_FORMAT)
    if scheduled is None:
        return
    notes = ask_optional("Enter any notes for this stage:")
    if notes is None:
        return

    new_stage = InterviewStage(
        id=PREVIEW_ID,
        job_id=job.id,
        stage_number=next_number,
        name=name or None,
        status=status.value,
        scheduled_date=format_stage_date(scheduled),
        notes=notes or None,
        created=now_timestamp(),
    )
    existing = list_stages(job.id, db=conn)
    print_stage_tree(job, [*existing, new_stage], highlight_stage_id=PREVIEW_ID)
    if not confirm("Confirm new stage?"):
        return

    stored = add_stage(new_stage, db=conn)
    log.info("Added stage %s (id %s) to job %s", stored.stage_number, stored.id, job.id)
    print(success(f"\nAdded stage {next_number} for {job.company_name}!\n"))


def tree(conn: sqlite3.Connection, query: JobQuery, current_sprint: Sprint) -> None:
    """Print a job's stages as a tree. Only jobs with stages are offered by default."""
    if query.stages is None:
        query = dataclasses.replace(query, stages=0)
    job = select_job(conn, query, current_sprint)
    if job is None:
        return
    stages = _stages_or_warn(conn, job)
    if stages:
        print_stage_tree(job, stages)


def _prompt_stage_changes(stage: InterviewStage) -> dict | None:
    """Ask for a new value of each chosen field; None if any prompt is skipped."""
    fields = ask_multi_select("Select the fields to update:", STAGE_FIELDS)
    if not fields:
        return None

    changes: dict = {}
    for field in fields:
        if field == "Name":
            name = ask_optional("Enter a new name for this stage:", current=stage.name)
            if name is None:
                return None
            changes["name"] = name or None
        elif field == "Status":
            options = list(StageStatus)
            current = next((i for i, s in enumerate(options) if s.value == stage.status), None)
            status = ask_select("Select a new status:", options, default=current)
            if status is None:
                return None
            changes["status"] = status.value
        elif field == "Date":
            try:
                starting = parse_stage_date(stage.scheduled_date)
            except ValueError:
                starting = None
            effective = StageStatus.parse(changes.get("status", stage.status))
            new_date = ask_date(effective.date_prompt, STAGE_DATE_FORMAT, default=starting)
            if new_date is None:
                return None
            changes["scheduled_date"] = format_stage_date(new_date)
        elif field == "Notes":
            notes = ask_optional("Enter new notes for this stage:", current=stage.notes)
            if notes is None:
                return None
            changes["notes"] = notes or None
    return changes


def update(conn: sqlite3.Connection, query: JobQuery, current_sprint: Sprint) -> None:
    job = select_job(conn, query, current_sprint)
    if job is None:
        return
    stages = _stages_or_warn(conn, job)
    if not stages:
        return
    stage = ask_select("Select the stage to update:", stages)
    if stage is None:
        return
    changes = _prompt_stage_changes(stage)
    if not changes:
        return

    preview = [
        dataclasses.replace(s, **changes) if s.id == stage.id else s for s in stages
    ]
    print_stage_tree(job, preview, highlight_stage_id=stage.id)
    if not confirm("Confirm updates?"):
        return

    update_stage(stage.id, db=conn, **changes)
    log.info("Updated stage %s of job %s: %s", stage.id, job.id, sorted(changes))
    print(success(f"\nUpdated stage {stage.stage_number} for {job.company_name}!\n"))


def delete(conn: sqlite3.Connection, query: JobQuery, current_sprint: Sprint) -> None:
    """Delete one stage; the job's later stages move up to close the gap."""
    job = select_job(conn, query, current_sprint)
    if job is None:
        return
    stages = _stages_or_warn(conn, job)
    if not stages:
        return
    stage = ask_select("Select the stage to delete:", stages)
    if stage is None:
        return

    print_stage_tree(job, stages, highlight_stage_id=stage.id, highlight_color="red")
    if not confirm("Confirm deletion?"):
        return

    delete_stage(stage.id, db=conn)
    log.info("Deleted stage %s (id %s) of job %s", stage.stage_number, stage.id, job.id)
    print(success(f"\nDeleted stage {stage.stage_number} from {job.company_name}!\n"))
