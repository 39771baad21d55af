"""Terminal output: ANSI colours, pandas-backed tables and stage trees."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence

import pandas as pd

from .db.models import InterviewStage, ListedJob, Sprint

_CODES = {
    "bold": "1",
    "red": "31",
    "green": "32",
    "yellow": "33",
    "blue": "34",
    "magenta": "35",
    "cyan": "36",
    "white": "37",
    "grey": "38;2;201;201;201",
    "bright_red": "91",
    "bright_green": "92",
    "bright_yellow": "93",
    "bright_cyan": "96",
}

STATUS_COLORS = {
    "GHOSTED": "white",
    "HIRED": "green",
    "IN PROGRESS": "yellow",
    "NOT HIRING ANYMORE": "grey",
    "OFFER RECEIVED": "magenta",
    "PENDING": "blue",
    "REJECTED": "red",
}

STAGE_STATUS_COLORS = {
    "SCHEDULED": "bright_yellow",
    "PASSED": "bright_green",
    "REJECTED": "bright_red",
}

JOB_COLUMNS = ["ID", "Created", "Company", "Title", "Status", "Stages", "Link", "Notes"]
SPRINT_COLUMNS = ["Sprint Name", "Start Date", "End Date", "# of Jobs"]
INSIGHT_COLUMNS = ["Count", "Sprint %", "Overall %"]


def color_enabled() -> bool:
    return sys.stdout.isatty() and "NO_COLOR" not in os.environ


def paint(text: str, *styles: str) -> str:
    if not styles or not color_enabled():
        return text
    codes = ";".join(_CODES[s] for s in styles)
    return f"\033[{codes}m{text}\033[0m"


def bold(text: str) -> str:
    return paint(text, "bold")


def success(text: str) -> str:
    return paint(text, "green", "bold")


def failure(text: str) -> str:
    return paint(text, "red", "bold")


def warning(text: str) -> str:
    return paint(text, "yellow", "bold")


def colorize_status(text: str, status: str | None) -> str:
    color = STATUS_COLORS.get(status or "")
    if color is None:
        return text
    if color == "grey":
        return paint(text, color)
    return paint(text, color, "bold")


def colorize_stage_status(status: str) -> str:
    color = STAGE_STATUS_COLORS.get(status)
    return paint(status, color, "bold") if color else status


# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------

def jobs_frame(jobs: Sequence[ListedJob]) -> pd.DataFrame:
    """One row per job with display placeholders for missing values."""
    return pd.DataFrame(
        [
            [
                j.id,
                j.created,
                j.company_name,
                j.title or "N/A",
                j.status or "N/A",
                j.stages if j.stages is not None else "",
                j.link or "",
                j.notes or "",
            ]
            for j in jobs
        ],
        columns=JOB_COLUMNS,
    )


def sprints_frame(sprints: Sequence[Sprint]) -> pd.DataFrame:
    return pd.DataFrame(
        [[s.name, s.start_date, s.end_date or "N/A", s.num_jobs] for s in sprints],
        columns=SPRINT_COLUMNS,
    )


def render_frame(df: pd.DataFrame) -> str:
    return df.to_string(index=False, max_colwidth=50)


def display_jobs(jobs: Sequence[ListedJob], sprint_name: str) -> None:
    print()
    print(bold(f"Job applications for sprint [{sprint_name}]"))
    print("=" * 60)
    print(render_frame(jobs_frame(jobs)))
    print()


def display_sprints(sprints: Sequence[Sprint]) -> None:
    print()
    print(render_frame(sprints_frame(sprints)))
    print()


# ---------------------------------------------------------------------------
# Stage trees
# ---------------------------------------------------------------------------

def build_stage_tree(
    job: ListedJob,
    stages: Sequence[InterviewStage],
    highlight_stage_id: int | None = None,
    highlight_color: str = "green",
) -> list[str]:
    """Render a job's stages as box-drawing lines.

    The highlighted stage (if any) is painted in *highlight_color*.
    """
    lines = [f"{paint(job.company_name, 'white', 'bold')} - "
             f"{paint(job.title or 'N/A', 'bright_cyan', 'bold')}"]
    for i, stage in enumerate(stages):
        last_stage = i == len(stages) - 1
        branch, trunk = ("└── ", "    ") if last_stage else ("├── ", "│   ")
        highlighted = highlight_stage_id is not None and stage.id == highlight_stage_id

        if highlighted:
            label = paint(stage.label, highlight_color, "bold")
            status = (f"[{paint(stage.status, highlight_color, 'bold')}] "
                      f"{paint(stage.scheduled_date, highlight_color)}")
        else:
            label = paint(stage.label, "white", "bold")
            status = f"[{colorize_stage_status(stage.status)}] {stage.scheduled_date}"

        children = [status]
        if stage.notes:
            children.append(paint(stage.notes, highlight_color) if highlighted else stage.notes)

        lines.append(f"{branch}{label}")
        for j, child in enumerate(children):
            leaf = "└── " if j == len(children) - 1 else "├── "
            lines.append(f"{trunk}{leaf}{child}")
    return lines


def print_stage_tree(
    job: ListedJob,
    stages: Sequence[InterviewStage],
    highlight_stage_id: int | None = None,
    highlight_color: str = "green",
) -> None:
    print()
    print("\n".join(build_stage_tree(job, stages, highlight_stage_id, highlight_color)))
    print()
