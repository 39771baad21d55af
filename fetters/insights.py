"""Job application insights for the current sprint."""

from __future__ import annotations

import sqlite3
from collections.abc import Sequence

import pandas as pd

from .db.jobs import count_jobs_per_sprint, count_jobs_per_status
from .db.models import CountAndPercentage, Sprint
from .display import INSIGHT_COLUMNS, bold, render_frame, warning


def project_insights(counts: Sequence[CountAndPercentage]) -> list[list]:
    """Rows of ``[label, count, sprint %, overall %]`` for display."""
    return [
        [c.label, c.count, c.sprint_percentage, c.overall_percentage]
        for c in counts
    ]


def insights_frame(label: str, counts: Sequence[CountAndPercentage]) -> pd.DataFrame:
    return pd.DataFrame(project_insights(counts), columns=[label, *INSIGHT_COLUMNS])


def show_insights(current_sprint: Sprint, *, db: sqlite3.Connection | None = None) -> None:
    per_status = count_jobs_per_status(current_sprint, db=db)
    per_sprint = count_jobs_per_sprint(current_sprint, db=db)

    # Both lists are empty when either total is zero
    if not per_status:
        print(warning(f"\nNo job applications tracked for sprint [{current_sprint.name}] yet.\n"))
        return

    print()
    print(bold(f"Applications per status in sprint [{current_sprint.name}]"))
    print("=" * 60)
    print(render_frame(insights_frame("Status", per_status)))
    print()
    print(bold("Applications per sprint"))
    print("=" * 60)
    print(render_frame(insights_frame("Sprint", per_sprint)))
    print()
