"""Commands for job sprints."""

from __future__ import annotations

import sqlite3
from datetime import date
from pathlib import Path

from ..config import Config, save_config
from ..db.models import Sprint, format_sprint_date
from ..db.sprints import add_sprint, list_sprints, update_sprint
from ..display import bold, display_sprints, success, warning
from ..log import get_logger
from ..prompts import ask_select

log = get_logger(__name__)


def current(current_sprint: Sprint) -> None:
    print(f"\nCurrent sprint: {bold(current_sprint.name)}\n")


def new(
    conn: sqlite3.Connection,
    config: Config,
    current_sprint: Sprint | None,
    name: str | None = None,
    *,
    today: date | None = None,
    config_file: Path | None = None,
) -> Sprint:
    """Start a sprint (named after today's date by default) and make it current.

    The sprint being replaced is closed with today's date unless it already
    has an end date.
    """
    today_str = format_sprint_date(today or date.today())
    sprint = add_sprint(name or today_str, today_str, db=conn)

    if current_sprint is not None and current_sprint.end_date is None:
        update_sprint(current_sprint.id, end_date=today_str, db=conn)
        log.info("Closed sprint %s on %s", current_sprint.name, today_str)

    config.current_sprint_name = sprint.name
    save_config(config, config_file)
    log.info("Started sprint %s", sprint.name)
    print(success(f"\nStarted a new sprint [{sprint.name}]!\n"))
    return sprint


def show_all(conn: sqlite3.Connection) -> None:
    sprints = list_sprints(db=conn)
    if not sprints:
        print(warning("\nNo sprints tracked yet. Run `fetters sprint new` to start one.\n"))
        return
    display_sprints(sprints)


def set_current(
    conn: sqlite3.Connection, config: Config, *, config_file: Path | None = None
) -> Sprint | None:
    """Pick an existing sprint and store it as the current one."""
    sprints = list_sprints(db=conn)
    if not sprints:
        print(warning("\nNo sprints tracked yet. Run `fetters sprint new` to start one.\n"))
        return None
    current_index = next(
        (i for i, s in enumerate(sprints) if s.name == config.current_sprint_name), None
    )
    sprint = ask_select("Select the current sprint:", sprints, default=current_index)
    if sprint is None:
        return None

    config.current_sprint_name = sprint.name
    save_config(config, config_file)
    log.info("Current sprint set to %s", sprint.name)
    print(success(f"\nSet the current sprint to [{sprint.name}]!\n"))
    return sprint
