"""
fetters test configuration

Every test gets a fresh, migrated and seeded database under tmp_path, and
the per-user directories are redirected there too.
"""
from datetime import date

import pytest

from fetters.db import close_db, init_db
from fetters.db.jobs import add_job
from fetters.db.models import InterviewStage
from fetters.db.sprints import add_sprint
from fetters.db.stages import add_stage, get_next_stage_number
from fetters.db.statuses import get_status_by_name
from fetters.db.titles import get_or_create_title


@pytest.fixture(autouse=True)
def app_dirs(tmp_path, monkeypatch):
    """Keep the database, config and logs out of the real home directory."""
    data = tmp_path / "data"
    config = tmp_path / "config"
    monkeypatch.setenv("FETTERS_DATA_DIR", str(data))
    monkeypatch.setenv("FETTERS_CONFIG_DIR", str(config))
    monkeypatch.setenv("NO_COLOR", "1")
    return {"data": data, "config": config}


@pytest.fixture
def conn(tmp_path):
    connection = init_db(tmp_path / "fetters.db")
    yield connection
    close_db()


@pytest.fixture
def sprint(conn):
    return add_sprint("2026-01-05", "2026-01-05", db=conn)


@pytest.fixture
def status_id(conn):
    """Look up a seeded status id by name."""
    def _status_id(name="PENDING"):
        return get_status_by_name(name, db=conn).id
    return _status_id


@pytest.fixture
def make_job(conn, sprint, status_id):
    """Insert a job with sensible defaults; keyword overrides win."""
    def _make_job(company="Acme", title="Technical Writer", status="PENDING",
                  sprint_id=None, link=None, notes=None,
                  created="2026-01-05 09:00:00"):
        title_row = get_or_create_title(title, db=conn)
        return add_job(
            company,
            created,
            title_row.id,
            status_id(status),
            sprint_id if sprint_id is not None else sprint.id,
            link=link,
            notes=notes,
            db=conn,
        )
    return _make_job


@pytest.fixture
def make_stage(conn):
    """Append a stage to a job with the next free stage number."""
    def _make_stage(job_id, name=None, status="SCHEDULED",
                    scheduled_date="2026/01/10", notes=None):
        return add_stage(
            InterviewStage(
                job_id=job_id,
                stage_number=get_next_stage_number(job_id, db=conn),
                name=name,
                status=status,
                scheduled_date=scheduled_date,
                notes=notes,
                created="2026-01-05 10:00:00",
            ),
            db=conn,
        )
    return _make_stage


@pytest.fixture
def today():
    return date(2026, 1, 5)


@pytest.fixture
def answers(monkeypatch):
    """Queue up replies for input(); EOF once they run out."""
    queue = []

    def fake_input(prompt=""):
        if not queue:
            raise EOFError
        return queue.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)

    def _answers(*replies):
        queue.extend(replies)
        return queue
    return _answers


@pytest.fixture
def quiet_cli(monkeypatch):
    """Run cli.main() without attaching log handlers."""
    monkeypatch.setattr("fetters.cli.setup_logging", lambda: None)
