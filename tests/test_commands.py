"""Tests for the interactive command flows, with input() scripted."""

from datetime import date

import pytest

from fetters.commands import config as config_cmd
from fetters.commands import jobs as jobs_cmd
from fetters.commands import sprint as sprint_cmd
from fetters.commands import stage as stage_cmd
from fetters.commands.common import select_job
from fetters.config import Config, load_config
from fetters.db.errors import NoJobsAvailable, SprintNameConflict
from fetters.db.jobs import get_job, list_jobs
from fetters.db.models import JobQuery
from fetters.db.sprints import add_sprint, get_sprint, get_sprint_by_name, list_sprints
from fetters.db.stages import list_stages
from fetters.db.statuses import get_status_by_name


class TestSelectJob:

    def test_no_matches(self, conn, sprint):
        with pytest.raises(NoJobsAvailable) as excinfo:
            select_job(conn, JobQuery(), sprint)
        assert excinfo.value.sprint_name == sprint.name

    def test_no_matches_names_queried_sprint(self, conn, sprint):
        with pytest.raises(NoJobsAvailable) as excinfo:
            select_job(conn, JobQuery(sprint="summer"), sprint)
        assert excinfo.value.sprint_name == "summer"

    def test_pick(self, conn, sprint, make_job, answers):
        make_job(company="Acme")
        globex = make_job(company="Globex")
        answers("2")
        assert select_job(conn, JobQuery(), sprint).id == globex.id

    def test_skip(self, conn, sprint, make_job, answers):
        make_job()
        answers("")
        assert select_job(conn, JobQuery(), sprint) is None


class TestAddCommand:

    def test_add(self, conn, sprint, answers, capsys):
        # title, status (6 = PENDING), link, notes, confirm
        answers("Technical Writer", "6", "https://acme.example", "", "y")
        jobs_cmd.add(conn, "Acme", sprint)
        [job] = list_jobs(current_sprint=sprint, db=conn)
        assert (job.company_name, job.title, job.status) == ("Acme", "Technical Writer", "PENDING")
        assert job.link == "https://acme.example"
        assert job.notes is None
        assert get_sprint(sprint.id, db=conn).num_jobs == 1
        assert "Successfully tracked" in capsys.readouterr().out

    def test_status_defaults_to_pending(self, conn, sprint, answers):
        answers("Writer", "", "", "", "")
        jobs_cmd.add(conn, "Acme", sprint)
        assert list_jobs(current_sprint=sprint, db=conn)[0].status == "PENDING"

    def test_cancel_leaves_no_trace(self, conn, sprint, answers, capsys):
        answers("Brand New Title", "", "", "", "n")
        jobs_cmd.add(conn, "Acme", sprint)
        assert list_jobs(current_sprint=sprint, db=conn) == []
        assert conn.execute("SELECT COUNT(*) FROM titles").fetchone()[0] == 0
        assert "Cancelled." in capsys.readouterr().out

    def test_skipped_title(self, conn, sprint, answers):
        answers("")
        jobs_cmd.add(conn, "Acme", sprint)
        assert list_jobs(current_sprint=sprint, db=conn) == []


class TestUpdateCommand:

    def test_update_company_and_status(self, conn, sprint, make_job, answers):
        job = make_job()
        # job, fields (Company, Status), company, status 3 = IN PROGRESS, confirm
        answers("1", "1,3", "Globex", "3", "y")
        jobs_cmd.update(conn, JobQuery(), sprint)
        updated = get_job(job.id, db=conn)
        assert updated.company_name == "Globex"
        assert updated.status_id == get_status_by_name("IN PROGRESS", db=conn).id

    def test_move_to_other_sprint(self, conn, sprint, make_job, answers):
        other = add_sprint("other", "2026-01-06", db=conn)
        job = make_job()
        answers("1", "6", "2", "y")
        jobs_cmd.update(conn, JobQuery(), sprint)
        assert get_job(job.id, db=conn).sprint_id == other.id
        assert get_sprint(sprint.id, db=conn).num_jobs == 0
        assert get_sprint(other.id, db=conn).num_jobs == 1

    def test_new_title_is_interned(self, conn, sprint, make_job, answers):
        job = make_job(title="Writer")
        answers("1", "2", "Editor", "y")
        jobs_cmd.update(conn, JobQuery(), sprint)
        [listed] = list_jobs(current_sprint=sprint, db=conn)
        assert listed.id == job.id
        assert listed.title == "Editor"

    def test_cancel(self, conn, sprint, make_job, answers):
        job = make_job()
        answers("1", "1", "Globex", "n")
        jobs_cmd.update(conn, JobQuery(), sprint)
        assert get_job(job.id, db=conn).company_name == "Acme"

    def test_cancelled_title_is_not_interned(self, conn, sprint, make_job, answers):
        make_job(title="Writer")
        answers("1", "2", "Editor", "n")
        jobs_cmd.update(conn, JobQuery(), sprint)
        names = [r["name"] for r in conn.execute("SELECT name FROM titles")]
        assert names == ["Writer"]

    def test_empty_input_clears_link_and_notes(self, conn, sprint, make_job, answers):
        job = make_job(link="https://acme.example", notes="referral")
        # job, fields (Link, Notes), link, notes, confirm
        answers("1", "4,5", "", "", "y")
        jobs_cmd.update(conn, JobQuery(), sprint)
        updated = get_job(job.id, db=conn)
        assert updated.link is None
        assert updated.notes is None

    def test_abort_mid_prompt_changes_nothing(self, conn, sprint, make_job, answers, capsys):
        job = make_job(link="https://acme.example", notes="referral")
        # job, fields (Company, Notes), company, then EOF at the notes prompt
        answers("1", "1,5", "Globex")
        jobs_cmd.update(conn, JobQuery(), sprint)
        unchanged = get_job(job.id, db=conn)
        assert (unchanged.company_name, unchanged.notes) == ("Acme", "referral")
        assert "Globex" not in capsys.readouterr().out


class TestDeleteCommand:

    def test_delete(self, conn, sprint, make_job, make_stage, answers, capsys):
        job = make_job()
        make_stage(job.id)
        answers("1", "y")
        jobs_cmd.delete(conn, JobQuery(), sprint)
        assert get_job(job.id, db=conn) is None
        assert list_stages(job.id, db=conn) == []
        assert "1 interview stage(s)" in capsys.readouterr().out

    def test_cancel(self, conn, sprint, make_job, answers):
        job = make_job()
        answers("1", "n")
        jobs_cmd.delete(conn, JobQuery(), sprint)
        assert get_job(job.id, db=conn) is not None


class TestListAndOpen:

    def test_list_empty(self, conn, sprint, capsys):
        jobs_cmd.show(conn, JobQuery(), sprint)
        assert "No job applications found" in capsys.readouterr().out

    def test_list(self, conn, sprint, make_job, capsys):
        make_job(company="Acme")
        jobs_cmd.show(conn, JobQuery(), sprint)
        out = capsys.readouterr().out
        assert f"Job applications for sprint [{sprint.name}]" in out
        assert "Acme" in out

    def test_open_url(self, conn, sprint, make_job, answers, monkeypatch):
        make_job(link="https://acme.example/jobs/1")
        opened = []
        monkeypatch.setattr(jobs_cmd.webbrowser, "open", opened.append)
        answers("1")
        jobs_cmd.open_link(conn, JobQuery(), sprint)
        assert opened == ["https://acme.example/jobs/1"]

    def test_open_local_file(self, conn, sprint, make_job, answers, monkeypatch, tmp_path):
        resume = tmp_path / "resume.pdf"
        resume.write_bytes(b"%PDF")
        make_job(link=str(resume))
        opened = []
        monkeypatch.setattr(jobs_cmd, "open_in_default_app", opened.append)
        answers("1")
        jobs_cmd.open_link(conn, JobQuery(), sprint)
        assert opened == [resume]

    def test_open_without_link(self, conn, sprint, make_job, answers, capsys):
        make_job()
        answers("1")
        jobs_cmd.open_link(conn, JobQuery(), sprint)
        assert "No link or file tracked" in capsys.readouterr().out


class TestStageCommands:

    def test_add(self, conn, sprint, make_job, make_stage, answers, capsys):
        job = make_job()
        make_stage(job.id, name="Phone Screen")
        # job, name, status 1 = SCHEDULED, date, notes, confirm
        answers("1", "Onsite", "1", "2026/01/20", "Bring portfolio", "y")
        stage_cmd.add(conn, JobQuery(), sprint)
        stages = list_stages(job.id, db=conn)
        assert [(s.stage_number, s.name) for s in stages] == [(1, "Phone Screen"), (2, "Onsite")]
        assert stages[1].scheduled_date == "2026/01/20"
        assert stages[1].notes == "Bring portfolio"
        assert "Added stage 2 for Acme!" in capsys.readouterr().out

    def test_add_cancel(self, conn, sprint, make_job, answers):
        job = make_job()
        answers("1", "", "2", "", "", "n")
        stage_cmd.add(conn, JobQuery(), sprint)
        assert list_stages(job.id, db=conn) == []

    def test_tree_only_offers_jobs_with_stages(self, conn, sprint, make_job, make_stage,
                                               answers, capsys):
        make_job(company="NoStages")
        staged = make_job(company="Staged")
        make_stage(staged.id, name="Phone Screen")
        answers("1")
        stage_cmd.tree(conn, JobQuery(), sprint)
        out = capsys.readouterr().out
        assert "Staged - Technical Writer" in out
        assert "Stage 1: Phone Screen" in out
        assert "NoStages" not in out

    def test_tree_without_any_stages(self, conn, sprint, make_job):
        make_job()
        with pytest.raises(NoJobsAvailable):
            stage_cmd.tree(conn, JobQuery(), sprint)

    def test_update(self, conn, sprint, make_job, make_stage, answers):
        job = make_job()
        stage = make_stage(job.id, name="Phone Screen")
        # job, stage, fields (Status, Date), status 2 = PASSED, date, confirm
        answers("1", "1", "2,3", "2", "2026/01/11", "y")
        stage_cmd.update(conn, JobQuery(), sprint)
        [updated] = list_stages(job.id, db=conn)
        assert updated.id == stage.id
        assert updated.status == "PASSED"
        assert updated.scheduled_date == "2026/01/11"
        assert updated.name == "Phone Screen"

    def test_add_skipped_notes(self, conn, sprint, make_job, answers):
        job = make_job()
        # job, name, status, date, then EOF at the notes prompt
        answers("1", "Onsite", "1", "2026/01/20")
        stage_cmd.add(conn, JobQuery(), sprint)
        assert list_stages(job.id, db=conn) == []

    def test_update_clears_notes(self, conn, sprint, make_job, make_stage, answers):
        job = make_job()
        make_stage(job.id, name="Phone Screen", notes="ask about team")
        # job, stage, fields (Notes), notes, confirm
        answers("1", "1", "4", "", "y")
        stage_cmd.update(conn, JobQuery(), sprint)
        [updated] = list_stages(job.id, db=conn)
        assert updated.notes is None
        assert updated.name == "Phone Screen"

    def test_update_skipped_prompt_changes_nothing(self, conn, sprint, make_job, make_stage,
                                                   answers):
        job = make_job()
        make_stage(job.id, name="Phone Screen")
        # job, stage, fields (Name, Status), name, then EOF at the status prompt
        answers("1", "1", "1,2", "Onsite")
        stage_cmd.update(conn, JobQuery(), sprint)
        [stage] = list_stages(job.id, db=conn)
        assert (stage.name, stage.status) == ("Phone Screen", "SCHEDULED")

    def test_update_without_stages(self, conn, sprint, make_job, answers, capsys):
        make_job()
        answers("1")
        stage_cmd.update(conn, JobQuery(), sprint)
        assert "No interview stages tracked for Acme." in capsys.readouterr().out

    def test_delete_renumbers(self, conn, sprint, make_job, make_stage, answers):
        job = make_job()
        for name in ("one", "two", "three"):
            make_stage(job.id, name=name)
        answers("1", "2", "y")
        stage_cmd.delete(conn, JobQuery(), sprint)
        assert [(s.stage_number, s.name) for s in list_stages(job.id, db=conn)] == [
            (1, "one"), (2, "three"),
        ]


class TestSprintCommands:

    def test_new_defaults_to_today(self, conn, tmp_path, today):
        config_file = tmp_path / "fetters.toml"
        config = Config()
        sprint = sprint_cmd.new(conn, config, None, today=today, config_file=config_file)
        assert sprint.name == "2026-01-05"
        assert sprint.start_date == "2026-01-05"
        assert load_config(config_file).current_sprint_name == "2026-01-05"

    def test_new_closes_previous_sprint(self, conn, sprint, tmp_path):
        config = Config(sprint.name)
        sprint_cmd.new(conn, config, sprint, "next", today=date(2026, 2, 1),
                       config_file=tmp_path / "fetters.toml")
        assert get_sprint(sprint.id, db=conn).end_date == "2026-02-01"
        assert get_sprint_by_name("next", db=conn).end_date is None
        assert config.current_sprint_name == "next"

    def test_new_keeps_existing_end_date(self, conn, tmp_path):
        old = add_sprint("old", "2026-01-01", "2026-01-15", db=conn)
        sprint_cmd.new(conn, Config("old"), old, "next", today=date(2026, 2, 1),
                       config_file=tmp_path / "fetters.toml")
        assert get_sprint(old.id, db=conn).end_date == "2026-01-15"

    def test_new_duplicate_name(self, conn, sprint, tmp_path):
        with pytest.raises(SprintNameConflict):
            sprint_cmd.new(conn, Config(), None, sprint.name,
                           config_file=tmp_path / "fetters.toml")
        assert len(list_sprints(db=conn)) == 1

    def test_set_current(self, conn, sprint, tmp_path, answers):
        add_sprint("other", "2026-01-06", db=conn)
        config_file = tmp_path / "fetters.toml"
        answers("2")
        chosen = sprint_cmd.set_current(conn, Config(sprint.name), config_file=config_file)
        assert chosen.name == "other"
        assert load_config(config_file).current_sprint_name == "other"

    def test_set_current_skip(self, conn, sprint, tmp_path, answers):
        config_file = tmp_path / "fetters.toml"
        answers("")
        # empty input keeps the highlighted current sprint
        chosen = sprint_cmd.set_current(conn, Config(sprint.name), config_file=config_file)
        assert chosen.name == sprint.name

    def test_show_all(self, conn, sprint, make_job, capsys):
        make_job()
        sprint_cmd.show_all(conn)
        out = capsys.readouterr().out
        assert "Sprint Name" in out
        assert sprint.name in out

    def test_show_all_empty(self, conn, capsys):
        sprint_cmd.show_all(conn)
        assert "No sprints tracked yet" in capsys.readouterr().out


class TestConfigCommands:

    def test_show(self, tmp_path, capsys):
        path = tmp_path / "fetters.toml"
        config_cmd.show(path)
        out = capsys.readouterr().out
        assert str(path) in out
        assert "current_sprint_name = ''" in out

    def test_edit_uses_editor(self, tmp_path, monkeypatch):
        path = tmp_path / "fetters.toml"
        calls = []
        monkeypatch.setenv("EDITOR", "nano -w")
        monkeypatch.setattr(config_cmd.subprocess, "run", lambda cmd, check: calls.append(cmd))
        config_cmd.edit(path)
        assert calls == [["nano", "-w", str(path)]]
        assert path.exists()

    def test_edit_without_editor(self, tmp_path, monkeypatch):
        path = tmp_path / "fetters.toml"
        opened = []
        monkeypatch.delenv("EDITOR", raising=False)
        monkeypatch.setattr(config_cmd, "open_in_default_app", opened.append)
        config_cmd.edit(path)
        assert opened == [path]
