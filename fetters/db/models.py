"""Dataclasses for database entities."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

SPRINT_DATE_FORMAT = "%Y-%m-%d"
JOB_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
STAGE_DATE_FORMAT = "%Y/%m/%d"

DEFAULT_STATUSES = (
    "GHOSTED",
    "HIRED",
    "IN PROGRESS",
    "NOT HIRING ANYMORE",
    "OFFER RECEIVED",
    "PENDING",
    "REJECTED",
)


def _from_row(cls, row):
    """Create a dataclass instance from a sqlite3.Row, ignoring extra columns."""
    known = {f.name for f in dataclasses.fields(cls)}
    return cls(**{k: row[k] for k in row.keys() if k in known})


# --- date helpers ---

def format_sprint_date(value: date) -> str:
    return value.strftime(SPRINT_DATE_FORMAT)


def parse_sprint_date(value: str) -> date:
    return datetime.strptime(value, SPRINT_DATE_FORMAT).date()


def format_job_timestamp(value: datetime) -> str:
    return value.strftime(JOB_TIMESTAMP_FORMAT)


def parse_job_timestamp(value: str) -> datetime:
    return datetime.strptime(value, JOB_TIMESTAMP_FORMAT)


def format_stage_date(value: date) -> str:
    return value.strftime(STAGE_DATE_FORMAT)


def parse_stage_date(value: str) -> date:
    return datetime.strptime(value, STAGE_DATE_FORMAT).date()


def now_timestamp() -> str:
    """Current local time formatted for ``created`` columns."""
    return format_job_timestamp(datetime.now())


class StageStatus(str, Enum):
    """Outcome of a single interview stage."""

    SCHEDULED = "SCHEDULED"
    PASSED = "PASSED"
    REJECTED = "REJECTED"

    def __str__(self) -> str:
        return self.value

    @property
    def date_prompt(self) -> str:
        return f"Select the {self.value.lower()} date:"

    @classmethod
    def parse(cls, value: str) -> StageStatus:
        """Case-insensitive lookup; raises ValueError for unknown values."""
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown stage status: {value}") from None


@dataclass
class Sprint:
    id: int | None = None
    name: str = ""
    start_date: str = ""
    end_date: str | None = None
    num_jobs: int = 0

    @classmethod
    def from_row(cls, row) -> Sprint:
        return _from_row(cls, row)

    def __str__(self) -> str:
        return f"{self.name} (Start Date: {self.start_date}, End Date: {self.end_date or 'N/A'})"


@dataclass
class Status:
    id: int | None = None
    name: str = ""

    @classmethod
    def from_row(cls, row) -> Status:
        return _from_row(cls, row)

    def __str__(self) -> str:
        return self.name


@dataclass
class Title:
    id: int | None = None
    name: str = ""

    @classmethod
    def from_row(cls, row) -> Title:
        return _from_row(cls, row)

    def __str__(self) -> str:
        return self.name


@dataclass
class Job:
    id: int | None = None
    created: str = ""
    company_name: str = ""
    title_id: int | None = None
    status_id: int | None = None
    link: str | None = None
    notes: str | None = None
    sprint_id: int | None = None

    @classmethod
    def from_row(cls, row) -> Job:
        return _from_row(cls, row)


@dataclass
class ListedJob:
    """A job joined with its title, status and stage count for display."""

    id: int
    created: str = ""
    company_name: str = ""
    title: str | None = None
    status: str | None = None
    stages: int | None = None  # NULL when the job has no stages
    link: str | None = None
    notes: str | None = None

    @classmethod
    def from_row(cls, row) -> ListedJob:
        return _from_row(cls, row)

    def __str__(self) -> str:
        return (
            f"ID: {self.id} | Company: {self.company_name} | "
            f"Title: {self.title or ''} | Status: {self.status or ''}"
        )


@dataclass
class JobQuery:
    """Optional filters for list_jobs(). String fields match as substrings."""

    company: str | None = None
    link: str | None = None
    notes: str | None = None
    sprint: str | None = None
    status: str | None = None
    title: str | None = None
    stages: int | None = None  # 0 = any stages, N = exactly N


@dataclass
class InterviewStage:
    id: int | None = None
    job_id: int | None = None
    stage_number: int = 1
    name: str | None = None
    status: str = StageStatus.SCHEDULED.value
    scheduled_date: str = ""
    notes: str | None = None
    created: str = ""

    @classmethod
    def from_row(cls, row) -> InterviewStage:
        return _from_row(cls, row)

    @property
    def label(self) -> str:
        if self.name:
            return f"Stage {self.stage_number}: {self.name}"
        return f"Stage {self.stage_number}"

    def __str__(self) -> str:
        return f"{self.label} [{self.status}] {self.scheduled_date}"


@dataclass
class CountAndPercentage:
    """One insights row: a label with its count and formatted percentages."""

    label: str
    count: int
    sprint_percentage: str
    overall_percentage: str
