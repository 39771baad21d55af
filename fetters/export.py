"""Export a sprint's job applications to an XLSX spreadsheet.

Rows are built with project_export(), loaded into a pandas DataFrame and
written with the openpyxl engine. Every data row is filled with the colour
of its application status; the header row is grey.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date
from pathlib import Path

import pandas as pd
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import PatternFill
from openpyxl.utils.exceptions import IllegalCharacterError

from .db.errors import FettersIOError, SheetNameError, XlsxError
from .db.models import ListedJob, format_sprint_date
from .log import get_logger

log = get_logger(__name__)

HEADERS = ["Timestamp", "Company Name", "Title", "Status", "Link", "Notes"]
HEADER_COLOR = "FF999999"
DEFAULT_COLOR = "FF999999"
STATUS_FILL_COLORS = {
    "GHOSTED": "FF999999",
    "HIRED": "FF00A36C",
    "IN PROGRESS": "FFFFFF00",
    "NOT HIRING ANYMORE": "FFC9C9C9",
    "OFFER RECEIVED": "FFFF00FF",
    "PENDING": "FF0096FF",
    "REJECTED": "FFEE4B2B",
}

# Excel rejects these in worksheet names and caps names at 31 characters.
_INVALID_SHEET_CHARS = re.compile(r"[\\*?:/\[\]]")
_MAX_SHEET_TITLE = 31


def project_export(jobs: Sequence[ListedJob]) -> list[list[str]]:
    """Map jobs to spreadsheet rows in HEADERS order."""
    return [
        [
            j.created,
            j.company_name,
            j.title if j.title is not None else "N/A",
            j.status if j.status is not None else "N/A",
            j.link if j.link is not None else "",
            j.notes if j.notes is not None else "",
        ]
        for j in jobs
    ]


def status_color(status: str | None) -> str:
    return STATUS_FILL_COLORS.get(status or "", DEFAULT_COLOR)


def sheet_title(sprint_name: str | None) -> str:
    """Worksheet title for a sprint, made safe for Excel.

    Excel rejects ``:`` in sheet names, so the title reads ``Sprint - <name>``.
    """
    name = _INVALID_SHEET_CHARS.sub("", sprint_name or "unknown").strip()
    if not name:
        raise SheetNameError(f"sprint name {sprint_name!r} has no characters usable in a sheet name")
    return f"Sprint - {name}"[:_MAX_SHEET_TITLE].rstrip("'")


def export_filename(
    sprint_name: str | None, filename: str | None = None, today: date | None = None
) -> str:
    """User-supplied filename (with ``.xlsx`` ensured) or the dated default."""
    if filename:
        return filename if filename.endswith(".xlsx") else f"{filename}.xlsx"
    stamp = format_sprint_date(today or date.today())
    return f"{stamp}-fetters-export-sprint-{sprint_name or 'unknown'}.xlsx"


def _fill(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def _clean(value: str) -> str:
    return ILLEGAL_CHARACTERS_RE.sub("", value)


def write_spreadsheet(
    jobs: Sequence[ListedJob], sprint_name: str | None, path: str | Path
) -> Path:
    """Write *jobs* to an XLSX file at *path* and return the path.

    Control characters XML cannot hold are dropped, and text that starts
    with ``=`` is stored as text rather than as a formula. A failed write
    leaves no file behind.
    """
    path = Path(path)
    title = sheet_title(sprint_name)
    rows = [[_clean(value) for value in row] for row in project_export(jobs)]
    df = pd.DataFrame(rows, columns=HEADERS)

    try:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=title, index=False)
            worksheet = writer.sheets[title]

            header_fill = _fill(HEADER_COLOR)
            for col in range(1, len(HEADERS) + 1):
                worksheet.cell(row=1, column=col).fill = header_fill

            for offset, job in enumerate(jobs):
                row_fill = _fill(status_color(job.status))
                for col in range(1, len(HEADERS) + 1):
                    cell = worksheet.cell(row=offset + 2, column=col)
                    cell.fill = row_fill
                    if cell.data_type == "f":
                        cell.data_type = "s"
    except OSError as exc:
        raise FettersIOError(exc) from exc
    except (ValueError, IllegalCharacterError) as exc:
        path.unlink(missing_ok=True)
        raise XlsxError(exc) from exc

    log.info("Exported %d job(s) for sprint %s to %s", len(jobs), sprint_name, path)
    return path
