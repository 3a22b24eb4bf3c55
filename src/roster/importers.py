# ABOUTME: Builds roster records from CSV uploads and exports attendance and grade reports.
# ABOUTME: Uses pandas for parsing and for the tabular report layout.

from __future__ import annotations

import io
import re
from pathlib import Path
from typing import List, Optional, Sequence, Union

import pandas as pd

from src.common.schemas import Student

from .service import new_record_id

ROSTER_COLUMNS = ["full_name", "student_id", "course", "year_level", "block"]
DEFAULT_COURSE = "BS IT"
DEFAULT_BLOCK = "A"
EMAIL_DOMAIN = "university.edu.ph"
MISSING_MARK = "-"
LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_roster_csv(source: Union[str, Path]) -> List[Student]:
    """
    Parse a bulk-import CSV into new Student records.

    Columns are positional: full name, student ID, course, year, block. The
    header row is skipped whatever its labels. Full names split into first,
    middle (everything between) and last.
    """

    if isinstance(source, Path):
        text = source.read_text()
    else:
        text = source

    lines = [line for line in text.strip().splitlines() if line.strip()]
    if len(lines) < 2:
        raise ValueError("Roster CSV needs a header and at least one data row.")

    df = pd.read_csv(
        io.StringIO("\n".join(lines[1:])),
        header=None,
        names=ROSTER_COLUMNS,
        index_col=False,
        dtype=str,
        skipinitialspace=True,
        engine="python",
        # Trailing columns beyond the roster layout are ignored.
        on_bad_lines=lambda fields: fields[: len(ROSTER_COLUMNS)],
    )
    df = df.fillna("")

    students: List[Student] = []
    for _, row in df.iterrows():
        first, middle, last = _split_name(row["full_name"].strip())
        school_id = row["student_id"].strip() or f"ID-{new_record_id()[:5]}"
        students.append(
            Student(
                id=new_record_id(),
                student_id=school_id,
                first_name=first,
                middle_name=middle,
                last_name=last,
                birthday="2000-01-01",
                email=f"{school_id.lower()}@{EMAIL_DOMAIN}",
                course=row["course"].strip() or DEFAULT_COURSE,
                year_level=_parse_year(row["year_level"]),
                block=row["block"].strip() or DEFAULT_BLOCK,
            )
        )
    return students


def _split_name(full_name: str):
    parts = full_name.split()
    first = parts[0] if parts else "Unknown"
    last = parts[-1] if len(parts) > 1 else ""
    middle = " ".join(parts[1:-1]) if len(parts) > 2 else ""
    return first, middle, last


def _parse_year(value: str) -> int:
    """Leading integer of the year cell ('3rd' -> 3); blank or zero falls back to 1."""
    match = LEADING_INT.match(str(value))
    if match is None:
        return 1
    return int(match.group(1)) or 1


def attendance_report(students: Sequence[Student], block: Optional[str] = None) -> pd.DataFrame:
    """One row per student; one column per `date|time` session, oldest first."""
    selected = [s for s in students if block in (None, "All") or s.block == block]

    session_keys = sorted({record.session_key for s in selected for record in s.attendance})
    rows = []
    for student in selected:
        marks = {record.session_key: record.status.value for record in student.attendance}
        row = {"student_id": student.student_id, "name": student.full_name}
        for key in session_keys:
            row[key] = marks.get(key, MISSING_MARK)
        rows.append(row)

    return pd.DataFrame(rows, columns=["student_id", "name", *session_keys])


def grades_report(students: Sequence[Student]) -> pd.DataFrame:
    rows = []
    for student in students:
        for assessment in student.assessments:
            pct = (assessment.score / assessment.max_score * 100) if assessment.max_score > 0 else 0.0
            rows.append(
                {
                    "student_id": student.student_id,
                    "name": student.full_name,
                    "category": assessment.category.value,
                    "assessment": assessment.name,
                    "date": assessment.date,
                    "score": assessment.score,
                    "max_score": assessment.max_score,
                    "percentage": round(pct, 1),
                }
            )
    return pd.DataFrame(
        rows,
        columns=["student_id", "name", "category", "assessment", "date", "score", "max_score", "percentage"],
    )
