# ABOUTME: Persists student rosters behind a minimal load/save repository interface.
# ABOUTME: Provides JSON-file and in-memory stores plus record (de)serialization helpers.

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Protocol, Sequence

from src.common.schemas import (
    Assessment,
    AssessmentCategory,
    AttendanceRecord,
    AttendanceStatus,
    InterventionLog,
    RiskFlags,
    RiskTier,
    Student,
)


class StudentRepository(Protocol):
    def load_students(self) -> List[Student]:
        ...

    def save_students(self, students: Sequence[Student]) -> None:
        ...


class InMemoryStudentRepository:
    """Keeps the roster in process; used by tests and dry runs."""

    def __init__(self, students: Sequence[Student] = ()) -> None:
        self._students: List[Student] = list(students)

    def load_students(self) -> List[Student]:
        return list(self._students)

    def save_students(self, students: Sequence[Student]) -> None:
        self._students = list(students)


class JsonStudentRepository:
    """Stores the full roster as a single JSON document."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load_students(self) -> List[Student]:
        if not self.path.exists():
            return []
        with open(self.path) as f:
            payload = json.load(f)
        students = [student_from_dict(row) for row in payload.get("students", [])]
        print(f"[roster] Loaded {len(students)} students from {self.path}")
        return students

    def save_students(self, students: Sequence[Student]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"students": [student_to_dict(s) for s in students]}
        with open(self.path, "w") as f:
            json.dump(payload, f, indent=2)
        print(f"[roster] Saved {len(students)} students to {self.path}")


def student_to_dict(student: Student) -> Dict[str, Any]:
    row = asdict(student)
    row["risk_level"] = student.risk_level.value
    row["assessments"] = [{**asdict(a), "category": a.category.value} for a in student.assessments]
    row["attendance"] = [{**asdict(r), "status": r.status.value} for r in student.attendance]
    row["subjects"] = list(student.subjects)
    return row


def student_from_dict(row: Dict[str, Any]) -> Student:
    assessments = tuple(
        Assessment(
            id=str(a["id"]),
            category=AssessmentCategory(a["category"]),
            name=a.get("name", ""),
            score=a["score"],
            max_score=a["max_score"],
            date=a.get("date", ""),
        )
        for a in row.get("assessments", [])
    )
    attendance = tuple(
        AttendanceRecord(
            date=r["date"],
            status=AttendanceStatus(r["status"]),
            time=r.get("time"),
            reason=r.get("reason"),
        )
        for r in row.get("attendance", [])
    )
    logs = tuple(InterventionLog(**log) for log in row.get("intervention_logs", []))
    flags = RiskFlags(**row.get("risk_flags", {}))

    return Student(
        id=str(row["id"]),
        student_id=str(row["student_id"]),
        first_name=row.get("first_name", ""),
        middle_name=row.get("middle_name", ""),
        last_name=row.get("last_name", ""),
        gender=row.get("gender", "Other"),
        birthday=row.get("birthday", ""),
        email=row.get("email", ""),
        contact=row.get("contact", ""),
        course=row.get("course", ""),
        year_level=int(row.get("year_level", 1)),
        block=row.get("block", ""),
        subjects=tuple(row.get("subjects", [])),
        assessments=assessments,
        attendance=attendance,
        intervention_logs=logs,
        failure_probability=float(row.get("failure_probability", 0.0)),
        risk_level=RiskTier(row.get("risk_level", RiskTier.LOW.value)),
        risk_flags=flags,
    )
