# ABOUTME: Applies roster edits and re-derives every student's risk before saving.
# ABOUTME: Covers enrolment, grade and attendance sessions, and intervention logging.

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Union

from src.common.schemas import (
    Assessment,
    AssessmentCategory,
    AttendanceRecord,
    AttendanceStatus,
    InterventionLog,
    RiskPolicy,
    Student,
)
from src.risk_engine import evaluate

from .repository import StudentRepository


def new_record_id() -> str:
    return uuid.uuid4().hex[:9]


def apply_risk(student: Student, policy: Optional[RiskPolicy] = None) -> Student:
    """Return a copy of the student carrying a fresh risk derivation."""
    result = evaluate(student.assessments, student.attendance, policy)
    return replace(
        student,
        failure_probability=result.probability,
        risk_level=result.tier,
        risk_flags=result.flags,
    )


class RosterService:
    """
    Recompute-on-write facade over a StudentRepository.

    Every mutating call rebuilds the affected records, re-runs the risk engine
    for the whole roster, and persists the result.
    """

    def __init__(self, repository: StudentRepository, policy: Optional[RiskPolicy] = None) -> None:
        self.repository = repository
        self.policy = policy or RiskPolicy()

    def students(self) -> List[Student]:
        return self.repository.load_students()

    def get_student(self, record_id: str) -> Student:
        for student in self.students():
            if student.id == record_id:
                return student
        raise KeyError(f"Unknown student '{record_id}'.")

    def find_by_school_id(self, school_id: str) -> Optional[Student]:
        return next((s for s in self.students() if s.student_id == school_id), None)

    def sync(self, students: Iterable[Student]) -> List[Student]:
        recalculated = [apply_risk(s, self.policy) for s in students]
        self.repository.save_students(recalculated)
        return recalculated

    def add_student(self, student_id: str, first_name: str, last_name: str, **fields) -> Student:
        student = Student(
            id=new_record_id(),
            student_id=student_id,
            first_name=first_name,
            last_name=last_name,
            **fields,
        )
        roster = self.sync([*self.students(), student])
        return roster[-1]

    def import_students(self, students: Sequence[Student]) -> List[Student]:
        print(f"[roster] Importing {len(students)} students")
        return self.sync([*self.students(), *students])

    def delete_student(self, record_id: str) -> List[Student]:
        current = self.students()
        remaining = [s for s in current if s.id != record_id]
        if len(remaining) == len(current):
            raise KeyError(f"Unknown student '{record_id}'.")
        return self.sync(remaining)

    def record_assessment_session(
        self,
        category: Union[AssessmentCategory, str],
        name: str,
        max_score: float,
        date: str,
        scores: Dict[str, float],
    ) -> List[Student]:
        """Append one assessment to every student present in `scores`."""
        if not name:
            raise ValueError("Assessment name is required.")
        category = AssessmentCategory(category)

        updated = []
        for student in self.students():
            if student.id in scores:
                assessment = Assessment(
                    id=new_record_id(),
                    category=category,
                    name=name,
                    score=scores[student.id],
                    max_score=max_score,
                    date=date,
                )
                student = replace(student, assessments=(*student.assessments, assessment))
            updated.append(student)
        return self.sync(updated)

    def record_attendance_session(
        self,
        date: str,
        time_slot: Optional[str],
        statuses: Dict[str, Union[AttendanceStatus, str]],
        reasons: Optional[Dict[str, str]] = None,
    ) -> List[Student]:
        """Mark one session; a prior mark for the same (date, time slot) is replaced."""
        reasons = reasons or {}
        updated = []
        for student in self.students():
            if student.id in statuses:
                record = AttendanceRecord(
                    date=date,
                    status=AttendanceStatus(statuses[student.id]),
                    time=time_slot,
                    reason=reasons.get(student.id),
                )
                kept = tuple(r for r in student.attendance if not (r.date == date and r.time == time_slot))
                student = replace(student, attendance=(*kept, record))
            updated.append(student)
        return self.sync(updated)

    def add_intervention(
        self,
        record_id: str,
        intervention_type: str,
        notes: str,
        scheduled_date: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> InterventionLog:
        now = now or datetime.now()
        log = InterventionLog(
            id=new_record_id(),
            date=now.isoformat(),
            type=intervention_type,
            notes=notes,
            scheduled_date=scheduled_date,
        )

        found = False
        updated = []
        for student in self.students():
            if student.id == record_id:
                found = True
                student = replace(student, intervention_logs=(*student.intervention_logs, log))
            updated.append(student)
        if not found:
            raise KeyError(f"Unknown student '{record_id}'.")
        self.sync(updated)
        return log

    def upcoming_interventions(self, now: Optional[datetime] = None, within_hours: float = 1.0) -> List[str]:
        return upcoming_interventions(self.students(), now=now, within_hours=within_hours)


def _parse_scheduled(value: str) -> Optional[datetime]:
    """Naive local datetime for a stored meeting time, or None if unparseable."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        scheduled = datetime.fromisoformat(text)
    except ValueError:
        return None
    if scheduled.tzinfo is not None:
        scheduled = scheduled.astimezone().replace(tzinfo=None)
    return scheduled


def upcoming_interventions(
    students: Iterable[Student],
    now: Optional[datetime] = None,
    within_hours: float = 1.0,
) -> List[str]:
    """Reminder lines for meetings scheduled after `now` and within the window."""
    now = now or datetime.now()
    if now.tzinfo is not None:
        now = now.astimezone().replace(tzinfo=None)
    horizon = now + timedelta(hours=within_hours)
    reminders: List[str] = []
    for student in students:
        for log in student.intervention_logs:
            if not log.scheduled_date:
                continue
            scheduled = _parse_scheduled(log.scheduled_date)
            if scheduled is not None and now < scheduled <= horizon:
                message = f"Upcoming: {student.first_name} at {scheduled.strftime('%H:%M')}"
                if message not in reminders:
                    reminders.append(message)
    return reminders
