# ABOUTME: Tests recompute-on-write roster operations and JSON persistence.
# ABOUTME: Ensures risk is re-derived after grade and attendance sessions.

from datetime import datetime, timedelta

import pytest

from src.common.schemas import AttendanceStatus, RiskTier
from src.roster import InMemoryStudentRepository, JsonStudentRepository, RosterService


def _service_with_student(repository=None):
    service = RosterService(repository or InMemoryStudentRepository())
    student = service.add_student("2021-00123", "Juan", "Dela Cruz", middle_name="Miguel", block="IT3-A")
    return service, student


def test_add_student_starts_low_with_empty_history():
    service, student = _service_with_student()

    assert student.risk_level == RiskTier.LOW
    assert student.failure_probability == 0.0
    assert student.assessments == ()
    assert service.get_student(student.id).full_name == "Juan Miguel Dela Cruz"


def test_sessions_recompute_risk():
    service, student = _service_with_student()

    for name, score in (("Quiz 1", 80), ("Quiz 2", 45), ("Midterm", 55)):
        service.record_assessment_session("Quiz", name, 100, "2023-10-01", {student.id: score})
    for day, status in (("01", "Present"), ("02", "Absent"), ("03", "Absent"), ("04", "Absent")):
        service.record_attendance_session(f"2023-10-{day}", "08:00 AM", {student.id: status})

    scored = service.get_student(student.id)
    assert len(scored.assessments) == 3
    assert scored.failure_probability == pytest.approx(0.64)
    assert scored.risk_level == RiskTier.EARLY_WARNING
    assert scored.risk_flags.chronic_absentee


def test_attendance_session_replaces_same_date_and_slot():
    service, student = _service_with_student()

    service.record_attendance_session("2023-10-01", "08:00 AM", {student.id: "Absent"})
    service.record_attendance_session("2023-10-01", "10:00 AM", {student.id: "Present"})
    service.record_attendance_session("2023-10-01", "08:00 AM", {student.id: "Late"})

    records = service.get_student(student.id).attendance
    assert len(records) == 2
    assert records[-1].time == "08:00 AM"
    assert records[-1].status == AttendanceStatus.LATE


def test_sessions_skip_students_without_entries():
    service, first = _service_with_student()
    second = service.add_student("2021-00999", "Maria", "Santos")

    service.record_assessment_session("Exam", "Final", 50, "2023-12-01", {second.id: 10})

    assert service.get_student(first.id).assessments == ()
    assert len(service.get_student(second.id).assessments) == 1


def test_assessment_session_requires_name_and_known_category():
    service, student = _service_with_student()

    with pytest.raises(ValueError):
        service.record_assessment_session("Quiz", "", 100, "2023-10-01", {student.id: 90})
    with pytest.raises(ValueError):
        service.record_assessment_session("Homework", "HW1", 100, "2023-10-01", {student.id: 90})


def test_delete_student_and_unknown_ids():
    service, student = _service_with_student()

    service.delete_student(student.id)
    assert service.students() == []
    with pytest.raises(KeyError):
        service.delete_student(student.id)
    with pytest.raises(KeyError):
        service.add_intervention("missing", "Counseling", "notes")


def test_upcoming_interventions_within_window():
    service, student = _service_with_student()
    now = datetime(2024, 3, 1, 9, 0)

    service.add_intervention(student.id, "Meeting", "Review grades", scheduled_date=(now + timedelta(minutes=30)).isoformat(), now=now)
    service.add_intervention(student.id, "Meeting", "Later", scheduled_date=(now + timedelta(hours=5)).isoformat(), now=now)
    service.add_intervention(student.id, "Note", "No meeting", now=now)

    assert service.upcoming_interventions(now=now) == ["Upcoming: Juan at 09:30"]
    assert len(service.get_student(student.id).intervention_logs) == 3


def test_json_repository_round_trip(tmp_path):
    path = tmp_path / "nested" / "roster.json"
    service, student = _service_with_student(JsonStudentRepository(path))
    service.record_assessment_session("Quiz", "Quiz 1", 100, "2023-10-01", {student.id: 90})
    service.record_assessment_session("Quiz", "Quiz 2", 100, "2023-10-08", {student.id: 40})

    reloaded = RosterService(JsonStudentRepository(path)).get_student(student.id)

    assert path.exists()
    assert reloaded.assessments[-1].score == 40
    assert reloaded.risk_flags.sudden_drop
    assert reloaded.risk_level == RiskTier.LOW


def test_json_repository_missing_file_is_empty(tmp_path):
    assert JsonStudentRepository(tmp_path / "none.json").load_students() == []


def test_upcoming_interventions_converts_offset_times_to_local():
    service, student = _service_with_student()
    now = datetime(2024, 3, 1, 9, 0)
    aware = (now + timedelta(minutes=30)).astimezone()

    service.add_intervention(student.id, "Meeting", "Offset time", scheduled_date=aware.isoformat(), now=now)
    service.add_intervention(student.id, "Meeting", "UTC time", scheduled_date="2024-03-01T09:45:00Z", now=now)

    reminders = service.upcoming_interventions(now=now, within_hours=48)
    assert "Upcoming: Juan at 09:30" in reminders


def test_upcoming_interventions_skips_unparseable_dates():
    service, student = _service_with_student()
    now = datetime(2024, 3, 1, 9, 0)

    service.add_intervention(student.id, "Meeting", "Vague", scheduled_date="next tuesday", now=now)
    service.add_intervention(student.id, "Meeting", "Soon", scheduled_date="2024-03-01T09:15:00", now=now)

    assert service.upcoming_interventions(now=now) == ["Upcoming: Juan at 09:15"]
