# ABOUTME: Tests the trend and pattern detectors used by the scoring engine.
# ABOUTME: Ensures strict declines, drop deltas, and absence streak windows behave.

from src.common.schemas import AttendanceRecord, AttendanceStatus
from src.risk_engine import detect_absence_streak, detect_slipping, detect_sudden_drop


def _mk_marks(*statuses):
    return [AttendanceRecord(date=f"2024-01-{i + 1:02d}", status=AttendanceStatus(s)) for i, s in enumerate(statuses)]


def test_detect_sudden_drop_requires_more_than_delta():
    assert detect_sudden_drop([0.9, 0.4])
    assert not detect_sudden_drop([0.45, 0.55])
    assert not detect_sudden_drop([0.8, 0.65])
    assert not detect_sudden_drop([0.3])


def test_detect_sudden_drop_only_looks_at_last_pair():
    assert not detect_sudden_drop([1.0, 0.2, 0.3])


def test_detect_slipping_needs_strict_decline():
    assert detect_slipping([0.9, 0.8, 0.7])
    assert detect_slipping([1.0, 0.2, 0.9, 0.8, 0.7])
    assert not detect_slipping([0.8, 0.8, 0.7])
    assert not detect_slipping([0.80, 0.45, 0.55])
    assert not detect_slipping([0.9, 0.8])


def test_detect_absence_streak_needs_three_trailing_absences():
    assert detect_absence_streak(_mk_marks("Present", "Absent", "Absent", "Absent"))
    assert not detect_absence_streak(_mk_marks("Absent", "Absent"))
    assert not detect_absence_streak(_mk_marks("Absent", "Absent", "Late"))
    assert not detect_absence_streak(_mk_marks("Absent", "Absent", "Absent", "Present"))
