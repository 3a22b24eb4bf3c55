# ABOUTME: Detects negative momentum and absence patterns in a student's history.
# ABOUTME: Provides heuristics for sudden drops, slipping trends, and absence streaks.

from __future__ import annotations

from typing import Sequence

from src.common.schemas import AttendanceRecord, AttendanceStatus


class PatternThresholds:
    SUDDEN_DROP_DELTA = 0.20
    SLIPPING_WINDOW = 3
    ABSENCE_STREAK = 3


def detect_sudden_drop(ratios: Sequence[float], delta: float = PatternThresholds.SUDDEN_DROP_DELTA) -> bool:
    """True when the latest ratio fell more than `delta` below the one before it."""
    if len(ratios) < 2:
        return False
    prev, last = ratios[-2], ratios[-1]
    return prev - last > delta


def detect_slipping(ratios: Sequence[float], window: int = PatternThresholds.SLIPPING_WINDOW) -> bool:
    """True when the last `window` ratios decline strictly at every step."""
    if len(ratios) < window:
        return False
    recent = ratios[-window:]
    return all(earlier > later for earlier, later in zip(recent, recent[1:]))


def detect_absence_streak(
    attendance: Sequence[AttendanceRecord],
    length: int = PatternThresholds.ABSENCE_STREAK,
) -> bool:
    if len(attendance) < length:
        return False
    return all(record.status == AttendanceStatus.ABSENT for record in attendance[-length:])
