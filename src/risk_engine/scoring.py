# ABOUTME: Converts assessment and attendance history into a failure-risk estimate.
# ABOUTME: Weights grade and attendance factors, classifies tiers, and emits behavioral flags.

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from src.common.schemas import (
    Assessment,
    AttendanceRecord,
    AttendanceStatus,
    RiskAssessment,
    RiskFlags,
    RiskPolicy,
    RiskTier,
)

from .detectors import detect_absence_streak, detect_slipping, detect_sudden_drop

GRADE_WEIGHT = 0.6
ATTENDANCE_WEIGHT = 0.4
LATE_ABSENCE_EQUIVALENT = 0.33

SUDDEN_DROP_BONUS = 0.30
SLIPPING_BONUS = 0.15
ABSENCE_STREAK_BONUS = 0.20
ATTENDANCE_WATCH_FACTOR = 0.4

# Inclusive lower bounds, checked from highest to lowest.
TIER_THRESHOLDS: Tuple[Tuple[float, RiskTier], ...] = (
    (0.80, RiskTier.HIGH),
    (0.66, RiskTier.MODERATE),
    (0.51, RiskTier.EARLY_WARNING),
)

DEFAULT_POLICY = RiskPolicy()


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return float(min(high, max(low, value)))


def assessment_ratio(assessment: Assessment) -> float:
    """Score as a fraction of max score; malformed rows count as zero."""
    try:
        score = float(assessment.score)
        max_score = float(assessment.max_score)
    except (TypeError, ValueError):
        return 0.0
    if not (np.isfinite(score) and np.isfinite(max_score)) or max_score <= 0 or score < 0:
        return 0.0
    return score / max_score


def _base_grade_factor(ratios: Sequence[float], passing_threshold: float) -> float:
    avg_score = sum(ratios) / len(ratios)
    if avg_score >= passing_threshold:
        return 0.0
    return min(1.0, (passing_threshold - avg_score) / passing_threshold * 2)


def grade_factor(
    assessments: Sequence[Assessment],
    policy: RiskPolicy = DEFAULT_POLICY,
) -> Tuple[float, bool, bool]:
    """
    Measure academic underperformance plus negative momentum.

    Returns (factor, slipping, sudden_drop). The base distance-from-threshold
    term is topped up by the sudden-drop bonus and then the slipping bonus,
    clamping to [0, 1] after each step.
    """

    if not assessments:
        return 0.0, False, False

    ratios: List[float] = [assessment_ratio(a) for a in assessments]
    factor = _clamp(_base_grade_factor(ratios, policy.passing_threshold))

    sudden_drop = detect_sudden_drop(ratios)
    if sudden_drop:
        factor = _clamp(factor + SUDDEN_DROP_BONUS)

    slipping = detect_slipping(ratios)
    if slipping:
        factor = _clamp(factor + SLIPPING_BONUS)

    return factor, slipping, sudden_drop


def effective_absence_rate(attendance: Sequence[AttendanceRecord]) -> float:
    if not attendance:
        return 0.0
    absences = sum(1 for record in attendance if record.status == AttendanceStatus.ABSENT)
    lates = sum(1 for record in attendance if record.status == AttendanceStatus.LATE)
    return (absences + lates * LATE_ABSENCE_EQUIVALENT) / len(attendance)


def attendance_factor(
    attendance: Sequence[AttendanceRecord],
    policy: RiskPolicy = DEFAULT_POLICY,
) -> Tuple[float, bool]:
    """
    Normalize absence/lateness burden, with a penalty for a trailing absence streak.

    Returns (factor, chronic_absentee).
    """

    if not attendance:
        return 0.0, False

    limit = policy.attendance_absence_limit
    rate = effective_absence_rate(attendance)

    chronic_absentee = False
    if rate > limit:
        chronic_absentee = True
        factor = min(1.0, rate / limit)
    elif rate > limit / 2:
        factor = ATTENDANCE_WATCH_FACTOR
    else:
        factor = 0.0

    if detect_absence_streak(attendance):
        factor = _clamp(factor + ABSENCE_STREAK_BONUS)

    return _clamp(factor), chronic_absentee


def classify_tier(probability: float) -> RiskTier:
    for lower_bound, tier in TIER_THRESHOLDS:
        if probability >= lower_bound:
            return tier
    return RiskTier.LOW


def combine_factors(grade: float, attendance: float) -> float:
    return _clamp(grade * GRADE_WEIGHT + attendance * ATTENDANCE_WEIGHT)


def evaluate(
    assessments: Sequence[Assessment],
    attendance: Sequence[AttendanceRecord],
    policy: Optional[RiskPolicy] = None,
) -> RiskAssessment:
    """
    Score one student's history.

    Pure and deterministic: inputs are never mutated and degenerate data
    (empty histories, zero max scores) contributes nothing instead of raising.
    Flags are reported independently of the tier.
    """

    policy = policy or DEFAULT_POLICY
    grade, slipping, sudden_drop = grade_factor(assessments, policy)
    absence, chronic_absentee = attendance_factor(attendance, policy)

    probability = combine_factors(grade, absence)
    return RiskAssessment(
        probability=probability,
        tier=classify_tier(probability),
        flags=RiskFlags(
            slipping=slipping,
            sudden_drop=sudden_drop,
            chronic_absentee=chronic_absentee,
        ),
    )


def evaluate_legacy(
    assessments: Sequence[Assessment],
    attendance: Sequence[AttendanceRecord],
    policy: Optional[RiskPolicy] = None,
) -> RiskAssessment:
    """
    Earlier rule set without pattern detectors.

    Adds 0.20 when the latest ratio sits more than 0.15 below the average and
    uses a 0.5 watch value for attendance. No streak bonus, no flags.
    """

    policy = policy or DEFAULT_POLICY

    grade = 0.0
    if assessments:
        ratios = [assessment_ratio(a) for a in assessments]
        avg_score = sum(ratios) / len(ratios)
        grade = _clamp(_base_grade_factor(ratios, policy.passing_threshold))
        if ratios[-1] < avg_score - 0.15:
            grade = _clamp(grade + 0.2)

    absence = 0.0
    if attendance:
        limit = policy.attendance_absence_limit
        rate = effective_absence_rate(attendance)
        if rate > limit:
            absence = min(1.0, rate / limit)
        elif rate > limit / 2:
            absence = 0.5

    probability = combine_factors(grade, absence)
    return RiskAssessment(probability=probability, tier=classify_tier(probability))
