# ABOUTME: Tests alert ranking, tier display mapping, and advisory text generation.
# ABOUTME: Uses hand-built student records with precomputed risk fields.

from src.common.advisory import class_summary, format_advice, intervention_advice, student_guidance
from src.common.alerts import TIER_DISPLAY, build_alert_report, class_overview, rank_alerts, tier_info
from src.common.schemas import (
    Assessment,
    AssessmentCategory,
    AttendanceRecord,
    AttendanceStatus,
    RiskFlags,
    RiskTier,
    Student,
)


def _mk_student(sid, probability, tier, flags=None, **fields):
    return Student(
        id=sid,
        student_id=sid,
        first_name=sid.title(),
        last_name="Test",
        failure_probability=probability,
        risk_level=tier,
        risk_flags=flags or RiskFlags(),
        **fields,
    )


ROSTER = [
    _mk_student("low", 0.1, RiskTier.LOW),
    _mk_student("early", 0.55, RiskTier.EARLY_WARNING),
    _mk_student("high", 0.9, RiskTier.HIGH),
    _mk_student("mod", 0.7, RiskTier.MODERATE),
]


def test_rank_alerts_excludes_low_and_sorts_descending():
    ranked = rank_alerts(ROSTER)
    assert [s.student_id for s in ranked] == ["high", "mod", "early"]


def test_rank_alerts_filters_by_tier():
    assert [s.student_id for s in rank_alerts(ROSTER, "MODERATE")] == ["mod"]
    assert len(rank_alerts(ROSTER, "All")) == 3


def test_tier_display_and_info():
    assert TIER_DISPLAY[RiskTier.HIGH].label == "High Risk"
    assert TIER_DISPLAY[RiskTier.LOW].color == "green"
    assert tier_info(RiskTier.HIGH).level == 3
    assert tier_info(RiskTier.EARLY_WARNING).level == 1
    assert tier_info(RiskTier.LOW) is None


def test_class_overview_and_summary():
    overview = class_overview(ROSTER)
    assert (overview.total, overview.high_risk, overview.mid_risk, overview.low_risk) == (4, 1, 2, 1)
    assert "high-risk" in class_summary(overview)
    assert class_overview([]).mean_probability == 0.0


def test_build_alert_report_columns():
    report = build_alert_report(ROSTER)
    assert list(report["student_id"]) == ["high", "mod", "early"]
    assert "chronic_absentee" in report.columns


def test_intervention_advice_prefers_flags():
    assessments = tuple(
        Assessment(id=str(i), category=AssessmentCategory.QUIZ, name=f"Q{i}", score=s, max_score=100, date="")
        for i, s in enumerate((90, 40))
    )
    attendance = (AttendanceRecord(date="d1", status=AttendanceStatus.ABSENT),)
    student = _mk_student(
        "drop",
        0.34,
        RiskTier.LOW,
        RiskFlags(sudden_drop=True, chronic_absentee=True),
        assessments=assessments,
        attendance=attendance,
    )

    advice = intervention_advice(student)
    text = format_advice(advice)

    assert "Q1: 40/100" in advice.cause
    assert text.startswith("- CAUSE:")
    assert "- ACTION:" in text and "- MESSAGE:" in text


def test_student_guidance_order():
    assert "sliding" in student_guidance(RiskFlags(slipping=True, chronic_absentee=True))
    assert "attendance" in student_guidance(RiskFlags(chronic_absentee=True))
    assert "routine" in student_guidance(RiskFlags())
