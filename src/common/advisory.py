# ABOUTME: Generates short intervention advice from a student's risk tier and flags.
# ABOUTME: Template-based CAUSE/ACTION/MESSAGE text plus student-facing guidance.

from __future__ import annotations

from dataclasses import dataclass

from .alerts import ClassOverview
from .schemas import AttendanceStatus, RiskFlags, RiskTier, Student


@dataclass
class InterventionAdvice:
    student_id: str
    cause: str
    action: str
    message: str


def intervention_advice(student: Student) -> InterventionAdvice:
    """
    Pick a cause/action/message triple for a teacher's follow-up.

    Flags take precedence over the aggregate tier since they point at a
    specific behavior; recent scores and the absence count are quoted as
    evidence.
    """

    flags = student.risk_flags
    recent = ", ".join(f"{a.name}: {a.score:g}/{a.max_score:g}" for a in student.assessments[-3:])
    absences = sum(1 for r in student.attendance if r.status == AttendanceStatus.ABSENT)

    if flags.sudden_drop:
        cause = f"Sharp drop on the latest assessment ({recent})."
        action = "Schedule a 1-on-1 within the week to review the missed material."
        message = "Your last result dipped; let's go over it together."
    elif flags.slipping:
        cause = f"Scores declining across recent assessments ({recent})."
        action = "Assign targeted review of the last three topics."
        message = "Review previous quizzes to turn the trend around."
    elif flags.chronic_absentee:
        cause = f"Chronic absence ({absences} absences recorded)."
        action = "Contact the student and guardian about attendance."
        message = "Regular attendance is key to catching up."
    elif student.risk_level in (RiskTier.HIGH, RiskTier.MODERATE):
        cause = "Average performance below the passing threshold."
        action = "Enroll in remedial sessions and track weekly progress."
        message = "Extra practice now will make the difference."
    elif student.risk_level == RiskTier.EARLY_WARNING:
        cause = "Early signs of academic or attendance risk."
        action = "Check in informally and monitor the next assessments."
        message = "Keep up steady effort and ask questions early."
    else:
        cause = "No significant risk indicators."
        action = "Continue regular monitoring."
        message = "Keep up the good work."

    return InterventionAdvice(student_id=student.student_id, cause=cause, action=action, message=message)


def format_advice(advice: InterventionAdvice) -> str:
    return "\n".join(
        [
            f"- CAUSE: {advice.cause}",
            f"- ACTION: {advice.action}",
            f"- MESSAGE: {advice.message}",
        ]
    )


def student_guidance(flags: RiskFlags) -> str:
    if flags.slipping:
        return "Focus on reviewing previous failed quizzes to reverse the sliding trend."
    if flags.chronic_absentee:
        return "Improve your attendance to recover missing participation points."
    return "Maintain your study routine and participate more in class discussions."


def class_summary(overview: ClassOverview) -> str:
    if overview.total == 0:
        return "No students enrolled yet."
    if overview.high_risk:
        return "Prioritize immediate outreach to high-risk students to prevent academic withdrawal."
    if overview.mid_risk:
        return "Monitor early-warning and moderate-risk students closely before issues escalate."
    return "All students are currently low risk; maintain regular monitoring."
