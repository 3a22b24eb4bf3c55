# ABOUTME: Defines canonical data structures shared by the risk engine and roster.
# ABOUTME: Centralizes assessment, attendance, policy, and student schema definitions.

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class AssessmentCategory(str, Enum):
    QUIZ = "Quiz"
    EXAM = "Exam"
    PROJECT = "Project"
    PARTICIPATION = "Participation"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"


class RiskTier(str, Enum):
    LOW = "LOW"
    EARLY_WARNING = "EARLY_WARNING"
    MODERATE = "MODERATE"
    HIGH = "HIGH"


@dataclass(frozen=True)
class Assessment:
    """One graded submission; ordered chronologically within a student."""

    id: str
    category: AssessmentCategory
    name: str
    score: float
    max_score: float
    date: str


@dataclass(frozen=True)
class AttendanceRecord:
    """Attendance mark for a single (date, time slot) session."""

    date: str
    status: AttendanceStatus
    time: Optional[str] = None
    reason: Optional[str] = None

    @property
    def session_key(self) -> str:
        return f"{self.date}|{self.time or 'N/A'}"


@dataclass(frozen=True)
class RiskPolicy:
    """Tunable constants consumed by the scoring engine."""

    passing_threshold: float = 0.75
    attendance_absence_limit: float = 0.20

    def __post_init__(self) -> None:
        for name in ("passing_threshold", "attendance_absence_limit"):
            value = getattr(self, name)
            if not 0.0 < value < 1.0:
                raise ValueError(f"{name} must be in (0, 1), got {value!r}.")


@dataclass(frozen=True)
class RiskFlags:
    slipping: bool = False
    sudden_drop: bool = False
    chronic_absentee: bool = False

    def any(self) -> bool:
        return self.slipping or self.sudden_drop or self.chronic_absentee


@dataclass(frozen=True)
class RiskAssessment:
    """Engine output: failure probability, tier, and behavioral flags."""

    probability: float
    tier: RiskTier
    flags: RiskFlags = field(default_factory=RiskFlags)


@dataclass(frozen=True)
class InterventionLog:
    id: str
    date: str
    type: str
    notes: str
    scheduled_date: Optional[str] = None


@dataclass(frozen=True)
class Student:
    """Roster entry with its histories and the most recent risk derivation."""

    id: str
    student_id: str
    first_name: str
    last_name: str
    middle_name: str = ""
    gender: str = "Other"
    birthday: str = ""
    email: str = ""
    contact: str = ""
    course: str = ""
    year_level: int = 1
    block: str = ""
    subjects: Tuple[str, ...] = ()
    assessments: Tuple[Assessment, ...] = ()
    attendance: Tuple[AttendanceRecord, ...] = ()
    intervention_logs: Tuple[InterventionLog, ...] = ()
    failure_probability: float = 0.0
    risk_level: RiskTier = RiskTier.LOW
    risk_flags: RiskFlags = field(default_factory=RiskFlags)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.middle_name, self.last_name) if part)
