# ABOUTME: Ranks at-risk students and maps risk tiers to display labels and colors.
# ABOUTME: Produces class-level overview statistics and tabular alert reports.

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from .schemas import RiskTier, Student


@dataclass(frozen=True)
class TierDisplay:
    label: str
    color: str


@dataclass(frozen=True)
class TierInfo:
    level: int
    title: str
    description: str


TIER_DISPLAY: Dict[RiskTier, TierDisplay] = {
    RiskTier.LOW: TierDisplay(label="Low Risk", color="green"),
    RiskTier.EARLY_WARNING: TierDisplay(label="Early Warning", color="yellow"),
    RiskTier.MODERATE: TierDisplay(label="Moderate Risk", color="orange3"),
    RiskTier.HIGH: TierDisplay(label="High Risk", color="red"),
}

TIER_INFO: Dict[RiskTier, TierInfo] = {
    RiskTier.HIGH: TierInfo(
        level=3,
        title="Tier 3: HIGH RISK",
        description="Critical academic failure likely without immediate intervention.",
    ),
    RiskTier.MODERATE: TierInfo(
        level=2,
        title="Tier 2: MODERATE RISK",
        description="Consistent decline in performance or attendance detected.",
    ),
    RiskTier.EARLY_WARNING: TierInfo(
        level=1,
        title="Tier 1: EARLY WARNING",
        description="Showing first signs of academic or attendance risk.",
    ),
}


def tier_info(tier: RiskTier) -> Optional[TierInfo]:
    """Alert narrative for a tier; Low has none."""
    return TIER_INFO.get(RiskTier(tier))


def rank_alerts(students: Sequence[Student], tier: Optional[Union[RiskTier, str]] = None) -> List[Student]:
    """Non-Low students ordered by failure probability, highest first."""
    alerted = [s for s in students if s.risk_level != RiskTier.LOW]
    if tier not in (None, "All"):
        wanted = RiskTier(tier)
        alerted = [s for s in alerted if s.risk_level == wanted]
    return sorted(alerted, key=lambda s: s.failure_probability, reverse=True)


@dataclass(frozen=True)
class ClassOverview:
    total: int
    high_risk: int
    mid_risk: int
    low_risk: int
    mean_probability: float


def class_overview(students: Sequence[Student]) -> ClassOverview:
    high = sum(1 for s in students if s.risk_level == RiskTier.HIGH)
    mid = sum(1 for s in students if s.risk_level in (RiskTier.MODERATE, RiskTier.EARLY_WARNING))
    mean_probability = (
        sum(s.failure_probability for s in students) / len(students) if students else 0.0
    )
    return ClassOverview(
        total=len(students),
        high_risk=high,
        mid_risk=mid,
        low_risk=len(students) - high - mid,
        mean_probability=mean_probability,
    )


def build_alert_report(students: Sequence[Student], tier: Optional[Union[RiskTier, str]] = None) -> pd.DataFrame:
    rows = []
    for student in rank_alerts(students, tier):
        rows.append(
            {
                "student_id": student.student_id,
                "name": student.full_name,
                "block": student.block,
                "risk_level": student.risk_level.value,
                "failure_probability": round(student.failure_probability, 4),
                "slipping": student.risk_flags.slipping,
                "sudden_drop": student.risk_flags.sudden_drop,
                "chronic_absentee": student.risk_flags.chronic_absentee,
            }
        )
    return pd.DataFrame(
        rows,
        columns=[
            "student_id",
            "name",
            "block",
            "risk_level",
            "failure_probability",
            "slipping",
            "sudden_drop",
            "chronic_absentee",
        ],
    )
