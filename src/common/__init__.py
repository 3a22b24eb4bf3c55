# ABOUTME: Makes the shared common package importable across the engine and roster.
# ABOUTME: Re-exports schema types and config loading for convenience.

from .config import MonitorConfig, load_config
from .schemas import (
    Assessment,
    AssessmentCategory,
    AttendanceRecord,
    AttendanceStatus,
    InterventionLog,
    RiskAssessment,
    RiskFlags,
    RiskPolicy,
    RiskTier,
    Student,
)

__all__ = [
    "Assessment",
    "AssessmentCategory",
    "AttendanceRecord",
    "AttendanceStatus",
    "InterventionLog",
    "MonitorConfig",
    "RiskAssessment",
    "RiskFlags",
    "RiskPolicy",
    "RiskTier",
    "Student",
    "load_config",
]
