# ABOUTME: Makes the roster package importable for the CLI and tests.
# ABOUTME: Re-exports repositories, the recompute-on-write service, and CSV helpers.

from .importers import attendance_report, grades_report, parse_roster_csv
from .repository import InMemoryStudentRepository, JsonStudentRepository, StudentRepository
from .service import RosterService, apply_risk, upcoming_interventions

__all__ = [
    "InMemoryStudentRepository",
    "JsonStudentRepository",
    "RosterService",
    "StudentRepository",
    "apply_risk",
    "attendance_report",
    "grades_report",
    "parse_roster_csv",
    "upcoming_interventions",
]
