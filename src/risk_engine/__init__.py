# ABOUTME: Exposes the deterministic academic risk scoring engine.
# ABOUTME: Re-exports evaluate, tier classification, and pattern detectors.

from .detectors import detect_absence_streak, detect_slipping, detect_sudden_drop
from .scoring import classify_tier, evaluate, evaluate_legacy

__all__ = [
    "classify_tier",
    "detect_absence_streak",
    "detect_slipping",
    "detect_sudden_drop",
    "evaluate",
    "evaluate_legacy",
]
