# ABOUTME: Loads YAML configuration for the risk policy and roster storage.
# ABOUTME: Applies defaults for missing keys and validates policy bounds.

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .schemas import RiskPolicy

DEFAULT_CONFIG_PATH = Path("configs/risk_policy.yaml")
DEFAULT_ROSTER_PATH = Path("data/roster.json")


@dataclass(frozen=True)
class MonitorConfig:
    policy: RiskPolicy = field(default_factory=RiskPolicy)
    roster_path: Path = DEFAULT_ROSTER_PATH


def load_config(config_path: Optional[Path] = None) -> MonitorConfig:
    """
    Read monitor settings from YAML.

    A missing file yields the defaults; present-but-invalid policy values
    raise ValueError from RiskPolicy.
    """

    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    if not path.exists():
        if config_path is not None:
            raise FileNotFoundError(f"Config not found at {path}")
        return MonitorConfig()

    with open(path) as f:
        cfg: Dict[str, Any] = yaml.safe_load(f) or {}

    return MonitorConfig(
        policy=policy_from_dict(cfg.get("policy") or {}),
        roster_path=Path((cfg.get("roster") or {}).get("path", DEFAULT_ROSTER_PATH)),
    )


def policy_from_dict(policy_cfg: Dict[str, Any]) -> RiskPolicy:
    defaults = RiskPolicy()
    return RiskPolicy(
        passing_threshold=float(policy_cfg.get("passing_threshold", defaults.passing_threshold)),
        attendance_absence_limit=float(
            policy_cfg.get("attendance_absence_limit", defaults.attendance_absence_limit)
        ),
    )
