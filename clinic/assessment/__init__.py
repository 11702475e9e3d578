# clinic/assessment/__init__.py
from .types import (
    RiskLevel,
    AlertKind,
    AlertPriority,
    AlertRecord,
    MedicalAnswers,
)
from .answers import answers_from_sections, answers_from_legacy
from .scoring import compute_risk_score, risk_level_for_score, compute_risk_level
from .alerts import generate_alerts

__all__ = [
    "RiskLevel",
    "AlertKind",
    "AlertPriority",
    "AlertRecord",
    "MedicalAnswers",
    "answers_from_sections",
    "answers_from_legacy",
    "compute_risk_score",
    "risk_level_for_score",
    "compute_risk_level",
    "generate_alerts",
]
