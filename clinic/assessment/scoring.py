# clinic/assessment/scoring.py
"""
Weighted risk score over MedicalAnswers.

Every factor is checked (no early exit) and the total is bucketed into
one of four levels over the half-open ranges [6, inf), [4, 6), [2, 4), [0, 2).
"""
from __future__ import annotations

from typing import List, Tuple

from clinic.assessment.types import MedicalAnswers, RiskLevel

# (MedicalAnswers attribute, points)
RISK_WEIGHTS: List[Tuple[str, int]] = [
    ("heart_disease", 3),
    ("coagulation_disorder", 3),
    ("epilepsy", 3),
    ("diabetes", 2),
    ("hepatitis", 2),
    ("allergies", 2),
    ("migraines", 1),
    ("smoker", 1),
    ("pregnant", 1),
]

# Lower bound of each level, checked high to low.
RISK_THRESHOLDS: List[Tuple[int, RiskLevel]] = [
    (6, RiskLevel.HIGH),
    (4, RiskLevel.MEDIUM),
    (2, RiskLevel.LOW),
]


def compute_risk_score(answers: MedicalAnswers) -> int:
    return sum(points for name, points in RISK_WEIGHTS if getattr(answers, name))


def risk_level_for_score(score: int) -> RiskLevel:
    for threshold, level in RISK_THRESHOLDS:
        if score >= threshold:
            return level
    return RiskLevel.MINIMAL


def compute_risk_level(answers: MedicalAnswers) -> RiskLevel:
    return risk_level_for_score(compute_risk_score(answers))
