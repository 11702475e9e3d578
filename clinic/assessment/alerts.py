# clinic/assessment/alerts.py
from __future__ import annotations

from typing import List

from clinic.assessment.types import (
    AlertKind,
    AlertPriority,
    AlertRecord,
    MedicalAnswers,
)

CATEGORY_MEDICAL_CONDITION = "medical_condition"
CATEGORY_ALLERGY = "allergy"
CATEGORY_PREGNANCY = "pregnancy"
CATEGORY_MEDICATION = "medication"

UNSPECIFIED_MONTH = "unspecified"


def generate_alerts(answers: MedicalAnswers) -> List[AlertRecord]:
    """
    Clinical alerts for a set of answers.

    Rules are evaluated in a fixed order and each may fire independently;
    the result keeps that order (it is not sorted by priority).
    """
    alerts: List[AlertRecord] = []

    if answers.diabetes:
        alerts.append(
            AlertRecord(
                kind=AlertKind.WARNING,
                message="DIABETES — caution with wound healing and infection",
                priority=AlertPriority.HIGH,
                category=CATEGORY_MEDICAL_CONDITION,
            )
        )

    if answers.heart_disease:
        alerts.append(
            AlertRecord(
                kind=AlertKind.DANGER,
                message="HEART DISEASE — consult cardiologist before anesthesia",
                priority=AlertPriority.HIGH,
                category=CATEGORY_MEDICAL_CONDITION,
            )
        )

    if answers.coagulation_disorder:
        alerts.append(
            AlertRecord(
                kind=AlertKind.DANGER,
                message="COAGULATION DISORDER — bleeding risk",
                priority=AlertPriority.HIGH,
                category=CATEGORY_MEDICAL_CONDITION,
            )
        )

    if answers.allergies and answers.allergy_list:
        alerts.append(
            AlertRecord(
                kind=AlertKind.WARNING,
                message=f"ALLERGIES: {answers.allergy_list}",
                priority=AlertPriority.MEDIUM,
                category=CATEGORY_ALLERGY,
            )
        )

    if answers.pregnant:
        month = answers.pregnancy_month or UNSPECIFIED_MONTH
        alerts.append(
            AlertRecord(
                kind=AlertKind.INFO,
                message=f"PREGNANCY — month {month}",
                priority=AlertPriority.MEDIUM,
                category=CATEGORY_PREGNANCY,
            )
        )

    if answers.current_medications and answers.medication_list:
        alerts.append(
            AlertRecord(
                kind=AlertKind.INFO,
                message=f"MEDICATIONS: {answers.medication_list}",
                priority=AlertPriority.LOW,
                category=CATEGORY_MEDICATION,
            )
        )

    return alerts
