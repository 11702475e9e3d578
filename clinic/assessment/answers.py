# clinic/assessment/answers.py
"""
Adapters from the two answer sources onto MedicalAnswers.

Questionnaire sections hold "DA"/"NU" strings; only the exact string "DA"
means yes.  Legacy rows hold booleans and free text.  Both adapters feed the
same scoring and alert code, so they have to agree for every questionnaire
that legacy_sync projects.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from clinic.assessment.types import MedicalAnswers
from clinic.questionnaire.schema import YesNo


def is_yes(value: Any) -> bool:
    return value == YesNo.YES.value


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value != "":
        return value
    return None


def answers_from_sections(
    medical_conditions: Optional[Mapping[str, Any]],
    general_health: Optional[Mapping[str, Any]],
    dental_exam: Optional[Mapping[str, Any]] = None,
) -> MedicalAnswers:
    """
    Build MedicalAnswers from questionnaire JSON sections.

    Missing sections and keys read as "not present".  The dental exam does
    not contribute to the risk policy; it is accepted so callers can pass a
    questionnaire's sections through unchanged.
    """
    mc = medical_conditions or {}
    gh = general_health or {}

    return MedicalAnswers(
        heart_disease=is_yes(mc.get("heart_disease_hypertension")),
        coagulation_disorder=is_yes(mc.get("coagulation_bleeding")),
        epilepsy=is_yes(mc.get("epilepsy")),
        diabetes=is_yes(mc.get("diabetes")),
        hepatitis=is_yes(mc.get("hepatitis_cirrhosis")),
        migraines=is_yes(mc.get("migraines")),
        smoker=is_yes(gh.get("smoker")),
        allergies=is_yes(gh.get("allergies")),
        allergy_list=_text(gh.get("allergy_list")),
        current_medications=is_yes(gh.get("current_medications")),
        medication_list=_text(gh.get("medication_list")),
        pregnant=is_yes(gh.get("pregnant")),
        pregnancy_month=_text(gh.get("pregnancy_month")),
    )


def _legacy_text_flag(value: Optional[str]) -> bool:
    # "NU" is what the legacy form writes for "none"
    text = _text(value)
    return text is not None and text.strip().upper() != YesNo.NO.value


def _legacy_list(value: Optional[str]) -> Optional[str]:
    if not _legacy_text_flag(value) or value.strip().upper() == YesNo.YES.value:
        return None
    return value


def answers_from_legacy(disease: Any, history: Any, pii: Any = None) -> MedicalAnswers:
    """
    Build MedicalAnswers from a DiseaseRecord and a MedicalHistoryRecord.

    Either row may be None.  Pregnancy follows the legacy rule: any
    non-empty pregnancy_month counts, whatever it says.

    The allergies and medications columns are stored encrypted; pass the
    PIIFilter they were written with as `pii` to read them back.
    """
    def flag(row: Any, name: str) -> bool:
        return bool(row is not None and getattr(row, name, None))

    texts = {
        name: getattr(history, name, None) if history is not None else None
        for name in ("allergies", "medications")
    }
    if pii is not None:
        texts = pii.reveal_on_read(texts)
    allergies = texts["allergies"]
    medications = texts["medications"]
    month = getattr(history, "pregnancy_month", None) if history is not None else None

    return MedicalAnswers(
        heart_disease=flag(disease, "heart_disease"),
        coagulation_disorder=flag(disease, "coagulation_disorder"),
        epilepsy=flag(disease, "epilepsy"),
        diabetes=flag(disease, "diabetes"),
        hepatitis=flag(disease, "hepatitis"),
        migraines=flag(disease, "migraines"),
        smoker=flag(history, "smoker"),
        allergies=_legacy_text_flag(allergies),
        allergy_list=_legacy_list(allergies),
        current_medications=_legacy_text_flag(medications),
        medication_list=_legacy_list(medications),
        pregnant=month is not None and month != "",
        pregnancy_month=_legacy_list(month),
    )
