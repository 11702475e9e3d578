# clinic/services/legacy_sync.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Mapping, Optional, Tuple, Type, Union

import structlog

from clinic.assessment.answers import is_yes
from clinic.errors import PatientNotFound
from clinic.models import DentalRecord, DiseaseRecord, MedicalHistoryRecord, Patient
from clinic.questionnaire.schema import YesNo
from clinic.security import PIIFilter, get_pii_filter
from clinic.services.session import db_session

logger = structlog.get_logger(__name__)

DEFAULT_APPEARANCE_RATING = 5

# DiseaseRecord column -> medical_conditions key
DISEASE_COLUMNS = {
    "heart_disease": "heart_disease_hypertension",
    "prosthesis_wearer": "prosthesis_wearer",
    "diabetes": "diabetes",
    "hepatitis": "hepatitis_cirrhosis",
    "rheumatism": "rheumatism_arthritis",
    "respiratory_disease": "respiratory_asthma",
    "coagulation_disorder": "coagulation_bleeding",
    "anemia": "anemia_transfusion",
    "kidney_disease": "kidney_disease",
    "glaucoma": "glaucoma",
    "epilepsy": "epilepsy",
    "migraines": "migraines",
    "osteoporosis": "osteoporosis",
    "gastric_ulcer": "gastric_ulcer",
    "thyroid_disease": "thyroid_disease",
    "neurological_disease": "neurological_disease",
    "psychiatric_problems": "psychiatric_problems",
}


@dataclass
class LegacySyncResult:
    ok: bool
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {"ok": self.ok, "error": self.error}


def _parse_date(value: Any) -> Optional[date]:
    if not value or not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def _flag_or_text(flag: Any, text: Any) -> str:
    """Free text when answered yes with details, "DA" without, else "NU"."""
    if not is_yes(flag):
        return YesNo.NO.value
    if isinstance(text, str) and text != "" and text.strip().upper() != YesNo.NO.value:
        return text
    return YesNo.YES.value


def project_legacy_records(
    patient_id: int,
    medical_conditions: Optional[Mapping[str, Any]],
    general_health: Optional[Mapping[str, Any]],
    dental_exam: Optional[Mapping[str, Any]],
    today: Optional[date] = None,
    pii: Optional[PIIFilter] = None,
) -> Tuple[DiseaseRecord, MedicalHistoryRecord, DentalRecord]:
    """
    Project questionnaire sections onto (unsaved) legacy rows.

    With `pii`, the free-text allergy and medication columns are encrypted.
    """
    mc = medical_conditions or {}
    gh = general_health or {}
    de = dental_exam or {}
    today = today or date.today()

    disease = DiseaseRecord(
        patient_id=patient_id,
        other_diseases=mc.get("other_diseases_details") or None,
        **{column: is_yes(mc.get(key)) for column, key in DISEASE_COLUMNS.items()},
    )

    history_fields = {
        "patient_id": patient_id,
        "health_note": gh.get("health_rating") or "",
        "under_physician_care": is_yes(gh.get("under_physician_care")),
        "hospitalization": _flag_or_text(
            gh.get("hospitalized_last_5_years"), gh.get("hospitalization_reason")
        ),
        "medications": _flag_or_text(gh.get("current_medications"), gh.get("medication_list")),
        "smoker": is_yes(gh.get("smoker")),
        "allergies": _flag_or_text(gh.get("allergies"), gh.get("allergy_list")),
        "antidepressants": is_yes(gh.get("antidepressants")),
        "pregnancy_month": (
            gh.get("pregnancy_month") or YesNo.YES.value
            if is_yes(gh.get("pregnant"))
            else None
        ),
        "nursing": is_yes(gh.get("nursing")),
        "record_date": today,
    }
    if pii is not None:
        history_fields = pii.protect_on_write(history_fields)
    history = MedicalHistoryRecord(**history_fields)

    rating = de.get("appearance_rating")
    dental = DentalRecord(
        patient_id=patient_id,
        gum_health=de.get("gum_bleeding") or YesNo.NO.value,
        tooth_sensitivity=is_yes(de.get("tooth_sensitivity")),
        orthodontic_problems=de.get("orthodontic_problems") or None,
        grinding=is_yes(de.get("grinding")),
        last_dental_visit=_parse_date(de.get("last_visit_date")),
        appearance_rating=int(rating) if rating is not None else DEFAULT_APPEARANCE_RATING,
        previous_treatment_problems=de.get("previous_treatment_problems") or None,
        record_date=today,
    )

    return disease, history, dental


def sync_legacy_tables(
    patient_id: int,
    medical_conditions: Optional[Mapping[str, Any]],
    general_health: Optional[Mapping[str, Any]],
    dental_exam: Optional[Mapping[str, Any]],
    pii: Optional[PIIFilter] = None,
) -> LegacySyncResult:
    """
    Insert the legacy projection of a questionnaire in its own transaction.

    Errors are logged and returned, never raised: the questionnaire that
    triggered the sync is already committed and stays that way.
    """
    try:
        rows = project_legacy_records(
            patient_id,
            medical_conditions,
            general_health,
            dental_exam,
            pii=pii or get_pii_filter(),
        )
        with db_session() as session:
            session.add_all(rows)
    except Exception as exc:
        logger.error("legacy_sync_failed", patient_id=patient_id, error=str(exc))
        return LegacySyncResult(ok=False, error=str(exc))

    logger.info("legacy_sync_done", patient_id=patient_id)
    return LegacySyncResult(ok=True)


LegacyRecord = Union[DiseaseRecord, MedicalHistoryRecord, DentalRecord]


def legacy_record_to_dict(record: LegacyRecord, pii: PIIFilter) -> Dict[str, Any]:
    """Column values of a legacy row, encrypted columns decrypted."""
    return pii.reveal_on_read(
        {column.key: getattr(record, column.key) for column in record.__table__.columns}
    )


def insert_legacy_record(
    model: Type[LegacyRecord],
    data: Dict[str, Any],
    pii: Optional[PIIFilter] = None,
) -> LegacyRecord:
    """
    Insert one row written directly by an older client, outside any
    questionnaire.  Raises PatientNotFound for an unknown patient.
    """
    pii = pii or get_pii_filter()
    with db_session() as session:
        patient_id = data.get("patient_id")
        if patient_id is None or session.get(Patient, patient_id) is None:
            raise PatientNotFound(patient_id)

        record = model(**pii.protect_on_write(data))
        session.add(record)
        session.flush()

        logger.info(
            "legacy_record_created",
            table=model.__tablename__,
            record_id=record.id,
            patient_id=patient_id,
        )
        return record
