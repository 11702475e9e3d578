# clinic/services/assessment.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import structlog
from sqlalchemy import select

from clinic.assessment import (
    RiskLevel,
    answers_from_legacy,
    answers_from_sections,
    compute_risk_level,
    compute_risk_score,
    generate_alerts,
)
from clinic.errors import PatientNotFound, QuestionnaireNotFound
from clinic.models import (
    DiseaseRecord,
    MedicalHistoryRecord,
    Patient,
    Questionnaire,
)
from clinic.security import PIIFilter, get_pii_filter
from clinic.services.legacy_sync import LegacySyncResult, sync_legacy_tables
from clinic.services.session import db_session

logger = structlog.get_logger(__name__)

SECTION_COLUMNS = ("medical_conditions", "general_health", "dental_exam")


@dataclass
class Assessment:
    alerts: List[Dict[str, str]]
    risk_level: RiskLevel


@dataclass
class RecomputeResult:
    total: int
    updated: int


@dataclass
class LegacyAssessment:
    patient_id: int
    score: int
    risk_level: RiskLevel


def assess_sections(
    medical_conditions: Optional[Mapping[str, Any]],
    general_health: Optional[Mapping[str, Any]],
    dental_exam: Optional[Mapping[str, Any]] = None,
) -> Assessment:
    """Alerts first, then the risk level, over the same answers."""
    answers = answers_from_sections(medical_conditions, general_health, dental_exam)
    alerts = [alert.to_dict() for alert in generate_alerts(answers)]
    return Assessment(alerts=alerts, risk_level=compute_risk_level(answers))


def assess(questionnaire: Questionnaire) -> Assessment:
    """
    Recompute alerts and risk level from the questionnaire's sections and
    set them on the record.  Same sections, same result.
    """
    result = assess_sections(
        questionnaire.medical_conditions,
        questionnaire.general_health,
        questionnaire.dental_exam,
    )
    questionnaire.medical_alerts = result.alerts
    questionnaire.risk_level = result.risk_level.value
    return result


class QuestionnaireAssessmentService:
    """
    Service that coordinates:
      - writing questionnaires and their derived alerts / risk level
      - the best-effort projection onto the legacy tables
      - bulk re-assessment and legacy-table scoring
    """

    def __init__(
        self,
        legacy_sync: Callable[..., LegacySyncResult] = sync_legacy_tables,
        pii: Optional[PIIFilter] = None,
    ):
        self.legacy_sync = legacy_sync
        self.pii = pii or get_pii_filter()

    def create_questionnaire(
        self, data: Dict[str, Any]
    ) -> Tuple[Questionnaire, LegacySyncResult]:
        """
        Insert and assess a questionnaire, then sync the legacy tables.

        `data` is keyed by Questionnaire column names.  The questionnaire is
        committed before the sync starts, so a failed sync leaves it in place;
        the outcome comes back as the second element.
        """
        with db_session() as session:
            patient_id = data.get("patient_id")
            if patient_id is None or session.get(Patient, patient_id) is None:
                raise PatientNotFound(patient_id)

            questionnaire = Questionnaire(**data)
            assess(questionnaire)
            session.add(questionnaire)
            session.flush()  # to get questionnaire.id

            logger.info(
                "questionnaire_created",
                questionnaire_id=questionnaire.id,
                patient_id=patient_id,
                risk_level=questionnaire.risk_level,
                alert_count=len(questionnaire.medical_alerts),
            )

        sync = self.legacy_sync(
            questionnaire.patient_id,
            questionnaire.medical_conditions,
            questionnaire.general_health,
            questionnaire.dental_exam,
            self.pii,
        )
        if not sync.ok:
            logger.warning(
                "questionnaire_saved_without_legacy_sync",
                questionnaire_id=questionnaire.id,
                error=sync.error,
            )
        return questionnaire, sync

    def update_questionnaire(
        self, questionnaire_id: int, updates: Dict[str, Any]
    ) -> Questionnaire:
        with db_session() as session:
            questionnaire = session.get(Questionnaire, questionnaire_id)
            if questionnaire is None:
                raise QuestionnaireNotFound(questionnaire_id)

            for key, value in updates.items():
                setattr(questionnaire, key, value)
            assess(questionnaire)

            logger.info(
                "questionnaire_updated",
                questionnaire_id=questionnaire_id,
                risk_level=questionnaire.risk_level,
            )
            return questionnaire

    def recompute_all_risk_levels(self) -> RecomputeResult:
        """
        Re-assess every stored questionnaire.  Only rows whose risk level
        changed are written.
        """
        total = 0
        updated = 0
        with db_session() as session:
            for questionnaire in session.scalars(select(Questionnaire)):
                total += 1
                result = assess_sections(
                    questionnaire.medical_conditions,
                    questionnaire.general_health,
                    questionnaire.dental_exam,
                )
                if result.risk_level.value == questionnaire.risk_level:
                    continue
                logger.info(
                    "risk_level_changed",
                    questionnaire_id=questionnaire.id,
                    old=questionnaire.risk_level,
                    new=result.risk_level.value,
                )
                questionnaire.risk_level = result.risk_level.value
                questionnaire.medical_alerts = result.alerts
                updated += 1

        logger.info("risk_recompute_done", total=total, updated=updated)
        return RecomputeResult(total=total, updated=updated)

    def assess_patient_from_legacy(self, patient_id: int) -> Optional[LegacyAssessment]:
        """
        Score a patient from their most recent legacy rows.

        Opens a fresh session so rows committed by an earlier sync are read
        back rather than assumed.  Returns None if there are no legacy rows.
        """
        with db_session() as session:
            if session.get(Patient, patient_id) is None:
                raise PatientNotFound(patient_id)

            disease = session.scalars(
                select(DiseaseRecord)
                .where(DiseaseRecord.patient_id == patient_id)
                .order_by(DiseaseRecord.id.desc())
                .limit(1)
            ).first()
            history = session.scalars(
                select(MedicalHistoryRecord)
                .where(MedicalHistoryRecord.patient_id == patient_id)
                .order_by(MedicalHistoryRecord.id.desc())
                .limit(1)
            ).first()

            if disease is None and history is None:
                return None

            answers = answers_from_legacy(disease, history, pii=self.pii)
            return LegacyAssessment(
                patient_id=patient_id,
                score=compute_risk_score(answers),
                risk_level=compute_risk_level(answers),
            )
