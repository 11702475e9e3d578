# clinic/services/records.py
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from clinic.assessment import RiskLevel
from clinic.errors import DentistNotFound, DuplicatePatient, PatientNotFound
from clinic.models import Dentist, Patient, Questionnaire
from clinic.questionnaire.schema import QuestionnaireStatus, YesNo
from clinic.security import PIIFilter
from clinic.services.session import db_session

logger = structlog.get_logger(__name__)

ELEVATED_RISK_LEVELS = (RiskLevel.HIGH.value, RiskLevel.MEDIUM.value)
ANESTHETIC_MARKERS = ("anestez", "novocain", "lidocain")
RECENT_WINDOW = timedelta(days=7)
HIGH_RISK_LIMIT = 20


def extract_medical_conditions(questionnaire: Optional[Questionnaire]) -> List[str]:
    """Names of the conditions answered "DA", e.g. "heart disease hypertension"."""
    if questionnaire is None or not questionnaire.medical_conditions:
        return []
    return [
        key.replace("_", " ")
        for key, value in questionnaire.medical_conditions.items()
        if value == YesNo.YES.value
    ]


def split_list(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [item.strip() for item in text.split(",") if item.strip()]


def has_anesthetic_reaction(questionnaire: Optional[Questionnaire]) -> bool:
    if questionnaire is None:
        return False
    allergies = (questionnaire.general_health or {}).get("allergy_list") or ""
    allergies = allergies.lower()
    return any(marker in allergies for marker in ANESTHETIC_MARKERS)


def latest_questionnaire(session: Session, patient_id: int) -> Optional[Questionnaire]:
    stmt = (
        select(Questionnaire)
        .where(Questionnaire.patient_id == patient_id)
        .order_by(Questionnaire.completed_at.desc(), Questionnaire.id.desc())
        .limit(1)
    )
    return session.scalars(stmt).first()


def questionnaires_for_patient(session: Session, patient_id: int) -> List[Questionnaire]:
    stmt = (
        select(Questionnaire)
        .where(Questionnaire.patient_id == patient_id)
        .order_by(Questionnaire.completed_at.desc(), Questionnaire.id.desc())
    )
    return list(session.scalars(stmt))


def high_risk_questionnaires(
    session: Session, limit: int = HIGH_RISK_LIMIT
) -> List[Questionnaire]:
    stmt = (
        select(Questionnaire)
        .where(
            Questionnaire.risk_level.in_(ELEVATED_RISK_LEVELS),
            Questionnaire.status == QuestionnaireStatus.COMPLETED.value,
        )
        .order_by(Questionnaire.completed_at.desc(), Questionnaire.id.desc())
        .limit(limit)
    )
    return list(session.scalars(stmt))


def recent_questionnaires(session: Session, limit: int = 10) -> List[Questionnaire]:
    stmt = (
        select(Questionnaire)
        .where(Questionnaire.status == QuestionnaireStatus.COMPLETED.value)
        .order_by(Questionnaire.completed_at.desc(), Questionnaire.id.desc())
        .limit(limit)
    )
    return list(session.scalars(stmt))


def questionnaire_statistics(
    session: Session, now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Completed questionnaires only: total, count per risk level, and how
    many were completed in the last 7 days.
    """
    now = now or datetime.utcnow()
    completed = Questionnaire.status == QuestionnaireStatus.COMPLETED.value

    total = session.scalar(select(func.count()).select_from(Questionnaire).where(completed))
    rows = session.execute(
        select(Questionnaire.risk_level, func.count())
        .where(completed)
        .group_by(Questionnaire.risk_level)
    ).all()
    recent_week = session.scalar(
        select(func.count())
        .select_from(Questionnaire)
        .where(completed, Questionnaire.completed_at >= now - RECENT_WINDOW)
    )

    return {
        "total": total or 0,
        "risk_distribution": {level: int(count) for level, count in rows},
        "recent_week": recent_week or 0,
    }


def dashboard_stats(session: Session, now: Optional[datetime] = None) -> Dict[str, Any]:
    stats = questionnaire_statistics(session, now=now)
    total_patients = session.scalar(select(func.count()).select_from(Patient))
    risk_patients = sum(
        stats["risk_distribution"].get(level, 0) for level in ELEVATED_RISK_LEVELS
    )
    return {
        "total_patients": total_patients or 0,
        "pending_questionnaires": max(0, stats["total"] - stats["recent_week"]),
        "risk_patients": risk_patients,
        "questionnaire_stats": stats,
        "recent_activity": stats["recent_week"],
    }


def high_priority_alerts(session: Session) -> List[Tuple[Questionnaire, Dict[str, Any]]]:
    """(questionnaire, alert) pairs with high or medium priority alerts."""
    pairs: List[Tuple[Questionnaire, Dict[str, Any]]] = []
    for questionnaire in high_risk_questionnaires(session):
        for alert in questionnaire.medical_alerts or []:
            if alert.get("priority") in ("high", "medium"):
                pairs.append((questionnaire, alert))
    return pairs


class PatientService:
    """
    Patient and dentist records.  Patient identity fields go through the
    PII filter before they are stored.
    """

    def __init__(self, pii: PIIFilter):
        self.pii = pii

    def _find_by_field(self, session: Session, field: str, value: str) -> Optional[Patient]:
        column = getattr(Patient, field)

        # Rows stored before encryption hold plaintext
        patient = session.scalars(select(Patient).where(column == value)).first()
        if patient is not None:
            return patient

        # Random IVs mean the token can't be queried for; decrypt and compare.
        for candidate in session.scalars(select(Patient)):
            if self.pii.cipher.decrypt_field(getattr(candidate, field)) == value:
                return candidate
        return None

    def find_by_cnp(self, session: Session, cnp: str) -> Optional[Patient]:
        return self._find_by_field(session, "cnp", cnp)

    def find_by_email(self, session: Session, email: str) -> Optional[Patient]:
        return self._find_by_field(session, "email", email)

    def create_patient(self, data: Dict[str, Any]) -> Patient:
        """
        `data` holds plaintext values keyed by Patient column names.
        """
        with db_session() as session:
            if self.find_by_cnp(session, data["cnp"]) is not None:
                raise DuplicatePatient("Patient with this CNP already exists")
            if self.find_by_email(session, data["email"]) is not None:
                raise DuplicatePatient("Patient with this email already exists")

            dentist_id = data.get("dentist_id")
            if dentist_id is not None and session.get(Dentist, dentist_id) is None:
                raise DentistNotFound(dentist_id)

            patient = Patient(**self.pii.protect_on_write(data))
            session.add(patient)
            try:
                session.flush()
            except IntegrityError as exc:
                raise DuplicatePatient("Patient with this CNP or email already exists") from exc

            logger.info("patient_created", patient_id=patient.id)
            return patient

    def get_patient(self, session: Session, patient_id: int) -> Patient:
        patient = session.get(Patient, patient_id)
        if patient is None:
            raise PatientNotFound(patient_id)
        return patient

    def list_patients(
        self,
        session: Session,
        page: int = 1,
        limit: int = 10,
        dentist_id: Optional[int] = None,
    ) -> Tuple[List[Patient], int]:
        stmt = select(Patient)
        count_stmt = select(func.count()).select_from(Patient)
        if dentist_id is not None:
            stmt = stmt.where(Patient.dentist_id == dentist_id)
            count_stmt = count_stmt.where(Patient.dentist_id == dentist_id)

        stmt = stmt.order_by(Patient.id.desc()).offset((page - 1) * limit).limit(limit)
        return list(session.scalars(stmt)), session.scalar(count_stmt) or 0

    def reveal(self, patient: Patient) -> Dict[str, Any]:
        """Plaintext column values of a patient row."""
        return self.pii.reveal_on_read(
            {
                "id": patient.id,
                "first_name": patient.first_name,
                "last_name": patient.last_name,
                "cnp": patient.cnp,
                "birth_date": patient.birth_date,
                "email": patient.email,
                "phone": patient.phone,
                "address": patient.address,
                "referral": patient.referral,
                "representative_name": patient.representative_name,
                "dentist_id": patient.dentist_id,
                "created_at": patient.created_at,
            }
        )

    def create_dentist(self, first_name: str, last_name: str) -> Dentist:
        with db_session() as session:
            dentist = Dentist(first_name=first_name, last_name=last_name)
            session.add(dentist)
            session.flush()
            return dentist

    def get_dentist(self, session: Session, dentist_id: int) -> Dentist:
        dentist = session.get(Dentist, dentist_id)
        if dentist is None:
            raise DentistNotFound(dentist_id)
        return dentist
