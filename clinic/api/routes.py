# clinic/api/routes.py
from __future__ import annotations

import math
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy import text

from clinic.errors import (
    DentistNotFound,
    DuplicatePatient,
    PatientNotFound,
    QuestionnaireNotFound,
)
from clinic.models import (
    DentalRecord,
    DiseaseRecord,
    MedicalHistoryRecord,
    Patient,
    Questionnaire,
)
from clinic.security import get_pii_filter
from clinic.services import (
    PatientService,
    QuestionnaireAssessmentService,
    db_session,
    insert_legacy_record,
    legacy_record_to_dict,
)
from clinic.services import records
from clinic.validation import normalize_cnp
from .schemas import (
    DashboardStatsResponse,
    DentalRecordCreate,
    DentalRecordResponse,
    DentistCreateRequest,
    DentistResponse,
    DiseaseRecordCreate,
    DiseaseRecordResponse,
    HighPriorityAlert,
    HighRiskPatient,
    LegacyRiskResponse,
    MedicalHistoryCreate,
    MedicalHistoryResponse,
    PatientCreateRequest,
    PatientListItem,
    PatientListResponse,
    PatientResponse,
    QuestionnaireCreateRequest,
    QuestionnaireCreateResponse,
    QuestionnaireResponse,
    QuestionnaireSummary,
    QuestionnaireUpdateRequest,
    RecomputeResponse,
    StatisticsResponse,
)

router = APIRouter()

_pii = get_pii_filter()
_patients = PatientService(_pii)
_assessment = QuestionnaireAssessmentService(pii=_pii)


def _full_name(patient: Patient) -> str:
    revealed = _pii.reveal_on_read(
        {"first_name": patient.first_name, "last_name": patient.last_name}
    )
    return f"{revealed['first_name']} {revealed['last_name']}"


def _patient_response(patient: Patient, latest: Optional[Questionnaire]) -> PatientResponse:
    data = _patients.reveal(patient)
    general = (latest.general_health or {}) if latest is not None else {}
    return PatientResponse(
        **data,
        full_name=f"{data['first_name']} {data['last_name']}",
        medical_conditions=records.extract_medical_conditions(latest),
        allergies=records.split_list(general.get("allergy_list")),
        current_medications=records.split_list(general.get("medication_list")),
        risk_level=latest.risk_level if latest is not None else "minimal",
        medical_alerts=(latest.medical_alerts or []) if latest is not None else [],
    )


@router.post("/patients", response_model=PatientResponse, status_code=201)
def create_patient(payload: PatientCreateRequest) -> PatientResponse:
    try:
        patient = _patients.create_patient(payload.model_dump())
    except DuplicatePatient as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DentistNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _patient_response(patient, None)


@router.get("/patients", response_model=PatientListResponse)
def list_patients(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    dentist_id: Optional[int] = None,
) -> PatientListResponse:
    with db_session() as session:
        patients, count = _patients.list_patients(
            session, page=page, limit=limit, dentist_id=dentist_id
        )

        items = []
        for patient in patients:
            data = _patients.reveal(patient)
            latest = records.latest_questionnaire(session, patient.id)
            general = (latest.general_health or {}) if latest is not None else {}
            conditions = (latest.medical_conditions or {}) if latest is not None else {}
            items.append(
                PatientListItem(
                    patient_id=patient.id,
                    full_name=f"{data['first_name']} {data['last_name']}",
                    email=data["email"],
                    phone=data["phone"],
                    allergies=records.split_list(general.get("allergy_list")),
                    medical_conditions=records.extract_medical_conditions(latest),
                    heart_issues=conditions.get("heart_disease_hypertension") == "DA",
                    anesthetic_reactions=records.has_anesthetic_reaction(latest),
                    last_questionnaire_date=(
                        latest.completed_at if latest is not None else patient.created_at
                    ),
                    risk_level=latest.risk_level if latest is not None else "minimal",
                    medical_alerts=(latest.medical_alerts or []) if latest is not None else [],
                )
            )

    return PatientListResponse(
        patients=items,
        total_pages=math.ceil(count / limit),
        current_page=page,
        total_items=count,
    )


@router.get("/patients/cnp/{cnp}", response_model=PatientResponse)
def get_patient_by_cnp(cnp: str) -> PatientResponse:
    with db_session() as session:
        patient = _patients.find_by_cnp(session, normalize_cnp(cnp))
        if patient is None:
            raise HTTPException(status_code=404, detail="Patient not found")
        return _patient_response(patient, records.latest_questionnaire(session, patient.id))


@router.get("/patients/{patient_id}", response_model=PatientResponse)
def get_patient(patient_id: int) -> PatientResponse:
    with db_session() as session:
        try:
            patient = _patients.get_patient(session, patient_id)
        except PatientNotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        return _patient_response(patient, records.latest_questionnaire(session, patient_id))


@router.get("/patients/{patient_id}/alerts")
def get_patient_alerts(patient_id: int) -> List[dict]:
    with db_session() as session:
        latest = records.latest_questionnaire(session, patient_id)
        if latest is None:
            return []
        return latest.medical_alerts or []


@router.get("/patients/{patient_id}/legacy-risk", response_model=LegacyRiskResponse)
def get_patient_legacy_risk(patient_id: int) -> LegacyRiskResponse:
    try:
        result = _assessment.assess_patient_from_legacy(patient_id)
    except PatientNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    if result is None:
        raise HTTPException(
            status_code=404,
            detail="No legacy medical records found for this patient.",
        )
    return LegacyRiskResponse(
        patient_id=result.patient_id,
        score=result.score,
        risk_level=result.risk_level,
    )


@router.post(
    "/questionnaires",
    response_model=QuestionnaireCreateResponse,
    status_code=201,
)
def create_questionnaire(payload: QuestionnaireCreateRequest) -> QuestionnaireCreateResponse:
    try:
        questionnaire, sync = _assessment.create_questionnaire(payload.to_columns())
    except PatientNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))

    return QuestionnaireCreateResponse(
        id=questionnaire.id,
        patient_id=questionnaire.patient_id,
        risk_level=questionnaire.risk_level,
        medical_alerts=questionnaire.medical_alerts,
        status=questionnaire.status,
        completed_at=questionnaire.completed_at,
        legacy_sync=sync.to_dict(),
    )


@router.put("/questionnaires/{questionnaire_id}", response_model=QuestionnaireResponse)
def update_questionnaire(
    questionnaire_id: int, payload: QuestionnaireUpdateRequest
) -> QuestionnaireResponse:
    try:
        questionnaire = _assessment.update_questionnaire(
            questionnaire_id, payload.to_columns()
        )
    except QuestionnaireNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return QuestionnaireResponse.model_validate(questionnaire)


@router.post("/questionnaires/recompute-risk", response_model=RecomputeResponse)
def recompute_risk() -> RecomputeResponse:
    result = _assessment.recompute_all_risk_levels()
    return RecomputeResponse(total=result.total, updated=result.updated)


# Fixed paths must be registered before /questionnaires/{questionnaire_id}


@router.get("/questionnaires/high-risk", response_model=List[HighRiskPatient])
def get_high_risk_patients() -> List[HighRiskPatient]:
    with db_session() as session:
        out = []
        for q in records.high_risk_questionnaires(session):
            alerts = q.medical_alerts or []
            out.append(
                HighRiskPatient(
                    patient_id=q.patient_id,
                    patient_name=_full_name(q.patient),
                    risk_level=q.risk_level,
                    risk_description=(
                        "; ".join(a["message"] for a in alerts) or "High/medium risk"
                    ),
                    completed_at=q.completed_at,
                    priority=(
                        "high" if any(a.get("priority") == "high" for a in alerts) else "medium"
                    ),
                )
            )
        return out


@router.get("/questionnaires/recent", response_model=List[QuestionnaireSummary])
def get_recent_questionnaires(
    limit: int = Query(10, ge=1, le=100),
) -> List[QuestionnaireSummary]:
    with db_session() as session:
        return [
            QuestionnaireSummary(
                id=q.id,
                patient_id=q.patient_id,
                patient_name=_full_name(q.patient),
                completed_at=q.completed_at,
                risk_level=q.risk_level,
                status=q.status,
            )
            for q in records.recent_questionnaires(session, limit=limit)
        ]


@router.get("/questionnaires/statistics", response_model=StatisticsResponse)
def get_questionnaire_statistics() -> StatisticsResponse:
    with db_session() as session:
        return StatisticsResponse(**records.questionnaire_statistics(session))


@router.get(
    "/questionnaires/patient/{patient_id}",
    response_model=List[QuestionnaireResponse],
)
def get_patient_questionnaires(patient_id: int) -> List[QuestionnaireResponse]:
    with db_session() as session:
        return [
            QuestionnaireResponse.model_validate(q)
            for q in records.questionnaires_for_patient(session, patient_id)
        ]


@router.get(
    "/questionnaires/patient/{patient_id}/latest",
    response_model=QuestionnaireResponse,
)
def get_latest_questionnaire(patient_id: int) -> QuestionnaireResponse:
    with db_session() as session:
        latest = records.latest_questionnaire(session, patient_id)
        if latest is None:
            raise HTTPException(status_code=404, detail="No questionnaire found")
        return QuestionnaireResponse.model_validate(latest)


@router.get("/questionnaires/{questionnaire_id}", response_model=QuestionnaireResponse)
def get_questionnaire(questionnaire_id: int) -> QuestionnaireResponse:
    with db_session() as session:
        questionnaire = session.get(Questionnaire, questionnaire_id)
        if questionnaire is None:
            raise HTTPException(status_code=404, detail="Questionnaire not found")
        return QuestionnaireResponse.model_validate(questionnaire)


@router.get("/dashboard/stats", response_model=DashboardStatsResponse)
def get_dashboard_stats() -> DashboardStatsResponse:
    with db_session() as session:
        return DashboardStatsResponse(**records.dashboard_stats(session))


@router.get("/alerts/high-priority", response_model=List[HighPriorityAlert])
def get_high_priority_alerts() -> List[HighPriorityAlert]:
    with db_session() as session:
        return [
            HighPriorityAlert(
                id=f"{q.id}-{index}",
                patient_id=q.patient_id,
                patient_name=_full_name(q.patient),
                message=alert["message"],
                type=alert["type"],
                priority=alert["priority"],
                category=alert["category"],
                date=q.completed_at,
            )
            for index, (q, alert) in enumerate(records.high_priority_alerts(session))
        ]


@router.post("/dentists", response_model=DentistResponse, status_code=201)
def create_dentist(payload: DentistCreateRequest) -> DentistResponse:
    dentist = _patients.create_dentist(payload.first_name, payload.last_name)
    return DentistResponse.model_validate(dentist)


@router.get("/dentists/{dentist_id}", response_model=DentistResponse)
def get_dentist(dentist_id: int) -> DentistResponse:
    with db_session() as session:
        try:
            dentist = _patients.get_dentist(session, dentist_id)
        except DentistNotFound as e:
            raise HTTPException(status_code=404, detail=str(e))
        return DentistResponse.model_validate(dentist)


# Older clients write the normalized tables directly


@router.post("/dental-records", response_model=DentalRecordResponse, status_code=201)
def create_dental_record(payload: DentalRecordCreate) -> DentalRecordResponse:
    try:
        record = insert_legacy_record(DentalRecord, payload.model_dump(), _pii)
    except PatientNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return DentalRecordResponse(**legacy_record_to_dict(record, _pii))


@router.post("/diseases", response_model=DiseaseRecordResponse, status_code=201)
def create_disease_record(payload: DiseaseRecordCreate) -> DiseaseRecordResponse:
    try:
        record = insert_legacy_record(DiseaseRecord, payload.model_dump(), _pii)
    except PatientNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return DiseaseRecordResponse(**legacy_record_to_dict(record, _pii))


@router.post("/medical-history", response_model=MedicalHistoryResponse, status_code=201)
def create_medical_history(payload: MedicalHistoryCreate) -> MedicalHistoryResponse:
    try:
        record = insert_legacy_record(MedicalHistoryRecord, payload.model_dump(), _pii)
    except PatientNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return MedicalHistoryResponse(**legacy_record_to_dict(record, _pii))


@router.get("/health")
def health() -> dict:
    try:
        with db_session() as session:
            session.execute(text("SELECT 1"))
    except Exception as e:
        raise HTTPException(
            status_code=503,
            detail={"status": "ERROR", "database": "Disconnected", "error": str(e)},
        )
    return {"status": "OK", "database": "Connected"}
