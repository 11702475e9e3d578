# clinic/api/schemas.py
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from clinic.assessment import RiskLevel
from clinic.questionnaire.schema import (
    DentalExam,
    GeneralHealth,
    MedicalConditions,
    QuestionnaireStatus,
)
from clinic.validation import (
    normalize_cnp,
    validate_cnp,
    validate_email,
    validate_phone,
)


class PatientCreateRequest(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    cnp: str
    birth_date: date
    email: str
    phone: str
    address: str = Field(..., min_length=1)
    referral: Optional[str] = None
    representative_name: Optional[str] = None
    dentist_id: Optional[int] = None

    @field_validator("cnp")
    @classmethod
    def _check_cnp(cls, value: str) -> str:
        if not validate_cnp(value):
            raise ValueError("invalid CNP")
        return normalize_cnp(value)

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not validate_email(value):
            raise ValueError("invalid email")
        return value

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, value: str) -> str:
        if not validate_phone(value):
            raise ValueError("invalid phone number")
        return value

    @field_validator("birth_date")
    @classmethod
    def _check_birth_date(cls, value: date) -> date:
        if value > date.today():
            raise ValueError("birth date cannot be in the future")
        return value


class AlertSchema(BaseModel):
    type: str
    message: str
    priority: str
    category: str


class PatientResponse(BaseModel):
    id: int
    full_name: str
    first_name: str
    last_name: str
    cnp: str
    birth_date: date
    email: str
    phone: str
    address: str
    referral: Optional[str] = None
    representative_name: Optional[str] = None
    dentist_id: Optional[int] = None

    medical_conditions: List[str] = Field(default_factory=list)
    allergies: List[str] = Field(default_factory=list)
    current_medications: List[str] = Field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.MINIMAL
    medical_alerts: List[AlertSchema] = Field(default_factory=list)


class PatientListItem(BaseModel):
    patient_id: int
    full_name: str
    email: str
    phone: str
    allergies: List[str] = Field(default_factory=list)
    medical_conditions: List[str] = Field(default_factory=list)
    heart_issues: bool = False
    anesthetic_reactions: bool = False
    last_questionnaire_date: Optional[datetime] = None
    risk_level: RiskLevel = RiskLevel.MINIMAL
    medical_alerts: List[AlertSchema] = Field(default_factory=list)


class PatientListResponse(BaseModel):
    patients: List[PatientListItem]
    total_pages: int
    current_page: int
    total_items: int


class QuestionnaireCreateRequest(BaseModel):
    patient_id: int
    doctor_name: Optional[str] = None
    record_number: Optional[str] = None

    referred_by_doctor: bool = False
    referred_by_internet: bool = False
    referred_other: bool = False
    referred_other_details: Optional[str] = None

    medical_conditions: MedicalConditions = Field(
        default_factory=MedicalConditions, alias="medicalConditions"
    )
    general_health: GeneralHealth = Field(
        default_factory=GeneralHealth, alias="generalHealth"
    )
    dental_exam: DentalExam = Field(default_factory=DentalExam, alias="dentalExam")

    data_processing_consent: Dict[str, Any] = Field(default_factory=dict)
    general_consent: Dict[str, Any] = Field(default_factory=dict)
    pedodontic_consent: Dict[str, Any] = Field(default_factory=dict)
    endodontic_consent: Dict[str, Any] = Field(default_factory=dict)

    completed_at: Optional[datetime] = None
    form_version: str = "PDF_COMPLETE_V2"
    status: QuestionnaireStatus = QuestionnaireStatus.COMPLETED

    model_config = ConfigDict(populate_by_name=True)

    def to_columns(self) -> Dict[str, Any]:
        data = self.model_dump(exclude_none=True, mode="json")
        # keep the sections as dicts and completed_at as a datetime
        if self.completed_at is not None:
            data["completed_at"] = self.completed_at
        return data


class QuestionnaireUpdateRequest(BaseModel):
    doctor_name: Optional[str] = None
    record_number: Optional[str] = None
    medical_conditions: Optional[MedicalConditions] = Field(
        None, alias="medicalConditions"
    )
    general_health: Optional[GeneralHealth] = Field(None, alias="generalHealth")
    dental_exam: Optional[DentalExam] = Field(None, alias="dentalExam")
    status: Optional[QuestionnaireStatus] = None

    model_config = ConfigDict(populate_by_name=True)

    def to_columns(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True, mode="json")


class LegacySyncSchema(BaseModel):
    ok: bool
    error: Optional[str] = None


class QuestionnaireCreateResponse(BaseModel):
    id: int
    patient_id: int
    risk_level: RiskLevel
    medical_alerts: List[AlertSchema]
    status: QuestionnaireStatus
    completed_at: datetime
    legacy_sync: LegacySyncSchema


class QuestionnaireResponse(BaseModel):
    id: int
    patient_id: int
    doctor_name: Optional[str] = None
    record_number: Optional[str] = None
    referred_by_doctor: bool = False
    referred_by_internet: bool = False
    referred_other: bool = False
    referred_other_details: Optional[str] = None
    medical_conditions: Dict[str, Any] = Field(default_factory=dict)
    general_health: Dict[str, Any] = Field(default_factory=dict)
    dental_exam: Dict[str, Any] = Field(default_factory=dict)
    data_processing_consent: Dict[str, Any] = Field(default_factory=dict)
    general_consent: Dict[str, Any] = Field(default_factory=dict)
    pedodontic_consent: Dict[str, Any] = Field(default_factory=dict)
    endodontic_consent: Dict[str, Any] = Field(default_factory=dict)
    completed_at: datetime
    form_version: str
    status: QuestionnaireStatus
    medical_alerts: List[AlertSchema] = Field(default_factory=list)
    risk_level: RiskLevel

    model_config = ConfigDict(from_attributes=True)


class QuestionnaireSummary(BaseModel):
    id: int
    patient_id: int
    patient_name: str
    completed_at: datetime
    risk_level: RiskLevel
    status: QuestionnaireStatus


class HighRiskPatient(BaseModel):
    patient_id: int
    patient_name: str
    risk_level: RiskLevel
    risk_description: str
    completed_at: datetime
    priority: str


class StatisticsResponse(BaseModel):
    total: int
    risk_distribution: Dict[str, int]
    recent_week: int


class DashboardStatsResponse(BaseModel):
    total_patients: int
    pending_questionnaires: int
    risk_patients: int
    questionnaire_stats: StatisticsResponse
    recent_activity: int


class HighPriorityAlert(BaseModel):
    id: str
    patient_id: int
    patient_name: str
    message: str
    type: str
    priority: str
    category: str
    date: datetime


class RecomputeResponse(BaseModel):
    total: int
    updated: int


class LegacyRiskResponse(BaseModel):
    patient_id: int
    score: int
    risk_level: RiskLevel


class DentistCreateRequest(BaseModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)


class DentistResponse(BaseModel):
    id: int
    first_name: str
    last_name: str

    model_config = ConfigDict(from_attributes=True)


class DiseaseRecordCreate(BaseModel):
    patient_id: int
    heart_disease: Optional[bool] = None
    prosthesis_wearer: Optional[bool] = None
    diabetes: Optional[bool] = None
    hepatitis: Optional[bool] = None
    rheumatism: Optional[bool] = None
    respiratory_disease: Optional[bool] = None
    coagulation_disorder: Optional[bool] = None
    anemia: Optional[bool] = None
    kidney_disease: Optional[bool] = None
    glaucoma: Optional[bool] = None
    epilepsy: Optional[bool] = None
    migraines: Optional[bool] = None
    osteoporosis: Optional[bool] = None
    gastric_ulcer: Optional[bool] = None
    thyroid_disease: Optional[bool] = None
    neurological_disease: Optional[bool] = None
    psychiatric_problems: Optional[bool] = None
    other_diseases: Optional[str] = None


class DiseaseRecordResponse(DiseaseRecordCreate):
    id: int


class MedicalHistoryCreate(BaseModel):
    patient_id: int
    health_note: Optional[str] = None
    under_physician_care: Optional[bool] = None
    hospitalization: Optional[str] = None
    medications: Optional[str] = Field(None, description='List, "DA" or "NU"')
    smoker: Optional[bool] = None
    allergies: Optional[str] = Field(None, description='List, "DA" or "NU"')
    antidepressants: Optional[bool] = None
    pregnancy_month: Optional[str] = None
    nursing: Optional[bool] = None
    record_date: date = Field(default_factory=date.today)


class MedicalHistoryResponse(MedicalHistoryCreate):
    id: int


class DentalRecordCreate(BaseModel):
    patient_id: int
    gum_health: Optional[str] = None
    tooth_sensitivity: bool
    orthodontic_problems: Optional[str] = None
    grinding: bool
    last_dental_visit: Optional[date] = None
    appearance_rating: int = Field(..., ge=1, le=10)
    previous_treatment_problems: Optional[str] = None
    record_date: date = Field(default_factory=date.today)


class DentalRecordResponse(DentalRecordCreate):
    id: int
