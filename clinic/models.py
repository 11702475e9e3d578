# clinic/models.py
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship, Mapped, mapped_column

from clinic.db import Base, JSONType


class Dentist(Base):
    __tablename__ = "dentists"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)

    patients: Mapped[list["Patient"]] = relationship(
        "Patient", back_populates="dentist"
    )


class Patient(Base):
    """
    Identity fields are stored as `ivHex:cipherHex` tokens (see
    clinic.security.pii); rows written before encryption may hold plaintext.
    """
    __tablename__ = "patients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    cnp: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    birth_date: Mapped[date] = mapped_column(Date, nullable=False)
    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    phone: Mapped[str] = mapped_column(String, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    referral: Mapped[str | None] = mapped_column(String, nullable=True)
    representative_name: Mapped[str | None] = mapped_column(String, nullable=True)
    dentist_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("dentists.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )

    dentist: Mapped[Dentist | None] = relationship(
        "Dentist", back_populates="patients"
    )
    questionnaires: Mapped[list["Questionnaire"]] = relationship(
        "Questionnaire",
        back_populates="patient",
        cascade="all, delete-orphan",
        order_by="desc(Questionnaire.completed_at)",
    )


class Questionnaire(Base):
    __tablename__ = "questionnaires"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    patient_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Header
    doctor_name: Mapped[str | None] = mapped_column(String, nullable=True)
    record_number: Mapped[str | None] = mapped_column(String, nullable=True)

    # Referral
    referred_by_doctor: Mapped[bool] = mapped_column(Boolean, default=False)
    referred_by_internet: Mapped[bool] = mapped_column(Boolean, default=False)
    referred_other: Mapped[bool] = mapped_column(Boolean, default=False)
    referred_other_details: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Answer sections, "DA"/"NU" values kept as on the paper form
    medical_conditions: Mapped[dict] = mapped_column(JSONType, default=dict)
    general_health: Mapped[dict] = mapped_column(JSONType, default=dict)
    dental_exam: Mapped[dict] = mapped_column(JSONType, default=dict)

    # Consents, stored as sent
    data_processing_consent: Mapped[dict] = mapped_column(JSONType, default=dict)
    general_consent: Mapped[dict] = mapped_column(JSONType, default=dict)
    pedodontic_consent: Mapped[dict] = mapped_column(JSONType, default=dict)
    endodontic_consent: Mapped[dict] = mapped_column(JSONType, default=dict)

    completed_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False, index=True
    )
    form_version: Mapped[str] = mapped_column(String, default="PDF_COMPLETE_V2")
    status: Mapped[str] = mapped_column(
        String, default="draft", nullable=False, index=True
    )

    # Derived by clinic.services.assessment
    medical_alerts: Mapped[list] = mapped_column(JSONType, default=list)
    risk_level: Mapped[str] = mapped_column(
        String, default="minimal", nullable=False, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'completed', 'reviewed')",
            name="ck_questionnaires_status_valid",
        ),
        CheckConstraint(
            "risk_level IN ('minimal', 'low', 'medium', 'high')",
            name="ck_questionnaires_risk_level_valid",
        ),
    )

    patient: Mapped[Patient] = relationship(
        "Patient", back_populates="questionnaires"
    )


# Legacy normalized tables. One row per submission, projected from the
# questionnaire sections by clinic.services.legacy_sync.


class DiseaseRecord(Base):
    __tablename__ = "disease_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    patient_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False
    )
    heart_disease: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    prosthesis_wearer: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    diabetes: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    hepatitis: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    rheumatism: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    respiratory_disease: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    coagulation_disorder: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    anemia: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    kidney_disease: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    glaucoma: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    epilepsy: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    migraines: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    osteoporosis: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    gastric_ulcer: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    thyroid_disease: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    neurological_disease: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    psychiatric_problems: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    other_diseases: Mapped[str | None] = mapped_column(Text, nullable=True)


class MedicalHistoryRecord(Base):
    __tablename__ = "medical_history_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    patient_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False
    )
    health_note: Mapped[str | None] = mapped_column(Text, nullable=True)
    under_physician_care: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    hospitalization: Mapped[str | None] = mapped_column(Text, nullable=True)
    medications: Mapped[str | None] = mapped_column(Text, nullable=True)
    smoker: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    allergies: Mapped[str | None] = mapped_column(Text, nullable=True)
    antidepressants: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    # Month number, or "DA" when pregnant without a month
    pregnancy_month: Mapped[str | None] = mapped_column(String, nullable=True)
    nursing: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    record_date: Mapped[date] = mapped_column(Date, nullable=False)


class DentalRecord(Base):
    __tablename__ = "dental_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    patient_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False
    )
    gum_health: Mapped[str | None] = mapped_column(Text, nullable=True)
    tooth_sensitivity: Mapped[bool] = mapped_column(Boolean, nullable=False)
    orthodontic_problems: Mapped[str | None] = mapped_column(Text, nullable=True)
    grinding: Mapped[bool] = mapped_column(Boolean, nullable=False)
    last_dental_visit: Mapped[date | None] = mapped_column(Date, nullable=True)
    appearance_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    previous_treatment_problems: Mapped[str | None] = mapped_column(
        Text, nullable=True
    )
    record_date: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "appearance_rating BETWEEN 1 AND 10",
            name="ck_dental_records_appearance_rating_range",
        ),
    )
