# clinic/questionnaire/schema.py
from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class YesNo(str, Enum):
    """Yes/no answer exactly as written on the paper form."""
    YES = "DA"
    NO = "NU"


class QuestionnaireStatus(str, Enum):
    DRAFT = "draft"
    COMPLETED = "completed"
    REVIEWED = "reviewed"


class _Section(BaseModel):
    # Older form versions send keys we don't model; keep them.
    model_config = ConfigDict(extra="allow")


class MedicalConditions(_Section):
    heart_disease_hypertension: Optional[YesNo] = None
    prosthesis_wearer: Optional[YesNo] = Field(
        None, description="Valve, vascular or orthopaedic prosthesis"
    )
    diabetes: Optional[YesNo] = None
    infectious_diseases: Optional[YesNo] = Field(
        None, description="TB, HIV, venereal diseases"
    )
    hepatitis_cirrhosis: Optional[YesNo] = None
    rheumatism_arthritis: Optional[YesNo] = None
    respiratory_asthma: Optional[YesNo] = None
    coagulation_bleeding: Optional[YesNo] = None
    anemia_transfusion: Optional[YesNo] = None
    kidney_disease: Optional[YesNo] = None
    glaucoma: Optional[YesNo] = None
    epilepsy: Optional[YesNo] = None
    migraines: Optional[YesNo] = None
    osteoporosis: Optional[YesNo] = None
    gastric_ulcer: Optional[YesNo] = None
    thyroid_disease: Optional[YesNo] = None
    neurological_disease: Optional[YesNo] = None
    psychiatric_problems: Optional[YesNo] = None
    other_diseases: Optional[YesNo] = None
    other_diseases_details: Optional[str] = None


class GeneralHealth(_Section):
    health_rating: Optional[str] = None
    recent_changes: Optional[YesNo] = None
    under_physician_care: Optional[YesNo] = None
    physician_name: Optional[str] = None
    hospitalized_last_5_years: Optional[YesNo] = None
    hospitalization_reason: Optional[str] = None
    current_medications: Optional[YesNo] = None
    medication_list: Optional[str] = None
    smoker: Optional[YesNo] = None
    cigarettes_per_day: Optional[str] = None
    allergies: Optional[YesNo] = None
    allergy_list: Optional[str] = None
    antidepressants: Optional[YesNo] = None
    pregnant: Optional[YesNo] = None
    pregnancy_month: Optional[str] = None
    nursing: Optional[YesNo] = None


class DentalExam(_Section):
    gum_bleeding: Optional[YesNo] = None
    tooth_sensitivity: Optional[YesNo] = None
    orthodontic_problems: Optional[str] = None
    grinding: Optional[YesNo] = None
    last_visit_date: Optional[str] = None
    appearance_rating: Optional[int] = Field(None, ge=1, le=10)
    previous_treatment_problems: Optional[str] = None
