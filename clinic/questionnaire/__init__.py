# clinic/questionnaire/__init__.py
from .schema import (
    YesNo,
    QuestionnaireStatus,
    MedicalConditions,
    GeneralHealth,
    DentalExam,
)

__all__ = [
    "YesNo",
    "QuestionnaireStatus",
    "MedicalConditions",
    "GeneralHealth",
    "DentalExam",
]
