# clinic/assessment/types.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class RiskLevel(str, Enum):
    MINIMAL = "minimal"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class AlertKind(str, Enum):
    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"


class AlertPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class AlertRecord:
    kind: AlertKind
    message: str
    priority: AlertPriority
    category: str

    def to_dict(self) -> dict:
        """Stored shape; the kind goes out under the "type" key."""
        return {
            "type": self.kind.value,
            "message": self.message,
            "priority": self.priority.value,
            "category": self.category,
        }


@dataclass(frozen=True)
class MedicalAnswers:
    """
    Source-independent view of the answers that drive scoring and alerts.

    Built by the adapters in clinic.assessment.answers; flags are real
    booleans, free text stays text.
    """

    heart_disease: bool = False
    coagulation_disorder: bool = False
    epilepsy: bool = False
    diabetes: bool = False
    hepatitis: bool = False
    migraines: bool = False

    smoker: bool = False
    allergies: bool = False
    allergy_list: Optional[str] = None
    current_medications: bool = False
    medication_list: Optional[str] = None
    pregnant: bool = False
    pregnancy_month: Optional[str] = None
