# clinic/services/__init__.py
from .session import db_session, init_db
from .assessment import (
    Assessment,
    LegacyAssessment,
    QuestionnaireAssessmentService,
    RecomputeResult,
    assess,
    assess_sections,
)
from .legacy_sync import (
    LegacySyncResult,
    insert_legacy_record,
    legacy_record_to_dict,
    project_legacy_records,
    sync_legacy_tables,
)
from .records import PatientService

__all__ = [
    "db_session",
    "init_db",
    "Assessment",
    "LegacyAssessment",
    "QuestionnaireAssessmentService",
    "RecomputeResult",
    "assess",
    "assess_sections",
    "LegacySyncResult",
    "insert_legacy_record",
    "legacy_record_to_dict",
    "project_legacy_records",
    "sync_legacy_tables",
    "PatientService",
]
