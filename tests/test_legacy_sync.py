from datetime import date

from sqlalchemy import func, select

from clinic.models import DentalRecord, DiseaseRecord, MedicalHistoryRecord
from clinic.security import FieldCipher, PIIFilter
from clinic.services import db_session, project_legacy_records, sync_legacy_tables

TODAY = date(2024, 3, 1)


def _count(model) -> int:
    with db_session() as session:
        return session.scalar(select(func.count()).select_from(model))


def test_disease_flags_follow_da_answers():
    disease, _, _ = project_legacy_records(
        7,
        {
            "heart_disease_hypertension": "DA",
            "coagulation_bleeding": "DA",
            "glaucoma": "NU",
            "other_diseases": "DA",
            "other_diseases_details": "Lyme",
        },
        {},
        {},
        today=TODAY,
    )

    assert disease.patient_id == 7
    assert disease.heart_disease is True
    assert disease.coagulation_disorder is True
    assert disease.glaucoma is False
    assert disease.diabetes is False
    assert disease.other_diseases == "Lyme"


def test_history_free_text_columns():
    _, history, _ = project_legacy_records(
        1,
        {},
        {
            "health_rating": "good",
            "hospitalized_last_5_years": "DA",
            "hospitalization_reason": "Appendectomy",
            "current_medications": "DA",
            "medication_list": "Aspirin",
            "allergies": "DA",
            "allergy_list": "",
            "smoker": "DA",
            "nursing": "NU",
        },
        {},
        today=TODAY,
    )

    assert history.health_note == "good"
    assert history.hospitalization == "Appendectomy"
    assert history.medications == "Aspirin"
    assert history.allergies == "DA"
    assert history.smoker is True
    assert history.nursing is False
    assert history.record_date == TODAY


def test_no_answer_is_written_as_nu():
    _, history, _ = project_legacy_records(
        1, {}, {"allergies": "NU", "allergy_list": "Latex"}, {}, today=TODAY
    )
    assert history.allergies == "NU"
    assert history.medications == "NU"
    assert history.hospitalization == "NU"


def test_pregnancy_month_projection():
    _, with_month, _ = project_legacy_records(
        1, {}, {"pregnant": "DA", "pregnancy_month": "5"}, {}, today=TODAY
    )
    _, without_month, _ = project_legacy_records(1, {}, {"pregnant": "DA"}, {}, today=TODAY)
    _, not_pregnant, _ = project_legacy_records(
        1, {}, {"pregnant": "NU", "pregnancy_month": "5"}, {}, today=TODAY
    )

    assert with_month.pregnancy_month == "5"
    assert without_month.pregnancy_month == "DA"
    assert not_pregnant.pregnancy_month is None


def test_dental_defaults():
    _, _, dental = project_legacy_records(1, {}, {}, {}, today=TODAY)

    assert dental.gum_health == "NU"
    assert dental.tooth_sensitivity is False
    assert dental.grinding is False
    assert dental.appearance_rating == 5
    assert dental.last_dental_visit is None


def test_dental_answers():
    _, _, dental = project_legacy_records(
        1,
        {},
        {},
        {
            "gum_bleeding": "DA",
            "tooth_sensitivity": "DA",
            "grinding": "DA",
            "last_visit_date": "2023-11-20",
            "appearance_rating": 8,
            "orthodontic_problems": "crowding",
        },
        today=TODAY,
    )

    assert dental.gum_health == "DA"
    assert dental.tooth_sensitivity is True
    assert dental.grinding is True
    assert dental.last_dental_visit == date(2023, 11, 20)
    assert dental.appearance_rating == 8
    assert dental.orthodontic_problems == "crowding"


def test_unparseable_visit_date_is_dropped():
    _, _, dental = project_legacy_records(
        1, {}, {}, {"last_visit_date": "last spring"}, today=TODAY
    )
    assert dental.last_dental_visit is None


def test_sync_inserts_one_row_per_table(patient_id):
    result = sync_legacy_tables(
        patient_id, {"diabetes": "DA"}, {"smoker": "DA"}, {"appearance_rating": 7}
    )

    assert result.ok
    assert result.error is None
    assert _count(DiseaseRecord) == 1
    assert _count(MedicalHistoryRecord) == 1
    assert _count(DentalRecord) == 1


def test_sync_failure_is_reported_not_raised(patient_id):
    result = sync_legacy_tables(patient_id, {}, {}, {"appearance_rating": 15})

    assert not result.ok
    assert result.error
    assert result.to_dict()["ok"] is False
    # all or nothing
    assert _count(DiseaseRecord) == 0
    assert _count(MedicalHistoryRecord) == 0
    assert _count(DentalRecord) == 0


def test_projection_encrypts_free_text_with_filter():
    pii = PIIFilter(FieldCipher.from_secret("legacy-sync-secret"))
    _, history, _ = project_legacy_records(
        1,
        {},
        {"allergies": "DA", "allergy_list": "Latex", "current_medications": "NU"},
        {},
        today=TODAY,
        pii=pii,
    )

    assert history.allergies.count(":") == 1
    assert pii.cipher.decrypt_field(history.allergies) == "Latex"
    assert pii.cipher.decrypt_field(history.medications) == "NU"
    # not identifying
    assert history.pregnancy_month is None
    assert history.hospitalization == "NU"


def test_whitespace_details_are_kept():
    _, history, _ = project_legacy_records(
        1, {}, {"allergies": "DA", "allergy_list": " "}, {}, today=TODAY
    )
    assert history.allergies == " "


def test_sync_stores_tokens(patient_id):
    sync_legacy_tables(patient_id, {}, {"allergies": "DA", "allergy_list": "Latex"}, {})

    with db_session() as session:
        history = session.scalars(select(MedicalHistoryRecord)).one()
        assert history.allergies != "Latex"
        assert history.allergies.count(":") == 1
