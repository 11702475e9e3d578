from clinic.models import MedicalHistoryRecord, Patient
from clinic.services import db_session

PATIENT = {
    "first_name": "Ana",
    "last_name": "Popescu",
    "cnp": "2950605123459",
    "birth_date": "1995-06-05",
    "email": "ana@example.com",
    "phone": "0740123456",
    "address": "Str. Lunga 1, Cluj",
}

QUESTIONNAIRE = {
    "doctor_name": "Dr. Ionescu",
    "medicalConditions": {
        "heart_disease_hypertension": "DA",
        "coagulation_bleeding": "DA",
        "diabetes": "NU",
    },
    "generalHealth": {
        "allergies": "DA",
        "allergy_list": "Penicillin, Latex",
        "pregnant": "NU",
    },
    "dentalExam": {"gum_bleeding": "NU", "appearance_rating": 7},
}


def _create_patient(client, **overrides):
    resp = client.post("/api/patients", json={**PATIENT, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()


def _create_questionnaire(client, patient_id, **overrides):
    resp = client.post(
        "/api/questionnaires",
        json={**QUESTIONNAIRE, "patient_id": patient_id, **overrides},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_root_and_health(client):
    assert client.get("/").status_code == 200
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "OK", "database": "Connected"}


def test_create_patient_returns_plaintext_and_stores_tokens(client):
    body = _create_patient(client)

    assert body["full_name"] == "Ana Popescu"
    assert body["cnp"] == "2950605123459"
    assert body["risk_level"] == "minimal"
    assert body["medical_alerts"] == []

    with db_session() as session:
        row = session.get(Patient, body["id"])
        assert row.cnp != "2950605123459"
        assert row.first_name != "Ana"
        assert row.phone != "0740123456"


def test_create_patient_validation(client):
    assert client.post("/api/patients", json={**PATIENT, "cnp": "2950605123458"}).status_code == 422
    assert client.post("/api/patients", json={**PATIENT, "phone": "12345"}).status_code == 422
    assert client.post("/api/patients", json={**PATIENT, "email": "ana"}).status_code == 422
    assert (
        client.post("/api/patients", json={**PATIENT, "birth_date": "2999-01-01"}).status_code
        == 422
    )


def test_duplicate_patient(client):
    _create_patient(client)
    resp = client.post("/api/patients", json={**PATIENT, "email": "other@example.com"})
    assert resp.status_code == 400


def test_unknown_dentist(client):
    resp = client.post("/api/patients", json={**PATIENT, "dentist_id": 99})
    assert resp.status_code == 404


def test_lookup_by_cnp(client):
    created = _create_patient(client)

    resp = client.get(f"/api/patients/cnp/{PATIENT['cnp']}")
    assert resp.status_code == 200
    assert resp.json()["id"] == created["id"]
    assert resp.json()["email"] == "ana@example.com"

    assert client.get("/api/patients/cnp/1960315220045").status_code == 404


def test_get_patient_unknown(client):
    assert client.get("/api/patients/999").status_code == 404


def test_questionnaire_flow(client):
    patient = _create_patient(client)
    created = _create_questionnaire(client, patient["id"])

    assert created["risk_level"] == "high"
    assert created["status"] == "completed"
    assert created["legacy_sync"] == {"ok": True, "error": None}
    assert [a["message"] for a in created["medical_alerts"]] == [
        "HEART DISEASE — consult cardiologist before anesthesia",
        "COAGULATION DISORDER — bleeding risk",
        "ALLERGIES: Penicillin, Latex",
    ]

    stored = client.get(f"/api/questionnaires/{created['id']}").json()
    assert stored["medical_conditions"]["heart_disease_hypertension"] == "DA"
    assert stored["risk_level"] == "high"

    detail = client.get(f"/api/patients/{patient['id']}").json()
    assert detail["risk_level"] == "high"
    assert detail["allergies"] == ["Penicillin", "Latex"]
    assert "heart disease hypertension" in detail["medical_conditions"]

    alerts = client.get(f"/api/patients/{patient['id']}/alerts").json()
    assert len(alerts) == 3

    legacy = client.get(f"/api/patients/{patient['id']}/legacy-risk").json()
    assert legacy == {"patient_id": patient["id"], "score": 8, "risk_level": "high"}


def test_questionnaire_for_unknown_patient(client):
    resp = client.post("/api/questionnaires", json={**QUESTIONNAIRE, "patient_id": 404})
    assert resp.status_code == 404


def test_questionnaire_rejects_bad_answers(client):
    patient = _create_patient(client)
    resp = client.post(
        "/api/questionnaires",
        json={
            **QUESTIONNAIRE,
            "patient_id": patient["id"],
            "medicalConditions": {"diabetes": "yes"},
        },
    )
    assert resp.status_code == 422


def test_update_questionnaire(client):
    patient = _create_patient(client)
    created = _create_questionnaire(client, patient["id"])

    resp = client.put(
        f"/api/questionnaires/{created['id']}",
        json={"medicalConditions": {"diabetes": "DA"}, "generalHealth": {"smoker": "NU"}},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["risk_level"] == "low"
    assert [a["category"] for a in body["medical_alerts"]] == ["medical_condition"]

    assert client.put("/api/questionnaires/999", json={"doctor_name": "x"}).status_code == 404


def test_patient_questionnaires_and_latest(client):
    patient = _create_patient(client)
    _create_questionnaire(client, patient["id"], completed_at="2024-01-01T10:00:00")
    latest = _create_questionnaire(
        client, patient["id"], completed_at="2024-02-01T10:00:00", medicalConditions={}
    )

    listed = client.get(f"/api/questionnaires/patient/{patient['id']}").json()
    assert [q["id"] for q in listed][0] == latest["id"]
    assert len(listed) == 2

    resp = client.get(f"/api/questionnaires/patient/{patient['id']}/latest")
    assert resp.json()["id"] == latest["id"]

    assert client.get("/api/questionnaires/patient/999/latest").status_code == 404


def test_dashboard_views(client):
    patient = _create_patient(client)
    _create_questionnaire(client, patient["id"])
    _create_questionnaire(client, patient["id"], medicalConditions={}, generalHealth={})

    stats = client.get("/api/questionnaires/statistics").json()
    assert stats["total"] == 2
    assert stats["risk_distribution"] == {"high": 1, "minimal": 1}
    assert stats["recent_week"] == 2

    high_risk = client.get("/api/questionnaires/high-risk").json()
    assert len(high_risk) == 1
    assert high_risk[0]["patient_name"] == "Ana Popescu"
    assert high_risk[0]["priority"] == "high"

    recent = client.get("/api/questionnaires/recent").json()
    assert len(recent) == 2

    alerts = client.get("/api/alerts/high-priority").json()
    assert [a["priority"] for a in alerts] == ["high", "high", "medium"]

    dashboard = client.get("/api/dashboard/stats").json()
    assert dashboard["total_patients"] == 1
    assert dashboard["risk_patients"] == 1


def test_patient_list(client):
    patient = _create_patient(client)
    _create_questionnaire(
        client,
        patient["id"],
        generalHealth={"allergies": "DA", "allergy_list": "Novocaina"},
    )

    body = client.get("/api/patients?page=1&limit=10").json()
    assert body["total_items"] == 1
    assert body["total_pages"] == 1
    item = body["patients"][0]
    assert item["full_name"] == "Ana Popescu"
    assert item["heart_issues"] is True
    assert item["anesthetic_reactions"] is True


def test_recompute_route(client):
    patient = _create_patient(client)
    _create_questionnaire(client, patient["id"])

    resp = client.post("/api/questionnaires/recompute-risk")
    assert resp.status_code == 200
    assert resp.json() == {"total": 1, "updated": 0}


def test_legacy_risk_without_records(client):
    patient = _create_patient(client)
    assert client.get(f"/api/patients/{patient['id']}/legacy-risk").status_code == 404
    assert client.get("/api/patients/999/legacy-risk").status_code == 404


def test_dentists(client):
    resp = client.post("/api/dentists", json={"first_name": "Maria", "last_name": "Ionescu"})
    assert resp.status_code == 201
    dentist = resp.json()

    assert client.get(f"/api/dentists/{dentist['id']}").json()["last_name"] == "Ionescu"
    assert client.get("/api/dentists/999").status_code == 404

    _create_patient(client, dentist_id=dentist["id"])
    body = client.get(f"/api/patients?dentist_id={dentist['id']}").json()
    assert body["total_items"] == 1


def test_cnp_separators_are_normalized(client):
    created = _create_patient(client, cnp="2950605\t123459")
    assert created["cnp"] == "2950605123459"

    assert client.get("/api/patients/cnp/2950605123459").json()["id"] == created["id"]
    assert client.get("/api/patients/cnp/2950605-123459").json()["id"] == created["id"]


def test_legacy_medical_history_route(client):
    patient = _create_patient(client)
    resp = client.post(
        "/api/medical-history",
        json={
            "patient_id": patient["id"],
            "allergies": "Latex",
            "medications": "NU",
            "smoker": True,
            "pregnancy_month": "NU",
        },
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    assert body["allergies"] == "Latex"
    assert body["pregnancy_month"] == "NU"
    assert body["record_date"]

    with db_session() as session:
        row = session.get(MedicalHistoryRecord, body["id"])
        assert row.allergies != "Latex"
        assert row.allergies.count(":") == 1

    # a stored "NU" month still counts as pregnant on the legacy path
    legacy = client.get(f"/api/patients/{patient['id']}/legacy-risk").json()
    assert legacy["score"] == 2 + 1 + 1
    assert legacy["risk_level"] == "medium"


def test_legacy_disease_route(client):
    patient = _create_patient(client)
    resp = client.post(
        "/api/diseases",
        json={"patient_id": patient["id"], "heart_disease": True, "coagulation_disorder": True},
    )
    assert resp.status_code == 201, resp.text
    assert resp.json()["heart_disease"] is True
    assert resp.json()["diabetes"] is None

    legacy = client.get(f"/api/patients/{patient['id']}/legacy-risk").json()
    assert legacy == {"patient_id": patient["id"], "score": 6, "risk_level": "high"}


def test_legacy_dental_route(client):
    patient = _create_patient(client)
    record = {
        "patient_id": patient["id"],
        "gum_health": "NU",
        "tooth_sensitivity": True,
        "grinding": False,
        "last_dental_visit": "2023-11-20",
        "appearance_rating": 8,
    }

    resp = client.post("/api/dental-records", json=record)
    assert resp.status_code == 201, resp.text
    assert resp.json()["last_dental_visit"] == "2023-11-20"
    assert resp.json()["appearance_rating"] == 8

    assert (
        client.post("/api/dental-records", json={**record, "appearance_rating": 11}).status_code
        == 422
    )
    assert client.post("/api/dental-records", json={**record, "patient_id": 999}).status_code == 404
    assert client.post("/api/diseases", json={"patient_id": 999}).status_code == 404
    assert client.post("/api/medical-history", json={"patient_id": 999}).status_code == 404
