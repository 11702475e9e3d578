import os
import tempfile
from datetime import date

_DB_DIR = tempfile.mkdtemp(prefix="clinic-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'clinic.db')}"
os.environ["ENCRYPTION_KEY"] = "test-encryption-secret"

import pytest  # noqa: E402

import clinic.models  # noqa: E402,F401
from clinic.db import Base, engine  # noqa: E402
from clinic.models import Patient  # noqa: E402
from clinic.services import db_session  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from clinic.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture
def patient_id() -> int:
    """A plaintext patient row, as written before encryption existed."""
    with db_session() as session:
        patient = Patient(
            first_name="Ion",
            last_name="Ionescu",
            cnp="1850101400017",
            birth_date=date(1985, 1, 1),
            email="ion@example.com",
            phone="0740123456",
            address="Str. Mare 10, Iasi",
        )
        session.add(patient)
        session.flush()
        return patient.id
