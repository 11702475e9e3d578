# clinic/services/session.py
from __future__ import annotations

from contextlib import contextmanager

from clinic.db import SessionLocal, engine, Base


@contextmanager
def db_session():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """
    Create all tables.
    Call this once at startup (e.g. from scripts).
    """
    # models must be imported for their tables to be registered on Base
    import clinic.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
