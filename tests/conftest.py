"""Pytest fixtures.

Each test gets its own file-backed SQLite database behind a real pooled
:class:`ConnectionSource`, so transactions, pool checkout and cross-thread
access behave as they do in production.
"""
from datetime import date

import pytest
from sqlalchemy import text

from vitalis.core.config import Settings
from vitalis.core.connection import ConnectionSource
from vitalis.core.constants import BloodGroup
from vitalis.core.database import init_db
from vitalis.schemas.clinical_record import ClinicalRecord
from vitalis.schemas.patient import Patient
from vitalis.services.clinical_record_service import ClinicalRecordService
from vitalis.services.patient_service import PatientService


@pytest.fixture
def test_settings(tmp_path):
    settings = Settings()
    settings.DATABASE_URL = f"sqlite:///{tmp_path / 'vitalis-test.db'}"
    settings.DATABASE_ECHO = False
    settings.DATABASE_POOL_SIZE = 5
    settings.DATABASE_MAX_OVERFLOW = 0
    settings.DATABASE_POOL_TIMEOUT = 5
    return settings


@pytest.fixture
def source(test_settings):
    """Connection source over a freshly created schema."""
    source = ConnectionSource.from_settings(test_settings)
    init_db(source.engine)
    yield source
    source.dispose()


@pytest.fixture
def patient_service(source):
    return PatientService(source)


@pytest.fixture
def record_service(source):
    return ClinicalRecordService(source)


@pytest.fixture
def make_patient():
    """Build an unsaved patient with an initial clinical record."""

    def _make(document="111", first_name="Ana", last_name="Diaz", record_number="HC-1", **record_fields):
        record_fields.setdefault("blood_group", BloodGroup.O_POS)
        return Patient(
            first_name=first_name,
            last_name=last_name,
            document=document,
            birth_date=date(1990, 5, 17),
            clinical_record=ClinicalRecord(record_number=record_number, **record_fields),
        )

    return _make


@pytest.fixture
def count_rows(source):
    """Count rows of a table, deleted ones included."""

    def _count(table, where="1 = 1", **params):
        with source.connection() as conn:
            return conn.execute(text(f"SELECT COUNT(*) FROM {table} WHERE {where}"), params).scalar()

    return _count
