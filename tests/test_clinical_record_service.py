"""Clinical record service."""
import pytest

from vitalis.core.constants import BloodGroup
from vitalis.repositories import PatientRepository
from vitalis.schemas.clinical_record import ClinicalRecord
from vitalis.schemas.patient import Patient
from vitalis.utils.errors import ConflictError, NotFoundError, ValidationError


@pytest.fixture
def bare_patient(source):
    """An active patient inserted without a clinical record."""
    with source.connection() as conn:
        return PatientRepository(conn).create(Patient(first_name="Eva", last_name="Rios", document="555"))


def test_record_is_found_by_owner(patient_service, record_service, make_patient):
    patient = patient_service.create(make_patient(record_number="HC-9"))

    record = record_service.find_by_patient_id(patient.id)

    assert record.record_number == "HC-9"
    assert record_service.find_by_id(record.id) == record


def test_update_changes_clinical_fields(patient_service, record_service, make_patient):
    patient = patient_service.create(make_patient())
    record = patient.clinical_record
    record.blood_group = BloodGroup.A_NEG
    record.notes = "controlled hypertension"

    record_service.update(record)

    found = patient_service.find_by_id(patient.id).clinical_record
    assert found.blood_group is BloodGroup.A_NEG
    assert found.notes == "controlled hypertension"
    assert found.patient_id == patient.id


def test_update_validates_before_writing(patient_service, record_service, make_patient):
    record = patient_service.create(make_patient()).clinical_record
    record.record_number = ""

    with pytest.raises(ValidationError):
        record_service.update(record)

    with pytest.raises(ValidationError):
        record_service.update(ClinicalRecord(record_number="HC-X"))


def test_update_duplicate_record_number_conflicts(patient_service, record_service, make_patient):
    patient_service.create(make_patient(document="1", record_number="HC-1"))
    second = patient_service.create(make_patient(document="2", record_number="HC-2")).clinical_record
    second.record_number = "HC-1"

    with pytest.raises(ConflictError):
        record_service.update(second)


def test_update_of_deleted_record_is_not_found(patient_service, record_service, make_patient):
    record = patient_service.create(make_patient()).clinical_record
    record_service.delete(record.id)

    with pytest.raises(NotFoundError):
        record_service.update(record)


def test_delete_detaches_record_from_patient(patient_service, record_service, make_patient):
    patient = patient_service.create(make_patient())

    record_service.delete(patient.clinical_record.id)

    found = patient_service.find_by_id(patient.id)
    assert found is not None
    assert found.clinical_record is None


def test_delete_by_patient_id_is_idempotent(patient_service, record_service, make_patient):
    patient = patient_service.create(make_patient())

    record_service.delete_by_patient_id(patient.id)
    record_service.delete_by_patient_id(patient.id)

    assert record_service.find_by_patient_id(patient.id) is None


def test_create_for_patient_without_record(record_service, patient_service, bare_patient):
    record = record_service.create(
        ClinicalRecord(record_number="HC-55", blood_group=BloodGroup.B_NEG, patient_id=bare_patient.id)
    )

    assert record.id is not None
    assert patient_service.find_by_id(bare_patient.id).clinical_record == record


def test_create_always_inserts_an_active_record(record_service, patient_service, bare_patient):
    record = ClinicalRecord(record_number="HC-56", deleted=True, patient_id=bare_patient.id)

    record_service.create(record)

    assert record.deleted is False
    assert patient_service.find_by_id(bare_patient.id).clinical_record.record_number == "HC-56"


def test_create_rejects_second_record_for_patient(record_service, bare_patient):
    record_service.create(ClinicalRecord(record_number="HC-55", patient_id=bare_patient.id))

    with pytest.raises(ConflictError):
        record_service.create(ClinicalRecord(record_number="HC-56", patient_id=bare_patient.id))


def test_create_rejects_duplicate_record_number(patient_service, record_service, make_patient, bare_patient):
    patient_service.create(make_patient(record_number="HC-1"))
    record = ClinicalRecord(record_number="HC-1", patient_id=bare_patient.id)

    with pytest.raises(ConflictError):
        record_service.create(record)
    assert record.id is None


def test_create_for_unknown_or_deleted_patient_is_not_found(patient_service, record_service, bare_patient):
    with pytest.raises(NotFoundError):
        record_service.create(ClinicalRecord(record_number="HC-1", patient_id=9999))

    patient_service.delete(bare_patient.id)
    with pytest.raises(NotFoundError):
        record_service.create(ClinicalRecord(record_number="HC-1", patient_id=bare_patient.id))


def test_create_requires_owner(record_service):
    with pytest.raises(ValidationError):
        record_service.create(ClinicalRecord(record_number="HC-1"))


def test_list_active(patient_service, record_service, make_patient):
    kept = patient_service.create(make_patient(document="1", record_number="HC-1"))
    gone = patient_service.create(make_patient(document="2", record_number="HC-2"))
    patient_service.delete(gone.id)

    assert [r.id for r in record_service.list_active()] == [kept.clinical_record.id]
