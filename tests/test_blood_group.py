"""Blood group parsing, on its own, on the entity and through the store."""
import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from vitalis.core.constants import BloodGroup, parse_blood_group
from vitalis.schemas.clinical_record import ClinicalRecord
from vitalis.utils.errors import InvalidBloodGroupError, ValidationError

CODES = ["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]


@pytest.mark.parametrize("code", CODES)
def test_canonical_codes_parse(code):
    group = parse_blood_group(code)
    assert isinstance(group, BloodGroup)
    assert group.value == code


@pytest.mark.parametrize("code", ["ab+", "o-", "Ab-"])
def test_parsing_ignores_case(code):
    assert parse_blood_group(code).value == code.upper()


@pytest.mark.parametrize("value", [None, ""])
def test_absent_value_means_no_blood_group(value):
    assert parse_blood_group(value) is None


@pytest.mark.parametrize("value", ["C+", "A", "O+ ", "AB", "0+", "positive", "  "])
def test_unknown_codes_are_rejected(value):
    with pytest.raises(InvalidBloodGroupError) as exc_info:
        parse_blood_group(value)
    assert isinstance(exc_info.value, ValidationError)
    assert value in exc_info.value.message


def test_enum_member_passes_through():
    assert parse_blood_group(BloodGroup.AB_NEG) is BloodGroup.AB_NEG


def test_non_string_value_is_rejected():
    with pytest.raises(InvalidBloodGroupError):
        parse_blood_group(7)


@pytest.mark.parametrize("value, expected", [("o+", BloodGroup.O_POS), ("AB-", BloodGroup.AB_NEG), ("", None), (None, None)])
def test_entity_parses_blood_group(value, expected):
    record = ClinicalRecord(record_number="HC-1", blood_group=value)
    assert record.blood_group is expected


def test_entity_rejects_unknown_blood_group_with_typed_error():
    with pytest.raises(InvalidBloodGroupError):
        ClinicalRecord(record_number="HC-1", blood_group="Z+")


@pytest.mark.parametrize("code", CODES + [None])
def test_blood_group_survives_the_store(patient_service, make_patient, code):
    created = patient_service.create(make_patient(blood_group=code))

    found = patient_service.find_by_id(created.id)

    if code is None:
        assert found.clinical_record.blood_group is None
    else:
        assert found.clinical_record.blood_group.value == code


def test_store_rejects_unknown_code_written_directly(source):
    with pytest.raises(IntegrityError):
        with source.connection() as conn:
            conn.execute(
                text(
                    "INSERT INTO patient (first_name, last_name, document, deleted) "
                    "VALUES ('Ana', 'Diaz', '111', 0)"
                )
            )
            conn.execute(
                text(
                    "INSERT INTO clinical_record (record_number, blood_group, patient_id, deleted) "
                    "VALUES ('HC-1', 'Z+', 1, 0)"
                )
            )
