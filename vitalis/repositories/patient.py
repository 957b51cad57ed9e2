"""Patient repository.

Reads left-join the active clinical record of each active patient so a
single query yields the whole aggregate.
"""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import Select, and_, insert, select
from sqlalchemy.engine import RowMapping

from vitalis.core.constants import parse_blood_group
from vitalis.models.clinical_record import ClinicalRecordModel
from vitalis.models.patient import PatientModel
from vitalis.repositories.base import BaseRepository, active
from vitalis.schemas.clinical_record import ClinicalRecord
from vitalis.schemas.patient import Patient

patient_table = PatientModel.__table__
record_table = ClinicalRecordModel.__table__


def row_to_patient(row: RowMapping) -> Patient:
    """Map a joined patient/record row.

    ``cr_id`` is checked first: when the outer join found no active record
    every ``cr_*`` column is NULL and no record is attached.
    """
    patient = Patient(
        id=row["id"],
        deleted=bool(row["deleted"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        document=row["document"],
        birth_date=row["birth_date"],
    )

    record_id = row["cr_id"]
    if record_id:
        patient.clinical_record = ClinicalRecord(
            id=record_id,
            deleted=bool(row["cr_deleted"]),
            record_number=row["cr_record_number"],
            blood_group=parse_blood_group(row["cr_blood_group"]),
            history=row["cr_history"],
            current_medication=row["cr_current_medication"],
            notes=row["cr_notes"],
            opened_on=row["cr_opened_on"],
            patient_id=row["cr_patient_id"],
        )
    return patient


class PatientRepository(BaseRepository):
    table = patient_table

    def _aggregate_query(self) -> Select:
        record_columns = [column.label(f"cr_{column.name}") for column in record_table.c]
        joined = patient_table.outerjoin(
            record_table,
            and_(record_table.c.patient_id == patient_table.c.id, active(record_table)),
        )
        return (
            select(patient_table, *record_columns)
            .select_from(joined)
            .where(active(patient_table))
        )

    def _values(self, patient: Patient) -> dict:
        return {
            "first_name": patient.first_name,
            "last_name": patient.last_name,
            "document": patient.document,
            "birth_date": patient.birth_date,
        }

    def create(self, patient: Patient) -> Patient:
        """Insert an active patient row and set the generated id on ``patient``."""
        stmt = insert(patient_table).values(deleted=False, **self._values(patient))
        result = self.conn.execute(stmt)
        patient.id = result.inserted_primary_key[0]
        patient.deleted = False
        return patient

    def find_by_id(self, patient_id: int) -> Optional[Patient]:
        query = self._aggregate_query().where(patient_table.c.id == patient_id)
        row = self.conn.execute(query).mappings().first()
        return row_to_patient(row) if row else None

    def find_by_document(self, document: str) -> Optional[Patient]:
        query = self._aggregate_query().where(patient_table.c.document == document)
        row = self.conn.execute(query).mappings().first()
        return row_to_patient(row) if row else None

    def list_active(self) -> List[Patient]:
        query = self._aggregate_query().order_by(patient_table.c.id)
        return [row_to_patient(row) for row in self.conn.execute(query).mappings().all()]

    def update(self, patient: Patient) -> int:
        """Update personal fields of an active patient. Returns rows affected."""
        return self._update_active(patient.id, self._values(patient))

    def soft_delete(self, patient_id: int) -> int:
        return self._soft_delete_where(patient_table.c.id == patient_id)
