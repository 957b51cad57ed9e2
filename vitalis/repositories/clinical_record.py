"""Clinical record repository."""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import insert
from sqlalchemy.engine import RowMapping

from vitalis.core.constants import parse_blood_group
from vitalis.models.clinical_record import ClinicalRecordModel
from vitalis.repositories.base import BaseRepository
from vitalis.schemas.clinical_record import ClinicalRecord

record_table = ClinicalRecordModel.__table__


def row_to_record(row: RowMapping) -> ClinicalRecord:
    return ClinicalRecord(
        id=row["id"],
        deleted=bool(row["deleted"]),
        record_number=row["record_number"],
        blood_group=parse_blood_group(row["blood_group"]),
        history=row["history"],
        current_medication=row["current_medication"],
        notes=row["notes"],
        opened_on=row["opened_on"],
        patient_id=row["patient_id"],
    )


class ClinicalRecordRepository(BaseRepository):
    table = record_table

    def _values(self, record: ClinicalRecord) -> dict:
        return {
            "record_number": record.record_number,
            "blood_group": record.blood_group.value if record.blood_group else None,
            "history": record.history,
            "current_medication": record.current_medication,
            "notes": record.notes,
            "opened_on": record.opened_on,
        }

    def _first(self, *criteria) -> Optional[ClinicalRecord]:
        row = self.conn.execute(self._select_active().where(*criteria)).mappings().first()
        return row_to_record(row) if row else None

    def create(self, record: ClinicalRecord) -> ClinicalRecord:
        """Insert an active record row; ``record.patient_id`` must already be set."""
        stmt = insert(record_table).values(
            deleted=False,
            patient_id=record.patient_id,
            **self._values(record),
        )
        result = self.conn.execute(stmt)
        record.id = result.inserted_primary_key[0]
        record.deleted = False
        return record

    def find_by_id(self, record_id: int) -> Optional[ClinicalRecord]:
        return self._first(record_table.c.id == record_id)

    def find_by_patient_id(self, patient_id: int) -> Optional[ClinicalRecord]:
        return self._first(record_table.c.patient_id == patient_id)

    def list_active(self) -> List[ClinicalRecord]:
        query = self._select_active().order_by(record_table.c.id)
        return [row_to_record(row) for row in self.conn.execute(query).mappings().all()]

    def update(self, record: ClinicalRecord) -> int:
        """Update the clinical fields of an active record. The owner never changes."""
        return self._update_active(record.id, self._values(record))

    def soft_delete(self, record_id: int) -> int:
        return self._soft_delete_where(record_table.c.id == record_id)

    def delete_by_patient_id(self, patient_id: int) -> int:
        """Soft-delete the record owned by ``patient_id``.

        Deleting a missing or already-deleted record affects zero rows and is
        not an error.
        """
        return self._soft_delete_where(record_table.c.patient_id == patient_id)
