"""Clinical record service."""
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from vitalis.repositories import ClinicalRecordRepository, PatientRepository
from vitalis.schemas.clinical_record import ClinicalRecord
from vitalis.services.base import BaseService, require_text
from vitalis.utils.decorators import storage_operation
from vitalis.utils.errors import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class ClinicalRecordService(BaseService):
    @staticmethod
    def validate(record: ClinicalRecord) -> None:
        if record is None:
            raise ValidationError("Clinical record must not be null")
        require_text(record.record_number, "Record number")

    def create(self, record: ClinicalRecord) -> ClinicalRecord:
        """Attach a clinical record to an existing patient.

        Records are normally created together with their patient; this
        covers a patient whose record has to be added on its own.
        """
        self.validate(record)
        if record.patient_id is None:
            raise ValidationError("Patient id is required")

        with self._transaction() as tx:
            tx.begin()
            try:
                if PatientRepository(tx.connection).find_by_id(record.patient_id) is None:
                    raise NotFoundError(f"Patient {record.patient_id} not found")
                records = ClinicalRecordRepository(tx.connection)
                if records.find_by_patient_id(record.patient_id) is not None:
                    raise ConflictError(f"Patient {record.patient_id} already has a clinical record")
                records.create(record)
                tx.commit()
            except (PersistenceError, SQLAlchemyError) as exc:
                tx.rollback()
                record.id = None
                error = self._transaction_failure(exc, "create clinical record")
                if error is exc:
                    raise
                raise error from exc

        logger.info(f"Created clinical record {record.id} for patient {record.patient_id}")
        return record

    @storage_operation("update clinical record")
    def update(self, record: ClinicalRecord) -> ClinicalRecord:
        self.validate(record)
        if record.id is None:
            raise ValidationError("Clinical record id is required for update")

        with self.source.connection() as conn:
            if ClinicalRecordRepository(conn).update(record) == 0:
                raise NotFoundError(f"Clinical record {record.id} not found")
        return record

    @storage_operation("delete clinical record")
    def delete(self, record_id: int) -> None:
        with self.source.connection() as conn:
            ClinicalRecordRepository(conn).soft_delete(record_id)

    @storage_operation("delete clinical record")
    def delete_by_patient_id(self, patient_id: int) -> None:
        with self.source.connection() as conn:
            ClinicalRecordRepository(conn).delete_by_patient_id(patient_id)

    @storage_operation("find clinical record")
    def find_by_id(self, record_id: int) -> Optional[ClinicalRecord]:
        with self.source.connection() as conn:
            return ClinicalRecordRepository(conn).find_by_id(record_id)

    @storage_operation("find clinical record")
    def find_by_patient_id(self, patient_id: int) -> Optional[ClinicalRecord]:
        with self.source.connection() as conn:
            return ClinicalRecordRepository(conn).find_by_patient_id(patient_id)

    @storage_operation("list clinical records")
    def list_active(self) -> List[ClinicalRecord]:
        with self.source.connection() as conn:
            return ClinicalRecordRepository(conn).list_active()
