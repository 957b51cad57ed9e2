"""Patient aggregate service.

Creating and deleting a patient touches both tables and runs inside one
transaction scope: either the patient and its clinical record are both
written (or both marked deleted), or nothing is. Reads and single-row
updates run on a plain auto-commit connection.
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from vitalis.repositories import ClinicalRecordRepository, PatientRepository
from vitalis.schemas.patient import Patient
from vitalis.services.base import BaseService, require_text
from vitalis.utils.decorators import storage_operation
from vitalis.utils.errors import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    TransactionError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class PatientService(BaseService):
    @staticmethod
    def validate(patient: Patient) -> None:
        if patient is None:
            raise ValidationError("Patient must not be null")
        require_text(patient.document, "Document")
        require_text(patient.first_name, "First name")
        require_text(patient.last_name, "Last name")

    def create(self, patient: Patient) -> Patient:
        """Insert a patient together with its initial clinical record.

        Steps, all on one connection inside one transaction:

        1. reject the document if an active patient already holds it
        2. insert the patient and capture its id
        3. point the clinical record at that id and insert it
        4. commit

        Raises:
            ValidationError: a required field or the clinical record is missing.
            ConflictError: duplicate document or record number.
            TransactionError: any other failure; nothing was written.
        """
        self.validate(patient)
        record = patient.clinical_record
        if record is None:
            raise ValidationError("A patient must be created with an initial clinical record")
        require_text(record.record_number, "Record number")

        with self._transaction() as tx:
            tx.begin()
            try:
                patients = PatientRepository(tx.connection)
                if patients.find_by_document(patient.document) is not None:
                    raise ConflictError(f"An active patient with document {patient.document} already exists")

                patients.create(patient)
                record.patient_id = patient.id
                ClinicalRecordRepository(tx.connection).create(record)

                tx.commit()
            except (PersistenceError, SQLAlchemyError) as exc:
                tx.rollback()
                patient.id = None
                record.id = None
                record.patient_id = None
                error = self._transaction_failure(exc, "create patient")
                if error is exc:
                    raise
                raise error from exc

        logger.info(f"Created patient {patient.id} with clinical record {record.id}")
        return patient

    def delete(self, patient_id: int) -> None:
        """Soft-delete a patient and its clinical record.

        The record goes first so an active record never points at a deleted
        patient. Deleting an already-deleted patient is a no-op.
        """
        with self._transaction() as tx:
            tx.begin()
            try:
                ClinicalRecordRepository(tx.connection).delete_by_patient_id(patient_id)
                PatientRepository(tx.connection).soft_delete(patient_id)
                tx.commit()
            except SQLAlchemyError as exc:
                tx.rollback()
                logger.error(f"Failed to delete patient {patient_id}: {exc}")
                raise TransactionError(f"Failed to delete patient {patient_id}", cause=exc) from exc

        logger.info(f"Deleted patient {patient_id}")

    @storage_operation("update patient")
    def update(self, patient: Patient) -> Patient:
        """Update personal fields. The clinical record is left untouched."""
        self.validate(patient)
        if patient.id is None:
            raise ValidationError("Patient id is required for update")

        with self.source.connection() as conn:
            patients = PatientRepository(conn)
            holder = patients.find_by_document(patient.document)
            if holder is not None and holder.id != patient.id:
                raise ConflictError(f"An active patient with document {patient.document} already exists")
            if patients.update(patient) == 0:
                raise NotFoundError(f"Patient {patient.id} not found")
        return patient

    @storage_operation("find patient")
    def find_by_id(self, patient_id: int) -> Optional[Patient]:
        with self.source.connection() as conn:
            return PatientRepository(conn).find_by_id(patient_id)

    @storage_operation("find patient")
    def find_by_document(self, document: str) -> Optional[Patient]:
        with self.source.connection() as conn:
            return PatientRepository(conn).find_by_document(document)

    @storage_operation("list patients")
    def list_active(self) -> List[Patient]:
        with self.source.connection() as conn:
            return PatientRepository(conn).list_active()
