"""Repositories package: table-level access through a pooled connection."""

from vitalis.repositories.clinical_record import ClinicalRecordRepository
from vitalis.repositories.patient import PatientRepository

__all__ = ["ClinicalRecordRepository", "PatientRepository"]
