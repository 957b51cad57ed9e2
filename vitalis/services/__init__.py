"""Service layer package."""

__all__ = [
    "base",
    "patient_service",
    "clinical_record_service",
]
