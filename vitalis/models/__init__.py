"""SQLAlchemy table definitions."""

__all__ = [
    "base",
    "patient",
    "clinical_record",
]
