"""Patient table."""
from sqlalchemy import Column, Date, Index, String, text
from vitalis.core.database import Base
from vitalis.models.base import IDMixin, SoftDeleteMixin


class PatientModel(IDMixin, SoftDeleteMixin, Base):
    __tablename__ = "patient"

    first_name = Column(String(80), nullable=False)
    last_name = Column(String(80), nullable=False)
    document = Column(String(15), nullable=False)
    birth_date = Column(Date, nullable=True)

    __table_args__ = (
        # Document is unique among active patients only; a deleted patient's
        # document may be reused.
        Index(
            "uq_patient_active_document",
            "document",
            unique=True,
            sqlite_where=text("deleted = 0"),
            postgresql_where=text("NOT deleted"),
        ),
    )
