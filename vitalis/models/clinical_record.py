"""Clinical record table, one per patient."""
from sqlalchemy import CheckConstraint, Column, Date, ForeignKey, Integer, String, Text, UniqueConstraint
from vitalis.core.database import Base
from vitalis.models.base import IDMixin, SoftDeleteMixin


class ClinicalRecordModel(IDMixin, SoftDeleteMixin, Base):
    __tablename__ = "clinical_record"

    record_number = Column(String(20), nullable=False)
    blood_group = Column(String(3), nullable=True)
    history = Column(Text, nullable=True)
    current_medication = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    patient_id = Column(Integer, ForeignKey("patient.id"), nullable=False)
    opened_on = Column(Date, nullable=True)

    __table_args__ = (
        UniqueConstraint("record_number", name="uq_clinical_record_record_number"),
        UniqueConstraint("patient_id", name="uq_clinical_record_patient_id"),
        CheckConstraint(
            "blood_group IS NULL OR blood_group IN ('A+', 'A-', 'B+', 'B-', 'AB+', 'AB-', 'O+', 'O-')",
            name="chk_blood_group",
        ),
    )
