"""Clinical record entity and payloads."""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from vitalis.core.constants import BloodGroup, parse_blood_group


class ClinicalRecord(BaseModel):
    """A patient's clinical record.

    ``id`` is assigned by the store on insert and ``patient_id`` is set by the
    composite create once the owning patient has been inserted.
    """

    id: Optional[int] = None
    deleted: bool = False
    record_number: Optional[str] = None
    blood_group: Optional[BloodGroup] = None
    history: Optional[str] = None
    current_medication: Optional[str] = None
    notes: Optional[str] = None
    opened_on: Optional[date] = None
    patient_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("blood_group", mode="before")
    @classmethod
    def _parse_blood_group(cls, value):
        return parse_blood_group(value)


class ClinicalRecordIn(BaseModel):
    record_number: str
    blood_group: Optional[str] = None
    history: Optional[str] = None
    current_medication: Optional[str] = None
    notes: Optional[str] = None
    opened_on: Optional[date] = None

    def to_entity(self, **extra) -> ClinicalRecord:
        """Build the entity; an unknown blood group raises InvalidBloodGroupError."""
        return ClinicalRecord(
            record_number=self.record_number,
            blood_group=parse_blood_group(self.blood_group),
            history=self.history,
            current_medication=self.current_medication,
            notes=self.notes,
            opened_on=self.opened_on,
            **extra,
        )


class ClinicalRecordCreate(ClinicalRecordIn):
    patient_id: int

    def to_entity(self, **extra) -> ClinicalRecord:
        return super().to_entity(patient_id=self.patient_id, **extra)
