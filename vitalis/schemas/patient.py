"""Patient entity and payloads."""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict

from vitalis.schemas.clinical_record import ClinicalRecord, ClinicalRecordIn


class Patient(BaseModel):
    id: Optional[int] = None
    deleted: bool = False
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    document: Optional[str] = None
    birth_date: Optional[date] = None
    clinical_record: Optional[ClinicalRecord] = None

    model_config = ConfigDict(from_attributes=True)


class PatientUpdate(BaseModel):
    first_name: str
    last_name: str
    document: str
    birth_date: Optional[date] = None

    def to_entity(self, **extra) -> Patient:
        return Patient(
            first_name=self.first_name,
            last_name=self.last_name,
            document=self.document,
            birth_date=self.birth_date,
            **extra,
        )


class PatientCreate(PatientUpdate):
    clinical_record: Optional[ClinicalRecordIn] = None

    def to_entity(self, **extra) -> Patient:
        record = self.clinical_record.to_entity() if self.clinical_record else None
        return super().to_entity(clinical_record=record, **extra)
