"""Clinical record endpoints."""
from typing import List

from fastapi import APIRouter, Depends, Response, status

from vitalis.dependencies.services import get_clinical_record_service
from vitalis.schemas.clinical_record import ClinicalRecord, ClinicalRecordCreate, ClinicalRecordIn
from vitalis.services.clinical_record_service import ClinicalRecordService
from vitalis.utils.errors import NotFoundError

router = APIRouter(prefix="/clinical-records", tags=["clinical records"])


@router.post("", response_model=ClinicalRecord, status_code=status.HTTP_201_CREATED)
def create_clinical_record(
    payload: ClinicalRecordCreate,
    service: ClinicalRecordService = Depends(get_clinical_record_service),
):
    return service.create(payload.to_entity())


@router.get("", response_model=List[ClinicalRecord])
def list_clinical_records(service: ClinicalRecordService = Depends(get_clinical_record_service)):
    return service.list_active()


@router.get("/{record_id}", response_model=ClinicalRecord)
def get_clinical_record(record_id: int, service: ClinicalRecordService = Depends(get_clinical_record_service)):
    record = service.find_by_id(record_id)
    if record is None:
        raise NotFoundError(f"Clinical record {record_id} not found")
    return record


@router.put("/{record_id}", response_model=ClinicalRecord)
def update_clinical_record(
    record_id: int,
    payload: ClinicalRecordIn,
    service: ClinicalRecordService = Depends(get_clinical_record_service),
):
    service.update(payload.to_entity(id=record_id))
    return service.find_by_id(record_id)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_clinical_record(record_id: int, service: ClinicalRecordService = Depends(get_clinical_record_service)):
    service.delete(record_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
