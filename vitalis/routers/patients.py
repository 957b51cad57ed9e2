"""Patient endpoints."""
from typing import List

from fastapi import APIRouter, Depends, Response, status

from vitalis.dependencies.services import get_clinical_record_service, get_patient_service
from vitalis.schemas.clinical_record import ClinicalRecord
from vitalis.schemas.patient import Patient, PatientCreate, PatientUpdate
from vitalis.services.clinical_record_service import ClinicalRecordService
from vitalis.services.patient_service import PatientService
from vitalis.utils.errors import NotFoundError

router = APIRouter(prefix="/patients", tags=["patients"])


@router.post("", response_model=Patient, status_code=status.HTTP_201_CREATED)
def create_patient(payload: PatientCreate, service: PatientService = Depends(get_patient_service)):
    return service.create(payload.to_entity())


@router.get("", response_model=List[Patient])
def list_patients(service: PatientService = Depends(get_patient_service)):
    return service.list_active()


@router.get("/by-document/{document}", response_model=Patient)
def get_patient_by_document(document: str, service: PatientService = Depends(get_patient_service)):
    patient = service.find_by_document(document)
    if patient is None:
        raise NotFoundError(f"No active patient with document {document}")
    return patient


@router.get("/{patient_id}", response_model=Patient)
def get_patient(patient_id: int, service: PatientService = Depends(get_patient_service)):
    patient = service.find_by_id(patient_id)
    if patient is None:
        raise NotFoundError(f"Patient {patient_id} not found")
    return patient


@router.get("/{patient_id}/clinical-record", response_model=ClinicalRecord)
def get_patient_clinical_record(
    patient_id: int,
    service: ClinicalRecordService = Depends(get_clinical_record_service),
):
    record = service.find_by_patient_id(patient_id)
    if record is None:
        raise NotFoundError(f"Patient {patient_id} has no active clinical record")
    return record


@router.put("/{patient_id}", response_model=Patient)
def update_patient(
    patient_id: int,
    payload: PatientUpdate,
    service: PatientService = Depends(get_patient_service),
):
    service.update(payload.to_entity(id=patient_id))
    return service.find_by_id(patient_id)


@router.delete("/{patient_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_patient(patient_id: int, service: PatientService = Depends(get_patient_service)):
    service.delete(patient_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
