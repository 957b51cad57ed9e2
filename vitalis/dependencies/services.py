"""Dependencies resolving services from the app's connection source."""
from fastapi import Request

from vitalis.core.connection import ConnectionSource
from vitalis.services.clinical_record_service import ClinicalRecordService
from vitalis.services.patient_service import PatientService


def get_connection_source(request: Request) -> ConnectionSource:
    return request.app.state.connection_source


def get_patient_service(request: Request) -> PatientService:
    return PatientService(get_connection_source(request))


def get_clinical_record_service(request: Request) -> ClinicalRecordService:
    return ClinicalRecordService(get_connection_source(request))
