from fastapi import APIRouter, Depends, status

from clinic_backend.auth.dependencies import require_roles
from clinic_backend.auth.identity import STAFF_ROLES, AuthenticatedUser
from clinic_backend.core.errors import NotFoundError
from clinic_backend.dependencies import get_patient_service
from clinic_backend.schemas.directory import PatientCreate, PatientResponse
from clinic_backend.services.directory_service import PatientService

router = APIRouter(tags=['patients'])

require_staff = require_roles(*STAFF_ROLES)


@router.post('', response_model=PatientResponse, status_code=status.HTTP_201_CREATED)
def create_patient(
    data: PatientCreate,
    current_user: AuthenticatedUser = Depends(require_staff),
    patients: PatientService = Depends(get_patient_service),
):
    return patients.create(data, created_by=current_user.uid)


@router.get('', response_model=list[PatientResponse], dependencies=[Depends(require_staff)])
def list_patients(patients: PatientService = Depends(get_patient_service)):
    return patients.list()


@router.get('/{patient_id}', response_model=PatientResponse, dependencies=[Depends(require_staff)])
def get_patient(patient_id: str, patients: PatientService = Depends(get_patient_service)):
    patient = patients.get(patient_id)
    if patient is None:
        raise NotFoundError('Patient not found')
    return patient
