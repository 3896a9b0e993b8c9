from fastapi import APIRouter, Depends, Query, status

from clinic_backend.auth.dependencies import get_current_user, require_roles
from clinic_backend.auth.identity import ROLE_ADMIN
from clinic_backend.core.errors import NotFoundError
from clinic_backend.dependencies import get_doctor_service
from clinic_backend.schemas.directory import DoctorCreate, DoctorResponse
from clinic_backend.services.directory_service import DoctorService

router = APIRouter(tags=['doctors'])


@router.post(
    '',
    response_model=DoctorResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_roles(ROLE_ADMIN))],
)
def create_doctor(data: DoctorCreate, doctors: DoctorService = Depends(get_doctor_service)):
    return doctors.create(data)


@router.get('', response_model=list[DoctorResponse], dependencies=[Depends(get_current_user)])
def list_doctors(
    active_only: bool = Query(default=False, alias='activeOnly'),
    doctors: DoctorService = Depends(get_doctor_service),
):
    return doctors.list(active_only=active_only)


@router.get('/{doctor_id}', response_model=DoctorResponse, dependencies=[Depends(get_current_user)])
def get_doctor(doctor_id: str, doctors: DoctorService = Depends(get_doctor_service)):
    doctor = doctors.get(doctor_id)
    if doctor is None:
        raise NotFoundError('Doctor not found')
    return doctor
