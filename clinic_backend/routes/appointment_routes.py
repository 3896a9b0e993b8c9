from fastapi import APIRouter, Depends, Query, status

from clinic_backend.auth.dependencies import get_current_user, require_roles
from clinic_backend.auth.identity import ROLE_PATIENT, STAFF_ROLES, AuthenticatedUser
from clinic_backend.core.errors import NotFoundError
from clinic_backend.dependencies import get_appointment_service, get_patient_service
from clinic_backend.schemas.appointment import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentUpdate,
    BookAppointmentRequest,
)
from clinic_backend.schemas.common import MessageResponse
from clinic_backend.services.appointment_service import AppointmentService
from clinic_backend.services.directory_service import PatientService

router = APIRouter(tags=['appointments'])

require_staff = require_roles(*STAFF_ROLES)


@router.post('', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: AppointmentCreate,
    current_user: AuthenticatedUser = Depends(require_staff),
    appointments: AppointmentService = Depends(get_appointment_service),
):
    return appointments.create(data, current_user.uid, current_user.role)


@router.post('/book', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def book_appointment(
    data: BookAppointmentRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    appointments: AppointmentService = Depends(get_appointment_service),
    patients: PatientService = Depends(get_patient_service),
):
    patient = patients.ensure_for_user(current_user)

    return appointments.create(
        AppointmentCreate(
            patient_id=patient['id'],
            doctor_id=data.doctor_id,
            appointment_date=data.appointment_date,
            appointment_time=data.appointment_time,
            service_type=data.service_type,
            duration=data.duration,
            notes=data.notes,
        ),
        current_user.uid,
        ROLE_PATIENT,
    )


@router.get('/my', response_model=list[AppointmentResponse])
def list_my_appointments(
    current_user: AuthenticatedUser = Depends(get_current_user),
    appointments: AppointmentService = Depends(get_appointment_service),
):
    return appointments.list(patient_id=current_user.uid)


@router.get('', response_model=list[AppointmentResponse], dependencies=[Depends(require_staff)])
def list_appointments(
    status_filter: str | None = Query(default=None, alias='status'),
    doctor_id: str | None = Query(default=None, alias='doctorId'),
    patient_id: str | None = Query(default=None, alias='patientId'),
    start_date: str | None = Query(default=None, alias='startDate'),
    end_date: str | None = Query(default=None, alias='endDate'),
    appointments: AppointmentService = Depends(get_appointment_service),
):
    return appointments.list(
        status=status_filter,
        doctor_id=doctor_id,
        patient_id=patient_id,
        start_date=start_date,
        end_date=end_date,
    )


@router.get('/today', response_model=list[AppointmentResponse], dependencies=[Depends(require_staff)])
def list_today_appointments(
    doctor_id: str | None = Query(default=None, alias='doctorId'),
    appointments: AppointmentService = Depends(get_appointment_service),
):
    return appointments.list_today(doctor_id)


@router.get('/{appointment_id}', response_model=AppointmentResponse, dependencies=[Depends(require_staff)])
def get_appointment(
    appointment_id: str,
    appointments: AppointmentService = Depends(get_appointment_service),
):
    appointment = appointments.get(appointment_id)
    if appointment is None:
        raise NotFoundError('Appointment not found')
    return appointment


@router.put('/{appointment_id}', response_model=AppointmentResponse, dependencies=[Depends(require_staff)])
def update_appointment(
    appointment_id: str,
    data: AppointmentUpdate,
    appointments: AppointmentService = Depends(get_appointment_service),
):
    return appointments.update(appointment_id, data)


@router.delete('/{appointment_id}', response_model=MessageResponse, dependencies=[Depends(require_staff)])
def delete_appointment(
    appointment_id: str,
    appointments: AppointmentService = Depends(get_appointment_service),
):
    appointments.delete(appointment_id)
    return MessageResponse(message='Appointment deleted successfully')
