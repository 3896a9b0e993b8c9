from fastapi import APIRouter, Depends, Query, status

from clinic_backend.auth.dependencies import require_roles
from clinic_backend.auth.identity import ROLE_ADMIN, AuthenticatedUser
from clinic_backend.core.errors import NotFoundError
from clinic_backend.dependencies import get_waiting_list_service
from clinic_backend.schemas.appointment import AppointmentResponse
from clinic_backend.schemas.common import MessageResponse
from clinic_backend.schemas.waiting_list import (
    WaitingListBookRequest,
    WaitingListCreate,
    WaitingListResponse,
    WaitingListUpdate,
)
from clinic_backend.services.waiting_list_service import WaitingListService

router = APIRouter(tags=['waiting-list'])

# Entries are booked with admin rights.
require_admin = require_roles(ROLE_ADMIN)


@router.post('', response_model=WaitingListResponse, status_code=status.HTTP_201_CREATED)
def add_to_waiting_list(
    data: WaitingListCreate,
    current_user: AuthenticatedUser = Depends(require_admin),
    waiting_list: WaitingListService = Depends(get_waiting_list_service),
):
    return waiting_list.add(data, current_user.uid)


@router.get('', response_model=list[WaitingListResponse], dependencies=[Depends(require_admin)])
def list_waiting_list(
    doctor_id: str | None = Query(default=None, alias='doctorId'),
    patient_id: str | None = Query(default=None, alias='patientId'),
    status_filter: str | None = Query(default=None, alias='status'),
    preferred_date: str | None = Query(default=None, alias='date'),
    waiting_list: WaitingListService = Depends(get_waiting_list_service),
):
    return waiting_list.list(
        doctor_id=doctor_id,
        patient_id=patient_id,
        status=status_filter,
        date=preferred_date,
    )


@router.get('/{entry_id}', response_model=WaitingListResponse, dependencies=[Depends(require_admin)])
def get_waiting_list_entry(
    entry_id: str,
    waiting_list: WaitingListService = Depends(get_waiting_list_service),
):
    entry = waiting_list.get(entry_id)
    if entry is None:
        raise NotFoundError('Waiting list entry not found')
    return entry


@router.put('/{entry_id}', response_model=WaitingListResponse, dependencies=[Depends(require_admin)])
def update_waiting_list_entry(
    entry_id: str,
    data: WaitingListUpdate,
    waiting_list: WaitingListService = Depends(get_waiting_list_service),
):
    return waiting_list.update(entry_id, data)


@router.delete('/{entry_id}', response_model=MessageResponse, dependencies=[Depends(require_admin)])
def remove_from_waiting_list(
    entry_id: str,
    waiting_list: WaitingListService = Depends(get_waiting_list_service),
):
    waiting_list.remove(entry_id)
    return MessageResponse(message='Removed from waiting list successfully')


@router.post('/{entry_id}/book', response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
def book_from_waiting_list(
    entry_id: str,
    data: WaitingListBookRequest,
    current_user: AuthenticatedUser = Depends(require_admin),
    waiting_list: WaitingListService = Depends(get_waiting_list_service),
):
    return waiting_list.book(entry_id, data.appointment_date, data.appointment_time, current_user.uid)
