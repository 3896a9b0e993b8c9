from fastapi import APIRouter, Depends, Query, status

from clinic_backend.auth.dependencies import require_roles
from clinic_backend.auth.identity import STAFF_ROLES, AuthenticatedUser
from clinic_backend.core.errors import NotFoundError
from clinic_backend.dependencies import get_locked_slot_service
from clinic_backend.schemas.common import MessageResponse
from clinic_backend.schemas.locked_slot import LockCheckResponse, LockedSlotCreate, LockedSlotResponse
from clinic_backend.services.locked_slot_service import LockedSlotService

router = APIRouter(tags=['locked-slots'])

require_staff = require_roles(*STAFF_ROLES)


@router.post('', response_model=LockedSlotResponse, status_code=status.HTTP_201_CREATED)
def lock_slot(
    data: LockedSlotCreate,
    current_user: AuthenticatedUser = Depends(require_staff),
    locked_slots: LockedSlotService = Depends(get_locked_slot_service),
):
    return locked_slots.create(
        data.doctor_id,
        data.date,
        data.time,
        reason=data.reason,
        created_by=current_user.uid,
    )


@router.get('/check', response_model=LockCheckResponse, dependencies=[Depends(require_staff)])
def check_slot(
    doctor_id: str = Query(alias='doctorId', min_length=1),
    slot_date: str = Query(alias='date', min_length=1),
    slot_time: str = Query(alias='time', min_length=1),
    locked_slots: LockedSlotService = Depends(get_locked_slot_service),
):
    return LockCheckResponse(locked=locked_slots.is_locked(doctor_id, slot_date, slot_time))


@router.get('/doctor/{doctor_id}', response_model=list[LockedSlotResponse], dependencies=[Depends(require_staff)])
def list_doctor_locked_slots(
    doctor_id: str,
    locked_slots: LockedSlotService = Depends(get_locked_slot_service),
):
    return locked_slots.list_by_doctor(doctor_id)


@router.get(
    '/doctor/{doctor_id}/date/{slot_date}',
    response_model=list[LockedSlotResponse],
    dependencies=[Depends(require_staff)],
)
def list_doctor_locked_slots_for_date(
    doctor_id: str,
    slot_date: str,
    locked_slots: LockedSlotService = Depends(get_locked_slot_service),
):
    return locked_slots.list_by_date(doctor_id, slot_date)


@router.delete('/{slot_id}', response_model=MessageResponse, dependencies=[Depends(require_staff)])
def unlock_slot(
    slot_id: str,
    locked_slots: LockedSlotService = Depends(get_locked_slot_service),
):
    locked_slots.delete_by_id(slot_id)
    return MessageResponse(message='Slot unlocked successfully')


@router.delete(
    '/doctor/{doctor_id}/date/{slot_date}/time/{slot_time}',
    response_model=MessageResponse,
    dependencies=[Depends(require_staff)],
)
def unlock_slot_by_details(
    doctor_id: str,
    slot_date: str,
    slot_time: str,
    locked_slots: LockedSlotService = Depends(get_locked_slot_service),
):
    if not locked_slots.delete_by_details(doctor_id, slot_date, slot_time):
        raise NotFoundError('Locked slot not found')
    return MessageResponse(message='Slot unlocked successfully')
