import pytest

from clinic_backend.auth.identity import AuthenticatedUser
from clinic_backend.core.errors import ConflictError, NotFoundError
from clinic_backend.routes.locked_slot_routes import (
    check_slot,
    list_doctor_locked_slots_for_date,
    lock_slot,
    unlock_slot,
    unlock_slot_by_details,
)
from clinic_backend.schemas.locked_slot import LockedSlotCreate

ADMIN = AuthenticatedUser(uid='admin-1', role='admin')


def _lock(locked_slots, **overrides):
    fields = {'doctorId': 'doc-1', 'date': '2025-06-01', 'time': '09:00'}
    fields.update(overrides)
    return lock_slot(LockedSlotCreate(**fields), current_user=ADMIN, locked_slots=locked_slots)


def test_lock_slot_records_caller(locked_slots) -> None:
    slot = _lock(locked_slots, reason='  Staff meeting ')

    assert slot['createdBy'] == 'admin-1'
    assert slot['reason'] == 'Staff meeting'


def test_lock_slot_twice_conflicts(locked_slots) -> None:
    _lock(locked_slots)

    with pytest.raises(ConflictError):
        _lock(locked_slots)


def test_check_slot_reports_lock_state(locked_slots) -> None:
    slot = _lock(locked_slots)

    assert check_slot(doctor_id='doc-1', slot_date='2025-06-01', slot_time='09:00', locked_slots=locked_slots).locked

    unlock_slot(slot['id'], locked_slots=locked_slots)

    assert not check_slot(doctor_id='doc-1', slot_date='2025-06-01', slot_time='09:00', locked_slots=locked_slots).locked


def test_list_for_date_only_returns_that_day(locked_slots) -> None:
    _lock(locked_slots)
    _lock(locked_slots, date='2025-06-02')

    slots = list_doctor_locked_slots_for_date('doc-1', '2025-06-01', locked_slots=locked_slots)

    assert [slot['date'].day for slot in slots] == [1]


def test_unlock_by_details_removes_lock(locked_slots) -> None:
    _lock(locked_slots)

    response = unlock_slot_by_details('doc-1', '2025-06-01', '09:00', locked_slots=locked_slots)

    assert response.message == 'Slot unlocked successfully'
    assert not locked_slots.is_locked('doc-1', '2025-06-01', '09:00')


def test_unlock_by_details_without_match_is_not_found(locked_slots) -> None:
    with pytest.raises(NotFoundError) as exception_info:
        unlock_slot_by_details('doc-1', '2025-06-01', '09:00', locked_slots=locked_slots)

    assert exception_info.value.message == 'Locked slot not found'


def test_locked_slot_request_requires_fields() -> None:
    with pytest.raises(ValueError):
        LockedSlotCreate(doctorId='  ', date='2025-06-01', time='09:00')
