from datetime import datetime

import pytest

from clinic_backend.core.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from clinic_backend.schemas.appointment import AppointmentCreate, AppointmentUpdate
from clinic_backend.services.appointment_service import AppointmentService
from clinic_backend.services.slot_ledger import APPOINTMENTS_COLLECTION


def _request(patient: dict, doctor: dict, **overrides) -> AppointmentCreate:
    fields = {
        'patient_id': patient['id'],
        'doctor_id': doctor['id'],
        'appointment_date': '2025-06-01',
        'appointment_time': '09:00',
        'service_type': 'checkup',
    }
    fields.update(overrides)
    return AppointmentCreate(**fields)


def test_create_stores_scheduled_appointment_with_name_snapshots(appointments, store, patient, doctor, clock) -> None:
    appointment = appointments.create(_request(patient, doctor, notes='  bring records  '), 'staff-1', 'doctor')

    stored = store.get(APPOINTMENTS_COLLECTION, appointment['id'])
    assert stored['status'] == 'scheduled'
    assert stored['patientName'] == 'Ada Lovelace'
    assert stored['doctorName'] == 'Dr. Gregory House'
    assert stored['appointmentDate'] == datetime(2025, 6, 1)
    assert stored['duration'] == 15
    assert stored['notes'] == 'bring records'
    assert stored['createdBy'] == 'staff-1'
    assert stored['createdAt'] == stored['updatedAt'] == clock()


def test_create_rejects_second_booking_of_same_slot(appointments, patient, doctor) -> None:
    appointments.create(_request(patient, doctor), 'staff-1', 'doctor')

    with pytest.raises(ConflictError) as exception_info:
        appointments.create(_request(patient, doctor, appointment_date='2025-06-01T18:00:00'), 'staff-1', 'doctor')

    assert exception_info.value.message == 'Failed to create appointment: This slot is no longer available'


def test_create_rejects_locked_slot_and_succeeds_after_unlock(appointments, locked_slots, patient, doctor) -> None:
    locked_slots.create(doctor['id'], '2025-06-01', '09:00')

    with pytest.raises(ConflictError):
        appointments.create(_request(patient, doctor), 'admin-1', 'admin')

    locked_slots.delete_by_details(doctor['id'], '2025-06-01', '09:00')

    assert appointments.create(_request(patient, doctor), 'admin-1', 'admin')['status'] == 'scheduled'


def test_create_without_time_skips_slot_check(appointments, patient, doctor) -> None:
    appointments.create(_request(patient, doctor, appointment_time=None), 'staff-1', 'doctor')
    second = appointments.create(_request(patient, doctor, appointment_time=None), 'staff-1', 'doctor')

    assert second['appointmentTime'] is None


def test_create_requires_existing_patient_and_doctor(appointments, patient, doctor) -> None:
    with pytest.raises(NotFoundError) as missing_patient:
        appointments.create(_request({'id': 'nobody'}, doctor), 'admin-1', 'admin')
    with pytest.raises(NotFoundError) as missing_doctor:
        appointments.create(_request(patient, {'id': 'nobody'}), 'admin-1', 'admin')

    assert missing_patient.value.message == 'Failed to create appointment: Patient not found'
    assert missing_doctor.value.message == 'Failed to create appointment: Doctor not found'


def test_create_rejects_non_admin_booking_for_foreign_patient(appointments, store, patient, doctor) -> None:
    with pytest.raises(AuthorizationError):
        appointments.create(_request(patient, doctor), 'someone-else', 'patient')

    assert store.query(APPOINTMENTS_COLLECTION) == []


def test_admin_can_book_for_any_patient(appointments, patient, doctor) -> None:
    appointment = appointments.create(_request(patient, doctor), 'admin-9', 'admin')

    assert appointment['createdBy'] == 'admin-9'


def test_create_rejects_unparseable_date(appointments, patient, doctor) -> None:
    with pytest.raises(ValidationError) as exception_info:
        appointments.create(_request(patient, doctor, appointment_date='next tuesday'), 'staff-1', 'doctor')

    assert exception_info.value.message == 'Failed to create appointment: Invalid appointment date format'


def test_delete_frees_the_slot(appointments, patient, doctor) -> None:
    appointment = appointments.create(_request(patient, doctor), 'staff-1', 'doctor')

    appointments.delete(appointment['id'])

    assert appointments.get(appointment['id']) is None
    assert appointments.create(_request(patient, doctor), 'staff-1', 'doctor')['status'] == 'scheduled'


def test_cancelling_through_update_frees_the_slot(appointments, patient, doctor) -> None:
    appointment = appointments.create(_request(patient, doctor), 'staff-1', 'doctor')

    updated = appointments.update(appointment['id'], AppointmentUpdate(status='cancelled'))

    assert updated['status'] == 'cancelled'
    assert updated['notes'] is None
    assert appointments.create(_request(patient, doctor), 'staff-1', 'doctor')['status'] == 'scheduled'


def test_update_coerces_date_and_does_not_recheck_availability(appointments, patient, doctor) -> None:
    first = appointments.create(_request(patient, doctor), 'staff-1', 'doctor')
    second = appointments.create(_request(patient, doctor, appointment_time='10:00'), 'staff-1', 'doctor')

    moved = appointments.update(
        second['id'],
        AppointmentUpdate(appointment_date={'_seconds': int(datetime(2025, 6, 1, 8).timestamp())}, appointment_time='09:00'),
    )

    assert moved['appointmentDate'] == datetime(2025, 6, 1, 8)
    assert moved['appointmentTime'] == '09:00'
    assert appointments.get(first['id'])['appointmentTime'] == '09:00'


def test_update_missing_appointment_raises_not_found(appointments) -> None:
    with pytest.raises(NotFoundError):
        appointments.update('missing', AppointmentUpdate(status='completed'))


def test_list_filters_and_orders_newest_first(appointments, patient, doctor) -> None:
    for day in ('2025-06-01', '2025-06-03', '2025-06-02'):
        appointments.create(_request(patient, doctor, appointment_date=day), 'staff-1', 'doctor')

    results = appointments.list(doctor_id=doctor['id'], start_date='2025-06-02')

    assert [result['appointmentDate'].day for result in results] == [3, 2]
    assert appointments.list(status='cancelled') == []
    assert len(appointments.list(patient_id=patient['id'])) == 3


def test_list_today_returns_only_todays_appointments(appointments, patient, doctor, clock) -> None:
    today = clock().replace(hour=14, minute=0)
    appointments.create(_request(patient, doctor, appointment_date=today), 'staff-1', 'doctor')
    appointments.create(_request(patient, doctor, appointment_date='2025-06-01'), 'staff-1', 'doctor')

    results = appointments.list_today(doctor['id'])

    assert [result['appointmentDate'] for result in results] == [today]
    assert appointments.list_today('other-doctor') == []


def test_list_today_return_annotation_is_the_builtin_list() -> None:
    assert AppointmentService.list_today.__annotations__['return'] == list[dict]


def test_update_ignores_explicit_nulls_on_required_fields(appointments, patient, doctor) -> None:
    appointment = appointments.create(_request(patient, doctor, notes='keep me'), 'staff-1', 'doctor')

    updated = appointments.update(
        appointment['id'],
        AppointmentUpdate.model_validate({'status': None, 'duration': None, 'appointmentTime': None}),
    )

    assert updated['status'] == 'scheduled'
    assert updated['duration'] == 15
    assert updated['appointmentTime'] == '09:00'
    assert updated['notes'] == 'keep me'


def test_update_with_null_notes_clears_them(appointments, patient, doctor) -> None:
    appointment = appointments.create(_request(patient, doctor, notes='old'), 'staff-1', 'doctor')

    updated = appointments.update(appointment['id'], AppointmentUpdate.model_validate({'notes': None}))

    assert updated['notes'] is None
