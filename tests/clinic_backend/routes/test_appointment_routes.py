import pytest

from clinic_backend.auth.identity import AuthenticatedUser
from clinic_backend.core.errors import AuthorizationError, ConflictError, NotFoundError
from clinic_backend.routes.appointment_routes import (
    book_appointment,
    create_appointment,
    delete_appointment,
    get_appointment,
    list_my_appointments,
)
from clinic_backend.schemas.appointment import AppointmentCreate, BookAppointmentRequest

STAFF = AuthenticatedUser(uid='staff-1', email='staff@example.com', role='doctor')


def _booking(doctor: dict, **overrides) -> BookAppointmentRequest:
    fields = {
        'doctorId': doctor['id'],
        'appointmentDate': '2025-06-01',
        'appointmentTime': '09:00',
        'serviceType': 'checkup',
    }
    fields.update(overrides)
    return BookAppointmentRequest(**fields)


def test_book_appointment_provisions_patient_record_for_caller(appointments, patients, doctor) -> None:
    caller = AuthenticatedUser(uid='uid-7', email='self@example.com', name='Sam Self')

    appointment = book_appointment(_booking(doctor), current_user=caller, appointments=appointments, patients=patients)

    assert appointment['patientId'] == 'uid-7'
    assert appointment['patientName'] == 'Sam Self'
    assert patients.get('uid-7')['createdBy'] == 'uid-7'
    assert [item['id'] for item in list_my_appointments(current_user=caller, appointments=appointments)] == [
        appointment['id']
    ]


def test_book_appointment_rejects_taken_slot(appointments, patients, doctor) -> None:
    book_appointment(_booking(doctor), current_user=AuthenticatedUser(uid='a'), appointments=appointments, patients=patients)

    with pytest.raises(ConflictError):
        book_appointment(
            _booking(doctor),
            current_user=AuthenticatedUser(uid='b'),
            appointments=appointments,
            patients=patients,
        )


def test_create_appointment_checks_patient_ownership_for_doctors(appointments, patient, doctor) -> None:
    data = AppointmentCreate(patient_id=patient['id'], doctor_id=doctor['id'], appointment_date='2025-06-01')

    created = create_appointment(data, current_user=STAFF, appointments=appointments)
    assert created['createdBy'] == 'staff-1'

    with pytest.raises(AuthorizationError):
        create_appointment(
            data,
            current_user=AuthenticatedUser(uid='other-doctor', role='doctor'),
            appointments=appointments,
        )


def test_get_appointment_raises_not_found(appointments) -> None:
    with pytest.raises(NotFoundError) as exception_info:
        get_appointment('missing', appointments=appointments)

    assert exception_info.value.message == 'Appointment not found'


def test_delete_appointment_returns_message(appointments, patient, doctor) -> None:
    created = appointments.create(
        AppointmentCreate(patient_id=patient['id'], doctor_id=doctor['id'], appointment_date='2025-06-01'),
        'staff-1',
        'doctor',
    )

    response = delete_appointment(created['id'], appointments=appointments)

    assert response.message == 'Appointment deleted successfully'
    assert appointments.get(created['id']) is None
