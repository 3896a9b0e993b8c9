"""Appointment request and response schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field, field_validator

from clinic_backend.schemas.common import (
    CamelModel,
    normalize_notes,
    normalize_required_text,
    reject_empty_date,
    sent_changes,
)

DEFAULT_APPOINTMENT_DURATION_MINUTES = 15

AppointmentStatus = Literal['pending', 'scheduled', 'completed', 'cancelled', 'no-show']


class AppointmentCreate(CamelModel):
    patient_id: str
    doctor_id: str
    # Left untyped: ISO strings, {"_seconds": ...} maps and native timestamps are coerced later.
    appointment_date: Any
    appointment_time: str | None = None
    service_type: str | None = None
    duration: int = Field(default=DEFAULT_APPOINTMENT_DURATION_MINUTES, ge=1)
    notes: str | None = None

    @field_validator('patient_id')
    @classmethod
    def validate_patient_id(cls, value: str) -> str:
        return normalize_required_text(value, 'Patient')

    @field_validator('doctor_id')
    @classmethod
    def validate_doctor_id(cls, value: str) -> str:
        return normalize_required_text(value, 'Doctor')

    @field_validator('appointment_date')
    @classmethod
    def validate_appointment_date(cls, value: Any) -> Any:
        if value is None or value == '':
            raise ValueError('Appointment date is required.')
        return value

    @field_validator('appointment_time', 'service_type')
    @classmethod
    def strip_optional_text(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        return normalize_notes(value)


class BookAppointmentRequest(CamelModel):
    """Self-service booking; the patient is always the caller."""

    doctor_id: str
    appointment_date: Any
    appointment_time: str
    service_type: str
    duration: int = Field(default=DEFAULT_APPOINTMENT_DURATION_MINUTES, ge=1)
    notes: str | None = None

    @field_validator('doctor_id', 'appointment_time', 'service_type')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        return normalize_required_text(value, 'doctorId, appointmentTime and serviceType')

    @field_validator('appointment_date')
    @classmethod
    def validate_appointment_date(cls, value: Any) -> Any:
        if value is None or value == '':
            raise ValueError('Appointment date is required.')
        return value

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        return normalize_notes(value)


class AppointmentUpdate(CamelModel):
    appointment_date: Any = None
    appointment_time: str | None = None
    service_type: str | None = None
    duration: int | None = Field(default=None, ge=1)
    status: AppointmentStatus | None = None
    notes: str | None = None

    @field_validator('appointment_date')
    @classmethod
    def validate_appointment_date(cls, value: Any) -> Any:
        return reject_empty_date(value, 'Appointment date')

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        return normalize_notes(value)

    def changes(self) -> dict:
        return sent_changes(self)


class AppointmentResponse(CamelModel):
    id: str
    patient_id: str
    patient_name: str = ''
    doctor_id: str
    doctor_name: str = ''
    appointment_date: datetime | None = None
    appointment_time: str | None = None
    service_type: str | None = None
    duration: int | None = None
    status: str
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
