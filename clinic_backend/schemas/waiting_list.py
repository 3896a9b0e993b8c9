"""Waiting list request and response schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import field_validator

from clinic_backend.schemas.common import (
    CamelModel,
    normalize_notes,
    normalize_required_text,
    reject_empty_date,
    sent_changes,
)

WaitingListStatus = Literal['waiting', 'notified', 'booked', 'cancelled']


class WaitingListCreate(CamelModel):
    patient_id: str
    doctor_id: str
    service_type: str
    preferred_date: Any
    priority: int | None = None
    notes: str | None = None

    @field_validator('patient_id', 'doctor_id', 'service_type')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        return normalize_required_text(value, 'patientId, doctorId and serviceType')

    @field_validator('preferred_date')
    @classmethod
    def validate_preferred_date(cls, value: Any) -> Any:
        if value is None or value == '':
            raise ValueError('Preferred date is required.')
        return value

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        return normalize_notes(value)


class WaitingListUpdate(CamelModel):
    preferred_date: Any = None
    status: WaitingListStatus | None = None
    priority: int | None = None
    notes: str | None = None

    @field_validator('preferred_date')
    @classmethod
    def validate_preferred_date(cls, value: Any) -> Any:
        return reject_empty_date(value, 'Preferred date')

    @field_validator('notes')
    @classmethod
    def validate_notes(cls, value: str | None) -> str | None:
        return normalize_notes(value)

    def changes(self) -> dict:
        return sent_changes(self)


class WaitingListBookRequest(CamelModel):
    appointment_date: Any
    appointment_time: str

    @field_validator('appointment_date')
    @classmethod
    def validate_appointment_date(cls, value: Any) -> Any:
        if value is None or value == '':
            raise ValueError('appointmentDate is required.')
        return value

    @field_validator('appointment_time')
    @classmethod
    def validate_appointment_time(cls, value: str) -> str:
        return normalize_required_text(value, 'appointmentTime')


class WaitingListResponse(CamelModel):
    id: str
    patient_id: str
    patient_name: str = ''
    doctor_id: str
    doctor_name: str = ''
    service_type: str
    preferred_date: datetime | None = None
    status: str
    priority: int = 0
    notes: str | None = None
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
