"""Locked slot request and response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator

from clinic_backend.schemas.common import CamelModel, normalize_required_text


class LockedSlotCreate(CamelModel):
    doctor_id: str
    date: Any
    time: str
    reason: str | None = None

    @field_validator('doctor_id', 'time')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        return normalize_required_text(value, 'doctorId, date, and time')

    @field_validator('date')
    @classmethod
    def validate_date(cls, value: Any) -> Any:
        if value is None or value == '':
            raise ValueError('doctorId, date, and time are required.')
        return value

    @field_validator('reason')
    @classmethod
    def validate_reason(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class LockedSlotResponse(CamelModel):
    id: str
    doctor_id: str
    date: datetime
    time: str
    reason: str | None = None
    created_at: datetime | None = None
    created_by: str | None = None


class LockCheckResponse(BaseModel):
    locked: bool
