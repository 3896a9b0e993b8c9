"""Patient, doctor and user schemas."""

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from clinic_backend.schemas.common import CamelModel, normalize_required_text

Role = Literal['admin', 'doctor', 'patient']


class PatientCreate(CamelModel):
    full_name: str
    email: str = ''
    phone_number: str = ''
    user_id: str | None = None

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, value: str) -> str:
        return normalize_required_text(value, 'Full name')

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class PatientResponse(CamelModel):
    id: str
    full_name: str = ''
    email: str = ''
    phone_number: str = ''
    user_id: str | None = None
    created_by: str | None = None
    is_active: bool = True
    created_at: datetime | None = None


class DoctorCreate(CamelModel):
    full_name: str
    specialties: list[str] = Field(default_factory=list)
    user_id: str | None = None

    @field_validator('full_name')
    @classmethod
    def validate_full_name(cls, value: str) -> str:
        return normalize_required_text(value, 'Full name')


class DoctorResponse(CamelModel):
    id: str
    full_name: str = ''
    specialties: list[str] = Field(default_factory=list)
    user_id: str | None = None
    is_active: bool = True
    created_at: datetime | None = None


class RegisterRequest(CamelModel):
    email: str = ''
    display_name: str = ''
    phone_number: str | None = None


class RoleUpdateRequest(CamelModel):
    role: Role


class UserResponse(CamelModel):
    id: str
    email: str = ''
    full_name: str = ''
    phone_number: str | None = None
    role: str | None = None
    is_active: bool = True
    patient_id: str | None = None
