# carepulse/schemas/doctors/doctor.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime

from ...domain.doctor import Doctor


class DoctorCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: str
    specialization: Optional[str] = None
    is_active: bool = True
    auth_user_id: Optional[str] = None


class DoctorUpdateRequest(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    email: Optional[str] = None
    specialization: Optional[str] = None
    is_active: Optional[bool] = None


class DoctorResponse(BaseModel):
    id: str
    auth_user_id: Optional[str] = None
    first_name: str
    last_name: str
    full_name: str
    email: str
    specialization: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, doctor: Doctor) -> "DoctorResponse":
        return cls(
            id=doctor.id,
            auth_user_id=doctor.auth_user_id,
            first_name=doctor.first_name,
            last_name=doctor.last_name,
            full_name=doctor.full_name,
            email=doctor.email.value,
            specialization=doctor.specialization,
            is_active=doctor.is_active,
            created_at=doctor.created_at,
            updated_at=doctor.updated_at,
        )


class AvailableSlots(BaseModel):
    doctor_id: str
    date: date
    duration_minutes: int
    slots: List[datetime]


__all__ = ["DoctorCreate", "DoctorUpdateRequest", "DoctorResponse", "AvailableSlots"]
