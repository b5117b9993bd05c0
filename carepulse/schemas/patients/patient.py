# carepulse/schemas/patients/patient.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime

from ...domain.patient import Patient


class PatientCreate(BaseModel):
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    email: str
    phone: str
    date_of_birth: date
    address: Optional[str] = None
    auth_user_id: Optional[str] = None


class PatientUpdateRequest(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class PatientResponse(BaseModel):
    id: str
    auth_user_id: Optional[str] = None
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: str
    date_of_birth: date
    address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, patient: Patient) -> "PatientResponse":
        return cls(
            id=patient.id,
            auth_user_id=patient.auth_user_id,
            first_name=patient.first_name,
            last_name=patient.last_name,
            full_name=patient.full_name,
            email=patient.email.value,
            phone=patient.phone.value,
            date_of_birth=patient.date_of_birth,
            address=patient.address,
            created_at=patient.created_at,
            updated_at=patient.updated_at,
        )


__all__ = ["PatientCreate", "PatientUpdateRequest", "PatientResponse"]
