# carepulse/schemas/appointments/appointment.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from ...domain.appointment import Appointment
from ...domain.shared_types import AppointmentStatus, AppointmentType


class AppointmentCreate(BaseModel):
    patient_id: str = Field(min_length=1)
    doctor_id: str = Field(min_length=1)
    type: AppointmentType
    scheduled_date_time: datetime  # naive values are clinic-local
    duration_minutes: Optional[int] = None
    reason_for_visit: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = None


class AppointmentUpdateRequest(BaseModel):
    type: Optional[AppointmentType] = None
    status: Optional[AppointmentStatus] = None
    scheduled_date_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    reason_for_visit: Optional[str] = Field(default=None, max_length=500)
    notes: Optional[str] = None


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus


class AppointmentResponse(BaseModel):
    id: str
    patient_id: str
    doctor_id: str
    type: AppointmentType
    status: AppointmentStatus
    scheduled_date_time: datetime
    end_date_time: datetime
    duration_minutes: int
    reason_for_visit: Optional[str] = None
    notes: Optional[str] = None
    checked_in_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, appt: Appointment) -> "AppointmentResponse":
        return cls(
            id=appt.id,
            patient_id=appt.patient_id,
            doctor_id=appt.doctor_id,
            type=appt.type,
            status=appt.status,
            scheduled_date_time=appt.scheduled_date_time,
            end_date_time=appt.end_date_time,
            duration_minutes=appt.duration_minutes,
            reason_for_visit=appt.reason_for_visit,
            notes=appt.notes,
            checked_in_at=appt.checked_in_at,
            created_at=appt.created_at,
            updated_at=appt.updated_at,
        )


__all__ = ["AppointmentCreate", "AppointmentUpdateRequest", "AppointmentStatusUpdate", "AppointmentResponse"]
