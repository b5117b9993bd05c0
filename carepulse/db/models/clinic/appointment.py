# carepulse/db/models/clinic/appointment.py
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship
from ....utils import utcnow
from datetime import datetime

class Appointment(SQLModel, table=True):
    __tablename__ = "appointments"
    id: str = Field(primary_key=True, max_length=64)
    patient_id: str = Field(foreign_key="patients.id", index=True)
    doctor_id: str = Field(foreign_key="doctors.id", index=True)
    type: str = Field(max_length=20)
    status: str = Field(default="SCHEDULED", max_length=20, index=True)
    # timezone-aware UTC
    scheduled_date_time: datetime = Field(index=True, sa_type=DateTime(timezone=True))
    duration: int
    reason_for_visit: Optional[str] = None
    notes: Optional[str] = None
    checked_in_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    # Relationships
    patient: Optional["Patient"] = Relationship(back_populates="appointments")
    doctor: Optional["Doctor"] = Relationship(back_populates="appointments")
