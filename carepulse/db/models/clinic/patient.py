# carepulse/db/models/clinic/patient.py
from typing import Optional, List
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship
from ....utils import utcnow
from datetime import date, datetime

class Patient(SQLModel, table=True):
    __tablename__ = "patients"
    id: str = Field(primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", unique=True)
    phone: str = Field(max_length=20, index=True)
    date_of_birth: date
    address: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    # Relationships
    user: Optional["User"] = Relationship(back_populates="patient")
    appointments: List["Appointment"] = Relationship(back_populates="patient")
