# carepulse/db/models/clinic/doctor.py
from typing import Optional, List
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship
from ....utils import utcnow
from datetime import datetime

class Doctor(SQLModel, table=True):
    __tablename__ = "doctors"
    id: str = Field(primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", unique=True)
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    specialization: Optional[str] = Field(default=None, max_length=100)
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    # Relationships
    user: Optional["User"] = Relationship(back_populates="doctor")
    appointments: List["Appointment"] = Relationship(back_populates="doctor")
