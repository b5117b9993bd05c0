# carepulse/db/models/users/user.py
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship
from ....utils import utcnow
from datetime import datetime

class User(SQLModel, table=True):
    __tablename__ = "users"
    id: str = Field(primary_key=True, max_length=64)
    auth_user_id: Optional[str] = Field(default=None, max_length=128, unique=True, index=True)
    first_name: str = Field(max_length=50)
    last_name: str = Field(max_length=50)
    email: str = Field(max_length=255, unique=True, index=True)
    role: str = Field(default="PATIENT", max_length=16)
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))

    # Relationships
    patient: Optional["Patient"] = Relationship(
        back_populates="user", sa_relationship_kwargs={"uselist": False, "cascade": "all, delete-orphan"}
    )
    doctor: Optional["Doctor"] = Relationship(
        back_populates="user", sa_relationship_kwargs={"uselist": False, "cascade": "all, delete-orphan"}
    )
