from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .shared_types import EmailAddress


@dataclass
class Doctor:
    id: str
    auth_user_id: Optional[str]
    first_name: str
    last_name: str
    email: EmailAddress
    specialization: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"Dr. {self.first_name} {self.last_name}"


@dataclass
class NewDoctor:
    auth_user_id: Optional[str]
    first_name: str
    last_name: str
    email: EmailAddress
    specialization: Optional[str] = None
    is_active: bool = True


@dataclass
class DoctorUpdate:
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailAddress] = None
    specialization: Optional[str] = None
    is_active: Optional[bool] = None


@dataclass
class DoctorFilters:
    specialization: Optional[str] = None
    is_active: Optional[bool] = None
    email: Optional[EmailAddress] = None


def create_doctor(
    auth_user_id: Optional[str],
    first_name: str,
    last_name: str,
    email: str,
    specialization: Optional[str] = None,
    is_active: bool = True,
) -> NewDoctor:
    return NewDoctor(
        auth_user_id=auth_user_id,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        email=EmailAddress(email),
        specialization=specialization.strip() if specialization else None,
        is_active=is_active,
    )
