from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .shared_types import EmailAddress, PhoneNumber


@dataclass
class Patient:
    id: str
    auth_user_id: Optional[str]
    first_name: str
    last_name: str
    email: EmailAddress
    phone: PhoneNumber
    date_of_birth: date
    address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class NewPatient:
    auth_user_id: Optional[str]
    first_name: str
    last_name: str
    email: EmailAddress
    phone: PhoneNumber
    date_of_birth: date
    address: Optional[str] = None


@dataclass
class PatientUpdate:
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailAddress] = None
    phone: Optional[PhoneNumber] = None
    address: Optional[str] = None


@dataclass
class PatientFilters:
    email: Optional[EmailAddress] = None
    phone: Optional[PhoneNumber] = None
    auth_user_id: Optional[str] = None
    created_after: Optional[datetime] = None
    created_before: Optional[datetime] = None


def create_patient(
    auth_user_id: Optional[str],
    first_name: str,
    last_name: str,
    email: str,
    phone: str,
    date_of_birth: date,
    address: Optional[str] = None,
) -> NewPatient:
    return NewPatient(
        auth_user_id=auth_user_id,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        email=EmailAddress(email),
        phone=PhoneNumber(phone),
        date_of_birth=date_of_birth,
        address=address.strip() if address else None,
    )
