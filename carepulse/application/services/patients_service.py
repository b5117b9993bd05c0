from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from ...domain import identifiers
from ...domain.patient import Patient, PatientFilters, PatientUpdate, create_patient
from ...domain.shared_types import EmailAddress, PhoneNumber
from ...exceptions import APIException
from ..ports.audit_logger import AuditLogger
from ..ports.patient_repo import PatientRepository
from .appointments_service import unwrap


@dataclass
class PatientsService:
    repo: PatientRepository
    audit: AuditLogger

    def register(
        self,
        first_name: str,
        last_name: str,
        email: str,
        phone: str,
        date_of_birth: date,
        address: Optional[str] = None,
        auth_user_id: Optional[str] = None,
    ) -> Patient:
        if date_of_birth > date.today():
            raise APIException.validation("Date of birth cannot be in the future")
        new_patient = create_patient(auth_user_id, first_name, last_name, email, phone, date_of_birth, address)
        if self.repo.email_exists(new_patient.email):
            raise APIException.conflict(
                f"A patient with email {new_patient.email.value} already exists",
                {"email": new_patient.email.value},
            )
        if self.repo.phone_exists(new_patient.phone):
            raise APIException.conflict(
                f"A patient with phone {new_patient.phone.value} already exists",
                {"phone": new_patient.phone.value},
            )
        patient = unwrap(self.repo.create(new_patient))
        self.audit.log("patient.registered", patient.id, actor_id=auth_user_id)
        return patient

    def get(self, patient_id: str) -> Patient:
        return unwrap(self.repo.find_by_id(identifiers.patient_id(patient_id)))

    def get_by_phone(self, phone: str) -> Patient:
        # kiosk check-in looks patients up by the number they type in
        return unwrap(self.repo.find_by_phone(PhoneNumber(phone)))

    def get_by_email(self, email: str) -> Patient:
        return unwrap(self.repo.find_by_email(EmailAddress(email)))

    def get_by_auth_user_id(self, auth_user_id: str) -> Patient:
        return unwrap(self.repo.find_by_auth_user_id(auth_user_id))

    def list(
        self,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> Tuple[List[Patient], int]:
        filters = PatientFilters(
            email=EmailAddress(email) if email else None,
            phone=PhoneNumber(phone) if phone else None,
        )
        return unwrap(self.repo.find_many(filters, limit=limit, offset=offset))

    def update(
        self,
        patient_id: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
    ) -> Patient:
        changes = PatientUpdate(
            first_name=first_name.strip() if first_name else None,
            last_name=last_name.strip() if last_name else None,
            email=EmailAddress(email) if email else None,
            phone=PhoneNumber(phone) if phone else None,
            address=address.strip() if address is not None else None,
        )
        patient_id = identifiers.patient_id(patient_id)
        if changes.phone is not None:
            taken = self.repo.find_by_phone(changes.phone)
            if taken.success and taken.data.id != patient_id:
                raise APIException.conflict(
                    f"A patient with phone {changes.phone.value} already exists",
                    {"phone": changes.phone.value},
                )
        patient = unwrap(self.repo.update(patient_id, changes))
        self.audit.log("patient.updated", patient.id)
        return patient

    def delete(self, patient_id: str) -> None:
        patient_id = identifiers.patient_id(patient_id)
        unwrap(self.repo.delete(patient_id))
        self.audit.log("patient.deleted", patient_id)
