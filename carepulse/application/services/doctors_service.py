from dataclasses import dataclass
from typing import List, Optional

from ...domain import identifiers
from ...domain.doctor import Doctor, DoctorFilters, DoctorUpdate, create_doctor
from ...domain.shared_types import EmailAddress
from ..ports.audit_logger import AuditLogger
from ..ports.doctor_repo import DoctorRepository
from .appointments_service import unwrap


@dataclass
class DoctorsService:
    repo: DoctorRepository
    audit: AuditLogger

    def create(
        self,
        first_name: str,
        last_name: str,
        email: str,
        specialization: Optional[str] = None,
        is_active: bool = True,
        auth_user_id: Optional[str] = None,
    ) -> Doctor:
        new_doctor = create_doctor(auth_user_id, first_name, last_name, email, specialization, is_active)
        doctor = unwrap(self.repo.create(new_doctor))
        self.audit.log("doctor.created", doctor.id, actor_id=auth_user_id)
        return doctor

    def get(self, doctor_id: str) -> Doctor:
        return unwrap(self.repo.find_by_id(identifiers.doctor_id(doctor_id)))

    def list(self, specialization: Optional[str] = None, is_active: Optional[bool] = None) -> List[Doctor]:
        if specialization:
            return unwrap(self.repo.find_by_specialization(specialization))
        if is_active:
            return unwrap(self.repo.find_active())
        return unwrap(self.repo.find_many(DoctorFilters(is_active=is_active)))

    def update(
        self,
        doctor_id: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        specialization: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Doctor:
        changes = DoctorUpdate(
            first_name=first_name.strip() if first_name else None,
            last_name=last_name.strip() if last_name else None,
            email=EmailAddress(email) if email else None,
            specialization=specialization.strip() if specialization is not None else None,
            is_active=is_active,
        )
        doctor = unwrap(self.repo.update(identifiers.doctor_id(doctor_id), changes))
        self.audit.log("doctor.updated", doctor.id, details={"isActive": doctor.is_active})
        return doctor

    def delete(self, doctor_id: str) -> None:
        doctor_id = identifiers.doctor_id(doctor_id)
        unwrap(self.repo.delete(doctor_id))
        self.audit.log("doctor.deleted", doctor_id)

    def get_by_auth_user_id(self, auth_user_id: str) -> Doctor:
        return unwrap(self.repo.find_by_auth_user_id(auth_user_id))
