import logging
from dataclasses import replace
from typing import List, Optional, Tuple

from sqlalchemy import func, or_
from sqlmodel import Session, select

from .....db.models import Appointment as AppointmentRow
from .....db.models import Patient as PatientRow
from .....db.models import User as UserRow
from .....application.ports.patient_repo import PatientRepository
from .....application.ports.result import RepositoryResult
from .....domain.identifiers import PATIENT_PREFIX, lookup_keys, new_id
from .....domain.patient import NewPatient, Patient, PatientFilters, PatientUpdate
from .....domain.shared_types import EmailAddress, PhoneNumber, UserRole
from .....utils import to_storage, utcnow
from .errors import handle_error
from .mappers import patient_to_domain, patient_to_rows

logger = logging.getLogger(__name__)


class SqlPatientRepository(PatientRepository):
    def __init__(self, session: Session):
        self.session = session

    def _get_row(self, patient_id: str) -> Optional[PatientRow]:
        keys = lookup_keys(PATIENT_PREFIX, patient_id)
        return self.session.exec(select(PatientRow).where(PatientRow.id.in_(keys))).first()

    def _not_found(self, message: str) -> RepositoryResult:
        return RepositoryResult.not_found(message)

    def create(self, data: NewPatient) -> RepositoryResult[Patient]:
        try:
            clauses = [UserRow.email == data.email.value]
            if data.auth_user_id:
                clauses.append(UserRow.auth_user_id == data.auth_user_id)
            existing = self.session.exec(select(UserRow).where(or_(*clauses))).first()
            if existing:
                return RepositoryResult.conflict(
                    "User with this email or auth user ID already exists",
                    {"email": data.email.value, "authUserId": data.auth_user_id},
                )

            patient = Patient(
                id=new_id(PATIENT_PREFIX),
                auth_user_id=data.auth_user_id,
                first_name=data.first_name,
                last_name=data.last_name,
                email=data.email,
                phone=data.phone,
                date_of_birth=data.date_of_birth,
                address=data.address,
            )
            user, row = patient_to_rows(patient)
            # user and patient rows land in one commit
            self.session.add(user)
            self.session.add(row)
            self.session.commit()
            self.session.refresh(user)
            self.session.refresh(row)
            return RepositoryResult.ok(patient_to_domain(user, row))
        except Exception as e:
            return handle_error(self.session, e, "Patient", logger)

    def find_by_id(self, patient_id: str) -> RepositoryResult[Patient]:
        try:
            row = self._get_row(patient_id)
            if not row:
                return self._not_found(f"Patient with ID {patient_id} not found")
            return RepositoryResult.ok(patient_to_domain(row.user, row))
        except Exception as e:
            return handle_error(self.session, e, "Patient", logger)

    def find_by_email(self, email: EmailAddress) -> RepositoryResult[Patient]:
        try:
            user = self.session.exec(select(UserRow).where(UserRow.email == email.value)).first()
            if not user or not user.patient:
                return self._not_found(f"Patient with email {email.value} not found")
            return RepositoryResult.ok(patient_to_domain(user, user.patient))
        except Exception as e:
            return handle_error(self.session, e, "Patient", logger)

    def find_by_phone(self, phone: PhoneNumber) -> RepositoryResult[Patient]:
        try:
            row = self.session.exec(select(PatientRow).where(PatientRow.phone == phone.value)).first()
            if not row:
                return self._not_found(f"Patient with phone {phone.value} not found")
            return RepositoryResult.ok(patient_to_domain(row.user, row))
        except Exception as e:
            return handle_error(self.session, e, "Patient", logger)

    def find_by_auth_user_id(self, auth_user_id: str) -> RepositoryResult[Patient]:
        try:
            user = self.session.exec(select(UserRow).where(UserRow.auth_user_id == auth_user_id)).first()
            if not user or not user.patient:
                return self._not_found(f"Patient with auth user ID {auth_user_id} not found")
            return RepositoryResult.ok(patient_to_domain(user, user.patient))
        except Exception as e:
            return handle_error(self.session, e, "Patient", logger)

    def email_exists(self, email: EmailAddress) -> bool:
        try:
            count = self.session.exec(
                select(func.count()).select_from(UserRow).where(UserRow.email == email.value)
            ).one()
            return count > 0
        except Exception as e:
            logger.error(f"Error checking email existence: {e}")
            return False

    def phone_exists(self, phone: PhoneNumber) -> bool:
        try:
            count = self.session.exec(
                select(func.count()).select_from(PatientRow).where(PatientRow.phone == phone.value)
            ).one()
            return count > 0
        except Exception as e:
            logger.error(f"Error checking phone existence: {e}")
            return False

    def update(self, patient_id: str, data: PatientUpdate) -> RepositoryResult[Patient]:
        try:
            row = self._get_row(patient_id)
            if not row:
                return self._not_found(f"Patient with ID {patient_id} not found")
            user = row.user

            if data.email:
                taken = self.session.exec(
                    select(UserRow).where(UserRow.email == data.email.value).where(UserRow.id != user.id)
                ).first()
                if taken:
                    return RepositoryResult.conflict(f"A patient with email {data.email.value} already exists")

            current = patient_to_domain(user, row)
            merged = replace(
                current,
                first_name=data.first_name or current.first_name,
                last_name=data.last_name or current.last_name,
                email=data.email or current.email,
                phone=data.phone or current.phone,
                address=data.address if data.address is not None else current.address,
            )
            user, row = patient_to_rows(merged, user, row)
            now = utcnow()
            user.updated_at = now
            row.updated_at = now

            # both tables in one transaction
            self.session.add(user)
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
            self.session.refresh(user)
            return RepositoryResult.ok(patient_to_domain(user, row))
        except Exception as e:
            return handle_error(self.session, e, "Patient", logger)

    def delete(self, patient_id: str) -> RepositoryResult[None]:
        try:
            row = self._get_row(patient_id)
            if not row:
                return self._not_found(f"Patient with ID {patient_id} not found")

            # legacy appointment rows may reference this patient under another key form
            appointment_count = self.session.exec(
                select(func.count())
                .select_from(AppointmentRow)
                .where(AppointmentRow.patient_id.in_(lookup_keys(PATIENT_PREFIX, row.id)))
            ).one()
            if appointment_count > 0:
                return RepositoryResult.conflict(
                    "Cannot delete patient with existing appointments",
                    {"appointmentCount": appointment_count},
                )

            # Delete user (cascades to patient)
            self.session.delete(row.user)
            self.session.commit()
            return RepositoryResult.ok(None)
        except Exception as e:
            return handle_error(self.session, e, "Patient", logger)

    def _filtered(self, query, filters: Optional[PatientFilters]):
        query = query.join(UserRow, UserRow.id == PatientRow.user_id).where(UserRow.role == UserRole.PATIENT.value)
        if not filters:
            return query
        if filters.email:
            query = query.where(UserRow.email == filters.email.value)
        if filters.phone:
            query = query.where(PatientRow.phone == filters.phone.value)
        if filters.auth_user_id:
            query = query.where(UserRow.auth_user_id == filters.auth_user_id)
        if filters.created_after:
            query = query.where(PatientRow.created_at >= to_storage(filters.created_after))
        if filters.created_before:
            query = query.where(PatientRow.created_at <= to_storage(filters.created_before))
        return query

    def find_many(self, filters: Optional[PatientFilters] = None, limit: Optional[int] = None, offset: int = 0) -> RepositoryResult[Tuple[List[Patient], int]]:
        try:
            query = self._filtered(select(PatientRow), filters).order_by(PatientRow.created_at.desc())
            if offset:
                query = query.offset(offset)
            if limit:
                query = query.limit(limit)
            rows = self.session.exec(query).all()
            total = self.session.exec(self._filtered(select(func.count(PatientRow.id)), filters)).one()
            return RepositoryResult.ok(([patient_to_domain(r.user, r) for r in rows], int(total)))
        except Exception as e:
            return handle_error(self.session, e, "Patient", logger)

    def count(self, filters: Optional[PatientFilters] = None) -> RepositoryResult[int]:
        try:
            total = self.session.exec(self._filtered(select(func.count(PatientRow.id)), filters)).one()
            return RepositoryResult.ok(int(total))
        except Exception as e:
            return handle_error(self.session, e, "Patient", logger)
