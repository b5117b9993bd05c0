import logging
from dataclasses import replace
from typing import List, Optional

from sqlalchemy import func, or_
from sqlmodel import Session, select

from .....db.models import Appointment as AppointmentRow
from .....db.models import Doctor as DoctorRow
from .....db.models import User as UserRow
from .....application.ports.doctor_repo import DoctorRepository
from .....application.ports.result import RepositoryResult
from .....domain.doctor import Doctor, DoctorFilters, DoctorUpdate, NewDoctor
from .....domain.identifiers import DOCTOR_PREFIX, lookup_keys, new_id
from .....utils import utcnow
from .errors import handle_error
from .mappers import doctor_to_domain, doctor_to_rows

logger = logging.getLogger(__name__)


class SqlDoctorRepository(DoctorRepository):
    def __init__(self, session: Session):
        self.session = session

    def _get_row(self, doctor_id: str) -> Optional[DoctorRow]:
        keys = lookup_keys(DOCTOR_PREFIX, doctor_id)
        return self.session.exec(select(DoctorRow).where(DoctorRow.id.in_(keys))).first()

    def _ordered(self, query):
        return query.order_by(DoctorRow.last_name.asc(), DoctorRow.first_name.asc())

    def create(self, data: NewDoctor) -> RepositoryResult[Doctor]:
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

            doctor = Doctor(
                id=new_id(DOCTOR_PREFIX),
                auth_user_id=data.auth_user_id,
                first_name=data.first_name,
                last_name=data.last_name,
                email=data.email,
                specialization=data.specialization,
                is_active=data.is_active,
            )
            user, row = doctor_to_rows(doctor)
            self.session.add(user)
            self.session.add(row)
            self.session.commit()
            self.session.refresh(user)
            self.session.refresh(row)
            return RepositoryResult.ok(doctor_to_domain(user, row))
        except Exception as e:
            return handle_error(self.session, e, "Doctor", logger)

    def find_by_id(self, doctor_id: str) -> RepositoryResult[Doctor]:
        try:
            row = self._get_row(doctor_id)
            if not row:
                return RepositoryResult.not_found(f"Doctor with ID {doctor_id} not found")
            return RepositoryResult.ok(doctor_to_domain(row.user, row))
        except Exception as e:
            return handle_error(self.session, e, "Doctor", logger)

    def find_by_auth_user_id(self, auth_user_id: str) -> RepositoryResult[Doctor]:
        try:
            user = self.session.exec(select(UserRow).where(UserRow.auth_user_id == auth_user_id)).first()
            if not user or not user.doctor:
                return RepositoryResult.not_found(f"Doctor with auth user ID {auth_user_id} not found")
            return RepositoryResult.ok(doctor_to_domain(user, user.doctor))
        except Exception as e:
            return handle_error(self.session, e, "Doctor", logger)

    def find_active(self) -> RepositoryResult[List[Doctor]]:
        return self.find_many(DoctorFilters(is_active=True))

    def find_by_specialization(self, specialization: str) -> RepositoryResult[List[Doctor]]:
        return self.find_many(DoctorFilters(specialization=specialization, is_active=True))

    def _filtered(self, query, filters: Optional[DoctorFilters]):
        query = query.join(UserRow, UserRow.id == DoctorRow.user_id)
        if not filters:
            return query
        if filters.specialization:
            query = query.where(DoctorRow.specialization.ilike(f"%{filters.specialization}%"))
        if filters.is_active is not None:
            query = query.where(DoctorRow.is_active == filters.is_active)
        if filters.email:
            query = query.where(UserRow.email == filters.email.value)
        return query

    def find_many(self, filters: Optional[DoctorFilters] = None) -> RepositoryResult[List[Doctor]]:
        try:
            rows = self.session.exec(self._ordered(self._filtered(select(DoctorRow), filters))).all()
            # an empty list is a valid answer
            return RepositoryResult.ok([doctor_to_domain(r.user, r) for r in rows])
        except Exception as e:
            return handle_error(self.session, e, "Doctor", logger)

    def count(self, filters: Optional[DoctorFilters] = None) -> RepositoryResult[int]:
        try:
            total = self.session.exec(self._filtered(select(func.count(DoctorRow.id)), filters)).one()
            return RepositoryResult.ok(int(total))
        except Exception as e:
            return handle_error(self.session, e, "Doctor", logger)

    def update(self, doctor_id: str, data: DoctorUpdate) -> RepositoryResult[Doctor]:
        try:
            row = self._get_row(doctor_id)
            if not row:
                return RepositoryResult.not_found(f"Doctor with ID {doctor_id} not found")
            user = row.user

            if data.email:
                taken = self.session.exec(
                    select(UserRow).where(UserRow.email == data.email.value).where(UserRow.id != user.id)
                ).first()
                if taken:
                    return RepositoryResult.conflict(f"A user with email {data.email.value} already exists")

            current = doctor_to_domain(user, row)
            merged = replace(
                current,
                first_name=data.first_name or current.first_name,
                last_name=data.last_name or current.last_name,
                email=data.email or current.email,
                specialization=data.specialization if data.specialization is not None else current.specialization,
                is_active=data.is_active if data.is_active is not None else current.is_active,
            )
            user, row = doctor_to_rows(merged, user, row)
            now = utcnow()
            user.updated_at = now
            row.updated_at = now

            self.session.add(user)
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
            self.session.refresh(user)
            return RepositoryResult.ok(doctor_to_domain(user, row))
        except Exception as e:
            return handle_error(self.session, e, "Doctor", logger)

    def delete(self, doctor_id: str) -> RepositoryResult[None]:
        try:
            row = self._get_row(doctor_id)
            if not row:
                return RepositoryResult.not_found(f"Doctor with ID {doctor_id} not found")

            # legacy appointment rows may reference this doctor under another key form
            appointment_count = self.session.exec(
                select(func.count())
                .select_from(AppointmentRow)
                .where(AppointmentRow.doctor_id.in_(lookup_keys(DOCTOR_PREFIX, row.id)))
            ).one()
            if appointment_count > 0:
                return RepositoryResult.conflict(
                    "Cannot delete doctor with existing appointments",
                    {"appointmentCount": appointment_count},
                )

            # Delete user (cascades to doctor)
            self.session.delete(row.user)
            self.session.commit()
            return RepositoryResult.ok(None)
        except Exception as e:
            return handle_error(self.session, e, "Doctor", logger)
