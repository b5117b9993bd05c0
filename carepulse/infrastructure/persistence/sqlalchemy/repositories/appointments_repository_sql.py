import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from .....db.models import Appointment as AppointmentRow
from .....db.models import Doctor as DoctorRow
from .....db.models import Patient as PatientRow
from .....application.ports.appointments_repo import AppointmentsRepository
from .....application.ports.result import RepositoryResult
from .....domain.appointment import (
    Appointment,
    AppointmentFilters,
    AppointmentUpdate,
    NewAppointment,
)
from .....domain.identifiers import (
    APPOINTMENT_PREFIX,
    DOCTOR_PREFIX,
    PATIENT_PREFIX,
    canonical_id,
    lookup_keys,
    new_id,
)
from .....domain.shared_types import AppointmentDuration, AppointmentStatus
from .....utils import from_storage, to_storage, utcnow
from .errors import handle_error
from .mappers import appointment_to_domain, appointment_to_row

logger = logging.getLogger(__name__)

CANCELLED = AppointmentStatus.CANCELLED.value


class SqlAppointmentsRepository(AppointmentsRepository):
    def __init__(self, session: Session):
        self.session = session

    def _get_row(self, appointment_id: str) -> Optional[AppointmentRow]:
        keys = lookup_keys(APPOINTMENT_PREFIX, appointment_id)
        return self.session.exec(select(AppointmentRow).where(AppointmentRow.id.in_(keys))).first()

    def _not_found(self, appointment_id: str) -> RepositoryResult:
        return RepositoryResult.not_found(f"Appointment with ID {appointment_id} not found")

    def _lock_doctor(self, doctor_id: str) -> Optional[DoctorRow]:
        # Serializes bookings per doctor where the backend supports row locks
        keys = lookup_keys(DOCTOR_PREFIX, doctor_id)
        return self.session.exec(select(DoctorRow).where(DoctorRow.id.in_(keys)).with_for_update()).first()

    def _get_patient_row(self, patient_id: str) -> Optional[PatientRow]:
        keys = lookup_keys(PATIENT_PREFIX, patient_id)
        return self.session.exec(select(PatientRow).where(PatientRow.id.in_(keys))).first()

    def _conflict(self, doctor_id: str, start: datetime) -> RepositoryResult:
        return RepositoryResult.conflict(
            "Doctor is not available at the requested time",
            {"doctorId": doctor_id, "scheduledDateTime": start.isoformat()},
        )

    def has_conflict(self, doctor_id: str, start: datetime, duration: AppointmentDuration, exclude_id: Optional[str] = None) -> bool:
        try:
            proposed_start = from_storage(start)
            proposed_end = proposed_start + duration.as_timedelta()
            query = (
                select(AppointmentRow)
                .where(AppointmentRow.doctor_id.in_(lookup_keys(DOCTOR_PREFIX, doctor_id)))
                .where(AppointmentRow.status != CANCELLED)
                .where(AppointmentRow.scheduled_date_time < proposed_end)
            )
            if exclude_id:
                query = query.where(AppointmentRow.id.not_in(lookup_keys(APPOINTMENT_PREFIX, exclude_id)))
            candidates = self.session.exec(query).all()
            for existing in candidates:
                existing_end = from_storage(existing.scheduled_date_time) + timedelta(minutes=existing.duration)
                if existing_end > proposed_start:
                    return True
            return False
        except Exception as e:
            # Fail closed: an unreadable calendar is treated as busy
            logger.error(f"Error checking schedule conflict for doctor {doctor_id}: {e}")
            return True

    def create(self, data: NewAppointment) -> RepositoryResult[Appointment]:
        try:
            doctor_row = self._lock_doctor(data.doctor_id)
            if not doctor_row:
                self.session.rollback()
                return RepositoryResult.not_found(f"Doctor with ID {data.doctor_id} not found")
            patient_row = self._get_patient_row(data.patient_id)
            if not patient_row:
                self.session.rollback()
                return RepositoryResult.not_found(f"Patient with ID {data.patient_id} not found")
            if self.has_conflict(doctor_row.id, data.scheduled_date_time, data.duration):
                self.session.rollback()
                return self._conflict(canonical_id(DOCTOR_PREFIX, doctor_row.id), data.scheduled_date_time)

            appointment = Appointment(
                id=new_id(APPOINTMENT_PREFIX),
                patient_id=data.patient_id,
                doctor_id=data.doctor_id,
                type=data.type,
                status=data.status,
                scheduled_date_time=data.scheduled_date_time,
                duration=data.duration,
                reason_for_visit=data.reason_for_visit,
                notes=data.notes,
            )
            # foreign keys follow the parents' stored keys, legacy or not
            row = appointment_to_row(appointment, patient_key=patient_row.id, doctor_key=doctor_row.id)
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
            return RepositoryResult.ok(appointment_to_domain(row))
        except Exception as e:
            return handle_error(self.session, e, "Appointment", logger)

    def find_by_id(self, appointment_id: str) -> RepositoryResult[Appointment]:
        try:
            row = self._get_row(appointment_id)
            if not row:
                return self._not_found(appointment_id)
            return RepositoryResult.ok(appointment_to_domain(row))
        except Exception as e:
            return handle_error(self.session, e, "Appointment", logger)

    def find_by_patient_id(self, patient_id: str) -> RepositoryResult[List[Appointment]]:
        try:
            rows = self.session.exec(
                select(AppointmentRow)
                .where(AppointmentRow.patient_id.in_(lookup_keys(PATIENT_PREFIX, patient_id)))
                .order_by(AppointmentRow.scheduled_date_time.desc())
            ).all()
            return RepositoryResult.ok([appointment_to_domain(r) for r in rows])
        except Exception as e:
            return handle_error(self.session, e, "Appointment", logger)

    def find_by_doctor_id(self, doctor_id: str) -> RepositoryResult[List[Appointment]]:
        try:
            rows = self.session.exec(
                select(AppointmentRow)
                .where(AppointmentRow.doctor_id.in_(lookup_keys(DOCTOR_PREFIX, doctor_id)))
                .order_by(AppointmentRow.scheduled_date_time.asc())
            ).all()
            return RepositoryResult.ok([appointment_to_domain(r) for r in rows])
        except Exception as e:
            return handle_error(self.session, e, "Appointment", logger)

    def _apply_filters(self, query, filters: Optional[AppointmentFilters]):
        if not filters:
            return query
        if filters.patient_id:
            query = query.where(AppointmentRow.patient_id.in_(lookup_keys(PATIENT_PREFIX, filters.patient_id)))
        if filters.doctor_id:
            query = query.where(AppointmentRow.doctor_id.in_(lookup_keys(DOCTOR_PREFIX, filters.doctor_id)))
        if filters.status:
            query = query.where(AppointmentRow.status == filters.status.value)
        if filters.type:
            query = query.where(AppointmentRow.type == filters.type.value)
        if filters.scheduled_after:
            query = query.where(AppointmentRow.scheduled_date_time >= to_storage(filters.scheduled_after))
        if filters.scheduled_before:
            query = query.where(AppointmentRow.scheduled_date_time <= to_storage(filters.scheduled_before))
        return query

    def find_many(self, filters: Optional[AppointmentFilters] = None, limit: Optional[int] = None, offset: int = 0) -> RepositoryResult[List[Appointment]]:
        try:
            query = self._apply_filters(select(AppointmentRow), filters)
            query = query.order_by(AppointmentRow.scheduled_date_time.asc()).offset(offset)
            if limit:
                query = query.limit(limit)
            rows = self.session.exec(query).all()
            return RepositoryResult.ok([appointment_to_domain(r) for r in rows])
        except Exception as e:
            return handle_error(self.session, e, "Appointment", logger)

    def count(self, filters: Optional[AppointmentFilters] = None) -> RepositoryResult[int]:
        try:
            query = self._apply_filters(select(func.count()).select_from(AppointmentRow), filters)
            return RepositoryResult.ok(int(self.session.exec(query).one()))
        except Exception as e:
            return handle_error(self.session, e, "Appointment", logger)

    def _reactivates_or_moves(self, row: AppointmentRow, new_status: str, moves: bool) -> bool:
        if new_status == CANCELLED:
            return False
        return moves or row.status == CANCELLED

    def update(self, appointment_id: str, data: AppointmentUpdate) -> RepositoryResult[Appointment]:
        try:
            row = self._get_row(appointment_id)
            if not row:
                return self._not_found(appointment_id)

            current = appointment_to_domain(row)
            merged = replace(
                current,
                type=data.type or current.type,
                status=data.status or current.status,
                scheduled_date_time=data.scheduled_date_time or current.scheduled_date_time,
                duration=data.duration or current.duration,
                reason_for_visit=data.reason_for_visit if data.reason_for_visit is not None else current.reason_for_visit,
                notes=data.notes if data.notes is not None else current.notes,
            )
            if self._reactivates_or_moves(row, merged.status.value, data.changes_schedule()):
                self._lock_doctor(row.doctor_id)
                if self.has_conflict(row.doctor_id, merged.scheduled_date_time, merged.duration, exclude_id=row.id):
                    self.session.rollback()
                    return self._conflict(current.doctor_id, merged.scheduled_date_time)

            row = appointment_to_row(merged, row=row)
            row.updated_at = utcnow()
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
            return RepositoryResult.ok(appointment_to_domain(row))
        except Exception as e:
            return handle_error(self.session, e, "Appointment", logger)

    def update_status(self, appointment_id: str, status: AppointmentStatus) -> RepositoryResult[Appointment]:
        return self.update(appointment_id, AppointmentUpdate(status=status))

    def mark_checked_in(self, appointment_id: str, checked_in_at: datetime) -> RepositoryResult[Appointment]:
        try:
            row = self._get_row(appointment_id)
            if not row:
                return self._not_found(appointment_id)
            row.checked_in_at = to_storage(checked_in_at)
            row.status = AppointmentStatus.IN_PROGRESS.value
            row.updated_at = utcnow()
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
            return RepositoryResult.ok(appointment_to_domain(row))
        except Exception as e:
            return handle_error(self.session, e, "Appointment", logger)

    def delete(self, appointment_id: str) -> RepositoryResult[None]:
        try:
            row = self._get_row(appointment_id)
            if not row:
                return self._not_found(appointment_id)
            self.session.delete(row)
            self.session.commit()
            return RepositoryResult.ok(None)
        except Exception as e:
            return handle_error(self.session, e, "Appointment", logger)
