from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Callable, List, Optional, Tuple

from ...domain import identifiers
from ...domain.appointment import (
    Appointment,
    AppointmentFilters,
    AppointmentUpdate,
    can_transition_to,
    create_appointment,
    intervals_overlap,
    is_appointment_on,
)
from ...domain.shared_types import AppointmentDuration, AppointmentStatus, AppointmentType
from ...exceptions import APIException
from ...utils import to_utc, utcnow
from ..ports.appointments_repo import AppointmentsRepository
from ..ports.audit_logger import AuditLogger
from ..ports.doctor_repo import DoctorRepository
from ..ports.patient_repo import PatientRepository
from ..ports.result import RepositoryResult

SLOT_STEP_MINUTES = 15


def unwrap(result: RepositoryResult):
    if not result.success:
        raise APIException.from_error(result.error)
    return result.data


@dataclass
class AppointmentsService:
    repo: AppointmentsRepository
    patient_repo: PatientRepository
    doctor_repo: DoctorRepository
    audit: AuditLogger
    clinic_tz: tzinfo = timezone.utc
    enforce_transitions: bool = False
    opening_hour: int = 9
    closing_hour: int = 18
    now: Callable[[], datetime] = field(default=utcnow)

    def book(
        self,
        patient_id: str,
        doctor_id: str,
        appointment_type: AppointmentType,
        scheduled_date_time: datetime,
        duration_minutes: Optional[int] = None,
        reason_for_visit: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Appointment:
        patient_id = identifiers.patient_id(patient_id)
        doctor_id = identifiers.doctor_id(doctor_id)
        duration = AppointmentDuration(duration_minutes) if duration_minutes is not None else None
        start = to_utc(scheduled_date_time, self.clinic_tz)

        if start < self.now():
            raise APIException.validation("Appointment time cannot be in the past")

        unwrap(self.patient_repo.find_by_id(patient_id))
        doctor = unwrap(self.doctor_repo.find_by_id(doctor_id))
        if not doctor.is_active:
            raise APIException.validation("Doctor is not accepting appointments", {"doctorId": doctor_id})

        new_appt = create_appointment(
            patient_id,
            doctor_id,
            start,
            appointment_type,
            duration=duration,
            reason_for_visit=reason_for_visit,
            notes=notes,
        )
        appt = unwrap(self.repo.create(new_appt))
        self.audit.log("appointment.booked", appt.id, details={
            "doctorId": appt.doctor_id,
            "patientId": appt.patient_id,
            "start": appt.scheduled_date_time.isoformat(),
            "durationMinutes": appt.duration_minutes,
        })
        return appt

    def has_conflict(self, doctor_id: str, scheduled_date_time: datetime, duration_minutes: int) -> bool:
        start = to_utc(scheduled_date_time, self.clinic_tz)
        return self.repo.has_conflict(identifiers.doctor_id(doctor_id), start, AppointmentDuration(duration_minutes))

    def get(self, appointment_id: str) -> Appointment:
        return unwrap(self.repo.find_by_id(identifiers.appointment_id(appointment_id)))

    def list(self, filters: Optional[AppointmentFilters] = None, limit: Optional[int] = None, offset: int = 0) -> Tuple[List[Appointment], int]:
        filters = filters or AppointmentFilters()
        if filters.patient_id:
            filters.patient_id = identifiers.patient_id(filters.patient_id)
        if filters.doctor_id:
            filters.doctor_id = identifiers.doctor_id(filters.doctor_id)
        if filters.scheduled_after:
            filters.scheduled_after = to_utc(filters.scheduled_after, self.clinic_tz)
        if filters.scheduled_before:
            filters.scheduled_before = to_utc(filters.scheduled_before, self.clinic_tz)
        items = unwrap(self.repo.find_many(filters, limit=limit, offset=offset))
        total = unwrap(self.repo.count(filters))
        return items, total

    def list_for_patient(self, patient_id: str, today_only: bool = False) -> List[Appointment]:
        patient_id = identifiers.patient_id(patient_id)
        unwrap(self.patient_repo.find_by_id(patient_id))
        items = unwrap(self.repo.find_by_patient_id(patient_id))
        if today_only:
            today = self.now().astimezone(self.clinic_tz).date()
            items = [a for a in items if is_appointment_on(a, today, self.clinic_tz)]
        return items

    def list_for_doctor(self, doctor_id: str) -> List[Appointment]:
        doctor_id = identifiers.doctor_id(doctor_id)
        unwrap(self.doctor_repo.find_by_id(doctor_id))
        return unwrap(self.repo.find_by_doctor_id(doctor_id))

    def _check_transition(self, current: AppointmentStatus, new: AppointmentStatus) -> None:
        if self.enforce_transitions and not can_transition_to(current, new):
            raise APIException.validation(
                f"Cannot change appointment status from {current.value} to {new.value}",
                {"from": current.value, "to": new.value},
            )

    def update(
        self,
        appointment_id: str,
        appointment_type: Optional[AppointmentType] = None,
        status: Optional[AppointmentStatus] = None,
        scheduled_date_time: Optional[datetime] = None,
        duration_minutes: Optional[int] = None,
        reason_for_visit: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Appointment:
        current = self.get(appointment_id)
        changes = AppointmentUpdate(
            type=appointment_type,
            status=status,
            scheduled_date_time=to_utc(scheduled_date_time, self.clinic_tz) if scheduled_date_time else None,
            duration=AppointmentDuration(duration_minutes) if duration_minutes is not None else None,
            reason_for_visit=reason_for_visit.strip() if reason_for_visit is not None else None,
            notes=notes,
        )
        if changes.is_empty():
            return current
        if status is not None:
            self._check_transition(current.status, status)
        if changes.scheduled_date_time and changes.scheduled_date_time < self.now():
            raise APIException.validation("Appointment time cannot be in the past")

        updated = unwrap(self.repo.update(current.id, changes))
        if status is not None and status != current.status:
            self._audit_status(current, updated)
        return updated

    def set_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment:
        current = self.get(appointment_id)
        self._check_transition(current.status, status)
        updated = unwrap(self.repo.update_status(current.id, status))
        if status != current.status:
            self._audit_status(current, updated)
        return updated

    def cancel(self, appointment_id: str) -> Appointment:
        return self.set_status(appointment_id, AppointmentStatus.CANCELLED)

    def check_in(self, appointment_id: str) -> Appointment:
        current = self.get(appointment_id)
        if current.status != AppointmentStatus.SCHEDULED:
            raise APIException.validation(
                f"Only scheduled appointments can be checked in (current status: {current.status.value})"
            )
        now = self.now()
        today = now.astimezone(self.clinic_tz).date()
        if not is_appointment_on(current, today, self.clinic_tz):
            raise APIException.validation("Appointment is not scheduled for today")

        updated = unwrap(self.repo.mark_checked_in(current.id, now))
        self.audit.log("appointment.checked_in", updated.id, details={"checkedInAt": now.isoformat()})
        return updated

    def delete(self, appointment_id: str) -> None:
        appointment_id = identifiers.appointment_id(appointment_id)
        unwrap(self.repo.delete(appointment_id))
        self.audit.log("appointment.deleted", appointment_id)

    def available_slots(self, doctor_id: str, day: date, duration_minutes: int = 30) -> List[datetime]:
        """Free start times for ``doctor_id`` on ``day``, clinic-local, on a 15 minute grid."""
        doctor_id = identifiers.doctor_id(doctor_id)
        duration = AppointmentDuration(duration_minutes)
        doctor = unwrap(self.doctor_repo.find_by_id(doctor_id))
        if not doctor.is_active:
            return []

        opening = datetime.combine(day, time(self.opening_hour), tzinfo=self.clinic_tz)
        closing = datetime.combine(day, time(self.closing_hour), tzinfo=self.clinic_tz)
        # longest allowed appointment may start before opening and still overlap
        window = AppointmentFilters(
            doctor_id=doctor_id,
            scheduled_after=opening - timedelta(minutes=180),
            scheduled_before=closing,
        )
        booked = [a for a in unwrap(self.repo.find_many(window)) if a.blocks_calendar]

        now = self.now()
        slots = []
        start = opening
        while start + duration.as_timedelta() <= closing:
            end = start + duration.as_timedelta()
            if start >= now and not any(
                intervals_overlap(start, end, a.scheduled_date_time, a.end_date_time) for a in booked
            ):
                slots.append(start)
            start += timedelta(minutes=SLOT_STEP_MINUTES)
        return slots

    def _audit_status(self, before: Appointment, after: Appointment) -> None:
        self.audit.log("appointment.status_changed", after.id, details={
            "from": before.status.value,
            "to": after.status.value,
        })
