"""Appointment entity, overlap rule and status lifecycle.

An appointment occupies the half-open interval ``[start, start + duration)`` on
its doctor's calendar. Two appointments that merely touch (one ends exactly
when the other starts) do not overlap.
"""
from dataclasses import dataclass, field
from datetime import datetime, date, tzinfo
from typing import Dict, FrozenSet, Optional

from .shared_types import AppointmentDuration, AppointmentStatus, AppointmentType


@dataclass
class Appointment:
    id: str
    patient_id: str
    doctor_id: str
    type: AppointmentType
    status: AppointmentStatus
    scheduled_date_time: datetime
    duration: AppointmentDuration
    reason_for_visit: Optional[str] = None
    notes: Optional[str] = None
    checked_in_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def end_date_time(self) -> datetime:
        return self.duration.end_time(self.scheduled_date_time)

    @property
    def duration_minutes(self) -> int:
        return self.duration.minutes

    @property
    def blocks_calendar(self) -> bool:
        return self.status != AppointmentStatus.CANCELLED


@dataclass
class NewAppointment:
    """Appointment data before it has been persisted."""
    patient_id: str
    doctor_id: str
    type: AppointmentType
    scheduled_date_time: datetime
    duration: AppointmentDuration
    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    reason_for_visit: Optional[str] = None
    notes: Optional[str] = None


@dataclass
class AppointmentUpdate:
    """Partial update; ``None`` fields are left untouched."""
    type: Optional[AppointmentType] = None
    status: Optional[AppointmentStatus] = None
    scheduled_date_time: Optional[datetime] = None
    duration: Optional[AppointmentDuration] = None
    reason_for_visit: Optional[str] = None
    notes: Optional[str] = None

    def changes_schedule(self) -> bool:
        return self.scheduled_date_time is not None or self.duration is not None

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in self.__dataclass_fields__)


@dataclass
class AppointmentFilters:
    patient_id: Optional[str] = None
    doctor_id: Optional[str] = None
    status: Optional[AppointmentStatus] = None
    type: Optional[AppointmentType] = None
    scheduled_after: Optional[datetime] = None
    scheduled_before: Optional[datetime] = None


def create_appointment(
    patient_id: str,
    doctor_id: str,
    scheduled_date_time: datetime,
    appointment_type: AppointmentType,
    duration: Optional[AppointmentDuration] = None,
    reason_for_visit: Optional[str] = None,
    notes: Optional[str] = None,
) -> NewAppointment:
    reason = reason_for_visit.strip() if reason_for_visit else None
    return NewAppointment(
        patient_id=patient_id,
        doctor_id=doctor_id,
        type=appointment_type,
        scheduled_date_time=scheduled_date_time,
        duration=duration or AppointmentDuration.for_type(appointment_type),
        reason_for_visit=reason or None,
        notes=notes,
    )


def intervals_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    return a_start < b_end and a_end > b_start


# Lifecycle table, only enforced when ENFORCE_STATUS_TRANSITIONS is on
STATUS_TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
    AppointmentStatus.SCHEDULED: frozenset({
        AppointmentStatus.IN_PROGRESS,
        AppointmentStatus.CANCELLED,
        AppointmentStatus.NO_SHOW,
    }),
    AppointmentStatus.IN_PROGRESS: frozenset({
        AppointmentStatus.COMPLETED,
        AppointmentStatus.CANCELLED,
    }),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
    AppointmentStatus.NO_SHOW: frozenset(),
}


def can_transition_to(current: AppointmentStatus, new: AppointmentStatus) -> bool:
    if current == new:
        return True
    return new in STATUS_TRANSITIONS.get(current, frozenset())


def is_appointment_on(appointment: Appointment, day: date, clinic_tz: tzinfo) -> bool:
    return appointment.scheduled_date_time.astimezone(clinic_tz).date() == day
