from typing import List, Optional, Protocol
from datetime import datetime

from ...domain.appointment import Appointment, AppointmentFilters, AppointmentUpdate, NewAppointment
from ...domain.shared_types import AppointmentDuration, AppointmentStatus
from .result import RepositoryResult


class AppointmentsRepository(Protocol):
    def create(self, data: NewAppointment) -> RepositoryResult[Appointment]:
        ...

    def find_by_id(self, appointment_id: str) -> RepositoryResult[Appointment]:
        ...

    def find_by_patient_id(self, patient_id: str) -> RepositoryResult[List[Appointment]]:
        ...

    def find_by_doctor_id(self, doctor_id: str) -> RepositoryResult[List[Appointment]]:
        ...

    def find_many(self, filters: Optional[AppointmentFilters] = None, limit: Optional[int] = None, offset: int = 0) -> RepositoryResult[List[Appointment]]:
        ...

    def update(self, appointment_id: str, data: AppointmentUpdate) -> RepositoryResult[Appointment]:
        ...

    def update_status(self, appointment_id: str, status: AppointmentStatus) -> RepositoryResult[Appointment]:
        ...

    def mark_checked_in(self, appointment_id: str, checked_in_at: datetime) -> RepositoryResult[Appointment]:
        ...

    def delete(self, appointment_id: str) -> RepositoryResult[None]:
        ...

    def count(self, filters: Optional[AppointmentFilters] = None) -> RepositoryResult[int]:
        ...

    def has_conflict(self, doctor_id: str, start: datetime, duration: AppointmentDuration, exclude_id: Optional[str] = None) -> bool:
        ...
