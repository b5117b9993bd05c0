"""Row <-> domain translation.

Ids are canonicalized in both directions: a legacy unprefixed or
double-prefixed value never leaks past the database layer, and new rows are
written with the prefix exactly once. An existing row keeps its stored keys,
and foreign keys point at whatever key the parent row is stored under.
"""
from typing import Optional, Tuple

from .....db.models import Appointment as AppointmentRow
from .....db.models import Doctor as DoctorRow
from .....db.models import Patient as PatientRow
from .....db.models import User as UserRow
from .....domain.appointment import Appointment
from .....domain.doctor import Doctor
from .....domain.identifiers import (
    APPOINTMENT_PREFIX,
    DOCTOR_PREFIX,
    PATIENT_PREFIX,
    USER_PREFIX,
    canonical_id,
    new_id,
)
from .....domain.patient import Patient
from .....domain.shared_types import (
    AppointmentDuration,
    AppointmentStatus,
    AppointmentType,
    EmailAddress,
    PhoneNumber,
    UserRole,
)
from .....utils import from_storage, to_storage


def appointment_to_domain(row: AppointmentRow) -> Appointment:
    return Appointment(
        id=canonical_id(APPOINTMENT_PREFIX, row.id),
        patient_id=canonical_id(PATIENT_PREFIX, row.patient_id),
        doctor_id=canonical_id(DOCTOR_PREFIX, row.doctor_id),
        type=AppointmentType(row.type),
        status=AppointmentStatus(row.status),
        scheduled_date_time=from_storage(row.scheduled_date_time),
        duration=AppointmentDuration(row.duration),
        reason_for_visit=row.reason_for_visit,
        notes=row.notes,
        checked_in_at=from_storage(row.checked_in_at),
        created_at=from_storage(row.created_at),
        updated_at=from_storage(row.updated_at),
    )


def patient_to_domain(user: UserRow, row: PatientRow) -> Patient:
    return Patient(
        id=canonical_id(PATIENT_PREFIX, row.id),
        auth_user_id=user.auth_user_id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=EmailAddress(user.email),
        phone=PhoneNumber(row.phone),
        date_of_birth=row.date_of_birth,
        address=row.address or None,
        created_at=from_storage(row.created_at),
        updated_at=from_storage(row.updated_at),
    )


def doctor_to_domain(user: UserRow, row: DoctorRow) -> Doctor:
    return Doctor(
        id=canonical_id(DOCTOR_PREFIX, row.id),
        auth_user_id=user.auth_user_id,
        first_name=row.first_name,
        last_name=row.last_name,
        email=EmailAddress(user.email),
        specialization=row.specialization,
        is_active=bool(row.is_active),
        created_at=from_storage(row.created_at),
        updated_at=from_storage(row.updated_at),
    )


def appointment_to_row(
    appointment: Appointment,
    row: Optional[AppointmentRow] = None,
    patient_key: Optional[str] = None,
    doctor_key: Optional[str] = None,
) -> AppointmentRow:
    if row is None:
        row = AppointmentRow(
            id=canonical_id(APPOINTMENT_PREFIX, appointment.id),
            patient_id=patient_key or canonical_id(PATIENT_PREFIX, appointment.patient_id),
            doctor_id=doctor_key or canonical_id(DOCTOR_PREFIX, appointment.doctor_id),
            type=appointment.type.value,
            scheduled_date_time=to_storage(appointment.scheduled_date_time),
            duration=appointment.duration.minutes,
        )
    row.type = appointment.type.value
    row.status = appointment.status.value
    row.scheduled_date_time = to_storage(appointment.scheduled_date_time)
    row.duration = appointment.duration.minutes
    row.reason_for_visit = appointment.reason_for_visit
    row.notes = appointment.notes
    row.checked_in_at = to_storage(appointment.checked_in_at)
    return row


def _user_row(user: Optional[UserRow], role: UserRole) -> UserRow:
    if user is not None:
        return user
    return UserRow(id=new_id(USER_PREFIX), first_name="", last_name="", email="", role=role.value)


def patient_to_rows(
    patient: Patient,
    user: Optional[UserRow] = None,
    row: Optional[PatientRow] = None,
) -> Tuple[UserRow, PatientRow]:
    user = _user_row(user, UserRole.PATIENT)
    user.auth_user_id = patient.auth_user_id
    user.first_name = patient.first_name
    user.last_name = patient.last_name
    user.email = patient.email.value
    if row is None:
        row = PatientRow(
            id=canonical_id(PATIENT_PREFIX, patient.id),
            user_id=user.id,
            phone=patient.phone.value,
            date_of_birth=patient.date_of_birth,
        )
    row.phone = patient.phone.value
    row.date_of_birth = patient.date_of_birth
    row.address = patient.address or None
    return user, row


def doctor_to_rows(
    doctor: Doctor,
    user: Optional[UserRow] = None,
    row: Optional[DoctorRow] = None,
) -> Tuple[UserRow, DoctorRow]:
    user = _user_row(user, UserRole.DOCTOR)
    user.auth_user_id = doctor.auth_user_id
    user.first_name = doctor.first_name
    user.last_name = doctor.last_name
    user.email = doctor.email.value
    if row is None:
        row = DoctorRow(
            id=canonical_id(DOCTOR_PREFIX, doctor.id),
            user_id=user.id,
            first_name=doctor.first_name,
            last_name=doctor.last_name,
        )
    row.first_name = doctor.first_name
    row.last_name = doctor.last_name
    row.specialization = doctor.specialization or None
    row.is_active = doctor.is_active
    return user, row
