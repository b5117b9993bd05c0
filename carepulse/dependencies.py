from fastapi import Depends
from sqlmodel import Session

from .application.ports.audit_logger import AuditLogger
from .application.services.appointments_service import AppointmentsService
from .application.services.doctors_service import DoctorsService
from .application.services.patients_service import PatientsService
from .core.config import Settings, get_settings
from .database import get_session
from .infrastructure.audit.std_logger import StdAuditLogger
from .infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository
from .infrastructure.persistence.sqlalchemy.repositories.doctor_repository_sql import SqlDoctorRepository
from .infrastructure.persistence.sqlalchemy.repositories.patient_repository_sql import SqlPatientRepository

_audit_logger = StdAuditLogger()


def get_audit_logger() -> AuditLogger:
    return _audit_logger


def get_appointments_service(
    session: Session = Depends(get_session),
    audit: AuditLogger = Depends(get_audit_logger),
    settings: Settings = Depends(get_settings),
) -> AppointmentsService:
    return AppointmentsService(
        repo=SqlAppointmentsRepository(session),
        patient_repo=SqlPatientRepository(session),
        doctor_repo=SqlDoctorRepository(session),
        audit=audit,
        clinic_tz=settings.clinic_tz,
        enforce_transitions=settings.ENFORCE_STATUS_TRANSITIONS,
        opening_hour=settings.OPENING_HOUR,
        closing_hour=settings.CLOSING_HOUR,
    )


def get_patients_service(
    session: Session = Depends(get_session),
    audit: AuditLogger = Depends(get_audit_logger),
) -> PatientsService:
    return PatientsService(repo=SqlPatientRepository(session), audit=audit)


def get_doctors_service(
    session: Session = Depends(get_session),
    audit: AuditLogger = Depends(get_audit_logger),
) -> DoctorsService:
    return DoctorsService(repo=SqlDoctorRepository(session), audit=audit)
