"""Demo data for local development.

Run with ``python -m carepulse.seed``. Existing rows are removed first.
"""
import logging
from datetime import date, datetime, time, timedelta

from sqlalchemy import delete
from sqlmodel import Session

from .core.config import settings
from .database import create_db_and_tables, engine
from .db.models import Appointment as AppointmentRow
from .db.models import Doctor as DoctorRow
from .db.models import Patient as PatientRow
from .db.models import User as UserRow
from .domain.appointment import AppointmentUpdate, create_appointment
from .domain.doctor import create_doctor
from .domain.patient import create_patient
from .domain.shared_types import AppointmentStatus, AppointmentType
from .infrastructure.persistence.sqlalchemy.repositories.appointments_repository_sql import SqlAppointmentsRepository
from .infrastructure.persistence.sqlalchemy.repositories.doctor_repository_sql import SqlDoctorRepository
from .infrastructure.persistence.sqlalchemy.repositories.patient_repository_sql import SqlPatientRepository

logger = logging.getLogger(__name__)

DOCTORS = [
    ("Sarah", "Tan", "sarah.tan@carepulse.sg", "General Practice"),
    ("Michael", "Lim", "michael.lim@carepulse.sg", "Cardiology"),
    ("Priya", "Nair", "priya.nair@carepulse.sg", "Pediatrics"),
]

PATIENTS = [
    ("Wei Ling", "Goh", "weiling.goh@example.com", "+65 9123 4567", date(1988, 4, 12), "10 Tampines Ave 1"),
    ("Ahmad", "Rahman", "ahmad.rahman@example.com", "8234 5678", date(1975, 11, 3), "22 Bedok North Rd"),
    ("Mei", "Chen", "mei.chen@example.com", "+65-6345-6789", date(2015, 6, 21), None),
]

# (patient index, doctor index, day offset, local time, type, status)
APPOINTMENTS = [
    (0, 0, -7, time(10, 0), AppointmentType.FIRST_CONSULT, AppointmentStatus.COMPLETED),
    (1, 1, -2, time(14, 30), AppointmentType.CHECK_UP, AppointmentStatus.NO_SHOW),
    (0, 0, 0, time(9, 0), AppointmentType.FOLLOW_UP, AppointmentStatus.SCHEDULED),
    (1, 0, 0, time(9, 30), AppointmentType.CHECK_UP, AppointmentStatus.SCHEDULED),
    (2, 2, 0, time(11, 0), AppointmentType.FIRST_CONSULT, AppointmentStatus.SCHEDULED),
    (1, 1, 1, time(15, 0), AppointmentType.FOLLOW_UP, AppointmentStatus.SCHEDULED),
    (2, 0, 3, time(16, 0), AppointmentType.CHECK_UP, AppointmentStatus.CANCELLED),
]


def clear_database(session: Session) -> None:
    for model in (AppointmentRow, PatientRow, DoctorRow, UserRow):
        session.exec(delete(model))
    session.commit()


def seed_database(bind=None, today: date = None) -> dict:
    tz = settings.clinic_tz
    today = today or datetime.now(tz).date()
    create_db_and_tables(bind)

    with Session(bind or engine) as session:
        clear_database(session)
        doctor_repo = SqlDoctorRepository(session)
        patient_repo = SqlPatientRepository(session)
        appointment_repo = SqlAppointmentsRepository(session)

        doctors = []
        for first, last, email, specialization in DOCTORS:
            result = doctor_repo.create(create_doctor(None, first, last, email, specialization))
            if not result.success:
                raise RuntimeError(f"Seeding doctor {email} failed: {result.error.message}")
            doctors.append(result.data)

        patients = []
        for first, last, email, phone, dob, address in PATIENTS:
            result = patient_repo.create(create_patient(None, first, last, email, phone, dob, address))
            if not result.success:
                raise RuntimeError(f"Seeding patient {email} failed: {result.error.message}")
            patients.append(result.data)

        booked = 0
        for p_idx, d_idx, offset, local_time, appt_type, status in APPOINTMENTS:
            start = datetime.combine(today + timedelta(days=offset), local_time, tzinfo=tz)
            new_appt = create_appointment(
                patients[p_idx].id, doctors[d_idx].id, start, appt_type,
                reason_for_visit="Seeded demo appointment",
            )
            result = appointment_repo.create(new_appt)
            if not result.success:
                logger.warning(f"Skipped demo appointment at {start.isoformat()}: {result.error.message}")
                continue
            if status != AppointmentStatus.SCHEDULED:
                appointment_repo.update(result.data.id, AppointmentUpdate(status=status))
            booked += 1

    summary = {"doctors": len(doctors), "patients": len(patients), "appointments": booked}
    logger.info(f"Seeded demo data: {summary}")
    return summary


if __name__ == "__main__":
    logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO), format=settings.LOG_FORMAT)
    seed_database()
