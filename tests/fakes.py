from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

from carepulse.application.ports.result import RepositoryResult
from carepulse.domain.appointment import Appointment, AppointmentFilters, AppointmentUpdate, NewAppointment, intervals_overlap
from carepulse.domain.doctor import Doctor, DoctorFilters, DoctorUpdate, NewDoctor
from carepulse.domain.identifiers import new_id
from carepulse.domain.patient import NewPatient, Patient, PatientUpdate
from carepulse.domain.shared_types import AppointmentStatus


class FakeAppointmentsRepo:
    def __init__(self):
        self.appts: Dict[str, Appointment] = {}
        self.fail_conflict_check = False

    def has_conflict(self, doctor_id, start, duration, exclude_id=None) -> bool:
        if self.fail_conflict_check:
            return True
        end = start + duration.as_timedelta()
        return any(
            a.doctor_id == doctor_id and a.blocks_calendar and a.id != exclude_id
            and intervals_overlap(start, end, a.scheduled_date_time, a.end_date_time)
            for a in self.appts.values()
        )

    def create(self, data: NewAppointment):
        if self.has_conflict(data.doctor_id, data.scheduled_date_time, data.duration):
            return RepositoryResult.conflict("Doctor is not available at the requested time")
        appt = Appointment(
            id=new_id("appt"),
            patient_id=data.patient_id,
            doctor_id=data.doctor_id,
            type=data.type,
            status=data.status,
            scheduled_date_time=data.scheduled_date_time,
            duration=data.duration,
            reason_for_visit=data.reason_for_visit,
            notes=data.notes,
            created_at=datetime.now(timezone.utc),
        )
        self.appts[appt.id] = appt
        return RepositoryResult.ok(appt)

    def find_by_id(self, appointment_id):
        appt = self.appts.get(appointment_id)
        if not appt:
            return RepositoryResult.not_found(f"Appointment with ID {appointment_id} not found")
        return RepositoryResult.ok(appt)

    def find_by_patient_id(self, patient_id):
        items = [a for a in self.appts.values() if a.patient_id == patient_id]
        return RepositoryResult.ok(sorted(items, key=lambda a: a.scheduled_date_time, reverse=True))

    def find_by_doctor_id(self, doctor_id):
        items = [a for a in self.appts.values() if a.doctor_id == doctor_id]
        return RepositoryResult.ok(sorted(items, key=lambda a: a.scheduled_date_time))

    def _matching(self, filters: Optional[AppointmentFilters]) -> List[Appointment]:
        items = sorted(self.appts.values(), key=lambda a: a.scheduled_date_time)
        if not filters:
            return items
        if filters.patient_id:
            items = [a for a in items if a.patient_id == filters.patient_id]
        if filters.doctor_id:
            items = [a for a in items if a.doctor_id == filters.doctor_id]
        if filters.status:
            items = [a for a in items if a.status == filters.status]
        if filters.scheduled_after:
            items = [a for a in items if a.scheduled_date_time >= filters.scheduled_after]
        if filters.scheduled_before:
            items = [a for a in items if a.scheduled_date_time <= filters.scheduled_before]
        return items

    def find_many(self, filters=None, limit=None, offset=0):
        items = self._matching(filters)[offset:]
        return RepositoryResult.ok(items[:limit] if limit else items)

    def count(self, filters=None):
        return RepositoryResult.ok(len(self._matching(filters)))

    def update(self, appointment_id, data: AppointmentUpdate):
        appt = self.appts.get(appointment_id)
        if not appt:
            return RepositoryResult.not_found(f"Appointment with ID {appointment_id} not found")
        status = data.status or appt.status
        start = data.scheduled_date_time or appt.scheduled_date_time
        duration = data.duration or appt.duration
        reactivates = appt.status == AppointmentStatus.CANCELLED
        if status != AppointmentStatus.CANCELLED and (data.changes_schedule() or reactivates):
            if self.has_conflict(appt.doctor_id, start, duration, exclude_id=appt.id):
                return RepositoryResult.conflict("Doctor is not available at the requested time")
        updated = replace(
            appt,
            type=data.type or appt.type,
            status=status,
            scheduled_date_time=start,
            duration=duration,
            reason_for_visit=data.reason_for_visit if data.reason_for_visit is not None else appt.reason_for_visit,
            notes=data.notes if data.notes is not None else appt.notes,
        )
        self.appts[appointment_id] = updated
        return RepositoryResult.ok(updated)

    def update_status(self, appointment_id, status):
        return self.update(appointment_id, AppointmentUpdate(status=status))

    def mark_checked_in(self, appointment_id, checked_in_at):
        appt = self.appts[appointment_id]
        updated = replace(appt, checked_in_at=checked_in_at, status=AppointmentStatus.IN_PROGRESS)
        self.appts[appointment_id] = updated
        return RepositoryResult.ok(updated)

    def delete(self, appointment_id):
        if self.appts.pop(appointment_id, None) is None:
            return RepositoryResult.not_found(f"Appointment with ID {appointment_id} not found")
        return RepositoryResult.ok(None)


class FakePatientRepo:
    def __init__(self):
        self.patients: Dict[str, Patient] = {}

    def add(self, first_name="Wei Ling", email="weiling@example.com", phone="91234567", dob=None) -> Patient:
        from datetime import date
        from carepulse.domain.patient import create_patient
        result = self.create(create_patient(None, first_name, "Goh", email, phone, dob or date(1990, 1, 1)))
        return result.data

    def create(self, data: NewPatient):
        patient = Patient(id=new_id("patient"), **data.__dict__)
        self.patients[patient.id] = patient
        return RepositoryResult.ok(patient)

    def find_by_id(self, patient_id):
        patient = self.patients.get(patient_id)
        if not patient:
            return RepositoryResult.not_found(f"Patient with ID {patient_id} not found")
        return RepositoryResult.ok(patient)

    def find_by_phone(self, phone):
        found = next((p for p in self.patients.values() if p.phone == phone), None)
        if not found:
            return RepositoryResult.not_found(f"Patient with phone {phone.value} not found")
        return RepositoryResult.ok(found)

    def find_by_email(self, email):
        found = next((p for p in self.patients.values() if p.email == email), None)
        if not found:
            return RepositoryResult.not_found(f"Patient with email {email.value} not found")
        return RepositoryResult.ok(found)

    def email_exists(self, email) -> bool:
        return any(p.email == email for p in self.patients.values())

    def phone_exists(self, phone) -> bool:
        return any(p.phone == phone for p in self.patients.values())

    def update(self, patient_id, data: PatientUpdate):
        patient = self.patients.get(patient_id)
        if not patient:
            return RepositoryResult.not_found(f"Patient with ID {patient_id} not found")
        changes = {k: v for k, v in data.__dict__.items() if v is not None}
        updated = replace(patient, **changes)
        self.patients[patient_id] = updated
        return RepositoryResult.ok(updated)

    def delete(self, patient_id):
        if self.patients.pop(patient_id, None) is None:
            return RepositoryResult.not_found(f"Patient with ID {patient_id} not found")
        return RepositoryResult.ok(None)

    def find_many(self, filters=None, limit=None, offset=0):
        items = list(self.patients.values())
        if filters and filters.email:
            items = [p for p in items if p.email == filters.email]
        return RepositoryResult.ok((items, len(items)))


class FakeDoctorRepo:
    def __init__(self):
        self.doctors: Dict[str, Doctor] = {}

    def add(self, last_name="Tan", specialization="General Practice", is_active=True) -> Doctor:
        from carepulse.domain.doctor import create_doctor
        email = f"{last_name.lower()}@carepulse.sg"
        return self.create(create_doctor(None, "Sarah", last_name, email, specialization, is_active)).data

    def create(self, data: NewDoctor):
        doctor = Doctor(id=new_id("doctor"), **data.__dict__)
        self.doctors[doctor.id] = doctor
        return RepositoryResult.ok(doctor)

    def find_by_id(self, doctor_id):
        doctor = self.doctors.get(doctor_id)
        if not doctor:
            return RepositoryResult.not_found(f"Doctor with ID {doctor_id} not found")
        return RepositoryResult.ok(doctor)

    def find_many(self, filters: Optional[DoctorFilters] = None):
        items = list(self.doctors.values())
        if filters and filters.is_active is not None:
            items = [d for d in items if d.is_active == filters.is_active]
        if filters and filters.specialization:
            items = [d for d in items if filters.specialization.lower() in (d.specialization or "").lower()]
        return RepositoryResult.ok(items)

    def find_active(self):
        return self.find_many(DoctorFilters(is_active=True))

    def find_by_specialization(self, specialization):
        return self.find_many(DoctorFilters(specialization=specialization, is_active=True))

    def update(self, doctor_id, data: DoctorUpdate):
        doctor = self.doctors.get(doctor_id)
        if not doctor:
            return RepositoryResult.not_found(f"Doctor with ID {doctor_id} not found")
        changes = {k: v for k, v in data.__dict__.items() if v is not None}
        updated = replace(doctor, **changes)
        self.doctors[doctor_id] = updated
        return RepositoryResult.ok(updated)

    def delete(self, doctor_id):
        if self.doctors.pop(doctor_id, None) is None:
            return RepositoryResult.not_found(f"Doctor with ID {doctor_id} not found")
        return RepositoryResult.ok(None)


class FakeAudit:
    def __init__(self):
        self.entries = []

    def log(self, action, entity_id, actor_id=None, request_id=None, success=True, details=None):
        self.entries.append((action, entity_id, details or {}))
