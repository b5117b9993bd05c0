from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from carepulse.application.services.appointments_service import AppointmentsService
from carepulse.domain.appointment import AppointmentFilters
from carepulse.domain.errors import DomainValidationError, ErrorType
from carepulse.domain.shared_types import AppointmentStatus, AppointmentType
from carepulse.exceptions import APIException

from fakes import FakeAppointmentsRepo, FakeAudit, FakeDoctorRepo, FakePatientRepo

SGT = ZoneInfo("Asia/Singapore")
# 10:00 in Singapore
NOW = datetime(2030, 3, 4, 2, 0, tzinfo=timezone.utc)


def local(hour, minute=0, day=4):
    return datetime(2030, 3, day, hour, minute)


def make_service(enforce=False):
    repo = FakeAppointmentsRepo()
    patients = FakePatientRepo()
    doctors = FakeDoctorRepo()
    audit = FakeAudit()
    svc = AppointmentsService(
        repo=repo,
        patient_repo=patients,
        doctor_repo=doctors,
        audit=audit,
        clinic_tz=SGT,
        enforce_transitions=enforce,
        now=lambda: NOW,
    )
    return svc, patients.add(), doctors.add(), audit


def test_book_success_defaults_duration_and_audits():
    svc, patient, doctor, audit = make_service()
    appt = svc.book(patient.id, doctor.id, AppointmentType.FIRST_CONSULT, local(14))
    assert appt.status == AppointmentStatus.SCHEDULED
    assert appt.duration_minutes == 90
    # naive input is clinic-local wall time
    assert appt.scheduled_date_time == datetime(2030, 3, 4, 6, 0, tzinfo=timezone.utc)
    assert audit.entries[0][0] == "appointment.booked"


def test_book_accepts_ids_without_prefix():
    svc, patient, doctor, _ = make_service()
    bare_doctor = doctor.id[len("doctor_"):]
    appt = svc.book(patient.id, bare_doctor, AppointmentType.CHECK_UP, local(11))
    assert appt.doctor_id == doctor.id


def test_back_to_back_accepted_overlap_rejected():
    svc, patient, doctor, _ = make_service()
    svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11), duration_minutes=30)
    svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11, 30), duration_minutes=30)
    with pytest.raises(APIException) as exc:
        svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11, 15), duration_minutes=30)
    assert exc.value.status_code == 409
    assert exc.value.error_type == ErrorType.CONFLICT


def test_other_doctor_is_not_blocked():
    svc, patient, doctor, _ = make_service()
    other = svc.doctor_repo.add(last_name="Lim")
    svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11))
    appt = svc.book(patient.id, other.id, AppointmentType.CHECK_UP, local(11))
    assert appt.doctor_id == other.id


def test_book_rejects_past_time_unknown_patient_and_inactive_doctor():
    svc, patient, doctor, _ = make_service()
    with pytest.raises(APIException) as exc:
        svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(9))
    assert exc.value.status_code == 400

    with pytest.raises(APIException) as exc:
        svc.book("patient_missing", doctor.id, AppointmentType.CHECK_UP, local(11))
    assert exc.value.status_code == 404

    inactive = svc.doctor_repo.add(last_name="Ong", is_active=False)
    with pytest.raises(APIException) as exc:
        svc.book(patient.id, inactive.id, AppointmentType.CHECK_UP, local(11))
    assert exc.value.error_type == ErrorType.VALIDATION


def test_book_rejects_unsupported_duration():
    svc, patient, doctor, _ = make_service()
    with pytest.raises(DomainValidationError):
        svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11), duration_minutes=20)


def test_conflict_check_failure_blocks_booking():
    svc, patient, doctor, _ = make_service()
    svc.repo.fail_conflict_check = True
    with pytest.raises(APIException) as exc:
        svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11))
    assert exc.value.status_code == 409


def test_cancel_frees_the_slot():
    svc, patient, doctor, _ = make_service()
    first = svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11))
    cancelled = svc.cancel(first.id)
    assert cancelled.status == AppointmentStatus.CANCELLED
    again = svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11))
    assert again.status == AppointmentStatus.SCHEDULED


def test_reactivating_cancelled_appointment_rechecks_conflicts():
    svc, patient, doctor, _ = make_service()
    first = svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11))
    svc.cancel(first.id)
    svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11))
    with pytest.raises(APIException) as exc:
        svc.set_status(first.id, AppointmentStatus.SCHEDULED)
    assert exc.value.status_code == 409


@pytest.mark.parametrize("status", list(AppointmentStatus))
def test_any_status_allowed_by_default(status):
    svc, patient, doctor, audit = make_service()
    appt = svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11))
    svc.set_status(appt.id, AppointmentStatus.COMPLETED)
    updated = svc.set_status(appt.id, status)
    assert updated.status == status


def test_enforced_transitions_reject_illegal_moves():
    svc, patient, doctor, _ = make_service(enforce=True)
    appt = svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11))
    with pytest.raises(APIException) as exc:
        svc.set_status(appt.id, AppointmentStatus.COMPLETED)
    assert exc.value.status_code == 400
    assert svc.set_status(appt.id, AppointmentStatus.IN_PROGRESS).status == AppointmentStatus.IN_PROGRESS
    assert svc.set_status(appt.id, AppointmentStatus.COMPLETED).status == AppointmentStatus.COMPLETED


def test_status_change_is_audited():
    svc, patient, doctor, audit = make_service()
    appt = svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11))
    svc.set_status(appt.id, AppointmentStatus.NO_SHOW)
    action, entity_id, details = audit.entries[-1]
    assert action == "appointment.status_changed"
    assert entity_id == appt.id
    assert details == {"from": "SCHEDULED", "to": "NO_SHOW"}


def test_rewriting_same_status_is_not_audited():
    svc, patient, doctor, audit = make_service()
    appt = svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11))
    assert svc.set_status(appt.id, AppointmentStatus.SCHEDULED).status == AppointmentStatus.SCHEDULED
    assert [a for a, _, _ in audit.entries if a == "appointment.status_changed"] == []


def test_reschedule_excludes_itself_from_conflict_check():
    svc, patient, doctor, _ = make_service()
    appt = svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11), duration_minutes=30)
    moved = svc.update(appt.id, scheduled_date_time=local(11, 15))
    assert moved.scheduled_date_time == datetime(2030, 3, 4, 3, 15, tzinfo=timezone.utc)

    svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(12), duration_minutes=30)
    with pytest.raises(APIException) as exc:
        svc.update(appt.id, duration_minutes=60)
    assert exc.value.status_code == 409


def test_empty_update_returns_current():
    svc, patient, doctor, _ = make_service()
    appt = svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11))
    assert svc.update(appt.id) == appt


def test_check_in_today_only_from_scheduled():
    svc, patient, doctor, audit = make_service()
    today = svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11))
    tomorrow = svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11, day=5))

    checked = svc.check_in(today.id)
    assert checked.status == AppointmentStatus.IN_PROGRESS
    assert checked.checked_in_at == NOW
    assert audit.entries[-1][0] == "appointment.checked_in"

    with pytest.raises(APIException):
        svc.check_in(today.id)
    with pytest.raises(APIException) as exc:
        svc.check_in(tomorrow.id)
    assert "today" in exc.value.message


def test_get_and_delete():
    svc, patient, doctor, _ = make_service()
    appt = svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11))
    assert svc.get(appt.id) == appt
    assert svc.get(f"appt_{appt.id}").id == appt.id
    svc.delete(appt.id)
    with pytest.raises(APIException) as exc:
        svc.get(appt.id)
    assert exc.value.status_code == 404


def test_list_filters_and_counts():
    svc, patient, doctor, _ = make_service()
    other = svc.doctor_repo.add(last_name="Lim")
    svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11))
    svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(12))
    svc.book(patient.id, other.id, AppointmentType.CHECK_UP, local(12))

    items, total = svc.list(AppointmentFilters(doctor_id=doctor.id), limit=1)
    assert total == 2
    assert len(items) == 1

    _, total = svc.list()
    assert total == 3


def test_list_for_patient_today_only():
    svc, patient, doctor, _ = make_service()
    svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11))
    svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11, day=6))
    assert len(svc.list_for_patient(patient.id)) == 2
    todays = svc.list_for_patient(patient.id, today_only=True)
    assert [a.scheduled_date_time.astimezone(SGT).day for a in todays] == [4]


def test_available_slots_skip_booked_and_past_times():
    svc, patient, doctor, _ = make_service()
    svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11), duration_minutes=30)

    slots = svc.available_slots(doctor.id, date(2030, 3, 4), duration_minutes=30)
    clock = [(s.hour, s.minute) for s in slots]
    # now is 10:00 local
    assert clock[0] == (10, 0)
    assert (10, 30) in clock
    assert (10, 45) not in clock
    assert (11, 0) not in clock
    assert (11, 15) not in clock
    assert (11, 30) in clock
    assert clock[-1] == (17, 30)


def test_available_slots_for_future_day_cover_opening_hours():
    svc, _, doctor, _ = make_service()
    slots = svc.available_slots(doctor.id, date(2030, 3, 5), duration_minutes=60)
    assert slots[0] == datetime(2030, 3, 5, 9, 0, tzinfo=SGT)
    assert slots[-1] == datetime(2030, 3, 5, 17, 0, tzinfo=SGT)
    assert len(slots) == (17 - 9) * 4 + 1
    assert all(b - a == timedelta(minutes=15) for a, b in zip(slots, slots[1:]))


def test_has_conflict_reads_local_time():
    svc, patient, doctor, _ = make_service()
    svc.book(patient.id, doctor.id, AppointmentType.CHECK_UP, local(11), duration_minutes=30)
    assert svc.has_conflict(doctor.id, local(11, 15), 30) is True
    assert svc.has_conflict(doctor.id, local(11, 30), 30) is False
    assert svc.has_conflict(doctor.id, local(10, 30), 30) is False
