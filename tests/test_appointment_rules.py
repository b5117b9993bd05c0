from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from carepulse.domain.appointment import (
    Appointment,
    STATUS_TRANSITIONS,
    can_transition_to,
    create_appointment,
    intervals_overlap,
    is_appointment_on,
)
from carepulse.domain.shared_types import AppointmentDuration, AppointmentStatus, AppointmentType

SGT = ZoneInfo("Asia/Singapore")


def at(hour, minute=0):
    return datetime(2030, 3, 4, hour, minute, tzinfo=timezone.utc)


def test_back_to_back_intervals_do_not_overlap():
    assert not intervals_overlap(at(9), at(9, 30), at(9, 30), at(10))
    assert not intervals_overlap(at(9, 30), at(10), at(9), at(9, 30))


def test_partial_and_containing_intervals_overlap():
    assert intervals_overlap(at(9), at(9, 30), at(9, 15), at(9, 45))
    assert intervals_overlap(at(9), at(11), at(9, 30), at(10))
    assert intervals_overlap(at(9), at(9, 30), at(9), at(9, 30))


def test_create_appointment_defaults_duration_and_trims_reason():
    new = create_appointment("patient_a", "doctor_b", at(9), AppointmentType.FIRST_CONSULT, reason_for_visit="  cough  ")
    assert new.duration == AppointmentDuration(90)
    assert new.reason_for_visit == "cough"
    assert new.status == AppointmentStatus.SCHEDULED

    blank = create_appointment("patient_a", "doctor_b", at(9), AppointmentType.CHECK_UP, reason_for_visit="   ")
    assert blank.reason_for_visit is None


def test_transition_table():
    assert can_transition_to(AppointmentStatus.SCHEDULED, AppointmentStatus.IN_PROGRESS)
    assert can_transition_to(AppointmentStatus.SCHEDULED, AppointmentStatus.NO_SHOW)
    assert can_transition_to(AppointmentStatus.IN_PROGRESS, AppointmentStatus.COMPLETED)
    assert not can_transition_to(AppointmentStatus.SCHEDULED, AppointmentStatus.COMPLETED)
    assert not can_transition_to(AppointmentStatus.CANCELLED, AppointmentStatus.SCHEDULED)


@pytest.mark.parametrize("status", list(AppointmentStatus))
def test_same_status_is_always_allowed(status):
    assert can_transition_to(status, status)


@pytest.mark.parametrize("status", [AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW])
def test_terminal_statuses(status):
    assert STATUS_TRANSITIONS[status] == frozenset()


def test_is_appointment_on_uses_clinic_day():
    # 17:00 UTC is 01:00 the next day in Singapore
    appt = Appointment(
        id="appt_x", patient_id="patient_a", doctor_id="doctor_b",
        type=AppointmentType.CHECK_UP, status=AppointmentStatus.SCHEDULED,
        scheduled_date_time=at(17), duration=AppointmentDuration(30),
    )
    assert is_appointment_on(appt, date(2030, 3, 5), SGT)
    assert not is_appointment_on(appt, date(2030, 3, 4), SGT)
    assert appt.end_date_time == at(17, 30)
    assert appt.blocks_calendar
