import pytest

from carepulse.application.services.doctors_service import DoctorsService
from carepulse.exceptions import APIException

from fakes import FakeAudit, FakeDoctorRepo


def make_service():
    return DoctorsService(repo=FakeDoctorRepo(), audit=FakeAudit())


def test_create_and_get():
    svc = make_service()
    doctor = svc.create("Sarah", "Tan", "Sarah.Tan@CarePulse.sg", specialization=" Cardiology ")
    assert doctor.full_name == "Dr. Sarah Tan"
    assert doctor.email.value == "sarah.tan@carepulse.sg"
    assert doctor.specialization == "Cardiology"
    assert svc.get(doctor.id[len("doctor_"):]).id == doctor.id


def test_list_by_specialization_and_activity():
    svc = make_service()
    svc.create("Sarah", "Tan", "tan@carepulse.sg", specialization="Cardiology")
    svc.create("Michael", "Lim", "lim@carepulse.sg", specialization="Pediatrics")
    svc.create("Priya", "Nair", "nair@carepulse.sg", specialization="Cardiology", is_active=False)

    assert [d.last_name for d in svc.list(specialization="cardio")] == ["Tan"]
    assert len(svc.list(is_active=True)) == 2
    assert [d.last_name for d in svc.list(is_active=False)] == ["Nair"]
    assert len(svc.list()) == 3


def test_deactivate_is_audited():
    svc = make_service()
    doctor = svc.create("Sarah", "Tan", "tan@carepulse.sg")
    updated = svc.update(doctor.id, is_active=False)
    assert updated.is_active is False
    assert svc.audit.entries[-1] == ("doctor.updated", doctor.id, {"isActive": False})


def test_delete_missing_doctor_is_not_found():
    svc = make_service()
    with pytest.raises(APIException) as exc:
        svc.delete("doctor_missing")
    assert exc.value.status_code == 404
