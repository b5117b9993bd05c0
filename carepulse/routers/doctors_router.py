from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..application.services.appointments_service import AppointmentsService
from ..application.services.doctors_service import DoctorsService
from ..dependencies import get_appointments_service, get_doctors_service
from ..domain import identifiers
from ..schemas.appointments.appointment import AppointmentResponse
from ..schemas.common.common import MessageData, SuccessResponse
from ..schemas.doctors.doctor import AvailableSlots, DoctorCreate, DoctorResponse, DoctorUpdateRequest

router = APIRouter(prefix="/doctors", tags=["Doctors"])


@router.post("/", response_model=SuccessResponse[DoctorResponse], status_code=201)
def create_doctor(payload: DoctorCreate, svc: DoctorsService = Depends(get_doctors_service)):
    doctor = svc.create(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        specialization=payload.specialization,
        is_active=payload.is_active,
        auth_user_id=payload.auth_user_id,
    )
    return SuccessResponse(data=DoctorResponse.from_domain(doctor))


@router.get("/", response_model=SuccessResponse[List[DoctorResponse]])
def list_doctors(
    specialization: Optional[str] = None,
    is_active: Optional[bool] = None,
    svc: DoctorsService = Depends(get_doctors_service),
):
    doctors = svc.list(specialization=specialization, is_active=is_active)
    return SuccessResponse(data=[DoctorResponse.from_domain(d) for d in doctors])


@router.get("/{doctor_id}", response_model=SuccessResponse[DoctorResponse])
def get_doctor(doctor_id: str, svc: DoctorsService = Depends(get_doctors_service)):
    return SuccessResponse(data=DoctorResponse.from_domain(svc.get(doctor_id)))


@router.get("/{doctor_id}/available-slots", response_model=SuccessResponse[AvailableSlots])
def get_available_slots(
    doctor_id: str,
    date: date,
    duration_minutes: int = Query(default=30),
    svc: AppointmentsService = Depends(get_appointments_service),
):
    slots = svc.available_slots(doctor_id, date, duration_minutes)
    return SuccessResponse(data=AvailableSlots(
        doctor_id=identifiers.doctor_id(doctor_id),
        date=date,
        duration_minutes=duration_minutes,
        slots=slots,
    ))


@router.get("/{doctor_id}/appointments", response_model=SuccessResponse[List[AppointmentResponse]])
def get_doctor_appointments(doctor_id: str, svc: AppointmentsService = Depends(get_appointments_service)):
    items = svc.list_for_doctor(doctor_id)
    return SuccessResponse(data=[AppointmentResponse.from_domain(a) for a in items])


@router.put("/{doctor_id}", response_model=SuccessResponse[DoctorResponse])
def update_doctor(
    doctor_id: str,
    payload: DoctorUpdateRequest,
    svc: DoctorsService = Depends(get_doctors_service),
):
    doctor = svc.update(
        doctor_id,
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        specialization=payload.specialization,
        is_active=payload.is_active,
    )
    return SuccessResponse(data=DoctorResponse.from_domain(doctor))


@router.delete("/{doctor_id}", response_model=SuccessResponse[MessageData])
def delete_doctor(doctor_id: str, svc: DoctorsService = Depends(get_doctors_service)):
    svc.delete(doctor_id)
    return SuccessResponse(data=MessageData(message="Doctor deleted"))
