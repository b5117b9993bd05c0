from datetime import datetime
from typing import Optional
import logging

from fastapi import APIRouter, Depends, Query

from ..application.services.appointments_service import AppointmentsService
from ..dependencies import get_appointments_service
from ..domain.appointment import AppointmentFilters
from ..domain.shared_types import AppointmentStatus, AppointmentType
from ..schemas.appointments.appointment import (
    AppointmentCreate,
    AppointmentResponse,
    AppointmentStatusUpdate,
    AppointmentUpdateRequest,
)
from ..schemas.common.common import MessageData, PaginatedData, Pagination, SuccessResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.post("/", response_model=SuccessResponse[AppointmentResponse], status_code=201)
def book_appointment(
    payload: AppointmentCreate,
    svc: AppointmentsService = Depends(get_appointments_service),
):
    appt = svc.book(
        patient_id=payload.patient_id,
        doctor_id=payload.doctor_id,
        appointment_type=payload.type,
        scheduled_date_time=payload.scheduled_date_time,
        duration_minutes=payload.duration_minutes,
        reason_for_visit=payload.reason_for_visit,
        notes=payload.notes,
    )
    logger.info(f"Booked appointment {appt.id} for doctor {appt.doctor_id}")
    return SuccessResponse(data=AppointmentResponse.from_domain(appt))


@router.get("/", response_model=SuccessResponse[PaginatedData[AppointmentResponse]])
def list_appointments(
    patient_id: Optional[str] = None,
    doctor_id: Optional[str] = None,
    status: Optional[AppointmentStatus] = None,
    type: Optional[AppointmentType] = None,
    scheduled_after: Optional[datetime] = None,
    scheduled_before: Optional[datetime] = None,
    limit: Optional[int] = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    svc: AppointmentsService = Depends(get_appointments_service),
):
    filters = AppointmentFilters(
        patient_id=patient_id,
        doctor_id=doctor_id,
        status=status,
        type=type,
        scheduled_after=scheduled_after,
        scheduled_before=scheduled_before,
    )
    items, total = svc.list(filters, limit=limit, offset=offset)
    return SuccessResponse(data=PaginatedData(
        items=[AppointmentResponse.from_domain(a) for a in items],
        pagination=Pagination(total=total, limit=limit, offset=offset),
    ))


@router.get("/{appointment_id}", response_model=SuccessResponse[AppointmentResponse])
def get_appointment(appointment_id: str, svc: AppointmentsService = Depends(get_appointments_service)):
    return SuccessResponse(data=AppointmentResponse.from_domain(svc.get(appointment_id)))


def _update(appointment_id: str, payload: AppointmentUpdateRequest, svc: AppointmentsService) -> SuccessResponse:
    appt = svc.update(
        appointment_id,
        appointment_type=payload.type,
        status=payload.status,
        scheduled_date_time=payload.scheduled_date_time,
        duration_minutes=payload.duration_minutes,
        reason_for_visit=payload.reason_for_visit,
        notes=payload.notes,
    )
    return SuccessResponse(data=AppointmentResponse.from_domain(appt))


@router.put("/{appointment_id}", response_model=SuccessResponse[AppointmentResponse])
def update_appointment(
    appointment_id: str,
    payload: AppointmentUpdateRequest,
    svc: AppointmentsService = Depends(get_appointments_service),
):
    return _update(appointment_id, payload, svc)


@router.patch("/{appointment_id}", response_model=SuccessResponse[AppointmentResponse])
def patch_appointment(
    appointment_id: str,
    payload: AppointmentUpdateRequest,
    svc: AppointmentsService = Depends(get_appointments_service),
):
    return _update(appointment_id, payload, svc)


@router.patch("/{appointment_id}/status", response_model=SuccessResponse[AppointmentResponse])
def update_appointment_status(
    appointment_id: str,
    payload: AppointmentStatusUpdate,
    svc: AppointmentsService = Depends(get_appointments_service),
):
    appt = svc.set_status(appointment_id, payload.status)
    return SuccessResponse(data=AppointmentResponse.from_domain(appt))


@router.post("/{appointment_id}/cancel", response_model=SuccessResponse[AppointmentResponse])
def cancel_appointment(appointment_id: str, svc: AppointmentsService = Depends(get_appointments_service)):
    return SuccessResponse(data=AppointmentResponse.from_domain(svc.cancel(appointment_id)))


@router.post("/{appointment_id}/check-in", response_model=SuccessResponse[AppointmentResponse])
def check_in_appointment(appointment_id: str, svc: AppointmentsService = Depends(get_appointments_service)):
    return SuccessResponse(data=AppointmentResponse.from_domain(svc.check_in(appointment_id)))


@router.delete("/{appointment_id}", response_model=SuccessResponse[MessageData])
def delete_appointment(appointment_id: str, svc: AppointmentsService = Depends(get_appointments_service)):
    svc.delete(appointment_id)
    return SuccessResponse(data=MessageData(message="Appointment deleted"))
