from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, Query

from ..application.services.appointments_service import AppointmentsService
from ..application.services.patients_service import PatientsService
from ..dependencies import get_appointments_service, get_patients_service
from ..schemas.appointments.appointment import AppointmentResponse
from ..schemas.common.common import MessageData, PaginatedData, Pagination, SuccessResponse
from ..schemas.patients.patient import PatientCreate, PatientResponse, PatientUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/patients", tags=["Patients"])


@router.post("/", response_model=SuccessResponse[PatientResponse], status_code=201)
def register_patient(payload: PatientCreate, svc: PatientsService = Depends(get_patients_service)):
    patient = svc.register(
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        phone=payload.phone,
        date_of_birth=payload.date_of_birth,
        address=payload.address,
        auth_user_id=payload.auth_user_id,
    )
    logger.info(f"Registered patient {patient.id}")
    return SuccessResponse(data=PatientResponse.from_domain(patient))


@router.get("/", response_model=SuccessResponse[PaginatedData[PatientResponse]])
def list_patients(
    email: Optional[str] = None,
    phone: Optional[str] = None,
    limit: Optional[int] = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    svc: PatientsService = Depends(get_patients_service),
):
    items, total = svc.list(email=email, phone=phone, limit=limit, offset=offset)
    return SuccessResponse(data=PaginatedData(
        items=[PatientResponse.from_domain(p) for p in items],
        pagination=Pagination(total=total, limit=limit, offset=offset),
    ))


# declared before /{patient_id} so "lookup" is not taken as an id
@router.get("/lookup", response_model=SuccessResponse[PatientResponse])
def lookup_patient(phone: str = Query(min_length=1), svc: PatientsService = Depends(get_patients_service)):
    return SuccessResponse(data=PatientResponse.from_domain(svc.get_by_phone(phone)))


@router.get("/{patient_id}", response_model=SuccessResponse[PatientResponse])
def get_patient(patient_id: str, svc: PatientsService = Depends(get_patients_service)):
    return SuccessResponse(data=PatientResponse.from_domain(svc.get(patient_id)))


@router.get("/{patient_id}/appointments", response_model=SuccessResponse[List[AppointmentResponse]])
def get_patient_appointments(
    patient_id: str,
    today: bool = False,
    svc: AppointmentsService = Depends(get_appointments_service),
):
    items = svc.list_for_patient(patient_id, today_only=today)
    return SuccessResponse(data=[AppointmentResponse.from_domain(a) for a in items])


@router.put("/{patient_id}", response_model=SuccessResponse[PatientResponse])
def update_patient(
    patient_id: str,
    payload: PatientUpdateRequest,
    svc: PatientsService = Depends(get_patients_service),
):
    patient = svc.update(
        patient_id,
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=payload.email,
        phone=payload.phone,
        address=payload.address,
    )
    return SuccessResponse(data=PatientResponse.from_domain(patient))


@router.delete("/{patient_id}", response_model=SuccessResponse[MessageData])
def delete_patient(patient_id: str, svc: PatientsService = Depends(get_patients_service)):
    svc.delete(patient_id)
    return SuccessResponse(data=MessageData(message="Patient deleted"))
