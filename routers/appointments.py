from typing import Optional
from fastapi import APIRouter, Depends, Path, Query, status
from sqlmodel import Session

from database import get_session, store_operation
from models import AppointmentStatus, Profile
from schemas.appointment_schema import AppointmentCreateSchema, AppointmentReadSchema, AppointmentStatusSchema
from security.oauth2 import get_current_user
from services import appointments as appointment_service

router = APIRouter(
    tags=["Appointment"],
    dependencies=[Depends(get_current_user)]
)


@router.get("/appointments", response_model=list[AppointmentReadSchema], status_code=status.HTTP_200_OK)
def get_appointments(
    status_: Optional[AppointmentStatus] = Query(None, alias="status"),
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    with store_operation(db, "fetch appointments"):
        appointments = appointment_service.list_appointments(db, current_user, status=status_)
        return [appointment_service.add_names(db, a) for a in appointments]


@router.post("/appointments", response_model=AppointmentReadSchema, status_code=status.HTTP_201_CREATED)
def create_appointment(
    payload: AppointmentCreateSchema,
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    with store_operation(db, "schedule appointment"):
        appointment = appointment_service.create_appointment(
            db,
            lead_id=payload.lead_id,
            consultant_id=payload.consultant_id,
            scheduled_date=payload.scheduled_date,
            scheduled_time=payload.scheduled_time,
            actor=current_user,
            duration_minutes=payload.duration_minutes,
            notes=payload.notes,
        )
        return appointment_service.add_names(db, appointment)


@router.get("/appointments/{appointment_id}", response_model=AppointmentReadSchema, status_code=status.HTTP_200_OK)
def get_appointment(
    appointment_id: int = Path(...),
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    with store_operation(db, "fetch appointment"):
        appointment = appointment_service.get_appointment(db, appointment_id, current_user)
        return appointment_service.add_names(db, appointment)


@router.patch("/appointments/{appointment_id}/status", response_model=AppointmentReadSchema, status_code=status.HTTP_200_OK)
def update_appointment_status(
    payload: AppointmentStatusSchema,
    appointment_id: int = Path(...),
    db: Session = Depends(get_session),
    current_user: Profile = Depends(get_current_user),
):
    with store_operation(db, "update appointment"):
        appointment = appointment_service.update_status(
            db, appointment_id, payload.status, current_user, scheduled_at=payload.scheduled_at
        )
        return appointment_service.add_names(db, appointment)
