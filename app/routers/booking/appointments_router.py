from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.booking_models.appointment_models import AppointmentStatus
from app.schemas.booking_schemas.appointment_schemas import (
    AppointmentCancel, AppointmentCreate, AppointmentOut,
    AppointmentReschedule, AppointmentStatusUpdate, SlotOut,
)
from app.schemas.response_schemas import ResponseMessage
from app.services.booking_services import appointment_service
from app.utils.get_user import get_current_user
from app.utils.check_roles import require_role

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.get("/slots", response_model=List[SlotOut])
async def list_slots_route(
    day: date = Query(..., alias="date"),
    service_id: int = Query(...),
    barber_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await appointment_service.list_slots(db, day, service_id, barber_id)


@router.post("", response_model=ResponseMessage[AppointmentOut], status_code=status.HTTP_201_CREATED)
async def book_route(payload: AppointmentCreate, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    appointment = await appointment_service.book_appointment(db, _user, payload)
    return {"message": "Appointment booked, waiting for confirmation", "data": appointment}


@router.get("/my", response_model=ResponseMessage[List[AppointmentOut]])
async def my_appointments_route(db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    appointments = await appointment_service.list_for_customer(db, _user.id)
    return {"message": f"{len(appointments)} appointments", "data": appointments}


@router.get("", response_model=ResponseMessage[List[AppointmentOut]])
@require_role(["admin", "cashier", "barber"])
async def list_appointments_route(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
    status_filter: Optional[AppointmentStatus] = Query(None, alias="status"),
    day: Optional[date] = Query(None, alias="date"),
    barber_id: Optional[int] = Query(None),
):
    appointments = await appointment_service.list_appointments(db, status_filter, day, barber_id)
    return {"message": f"{len(appointments)} appointments", "data": appointments}


@router.get("/{appointment_id}", response_model=ResponseMessage[AppointmentOut])
async def get_appointment_route(appointment_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    appointment = await appointment_service.get_appointment_for_user(db, appointment_id, _user)
    return {"message": "Appointment fetched", "data": appointment}


@router.post("/{appointment_id}/cancel", response_model=ResponseMessage[AppointmentOut])
async def cancel_route(
    appointment_id: int,
    payload: AppointmentCancel,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    appointment = await appointment_service.cancel_appointment(db, appointment_id, _user, payload.reason)
    return {"message": "Appointment cancelled", "data": appointment}


@router.put("/{appointment_id}/reschedule", response_model=ResponseMessage[AppointmentOut])
async def reschedule_route(
    appointment_id: int,
    payload: AppointmentReschedule,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    appointment = await appointment_service.reschedule_appointment(db, appointment_id, _user, payload)
    return {"message": "Appointment rescheduled, waiting for confirmation", "data": appointment}


@router.patch("/{appointment_id}/status", response_model=ResponseMessage[AppointmentOut])
@require_role(["admin", "cashier", "barber"])
async def update_status_route(
    appointment_id: int,
    payload: AppointmentStatusUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    appointment = await appointment_service.update_status(db, appointment_id, payload.status, payload.reason, _user)
    return {"message": f"Appointment is now {appointment.status.value}", "data": appointment}
