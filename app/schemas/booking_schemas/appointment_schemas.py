# app/schemas/booking_schemas/appointment_schemas.py
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date as DateType, datetime
from app.models.booking_models.appointment_models import AppointmentStatus

TimeSlot = str  # "HH:MM"


class AppointmentCreate(BaseModel):
    service_id: int
    barber_id: Optional[int] = None
    date: DateType
    time: TimeSlot = Field(..., pattern=r"^\d{2}:\d{2}$")
    notes: Optional[str] = Field(None, max_length=500)


class AppointmentReschedule(BaseModel):
    date: DateType
    time: TimeSlot = Field(..., pattern=r"^\d{2}:\d{2}$")
    barber_id: Optional[int] = None


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus
    reason: Optional[str] = Field(None, max_length=500)


class AppointmentCancel(BaseModel):
    reason: Optional[str] = Field(None, max_length=500)


class AppointmentOut(BaseModel):
    id: int
    customer_id: int
    barber_id: Optional[int] = None
    service_id: int
    date: DateType
    start_time: datetime
    end_time: datetime
    status: AppointmentStatus
    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SlotOut(BaseModel):
    time: TimeSlot
    available: bool
    barber_ids: List[int] = []
