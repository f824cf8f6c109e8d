# app/schemas/booking_schemas/barber_schemas.py
from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from decimal import Decimal
from datetime import time
from app.models.booking_models.barber_models import BarberStatus


class BarberBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    user_id: Optional[int] = None
    avatar_url: Optional[str] = None
    specializations: List[str] = []
    working_days: List[int] = Field(default_factory=lambda: [0, 1, 2, 3, 4, 5])
    start_time: time = time(9, 0)
    end_time: time = time(20, 0)
    status: BarberStatus = BarberStatus.AVAILABLE
    is_active: bool = True

    @model_validator(mode="after")
    def _check_schedule(self):
        if any(day < 0 or day > 6 for day in self.working_days):
            raise ValueError("Working days must be between 0 (Monday) and 6 (Sunday)")
        if self.start_time >= self.end_time:
            raise ValueError("Start time must be before end time")
        return self


class BarberCreate(BarberBase):
    pass


class BarberUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    user_id: Optional[int] = None
    avatar_url: Optional[str] = None
    specializations: Optional[List[str]] = None
    working_days: Optional[List[int]] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    status: Optional[BarberStatus] = None
    is_active: Optional[bool] = None


class BarberOut(BarberBase):
    id: int
    rating: Decimal

    class Config:
        from_attributes = True
