# app/schemas/booking_schemas/queue_schemas.py
from pydantic import BaseModel
from typing import Optional, List
from datetime import date, datetime
from app.models.booking_models.queue_models import QueueStatus


class QueueJoin(BaseModel):
    barber_id: Optional[int] = None


class QueueEntryOut(BaseModel):
    id: int
    customer_id: int
    barber_id: Optional[int] = None
    queue_date: date
    position: int
    estimated_wait_minutes: int
    status: QueueStatus
    joined_at: datetime
    called_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class QueueOverview(BaseModel):
    waiting: List[QueueEntryOut]
    my_entry: Optional[QueueEntryOut] = None
