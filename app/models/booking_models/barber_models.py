# app/models/booking_models/barber_models.py
from decimal import Decimal
import enum
from sqlalchemy import Column, Integer, String, Numeric, DateTime, Boolean, ForeignKey, JSON, Time
from sqlalchemy.ext.mutable import MutableList
from app.core.db import Base
from app.utils.datetime_utils import utcnow


class BarberStatus(str, enum.Enum):
    AVAILABLE = "available"
    BUSY = "busy"
    ON_BREAK = "on_break"


class Barber(Base):
    __tablename__ = "barbers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    name = Column(String, nullable=False)
    avatar_url = Column(String, nullable=True)
    specializations = Column(MutableList.as_mutable(JSON), default=list)
    # 0 = Monday ... 6 = Sunday
    working_days = Column(MutableList.as_mutable(JSON), default=lambda: [0, 1, 2, 3, 4, 5])
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    status = Column(String(20), nullable=False, default=BarberStatus.AVAILABLE.value)
    rating = Column(Numeric(3, 2), nullable=False, default=Decimal("0.00"))
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)
