# app/models/booking_models/service_models.py
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Numeric, DateTime, Text, Boolean, CheckConstraint
from app.core.db import Base
from app.utils.datetime_utils import utcnow

SERVICE_CATEGORIES = ("styling", "cut", "color", "treatment")


class Service(Base):
    __tablename__ = "services"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    duration_minutes = Column(Integer, nullable=False, default=30)
    price = Column(Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    category = Column(String(20), nullable=False, default="cut")
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(duration_minutes > 0, name="check_service_duration_positive"),
        CheckConstraint(price >= 0, name="check_service_price_non_negative"),
    )
