# app/models/booking_models/appointment_models.py
import enum
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Date, Text, Enum, Index
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.utils.datetime_utils import utcnow


class AppointmentStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    barber_id = Column(Integer, ForeignKey("barbers.id", ondelete="SET NULL"), nullable=True)
    service_id = Column(Integer, ForeignKey("services.id"), nullable=False)

    date = Column(Date, nullable=False, index=True)
    start_time = Column(DateTime, nullable=False)  # shop-local wall clock
    end_time = Column(DateTime, nullable=False)

    status = Column(
        Enum(AppointmentStatus, name="appointment_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=AppointmentStatus.PENDING,
    )
    notes = Column(Text, nullable=True)
    cancellation_reason = Column(String(500), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    service = relationship("Service", lazy="selectin")
    barber = relationship("Barber", lazy="selectin")

    __table_args__ = (
        Index("ix_appointments_barber_date", "barber_id", "date"),
    )
