# app/models/booking_models/queue_models.py
import enum
from sqlalchemy import Column, Integer, ForeignKey, DateTime, Date, Enum, UniqueConstraint
from app.core.db import Base
from app.utils.datetime_utils import utcnow


class QueueStatus(str, enum.Enum):
    WAITING = "waiting"
    CALLED = "called"
    SERVED = "served"
    LEFT = "left"


class QueueEntry(Base):
    __tablename__ = "queue_entries"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    barber_id = Column(Integer, ForeignKey("barbers.id", ondelete="SET NULL"), nullable=True)

    queue_date = Column(Date, nullable=False, index=True)
    position = Column(Integer, nullable=False)
    estimated_wait_minutes = Column(Integer, nullable=False, default=0)
    status = Column(
        Enum(QueueStatus, name="queue_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=QueueStatus.WAITING,
    )

    joined_at = Column(DateTime(timezone=True), default=utcnow)
    called_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    # ticket numbers are handed out by the server, one sequence per day
    __table_args__ = (
        UniqueConstraint("queue_date", "position", name="uq_queue_date_position"),
    )
