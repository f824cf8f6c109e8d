# app/services/booking_services/queue_service.py
"""Walk-in queue. Ticket numbers restart every day and are handed out here."""
import logging
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings
from app.core.exceptions import ConflictError, NotFoundError
from app.models.booking_models.queue_models import QueueEntry, QueueStatus
from app.schemas.booking_schemas.queue_schemas import QueueEntryOut, QueueOverview
from app.utils.activity_helpers import log_user_activity
from app.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)

POSITION_ATTEMPTS = 5


def _today():
    return utcnow().date()


async def _waiting_entry_for(db: AsyncSession, customer_id: int) -> Optional[QueueEntry]:
    result = await db.execute(
        select(QueueEntry).where(
            QueueEntry.customer_id == customer_id,
            QueueEntry.queue_date == _today(),
            QueueEntry.status == QueueStatus.WAITING,
        )
    )
    return result.scalars().first()


async def _count_waiting_ahead(db: AsyncSession, queue_date, position: int) -> int:
    return (await db.execute(
        select(func.count(QueueEntry.id)).where(
            QueueEntry.queue_date == queue_date,
            QueueEntry.status == QueueStatus.WAITING,
            QueueEntry.position < position,
        )
    )).scalar_one()


def estimate_wait(waiting_ahead: int, minutes_per_customer: int) -> int:
    return (waiting_ahead + 1) * minutes_per_customer


async def join_queue(db: AsyncSession, user, barber_id: Optional[int], settings: Settings) -> QueueEntry:
    customer_id = user.id
    if await _waiting_entry_for(db, customer_id):
        raise ConflictError("You are already in the queue")

    queue_date = _today()
    for _ in range(POSITION_ATTEMPTS):
        last = (await db.execute(
            select(func.max(QueueEntry.position)).where(QueueEntry.queue_date == queue_date)
        )).scalar_one()
        position = (last or 0) + 1
        ahead = await _count_waiting_ahead(db, queue_date, position)

        entry = QueueEntry(
            customer_id=customer_id,
            barber_id=barber_id,
            queue_date=queue_date,
            position=position,
            estimated_wait_minutes=estimate_wait(ahead, settings.queue_minutes_per_customer),
            status=QueueStatus.WAITING,
        )
        db.add(entry)
        try:
            await db.commit()
        except IntegrityError:
            # someone else took this ticket number
            await db.rollback()
            logger.warning("Queue position %s on %s taken, retrying", position, queue_date)
            continue

        logger.info("Customer %s joined the queue at position %s", customer_id, position)
        await db.refresh(entry)
        return entry

    raise ConflictError("The queue is busy, please try again")


async def leave_queue(db: AsyncSession, user) -> QueueEntry:
    entry = await _waiting_entry_for(db, user.id)
    if not entry:
        raise NotFoundError("You are not in the queue")

    entry.status = QueueStatus.LEFT
    await db.commit()
    await db.refresh(entry)
    logger.info("Customer %s left the queue (position %s)", user.id, entry.position)
    return entry


async def call_next(db: AsyncSession, _user) -> QueueEntry:
    result = await db.execute(
        select(QueueEntry)
        .where(QueueEntry.queue_date == _today(), QueueEntry.status == QueueStatus.WAITING)
        .order_by(QueueEntry.position)
        .limit(1)
        .with_for_update()
    )
    entry = result.scalar_one_or_none()
    if not entry:
        raise NotFoundError("Nobody is waiting in the queue")

    entry.status = QueueStatus.CALLED
    entry.called_at = utcnow()

    await log_user_activity(
        db, user_id=_user.id, username=_user.username,
        message=f"Called queue number {entry.position}",
    )

    await db.commit()
    await db.refresh(entry)
    return entry


async def mark_served(db: AsyncSession, entry_id: int, _user) -> QueueEntry:
    entry = await db.get(QueueEntry, entry_id)
    if not entry:
        raise NotFoundError("Queue entry not found")
    if entry.status != QueueStatus.CALLED:
        raise ConflictError("Only a called customer can be marked as served")

    entry.status = QueueStatus.SERVED

    await log_user_activity(
        db, user_id=_user.id, username=_user.username,
        message=f"Served queue number {entry.position}",
    )

    await db.commit()
    await db.refresh(entry)
    return entry


async def queue_overview(db: AsyncSession, user, settings: Settings) -> QueueOverview:
    result = await db.execute(
        select(QueueEntry)
        .where(QueueEntry.queue_date == _today(), QueueEntry.status == QueueStatus.WAITING)
        .order_by(QueueEntry.position)
    )
    waiting = []
    my_entry = None
    for index, entry in enumerate(result.scalars().all()):
        out = QueueEntryOut.model_validate(entry)
        # the stored estimate was taken at join time; recompute from the live line
        out.estimated_wait_minutes = estimate_wait(index, settings.queue_minutes_per_customer)
        waiting.append(out)
        if user is not None and entry.customer_id == user.id:
            my_entry = out
    return QueueOverview(waiting=waiting, my_entry=my_entry)
