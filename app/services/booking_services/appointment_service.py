# app/services/booking_services/appointment_service.py
"""Appointment booking against the shop's fixed daily slots.

Appointment times are shop-local wall-clock values (naive datetimes); they are
compared against the local clock, not UTC.
"""
import logging
from datetime import date, datetime, time, timedelta
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from app.models.booking_models.appointment_models import Appointment, AppointmentStatus
from app.models.booking_models.barber_models import Barber
from app.models.booking_models.service_models import Service
from app.models.user_models import STAFF_ROLES, User
from app.schemas.booking_schemas.appointment_schemas import (
    AppointmentCreate, AppointmentReschedule, SlotOut,
)
from app.utils.activity_helpers import log_user_activity

logger = logging.getLogger(__name__)

SLOT_TIMES = (
    "09:00", "09:45", "10:30", "11:15",
    "13:00", "13:45", "14:30", "15:15", "16:00",
    "17:00", "17:45", "18:30", "19:15",
)

# statuses that hold a barber's time
ACTIVE_STATUSES = (
    AppointmentStatus.PENDING,
    AppointmentStatus.CONFIRMED,
    AppointmentStatus.IN_PROGRESS,
)

APPOINTMENT_TRANSITIONS = {
    AppointmentStatus.PENDING: {AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED},
    AppointmentStatus.CONFIRMED: {
        AppointmentStatus.IN_PROGRESS, AppointmentStatus.CANCELLED, AppointmentStatus.NO_SHOW,
    },
    AppointmentStatus.IN_PROGRESS: {AppointmentStatus.COMPLETED},
    AppointmentStatus.COMPLETED: set(),
    AppointmentStatus.CANCELLED: set(),
    AppointmentStatus.NO_SHOW: set(),
}

RESCHEDULABLE_STATUSES = (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED)


def local_now() -> datetime:
    return datetime.now()


def _is_staff(user) -> bool:
    return user.role.lower() in STAFF_ROLES


def parse_slot(value: str) -> time:
    if value not in SLOT_TIMES:
        raise ValidationError(f"'{value}' is not an available time slot")
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def slot_window(day: date, slot: str, duration_minutes: int):
    start = datetime.combine(day, parse_slot(slot))
    return start, start + timedelta(minutes=duration_minutes)


def barber_works(barber: Barber, start: datetime, end: datetime) -> bool:
    if not barber.is_active:
        return False
    if start.weekday() not in (barber.working_days or []):
        return False
    return barber.start_time <= start.time() and end.time() <= barber.end_time and start.date() == end.date()


async def _has_overlap(
    db: AsyncSession,
    barber_id: int,
    start: datetime,
    end: datetime,
    exclude_id: Optional[int] = None,
) -> bool:
    query = select(func.count(Appointment.id)).where(
        Appointment.barber_id == barber_id,
        Appointment.status.in_(ACTIVE_STATUSES),
        Appointment.start_time < end,
        Appointment.end_time > start,
    )
    if exclude_id is not None:
        query = query.where(Appointment.id != exclude_id)
    return (await db.execute(query)).scalar_one() > 0


async def available_barbers(
    db: AsyncSession,
    start: datetime,
    end: datetime,
    exclude_id: Optional[int] = None,
) -> List[Barber]:
    result = await db.execute(
        select(Barber).where(Barber.is_active == True).order_by(Barber.id)  # noqa: E712
    )
    free = []
    for barber in result.scalars().all():
        if barber_works(barber, start, end) and not await _has_overlap(db, barber.id, start, end, exclude_id):
            free.append(barber)
    return free


async def _get_bookable_service(db: AsyncSession, service_id: int) -> Service:
    service = await db.get(Service, service_id)
    if not service or not service.is_active:
        raise NotFoundError("Service not found")
    return service


def _ensure_future(start: datetime):
    now = local_now()
    if start.date() < now.date():
        raise ValidationError("Cannot book an appointment in the past")
    if start <= now:
        raise ValidationError("This time slot has already passed")


async def _pick_barber(
    db: AsyncSession,
    barber_id: Optional[int],
    start: datetime,
    end: datetime,
    exclude_id: Optional[int] = None,
) -> Barber:
    if barber_id is None:
        free = await available_barbers(db, start, end, exclude_id)
        if not free:
            raise ConflictError("No barber is available at this time, please pick another slot")
        return free[0]

    # row lock serializes concurrent bookings for the same barber
    result = await db.execute(select(Barber).where(Barber.id == barber_id).with_for_update())
    barber = result.scalar_one_or_none()
    if not barber or not barber.is_active:
        raise NotFoundError("Barber not found")
    if not barber_works(barber, start, end):
        raise ConflictError(f"{barber.name} is not working at this time")
    if await _has_overlap(db, barber.id, start, end, exclude_id):
        raise ConflictError(f"{barber.name} already has an appointment at this time")
    return barber


# =====================================================
# 🔹 SLOTS
# =====================================================
async def list_slots(db: AsyncSession, day: date, service_id: int, barber_id: Optional[int] = None) -> List[SlotOut]:
    service = await _get_bookable_service(db, service_id)
    now = local_now()

    slots = []
    for slot in SLOT_TIMES:
        start, end = slot_window(day, slot, service.duration_minutes)
        if start <= now:
            slots.append(SlotOut(time=slot, available=False))
            continue
        free = await available_barbers(db, start, end)
        if barber_id is not None:
            free = [b for b in free if b.id == barber_id]
        slots.append(SlotOut(time=slot, available=bool(free), barber_ids=[b.id for b in free]))
    return slots


# =====================================================
# 🔹 BOOK
# =====================================================
async def book_appointment(db: AsyncSession, user, payload: AppointmentCreate) -> Appointment:
    service = await _get_bookable_service(db, payload.service_id)
    start, end = slot_window(payload.date, payload.time, service.duration_minutes)
    _ensure_future(start)

    barber = await _pick_barber(db, payload.barber_id, start, end)

    appointment = Appointment(
        customer_id=user.id,
        barber_id=barber.id,
        service_id=service.id,
        date=payload.date,
        start_time=start,
        end_time=end,
        status=AppointmentStatus.PENDING,
        notes=(payload.notes or "").strip() or None,
    )
    db.add(appointment)
    await db.commit()

    logger.info(
        "Appointment %s booked: customer=%s barber=%s at %s",
        appointment.id, user.id, barber.id, start.isoformat(),
    )
    return await get_appointment(db, appointment.id)


# =====================================================
# 🔹 READ
# =====================================================
async def get_appointment(db: AsyncSession, appointment_id: int) -> Appointment:
    result = await db.execute(
        select(Appointment)
        .where(Appointment.id == appointment_id)
        .execution_options(populate_existing=True)
    )
    appointment = result.scalar_one_or_none()
    if not appointment:
        raise NotFoundError("Appointment not found")
    return appointment


async def get_appointment_for_user(db: AsyncSession, appointment_id: int, user) -> Appointment:
    appointment = await get_appointment(db, appointment_id)
    if appointment.customer_id != user.id and not _is_staff(user):
        raise NotFoundError("Appointment not found")
    return appointment


async def list_for_customer(db: AsyncSession, customer_id: int):
    result = await db.execute(
        select(Appointment)
        .where(Appointment.customer_id == customer_id)
        .order_by(Appointment.start_time.desc())
    )
    return result.scalars().all()


async def list_appointments(
    db: AsyncSession,
    status: Optional[AppointmentStatus] = None,
    day: Optional[date] = None,
    barber_id: Optional[int] = None,
):
    query = select(Appointment)
    if status:
        query = query.where(Appointment.status == status)
    if day:
        query = query.where(Appointment.date == day)
    if barber_id:
        query = query.where(Appointment.barber_id == barber_id)
    result = await db.execute(query.order_by(Appointment.start_time))
    return result.scalars().all()


# =====================================================
# 🔹 STATUS
# =====================================================
def ensure_appointment_transition(current: AppointmentStatus, target: AppointmentStatus):
    if target not in APPOINTMENT_TRANSITIONS.get(current, set()):
        raise ConflictError(f"Cannot change appointment from '{current.value}' to '{target.value}'")


async def update_status(
    db: AsyncSession,
    appointment_id: int,
    target: AppointmentStatus,
    reason: Optional[str],
    _user,
) -> Appointment:
    target = AppointmentStatus(target)
    appointment = await get_appointment(db, appointment_id)
    ensure_appointment_transition(appointment.status, target)

    if target == AppointmentStatus.CANCELLED:
        appointment.cancellation_reason = (reason or "").strip() or "Cancelled by staff"
    elif target == AppointmentStatus.NO_SHOW:
        customer = await db.get(User, appointment.customer_id)
        if customer:
            customer.no_show_count = (customer.no_show_count or 0) + 1

    previous = appointment.status
    appointment.status = target

    await log_user_activity(
        db, user_id=_user.id, username=_user.username,
        message=f"Appointment {appointment.id}: {previous.value} -> {target.value}",
    )

    await db.commit()
    logger.info("Appointment %s moved %s -> %s", appointment_id, previous.value, target.value)
    return await get_appointment(db, appointment_id)


async def cancel_appointment(db: AsyncSession, appointment_id: int, user, reason: Optional[str]) -> Appointment:
    appointment = await get_appointment_for_user(db, appointment_id, user)
    ensure_appointment_transition(appointment.status, AppointmentStatus.CANCELLED)

    appointment.status = AppointmentStatus.CANCELLED
    appointment.cancellation_reason = (reason or "").strip() or "Cancelled by customer"

    await db.commit()
    logger.info("Appointment %s cancelled by user %s", appointment_id, user.id)
    return await get_appointment(db, appointment_id)


async def reschedule_appointment(
    db: AsyncSession,
    appointment_id: int,
    user,
    payload: AppointmentReschedule,
) -> Appointment:
    appointment = await get_appointment(db, appointment_id)
    if appointment.customer_id != user.id:
        raise PermissionDeniedError()
    if appointment.status not in RESCHEDULABLE_STATUSES:
        raise ConflictError("Only pending or confirmed appointments can be rescheduled")

    service = await db.get(Service, appointment.service_id)
    start, end = slot_window(payload.date, payload.time, service.duration_minutes)
    _ensure_future(start)

    barber_id = payload.barber_id if payload.barber_id is not None else appointment.barber_id
    try:
        barber = await _pick_barber(db, barber_id, start, end, exclude_id=appointment.id)
    except (ConflictError, NotFoundError):
        if payload.barber_id is not None:
            raise
        # the old barber is busy; any free barber will do
        barber = await _pick_barber(db, None, start, end, exclude_id=appointment.id)

    appointment.barber_id = barber.id
    appointment.date = payload.date
    appointment.start_time = start
    appointment.end_time = end
    appointment.status = AppointmentStatus.PENDING

    await db.commit()
    logger.info("Appointment %s rescheduled to %s", appointment_id, start.isoformat())
    return await get_appointment(db, appointment_id)
