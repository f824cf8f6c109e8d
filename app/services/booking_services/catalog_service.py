# app/services/booking_services/catalog_service.py
"""Services on offer and the barbers who perform them."""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.models.booking_models.barber_models import Barber
from app.models.booking_models.service_models import Service
from app.schemas.booking_schemas.barber_schemas import BarberCreate, BarberUpdate
from app.schemas.booking_schemas.service_schemas import ServiceCreate, ServiceUpdate
from app.utils.activity_helpers import log_user_activity


# =====================================================
# 🔹 SERVICES
# =====================================================
async def create_service(db: AsyncSession, data: ServiceCreate, _user) -> Service:
    service = Service(**data.model_dump())
    db.add(service)
    await db.flush()

    await log_user_activity(
        db, user_id=_user.id, username=_user.username,
        message=f"Created service '{service.name}' (ID: {service.id})",
    )

    await db.commit()
    await db.refresh(service)
    return service


async def list_services(db: AsyncSession, category: Optional[str] = None, include_inactive: bool = False):
    query = select(Service)
    if not include_inactive:
        query = query.where(Service.is_active == True)  # noqa: E712
    if category:
        query = query.where(Service.category == category)
    result = await db.execute(query.order_by(Service.category, Service.name))
    return result.scalars().all()


async def get_service(db: AsyncSession, service_id: int) -> Service:
    service = await db.get(Service, service_id)
    if not service:
        raise NotFoundError("Service not found")
    return service


async def update_service(db: AsyncSession, service_id: int, data: ServiceUpdate, _user) -> Service:
    service = await get_service(db, service_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(service, key, value)

    await log_user_activity(
        db, user_id=_user.id, username=_user.username,
        message=f"Updated service '{service.name}' (ID: {service.id})",
    )

    await db.commit()
    await db.refresh(service)
    return service


async def delete_service(db: AsyncSession, service_id: int, _user) -> Service:
    # appointments keep pointing at the row, so it is only switched off
    service = await get_service(db, service_id)
    service.is_active = False

    await log_user_activity(
        db, user_id=_user.id, username=_user.username,
        message=f"Deleted service '{service.name}' (ID: {service.id})",
    )

    await db.commit()
    await db.refresh(service)
    return service


# =====================================================
# 🔹 BARBERS
# =====================================================
async def create_barber(db: AsyncSession, data: BarberCreate, _user) -> Barber:
    values = data.model_dump()
    values["status"] = data.status.value
    barber = Barber(**values)
    db.add(barber)
    await db.flush()

    await log_user_activity(
        db, user_id=_user.id, username=_user.username,
        message=f"Added barber '{barber.name}' (ID: {barber.id})",
    )

    await db.commit()
    await db.refresh(barber)
    return barber


async def list_barbers(db: AsyncSession, include_inactive: bool = False):
    query = select(Barber)
    if not include_inactive:
        query = query.where(Barber.is_active == True)  # noqa: E712
    result = await db.execute(query.order_by(Barber.name))
    return result.scalars().all()


async def get_barber(db: AsyncSession, barber_id: int) -> Barber:
    barber = await db.get(Barber, barber_id)
    if not barber:
        raise NotFoundError("Barber not found")
    return barber


async def update_barber(db: AsyncSession, barber_id: int, data: BarberUpdate, _user) -> Barber:
    barber = await get_barber(db, barber_id)
    update_data = data.model_dump(exclude_unset=True)

    if "working_days" in update_data and any(d < 0 or d > 6 for d in update_data["working_days"]):
        raise ValidationError("Working days must be between 0 (Monday) and 6 (Sunday)")
    start = update_data.get("start_time") or barber.start_time
    end = update_data.get("end_time") or barber.end_time
    if start >= end:
        raise ValidationError("Start time must be before end time")

    if update_data.get("status") is not None:
        update_data["status"] = update_data["status"].value

    for key, value in update_data.items():
        setattr(barber, key, value)

    await log_user_activity(
        db, user_id=_user.id, username=_user.username,
        message=f"Updated barber '{barber.name}' (ID: {barber.id})",
    )

    await db.commit()
    await db.refresh(barber)
    return barber


async def delete_barber(db: AsyncSession, barber_id: int, _user) -> Barber:
    barber = await get_barber(db, barber_id)
    barber.is_active = False

    await log_user_activity(
        db, user_id=_user.id, username=_user.username,
        message=f"Removed barber '{barber.name}' (ID: {barber.id})",
    )

    await db.commit()
    await db.refresh(barber)
    return barber
