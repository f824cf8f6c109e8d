from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.booking_schemas.barber_schemas import BarberCreate, BarberUpdate, BarberOut
from app.schemas.response_schemas import ResponseMessage
from app.services.booking_services import catalog_service
from app.utils.get_user import get_current_user
from app.utils.check_roles import require_role

router = APIRouter(prefix="/barbers", tags=["Barbers"])


@router.get("", response_model=ResponseMessage[List[BarberOut]])
async def list_barbers_route(db: AsyncSession = Depends(get_db)):
    barbers = await catalog_service.list_barbers(db)
    return {"message": f"{len(barbers)} barbers", "data": barbers}


@router.get("/{barber_id}", response_model=ResponseMessage[BarberOut])
async def get_barber_route(barber_id: int, db: AsyncSession = Depends(get_db)):
    return {"message": "Barber fetched", "data": await catalog_service.get_barber(db, barber_id)}


@router.post("", response_model=ResponseMessage[BarberOut], status_code=status.HTTP_201_CREATED)
@require_role(["admin"])
async def create_barber_route(data: BarberCreate, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    barber = await catalog_service.create_barber(db, data, _user)
    return {"message": f"Barber '{barber.name}' added", "data": barber}


@router.put("/{barber_id}", response_model=ResponseMessage[BarberOut])
@require_role(["admin"])
async def update_barber_route(
    barber_id: int,
    data: BarberUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    barber = await catalog_service.update_barber(db, barber_id, data, _user)
    return {"message": f"Barber '{barber.name}' updated", "data": barber}


@router.delete("/{barber_id}", response_model=ResponseMessage[BarberOut])
@require_role(["admin"])
async def delete_barber_route(barber_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    barber = await catalog_service.delete_barber(db, barber_id, _user)
    return {"message": f"Barber '{barber.name}' removed", "data": barber}
