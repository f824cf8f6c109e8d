from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.booking_schemas.service_schemas import ServiceCreate, ServiceUpdate, ServiceOut
from app.schemas.response_schemas import ResponseMessage
from app.services.booking_services import catalog_service
from app.utils.get_user import get_current_user
from app.utils.check_roles import require_role

router = APIRouter(prefix="/services", tags=["Services"])


@router.get("", response_model=ResponseMessage[List[ServiceOut]])
async def list_services_route(db: AsyncSession = Depends(get_db), category: Optional[str] = Query(None)):
    services = await catalog_service.list_services(db, category)
    return {"message": f"{len(services)} services available", "data": services}


@router.get("/{service_id}", response_model=ResponseMessage[ServiceOut])
async def get_service_route(service_id: int, db: AsyncSession = Depends(get_db)):
    return {"message": "Service fetched", "data": await catalog_service.get_service(db, service_id)}


@router.post("", response_model=ResponseMessage[ServiceOut], status_code=status.HTTP_201_CREATED)
@require_role(["admin"])
async def create_service_route(data: ServiceCreate, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    service = await catalog_service.create_service(db, data, _user)
    return {"message": f"Service '{service.name}' created", "data": service}


@router.put("/{service_id}", response_model=ResponseMessage[ServiceOut])
@require_role(["admin"])
async def update_service_route(
    service_id: int,
    data: ServiceUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    service = await catalog_service.update_service(db, service_id, data, _user)
    return {"message": f"Service '{service.name}' updated", "data": service}


@router.delete("/{service_id}", response_model=ResponseMessage[ServiceOut])
@require_role(["admin"])
async def delete_service_route(service_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    service = await catalog_service.delete_service(db, service_id, _user)
    return {"message": f"Service '{service.name}' deleted", "data": service}
