from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.db import get_db
from app.schemas.booking_schemas.queue_schemas import QueueEntryOut, QueueJoin, QueueOverview
from app.schemas.response_schemas import ResponseMessage
from app.services.booking_services import queue_service
from app.utils.get_user import get_current_user
from app.utils.check_roles import require_role

router = APIRouter(prefix="/queue", tags=["Queue"])


@router.get("", response_model=QueueOverview)
async def queue_overview_route(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _user=Depends(get_current_user),
):
    return await queue_service.queue_overview(db, _user, settings)


@router.post("/join", response_model=ResponseMessage[QueueEntryOut])
async def join_route(
    payload: QueueJoin,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _user=Depends(get_current_user),
):
    entry = await queue_service.join_queue(db, _user, payload.barber_id, settings)
    return {"message": f"You are number {entry.position} in the queue", "data": entry}


@router.post("/leave", response_model=ResponseMessage[QueueEntryOut])
async def leave_route(db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    entry = await queue_service.leave_queue(db, _user)
    return {"message": "You left the queue", "data": entry}


@router.post("/call-next", response_model=ResponseMessage[QueueEntryOut])
@require_role(["admin", "cashier", "barber"])
async def call_next_route(db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    entry = await queue_service.call_next(db, _user)
    return {"message": f"Number {entry.position}, please come forward", "data": entry}


@router.post("/{entry_id}/served", response_model=ResponseMessage[QueueEntryOut])
@require_role(["admin", "cashier", "barber"])
async def served_route(entry_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    entry = await queue_service.mark_served(db, entry_id, _user)
    return {"message": f"Number {entry.position} served", "data": entry}
