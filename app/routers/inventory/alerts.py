from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.inventory_schemas import StockAlert
from app.schemas.response_schemas import ResponseMessage
from app.services.inventory_services.alerts_service import get_stock_alerts
from app.utils.get_user import get_current_user
from app.utils.check_roles import require_role

router = APIRouter(prefix="/alerts", tags=["Stock Alerts"])


@router.get("/low-stock", response_model=ResponseMessage[List[StockAlert]])
@require_role(["admin", "cashier"])
async def low_stock_route(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
    category: Optional[str] = Query(None),
):
    alerts = await get_stock_alerts(db, category)
    empty = sum(1 for a in alerts if a.out_of_stock)
    return {"message": f"{len(alerts)} products running low, {empty} out of stock", "data": alerts}
