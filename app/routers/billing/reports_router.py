from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.billing_schemas.report_schemas import FinancialReport
from app.services.billing_services.report_service import financial_report
from app.utils.get_user import get_current_user
from app.utils.check_roles import require_role

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/financial", response_model=FinancialReport)
@require_role(["admin"])
async def financial_report_route(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
    period: str = Query("month", description="today, week, month or year"),
):
    return await financial_report(db, period)
