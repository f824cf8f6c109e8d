# app/routers/billing/payments_router.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.billing_models.order_models import PaymentMethod
from app.schemas.billing_schemas.order_schemas import (
    OrderOut, PaymentListResponse, PaymentVerificationRequest,
)
from app.schemas.response_schemas import ResponseMessage
from app.services.billing_services import order_service
from app.services.billing_services.payment_verification_service import verify_payment
from app.utils.get_user import get_current_user
from app.utils.check_roles import require_role

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get("", response_model=PaymentListResponse)
@require_role(["admin", "cashier"])
async def route_get_payments(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
    status_group: str = Query("pending", description="all, pending, paid or cancelled"),
    payment_method: Optional[PaymentMethod] = Query(None),
    limit: int = Query(100, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    orders = await order_service.list_orders(db, status_group, payment_method, limit, offset)
    counts = await order_service.count_orders_by_group(db)
    return {"message": f"{len(orders)} payments fetched", "counts": counts, "data": orders}


@router.post("/{order_id}/verify", response_model=ResponseMessage[OrderOut])
@require_role(["admin"])
async def route_verify_payment(
    order_id: int,
    payload: PaymentVerificationRequest,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    order = await verify_payment(db, order_id, payload.decision, payload.notes, _user)
    verb = "approved" if payload.decision == "approve" else "rejected"
    return {"message": f"Payment for {order.order_number} {verb}", "data": order}
