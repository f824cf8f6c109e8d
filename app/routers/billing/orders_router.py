from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.db import get_db
from app.core.http import get_http_transport
from app.models.billing_models.order_models import PaymentMethod
from app.schemas.billing_schemas.order_schemas import CheckoutRequest, OrderOut, OrderStatusUpdate
from app.schemas.response_schemas import ResponseMessage
from app.services import upload_service
from app.services.billing_services import order_service
from app.utils.get_user import get_current_user
from app.utils.check_roles import require_role

router = APIRouter(prefix="/orders", tags=["Orders"])


# CHECKOUT
@router.post("/checkout", response_model=ResponseMessage[OrderOut], status_code=status.HTTP_201_CREATED)
async def checkout_route(
    payload: CheckoutRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _user=Depends(get_current_user),
):
    order = await order_service.place_order(db, _user, payload, settings)
    return {"message": f"Order {order.order_number} placed", "data": order}


# MY ORDERS
@router.get("/my", response_model=ResponseMessage[List[OrderOut]])
async def my_orders_route(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    orders = await order_service.list_orders_for_customer(db, _user.id, limit, offset)
    return {"message": f"{len(orders)} orders fetched", "data": orders}


# ALL ORDERS (staff)
@router.get("", response_model=ResponseMessage[List[OrderOut]])
@require_role(["admin", "cashier"])
async def list_orders_route(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
    status_group: str = Query("all", description="all, pending, paid or cancelled"),
    payment_method: Optional[PaymentMethod] = Query(None),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    orders = await order_service.list_orders(db, status_group, payment_method, limit, offset)
    return {"message": f"{len(orders)} orders fetched", "data": orders}


# GET SINGLE
@router.get("/{order_id}", response_model=ResponseMessage[OrderOut])
async def get_order_route(order_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    order = await order_service.get_order_for_user(db, order_id, _user)
    return {"message": "Order fetched", "data": order}


# PAYMENT PROOF
@router.post("/{order_id}/payment-proof", response_model=ResponseMessage[OrderOut])
async def payment_proof_route(
    order_id: int,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    transport=Depends(get_http_transport),
    _user=Depends(get_current_user),
):
    """
    Upload a transfer receipt. A rejected order goes back to waiting for verification.
    """
    # nothing is sent to the CDN for an order that would refuse the receipt
    await order_service.get_order_for_proof(db, order_id, _user)
    uploaded = await upload_service.upload_file(file, settings, transport)
    order = await order_service.attach_payment_proof(db, order_id, _user, uploaded.url)
    return {"message": "Payment proof uploaded, waiting for verification", "data": order}


# CANCEL
@router.post("/{order_id}/cancel", response_model=ResponseMessage[OrderOut])
async def cancel_order_route(order_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    order = await order_service.cancel_order(db, order_id, _user)
    return {"message": f"Order {order.order_number} cancelled", "data": order}


# FULFILLMENT
@router.post("/{order_id}/advance", response_model=ResponseMessage[OrderOut])
@require_role(["admin", "cashier"])
async def advance_order_route(order_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    order = await order_service.advance_order(db, order_id, _user)
    return {"message": f"Order {order.order_number} is now {order.status.value}", "data": order}


@router.patch("/{order_id}/status", response_model=ResponseMessage[OrderOut])
@require_role(["admin", "cashier"])
async def update_order_status_route(
    order_id: int,
    payload: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    order = await order_service.update_order_status(db, order_id, payload.status, _user)
    return {"message": f"Order {order.order_number} is now {order.status.value}", "data": order}
