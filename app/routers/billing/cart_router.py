from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.db import get_db
from app.schemas.billing_schemas.cart_schemas import (
    CartItemAdd, CartItemUpdate, CartOut, QuoteRequest, QuoteResponse,
)
from app.services.billing_services import cart_service, order_service
from app.utils.get_user import get_current_user

router = APIRouter(prefix="/cart", tags=["Cart"])


@router.get("", response_model=CartOut)
async def get_cart_route(db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    return await cart_service.get_cart(db, _user.id)


@router.post("/items", response_model=CartOut)
async def add_item_route(payload: CartItemAdd, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    return await cart_service.add_to_cart(db, _user.id, payload)


@router.put("/items/{item_id}", response_model=CartOut)
async def update_item_route(
    item_id: int,
    payload: CartItemUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    return await cart_service.update_cart_item(db, _user.id, item_id, payload.quantity)


@router.delete("/items/{item_id}", response_model=CartOut)
async def remove_item_route(item_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    return await cart_service.remove_cart_item(db, _user.id, item_id)


@router.delete("", response_model=CartOut)
async def clear_cart_route(db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    await cart_service.clear_cart(db, _user.id)
    return CartOut(items=[], subtotal=0)


@router.post("/quote", response_model=QuoteResponse)
async def quote_route(
    payload: QuoteRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
    _user=Depends(get_current_user),
):
    """
    Price breakdown of the current cart. An unusable voucher is reported in
    ``voucher_error`` and gives no discount.
    """
    return await order_service.quote_cart(db, _user, payload.voucher_code, settings)
