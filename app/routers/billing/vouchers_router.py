from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.billing_schemas.voucher_schemas import (
    VoucherCreate, VoucherUpdate, VoucherOut, VoucherCheckOut,
)
from app.schemas.billing_schemas.cart_schemas import QuoteRequest
from app.schemas.response_schemas import ResponseMessage
from app.services.billing_services import cart_service, voucher_service
from app.utils.get_user import get_current_user
from app.utils.check_roles import require_role

router = APIRouter(prefix="/vouchers", tags=["Vouchers"])


# CHECK A CODE AGAINST THE CURRENT CART
@router.post("/check", response_model=VoucherCheckOut)
async def check_voucher_route(
    payload: QuoteRequest,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    cart = await cart_service.get_cart(db, _user.id)
    _, check = await voucher_service.validate_voucher_code(db, payload.voucher_code or "", cart.subtotal)
    return check.as_dict()


# CREATE
@router.post("/", response_model=ResponseMessage[VoucherOut], status_code=status.HTTP_201_CREATED)
@require_role(["admin"])
async def create_voucher_route(
    payload: VoucherCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    voucher = await voucher_service.create_voucher(db, payload, _user)
    return {"message": f"Voucher '{voucher.code}' created", "data": voucher_service.to_voucher_out(voucher)}


# LIST
@router.get("/", response_model=ResponseMessage[List[VoucherOut]])
@require_role(["admin"])
async def list_vouchers_route(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
    active_only: bool = Query(False),
):
    vouchers = await voucher_service.list_vouchers(db, active_only)
    return {
        "message": f"{len(vouchers)} vouchers fetched",
        "data": [voucher_service.to_voucher_out(v) for v in vouchers],
    }


# GET SINGLE
@router.get("/{voucher_id}", response_model=ResponseMessage[VoucherOut])
@require_role(["admin"])
async def get_voucher_route(voucher_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    voucher = await voucher_service.get_voucher(db, voucher_id)
    return {"message": "Voucher fetched", "data": voucher_service.to_voucher_out(voucher)}


# UPDATE
@router.put("/{voucher_id}", response_model=ResponseMessage[VoucherOut])
@require_role(["admin"])
async def update_voucher_route(
    voucher_id: int,
    payload: VoucherUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    voucher = await voucher_service.update_voucher(db, voucher_id, payload, _user)
    return {"message": f"Voucher '{voucher.code}' updated", "data": voucher_service.to_voucher_out(voucher)}


# TOGGLE ACTIVE
@router.patch("/{voucher_id}/toggle", response_model=ResponseMessage[VoucherOut])
@require_role(["admin"])
async def toggle_voucher_route(voucher_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    voucher = await voucher_service.toggle_voucher(db, voucher_id, _user)
    state = "activated" if voucher.is_active else "deactivated"
    return {"message": f"Voucher '{voucher.code}' {state}", "data": voucher_service.to_voucher_out(voucher)}


# DELETE
@router.delete("/{voucher_id}", response_model=ResponseMessage[VoucherOut])
@require_role(["admin"])
async def delete_voucher_route(voucher_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    voucher = await voucher_service.delete_voucher(db, voucher_id, _user)
    return {"message": f"Voucher '{voucher.code}' deleted", "data": voucher_service.to_voucher_out(voucher)}
