# app/schemas/billing_schemas/cart_schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional
from decimal import Decimal
from app.schemas.billing_schemas.voucher_schemas import VoucherCheckOut


class CartItemAdd(BaseModel):
    product_id: int
    quantity: int = Field(1, ge=1, le=99)


class CartItemUpdate(BaseModel):
    quantity: int = Field(..., ge=1, le=99)


class CartItemOut(BaseModel):
    id: int
    product_id: int
    product_name: str
    unit_price: Decimal
    quantity: int
    line_total: Decimal


class CartOut(BaseModel):
    items: List[CartItemOut]
    subtotal: Decimal


class QuoteRequest(BaseModel):
    voucher_code: Optional[str] = None


class QuoteResponse(BaseModel):
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    total: Decimal
    voucher_code: Optional[str] = None
    voucher_error: Optional[VoucherCheckOut] = None
