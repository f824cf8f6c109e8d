# app/schemas/billing_schemas/order_schemas.py
from pydantic import BaseModel, Field
from typing import List, Optional, Literal
from decimal import Decimal
from datetime import datetime
from app.models.billing_models.order_models import OrderStatus, PaymentMethod


class CheckoutRequest(BaseModel):
    customer_name: str = Field(..., min_length=1, max_length=120)
    customer_phone: str = Field(..., min_length=5, max_length=30)
    shipping_address: str = Field(..., min_length=1, max_length=500)
    payment_method: PaymentMethod
    notes: Optional[str] = Field(None, max_length=500)
    voucher_code: Optional[str] = None
    payment_proof_url: Optional[str] = None


class OrderItemOut(BaseModel):
    product_id: Optional[int]
    product_name: str
    unit_price: Decimal
    quantity: int

    class Config:
        from_attributes = True


class OrderOut(BaseModel):
    id: int
    order_number: str
    customer_id: int
    customer_name: str
    customer_phone: str
    shipping_address: str
    items: List[OrderItemOut]
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    total: Decimal
    voucher_code: Optional[str] = None
    payment_method: PaymentMethod
    payment_proof_url: Optional[str] = None
    notes: Optional[str] = None
    status: OrderStatus
    payment_verified_at: Optional[datetime] = None
    payment_verified_by: Optional[int] = None
    verification_notes: Optional[str] = None
    payment_rejected_at: Optional[datetime] = None
    payment_rejected_by: Optional[int] = None
    rejection_reason: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class PaymentVerificationRequest(BaseModel):
    decision: Literal["approve", "reject"]
    notes: Optional[str] = Field(None, max_length=500)


class PaymentCounts(BaseModel):
    pending: int
    paid: int
    cancelled: int


class PaymentListResponse(BaseModel):
    message: str
    counts: PaymentCounts
    data: List[OrderOut]
