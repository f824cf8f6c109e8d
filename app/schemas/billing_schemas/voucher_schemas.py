# app/schemas/billing_schemas/voucher_schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import Annotated, Optional
from datetime import datetime
from decimal import Decimal
from app.models.billing_models.voucher_models import DiscountType

PositiveDecimal = Annotated[Decimal, Field(gt=0, max_digits=14, decimal_places=2)]
NonNegativeDecimal = Annotated[Decimal, Field(ge=0, max_digits=14, decimal_places=2)]


def normalize_code(code: str) -> str:
    return code.strip().upper()


class VoucherBase(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    discount_type: DiscountType
    discount_value: PositiveDecimal
    min_purchase: NonNegativeDecimal = Decimal("0.00")
    max_discount: Optional[PositiveDecimal] = None
    is_active: bool = True
    usage_limit: Optional[int] = Field(None, ge=1)

    @field_validator("code")
    @classmethod
    def _normalize_code(cls, value: str) -> str:
        value = normalize_code(value)
        if not value:
            raise ValueError("Voucher code is required")
        return value


class VoucherCreate(VoucherBase):
    expires_at: Optional[datetime] = None  # defaults to 30 days from now


class VoucherUpdate(BaseModel):
    code: Optional[str] = Field(None, min_length=1, max_length=50)
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[PositiveDecimal] = None
    min_purchase: Optional[NonNegativeDecimal] = None
    max_discount: Optional[PositiveDecimal] = None
    is_active: Optional[bool] = None
    expires_at: Optional[datetime] = None
    usage_limit: Optional[int] = Field(None, ge=1)

    @field_validator("code")
    @classmethod
    def _normalize_code(cls, value: Optional[str]) -> Optional[str]:
        return normalize_code(value) if value is not None else None


class VoucherOut(VoucherBase):
    id: int
    expires_at: datetime
    used_count: int
    display_status: str = "active"

    class Config:
        from_attributes = True


class VoucherCheckOut(BaseModel):
    ok: bool
    reason: Optional[str] = None
    message: Optional[str] = None
