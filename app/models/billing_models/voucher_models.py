# app/models/billing_models/voucher_models.py
from decimal import Decimal
import enum
from sqlalchemy import Column, Integer, String, Numeric, DateTime, Boolean, Enum
from app.core.db import Base
from app.utils.datetime_utils import utcnow


class DiscountType(str, enum.Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class Voucher(Base):
    __tablename__ = "vouchers"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(50), unique=True, nullable=False, index=True)  # stored upper-case
    discount_type = Column(
        Enum(DiscountType, name="discount_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    discount_value = Column(Numeric(14, 2), nullable=False)
    min_purchase = Column(Numeric(14, 2), nullable=False, default=Decimal("0.00"))
    max_discount = Column(Numeric(14, 2), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    usage_limit = Column(Integer, nullable=True)
    used_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)
