from decimal import Decimal
from sqlalchemy import (
    Column, Integer, String, Numeric, DateTime, Text, JSON,
    CheckConstraint, Boolean
)
from sqlalchemy.ext.mutable import MutableList
from app.core.db import Base
from app.utils.datetime_utils import utcnow

PRODUCT_CATEGORIES = ("styling", "vitamins", "color")

# --------------------------
# Product
# --------------------------
class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(20), nullable=False, default="styling")
    price = Column(Numeric(14, 2), default=Decimal("0.00"), nullable=False)
    stock = Column(Integer, default=0, nullable=False)
    low_stock_threshold = Column(Integer, default=5, nullable=False)
    images = Column(MutableList.as_mutable(JSON), default=list)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(price >= 0, name="check_product_price_non_negative"),
        CheckConstraint(stock >= 0, name="check_product_stock_non_negative"),
    )
