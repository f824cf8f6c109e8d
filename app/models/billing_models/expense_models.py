# app/models/billing_models/expense_models.py
from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, Text, ForeignKey
from app.core.db import Base
from app.utils.datetime_utils import utcnow

EXPENSE_CATEGORIES = ("supplies", "utilities", "salary", "rent", "maintenance", "other")


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String(30), nullable=False, default="other")
    amount = Column(Numeric(14, 2), nullable=False)
    date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow)
