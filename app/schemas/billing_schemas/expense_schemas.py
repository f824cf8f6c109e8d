# app/schemas/billing_schemas/expense_schemas.py
from pydantic import BaseModel, Field
from typing import Annotated, Optional
from decimal import Decimal
from datetime import date as DateType, datetime

PositiveDecimal = Annotated[Decimal, Field(gt=0, max_digits=14, decimal_places=2)]
ExpenseCategory = Annotated[str, Field(pattern="^(supplies|utilities|salary|rent|maintenance|other)$")]


class ExpenseBase(BaseModel):
    category: ExpenseCategory = "other"
    amount: PositiveDecimal
    date: DateType
    description: Optional[str] = Field(None, max_length=500)


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseUpdate(BaseModel):
    category: Optional[ExpenseCategory] = None
    amount: Optional[PositiveDecimal] = None
    date: Optional[DateType] = None
    description: Optional[str] = Field(None, max_length=500)


class ExpenseOut(ExpenseBase):
    id: int
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
