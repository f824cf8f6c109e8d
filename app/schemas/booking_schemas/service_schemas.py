# app/schemas/booking_schemas/service_schemas.py
from pydantic import BaseModel, Field
from typing import Annotated, Optional
from decimal import Decimal
from datetime import datetime

NonNegativeDecimal = Annotated[Decimal, Field(ge=0, max_digits=14, decimal_places=2)]
ServiceCategory = Annotated[str, Field(pattern="^(styling|cut|color|treatment)$")]


class ServiceBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    duration_minutes: int = Field(..., gt=0, le=480)
    price: NonNegativeDecimal
    category: ServiceCategory = "cut"
    is_active: bool = True


class ServiceCreate(ServiceBase):
    pass


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    duration_minutes: Optional[int] = Field(None, gt=0, le=480)
    price: Optional[NonNegativeDecimal] = None
    category: Optional[ServiceCategory] = None
    is_active: Optional[bool] = None


class ServiceOut(ServiceBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
