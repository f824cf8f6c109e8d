# app/schemas/inventory_schemas.py
from pydantic import BaseModel, Field
from typing import Annotated, List, Optional
from decimal import Decimal
from datetime import datetime

NonNegativeDecimal = Annotated[Decimal, Field(ge=0, max_digits=14, decimal_places=2)]
ProductCategory = Annotated[str, Field(pattern="^(styling|vitamins|color)$")]


class ProductBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    category: ProductCategory = "styling"
    price: NonNegativeDecimal
    stock: int = Field(0, ge=0)
    low_stock_threshold: int = Field(5, ge=0)
    images: List[str] = []
    is_active: bool = True


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    category: Optional[ProductCategory] = None
    price: Optional[NonNegativeDecimal] = None
    stock: Optional[int] = Field(None, ge=0)
    low_stock_threshold: Optional[int] = Field(None, ge=0)
    images: Optional[List[str]] = None
    is_active: Optional[bool] = None


class ProductOut(ProductBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StockAlert(BaseModel):
    product_id: int
    product_name: str
    category: str
    stock: int
    low_stock_threshold: int
    out_of_stock: bool = False
