# app/routers/inventory/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.inventory_schemas import ProductCreate, ProductUpdate, ProductOut
from app.schemas.response_schemas import ResponseMessage
from app.services.inventory_services import product_service
from app.utils.get_user import get_current_user
from app.utils.check_roles import require_role

router = APIRouter(prefix="/products", tags=["Products"])


# -----------------------------------------------------------
# PUBLIC CATALOGUE
# -----------------------------------------------------------
@router.get("", response_model=ResponseMessage[List[ProductOut]])
async def list_products_route(
    db: AsyncSession = Depends(get_db),
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    """
    Active products, with optional name search and category filter.
    """
    total, products = await product_service.list_products(db, search, category, False, limit, offset)
    return {"message": f"{total} products found", "data": products}


# -----------------------------------------------------------
# BACK-OFFICE LIST (includes hidden products)
# -----------------------------------------------------------
@router.get("/manage", response_model=ResponseMessage[List[ProductOut]])
@require_role(["admin"])
async def list_all_products_route(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
    search: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    total, products = await product_service.list_products(db, search, category, True, limit, offset)
    return {"message": f"{total} products found", "data": products}


@router.get("/{product_id}", response_model=ResponseMessage[ProductOut])
async def get_product_route(product_id: int, db: AsyncSession = Depends(get_db)):
    product = await product_service.get_product(db, product_id, include_inactive=False)
    return {"message": "Product fetched successfully", "data": product}


# -----------------------------------------------------------
# CREATE PRODUCT
# -----------------------------------------------------------
@router.post("", response_model=ResponseMessage[ProductOut], status_code=status.HTTP_201_CREATED)
@require_role(["admin"])
async def create_product_route(
    data: ProductCreate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    product = await product_service.create_product(db, data, _user)
    return {"message": "Product created successfully", "data": product}


# -----------------------------------------------------------
# UPDATE PRODUCT
# -----------------------------------------------------------
@router.put("/{product_id}", response_model=ResponseMessage[ProductOut])
@require_role(["admin"])
async def update_product_route(
    product_id: int,
    data: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    product = await product_service.update_product(db, product_id, data, _user)
    return {"message": "Product updated successfully", "data": product}


# -----------------------------------------------------------
# DELETE PRODUCT
# -----------------------------------------------------------
@router.delete("/{product_id}", response_model=ResponseMessage[ProductOut])
@require_role(["admin"])
async def delete_product_route(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    """
    Hide a product from the catalogue. Restricted to admin role only.
    """
    product = await product_service.delete_product(db, product_id, _user)
    return {"message": "Product deleted successfully", "data": product}
