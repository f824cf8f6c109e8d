# app/services/inventory_services/product_service.py
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError
from app.models.inventory_models import Product
from app.schemas.inventory_schemas import ProductCreate, ProductUpdate
from app.utils.activity_helpers import log_user_activity


# ---------------------------------------------------
# CREATE PRODUCT
# ---------------------------------------------------
async def create_product(db: AsyncSession, data: ProductCreate, current_user) -> Product:
    """
    Create a new product and log the creation in the activity log.
    """
    existing = await db.execute(
        select(Product).where(func.lower(Product.name) == data.name.strip().lower())
    )
    if existing.scalars().first():
        raise ConflictError(f"Product '{data.name}' already exists")

    product = Product(**data.model_dump())
    product.name = product.name.strip()
    db.add(product)
    await db.flush()  # ensures product.id is available

    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"{current_user.role.capitalize()} created product '{product.name}' (ID: {product.id})",
    )

    await db.commit()
    await db.refresh(product)
    return product


# ---------------------------------------------------
# LIST PRODUCTS
# ---------------------------------------------------
async def list_products(
    db: AsyncSession,
    search: Optional[str] = None,
    category: Optional[str] = None,
    include_inactive: bool = False,
    limit: int = 50,
    offset: int = 0,
):
    query = select(Product)
    if not include_inactive:
        query = query.where(Product.is_active == True)  # noqa: E712
    if search:
        query = query.where(Product.name.ilike(f"%{search}%"))
    if category:
        query = query.where(Product.category == category)

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar_one()
    result = await db.execute(query.order_by(Product.name).limit(limit).offset(offset))
    return total, result.scalars().all()


# ---------------------------------------------------
# GET SINGLE PRODUCT
# ---------------------------------------------------
async def get_product(db: AsyncSession, product_id: int, include_inactive: bool = True) -> Product:
    product = await db.get(Product, product_id)
    if not product or (not include_inactive and not product.is_active):
        raise NotFoundError("Product not found")
    return product


# ---------------------------------------------------
# UPDATE PRODUCT
# ---------------------------------------------------
async def update_product(db: AsyncSession, product_id: int, data: ProductUpdate, current_user) -> Product:
    """
    Update product details and log the changes.
    """
    product = await get_product(db, product_id)
    update_data = data.model_dump(exclude_unset=True)

    new_name = update_data.get("name")
    if new_name and new_name.strip().lower() != product.name.lower():
        existing = await db.execute(
            select(Product).where(
                func.lower(Product.name) == new_name.strip().lower(),
                Product.id != product_id,
            )
        )
        if existing.scalars().first():
            raise ConflictError(f"Product '{new_name}' already exists")
        update_data["name"] = new_name.strip()

    changes = []
    for key, value in update_data.items():
        old_val = getattr(product, key)
        if old_val != value:
            changes.append(f"{key}: {old_val} -> {value}")
            setattr(product, key, value)

    if changes:
        await log_user_activity(
            db,
            user_id=current_user.id,
            username=current_user.username,
            message=f"{current_user.role.capitalize()} updated product '{product.name}' "
                    f"(ID: {product.id}): {', '.join(changes)}",
        )

    await db.commit()
    await db.refresh(product)
    return product


# ---------------------------------------------------
# DELETE PRODUCT
# ---------------------------------------------------
async def delete_product(db: AsyncSession, product_id: int, current_user) -> Product:
    """
    Hide a product from the catalogue. Past orders keep their own snapshot.
    """
    product = await get_product(db, product_id)
    product.is_active = False

    await log_user_activity(
        db,
        user_id=current_user.id,
        username=current_user.username,
        message=f"{current_user.role.capitalize()} deleted product '{product.name}' (ID: {product.id})",
    )

    await db.commit()
    await db.refresh(product)
    return product
