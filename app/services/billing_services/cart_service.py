# app/services/billing_services/cart_service.py
import logging
from decimal import Decimal
from typing import List

from sqlalchemy import select, delete
from sqlalchemy.orm import selectinload
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError, ValidationError
from app.models.billing_models.cart_models import CartItem
from app.models.inventory_models import Product
from app.schemas.billing_schemas.cart_schemas import CartItemAdd, CartItemOut, CartOut
from app.utils.decimal_utils import to_decimal

logger = logging.getLogger(__name__)

MAX_QUANTITY = 99


async def get_cart_items(db: AsyncSession, user_id: int) -> List[CartItem]:
    result = await db.execute(
        select(CartItem)
        .options(selectinload(CartItem.product))
        .where(CartItem.user_id == user_id)
        .order_by(CartItem.id)
        .execution_options(populate_existing=True)
    )
    return result.scalars().all()


def to_cart_out(items: List[CartItem]) -> CartOut:
    lines = []
    subtotal = Decimal("0.00")
    for item in items:
        unit_price = to_decimal(item.product.price)
        line_total = to_decimal(unit_price * item.quantity)
        subtotal += line_total
        lines.append(CartItemOut(
            id=item.id,
            product_id=item.product_id,
            product_name=item.product.name,
            unit_price=unit_price,
            quantity=item.quantity,
            line_total=line_total,
        ))
    return CartOut(items=lines, subtotal=to_decimal(subtotal))


async def get_cart(db: AsyncSession, user_id: int) -> CartOut:
    return to_cart_out(await get_cart_items(db, user_id))


async def _get_sellable_product(db: AsyncSession, product_id: int) -> Product:
    product = await db.get(Product, product_id)
    if not product or not product.is_active:
        raise NotFoundError("Product not found")
    return product


def ensure_in_stock(product: Product, quantity: int) -> None:
    if product.stock <= 0:
        raise ValidationError(f"'{product.name}' is out of stock")
    if quantity > product.stock:
        raise ValidationError(f"Only {product.stock} of '{product.name}' left in stock")


async def add_to_cart(db: AsyncSession, user_id: int, payload: CartItemAdd) -> CartOut:
    product = await _get_sellable_product(db, payload.product_id)

    result = await db.execute(
        select(CartItem).where(CartItem.user_id == user_id, CartItem.product_id == product.id)
    )
    item = result.scalar_one_or_none()

    if item:
        new_quantity = item.quantity + payload.quantity
        if new_quantity > MAX_QUANTITY:
            raise ValidationError(f"Quantity cannot exceed {MAX_QUANTITY}")
        ensure_in_stock(product, new_quantity)
        item.quantity = new_quantity
    else:
        ensure_in_stock(product, payload.quantity)
        db.add(CartItem(user_id=user_id, product_id=product.id, quantity=payload.quantity))

    await db.commit()
    return await get_cart(db, user_id)


async def _get_own_item(db: AsyncSession, user_id: int, item_id: int) -> CartItem:
    item = await db.get(CartItem, item_id)
    if not item or item.user_id != user_id:
        raise NotFoundError("Cart item not found")
    return item


async def update_cart_item(db: AsyncSession, user_id: int, item_id: int, quantity: int) -> CartOut:
    item = await _get_own_item(db, user_id, item_id)
    ensure_in_stock(await _get_sellable_product(db, item.product_id), quantity)
    item.quantity = quantity
    await db.commit()
    return await get_cart(db, user_id)


async def remove_cart_item(db: AsyncSession, user_id: int, item_id: int) -> CartOut:
    item = await _get_own_item(db, user_id, item_id)
    await db.delete(item)
    await db.commit()
    return await get_cart(db, user_id)


async def clear_cart(db: AsyncSession, user_id: int, commit: bool = True) -> None:
    await db.execute(delete(CartItem).where(CartItem.user_id == user_id))
    if commit:
        await db.commit()
        logger.debug("Cart cleared for user %s", user_id)
