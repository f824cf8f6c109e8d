# app/services/billing_services/order_service.py
import datetime
import logging
import random
import string
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import Settings
from app.core.exceptions import (
    ConflictError, NotFoundError, PermissionDeniedError, ValidationError,
)
from app.models.billing_models.order_models import Order, OrderItem, OrderStatus, PaymentMethod
from app.models.user_models import STAFF_ROLES
from app.schemas.billing_schemas.cart_schemas import QuoteResponse
from app.schemas.billing_schemas.order_schemas import CheckoutRequest
from app.services.billing_services import cart_service, voucher_service
from app.services.billing_services.order_lifecycle import (
    CANCELLABLE_STATUSES, STATUS_GROUPS, VERIFICATION_TARGETS,
    ensure_transition, next_fulfillment_status,
)
from app.services.billing_services.pricing import calculate_totals
from app.utils.activity_helpers import log_user_activity

logger = logging.getLogger(__name__)

ORDER_NUMBER_ATTEMPTS = 5


def _generate_order_number(prefix="ORD"):
    # timestamp + small random suffix; collisions handled by retry
    ts = datetime.datetime.now(datetime.timezone.utc).strftime("%Y%m%d%H%M%S")
    suffix = "".join(random.choices(string.digits, k=4))
    return f"{prefix}-{ts}-{suffix}"


def _is_staff(user) -> bool:
    return user.role.lower() in STAFF_ROLES


# =====================================================
# 🔹 QUOTE (cart preview)
# =====================================================
async def quote_cart(db: AsyncSession, user, voucher_code: Optional[str], settings: Settings) -> QuoteResponse:
    items = await cart_service.get_cart_items(db, user.id)
    lines = [{"unit_price": i.product.price, "quantity": i.quantity} for i in items]

    voucher = None
    voucher_error = None
    if voucher_code and voucher_code.strip():
        subtotal = calculate_totals(lines, tax_rate=settings.tax_rate).subtotal
        found, check = await voucher_service.validate_voucher_code(db, voucher_code, subtotal)
        if check.ok:
            voucher = found
        else:
            voucher_error = check.as_dict()

    breakdown = calculate_totals(lines, voucher, tax_rate=settings.tax_rate)
    return QuoteResponse(
        **breakdown.as_dict(),
        voucher_code=voucher.code if voucher else None,
        voucher_error=voucher_error,
    )


# =====================================================
# 🔹 CHECKOUT
# =====================================================
async def place_order(db: AsyncSession, user, payload: CheckoutRequest, settings: Settings) -> Order:
    """Turn the user's cart into an order.

    Order rows, the voucher usage count and the cart clean-up are written in a
    single transaction: either the order exists with its voucher counted and
    the cart empty, or nothing changed.
    """
    cart_items = await cart_service.get_cart_items(db, user.id)
    if not cart_items:
        raise ValidationError("Your cart is empty")

    for item in cart_items:
        if not item.product.is_active:
            raise ValidationError(f"Product '{item.product.name}' is no longer available")
        cart_service.ensure_in_stock(item.product, item.quantity)

    # snapshot names and prices so later product edits never change the order
    snapshot = [
        {
            "product_id": item.product_id,
            "product_name": item.product.name,
            "unit_price": item.product.price,
            "quantity": item.quantity,
        }
        for item in cart_items
    ]

    voucher = None
    if payload.voucher_code and payload.voucher_code.strip():
        subtotal = calculate_totals(snapshot, tax_rate=settings.tax_rate).subtotal
        voucher, check = await voucher_service.validate_voucher_code(db, payload.voucher_code, subtotal)
        if not check.ok:
            raise ValidationError(check.message)

    breakdown = calculate_totals(snapshot, voucher, tax_rate=settings.tax_rate)

    # plain values only: a rollback below expires every loaded instance
    user_id = user.id
    voucher_id = voucher.id if voucher else None
    voucher_code = voucher.code if voucher else None

    proof_url = None
    if payload.payment_method == PaymentMethod.TRANSFER and payload.payment_proof_url:
        proof_url = payload.payment_proof_url

    for _ in range(ORDER_NUMBER_ATTEMPTS):
        order = Order(
            order_number=_generate_order_number(),
            customer_id=user_id,
            customer_name=payload.customer_name.strip(),
            customer_phone=payload.customer_phone.strip(),
            shipping_address=payload.shipping_address.strip(),
            subtotal=breakdown.subtotal,
            discount=breakdown.discount,
            tax=breakdown.tax,
            total=breakdown.total,
            voucher_id=voucher_id,
            voucher_code=voucher_code,
            payment_method=payload.payment_method,
            payment_proof_url=proof_url,
            notes=(payload.notes or "").strip() or None,
            status=OrderStatus.PENDING_PAYMENT,
            items=[OrderItem(**line) for line in snapshot],
        )
        db.add(order)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            logger.warning("Order number collision, retrying")
            continue

        try:
            if voucher_id:
                await voucher_service.increment_voucher_usage(db, voucher_id)
            await cart_service.clear_cart(db, user_id, commit=False)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Order %s placed by user %s: total=%s voucher=%s",
            order.order_number, user_id, order.total, order.voucher_code,
        )
        return await get_order(db, order.id)

    raise RuntimeError("Could not generate unique order number after retries")


# =====================================================
# 🔹 READ
# =====================================================
async def get_order(db: AsyncSession, order_id: int) -> Order:
    result = await db.execute(
        select(Order)
        .options(selectinload(Order.items))
        .where(Order.id == order_id)
        .execution_options(populate_existing=True)
    )
    order = result.scalar_one_or_none()
    if not order:
        raise NotFoundError("Order not found")
    return order


async def get_order_for_user(db: AsyncSession, order_id: int, user) -> Order:
    order = await get_order(db, order_id)
    if order.customer_id != user.id and not _is_staff(user):
        # do not reveal other customers' orders
        raise NotFoundError("Order not found")
    return order


async def list_orders_for_customer(db: AsyncSession, customer_id: int, limit: int = 100, offset: int = 0) -> List[Order]:
    result = await db.execute(
        select(Order)
        .where(Order.customer_id == customer_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return result.scalars().all()


async def list_orders(
    db: AsyncSession,
    status_group: str = "all",
    payment_method: Optional[PaymentMethod] = None,
    limit: int = 100,
    offset: int = 0,
) -> List[Order]:
    query = select(Order)
    if status_group != "all":
        if status_group not in STATUS_GROUPS:
            raise ValidationError(f"Unknown status filter '{status_group}'")
        query = query.where(Order.status.in_(STATUS_GROUPS[status_group]))
    if payment_method:
        query = query.where(Order.payment_method == payment_method)

    result = await db.execute(
        query.order_by(Order.created_at.desc(), Order.id.desc()).limit(limit).offset(offset)
    )
    return result.scalars().all()


async def count_orders_by_group(db: AsyncSession) -> dict:
    result = await db.execute(select(Order.status, func.count(Order.id)).group_by(Order.status))
    per_status = {OrderStatus(status): count for status, count in result.all()}
    return {
        group: sum(per_status.get(status, 0) for status in statuses)
        for group, statuses in STATUS_GROUPS.items()
    }


# =====================================================
# 🔹 PAYMENT PROOF (customer)
# =====================================================
def ensure_accepts_proof(order: Order) -> None:
    if order.payment_method != PaymentMethod.TRANSFER:
        raise ValidationError("Payment proof is only needed for transfer payments")
    if order.status not in (OrderStatus.PENDING_PAYMENT, OrderStatus.PAYMENT_REJECTED):
        raise ConflictError("Payment proof can no longer be changed for this order")


async def get_order_for_proof(db: AsyncSession, order_id: int, user) -> Order:
    """The customer's own transfer order, still open for a (new) receipt."""
    order = await get_order(db, order_id)
    if order.customer_id != user.id:
        raise NotFoundError("Order not found")
    ensure_accepts_proof(order)
    return order


async def attach_payment_proof(db: AsyncSession, order_id: int, user, proof_url: str) -> Order:
    # checked again: the order may have been decided while the file uploaded
    order = await get_order_for_proof(db, order_id, user)

    if order.status == OrderStatus.PAYMENT_REJECTED:
        ensure_transition(order.status, OrderStatus.PENDING_PAYMENT)
        order.status = OrderStatus.PENDING_PAYMENT

    order.payment_proof_url = proof_url
    await db.commit()
    logger.info("Payment proof attached to order %s", order.order_number)
    return await get_order(db, order.id)


# =====================================================
# 🔹 CANCEL
# =====================================================
async def cancel_order(db: AsyncSession, order_id: int, user) -> Order:
    order = await get_order_for_user(db, order_id, user)
    if order.status not in CANCELLABLE_STATUSES:
        raise ConflictError("Only unpaid orders can be cancelled")

    ensure_transition(order.status, OrderStatus.CANCELLED)
    order.status = OrderStatus.CANCELLED

    if _is_staff(user):
        await log_user_activity(
            db, user_id=user.id, username=user.username,
            message=f"Cancelled order {order.order_number}",
        )

    await db.commit()
    logger.info("Order %s cancelled by user %s", order.order_number, user.id)
    return await get_order(db, order.id)


# =====================================================
# 🔹 FULFILLMENT (staff)
# =====================================================
async def update_order_status(db: AsyncSession, order_id: int, target: OrderStatus, _user) -> Order:
    if not _is_staff(_user):
        raise PermissionDeniedError()

    target = OrderStatus(target)
    if target in VERIFICATION_TARGETS:
        raise ValidationError("Use payment verification to approve or reject payments")
    if target == OrderStatus.PENDING_PAYMENT:
        raise ValidationError("A rejected payment is reopened only by uploading a new proof")

    order = await get_order(db, order_id)
    ensure_transition(order.status, target)

    previous = order.status
    order.status = target

    await log_user_activity(
        db, user_id=_user.id, username=_user.username,
        message=f"Order {order.order_number}: {previous.value} -> {target.value}",
    )

    await db.commit()
    logger.info("Order %s moved %s -> %s", order.order_number, previous.value, target.value)
    return await get_order(db, order.id)


async def advance_order(db: AsyncSession, order_id: int, _user) -> Order:
    order = await get_order(db, order_id)
    target = next_fulfillment_status(order.status)
    if target is None:
        raise ConflictError(f"Order in '{order.status.value}' has no next fulfillment step")
    return await update_order_status(db, order_id, target, _user)
