# app/services/billing_services/payment_verification_service.py
"""Admin approve/reject decision on an order's payment.

The decision is only accepted while the order is ``pending_payment``; any
other state means somebody already decided (or the order moved on), and the
request is refused without touching the row.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.billing_models.order_models import Order, OrderStatus, PaymentMethod
from app.services.billing_services.order_lifecycle import ensure_transition
from app.services.billing_services.order_service import get_order
from app.utils.activity_helpers import log_user_activity
from app.utils.datetime_utils import utcnow

logger = logging.getLogger(__name__)

APPROVE = "approve"
REJECT = "reject"

MAX_NOTES_LENGTH = 500

DEFAULT_APPROVAL_NOTES = {
    PaymentMethod.TRANSFER: "Transfer payment confirmed",
    PaymentMethod.CASH: "Cash payment confirmed",
}
DEFAULT_REJECTION_REASON = "Payment rejected"


async def verify_payment(
    db: AsyncSession,
    order_id: int,
    decision: str,
    notes: Optional[str],
    _user,
) -> Order:
    if decision not in (APPROVE, REJECT):
        raise ValidationError("Decision must be 'approve' or 'reject'")

    notes = (notes or "").strip()
    if len(notes) > MAX_NOTES_LENGTH:
        raise ValidationError(f"Notes cannot exceed {MAX_NOTES_LENGTH} characters")

    admin_id = _user.id
    admin_name = _user.username

    # lock the order row for the decision
    result = await db.execute(
        select(Order).where(Order.id == order_id).with_for_update()
    )
    order = result.scalar_one_or_none()
    if order is None:
        raise NotFoundError("Order not found")

    if order.status != OrderStatus.PENDING_PAYMENT:
        raise ConflictError(
            f"Payment for order {order.order_number} was already processed (status: {order.status.value})"
        )

    now = utcnow()

    if decision == APPROVE:
        ensure_transition(order.status, OrderStatus.PAID)
        order.status = OrderStatus.PAID
        order.payment_verified_at = now
        order.payment_verified_by = admin_id
        order.verification_notes = notes or DEFAULT_APPROVAL_NOTES[order.payment_method]
        message = f"Approved payment for order {order.order_number}"
    else:
        if order.payment_method == PaymentMethod.TRANSFER and not notes:
            raise ValidationError("Please provide a rejection reason")
        ensure_transition(order.status, OrderStatus.PAYMENT_REJECTED)
        order.status = OrderStatus.PAYMENT_REJECTED
        order.payment_rejected_at = now
        order.payment_rejected_by = admin_id
        order.rejection_reason = notes or DEFAULT_REJECTION_REASON
        if order.payment_method == PaymentMethod.TRANSFER:
            # customer has to upload a new proof
            order.payment_proof_url = None
        message = f"Rejected payment for order {order.order_number}: {order.rejection_reason}"

    await log_user_activity(db, user_id=admin_id, username=admin_name, message=message)

    try:
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception("Failed to save payment decision for order %s", order_id)
        raise

    logger.info("%s (by %s)", message, admin_name)
    return await get_order(db, order_id)
