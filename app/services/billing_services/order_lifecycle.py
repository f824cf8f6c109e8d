# app/services/billing_services/order_lifecycle.py
from typing import Optional

from app.core.exceptions import ConflictError
from app.models.billing_models.order_models import OrderStatus

# status -> statuses it may move to
ORDER_TRANSITIONS = {
    OrderStatus.PENDING_PAYMENT: {
        OrderStatus.PAID,
        OrderStatus.PAYMENT_REJECTED,
        OrderStatus.CANCELLED,
    },
    OrderStatus.PAYMENT_REJECTED: {
        OrderStatus.PENDING_PAYMENT,  # customer re-submits proof
        OrderStatus.CANCELLED,
    },
    OrderStatus.PAID: {OrderStatus.PROCESSING},
    OrderStatus.PROCESSING: {OrderStatus.READY_FOR_PICKUP},
    OrderStatus.READY_FOR_PICKUP: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}

FULFILLMENT_FLOW = [
    OrderStatus.PAID,
    OrderStatus.PROCESSING,
    OrderStatus.READY_FOR_PICKUP,
    OrderStatus.COMPLETED,
]

# only the verification workflow may decide a payment
VERIFICATION_TARGETS = {OrderStatus.PAID, OrderStatus.PAYMENT_REJECTED}

CANCELLABLE_STATUSES = {OrderStatus.PENDING_PAYMENT, OrderStatus.PAYMENT_REJECTED}

# statuses counted as income in financial reports
INCOME_STATUSES = [
    OrderStatus.PAID,
    OrderStatus.PROCESSING,
    OrderStatus.READY_FOR_PICKUP,
    OrderStatus.COMPLETED,
]

# payment list filters, as shown on the admin payments page
STATUS_GROUPS = {
    "pending": [OrderStatus.PENDING_PAYMENT],
    "paid": [OrderStatus.PAID, OrderStatus.COMPLETED],
    "cancelled": [OrderStatus.PAYMENT_REJECTED, OrderStatus.CANCELLED],
}


def is_terminal(status: OrderStatus) -> bool:
    return not ORDER_TRANSITIONS[OrderStatus(status)]


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return OrderStatus(target) in ORDER_TRANSITIONS[OrderStatus(current)]


def ensure_transition(current: OrderStatus, target: OrderStatus) -> None:
    current, target = OrderStatus(current), OrderStatus(target)
    if not can_transition(current, target):
        raise ConflictError(
            f"Order cannot move from '{current.value}' to '{target.value}'"
        )


def next_fulfillment_status(current: OrderStatus) -> Optional[OrderStatus]:
    """Next forward step after payment, or None when there is none."""
    current = OrderStatus(current)
    if current not in FULFILLMENT_FLOW:
        return None
    index = FULFILLMENT_FLOW.index(current)
    if index + 1 >= len(FULFILLMENT_FLOW):
        return None
    return FULFILLMENT_FLOW[index + 1]
