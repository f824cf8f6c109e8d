# app/services/billing_services/pricing.py
"""Checkout price math.

Everything here is pure: callers pass line items (ORM rows, pydantic models
or plain dicts carrying ``unit_price`` and ``quantity``) and an optional
voucher, and get a ``PriceBreakdown`` back. Money is Decimal, rounded to two
places half-up at each step so stored totals add up exactly.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Optional

from app.models.billing_models.voucher_models import DiscountType
from app.utils.decimal_utils import to_decimal

TAX_RATE = Decimal("0.11")  # PPN 11%
ZERO = Decimal("0.00")


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    discount: Decimal
    tax: Decimal
    total: Decimal

    def as_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "discount": self.discount,
            "tax": self.tax,
            "total": self.total,
        }


def _field(obj: Any, name: str):
    if isinstance(obj, dict):
        return obj.get(name)
    return getattr(obj, name, None)


def calculate_subtotal(items: Iterable[Any]) -> Decimal:
    subtotal = ZERO
    for item in items:
        unit_price = to_decimal(_field(item, "unit_price"))
        quantity = int(_field(item, "quantity") or 0)
        subtotal += unit_price * quantity
    return to_decimal(subtotal)


def calculate_discount(subtotal: Decimal, voucher: Optional[Any]) -> Decimal:
    """Discount granted by ``voucher`` on ``subtotal``, never more than the subtotal."""
    if voucher is None:
        return ZERO

    subtotal = to_decimal(subtotal)
    discount_type = DiscountType(_field(voucher, "discount_type"))
    value = to_decimal(_field(voucher, "discount_value"))

    if discount_type == DiscountType.PERCENTAGE:
        discount = subtotal * value / Decimal("100")
        max_discount = _field(voucher, "max_discount")
        if max_discount is not None:
            discount = min(discount, to_decimal(max_discount))
    else:
        discount = value

    return to_decimal(max(ZERO, min(discount, subtotal)))


def calculate_tax(taxable: Decimal, tax_rate: Decimal = TAX_RATE) -> Decimal:
    return to_decimal(max(ZERO, to_decimal(taxable)) * tax_rate)


def calculate_totals(
    items: Iterable[Any],
    voucher: Optional[Any] = None,
    tax_rate: Decimal = TAX_RATE,
) -> PriceBreakdown:
    subtotal = calculate_subtotal(items)
    discount = calculate_discount(subtotal, voucher)
    tax = calculate_tax(subtotal - discount, tax_rate)
    total = to_decimal(subtotal - discount + tax)
    return PriceBreakdown(subtotal=subtotal, discount=discount, tax=tax, total=total)
