from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.services.billing_services.pricing import calculate_totals, calculate_discount


def voucher(discount_type="percentage", value="10", max_discount=None):
    return SimpleNamespace(
        discount_type=discount_type,
        discount_value=Decimal(value),
        max_discount=Decimal(max_discount) if max_discount else None,
    )


def test_without_voucher_only_tax_is_added():
    result = calculate_totals([{"unit_price": Decimal("50000"), "quantity": 2}])

    assert result.subtotal == Decimal("100000.00")
    assert result.discount == Decimal("0.00")
    assert result.tax == Decimal("11000.00")
    assert result.total == Decimal("111000.00")


def test_percentage_voucher_on_200k_cart():
    items = [
        {"unit_price": Decimal("48000"), "quantity": 2},
        {"unit_price": Decimal("52000"), "quantity": 2},
    ]

    result = calculate_totals(items, voucher("percentage", "10"))

    assert result.subtotal == Decimal("200000.00")
    assert result.discount == Decimal("20000.00")
    assert result.tax == Decimal("19800.00")
    assert result.total == Decimal("199800.00")


def test_percentage_discount_is_capped():
    result = calculate_totals(
        [{"unit_price": Decimal("500000"), "quantity": 1}],
        voucher("percentage", "50", max_discount="25000"),
    )

    assert result.discount == Decimal("25000.00")
    assert result.tax == Decimal("52250.00")
    assert result.total == Decimal("527250.00")


def test_fixed_discount():
    result = calculate_totals(
        [{"unit_price": Decimal("60000"), "quantity": 1}],
        voucher("fixed", "15000"),
    )

    assert result.discount == Decimal("15000.00")
    assert result.tax == Decimal("4950.00")
    assert result.total == Decimal("49950.00")


def test_fixed_discount_larger_than_cart_is_clamped():
    result = calculate_totals(
        [{"unit_price": Decimal("10000"), "quantity": 1}],
        voucher("fixed", "50000"),
    )

    assert result.discount == Decimal("10000.00")
    assert result.tax == Decimal("0.00")
    assert result.total == Decimal("0.00")


def test_rounding_is_half_up_to_cents():
    # 10% of 33.35 = 3.335 -> 3.34
    assert calculate_discount(Decimal("33.35"), voucher("percentage", "10")) == Decimal("3.34")


def test_accepts_objects_as_line_items():
    line = SimpleNamespace(unit_price=Decimal("15000"), quantity=3)

    assert calculate_totals([line]).subtotal == Decimal("45000.00")


def test_empty_cart_is_all_zero():
    result = calculate_totals([])

    assert result.as_dict() == {
        "subtotal": Decimal("0.00"),
        "discount": Decimal("0.00"),
        "tax": Decimal("0.00"),
        "total": Decimal("0.00"),
    }


@pytest.mark.parametrize(
    "prices,quantities,promo",
    [
        (["3000", "10000"], [3, 1], None),
        (["48000", "60000", "24000"], [1, 2, 5], voucher("percentage", "15")),
        (["70000"], [1], voucher("percentage", "33", max_discount="10000")),
        (["12345.67"], [7], voucher("fixed", "999.99")),
        (["1.01"], [3], voucher("percentage", "12.5")),
    ],
)
def test_total_always_equals_subtotal_minus_discount_plus_tax(prices, quantities, promo):
    items = [{"unit_price": Decimal(p), "quantity": q} for p, q in zip(prices, quantities)]

    result = calculate_totals(items, promo)

    assert result.total == result.subtotal - result.discount + result.tax
    assert Decimal("0") <= result.discount <= result.subtotal
