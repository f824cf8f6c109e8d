from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

from app.services.billing_services.voucher_service import (
    BELOW_MINIMUM, EXPIRED, INACTIVE, NOT_FOUND, USAGE_EXCEEDED, check_voucher,
)

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def voucher(**overrides):
    values = {
        "code": "SAVE10",
        "discount_type": "percentage",
        "discount_value": Decimal("10"),
        "min_purchase": Decimal("50000"),
        "max_discount": None,
        "is_active": True,
        "expires_at": NOW + timedelta(days=1),
        "usage_limit": 10,
        "used_count": 0,
    }
    values.update(overrides)
    return SimpleNamespace(**values)


def test_valid_voucher_passes():
    result = check_voucher(voucher(), Decimal("100000"), now=NOW)

    assert result.ok
    assert result.reason is None


def test_unknown_code():
    result = check_voucher(None, Decimal("100000"), now=NOW)

    assert not result.ok
    assert result.reason == NOT_FOUND


def test_inactive_voucher():
    result = check_voucher(voucher(is_active=False), Decimal("100000"), now=NOW)

    assert result.reason == INACTIVE


def test_expired_voucher():
    result = check_voucher(voucher(expires_at=NOW - timedelta(seconds=1)), Decimal("100000"), now=NOW)

    assert result.reason == EXPIRED


def test_expiry_instant_itself_is_still_valid():
    assert check_voucher(voucher(expires_at=NOW), Decimal("100000"), now=NOW).ok


def test_naive_expiry_is_read_as_utc():
    naive = (NOW - timedelta(hours=1)).replace(tzinfo=None)

    assert check_voucher(voucher(expires_at=naive), Decimal("100000"), now=NOW).reason == EXPIRED


def test_below_minimum_names_the_threshold():
    result = check_voucher(voucher(), Decimal("49999"), now=NOW)

    assert result.reason == BELOW_MINIMUM
    assert "Rp50.000" in result.message


def test_subtotal_equal_to_minimum_passes():
    assert check_voucher(voucher(), Decimal("50000"), now=NOW).ok


def test_usage_limit_reached():
    result = check_voucher(voucher(used_count=10), Decimal("100000"), now=NOW)

    assert result.reason == USAGE_EXCEEDED


def test_one_use_left_passes():
    assert check_voucher(voucher(used_count=9), Decimal("100000"), now=NOW).ok


def test_no_usage_limit_means_unlimited():
    assert check_voucher(voucher(usage_limit=None, used_count=5000), Decimal("100000"), now=NOW).ok


def test_inactive_is_reported_before_expired():
    stale = voucher(is_active=False, expires_at=NOW - timedelta(days=3))

    assert check_voucher(stale, Decimal("100000"), now=NOW).reason == INACTIVE


def test_expired_is_reported_before_below_minimum():
    stale = voucher(expires_at=NOW - timedelta(days=3))

    assert check_voucher(stale, Decimal("100"), now=NOW).reason == EXPIRED
