# app/services/billing_services/voucher_service.py
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy import select, update, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.billing_models.voucher_models import DiscountType, Voucher
from app.schemas.billing_schemas.voucher_schemas import (
    VoucherCreate, VoucherUpdate, VoucherOut, normalize_code,
)
from app.utils.activity_helpers import log_user_activity
from app.utils.datetime_utils import as_utc, utcnow
from app.utils.decimal_utils import format_rupiah, to_decimal

logger = logging.getLogger(__name__)

DEFAULT_VALIDITY_DAYS = 30

NOT_FOUND = "not_found"
INACTIVE = "inactive"
EXPIRED = "expired"
BELOW_MINIMUM = "below_minimum"
USAGE_EXCEEDED = "usage_exceeded"


@dataclass(frozen=True)
class VoucherCheck:
    ok: bool
    reason: Optional[str] = None
    message: Optional[str] = None

    def as_dict(self) -> dict:
        return {"ok": self.ok, "reason": self.reason, "message": self.message}


# =====================================================
# 🔹 VALIDATION
# =====================================================
def check_voucher(voucher: Optional[Voucher], subtotal: Decimal, now: Optional[datetime] = None) -> VoucherCheck:
    """Decide whether ``voucher`` can be applied to a cart worth ``subtotal``.

    ``voucher`` is the result of the code lookup (None when nothing matched).
    Nothing is written here; usage is counted when the order is placed.
    """
    if voucher is None:
        return VoucherCheck(False, NOT_FOUND, "Voucher code not found")

    if not voucher.is_active:
        return VoucherCheck(False, INACTIVE, "Voucher is no longer active")

    now = as_utc(now) if now else utcnow()
    if now > as_utc(voucher.expires_at):
        return VoucherCheck(False, EXPIRED, "Voucher has expired")

    min_purchase = to_decimal(voucher.min_purchase)
    if to_decimal(subtotal) < min_purchase:
        return VoucherCheck(
            False,
            BELOW_MINIMUM,
            f"Minimum purchase of {format_rupiah(min_purchase)} required to use this voucher",
        )

    if voucher.usage_limit is not None and voucher.used_count >= voucher.usage_limit:
        return VoucherCheck(False, USAGE_EXCEEDED, "Voucher usage limit has been reached")

    return VoucherCheck(True)


def display_status(voucher: Voucher, now: Optional[datetime] = None) -> str:
    now = as_utc(now) if now else utcnow()
    if not voucher.is_active:
        return "inactive"
    if now > as_utc(voucher.expires_at):
        return "expired"
    if voucher.usage_limit is not None and voucher.used_count >= voucher.usage_limit:
        return "limit_reached"
    return "active"


def to_voucher_out(voucher: Voucher) -> VoucherOut:
    out = VoucherOut.model_validate(voucher, from_attributes=True)
    out.display_status = display_status(voucher)
    return out


async def get_voucher_by_code(db: AsyncSession, code: str) -> Optional[Voucher]:
    result = await db.execute(select(Voucher).where(Voucher.code == normalize_code(code)))
    return result.scalar_one_or_none()


async def validate_voucher_code(db: AsyncSession, code: str, subtotal: Decimal):
    """Look the code up and check it. Returns ``(voucher, VoucherCheck)``."""
    voucher = await get_voucher_by_code(db, code)
    return voucher, check_voucher(voucher, subtotal)


async def increment_voucher_usage(db: AsyncSession, voucher_id: int) -> None:
    """Count one use inside the caller's transaction.

    The guard lives in the UPDATE itself so two checkouts racing for the last
    use cannot both succeed.
    """
    result = await db.execute(
        update(Voucher)
        .where(
            Voucher.id == voucher_id,
            or_(Voucher.usage_limit.is_(None), Voucher.used_count < Voucher.usage_limit),
        )
        .values(used_count=Voucher.used_count + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise ConflictError("Voucher usage limit has been reached")
    logger.info("Voucher %s usage incremented", voucher_id)


# =====================================================
# 🔹 MANAGEMENT (admin)
# =====================================================
# nullable columns an admin may reset to "no limit"
CLEARABLE_FIELDS = {"max_discount", "usage_limit"}


def _validate_value(discount_type: DiscountType, value: Decimal):
    if value <= 0:
        raise ValidationError("Discount value must be greater than 0")
    if discount_type == DiscountType.PERCENTAGE and value > 100:
        raise ValidationError("Percentage discount cannot exceed 100%")


async def create_voucher(db: AsyncSession, payload: VoucherCreate, _user) -> Voucher:
    _validate_value(payload.discount_type, payload.discount_value)

    if await get_voucher_by_code(db, payload.code):
        raise ConflictError("Voucher code already exists")

    data = payload.model_dump()
    if data.get("expires_at") is None:
        data["expires_at"] = utcnow() + timedelta(days=DEFAULT_VALIDITY_DAYS)

    voucher = Voucher(**data, used_count=0)
    db.add(voucher)
    await db.flush()

    await log_user_activity(
        db,
        user_id=_user.id,
        username=_user.username,
        message=f"Created voucher '{voucher.code}' (ID: {voucher.id})",
    )

    await db.commit()
    await db.refresh(voucher)
    return voucher


async def list_vouchers(db: AsyncSession, active_only: bool = False):
    query = select(Voucher).order_by(Voucher.expires_at.desc())
    if active_only:
        query = query.where(Voucher.is_active == True)  # noqa: E712
    result = await db.execute(query)
    return result.scalars().all()


async def get_voucher(db: AsyncSession, voucher_id: int) -> Voucher:
    voucher = await db.get(Voucher, voucher_id)
    if not voucher:
        raise NotFoundError("Voucher not found")
    return voucher


async def update_voucher(db: AsyncSession, voucher_id: int, payload: VoucherUpdate, _user) -> Voucher:
    voucher = await get_voucher(db, voucher_id)
    update_data = payload.model_dump(exclude_unset=True)

    cleared = sorted(k for k, v in update_data.items() if v is None and k not in CLEARABLE_FIELDS)
    if cleared:
        raise ValidationError(f"These fields cannot be empty: {', '.join(cleared)}")

    if "discount_type" in update_data or "discount_value" in update_data:
        _validate_value(
            update_data.get("discount_type") or voucher.discount_type,
            to_decimal(update_data.get("discount_value") or voucher.discount_value),
        )

    new_code = update_data.get("code")
    if new_code and new_code != voucher.code:
        existing = await get_voucher_by_code(db, new_code)
        if existing:
            raise ConflictError("Voucher code already exists")

    for key, value in update_data.items():
        setattr(voucher, key, value)

    await log_user_activity(
        db,
        user_id=_user.id,
        username=_user.username,
        message=f"Updated voucher '{voucher.code}' (ID: {voucher.id})",
    )

    await db.commit()
    await db.refresh(voucher)
    return voucher


async def toggle_voucher(db: AsyncSession, voucher_id: int, _user) -> Voucher:
    voucher = await get_voucher(db, voucher_id)
    voucher.is_active = not voucher.is_active

    await log_user_activity(
        db,
        user_id=_user.id,
        username=_user.username,
        message=f"{'Activated' if voucher.is_active else 'Deactivated'} voucher '{voucher.code}'",
    )

    await db.commit()
    await db.refresh(voucher)
    return voucher


async def delete_voucher(db: AsyncSession, voucher_id: int, _user) -> Voucher:
    voucher = await get_voucher(db, voucher_id)
    await db.delete(voucher)

    await log_user_activity(
        db,
        user_id=_user.id,
        username=_user.username,
        message=f"Deleted voucher '{voucher.code}' (ID: {voucher.id})",
    )

    await db.commit()
    return voucher
