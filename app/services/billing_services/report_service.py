# app/services/billing_services/report_service.py
"""Income / expense summary for the owner's financial dashboard."""
import calendar
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.models.billing_models.expense_models import Expense
from app.models.billing_models.order_models import Order
from app.models.booking_models.appointment_models import Appointment, AppointmentStatus
from app.models.booking_models.service_models import Service
from app.schemas.billing_schemas.report_schemas import FinancialReport
from app.services.billing_services.order_lifecycle import INCOME_STATUSES
from app.services.booking_services.appointment_service import local_now
from app.utils.datetime_utils import utcnow
from app.utils.decimal_utils import to_decimal

logger = logging.getLogger(__name__)

PERIODS = ("today", "week", "month", "year")


def _months_back(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 - months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def period_range(period: str, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Rolling window ending at ``now``; ``today`` starts at midnight."""
    now = now or utcnow()
    if period == "today":
        start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    elif period == "week":
        start = now - timedelta(days=7)
    elif period == "month":
        start = _months_back(now, 1)
    elif period == "year":
        start = _months_back(now, 12)
    else:
        raise ValidationError(f"Unknown period '{period}'. Use one of: {', '.join(PERIODS)}")
    return start, now


async def financial_report(
    db: AsyncSession,
    period: str = "month",
    now: Optional[datetime] = None,
    shop_now: Optional[datetime] = None,
) -> FinancialReport:
    """Orders are stamped in UTC; appointment and expense dates are shop-local."""
    start, end = period_range(period, now)
    first_day, last_day = (d.date() for d in period_range(period, shop_now or local_now()))

    orders_row = (await db.execute(
        select(func.coalesce(func.sum(Order.total), 0), func.count(Order.id))
        .where(
            Order.status.in_(INCOME_STATUSES),
            Order.created_at >= start,
            Order.created_at <= end,
        )
    )).one()
    orders_income = to_decimal(orders_row[0])
    orders_count = orders_row[1]

    appointments_row = (await db.execute(
        select(func.coalesce(func.sum(Service.price), 0), func.count(Appointment.id))
        .join(Service, Service.id == Appointment.service_id)
        .where(
            Appointment.status == AppointmentStatus.COMPLETED,
            Appointment.date >= first_day,
            Appointment.date <= last_day,
        )
    )).one()
    appointments_income = to_decimal(appointments_row[0])
    appointments_count = appointments_row[1]

    total_expenses = to_decimal((await db.execute(
        select(func.coalesce(func.sum(Expense.amount), 0))
        .where(Expense.date >= first_day, Expense.date <= last_day)
    )).scalar_one())

    total_income = to_decimal(orders_income + appointments_income)
    transactions = orders_count + appointments_count
    average = to_decimal(total_income / transactions) if transactions else Decimal("0.00")

    logger.info(
        "Financial report %s: income=%s expenses=%s transactions=%s",
        period, total_income, total_expenses, transactions,
    )

    return FinancialReport(
        period=period,
        start_date=start,
        end_date=end,
        orders_income=orders_income,
        orders_count=orders_count,
        appointments_income=appointments_income,
        appointments_count=appointments_count,
        total_income=total_income,
        total_expenses=total_expenses,
        net_profit=to_decimal(total_income - total_expenses),
        transactions_count=transactions,
        avg_transaction_value=average,
    )
