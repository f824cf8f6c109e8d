# app/services/billing_services/expense_service.py
from datetime import date
from typing import Optional

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.billing_models.expense_models import Expense
from app.schemas.billing_schemas.expense_schemas import ExpenseCreate, ExpenseUpdate
from app.utils.activity_helpers import log_user_activity
from app.utils.decimal_utils import format_rupiah


# -----------------------
# CREATE
# -----------------------
async def create_expense(db: AsyncSession, payload: ExpenseCreate, _user) -> Expense:
    expense = Expense(**payload.model_dump(), created_by=_user.id)
    db.add(expense)
    await db.flush()

    await log_user_activity(
        db,
        user_id=_user.id,
        username=_user.username,
        message=f"Recorded {expense.category} expense of {format_rupiah(expense.amount)} (ID: {expense.id})",
    )

    await db.commit()
    await db.refresh(expense)
    return expense


# -----------------------
# READ
# -----------------------
async def list_expenses(
    db: AsyncSession,
    category: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
):
    filters = []
    if category:
        filters.append(Expense.category == category)
    if start_date:
        filters.append(Expense.date >= start_date)
    if end_date:
        filters.append(Expense.date <= end_date)

    query = select(Expense).order_by(Expense.date.desc(), Expense.id.desc())
    if filters:
        query = query.where(and_(*filters))
    result = await db.execute(query)
    return result.scalars().all()


async def get_expense(db: AsyncSession, expense_id: int) -> Expense:
    expense = await db.get(Expense, expense_id)
    if not expense:
        raise NotFoundError("Expense not found")
    return expense


# -----------------------
# UPDATE
# -----------------------
async def update_expense(db: AsyncSession, expense_id: int, payload: ExpenseUpdate, _user) -> Expense:
    expense = await get_expense(db, expense_id)

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(expense, key, value)

    await log_user_activity(
        db,
        user_id=_user.id,
        username=_user.username,
        message=f"Updated expense (ID: {expense.id})",
    )

    await db.commit()
    await db.refresh(expense)
    return expense


# -----------------------
# DELETE
# -----------------------
async def delete_expense(db: AsyncSession, expense_id: int, _user) -> None:
    expense = await get_expense(db, expense_id)
    await db.delete(expense)

    await log_user_activity(
        db,
        user_id=_user.id,
        username=_user.username,
        message=f"Deleted expense (ID: {expense_id})",
    )

    await db.commit()
