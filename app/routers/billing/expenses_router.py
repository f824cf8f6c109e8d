from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.billing_schemas.expense_schemas import ExpenseCreate, ExpenseUpdate, ExpenseOut
from app.schemas.response_schemas import ResponseMessage
from app.services.billing_services import expense_service
from app.utils.get_user import get_current_user
from app.utils.check_roles import require_role

router = APIRouter(prefix="/expenses", tags=["Expenses"])


@router.post("", response_model=ResponseMessage[ExpenseOut], status_code=status.HTTP_201_CREATED)
@require_role(["admin"])
async def create_expense_route(payload: ExpenseCreate, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    expense = await expense_service.create_expense(db, payload, _user)
    return {"message": "Expense recorded", "data": expense}


@router.get("", response_model=ResponseMessage[List[ExpenseOut]])
@require_role(["admin"])
async def list_expenses_route(
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
    category: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
):
    expenses = await expense_service.list_expenses(db, category, start_date, end_date)
    return {"message": f"{len(expenses)} expenses fetched", "data": expenses}


@router.get("/{expense_id}", response_model=ResponseMessage[ExpenseOut])
@require_role(["admin"])
async def get_expense_route(expense_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    return {"message": "Expense fetched", "data": await expense_service.get_expense(db, expense_id)}


@router.put("/{expense_id}", response_model=ResponseMessage[ExpenseOut])
@require_role(["admin"])
async def update_expense_route(
    expense_id: int,
    payload: ExpenseUpdate,
    db: AsyncSession = Depends(get_db),
    _user=Depends(get_current_user),
):
    expense = await expense_service.update_expense(db, expense_id, payload, _user)
    return {"message": "Expense updated", "data": expense}


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
@require_role(["admin"])
async def delete_expense_route(expense_id: int, db: AsyncSession = Depends(get_db), _user=Depends(get_current_user)):
    await expense_service.delete_expense(db, expense_id, _user)
