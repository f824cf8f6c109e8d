# app/schemas/billing_schemas/report_schemas.py
from pydantic import BaseModel
from decimal import Decimal
from datetime import datetime


class FinancialReport(BaseModel):
    period: str
    start_date: datetime
    end_date: datetime
    orders_income: Decimal
    orders_count: int
    appointments_income: Decimal
    appointments_count: int
    total_income: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    transactions_count: int
    avg_transaction_value: Decimal
