from pydantic import BaseModel
from decimal import Decimal
from datetime import date


class AccountingSummary(BaseModel):
    """Ingresos contra egresos del periodo"""
    period_start: date
    period_end: date
    sales_count: int
    sales_income: Decimal
    voucher_income: Decimal
    cash_income: Decimal
    total_income: Decimal
    purchases_count: int
    purchases_expenses: Decimal
    voucher_expenses: Decimal
    cash_expenses: Decimal
    total_expenses: Decimal
    net_result: Decimal
