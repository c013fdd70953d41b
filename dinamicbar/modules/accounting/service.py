"""
Resumen contable: ingresos contra egresos por periodo

Ingresos: ventas completadas, comprobantes de ingreso e ingresos manuales de caja.
Egresos: compras, comprobantes de egreso y gastos pagados desde caja.
"""

import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Dict, Any, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from dinamicbar.modules.sales.models import Sale, SaleStatus
from dinamicbar.modules.purchases.models import Purchase
from dinamicbar.modules.vouchers.models import Voucher, VoucherType
from dinamicbar.modules.cash_register.models import CashTransaction, TransactionType

logger = logging.getLogger(__name__)


class AccountingService:
    """Servicio de reportes contables"""

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _period(start_date: date, end_date: date) -> Tuple[datetime, datetime]:
        if start_date > end_date:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="La fecha inicial debe ser anterior o igual a la final"
            )
        return (
            datetime.combine(start_date, time.min),
            datetime.combine(end_date + timedelta(days=1), time.min),
        )

    def _sum_and_count(self, column, date_column, start: datetime, end: datetime, *filters):
        result = self.db.query(
            func.count(),
            func.coalesce(func.sum(column), 0)
        ).filter(date_column >= start, date_column < end, *filters).one()
        return result[0], Decimal(str(result[1])).quantize(Decimal("0.01"))

    def get_summary(self, start_date: date, end_date: date) -> Dict[str, Any]:
        start, end = self._period(start_date, end_date)

        sales_count, sales_income = self._sum_and_count(
            Sale.total, Sale.created_at, start, end, Sale.status == SaleStatus.COMPLETED
        )
        _, voucher_income = self._sum_and_count(
            Voucher.amount, Voucher.date, start, end, Voucher.type == VoucherType.INCOME
        )
        _, cash_income = self._sum_and_count(
            CashTransaction.amount, CashTransaction.created_at, start, end,
            CashTransaction.type == TransactionType.INCOME
        )
        purchases_count, purchases_expenses = self._sum_and_count(
            Purchase.grand_total, Purchase.date, start, end
        )
        _, voucher_expenses = self._sum_and_count(
            Voucher.amount, Voucher.date, start, end, Voucher.type == VoucherType.EXPENSE
        )
        _, cash_expenses = self._sum_and_count(
            CashTransaction.amount, CashTransaction.created_at, start, end,
            CashTransaction.type == TransactionType.EXPENSE
        )

        total_income = sales_income + voucher_income + cash_income
        total_expenses = purchases_expenses + voucher_expenses + cash_expenses

        logger.debug(f"Resumen contable {start_date} - {end_date}: {total_income} / {total_expenses}")
        return {
            "period_start": start_date,
            "period_end": end_date,
            "sales_count": sales_count,
            "sales_income": sales_income,
            "voucher_income": voucher_income,
            "cash_income": cash_income,
            "total_income": total_income,
            "purchases_count": purchases_count,
            "purchases_expenses": purchases_expenses,
            "voucher_expenses": voucher_expenses,
            "cash_expenses": cash_expenses,
            "total_expenses": total_expenses,
            "net_result": total_income - total_expenses,
        }
