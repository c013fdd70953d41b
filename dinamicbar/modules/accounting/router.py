from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date

from dinamicbar.database.database import get_db
from dinamicbar.modules.accounting.service import AccountingService
from dinamicbar.modules.accounting.schemas import AccountingSummary
from dinamicbar.modules.accounting.utils import summary_csv_response

accounting_router = APIRouter(tags=["Accounting"])


@accounting_router.get("/summary", response_model=AccountingSummary)
def get_accounting_summary(
    start_date: date = Query(..., description="Fecha inicial (incluida)"),
    end_date: date = Query(..., description="Fecha final (incluida)"),
    export: Optional[str] = Query(None, pattern="^csv$", description="csv para descargar el reporte"),
    db: Session = Depends(get_db)
):
    """
    Ingresos contra egresos del periodo.

    - Ingresos: ventas completadas, comprobantes de ingreso, ingresos de caja
    - Egresos: compras, comprobantes de egreso, gastos de caja
    """
    summary = AccountingService(db).get_summary(start_date, end_date)

    if export == "csv":
        return summary_csv_response(summary)
    return summary
