from fastapi import APIRouter, Depends, Query, Path, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
from datetime import date

from dinamicbar.core.config import settings
from dinamicbar.database.database import get_db
from dinamicbar.modules.auth.dependencies import AuthDependencies
from dinamicbar.modules.sales.service import SalesService
from dinamicbar.modules.sales.schemas import (
    SaleCreate, SaleCancel, SaleOut, SaleList, SalesReport
)

sales_router = APIRouter(tags=["Sales"])


@sales_router.post("", response_model=SaleOut, status_code=status.HTTP_201_CREATED)
def process_sale(data: SaleCreate, db: Session = Depends(get_db)):
    """
    Cobrar una cuenta completa.

    - **tab_id**: Cuenta a cobrar
    - **payment_method**: CASH, CARD o TRANSFER
    - **cash_received**: Efectivo entregado (obligatorio en efectivo)

    Validaciones:
    - La cuenta debe estar activa y tener productos
    - Debe haber una caja abierta
    - En efectivo, lo recibido debe cubrir el total

    Descuenta stock, registra la venta en la caja y cierra la cuenta.
    """
    return SalesService(db).process_sale(data.tab_id, data)


@sales_router.get("", response_model=SaleList)
def list_sales(
    limit: int = Query(settings.SALES_DEFAULT_LIMIT, ge=1, le=500),
    start_date: Optional[date] = Query(None, description="Fecha inicial (incluida)"),
    end_date: Optional[date] = Query(None, description="Fecha final (incluida)"),
    today: bool = Query(False, description="Solo ventas de hoy"),
    db: Session = Depends(get_db)
):
    return SalesService(db).get_sales(limit, start_date, end_date, today)


@sales_router.get("/reports", response_model=SalesReport)
def get_sales_report(
    start_date: date = Query(..., description="Fecha inicial (incluida)"),
    end_date: date = Query(..., description="Fecha final (incluida)"),
    db: Session = Depends(get_db)
):
    """
    Reporte de ventas completadas:
    total de ventas e ingresos, ventas por medio de pago,
    10 productos más vendidos y ventas por hora del día.
    """
    return SalesService(db).get_report(start_date, end_date)


@sales_router.get("/{sale_id}", response_model=SaleOut)
def get_sale(sale_id: UUID = Path(..., description="ID de la venta"), db: Session = Depends(get_db)):
    return SalesService(db).get_sale_by_id(sale_id)


@sales_router.delete("/{sale_id}", response_model=SaleOut)
def cancel_sale(
    data: SaleCancel,
    sale_id: UUID = Path(..., description="ID de la venta"),
    db: Session = Depends(get_db),
    _ = Depends(AuthDependencies.require_management_password("VOID_SALE"))
):
    """
    Anular una venta de la caja abierta.

    Devuelve el stock, regresa los productos a la cuenta (que se reabre)
    y registra un reembolso en la caja.
    """
    return SalesService(db).cancel_sale(sale_id, data.reason)
