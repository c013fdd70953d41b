"""
Routers FastAPI para sesiones de caja
"""

from fastapi import APIRouter, Depends, Query, Path, status
from sqlalchemy.orm import Session
from uuid import UUID

from dinamicbar.core.config import settings
from dinamicbar.database.database import get_db
from dinamicbar.modules.cash_register.service import CashRegisterService
from dinamicbar.modules.cash_register.schemas import (
    CashRegisterOpen, CashRegisterClose, CashRegisterDetail, CurrentCashRegister,
    CloseResponse, CashRegisterHistory, CashRegisterSummary,
    CashTransactionCreate, CashTransactionOut, CashTransactionList
)

cash_register_router = APIRouter(tags=["Cash Register"])


@cash_register_router.get("", response_model=CurrentCashRegister)
def get_current_cash_register(db: Session = Depends(get_db)):
    """Caja abierta actual con sus transacciones (null si no hay)."""
    service = CashRegisterService(db)
    return {"cash_register": service.get_open_register()}


@cash_register_router.post("", response_model=CashRegisterDetail, status_code=status.HTTP_201_CREATED)
def open_cash_register(data: CashRegisterOpen, db: Session = Depends(get_db)):
    """
    Abrir caja.

    - **opening_amount**: Efectivo inicial
    - **opened_by**: Quién abre
    - **notes**: Notas opcionales

    Solo puede haber una caja abierta a la vez.
    """
    service = CashRegisterService(db)
    return service.open_cash_register(data)


@cash_register_router.put("", response_model=CloseResponse)
def close_cash_register(data: CashRegisterClose, db: Session = Depends(get_db)):
    """
    Cerrar caja con arqueo.

    El resumen incluye ventas por medio de pago, ingresos, gastos, efectivo
    esperado (apertura + ventas en efectivo + ingresos - gastos) y la
    diferencia contra el monto contado.
    """
    service = CashRegisterService(db)
    return service.close_cash_register(data)


@cash_register_router.get("/history", response_model=CashRegisterHistory)
def get_cash_register_history(
    limit: int = Query(settings.CASH_REGISTER_HISTORY_LIMIT, ge=1, le=100),
    db: Session = Depends(get_db)
):
    service = CashRegisterService(db)
    return service.get_history(limit)


@cash_register_router.get("/transactions", response_model=CashTransactionList)
def list_transactions(db: Session = Depends(get_db)):
    service = CashRegisterService(db)
    return service.get_transactions()


@cash_register_router.post("/transactions", response_model=CashTransactionOut, status_code=status.HTTP_201_CREATED)
def create_transaction(data: CashTransactionCreate, db: Session = Depends(get_db)):
    """Registrar un ingreso o gasto manual en la caja abierta."""
    service = CashRegisterService(db)
    return service.create_transaction(data)


@cash_register_router.get("/{register_id}/summary", response_model=CashRegisterSummary)
def get_cash_register_summary(
    register_id: UUID = Path(..., description="ID de la sesión de caja"),
    db: Session = Depends(get_db)
):
    service = CashRegisterService(db)
    return service.get_summary(register_id)
