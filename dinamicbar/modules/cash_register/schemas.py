"""
Esquemas Pydantic para sesiones de caja
"""

from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from enum import Enum

from dinamicbar.modules.cash_register.models import TransactionType
from dinamicbar.modules.purchases.models import PaymentMethod


class ManualTransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class CashRegisterOpen(BaseModel):
    """Esquema para abrir caja"""
    opening_amount: Decimal = Field(..., ge=0, description="Efectivo inicial")
    opened_by: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=500)


class CashRegisterClose(BaseModel):
    """Esquema para cerrar caja con arqueo"""
    closing_amount: Decimal = Field(..., ge=0, description="Efectivo contado al cierre")
    closed_by: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = Field(None, max_length=500)


class CashTransactionCreate(BaseModel):
    """Ingresos y gastos manuales durante la sesión"""
    type: ManualTransactionType
    amount: Decimal = Field(..., gt=0)
    description: str = Field(..., min_length=1, max_length=255)
    created_by: Optional[str] = Field(None, max_length=100)


class CashTransactionOut(BaseModel):
    id: UUID
    cash_register_id: UUID
    type: TransactionType
    amount: Decimal
    payment_method: Optional[PaymentMethod] = None
    description: Optional[str] = None
    sale_id: Optional[UUID] = None
    created_by: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class CashRegisterOut(BaseModel):
    id: UUID
    is_open: bool
    opening_amount: Decimal
    closing_amount: Optional[Decimal] = None
    opened_at: datetime
    closed_at: Optional[datetime] = None
    opened_by: Optional[str] = None
    closed_by: Optional[str] = None
    notes: Optional[str] = None
    total_sales: Decimal
    expected_cash: Decimal
    difference: Decimal

    model_config = {"from_attributes": True}


class CashRegisterDetail(CashRegisterOut):
    transactions: List[CashTransactionOut] = []


class CurrentCashRegister(BaseModel):
    cash_register: Optional[CashRegisterDetail] = None


class SalesByPaymentMethod(BaseModel):
    cash: Decimal = Decimal("0")
    card: Decimal = Decimal("0")
    transfer: Decimal = Decimal("0")


class CashRegisterSummary(BaseModel):
    """Arqueo: todos los totales salen de las transacciones registradas"""
    cash_register_id: UUID
    is_open: bool
    opening_amount: Decimal
    closing_amount: Optional[Decimal] = None
    total_transactions: int
    total_sales: Decimal
    sales_by_payment_method: SalesByPaymentMethod
    total_refunds: Decimal
    total_income: Decimal
    total_expenses: Decimal
    expected_cash: Decimal
    difference: Decimal


class CloseResponse(BaseModel):
    cash_register: CashRegisterOut
    summary: CashRegisterSummary


class CashRegisterHistory(BaseModel):
    cash_registers: List[CashRegisterOut]
    total: int


class CashTransactionList(BaseModel):
    transactions: List[CashTransactionOut]
    total: int
