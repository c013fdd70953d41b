"""
Esquemas Pydantic para ventas y reportes de ventas
"""

from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import date, datetime

from dinamicbar.modules.purchases.models import PaymentMethod
from dinamicbar.modules.sales.models import SaleStatus
from dinamicbar.modules.tabs.schemas import PaymentData, PaymentOut, TabItemOut


class SaleCreate(PaymentData):
    tab_id: UUID


class SaleCancel(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500, description="Motivo de la anulación")


class SaleItemOut(BaseModel):
    id: UUID
    product_id: Optional[UUID] = None
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    model_config = {"from_attributes": True}


class SaleOut(BaseModel):
    id: UUID
    tab_id: Optional[UUID] = None
    cash_register_id: UUID
    subtotal: Decimal
    total: Decimal
    payment_method: PaymentMethod
    cash_received: Optional[Decimal] = None
    change: Optional[Decimal] = None
    is_partial: bool
    status: SaleStatus
    cancel_reason: Optional[str] = None
    items: List[SaleItemOut] = []
    created_at: datetime

    model_config = {"from_attributes": True}


class SaleList(BaseModel):
    sales: List[SaleOut]
    total: int


class SplitResponse(BaseModel):
    sale: SaleOut
    payment: PaymentOut
    remaining_items: List[TabItemOut]
    tab_closed: bool


# ===== REPORTES =====

class SalesByPaymentMethod(BaseModel):
    cash: int = 0
    card: int = 0
    transfer: int = 0


class TopProduct(BaseModel):
    product_name: str
    quantity: int
    revenue: Decimal


class SalesByHour(BaseModel):
    hour: int
    count: int
    revenue: Decimal


class SalesReport(BaseModel):
    start_date: date
    end_date: date
    total_sales: int
    total_revenue: Decimal
    sales_by_payment_method: SalesByPaymentMethod
    top_products: List[TopProduct]
    sales_by_hour: List[SalesByHour]
