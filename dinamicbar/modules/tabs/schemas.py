"""
Esquemas Pydantic para cuentas, sus productos y pagos divididos
"""

from pydantic import BaseModel, Field
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from dinamicbar.modules.purchases.models import PaymentMethod
from dinamicbar.modules.products.models import ProductType


# ===== ENTRADA =====

class TabCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    table_id: Optional[UUID] = None


class TabUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class TabItemAdd(BaseModel):
    product_id: UUID
    quantity: int = Field(1, gt=0)


class TabItemQuantity(BaseModel):
    quantity: int = Field(..., ge=0, description="0 elimina el producto de la cuenta")


class PaymentData(BaseModel):
    payment_method: PaymentMethod
    cash_received: Optional[Decimal] = Field(None, ge=0, description="Efectivo entregado (pagos en efectivo)")


class TabClose(PaymentData):
    pass


class SplitItem(BaseModel):
    tab_item_id: UUID
    quantity: int = Field(..., gt=0)


class TabSplit(PaymentData):
    paid_items: List[SplitItem] = Field(..., min_length=1)


# ===== SALIDA =====

class ProductBrief(BaseModel):
    id: UUID
    name: str
    sale_price: Decimal
    type: ProductType
    image: Optional[str] = None

    model_config = {"from_attributes": True}


class TabItemOut(BaseModel):
    id: UUID
    product_id: UUID
    product: ProductBrief
    quantity: int
    unit_price: Decimal
    total: Decimal

    model_config = {"from_attributes": True}


class TabOut(BaseModel):
    id: UUID
    name: str
    table_id: Optional[UUID] = None
    is_active: bool
    subtotal: Decimal
    total: Decimal
    items: List[TabItemOut] = []
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TabList(BaseModel):
    tabs: List[TabOut]
    total: int


class PaymentOut(BaseModel):
    id: UUID
    tab_id: UUID
    amount: Decimal
    method: PaymentMethod
    is_partial: bool
    date: datetime

    model_config = {"from_attributes": True}
