"""
Esquemas Pydantic para compras a proveedores
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from decimal import Decimal
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from dinamicbar.modules.purchases.models import PaymentMethod
from dinamicbar.modules.products.models import ProductType


class NewProductData(BaseModel):
    """Producto que se crea junto con la compra"""
    name: str = Field(..., min_length=1, max_length=150)
    category_id: UUID
    type: ProductType = ProductType.NON_ALCOHOLIC
    image: Optional[str] = None


class PurchaseItemCreate(BaseModel):
    product_id: Optional[UUID] = Field(None, description="Producto existente")
    new_product: Optional[NewProductData] = Field(None, description="Producto nuevo a crear")
    quantity: int = Field(..., gt=0, description="Unidades compradas")
    purchase_price: Decimal = Field(..., gt=0, description="Costo unitario")
    sale_price: Decimal = Field(..., gt=0, description="Nuevo precio de venta")
    iva: Decimal = Field(Decimal("0"), ge=0, le=100, description="IVA en porcentaje")

    @field_validator("purchase_price", "sale_price")
    @classmethod
    def round_prices(cls, v: Decimal) -> Decimal:
        return v.quantize(Decimal("0.01"))

    @model_validator(mode="after")
    def validate_product_reference(self):
        if (self.product_id is None) == (self.new_product is None):
            raise ValueError("Cada línea requiere product_id o new_product (solo uno)")
        return self


class PurchaseCreate(BaseModel):
    supplier_id: UUID
    items: List[PurchaseItemCreate] = Field(..., min_length=1)
    payment_method: PaymentMethod = PaymentMethod.CASH
    date: Optional[datetime] = None
    company_image: Optional[str] = None


class PurchaseUpdate(BaseModel):
    """Solo se editan datos del encabezado; las líneas no cambian el stock"""
    supplier_id: Optional[UUID] = None
    date: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    company_image: Optional[str] = None


class SupplierBrief(BaseModel):
    id: UUID
    name: str

    model_config = {"from_attributes": True}


class PurchaseItemOut(BaseModel):
    id: UUID
    product_id: Optional[UUID] = None
    product_name: str
    quantity: int
    purchase_price: Decimal
    sale_price: Decimal
    iva: Decimal
    total: Decimal

    model_config = {"from_attributes": True}


class PurchaseOut(BaseModel):
    id: UUID
    supplier_id: UUID
    supplier: Optional[SupplierBrief] = None
    date: datetime
    subtotal: Decimal
    total_iva: Decimal
    grand_total: Decimal
    payment_method: PaymentMethod
    company_image: Optional[str] = None
    items: List[PurchaseItemOut] = []
    created_at: datetime

    model_config = {"from_attributes": True}


class PurchaseList(BaseModel):
    purchases: List[PurchaseOut]
    total: int
