from pydantic import BaseModel, Field, field_validator, model_validator
from decimal import Decimal
from uuid import UUID
from typing import Optional, Literal
from datetime import datetime

from dinamicbar.modules.products.models import ProductType


class CategoryBrief(BaseModel):
    id: UUID
    name: str
    icon: Optional[str] = None

    model_config = {"from_attributes": True}


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    category_id: UUID
    stock: int = Field(0, ge=0)
    min_stock: Optional[int] = Field(None, ge=0)
    purchase_price: Decimal = Field(..., gt=0)
    sale_price: Decimal = Field(..., gt=0)
    type: ProductType = ProductType.NON_ALCOHOLIC
    image: Optional[str] = None

    @field_validator("purchase_price", "sale_price")
    @classmethod
    def round_prices(cls, v: Decimal) -> Decimal:
        return v.quantize(Decimal("0.01"))


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    category_id: Optional[UUID] = None
    stock: Optional[int] = Field(None, ge=0)
    min_stock: Optional[int] = Field(None, ge=0)
    purchase_price: Optional[Decimal] = Field(None, gt=0)
    sale_price: Optional[Decimal] = Field(None, gt=0)
    type: Optional[ProductType] = None
    image: Optional[str] = None

    @field_validator("purchase_price", "sale_price")
    @classmethod
    def round_prices(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return v.quantize(Decimal("0.01")) if v is not None else v


class ProductPatch(BaseModel):
    """Acciones puntuales sobre stock e imagen"""
    action: Literal["set", "increase", "decrease", "updateImage", "removeImage"]
    quantity: Optional[int] = Field(None, ge=0)
    image: Optional[str] = None

    @model_validator(mode="after")
    def validate_action(self):
        if self.action in ("set", "increase", "decrease") and self.quantity is None:
            raise ValueError("La acción requiere una cantidad")
        if self.action == "updateImage" and not self.image:
            raise ValueError("La acción updateImage requiere una imagen")
        return self


class ProductOut(BaseModel):
    id: UUID
    name: str
    category_id: UUID
    category: Optional[CategoryBrief] = None
    stock: int
    min_stock: Optional[int] = None
    purchase_price: Decimal
    sale_price: Decimal
    type: ProductType
    image: Optional[str] = None
    is_low_stock: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProductList(BaseModel):
    products: list[ProductOut]
    total: int
