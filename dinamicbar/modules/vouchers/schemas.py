from pydantic import BaseModel, Field
from decimal import Decimal
from uuid import UUID
from typing import Optional
from datetime import datetime

from dinamicbar.modules.vouchers.models import VoucherType


class VoucherCreate(BaseModel):
    type: VoucherType
    amount: Decimal = Field(..., gt=0)
    description: str = Field(..., min_length=1, max_length=255)
    category: Optional[str] = Field(None, max_length=100)
    date: Optional[datetime] = None


class VoucherUpdate(BaseModel):
    type: Optional[VoucherType] = None
    amount: Optional[Decimal] = Field(None, gt=0)
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    category: Optional[str] = Field(None, max_length=100)
    date: Optional[datetime] = None


class VoucherOut(BaseModel):
    id: UUID
    type: VoucherType
    amount: Decimal
    description: str
    category: Optional[str] = None
    date: datetime
    created_at: datetime

    model_config = {"from_attributes": True}


class VoucherList(BaseModel):
    vouchers: list[VoucherOut]
    total: int
