from pydantic import BaseModel, Field
from uuid import UUID
from typing import Optional
from datetime import datetime


class StoreCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=150)
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=255)
    image: Optional[str] = None


class StoreUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=255)
    image: Optional[str] = None


class StoreOut(BaseModel):
    id: UUID
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    image: Optional[str] = None
    updated_at: datetime

    model_config = {"from_attributes": True}


class StoreResponse(BaseModel):
    store: Optional[StoreOut] = None
