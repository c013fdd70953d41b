from pydantic import BaseModel, Field, field_validator
from uuid import UUID
from typing import Optional, List
from datetime import datetime


class CategoryBase(BaseModel):
    icon: Optional[str] = Field(None, max_length=50, description="Nombre del ícono en la interfaz")
    shortcut: Optional[str] = Field(None, max_length=10, description="Tecla de acceso rápido")


class CategoryCreate(CategoryBase):
    name: str = Field(..., min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("El nombre no puede estar vacío")
        return v


class CategoryUpdate(CategoryBase):
    name: Optional[str] = Field(None, min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("El nombre no puede estar vacío")
        return v


class CategoryOut(CategoryBase):
    id: UUID
    name: str
    created_at: datetime

    model_config = {"from_attributes": True}


class CategoryList(BaseModel):
    categories: List[CategoryOut]
    total: int
