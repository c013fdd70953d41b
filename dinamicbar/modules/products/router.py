from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from dinamicbar.database.database import get_db
from dinamicbar.modules.auth.dependencies import AuthDependencies
from dinamicbar.modules.products.service import ProductService
from dinamicbar.modules.products.schemas import (
    ProductCreate, ProductUpdate, ProductPatch, ProductOut, ProductList
)

product_router = APIRouter(tags=["Products"])


@product_router.get("", response_model=ProductList)
def list_products(
    category_id: Optional[UUID] = Query(None, description="Filtrar por categoría"),
    search: Optional[str] = Query(None, description="Buscar por nombre"),
    db: Session = Depends(get_db)
):
    return ProductService(db).get_products(category_id, search)


@product_router.get("/low-stock", response_model=ProductList)
def list_low_stock_products(db: Session = Depends(get_db)):
    """Productos en o por debajo de su stock mínimo."""
    return ProductService(db).get_low_stock_products()


@product_router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(data: ProductCreate, db: Session = Depends(get_db)):
    return ProductService(db).create_product(data)


@product_router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: UUID, db: Session = Depends(get_db)):
    return ProductService(db).get_product_by_id(product_id)


@product_router.put("/{product_id}", response_model=ProductOut)
def update_product(product_id: UUID, data: ProductUpdate, db: Session = Depends(get_db)):
    return ProductService(db).update_product(product_id, data)


@product_router.patch("/{product_id}", response_model=ProductOut)
def patch_product(product_id: UUID, data: ProductPatch, db: Session = Depends(get_db)):
    """
    Ajustar stock o imagen de un producto.

    - **set**: fija el stock en `quantity`
    - **increase** / **decrease**: suma o resta `quantity` (mínimo 0)
    - **updateImage**: reemplaza la imagen
    - **removeImage**: elimina la imagen
    """
    return ProductService(db).patch_product(product_id, data)


@product_router.delete("/{product_id}")
def delete_product(
    product_id: UUID,
    db: Session = Depends(get_db),
    _ = Depends(AuthDependencies.require_management_password("DELETE_PRODUCT"))
):
    return ProductService(db).delete_product(product_id)
