from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
from datetime import date

from dinamicbar.database.database import get_db
from dinamicbar.modules.purchases.service import PurchaseService
from dinamicbar.modules.purchases.schemas import (
    PurchaseCreate, PurchaseUpdate, PurchaseOut, PurchaseList
)

purchases_router = APIRouter(tags=["Purchases"])


@purchases_router.get("", response_model=PurchaseList)
def list_purchases(
    supplier: Optional[str] = Query(None, description="Nombre (parcial) del proveedor"),
    start_date: Optional[date] = Query(None, description="Fecha inicial (incluida)"),
    end_date: Optional[date] = Query(None, description="Fecha final (incluida)"),
    db: Session = Depends(get_db)
):
    return PurchaseService(db).get_purchases(supplier, start_date, end_date)


@purchases_router.post("", response_model=PurchaseOut, status_code=status.HTTP_201_CREATED)
def create_purchase(data: PurchaseCreate, db: Session = Depends(get_db)):
    """
    Registrar una compra.

    En una sola transacción:
    - Crea los productos nuevos indicados en `new_product`
    - Suma las unidades compradas al stock
    - Actualiza costo y precio de venta de cada producto
    - Calcula subtotal, IVA y total general
    """
    return PurchaseService(db).create_purchase(data)


@purchases_router.get("/{purchase_id}", response_model=PurchaseOut)
def get_purchase(purchase_id: UUID, db: Session = Depends(get_db)):
    return PurchaseService(db).get_purchase_by_id(purchase_id)


@purchases_router.put("/{purchase_id}", response_model=PurchaseOut)
def update_purchase(purchase_id: UUID, data: PurchaseUpdate, db: Session = Depends(get_db)):
    return PurchaseService(db).update_purchase(purchase_id, data)


@purchases_router.delete("/{purchase_id}")
def delete_purchase(purchase_id: UUID, db: Session = Depends(get_db)):
    """Eliminar una compra y descontar del stock las unidades que sumó."""
    return PurchaseService(db).delete_purchase(purchase_id)
