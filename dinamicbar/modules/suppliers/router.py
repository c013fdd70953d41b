from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from dinamicbar.database.database import get_db
from dinamicbar.modules.suppliers.service import SupplierService
from dinamicbar.modules.suppliers.schemas import (
    SupplierCreate, SupplierUpdate, SupplierOut, SupplierList
)

suppliers_router = APIRouter(tags=["Suppliers"])


@suppliers_router.get("", response_model=SupplierList)
def list_suppliers(
    search: Optional[str] = Query(None, description="Buscar por nombre, teléfono o email"),
    db: Session = Depends(get_db)
):
    return SupplierService(db).get_suppliers(search)


@suppliers_router.post("", response_model=SupplierOut, status_code=status.HTTP_201_CREATED)
def create_supplier(data: SupplierCreate, db: Session = Depends(get_db)):
    return SupplierService(db).create_supplier(data)


@suppliers_router.get("/{supplier_id}", response_model=SupplierOut)
def get_supplier(supplier_id: UUID, db: Session = Depends(get_db)):
    return SupplierService(db).get_supplier_by_id(supplier_id)


@suppliers_router.put("/{supplier_id}", response_model=SupplierOut)
def update_supplier(supplier_id: UUID, data: SupplierUpdate, db: Session = Depends(get_db)):
    return SupplierService(db).update_supplier(supplier_id, data)


@suppliers_router.delete("/{supplier_id}")
def delete_supplier(supplier_id: UUID, db: Session = Depends(get_db)):
    return SupplierService(db).delete_supplier(supplier_id)
