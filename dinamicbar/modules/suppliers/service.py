import logging
from sqlalchemy import or_
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any, Optional

from dinamicbar.common.utils import update_changes
from dinamicbar.modules.suppliers.models import Supplier
from dinamicbar.modules.suppliers.schemas import SupplierCreate, SupplierUpdate
from dinamicbar.modules.purchases.models import Purchase

logger = logging.getLogger(__name__)


class SupplierService:
    """Servicio para gestión de proveedores"""

    def __init__(self, db: Session):
        self.db = db

    def create_supplier(self, data: SupplierCreate) -> Supplier:
        try:
            supplier = Supplier(**data.model_dump())
            self.db.add(supplier)
            self.db.commit()
            self.db.refresh(supplier)
            return supplier
        except Exception:
            self.db.rollback()
            logger.exception("Error creando proveedor")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def get_suppliers(self, search: Optional[str] = None) -> Dict[str, Any]:
        """Listar proveedores, opcionalmente filtrando por nombre, teléfono o email"""
        query = self.db.query(Supplier)
        if search:
            term = f"%{search.strip()}%"
            query = query.filter(or_(
                Supplier.name.ilike(term),
                Supplier.phone.ilike(term),
                Supplier.email.ilike(term)
            ))
        suppliers = query.order_by(Supplier.name).all()
        return {"suppliers": suppliers, "total": len(suppliers)}

    def get_supplier_by_id(self, supplier_id: UUID) -> Supplier:
        supplier = self.db.query(Supplier).filter(Supplier.id == supplier_id).first()
        if not supplier:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Proveedor no encontrado"
            )
        return supplier

    def update_supplier(self, supplier_id: UUID, data: SupplierUpdate) -> Supplier:
        try:
            supplier = self.get_supplier_by_id(supplier_id)
            for field, value in update_changes(data, nullable=("phone", "email", "address", "image")).items():
                setattr(supplier, field, value)
            self.db.commit()
            self.db.refresh(supplier)
            return supplier
        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error actualizando proveedor")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def delete_supplier(self, supplier_id: UUID) -> Dict[str, str]:
        try:
            supplier = self.get_supplier_by_id(supplier_id)

            purchases = self.db.query(Purchase).filter(Purchase.supplier_id == supplier_id).count()
            if purchases:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"El proveedor tiene {purchases} compra(s) registradas"
                )

            self.db.delete(supplier)
            self.db.commit()
            return {"message": "Proveedor eliminado exitosamente"}
        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error eliminando proveedor")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )
