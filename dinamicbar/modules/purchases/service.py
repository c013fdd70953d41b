"""
Servicios de negocio para compras

Cada compra registrada incrementa el stock de sus productos y actualiza
sus precios de costo y venta; eliminarla revierte el incremento.
"""

import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Dict, Any, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import desc
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError

from dinamicbar.modules.purchases.models import Purchase, PurchaseItem
from dinamicbar.modules.purchases.schemas import PurchaseCreate, PurchaseUpdate, PurchaseItemCreate
from dinamicbar.modules.suppliers.models import Supplier
from dinamicbar.modules.products.models import Product
from dinamicbar.modules.categories.models import Category

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def calculate_line_totals(quantity: int, purchase_price: Decimal, iva: Decimal) -> Dict[str, Decimal]:
    """Subtotal, IVA y total de una línea de compra (IVA en porcentaje)"""
    line_subtotal = (purchase_price * quantity).quantize(CENTS)
    iva_amount = (line_subtotal * iva / Decimal("100")).quantize(CENTS)
    return {
        "subtotal": line_subtotal,
        "iva": iva_amount,
        "total": line_subtotal + iva_amount,
    }


class PurchaseService:
    """Servicio para registro de compras a proveedores"""

    def __init__(self, db: Session):
        self.db = db

    def _get_supplier(self, supplier_id: UUID) -> Supplier:
        supplier = self.db.query(Supplier).filter(Supplier.id == supplier_id).first()
        if not supplier:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Proveedor no encontrado"
            )
        return supplier

    def _resolve_product(self, item: PurchaseItemCreate) -> Product:
        """Producto existente o nuevo (creado con stock 0 dentro de la misma transacción)"""
        if item.product_id:
            product = self.db.query(Product).filter(Product.id == item.product_id).first()
            if not product:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Producto no encontrado: {item.product_id}"
                )
            return product

        new_product = item.new_product
        category = self.db.query(Category).filter(Category.id == new_product.category_id).first()
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Categoría no encontrada"
            )

        product = Product(
            name=new_product.name,
            category_id=new_product.category_id,
            type=new_product.type,
            image=new_product.image,
            stock=0,
            purchase_price=item.purchase_price,
            sale_price=item.sale_price
        )
        self.db.add(product)
        self.db.flush()
        logger.info(f"Producto creado desde compra: {product.name}")
        return product

    def create_purchase(self, data: PurchaseCreate) -> Purchase:
        """Registrar compra, crear productos nuevos y sumar stock"""
        try:
            self._get_supplier(data.supplier_id)

            purchase = Purchase(
                supplier_id=data.supplier_id,
                payment_method=data.payment_method,
                company_image=data.company_image
            )
            if data.date:
                purchase.date = data.date

            subtotal = Decimal("0")
            total_iva = Decimal("0")

            for item_data in data.items:
                product = self._resolve_product(item_data)
                totals = calculate_line_totals(item_data.quantity, item_data.purchase_price, item_data.iva)

                purchase.items.append(PurchaseItem(
                    product_id=product.id,
                    product_name=product.name,
                    quantity=item_data.quantity,
                    purchase_price=item_data.purchase_price,
                    sale_price=item_data.sale_price,
                    iva=item_data.iva,
                    total=totals["total"]
                ))

                # Incrementar stock y actualizar precios
                product.stock += item_data.quantity
                product.purchase_price = item_data.purchase_price
                product.sale_price = item_data.sale_price

                subtotal += totals["subtotal"]
                total_iva += totals["iva"]

            purchase.subtotal = subtotal
            purchase.total_iva = total_iva
            purchase.grand_total = subtotal + total_iva

            self.db.add(purchase)
            self.db.commit()
            self.db.refresh(purchase)

            logger.info(f"Compra registrada {purchase.id}: {len(data.items)} línea(s), total {purchase.grand_total}")
            return purchase

        except HTTPException:
            self.db.rollback()
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Error de integridad en base de datos"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error registrando compra")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def get_purchases(self, supplier: Optional[str] = None,
                      start_date: Optional[date] = None,
                      end_date: Optional[date] = None) -> Dict[str, Any]:
        """Listar compras con filtros por proveedor y rango de fechas"""
        query = self.db.query(Purchase).options(selectinload(Purchase.items))

        if supplier:
            query = query.join(Purchase.supplier).filter(Supplier.name.ilike(f"%{supplier.strip()}%"))

        if start_date:
            query = query.filter(Purchase.date >= datetime.combine(start_date, time.min))

        if end_date:
            query = query.filter(Purchase.date < datetime.combine(end_date + timedelta(days=1), time.min))

        purchases = query.order_by(desc(Purchase.date)).all()
        return {"purchases": purchases, "total": len(purchases)}

    def get_purchase_by_id(self, purchase_id: UUID) -> Purchase:
        purchase = self.db.query(Purchase).options(
            selectinload(Purchase.items)
        ).filter(Purchase.id == purchase_id).first()

        if not purchase:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Compra no encontrada"
            )
        return purchase

    def update_purchase(self, purchase_id: UUID, data: PurchaseUpdate) -> Purchase:
        try:
            purchase = self.get_purchase_by_id(purchase_id)
            update_dict = data.model_dump(exclude_unset=True, exclude_none=True)

            if "supplier_id" in update_dict:
                self._get_supplier(update_dict["supplier_id"])

            for field, value in update_dict.items():
                setattr(purchase, field, value)

            self.db.commit()
            self.db.refresh(purchase)
            return purchase

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error actualizando compra")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def delete_purchase(self, purchase_id: UUID) -> Dict[str, str]:
        """Eliminar compra revirtiendo el stock que sumó"""
        try:
            purchase = self.get_purchase_by_id(purchase_id)

            for item in purchase.items:
                if item.product_id is None:
                    continue
                product = self.db.query(Product).filter(Product.id == item.product_id).first()
                if product is None:
                    continue
                if product.stock < item.quantity:
                    logger.warning(
                        f"Stock de {product.name} ({product.stock}) menor que lo comprado "
                        f"({item.quantity}); queda en 0"
                    )
                product.stock = max(0, product.stock - item.quantity)

            self.db.delete(purchase)
            self.db.commit()
            logger.info(f"Compra eliminada {purchase_id}")
            return {"message": "Compra eliminada exitosamente"}

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error eliminando compra")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )
