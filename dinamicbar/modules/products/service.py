import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any, Optional

from dinamicbar.common.utils import update_changes
from dinamicbar.core.config import settings
from dinamicbar.modules.products.models import Product
from dinamicbar.modules.products.schemas import ProductCreate, ProductUpdate, ProductPatch
from dinamicbar.modules.categories.models import Category
from dinamicbar.modules.tabs.models import TabItem

logger = logging.getLogger(__name__)


class ProductService:
    """Servicio para gestión de productos e inventario"""

    def __init__(self, db: Session):
        self.db = db

    def _validate_category(self, category_id: UUID) -> Category:
        category = self.db.query(Category).filter(Category.id == category_id).first()
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Categoría no encontrada"
            )
        return category

    def create_product(self, data: ProductCreate) -> Product:
        try:
            self._validate_category(data.category_id)

            product = Product(**data.model_dump())
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
            return product

        except HTTPException:
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Error de integridad en base de datos"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error creando producto")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def get_products(self, category_id: Optional[UUID] = None, search: Optional[str] = None) -> Dict[str, Any]:
        """Listar productos con filtros por categoría y texto"""
        query = self.db.query(Product)

        if category_id:
            query = query.filter(Product.category_id == category_id)

        if search:
            query = query.filter(Product.name.ilike(f"%{search.strip()}%"))

        products = query.order_by(Product.name).all()
        return {"products": products, "total": len(products)}

    def get_low_stock_products(self) -> Dict[str, Any]:
        """Productos con stock igual o inferior a su mínimo"""
        products = self.db.query(Product).filter(
            ((Product.min_stock.is_(None)) & (Product.stock <= settings.LOW_STOCK_THRESHOLD))
            | ((Product.min_stock.isnot(None)) & (Product.stock <= Product.min_stock))
        ).order_by(Product.stock, Product.name).all()
        return {"products": products, "total": len(products)}

    def get_product_by_id(self, product_id: UUID) -> Product:
        product = self.db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Producto no encontrado"
            )
        return product

    def update_product(self, product_id: UUID, data: ProductUpdate) -> Product:
        try:
            product = self.get_product_by_id(product_id)

            update_dict = update_changes(data, nullable=("min_stock", "image"))
            if update_dict.get("category_id"):
                self._validate_category(update_dict["category_id"])

            for field, value in update_dict.items():
                setattr(product, field, value)

            self.db.commit()
            self.db.refresh(product)
            return product

        except HTTPException:
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Error de integridad en base de datos"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error actualizando producto")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def patch_product(self, product_id: UUID, data: ProductPatch) -> Product:
        """
        Ajustes rápidos de inventario:
        - set: fija el stock
        - increase / decrease: suma o resta unidades (nunca por debajo de 0)
        - updateImage / removeImage: gestiona la imagen
        """
        try:
            product = self.get_product_by_id(product_id)

            if data.action == "set":
                product.stock = data.quantity
            elif data.action == "increase":
                product.stock += data.quantity
            elif data.action == "decrease":
                product.stock = max(0, product.stock - data.quantity)
            elif data.action == "updateImage":
                product.image = data.image
            elif data.action == "removeImage":
                product.image = None

            self.db.commit()
            self.db.refresh(product)
            logger.debug(f"Producto {product.name}: acción {data.action}, stock {product.stock}")
            return product

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error ajustando producto")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def delete_product(self, product_id: UUID) -> Dict[str, str]:
        """
        Eliminar producto. Sus líneas en cuentas se quitan y los totales de
        esas cuentas se recalculan en la misma transacción.
        """
        try:
            product = self.get_product_by_id(product_id)

            tab_items = self.db.query(TabItem).filter(TabItem.product_id == product_id).all()
            for item in tab_items:
                tab = item.tab
                tab.items.remove(item)
                tab.recalculate_totals()

            self.db.delete(product)
            self.db.commit()
            return {"message": "Producto eliminado exitosamente"}

        except HTTPException:
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="El producto está en uso en cuentas abiertas"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error eliminando producto")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )
