"""
Servicios de negocio para cuentas abiertas

Gestiona la vida de una cuenta: apertura (suelta o en una mesa), productos
consumidos y cierre sin cobro. El cobro total o dividido lo hace
SalesService, que comparte la misma sesión.
"""

import logging
from typing import Dict, Any, Optional
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import desc
from sqlalchemy.orm import Session, selectinload

from dinamicbar.modules.tabs.models import Tab, TabItem
from dinamicbar.modules.tabs.schemas import TabCreate, TabUpdate
from dinamicbar.modules.tables.models import Table
from dinamicbar.modules.products.models import Product

logger = logging.getLogger(__name__)


class TabService:
    """Servicio para cuentas y sus productos"""

    def __init__(self, db: Session):
        self.db = db

    # ===== CONSULTAS =====

    def get_active_tabs(self) -> Dict[str, Any]:
        tabs = self.db.query(Tab).options(
            selectinload(Tab.items)
        ).filter(Tab.is_active.is_(True)).order_by(desc(Tab.created_at)).all()
        return {"tabs": tabs, "total": len(tabs)}

    def get_history(self, limit: int = 50) -> Dict[str, Any]:
        """Cuentas cerradas, las más recientes primero"""
        tabs = self.db.query(Tab).options(
            selectinload(Tab.items)
        ).filter(Tab.is_active.is_(False)).order_by(desc(Tab.updated_at)).limit(limit).all()
        return {"tabs": tabs, "total": len(tabs)}

    def get_tab(self, tab_id: UUID) -> Tab:
        tab = self.db.query(Tab).options(
            selectinload(Tab.items)
        ).filter(Tab.id == tab_id).first()
        if not tab:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cuenta no encontrada"
            )
        return tab

    def get_active_tab(self, tab_id: UUID) -> Tab:
        tab = self.get_tab(tab_id)
        if not tab.is_active:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="La cuenta está cerrada"
            )
        return tab

    def get_table_tab(self, table: Table, create: bool = False) -> Optional[Tab]:
        """Cuenta activa de una mesa; se abre una nueva si create=True"""
        tab = self.db.query(Tab).options(selectinload(Tab.items)).filter(
            Tab.table_id == table.id,
            Tab.is_active.is_(True)
        ).first()
        if tab is None and create:
            tab = Tab(name=table.name, table_id=table.id, is_active=True)
            self.db.add(tab)
            self.db.flush()
            logger.info(f"Cuenta abierta para la mesa {table.name}")
        return tab

    # ===== CUENTAS =====

    def create_tab(self, data: TabCreate) -> Tab:
        try:
            if data.table_id:
                table = self.db.query(Table).filter(Table.id == data.table_id).first()
                if not table:
                    raise HTTPException(
                        status_code=status.HTTP_404_NOT_FOUND,
                        detail="Mesa no encontrada"
                    )
                if self.get_table_tab(table):
                    raise HTTPException(
                        status_code=status.HTTP_409_CONFLICT,
                        detail=f"La mesa '{table.name}' ya tiene una cuenta abierta"
                    )

            tab = Tab(name=data.name, table_id=data.table_id, is_active=True)
            self.db.add(tab)
            self.db.commit()
            self.db.refresh(tab)
            return tab

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error creando cuenta")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def rename_tab(self, tab_id: UUID, data: TabUpdate) -> Tab:
        try:
            tab = self.get_tab(tab_id)
            tab.name = data.name
            self.db.commit()
            self.db.refresh(tab)
            return tab
        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error renombrando cuenta")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def close_tab(self, tab_id: UUID) -> Dict[str, str]:
        """Cerrar la cuenta sin cobrar (los productos quedan en el historial)"""
        try:
            tab = self.get_active_tab(tab_id)
            tab.is_active = False
            self.db.commit()
            logger.info(f"Cuenta {tab.name} cerrada sin cobro")
            return {"message": "Cuenta cerrada exitosamente"}
        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error cerrando cuenta")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    # ===== PRODUCTOS DE LA CUENTA =====

    def _get_product(self, product_id: UUID) -> Product:
        product = self.db.query(Product).filter(Product.id == product_id).first()
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Producto no encontrado"
            )
        return product

    def _find_item(self, tab: Tab, product_id: UUID) -> TabItem:
        item = next((i for i in tab.items if i.product_id == product_id), None)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="El producto no está en la cuenta"
            )
        return item

    def merge_item(self, tab: Tab, product: Product, quantity: int) -> TabItem:
        """Sumar unidades a la línea del producto o crearla (sin commit)"""
        item = next((i for i in tab.items if i.product_id == product.id), None)
        if item:
            item.quantity += quantity
        else:
            item = TabItem(product_id=product.id, product=product, quantity=quantity)
            tab.items.append(item)
        tab.recalculate_totals()
        return item

    def _commit_tab(self, tab: Tab, action: str) -> Tab:
        try:
            self.db.commit()
            self.db.refresh(tab)
            return tab
        except Exception:
            self.db.rollback()
            logger.exception(f"Error {action}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def add_item(self, tab_id: UUID, product_id: UUID, quantity: int) -> Tab:
        tab = self.get_active_tab(tab_id)
        product = self._get_product(product_id)
        self.merge_item(tab, product, quantity)
        return self._commit_tab(tab, "agregando producto a la cuenta")

    def add_item_to_table(self, table: Table, product_id: UUID, quantity: int) -> Tab:
        product = self._get_product(product_id)
        tab = self.get_table_tab(table, create=True)
        self.merge_item(tab, product, quantity)
        return self._commit_tab(tab, "agregando producto a la mesa")

    def set_item_quantity(self, tab_id: UUID, product_id: UUID, quantity: int) -> Tab:
        tab = self.get_active_tab(tab_id)
        item = self._find_item(tab, product_id)
        if quantity == 0:
            tab.items.remove(item)
        else:
            item.quantity = quantity
        tab.recalculate_totals()
        return self._commit_tab(tab, "actualizando cantidad")

    def remove_item(self, tab_id: UUID, product_id: UUID) -> Tab:
        tab = self.get_active_tab(tab_id)
        item = self._find_item(tab, product_id)
        tab.items.remove(item)
        tab.recalculate_totals()
        return self._commit_tab(tab, "eliminando producto de la cuenta")

    def remove_item_units(self, tab: Tab, tab_item_id: UUID, product_id: UUID,
                          quantity: Optional[int] = None) -> Tab:
        """Quitar unidades de una línea; si llega a 0 se elimina"""
        item = next(
            (i for i in tab.items if i.id == tab_item_id and i.product_id == product_id),
            None
        )
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="El producto no está en la cuenta"
            )

        if quantity is None or quantity >= item.quantity:
            tab.items.remove(item)
        else:
            item.quantity -= quantity
        tab.recalculate_totals()
        logger.info(f"Eliminadas {quantity or 'todas las'} unidades de {item.product.name} en {tab.name}")
        return self._commit_tab(tab, "eliminando unidades de la cuenta")
