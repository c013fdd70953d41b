import logging
from sqlalchemy.orm import Session, selectinload
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any, Optional

from dinamicbar.common.utils import update_changes
from dinamicbar.modules.tables.models import Table, TableGroup
from dinamicbar.modules.tables.schemas import TableGroupCreate, TableCreate, TableUpdate
from dinamicbar.modules.tabs.models import Tab
from dinamicbar.modules.tabs.service import TabService

logger = logging.getLogger(__name__)


class TableService:
    """Servicio para zonas y mesas del local"""

    def __init__(self, db: Session):
        self.db = db

    def get_overview(self) -> Dict[str, Any]:
        """Zonas con sus mesas y la cuenta activa de cada mesa"""
        groups = self.db.query(TableGroup).options(
            selectinload(TableGroup.tables).selectinload(Table.tabs).selectinload(Tab.items)
        ).order_by(TableGroup.name).all()

        ungrouped = self.db.query(Table).options(
            selectinload(Table.tabs).selectinload(Tab.items)
        ).filter(Table.table_group_id.is_(None)).order_by(Table.name).all()

        return {"table_groups": groups, "ungrouped_tables": ungrouped}

    # ===== ZONAS =====

    def get_group(self, group_id: UUID) -> TableGroup:
        group = self.db.query(TableGroup).filter(TableGroup.id == group_id).first()
        if not group:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Zona no encontrada"
            )
        return group

    def create_group(self, data: TableGroupCreate) -> TableGroup:
        try:
            group = TableGroup(name=data.name)
            self.db.add(group)
            self.db.commit()
            self.db.refresh(group)
            return group
        except Exception:
            self.db.rollback()
            logger.exception("Error creando zona")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def update_group(self, group_id: UUID, data: TableGroupCreate) -> TableGroup:
        try:
            group = self.get_group(group_id)
            group.name = data.name
            self.db.commit()
            self.db.refresh(group)
            return group
        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error actualizando zona")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def delete_group(self, group_id: UUID) -> None:
        """Eliminar zona; sus mesas quedan sin zona"""
        try:
            group = self.get_group(group_id)
            for table in group.tables:
                table.table_group_id = None
            self.db.delete(group)
            self.db.commit()
        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error eliminando zona")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    # ===== MESAS =====

    def get_table(self, table_id: UUID) -> Table:
        table = self.db.query(Table).options(
            selectinload(Table.tabs).selectinload(Tab.items)
        ).filter(Table.id == table_id).first()
        if not table:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Mesa no encontrada"
            )
        return table

    def _validate_group(self, group_id: Optional[UUID]) -> None:
        if group_id is not None:
            self.get_group(group_id)

    def create_table(self, data: TableCreate) -> Table:
        try:
            self._validate_group(data.table_group_id)
            table = Table(**data.model_dump())
            self.db.add(table)
            self.db.commit()
            self.db.refresh(table)
            return table
        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error creando mesa")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def update_table(self, table_id: UUID, data: TableUpdate) -> Table:
        try:
            table = self.get_table(table_id)
            update_dict = update_changes(data, nullable=("table_group_id",))
            self._validate_group(update_dict.get("table_group_id"))
            for field, value in update_dict.items():
                setattr(table, field, value)
            self.db.commit()
            self.db.refresh(table)
            return table
        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error actualizando mesa")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def delete_table(self, table_id: UUID) -> None:
        try:
            table = self.get_table(table_id)
            active_tab = table.active_tab
            if active_tab is not None and active_tab.items:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="La mesa tiene una cuenta abierta con productos"
                )
            for tab in table.tabs:
                tab.table_id = None
                tab.is_active = False
            self.db.delete(table)
            self.db.commit()
        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error eliminando mesa")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    # ===== CUENTA DE LA MESA =====

    def get_table_tab(self, table_id: UUID) -> Tab:
        table = self.get_table(table_id)
        tab = TabService(self.db).get_table_tab(table)
        if tab is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="La mesa no tiene una cuenta abierta"
            )
        return tab
