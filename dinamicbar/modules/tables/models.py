from sqlalchemy import Column, String, Integer, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from dinamicbar.database.database import Base
from dinamicbar.common.mixins import BaseMixin


class TableGroup(Base, BaseMixin):
    """Zona del local (terraza, barra, salón...)"""
    __tablename__ = "table_groups"

    name = Column(String(100), nullable=False)

    # Relationships
    tables = relationship("Table", back_populates="table_group", order_by="Table.name")


class Table(Base, BaseMixin):
    """Mesa física; puede tener como máximo una cuenta activa"""
    __tablename__ = "tables"

    name = Column(String(100), nullable=False)
    table_group_id = Column(Uuid, ForeignKey("table_groups.id", ondelete="SET NULL"), nullable=True, index=True)
    position_x = Column(Integer, nullable=False, default=0)
    position_y = Column(Integer, nullable=False, default=0)

    # Relationships
    table_group = relationship("TableGroup", back_populates="tables")
    tabs = relationship("Tab", back_populates="table")

    @property
    def active_tab(self):
        return next((tab for tab in self.tabs if tab.is_active), None)
