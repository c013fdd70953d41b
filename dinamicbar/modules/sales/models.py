"""
Modelos SQLAlchemy para ventas

- Sale: Venta cobrada dentro de una sesión de caja
- SaleItem: Línea vendida con copia de nombre y precio del producto
"""

from sqlalchemy import Column, String, Boolean, Integer, ForeignKey, Numeric, Enum, Text, Uuid
from sqlalchemy.orm import relationship
import enum

from dinamicbar.database.database import Base
from dinamicbar.common.mixins import BaseMixin
from dinamicbar.modules.purchases.models import PaymentMethod


class SaleStatus(str, enum.Enum):
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class Sale(Base, BaseMixin):
    __tablename__ = "sales"

    tab_id = Column(Uuid, ForeignKey("tabs.id", ondelete="SET NULL"), nullable=True, index=True)
    cash_register_id = Column(Uuid, ForeignKey("cash_registers.id"), nullable=False, index=True)
    subtotal = Column(Numeric(12, 2), nullable=False)
    total = Column(Numeric(12, 2), nullable=False)
    payment_method = Column(Enum(PaymentMethod), nullable=False)
    cash_received = Column(Numeric(12, 2), nullable=True)
    change = Column(Numeric(12, 2), nullable=True)
    is_partial = Column(Boolean, nullable=False, default=False)  # Pago dividido de una cuenta
    status = Column(Enum(SaleStatus), nullable=False, default=SaleStatus.COMPLETED, index=True)
    cancel_reason = Column(Text, nullable=True)

    # Relationships
    tab = relationship("Tab")
    cash_register = relationship("CashRegister", back_populates="sales")
    items = relationship("SaleItem", back_populates="sale", cascade="all, delete-orphan")


class SaleItem(Base, BaseMixin):
    __tablename__ = "sale_items"

    sale_id = Column(Uuid, ForeignKey("sales.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    product_name = Column(String(150), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(12, 2), nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)

    # Relationships
    sale = relationship("Sale", back_populates="items")
