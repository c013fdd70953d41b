"""
Modelos SQLAlchemy para cuentas abiertas

- Tab: Cuenta de una mesa (o suelta) con sus totales
- TabItem: Producto y cantidad consumida en la cuenta
- Payment: Pago total o parcial recibido por la cuenta
"""

from sqlalchemy import (
    Column, String, Boolean, Integer, DateTime, ForeignKey, Numeric, Enum, Uuid, UniqueConstraint
)
from sqlalchemy.orm import relationship
from decimal import Decimal

from dinamicbar.database.database import Base
from dinamicbar.common.mixins import BaseMixin, utcnow
from dinamicbar.modules.purchases.models import PaymentMethod


class Tab(Base, BaseMixin):
    __tablename__ = "tabs"

    name = Column(String(100), nullable=False)
    table_id = Column(Uuid, ForeignKey("tables.id", ondelete="SET NULL"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    total = Column(Numeric(12, 2), nullable=False, default=0)

    # Relationships
    table = relationship("Table", back_populates="tabs")
    items = relationship("TabItem", back_populates="tab", cascade="all, delete-orphan", order_by="TabItem.created_at")
    payments = relationship("Payment", back_populates="tab", cascade="all, delete-orphan")

    def recalculate_totals(self) -> None:
        """Totales = suma de precio de venta por cantidad"""
        subtotal = sum((item.total for item in self.items), Decimal("0"))
        self.subtotal = subtotal
        self.total = subtotal


class TabItem(Base, BaseMixin):
    __tablename__ = "tab_items"

    tab_id = Column(Uuid, ForeignKey("tabs.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False, default=1)

    # Relationships
    tab = relationship("Tab", back_populates="items")
    product = relationship("Product", lazy="joined")

    __table_args__ = (
        UniqueConstraint("tab_id", "product_id", name="uq_tab_item_tab_product"),
    )

    @property
    def unit_price(self) -> Decimal:
        return self.product.sale_price

    @property
    def total(self) -> Decimal:
        return self.product.sale_price * self.quantity


class Payment(Base, BaseMixin):
    __tablename__ = "payments"

    tab_id = Column(Uuid, ForeignKey("tabs.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    method = Column(Enum(PaymentMethod), nullable=False)
    is_partial = Column(Boolean, nullable=False, default=False)
    date = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    # Relationships
    tab = relationship("Tab", back_populates="payments")
