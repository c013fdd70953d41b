"""
Modelos SQLAlchemy para compras a proveedores

- Purchase: Encabezado de la compra con totales calculados
- PurchaseItem: Línea de compra; al registrarse incrementa el stock del producto
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric, Enum, Uuid
from sqlalchemy.orm import relationship
import enum

from dinamicbar.database.database import Base
from dinamicbar.common.mixins import BaseMixin, utcnow


# ===== ENUMS =====

class PaymentMethod(str, enum.Enum):
    """Medios de pago aceptados en compras y ventas"""
    CASH = "CASH"
    CARD = "CARD"
    TRANSFER = "TRANSFER"


# ===== MODELOS =====

class Purchase(Base, BaseMixin):
    __tablename__ = "purchases"

    supplier_id = Column(Uuid, ForeignKey("suppliers.id"), nullable=False, index=True)
    date = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)
    subtotal = Column(Numeric(12, 2), nullable=False, default=0)
    total_iva = Column(Numeric(12, 2), nullable=False, default=0)
    grand_total = Column(Numeric(12, 2), nullable=False, default=0)
    payment_method = Column(Enum(PaymentMethod), nullable=False, default=PaymentMethod.CASH)
    company_image = Column(String(500), nullable=True)  # Foto de la factura del proveedor

    # Relationships
    supplier = relationship("Supplier", back_populates="purchases", lazy="joined")
    items = relationship("PurchaseItem", back_populates="purchase", cascade="all, delete-orphan")


class PurchaseItem(Base, BaseMixin):
    __tablename__ = "purchase_items"

    purchase_id = Column(Uuid, ForeignKey("purchases.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    product_name = Column(String(150), nullable=False)  # Copia del nombre al momento de la compra
    quantity = Column(Integer, nullable=False)
    purchase_price = Column(Numeric(12, 2), nullable=False)
    sale_price = Column(Numeric(12, 2), nullable=False)
    iva = Column(Numeric(5, 2), nullable=False, default=0)  # Porcentaje
    total = Column(Numeric(12, 2), nullable=False)

    # Relationships
    purchase = relationship("Purchase", back_populates="items")
    product = relationship("Product")
