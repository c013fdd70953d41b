from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, Enum, Uuid
from sqlalchemy.orm import relationship
import enum

from dinamicbar.core.config import settings
from dinamicbar.database.database import Base
from dinamicbar.common.mixins import BaseMixin


class ProductType(str, enum.Enum):
    ALCOHOLIC = "ALCOHOLIC"
    NON_ALCOHOLIC = "NON_ALCOHOLIC"


class Product(Base, BaseMixin):
    __tablename__ = "products"

    name = Column(String(150), nullable=False, index=True)
    category_id = Column(Uuid, ForeignKey("categories.id"), nullable=False, index=True)
    stock = Column(Integer, nullable=False, default=0)
    min_stock = Column(Integer, nullable=True)  # Umbral de alerta; si es nulo se usa LOW_STOCK_THRESHOLD
    purchase_price = Column(Numeric(12, 2), nullable=False, default=0)  # Costo
    sale_price = Column(Numeric(12, 2), nullable=False, default=0)      # Precio de venta
    type = Column(Enum(ProductType), nullable=False, default=ProductType.NON_ALCOHOLIC)
    image = Column(String(500), nullable=True)

    # Relationships
    category = relationship("Category", back_populates="products", lazy="joined")

    @property
    def stock_threshold(self) -> int:
        return self.min_stock if self.min_stock is not None else settings.LOW_STOCK_THRESHOLD

    @property
    def is_low_stock(self) -> bool:
        """Stock igual o inferior al umbral del producto"""
        return self.stock <= self.stock_threshold
