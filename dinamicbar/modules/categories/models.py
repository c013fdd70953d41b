from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from dinamicbar.database.database import Base
from dinamicbar.common.mixins import BaseMixin

class Category(Base, BaseMixin):
    __tablename__ = "categories"

    name = Column(String(100), unique=True, nullable=False)
    icon = Column(String(50), nullable=True)       # Nombre del ícono en la interfaz
    shortcut = Column(String(10), nullable=True)   # Tecla de acceso rápido

    # Relationships
    products = relationship("Product", back_populates="category")
