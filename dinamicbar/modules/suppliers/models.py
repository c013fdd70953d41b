from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from dinamicbar.database.database import Base
from dinamicbar.common.mixins import BaseMixin


class Supplier(Base, BaseMixin):
    __tablename__ = "suppliers"

    name = Column(String(150), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(150), nullable=True)
    address = Column(String(255), nullable=True)
    image = Column(String(500), nullable=True)

    # Relationships
    purchases = relationship("Purchase", back_populates="supplier")
