from sqlalchemy import Column, String

from dinamicbar.database.database import Base
from dinamicbar.common.mixins import BaseMixin


class Store(Base, BaseMixin):
    """Perfil del negocio (registro único)"""
    __tablename__ = "store"

    name = Column(String(150), nullable=False)
    phone = Column(String(50), nullable=True)
    address = Column(String(255), nullable=True)
    image = Column(String(500), nullable=True)
