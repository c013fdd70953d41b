from sqlalchemy import Column, String, Enum
import enum

from dinamicbar.database.database import Base
from dinamicbar.common.mixins import BaseMixin


class UserRole(str, enum.Enum):
    """Roles del personal del bar"""
    ADMIN = "ADMIN"       # Administrador: acceso total
    CASHIER = "CASHIER"   # Cajero: ventas y caja
    WAITER = "WAITER"     # Mesero: mesas y cuentas


# Jerarquía de roles: un rol superior hereda los permisos de los inferiores
ROLE_HIERARCHY = {
    UserRole.ADMIN: 3,
    UserRole.CASHIER: 2,
    UserRole.WAITER: 1,
}


class User(Base, BaseMixin):
    __tablename__ = "users"

    username = Column(String(50), unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.WAITER)
