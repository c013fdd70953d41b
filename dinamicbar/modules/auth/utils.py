"""
Contraseñas y reglas de permisos por rol
"""
from typing import Optional

from passlib.context import CryptContext

from dinamicbar.modules.auth.models import UserRole, ROLE_HIERARCHY

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Acciones que un usuario no administrador solo puede hacer con la
# contraseña del administrador en el header X-Admin-Password
MANAGEMENT_OPERATIONS = frozenset({
    "DELETE_PRODUCT_FROM_TAB",
    "DELETE_PRODUCT",
    "DELETE_CATEGORY",
    "VOID_SALE",
})


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: Optional[str]) -> bool:
    """Un hash vacío nunca coincide."""
    if not plain or not hashed:
        return False
    return pwd_context.verify(plain, hashed)


def has_permission(user_role: UserRole, required_role: UserRole) -> bool:
    """ADMIN > CASHIER > WAITER: un rol incluye los permisos de los inferiores."""
    return ROLE_HIERARCHY[UserRole(user_role)] >= ROLE_HIERARCHY[UserRole(required_role)]


def requires_management_password(operation: str, user_role: Optional[UserRole] = None) -> bool:
    if operation not in MANAGEMENT_OPERATIONS:
        return False
    return user_role is None or UserRole(user_role) != UserRole.ADMIN
