"""
Dependencias de autenticación para FastAPI.

No hay tokens: el cliente guarda el usuario devuelto por el login y lo
reenvía serializado como JSON en el header X-User.
"""
import json
import logging
from typing import Optional
from uuid import UUID
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from dinamicbar.database.database import get_db
from dinamicbar.core.config import settings
from dinamicbar.modules.auth.models import User, UserRole
from dinamicbar.modules.auth.utils import (
    has_permission, requires_management_password, verify_password
)

logger = logging.getLogger(__name__)


class AuthDependencies:
    """Dependencias de autenticación reutilizables."""

    @staticmethod
    def _load_user(raw_header: Optional[str], db: Session) -> Optional[User]:
        if not raw_header:
            return None
        try:
            payload = json.loads(raw_header)
            user_id = UUID(str(payload["id"]))
        except (ValueError, KeyError, TypeError):
            return None
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_current_user(
        x_user: Optional[str] = Header(None, alias="X-User"),
        db: Session = Depends(get_db)
    ) -> User:
        """
        Obtener usuario actual desde el header X-User.
        """
        user = AuthDependencies._load_user(x_user, db)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="No autorizado"
            )
        return user

    @staticmethod
    def get_optional_user(
        x_user: Optional[str] = Header(None, alias="X-User"),
        db: Session = Depends(get_db)
    ) -> Optional[User]:
        """Usuario actual si el header X-User es válido, None en otro caso."""
        return AuthDependencies._load_user(x_user, db)

    @staticmethod
    def require_role(required_role: UserRole):
        """
        Dependencia para requerir un rol mínimo según la jerarquía
        ADMIN > CASHIER > WAITER.
        """
        def role_checker(user: User = Depends(AuthDependencies.get_current_user)) -> User:
            if not has_permission(user.role, required_role):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail=f"Se requiere el rol {required_role.value} o superior"
                )
            return user
        return role_checker

    @staticmethod
    def require_management_password(operation: str):
        """
        Dependencia para operaciones restringidas (eliminar productos de una
        cuenta, anular ventas, etc.). Si quien opera no es administrador debe
        enviar la contraseña del administrador en X-Admin-Password.
        """
        def password_checker(
            x_admin_password: Optional[str] = Header(None, alias="X-Admin-Password"),
            user: Optional[User] = Depends(AuthDependencies.get_optional_user),
            db: Session = Depends(get_db)
        ) -> Optional[User]:
            if not requires_management_password(operation, user.role if user else None):
                return user

            if not x_admin_password:
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Se requiere la contraseña de administrador"
                )

            admin = db.query(User).filter(User.username == settings.ADMIN_USERNAME).first()
            if not admin or not verify_password(x_admin_password, admin.password):
                logger.warning(f"Contraseña de administrador inválida para la operación {operation}")
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Contraseña de administrador incorrecta"
                )
            return user
        return password_checker


# Instancias de dependencias
get_current_user = AuthDependencies.get_current_user
require_admin = AuthDependencies.require_role(UserRole.ADMIN)
