import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any

from dinamicbar.core.config import settings
from dinamicbar.modules.auth.models import User, UserRole
from dinamicbar.modules.auth.schemas import UserCreate, UserUpdate
from dinamicbar.modules.auth.utils import hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """Servicio de autenticación por usuario y contraseña"""

    def __init__(self, db: Session):
        self.db = db

    def authenticate(self, username: str, password: str) -> User:
        """
        Validar credenciales.

        Returns:
            User: Usuario autenticado (el cliente lo guarda en su almacenamiento local)
        """
        user = self.db.query(User).filter(User.username == username).first()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Usuario no encontrado"
            )

        if not verify_password(password, user.password):
            logger.info(f"Intento de login fallido para {username}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Contraseña incorrecta"
            )

        logger.info(f"Login exitoso: {username}")
        return user

    def verify_admin_password(self, password: str) -> Dict[str, bool]:
        """Verificar la contraseña del administrador para operaciones restringidas"""
        admin = self.db.query(User).filter(User.username == settings.ADMIN_USERNAME).first()
        if not admin:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Usuario administrador no encontrado"
            )
        if not verify_password(password, admin.password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Contraseña incorrecta"
            )
        return {"success": True}


class UserService:
    """Servicio para gestión de usuarios del sistema"""

    def __init__(self, db: Session):
        self.db = db

    def get_users(self) -> Dict[str, Any]:
        users = self.db.query(User).order_by(User.username).all()
        return {"users": users, "total": len(users)}

    def get_user_by_id(self, user_id: UUID) -> User:
        user = self.db.query(User).filter(User.id == user_id).first()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Usuario no encontrado"
            )
        return user

    def create_user(self, data: UserCreate) -> User:
        """Crear usuario con contraseña hasheada"""
        try:
            existing = self.db.query(User).filter(User.username == data.username).first()
            if existing:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="El usuario ya existe"
                )

            user = User(
                username=data.username,
                password=hash_password(data.password),
                role=data.role
            )
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            logger.info(f"Usuario creado: {user.username} ({user.role.value})")
            return user

        except HTTPException:
            raise
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="El usuario ya existe"
            )
        except Exception:
            self.db.rollback()
            logger.exception("Error creando usuario")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def update_user(self, user_id: UUID, data: UserUpdate) -> User:
        """Actualizar contraseña y/o rol"""
        update_dict = data.model_dump(exclude_unset=True, exclude_none=True)
        if not update_dict:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="No hay datos para actualizar"
            )

        try:
            user = self.get_user_by_id(user_id)

            if "role" in update_dict and user.role == UserRole.ADMIN and update_dict["role"] != UserRole.ADMIN:
                self._ensure_not_last_admin(user)

            if "password" in update_dict:
                user.password = hash_password(update_dict["password"])
            if "role" in update_dict:
                user.role = update_dict["role"]

            self.db.commit()
            self.db.refresh(user)
            return user

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error actualizando usuario")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def delete_user(self, user_id: UUID) -> Dict[str, bool]:
        try:
            user = self.get_user_by_id(user_id)
            if user.role == UserRole.ADMIN:
                self._ensure_not_last_admin(user)

            username = user.username
            self.db.delete(user)
            self.db.commit()
            logger.info(f"Usuario eliminado: {username}")
            return {"success": True}

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error eliminando usuario")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def _ensure_not_last_admin(self, user: User) -> None:
        admins = self.db.query(User).filter(
            User.role == UserRole.ADMIN,
            User.id != user.id
        ).count()
        if admins == 0:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="No se puede quitar el último administrador"
            )
