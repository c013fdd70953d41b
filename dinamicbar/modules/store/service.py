import logging
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from typing import Optional

from dinamicbar.common.utils import update_changes
from dinamicbar.modules.store.models import Store
from dinamicbar.modules.store.schemas import StoreCreate, StoreUpdate

logger = logging.getLogger(__name__)


class StoreService:
    """Servicio para el perfil del negocio"""

    def __init__(self, db: Session):
        self.db = db

    def get_store(self) -> Optional[Store]:
        return self.db.query(Store).first()

    def save_store(self, data: StoreCreate) -> Store:
        """Crear el perfil o reemplazar sus datos si ya existe"""
        try:
            store = self.get_store()
            if store is None:
                store = Store(**data.model_dump())
                self.db.add(store)
            else:
                for field, value in data.model_dump().items():
                    setattr(store, field, value)

            self.db.commit()
            self.db.refresh(store)
            return store

        except Exception:
            self.db.rollback()
            logger.exception("Error guardando la tienda")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def update_store(self, data: StoreUpdate) -> Store:
        try:
            store = self.get_store()
            if store is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Tienda no configurada"
                )

            for field, value in update_changes(data, nullable=("phone", "address", "image")).items():
                setattr(store, field, value)

            self.db.commit()
            self.db.refresh(store)
            return store

        except HTTPException:
            raise
        except Exception:
            self.db.rollback()
            logger.exception("Error actualizando la tienda")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )
