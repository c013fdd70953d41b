import logging
from sqlalchemy import func
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from uuid import UUID
from typing import Dict, Any, Optional

from dinamicbar.common.utils import update_changes
from dinamicbar.modules.categories.models import Category
from dinamicbar.modules.categories.schemas import CategoryCreate, CategoryUpdate
from dinamicbar.modules.products.models import Product

logger = logging.getLogger(__name__)


class CategoryService:
    """Categorías del inventario (cervezas, licores, snacks...)"""

    def __init__(self, db: Session):
        self.db = db

    def _ensure_name_available(self, name: str, exclude_id: Optional[UUID] = None):
        """El nombre es único sin distinguir mayúsculas."""
        query = self.db.query(Category).filter(func.lower(Category.name) == name.lower())
        if exclude_id is not None:
            query = query.filter(Category.id != exclude_id)
        if query.first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Ya existe una categoría con el nombre '{name}'"
            )

    def _commit(self, category: Category, action: str) -> Category:
        try:
            self.db.commit()
            self.db.refresh(category)
            return category
        except IntegrityError:
            self.db.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Ya existe una categoría con ese nombre"
            )
        except Exception:
            self.db.rollback()
            logger.exception(f"Error al {action} categoría")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )

    def create_category(self, data: CategoryCreate) -> Category:
        self._ensure_name_available(data.name)
        category = Category(**data.model_dump())
        self.db.add(category)
        category = self._commit(category, "crear")
        logger.info(f"Categoría creada: {category.name}")
        return category

    def get_all_categories(self) -> Dict[str, Any]:
        categories = self.db.query(Category).order_by(Category.name).all()
        return {"categories": categories, "total": len(categories)}

    def get_category_by_id(self, category_id: UUID) -> Category:
        category = self.db.get(Category, category_id)
        if category is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Categoría no encontrada"
            )
        return category

    def update_category(self, category_id: UUID, data: CategoryUpdate) -> Category:
        category = self.get_category_by_id(category_id)
        changes = update_changes(data, nullable=("icon", "shortcut"))

        if changes.get("name") and changes["name"] != category.name:
            self._ensure_name_available(changes["name"], exclude_id=category_id)

        for field, value in changes.items():
            setattr(category, field, value)
        return self._commit(category, "actualizar")

    def delete_category(self, category_id: UUID) -> Dict[str, str]:
        """No se elimina una categoría que todavía tiene productos."""
        category = self.get_category_by_id(category_id)

        in_use = self.db.query(Product).filter(Product.category_id == category_id).count()
        if in_use:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"La categoría tiene {in_use} producto(s) asociados"
            )

        name = category.name
        try:
            self.db.delete(category)
            self.db.commit()
        except Exception:
            self.db.rollback()
            logger.exception("Error al eliminar categoría")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Error interno del servidor"
            )
        logger.info(f"Categoría eliminada: {name}")
        return {"message": "Categoría eliminada exitosamente"}
