from typing import Any, Dict, Iterable

from pydantic import BaseModel


def update_changes(data: BaseModel, nullable: Iterable[str] = ()) -> Dict[str, Any]:
    """
    Campos enviados en una actualización parcial.

    Un null explícito solo se aplica a las columnas de `nullable` (para
    limpiarlas); en las columnas obligatorias se ignora.
    """
    nullable = set(nullable)
    return {
        field: value
        for field, value in data.model_dump(exclude_unset=True).items()
        if value is not None or field in nullable
    }
