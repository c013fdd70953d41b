from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from dinamicbar.database.database import get_db
from dinamicbar.modules.store.service import StoreService
from dinamicbar.modules.store.schemas import StoreCreate, StoreUpdate, StoreOut, StoreResponse

store_router = APIRouter()


@store_router.get("", response_model=StoreResponse)
def get_store(db: Session = Depends(get_db)):
    return {"store": StoreService(db).get_store()}


@store_router.post("", response_model=StoreOut, status_code=status.HTTP_201_CREATED)
def save_store(data: StoreCreate, db: Session = Depends(get_db)):
    """Crear o reemplazar los datos del negocio."""
    return StoreService(db).save_store(data)


@store_router.put("", response_model=StoreOut)
def update_store(data: StoreUpdate, db: Session = Depends(get_db)):
    return StoreService(db).update_store(data)
