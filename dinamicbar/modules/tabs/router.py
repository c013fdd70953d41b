from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from uuid import UUID

from dinamicbar.database.database import get_db
from dinamicbar.modules.tabs.service import TabService
from dinamicbar.modules.tabs.schemas import (
    TabCreate, TabUpdate, TabItemAdd, TabItemQuantity, TabClose, TabSplit, TabOut, TabList
)
from dinamicbar.modules.sales.service import SalesService
from dinamicbar.modules.sales.schemas import SaleOut, SplitResponse

tabs_router = APIRouter(tags=["Tabs"])


@tabs_router.get("", response_model=TabList)
def list_active_tabs(db: Session = Depends(get_db)):
    return TabService(db).get_active_tabs()


@tabs_router.get("/history", response_model=TabList)
def list_closed_tabs(
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db)
):
    return TabService(db).get_history(limit)


@tabs_router.post("", response_model=TabOut, status_code=status.HTTP_201_CREATED)
def create_tab(data: TabCreate, db: Session = Depends(get_db)):
    return TabService(db).create_tab(data)


@tabs_router.get("/{tab_id}", response_model=TabOut)
def get_tab(tab_id: UUID, db: Session = Depends(get_db)):
    return TabService(db).get_tab(tab_id)


@tabs_router.patch("/{tab_id}", response_model=TabOut)
def rename_tab(tab_id: UUID, data: TabUpdate, db: Session = Depends(get_db)):
    return TabService(db).rename_tab(tab_id, data)


@tabs_router.delete("/{tab_id}")
def close_tab_without_payment(tab_id: UUID, db: Session = Depends(get_db)):
    """Cerrar la cuenta sin registrar cobro."""
    return TabService(db).close_tab(tab_id)


@tabs_router.post("/{tab_id}/items", response_model=TabOut, status_code=status.HTTP_201_CREATED)
def add_tab_item(tab_id: UUID, data: TabItemAdd, db: Session = Depends(get_db)):
    """Agregar producto; si ya está en la cuenta se suman las unidades."""
    return TabService(db).add_item(tab_id, data.product_id, data.quantity)


@tabs_router.put("/{tab_id}/items/{product_id}", response_model=TabOut)
def set_tab_item_quantity(tab_id: UUID, product_id: UUID, data: TabItemQuantity, db: Session = Depends(get_db)):
    return TabService(db).set_item_quantity(tab_id, product_id, data.quantity)


@tabs_router.delete("/{tab_id}/items/{product_id}", response_model=TabOut)
def remove_tab_item(tab_id: UUID, product_id: UUID, db: Session = Depends(get_db)):
    return TabService(db).remove_item(tab_id, product_id)


@tabs_router.post("/{tab_id}/close", response_model=SaleOut)
def close_tab_with_payment(tab_id: UUID, data: TabClose, db: Session = Depends(get_db)):
    """Cobrar la cuenta completa (equivale a POST /sales)."""
    return SalesService(db).process_sale(tab_id, data)


@tabs_router.post("/{tab_id}/split", response_model=SplitResponse)
def split_tab(tab_id: UUID, data: TabSplit, db: Session = Depends(get_db)):
    """
    Pago dividido.

    - **paid_items**: Líneas y unidades que se pagan ahora
    - **payment_method** / **cash_received**: Medio de pago

    El total se calcula en el servidor. Si no quedan productos, la cuenta se cierra.
    """
    tab = TabService(db).get_tab(tab_id)
    return SalesService(db).split_tab(tab, data.paid_items, data)
