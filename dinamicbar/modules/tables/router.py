from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from dinamicbar.database.database import get_db
from dinamicbar.modules.auth.dependencies import AuthDependencies
from dinamicbar.modules.tables.service import TableService
from dinamicbar.modules.tables.schemas import (
    TableGroupCreate, TableGroupOut, TableCreate, TableUpdate, TableOut, TableSplit, TablesOverview
)
from dinamicbar.modules.tabs.service import TabService
from dinamicbar.modules.tabs.schemas import TabItemAdd, TabOut
from dinamicbar.modules.sales.service import SalesService
from dinamicbar.modules.sales.schemas import SplitResponse

tables_router = APIRouter(tags=["Tables"])
table_groups_router = APIRouter(tags=["Tables"])


# ===== ZONAS =====

@table_groups_router.get("", response_model=TablesOverview)
def list_table_groups(db: Session = Depends(get_db)):
    return TableService(db).get_overview()


@table_groups_router.post("", response_model=TableGroupOut, status_code=status.HTTP_201_CREATED)
def create_table_group(data: TableGroupCreate, db: Session = Depends(get_db)):
    return TableService(db).create_group(data)


@table_groups_router.put("/{group_id}", response_model=TableGroupOut)
def update_table_group(group_id: UUID, data: TableGroupCreate, db: Session = Depends(get_db)):
    return TableService(db).update_group(group_id, data)


@table_groups_router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_table_group(group_id: UUID, db: Session = Depends(get_db)):
    TableService(db).delete_group(group_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ===== MESAS =====

@tables_router.get("", response_model=TablesOverview)
def list_tables(db: Session = Depends(get_db)):
    """Zonas con sus mesas, mesas sin zona y la cuenta activa de cada una."""
    return TableService(db).get_overview()


@tables_router.post("", response_model=TableOut, status_code=status.HTTP_201_CREATED)
def create_table(data: TableCreate, db: Session = Depends(get_db)):
    return TableService(db).create_table(data)


@tables_router.get("/{table_id}", response_model=TableOut)
def get_table(table_id: UUID, db: Session = Depends(get_db)):
    return TableService(db).get_table(table_id)


@tables_router.put("/{table_id}", response_model=TableOut)
def update_table(table_id: UUID, data: TableUpdate, db: Session = Depends(get_db)):
    return TableService(db).update_table(table_id, data)


@tables_router.delete("/{table_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_table(table_id: UUID, db: Session = Depends(get_db)):
    TableService(db).delete_table(table_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@tables_router.post("/{table_id}/items", response_model=TabOut)
def add_table_item(table_id: UUID, data: TabItemAdd, db: Session = Depends(get_db)):
    """Agregar producto a la cuenta de la mesa (se abre una si no existe)."""
    table = TableService(db).get_table(table_id)
    return TabService(db).add_item_to_table(table, data.product_id, data.quantity)


@tables_router.delete("/{table_id}/products/{product_id}", response_model=TabOut)
def remove_table_product(
    table_id: UUID,
    product_id: UUID,
    tab_item_id: UUID = Query(..., description="Línea de la cuenta"),
    quantity_to_delete: Optional[int] = Query(None, gt=0, description="Unidades a quitar (todas si se omite)"),
    db: Session = Depends(get_db),
    _ = Depends(AuthDependencies.require_management_password("DELETE_PRODUCT_FROM_TAB"))
):
    """Quitar unidades de un producto de la cuenta de la mesa (requiere contraseña de administrador)."""
    tab = TableService(db).get_table_tab(table_id)
    return TabService(db).remove_item_units(tab, tab_item_id, product_id, quantity_to_delete)


@tables_router.post("/{table_id}/split", response_model=SplitResponse)
def split_table(table_id: UUID, data: TableSplit, db: Session = Depends(get_db)):
    """Pago dividido sobre la cuenta activa de la mesa."""
    tab = TableService(db).get_table_tab(table_id)
    return SalesService(db).split_tab(tab, data.items_to_pay, data)
