from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID

from dinamicbar.modules.tabs.schemas import TabOut, PaymentData, SplitItem


class TableGroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class TableCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    table_group_id: Optional[UUID] = None
    position_x: int = 0
    position_y: int = 0


class TableUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    table_group_id: Optional[UUID] = None
    position_x: Optional[int] = None
    position_y: Optional[int] = None


class TableSplit(PaymentData):
    items_to_pay: List[SplitItem] = Field(..., min_length=1)


class TableOut(BaseModel):
    id: UUID
    name: str
    table_group_id: Optional[UUID] = None
    position_x: int
    position_y: int
    active_tab: Optional[TabOut] = None

    model_config = {"from_attributes": True}


class TableGroupOut(BaseModel):
    id: UUID
    name: str
    tables: List[TableOut] = []

    model_config = {"from_attributes": True}


class TablesOverview(BaseModel):
    table_groups: List[TableGroupOut]
    ungrouped_tables: List[TableOut]
