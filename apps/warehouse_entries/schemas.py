from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field as PydanticField

from apps.orders.schemas import ReceivingResponse
from common.types import Money, Quantity


class WarehouseEntryLineCreate(BaseModel):
    article_id: Optional[int] = PydanticField(default=None, alias="articleId")
    order_line_id: Optional[int] = PydanticField(default=None, alias="orderLineId")
    quantity: Optional[Decimal] = None

    class Config:
        populate_by_name = True


class WarehouseEntryCreate(BaseModel):
    order_id: int = PydanticField(alias="orderId")
    warehouse_id: int = PydanticField(alias="warehouseId")
    entry_date: Optional[date] = PydanticField(default=None, alias="date")
    notes: Optional[str] = None
    lines: List[WarehouseEntryLineCreate] = PydanticField(default_factory=list)

    class Config:
        populate_by_name = True


class WarehouseEntryLineResponse(BaseModel):
    id: int
    order_line_id: int = PydanticField(alias="orderLineId")
    article_id: Optional[int] = PydanticField(default=None, alias="articleId")
    quantity: Quantity
    unit_cost: Money = PydanticField(alias="unitCost")

    class Config:
        from_attributes = True
        populate_by_name = True


class WarehouseEntryResponse(BaseModel):
    id: int
    order_id: int = PydanticField(alias="orderId")
    warehouse_id: int = PydanticField(alias="warehouseId")
    warehouse_name: Optional[str] = PydanticField(default=None, alias="warehouseName")
    entry_date: date = PydanticField(alias="date")
    notes: Optional[str] = None
    created_at: Optional[datetime] = PydanticField(default=None, alias="createdAt")
    lines: List[WarehouseEntryLineResponse]

    class Config:
        populate_by_name = True


class WarehouseEntryCreatedResponse(WarehouseEntryResponse):
    order_status: str = PydanticField(alias="orderStatus")
    receiving: ReceivingResponse


class WarehouseEntryListResponse(BaseModel):
    items: List[WarehouseEntryResponse]
    pagination: dict
