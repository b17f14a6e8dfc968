from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from apps.orders.schemas import ReceivingResponse
from apps.warehouse_entries.schemas import (
    WarehouseEntryCreate,
    WarehouseEntryCreatedResponse,
    WarehouseEntryLineResponse,
    WarehouseEntryListResponse,
    WarehouseEntryResponse,
)
from apps.warehouse_entries.service import WarehouseEntryService
from models.base import get_db
from models.warehouse_entry import WarehouseEntry
from security.actor import Actor, get_actor


router = APIRouter(prefix="/api/warehouse-entries", tags=["Warehouse Entries"])


def _entry_fields(entry: WarehouseEntry) -> dict:
    return dict(
        id=entry.id,
        order_id=entry.order_id,
        warehouse_id=entry.warehouse_id,
        warehouse_name=entry.warehouse.name if entry.warehouse else None,
        entry_date=entry.entry_date,
        notes=entry.notes,
        created_at=entry.created_at,
        lines=[WarehouseEntryLineResponse.model_validate(line) for line in entry.lines],
    )


@router.post("", response_model=WarehouseEntryCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_entry(
    payload: WarehouseEntryCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    result = await WarehouseEntryService.create_entry(db, payload, actor)
    return WarehouseEntryCreatedResponse(
        **_entry_fields(result.entry),
        order_status=result.order_status,
        receiving=ReceivingResponse(
            total_ordered=result.receiving.total_ordered,
            total_received=result.receiving.total_received,
            total_pending=result.receiving.total_pending,
            reception_complete=result.receiving.reception_complete,
        ),
    )


@router.get("", response_model=WarehouseEntryListResponse)
async def list_entries(
    order_id: Optional[int] = Query(default=None, alias="orderId"),
    warehouse_id: Optional[int] = Query(default=None, alias="warehouseId"),
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    items, pagination = await WarehouseEntryService.list_entries(db, page, size, order_id, warehouse_id)
    return WarehouseEntryListResponse(
        items=[WarehouseEntryResponse(**_entry_fields(e)) for e in items],
        pagination=pagination,
    )


@router.get("/{entry_id}", response_model=WarehouseEntryResponse)
async def get_entry(entry_id: int, db: AsyncSession = Depends(get_db)):
    return WarehouseEntryResponse(**_entry_fields(await WarehouseEntryService.get_entry(db, entry_id)))
