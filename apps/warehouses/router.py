from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from apps.warehouses.schemas import WarehouseCreate, WarehouseUpdate, WarehouseResponse, WarehouseListResponse
from apps.warehouses.service import WarehouseService
from models.base import get_db


router = APIRouter(prefix="/api/warehouses", tags=["Warehouses"])


@router.get("", response_model=WarehouseListResponse)
async def list_warehouses(include_inactive: bool = Query(default=False), db: AsyncSession = Depends(get_db)):
    items = await WarehouseService.list_warehouses(db, include_inactive)
    return WarehouseListResponse(items=[WarehouseResponse.model_validate(w) for w in items])


@router.get("/{warehouse_id}", response_model=WarehouseResponse)
async def get_warehouse(warehouse_id: int, db: AsyncSession = Depends(get_db)):
    return WarehouseResponse.model_validate(await WarehouseService.get_warehouse(db, warehouse_id))


@router.post("", response_model=WarehouseResponse, status_code=status.HTTP_201_CREATED)
async def create_warehouse(payload: WarehouseCreate, db: AsyncSession = Depends(get_db)):
    warehouse = await WarehouseService.create_warehouse(db, payload)
    return WarehouseResponse.model_validate(warehouse)


@router.patch("/{warehouse_id}", response_model=WarehouseResponse)
async def update_warehouse(warehouse_id: int, payload: WarehouseUpdate, db: AsyncSession = Depends(get_db)):
    warehouse = await WarehouseService.update_warehouse(db, warehouse_id, payload)
    return WarehouseResponse.model_validate(warehouse)


@router.delete("/{warehouse_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_warehouse(warehouse_id: int, db: AsyncSession = Depends(get_db)):
    await WarehouseService.deactivate_warehouse(db, warehouse_id)
    return None
