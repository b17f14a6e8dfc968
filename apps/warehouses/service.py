from typing import List, Optional
from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from apps.warehouses.schemas import WarehouseCreate, WarehouseUpdate
from common.errors import Conflict, NotFound
from models.warehouse import Warehouse


class WarehouseService:
    @staticmethod
    async def get_warehouse(db: AsyncSession, warehouse_id: int) -> Warehouse:
        stmt = select(Warehouse).where(and_(Warehouse.id == warehouse_id, Warehouse.is_active.is_(True)))
        res = await db.execute(stmt)
        warehouse = res.scalar_one_or_none()
        if not warehouse:
            raise NotFound(f"Warehouse {warehouse_id} not found.")
        return warehouse

    @staticmethod
    async def _ensure_code_free(db: AsyncSession, code: str, exclude_id: Optional[int] = None) -> None:
        stmt = select(Warehouse.id).where(func.lower(Warehouse.code) == code.lower())
        if exclude_id is not None:
            stmt = stmt.where(Warehouse.id != exclude_id)
        res = await db.execute(stmt)
        if res.first():
            raise Conflict(f"Warehouse code {code} is already in use.")

    @staticmethod
    async def create_warehouse(db: AsyncSession, payload: WarehouseCreate) -> Warehouse:
        await WarehouseService._ensure_code_free(db, payload.code)
        warehouse = Warehouse(code=payload.code, name=payload.name, location=payload.location or None)
        db.add(warehouse)
        await db.commit()
        await db.refresh(warehouse)
        return warehouse

    @staticmethod
    async def update_warehouse(db: AsyncSession, warehouse_id: int, payload: WarehouseUpdate) -> Warehouse:
        warehouse = await WarehouseService.get_warehouse(db, warehouse_id)
        if payload.code is not None and payload.code != warehouse.code:
            await WarehouseService._ensure_code_free(db, payload.code, exclude_id=warehouse.id)
            warehouse.code = payload.code
        if payload.name is not None:
            warehouse.name = payload.name
        if payload.location is not None:
            warehouse.location = payload.location or None
        await db.commit()
        await db.refresh(warehouse)
        return warehouse

    @staticmethod
    async def deactivate_warehouse(db: AsyncSession, warehouse_id: int) -> None:
        warehouse = await WarehouseService.get_warehouse(db, warehouse_id)
        warehouse.is_active = False
        await db.commit()

    @staticmethod
    async def list_warehouses(db: AsyncSession, include_inactive: bool = False) -> List[Warehouse]:
        stmt = select(Warehouse)
        if not include_inactive:
            stmt = stmt.where(Warehouse.is_active.is_(True))
        res = await db.execute(stmt.order_by(Warehouse.name))
        return list(res.scalars().all())
