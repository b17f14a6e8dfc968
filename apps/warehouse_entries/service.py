import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from apps.orders.ledger import ReceiptSnapshot, ReceivingSummary, allocate_receipt, compute_receiving, derive_order_status
from apps.orders.service import OrderService, line_snapshots
from apps.warehouse_entries.schemas import WarehouseEntryCreate
from apps.warehouses.service import WarehouseService
from common.errors import InvalidLine, NotFound
from common.numbers import round_quantity
from common.pagination import paginate_select
from models.article import Article
from models.warehouse_entry import WarehouseEntry, WarehouseEntryLine
from security.actor import Actor
from settings.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class EntryResult:
    entry: WarehouseEntry
    receiving: ReceivingSummary
    order_status: str


class WarehouseEntryService:
    @staticmethod
    async def create_entry(db: AsyncSession, payload: WarehouseEntryCreate, actor: Optional[Actor] = None) -> EntryResult:
        """
        Record goods received against a purchase order.

        Each requested line is bound to the order lines it fulfils, stock is
        increased for the article, and the order status is re-derived. The
        order row stays locked until commit so receipts and payments on the
        same order are serialized.
        """
        epsilon = get_settings().QUANTITY_EPSILON
        try:
            await OrderService.lock_order(db, payload.order_id)
            order = await OrderService.get_order(db, payload.order_id)
            warehouse = await WarehouseService.get_warehouse(db, payload.warehouse_id)
            if not payload.lines:
                raise InvalidLine("A warehouse entry needs at least one line.")

            snapshots = line_snapshots(order)
            unit_costs = {line.id: line.unit_cost for line in order.lines}
            receipts = await OrderService.load_receipts(db, order.id)
            receiving = compute_receiving(snapshots, receipts, epsilon=epsilon)

            entry = WarehouseEntry(
                order_id=order.id,
                warehouse_id=warehouse.id,
                entry_date=payload.entry_date or date.today(),
                notes=payload.notes,
            )
            stock = {}
            for position, requested in enumerate(payload.lines, start=1):
                if requested.article_id is None and requested.order_line_id is None:
                    raise InvalidLine(f"Line {position}: an article or an order line is required.")
                try:
                    allocations = allocate_receipt(
                        receiving,
                        requested.article_id,
                        requested.quantity,
                        order_line_id=requested.order_line_id,
                        epsilon=epsilon,
                    )
                except InvalidLine as exc:
                    raise InvalidLine(f"Line {position}: {exc.message}", details=exc.details) from exc

                for allocation in allocations:
                    state = next(s for s in receiving.lines if s.line_id == allocation.order_line_id)
                    quantity = round_quantity(allocation.quantity)
                    entry.lines.append(
                        WarehouseEntryLine(
                            order_line_id=allocation.order_line_id,
                            article_id=state.article_id,
                            quantity=quantity,
                            unit_cost=unit_costs.get(allocation.order_line_id, 0),
                        )
                    )
                    stock[state.article_id] = stock.get(state.article_id, 0) + quantity
                    receipts.append(ReceiptSnapshot(order_line_id=allocation.order_line_id, quantity=quantity))
                receiving = compute_receiving(snapshots, receipts, epsilon=epsilon)

            db.add(entry)
            for article_id, quantity in stock.items():
                await db.execute(
                    update(Article)
                    .where(Article.id == article_id)
                    .values(quantity_on_hand=Article.quantity_on_hand + quantity)
                )
            order.status = derive_order_status(receiving, order.payment_status)
            order_status = order.status
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Warehouse entry %s recorded for purchase order %s into warehouse %s by %s; pending %s",
            entry.id,
            payload.order_id,
            payload.warehouse_id,
            actor or "anonymous",
            receiving.total_pending,
        )
        entry = await WarehouseEntryService.get_entry(db, entry.id)
        return EntryResult(entry=entry, receiving=receiving, order_status=order_status)

    @staticmethod
    async def get_entry(db: AsyncSession, entry_id: int) -> WarehouseEntry:
        stmt = select(WarehouseEntry).where(WarehouseEntry.id == entry_id).execution_options(populate_existing=True)
        res = await db.execute(stmt)
        entry = res.unique().scalar_one_or_none()
        if not entry:
            raise NotFound(f"Warehouse entry {entry_id} not found.")
        return entry

    @staticmethod
    async def list_entries(
        db: AsyncSession,
        page: int,
        size: int,
        order_id: Optional[int] = None,
        warehouse_id: Optional[int] = None,
    ) -> Tuple[List[WarehouseEntry], dict]:
        stmt = select(WarehouseEntry)
        if order_id is not None:
            stmt = stmt.where(WarehouseEntry.order_id == order_id)
        if warehouse_id is not None:
            stmt = stmt.where(WarehouseEntry.warehouse_id == warehouse_id)
        stmt = stmt.order_by(WarehouseEntry.entry_date.desc(), WarehouseEntry.id.desc())

        count_stmt = select(func.count()).select_from(stmt.with_only_columns(WarehouseEntry.id).order_by(None).subquery())
        return await paginate_select(db, stmt, count_stmt, page, size)
