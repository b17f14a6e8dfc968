import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Tuple

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from apps.articles.service import ArticleService
from apps.orders.ledger import (
    OrderLineSnapshot,
    ReceiptSnapshot,
    ReceivingSummary,
    compute_order_totals,
    compute_receiving,
    validate_lines,
)
from apps.orders.schemas import OrderCreate
from apps.payments.processor import PaymentSnapshot, PaymentSummary, summarize_payments
from apps.third_parties.service import ThirdPartyService
from common.errors import InvalidRelation, NotFound
from common.numbers import ZERO, round_currency, to_decimal
from common.pagination import paginate_select
from constants.catalog import PRODUCT, SUPPLIER_RELATIONS
from models.payment import PurchaseOrderPayment
from models.purchase_order import PurchaseOrder, PurchaseOrderLine
from models.third_party import ThirdParty
from models.warehouse_entry import WarehouseEntry, WarehouseEntryLine
from security.actor import Actor
from settings.config import get_settings

logger = logging.getLogger(__name__)


@dataclass
class OrderDetail:
    order: PurchaseOrder
    receiving: ReceivingSummary
    payments: PaymentSummary


def line_snapshots(order: PurchaseOrder) -> List[OrderLineSnapshot]:
    return [OrderLineSnapshot.from_model(line) for line in order.lines]


class OrderService:
    @staticmethod
    async def create_order(db: AsyncSession, payload: OrderCreate, actor: Optional[Actor] = None) -> PurchaseOrder:
        supplier = await ThirdPartyService.get_third_party(db, payload.supplier_id)
        if supplier.relation not in SUPPLIER_RELATIONS:
            raise InvalidRelation(f"Third party {supplier.id} is not registered as a supplier.")

        snapshots = [
            OrderLineSnapshot(
                line_id=None,
                quantity=to_decimal(line.quantity, default=None),
                unit_cost=to_decimal(line.unit_cost, default=None),
                taxes=to_decimal(line.taxes),
                line_type=line.line_type,
                # Service lines never carry an article
                article_id=line.article_id if line.line_type == PRODUCT else None,
                description=line.description,
            )
            for line in payload.lines
        ]
        validate_lines(snapshots)

        await ArticleService.ensure_active(db, (s.article_id for s in snapshots if s.article_id is not None))

        totals = compute_order_totals(snapshots)
        order = PurchaseOrder(
            supplier_id=supplier.id,
            order_date=payload.order_date or date.today(),
            delivery_date=payload.delivery_date,
            payment_terms=payload.payment_terms,
            shipping_method=payload.shipping_method,
            delivery_location=payload.delivery_location,
            notes=payload.notes,
            subtotal=totals.subtotal,
            taxes=totals.taxes,
            total=totals.total,
            created_by=actor.actor_id if actor else None,
            created_by_name=actor.actor_name if actor else None,
        )
        for position, (snapshot, line_totals) in enumerate(zip(snapshots, totals.lines)):
            order.lines.append(
                PurchaseOrderLine(
                    position=position,
                    line_type=snapshot.line_type,
                    article_id=snapshot.article_id,
                    description=snapshot.description,
                    quantity=snapshot.quantity,
                    unit_cost=round_currency(snapshot.unit_cost),
                    taxes=line_totals.taxes,
                    line_total=line_totals.total,
                )
            )
        db.add(order)
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Purchase order %s created for supplier %s, total %s (by %s)", order.id, supplier.id, order.total, actor or "anonymous")
        return await OrderService.get_order(db, order.id)

    @staticmethod
    async def lock_order(db: AsyncSession, order_id: int) -> None:
        """
        Take a row lock on the order for the rest of the transaction.
        Raises NotFound when the order does not exist.
        """
        res = await db.execute(select(PurchaseOrder.id).where(PurchaseOrder.id == order_id).with_for_update())
        if res.scalar_one_or_none() is None:
            raise NotFound(f"Purchase order {order_id} not found.")

    @staticmethod
    async def get_order(db: AsyncSession, order_id: int) -> PurchaseOrder:
        stmt = (
            select(PurchaseOrder)
            .options(
                joinedload(PurchaseOrder.supplier),
                selectinload(PurchaseOrder.lines).joinedload(PurchaseOrderLine.article),
            )
            .where(PurchaseOrder.id == order_id)
            .execution_options(populate_existing=True)
        )
        res = await db.execute(stmt)
        order = res.unique().scalar_one_or_none()
        if not order:
            raise NotFound(f"Purchase order {order_id} not found.")
        return order

    @staticmethod
    async def load_receipts(db: AsyncSession, order_id: int) -> List[ReceiptSnapshot]:
        stmt = (
            select(WarehouseEntryLine)
            .join(WarehouseEntry, WarehouseEntryLine.entry_id == WarehouseEntry.id)
            .where(WarehouseEntry.order_id == order_id)
            .order_by(WarehouseEntryLine.id)
        )
        res = await db.execute(stmt)
        return [ReceiptSnapshot.from_model(row) for row in res.scalars().all()]

    @staticmethod
    async def load_payments(db: AsyncSession, order_id: int) -> List[PaymentSnapshot]:
        """
        Payment ledger in insertion order, always read from the store.
        """
        stmt = (
            select(PurchaseOrderPayment)
            .where(PurchaseOrderPayment.order_id == order_id)
            .order_by(PurchaseOrderPayment.id)
            .execution_options(populate_existing=True)
        )
        res = await db.execute(stmt)
        return [PaymentSnapshot.from_model(row) for row in res.scalars().all()]

    @staticmethod
    async def compute_receiving(db: AsyncSession, order: PurchaseOrder) -> ReceivingSummary:
        receipts = await OrderService.load_receipts(db, order.id)
        return compute_receiving(line_snapshots(order), receipts, epsilon=get_settings().QUANTITY_EPSILON)

    @staticmethod
    async def get_order_detail(db: AsyncSession, order_id: int) -> OrderDetail:
        order = await OrderService.get_order(db, order_id)
        receiving = await OrderService.compute_receiving(db, order)
        payments = await OrderService.load_payments(db, order.id)
        summary = summarize_payments(order.total, payments, tolerance=get_settings().PAYMENT_TOLERANCE)
        return OrderDetail(order=order, receiving=receiving, payments=summary)

    @staticmethod
    async def paid_totals(db: AsyncSession, order_ids: List[int]) -> Dict[int, object]:
        if not order_ids:
            return {}
        stmt = (
            select(PurchaseOrderPayment.order_id, func.coalesce(func.sum(PurchaseOrderPayment.amount), 0))
            .where(PurchaseOrderPayment.order_id.in_(order_ids))
            .group_by(PurchaseOrderPayment.order_id)
        )
        res = await db.execute(stmt)
        return {order_id: round_currency(paid) for order_id, paid in res.all()}

    @staticmethod
    async def list_orders(
        db: AsyncSession,
        page: int,
        size: int,
        search: Optional[str] = None,
        status_filter: Optional[str] = None,
        supplier_id: Optional[int] = None,
    ) -> Tuple[List[Tuple[PurchaseOrder, object]], dict]:
        where_clause = []
        if status_filter:
            where_clause.append(PurchaseOrder.status == status_filter)
        if supplier_id is not None:
            where_clause.append(PurchaseOrder.supplier_id == supplier_id)
        if search:
            s = f"%{search.lower()}%"
            where_clause.append(or_(func.lower(ThirdParty.name).like(s), func.lower(ThirdParty.tax_id).like(s)))

        stmt = select(PurchaseOrder).join(ThirdParty, PurchaseOrder.supplier_id == ThirdParty.id)
        if where_clause:
            stmt = stmt.where(and_(*where_clause))
        stmt = stmt.order_by(PurchaseOrder.order_date.desc(), PurchaseOrder.id.desc())

        count_stmt = select(func.count()).select_from(stmt.with_only_columns(PurchaseOrder.id).order_by(None).subquery())
        items, pagination = await paginate_select(db, stmt, count_stmt, page, size)
        paid = await OrderService.paid_totals(db, [o.id for o in items])
        return [(o, paid.get(o.id, ZERO)) for o in items], pagination
