from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from apps.orders.schemas import (
    OrderCreate,
    OrderLineResponse,
    OrderListItem,
    OrderListResponse,
    OrderResponse,
    ReceivingResponse,
)
from apps.orders.service import OrderDetail, OrderService
from apps.payments.processor import outstanding_balance
from apps.payments.schemas import payment_summary_response
from models.base import get_db
from security.actor import Actor, get_actor


router = APIRouter(prefix="/api/orders", tags=["Purchase Orders"])


def _serialize_order(detail: OrderDetail) -> OrderResponse:
    order = detail.order
    receiving_by_line = {state.line_id: state for state in detail.receiving.lines}
    lines = []
    for line in order.lines:
        state = receiving_by_line.get(line.id)
        article = line.article
        lines.append(
            OrderLineResponse(
                id=line.id,
                line_type=line.line_type,
                article_id=line.article_id,
                article_code=article.code if article else None,
                article_name=article.name if article else None,
                description=line.description,
                quantity=line.quantity,
                unit_cost=line.unit_cost,
                taxes=line.taxes,
                line_total=line.line_total,
                quantity_received=state.quantity_received if state else 0,
                quantity_pending=state.quantity_pending if state else line.quantity,
            )
        )
    supplier = order.supplier
    return OrderResponse(
        id=order.id,
        supplier_id=order.supplier_id,
        supplier_name=supplier.name if supplier else None,
        supplier_tax_id=supplier.tax_id if supplier else None,
        order_date=order.order_date,
        delivery_date=order.delivery_date,
        payment_terms=order.payment_terms,
        shipping_method=order.shipping_method,
        delivery_location=order.delivery_location,
        notes=order.notes,
        status=order.status,
        payment_status=order.payment_status,
        subtotal=order.subtotal,
        taxes=order.taxes,
        total=order.total,
        created_by_name=order.created_by_name,
        created_at=order.created_at,
        lines=lines,
        receiving=ReceivingResponse(
            total_ordered=detail.receiving.total_ordered,
            total_received=detail.receiving.total_received,
            total_pending=detail.receiving.total_pending,
            reception_complete=detail.receiving.reception_complete,
        ),
        payments=payment_summary_response(detail.payments),
    )


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(payload: OrderCreate, db: AsyncSession = Depends(get_db), actor: Actor = Depends(get_actor)):
    order = await OrderService.create_order(db, payload, actor)
    return _serialize_order(await OrderService.get_order_detail(db, order.id))


@router.get("", response_model=OrderListResponse)
async def list_orders(
    search: Optional[str] = Query(default=None, description="Search by supplier name or tax identifier"),
    status_filter: Optional[str] = Query(default=None, alias="status"),
    supplier_id: Optional[int] = Query(default=None, alias="supplierId"),
    page: int = Query(1, ge=1),
    size: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    rows, pagination = await OrderService.list_orders(db, page, size, search, status_filter, supplier_id)
    items = [
        OrderListItem(
            id=order.id,
            supplier_id=order.supplier_id,
            supplier_name=order.supplier.name if order.supplier else None,
            order_date=order.order_date,
            status=order.status,
            payment_status=order.payment_status,
            total=order.total,
            total_paid=paid,
            remaining=outstanding_balance(order.total, paid),
            created_at=order.created_at,
        )
        for order, paid in rows
    ]
    return OrderListResponse(items=items, pagination=pagination)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, db: AsyncSession = Depends(get_db)):
    """
    Order with its lines, receiving state and payment summary.
    """
    return _serialize_order(await OrderService.get_order_detail(db, order_id))
