from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from apps.payments.schemas import PaymentCreate, PaymentSummaryResponse, payment_summary_response
from apps.payments.service import PaymentService
from models.base import get_db
from security.actor import Actor, get_actor


router = APIRouter(prefix="/api/orders", tags=["Purchase Order Payments"])


@router.get("/{order_id}/payments", response_model=PaymentSummaryResponse)
async def get_order_payments(order_id: int, db: AsyncSession = Depends(get_db)):
    summary = await PaymentService.get_order_payment_summary(db, order_id)
    return payment_summary_response(summary)


@router.post("/{order_id}/payments", response_model=PaymentSummaryResponse, status_code=status.HTTP_201_CREATED)
async def record_payment(
    order_id: int,
    payload: PaymentCreate,
    db: AsyncSession = Depends(get_db),
    actor: Actor = Depends(get_actor),
):
    """
    Apply a payment once the order is fully received.
    Fails with ReceivingIncomplete, InvalidAmount or AmountExceedsBalance without writing anything.
    """
    summary = await PaymentService.record_payment(db, order_id, payload, actor)
    return payment_summary_response(summary)
