import logging
from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from apps.orders.ledger import compute_receiving, derive_order_status
from apps.orders.service import OrderService, line_snapshots
from apps.payments.processor import PaymentSnapshot, PaymentSummary, apply_payment, summarize_payments
from apps.payments.schemas import PaymentCreate
from models.payment import PurchaseOrderPayment
from security.actor import Actor
from settings.config import get_settings

logger = logging.getLogger(__name__)


class PaymentService:
    @staticmethod
    async def record_payment(
        db: AsyncSession,
        order_id: int,
        payload: PaymentCreate,
        actor: Optional[Actor] = None,
    ) -> PaymentSummary:
        """
        Apply a payment to a purchase order.

        The order row is locked and the payment ledger re-read inside the same
        transaction before validating, so two concurrent payments cannot both
        pass the balance check. Nothing is written unless every check passes.
        """
        settings = get_settings()
        actor = actor or Actor()
        try:
            await OrderService.lock_order(db, order_id)
            order = await OrderService.get_order(db, order_id)
            receipts = await OrderService.load_receipts(db, order.id)
            receiving = compute_receiving(line_snapshots(order), receipts, epsilon=settings.QUANTITY_EPSILON)
            payments = await OrderService.load_payments(db, order.id)

            amount = apply_payment(
                order.total,
                payments,
                payload.amount,
                reception_complete=receiving.reception_complete,
                tolerance=settings.PAYMENT_TOLERANCE,
            )

            payment = PurchaseOrderPayment(
                order_id=order.id,
                amount=amount,
                paid_on=payload.paid_on or date.today(),
                method=payload.method or None,
                reference=payload.reference or None,
                notes=payload.notes or None,
                actor_id=payload.actor_id or actor.actor_id,
                actor_name=payload.actor_name or actor.actor_name,
            )
            db.add(payment)
            await db.flush()

            summary = summarize_payments(
                order.total,
                payments + [PaymentSnapshot.from_model(payment)],
                tolerance=settings.PAYMENT_TOLERANCE,
            )
            order.payment_status = summary.status
            order.status = derive_order_status(receiving, summary.status)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Payment %s of %s recorded on purchase order %s by %s; remaining %s (%s)",
            payment.id,
            amount,
            order_id,
            payment.actor_name or payment.actor_id or "anonymous",
            summary.remaining,
            summary.status,
        )
        return summary

    @staticmethod
    async def get_order_payment_summary(db: AsyncSession, order_id: int) -> PaymentSummary:
        order = await OrderService.get_order(db, order_id)
        payments = await OrderService.load_payments(db, order.id)
        return summarize_payments(order.total, payments, tolerance=get_settings().PAYMENT_TOLERANCE)
