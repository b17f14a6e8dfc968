import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload, selectinload

from apps.articles.service import ArticleService
from apps.invoices.schemas import InvoiceCreate
from apps.orders.ledger import OrderLineSnapshot, compute_order_totals, validate_lines
from apps.payments.processor import (
    PaymentSnapshot,
    PaymentSummary,
    apply_payment,
    summarize_payments,
)
from apps.payments.schemas import PaymentCreate
from apps.third_parties.service import ThirdPartyService
from common.errors import Conflict, InvalidAmount, InvalidRelation, NotFound
from common.numbers import round_currency, round_quantity, to_decimal
from common.pagination import paginate_select
from constants.catalog import CLIENT_RELATIONS, PRODUCT
from constants.statuses import INVOICE_PAID, INVOICE_PARTIALLY_PAID, INVOICE_PENDING, PAID, PARTIALLY_PAID
from models.invoice import Invoice, InvoiceLine, InvoicePayment
from models.third_party import ThirdParty
from security.actor import Actor
from settings.config import get_settings

logger = logging.getLogger(__name__)

INVOICE_STATUS_BY_PAYMENT_STATUS = {
    PAID: INVOICE_PAID,
    PARTIALLY_PAID: INVOICE_PARTIALLY_PAID,
}


@dataclass
class InvoiceDetail:
    invoice: Invoice
    payments: PaymentSummary


class InvoiceService:
    @staticmethod
    async def create_invoice(db: AsyncSession, payload: InvoiceCreate, actor: Optional[Actor] = None) -> Invoice:
        """
        Issue an invoice. Subtotal, taxes and total are derived from the lines
        with the same rules as purchase orders; the whole total starts pending.
        """
        client = await ThirdPartyService.get_third_party(db, payload.client_id)
        if client.relation not in CLIENT_RELATIONS:
            raise InvalidRelation(f"Third party {client.id} is not registered as a client.")

        res = await db.execute(select(Invoice.id).where(func.lower(Invoice.folio) == payload.folio.lower()))
        if res.first():
            raise Conflict(f"Invoice folio {payload.folio} is already in use.")

        snapshots = [
            OrderLineSnapshot(
                line_id=None,
                quantity=to_decimal(line.quantity, default=None),
                unit_cost=to_decimal(line.unit_price, default=None),
                taxes=to_decimal(line.taxes),
                line_type=line.line_type,
                article_id=line.article_id if line.line_type == PRODUCT else None,
                description=line.description,
            )
            for line in payload.lines
        ]
        validate_lines(snapshots)
        await ArticleService.ensure_active(db, (s.article_id for s in snapshots if s.article_id is not None))

        totals = compute_order_totals(snapshots)
        if totals.total <= 0:
            raise InvalidAmount("Invoice total must be greater than zero.")

        invoice = Invoice(
            folio=payload.folio,
            client_id=client.id,
            issue_date=payload.issue_date or date.today(),
            due_date=payload.due_date,
            payment_terms=payload.payment_terms,
            subtotal=totals.subtotal,
            taxes=totals.taxes,
            total=totals.total,
            amount_pending=totals.total,
            status=INVOICE_PENDING,
            notes=payload.notes,
            created_by=actor.actor_id if actor else None,
            created_by_name=actor.actor_name if actor else None,
        )
        for position, (snapshot, line_totals) in enumerate(zip(snapshots, totals.lines)):
            invoice.lines.append(
                InvoiceLine(
                    position=position,
                    line_type=snapshot.line_type,
                    article_id=snapshot.article_id,
                    description=snapshot.description,
                    quantity=round_quantity(snapshot.quantity),
                    unit_price=round_currency(snapshot.unit_cost),
                    taxes=line_totals.taxes,
                    line_total=line_totals.total,
                )
            )
        db.add(invoice)
        try:
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Invoice %s issued to client %s for %s (by %s)", invoice.folio, client.id, totals.total, actor or "anonymous")
        return await InvoiceService.get_invoice(db, invoice.id)

    @staticmethod
    async def get_invoice(db: AsyncSession, invoice_id: int) -> Invoice:
        stmt = (
            select(Invoice)
            .options(
                joinedload(Invoice.client),
                selectinload(Invoice.lines).joinedload(InvoiceLine.article),
            )
            .where(Invoice.id == invoice_id)
            .execution_options(populate_existing=True)
        )
        res = await db.execute(stmt)
        invoice = res.unique().scalar_one_or_none()
        if not invoice:
            raise NotFound(f"Invoice {invoice_id} not found.")
        return invoice

    @staticmethod
    async def load_payments(db: AsyncSession, invoice_id: int) -> List[PaymentSnapshot]:
        stmt = (
            select(InvoicePayment)
            .where(InvoicePayment.invoice_id == invoice_id)
            .order_by(InvoicePayment.id)
            .execution_options(populate_existing=True)
        )
        res = await db.execute(stmt)
        return [PaymentSnapshot.from_model(row) for row in res.scalars().all()]

    @staticmethod
    async def get_invoice_detail(db: AsyncSession, invoice_id: int) -> InvoiceDetail:
        invoice = await InvoiceService.get_invoice(db, invoice_id)
        payments = await InvoiceService.load_payments(db, invoice.id)
        summary = summarize_payments(invoice.total, payments, tolerance=get_settings().PAYMENT_TOLERANCE)
        return InvoiceDetail(invoice=invoice, payments=summary)

    @staticmethod
    async def record_payment(
        db: AsyncSession,
        invoice_id: int,
        payload: PaymentCreate,
        actor: Optional[Actor] = None,
    ) -> InvoiceDetail:
        """
        Collect against an invoice. Same balance rules as purchase-order payments,
        without the receiving requirement.
        """
        settings = get_settings()
        actor = actor or Actor()
        try:
            res = await db.execute(select(Invoice.id).where(Invoice.id == invoice_id).with_for_update())
            if res.scalar_one_or_none() is None:
                raise NotFound(f"Invoice {invoice_id} not found.")
            invoice = await InvoiceService.get_invoice(db, invoice_id)
            payments = await InvoiceService.load_payments(db, invoice.id)

            amount = apply_payment(invoice.total, payments, payload.amount, tolerance=settings.PAYMENT_TOLERANCE)
            payment = InvoicePayment(
                invoice_id=invoice.id,
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
                invoice.total,
                payments + [PaymentSnapshot.from_model(payment)],
                tolerance=settings.PAYMENT_TOLERANCE,
            )
            invoice.amount_pending = summary.remaining
            invoice.status = INVOICE_STATUS_BY_PAYMENT_STATUS.get(summary.status, INVOICE_PENDING)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Payment %s of %s collected on invoice %s by %s; pending %s",
            payment.id,
            amount,
            invoice.folio,
            payment.actor_name or payment.actor_id or "anonymous",
            summary.remaining,
        )
        return InvoiceDetail(invoice=await InvoiceService.get_invoice(db, invoice_id), payments=summary)

    @staticmethod
    async def list_invoices(
        db: AsyncSession,
        page: int,
        size: int,
        search: Optional[str] = None,
        status_filter: Optional[str] = None,
        client_id: Optional[int] = None,
    ) -> Tuple[List[Invoice], dict]:
        where_clause = []
        if status_filter:
            where_clause.append(Invoice.status == status_filter)
        if client_id is not None:
            where_clause.append(Invoice.client_id == client_id)
        if search:
            s = f"%{search.lower()}%"
            where_clause.append(
                or_(
                    func.lower(Invoice.folio).like(s),
                    func.lower(ThirdParty.name).like(s),
                    func.lower(ThirdParty.tax_id).like(s),
                )
            )

        stmt = select(Invoice).join(ThirdParty, Invoice.client_id == ThirdParty.id)
        if where_clause:
            stmt = stmt.where(and_(*where_clause))
        stmt = stmt.order_by(Invoice.issue_date.desc(), Invoice.id.desc())

        count_stmt = select(func.count()).select_from(stmt.with_only_columns(Invoice.id).order_by(None).subquery())
        return await paginate_select(db, stmt, count_stmt, page, size)
