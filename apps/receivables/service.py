import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from apps.receivables.aging import AgingReport, ReceivableSnapshot, build_aging_report, filter_report
from models.invoice import Invoice
from settings.config import get_settings

logger = logging.getLogger(__name__)


class ReceivablesService:
    @staticmethod
    async def load_receivables(db: AsyncSession) -> List[ReceivableSnapshot]:
        """
        Every invoice with a balance still to collect, with its client.
        """
        stmt = (
            select(Invoice)
            .options(joinedload(Invoice.client))
            .where(Invoice.amount_pending > 0)
            .order_by(Invoice.issue_date, Invoice.id)
        )
        res = await db.execute(stmt)
        return [ReceivableSnapshot.from_invoice(inv) for inv in res.unique().scalars().all()]

    @staticmethod
    async def aging_report(
        db: AsyncSession,
        cutoff_date: Optional[date] = None,
        search: Optional[str] = None,
    ) -> AgingReport:
        receivables = await ReceivablesService.load_receivables(db)
        report = build_aging_report(receivables, cutoff_date=cutoff_date, currency=get_settings().DEFAULT_CURRENCY)
        report = filter_report(report, search)
        logger.debug(
            "Aging report at %s: %s clients, %s pending",
            report.cutoff_date,
            report.total_clients,
            report.total_pending,
        )
        return report
