from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Tuple

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from apps.articles.service import ArticleService
from apps.dashboard.schemas import ArticleCounts, DashboardSummaryResponse, PeriodComparison
from common.numbers import round_currency
from models.invoice import Invoice
from models.payment import PurchaseOrderPayment
from settings.config import get_settings


def month_bounds(today: date) -> Tuple[date, date, date]:
    """
    (start of previous month, start of current month, start of next month)
    """
    current_start = today.replace(day=1)
    previous_start = (current_start - timedelta(days=1)).replace(day=1)
    next_start = (current_start + timedelta(days=32)).replace(day=1)
    return previous_start, current_start, next_start


def variation_percentage(current: Decimal, previous: Decimal) -> Optional[float]:
    if not previous:
        return None
    return float(round((current - previous) / previous * 100, 2))


class DashboardService:
    @staticmethod
    async def _sum_between(db: AsyncSession, amount_col, date_col, start: date, end: date) -> Decimal:
        stmt = select(func.coalesce(func.sum(amount_col), 0)).where(and_(date_col >= start, date_col < end))
        res = await db.execute(stmt)
        return round_currency(res.scalar_one())

    @staticmethod
    async def _compare(db: AsyncSession, amount_col, date_col, today: date) -> PeriodComparison:
        previous_start, current_start, next_start = month_bounds(today)
        current = await DashboardService._sum_between(db, amount_col, date_col, current_start, next_start)
        previous = await DashboardService._sum_between(db, amount_col, date_col, previous_start, current_start)
        return PeriodComparison(
            total=current,
            previous_total=previous,
            variation_percentage=variation_percentage(current, previous),
        )

    @staticmethod
    async def summary(db: AsyncSession, today: Optional[date] = None) -> DashboardSummaryResponse:
        """
        Income is invoiced totals, expenses are purchase-order payments, both
        for the current calendar month against the previous one.
        """
        today = today or date.today()
        income = await DashboardService._compare(db, Invoice.total, Invoice.issue_date, today)
        expenses = await DashboardService._compare(db, PurchaseOrderPayment.amount, PurchaseOrderPayment.paid_on, today)
        active, inactive = await ArticleService.count_by_state(db)
        return DashboardSummaryResponse(
            currency=get_settings().DEFAULT_CURRENCY,
            income=income,
            expenses=expenses,
            articles=ArticleCounts(total=active + inactive, active=active, inactive=inactive),
        )
