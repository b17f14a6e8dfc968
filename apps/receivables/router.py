from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from apps.receivables.aging import coerce_date, report_to_csv
from apps.receivables.schemas import AgingReportResponse, aging_report_response
from apps.receivables.service import ReceivablesService
from models.base import get_db


router = APIRouter(prefix="/api/receivables", tags=["Receivables"])


@router.get("/aging", response_model=AgingReportResponse)
async def get_aging_report(
    cutoff_date: Optional[str] = Query(default=None, alias="cutoffDate", description="YYYY-MM-DD, defaults to today"),
    search: Optional[str] = Query(default=None, description="Filter by client name or identifier"),
    db: AsyncSession = Depends(get_db),
):
    """
    Accounts receivable aging per client as of the cutoff date.
    An unparseable cutoff falls back to today.
    """
    report = await ReceivablesService.aging_report(db, coerce_date(cutoff_date), search)
    return aging_report_response(report)


@router.get("/aging/export")
async def export_aging_report(
    cutoff_date: Optional[str] = Query(default=None, alias="cutoffDate"),
    search: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    report = await ReceivablesService.aging_report(db, coerce_date(cutoff_date), search)
    filename = f"accounts_receivable_aging_{report.cutoff_date.isoformat()}.csv"
    return StreamingResponse(
        iter([report_to_csv(report)]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
