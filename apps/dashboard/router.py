from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from apps.dashboard.schemas import DashboardSummaryResponse
from apps.dashboard.service import DashboardService
from models.base import get_db

router = APIRouter(prefix="/api/dashboard", tags=["Dashboard"])


@router.get("/summary", response_model=DashboardSummaryResponse)
async def dashboard_summary(
    reference_date: Optional[date] = Query(default=None, alias="date", description="Month to report, defaults to today"),
    db: AsyncSession = Depends(get_db),
):
    return await DashboardService.summary(db, reference_date)
