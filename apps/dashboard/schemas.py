from typing import Optional
from pydantic import BaseModel, Field as PydanticField

from common.types import Money


class PeriodComparison(BaseModel):
    total: Money
    previous_total: Money = PydanticField(alias="previousTotal")
    # None when the previous month has nothing to compare against
    variation_percentage: Optional[float] = PydanticField(default=None, alias="variationPercentage")

    class Config:
        populate_by_name = True


class ArticleCounts(BaseModel):
    total: int
    active: int
    inactive: int


class DashboardSummaryResponse(BaseModel):
    currency: str
    income: PeriodComparison
    expenses: PeriodComparison
    articles: ArticleCounts
