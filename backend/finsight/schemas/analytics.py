from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from finsight.models.enums import ConfidenceBand, InsightKind, RecurringFrequency, TrendDirection


class MonthlyBucketOut(BaseModel):
    month: str = Field(description="Month label, e.g. 'Oct 2026'.")
    month_key: str = Field(description="Sortable YYYY-MM key.")
    income: Decimal
    expense: Decimal
    net: Decimal
    predicted: bool
    confidence: float = Field(ge=0, le=1)


class TrendOut(BaseModel):
    direction: TrendDirection
    percentage: Decimal
    description: str


class TrendSummaryOut(BaseModel):
    income: TrendOut
    expense: TrendOut
    savings: TrendOut


class InsightOut(BaseModel):
    kind: InsightKind
    title: str
    description: str
    financial_impact: Decimal
    category: str | None = None


class ForecastReportOut(BaseModel):
    as_of: datetime
    horizon: int
    predictions: list[MonthlyBucketOut] = Field(description="Historical months followed by forecast months.")
    trends: TrendSummaryOut
    insights: list[InsightOut]
    confidence: float = Field(ge=0, le=1)
    snapshot_truncated: bool = False


class InsightListOut(BaseModel):
    items: list[InsightOut]


class RecurringPatternOut(BaseModel):
    description_key: str
    description: str
    category_id: int | str | None = None
    category_name: str
    amount: Decimal
    frequency: RecurringFrequency
    occurrence_count: int
    last_date: datetime
    next_expected_date: datetime
    confidence: int = Field(ge=0, le=100)


class RecurringPatternListOut(BaseModel):
    items: list[RecurringPatternOut]


class BudgetSuggestionOut(BaseModel):
    category_id: int | str
    category_name: str
    suggested_amount: int
    current_average_spending: Decimal
    confidence_band: ConfidenceBand
    reasoning: str


class BudgetSuggestionListOut(BaseModel):
    items: list[BudgetSuggestionOut]
